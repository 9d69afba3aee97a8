from __future__ import annotations

import fitz
import httpx
import pytest

from sme_assistant.app.dependencies import reset_caches
from sme_assistant.app.main import app
from sme_assistant.app.settings import settings

pytestmark = pytest.mark.anyio


def get_client() -> httpx.AsyncClient:
    reset_caches()
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


def _pdf_bytes(text: str) -> bytes:
    document = fitz.open()
    document.new_page().insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


async def test_health_endpoint() -> None:
    async with get_client() as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


async def test_metrics_endpoint_exposes_chat_counter() -> None:
    async with get_client() as client:
        await client.post("/api/chat", json={"message": "What is a CUJ?"})
        response = await client.get("/metrics")
    assert response.status_code == 200
    assert "sme_chat_responses_total" in response.text


async def test_metrics_label_requests_by_route_template() -> None:
    async with get_client() as client:
        await client.get("/api/docs/context/docs/pipeline.json")
        await client.get("/no-such-route")
        response = await client.get("/metrics")
    assert 'path="/api/docs/{doc_id:path}"' in response.text
    assert 'path="unmatched"' in response.text
    assert "pipeline.json" not in response.text


async def test_knowledge_base_listing() -> None:
    async with get_client() as client:
        response = await client.get("/api/knowledge-base/best-practices")
        missing = await client.get("/api/knowledge-base/unknown")
    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == len(payload["bestPractices"])
    assert "Best practice: alert on error budget burn rate instead of raw CPU usage" in payload["bestPractices"]
    assert missing.status_code == 404


async def test_search_endpoint() -> None:
    async with get_client() as client:
        response = await client.post("/api/search", json={"query": "checkout", "category": "all"})
        empty = await client.post("/api/search", json={"query": ""})
    assert response.status_code == 200
    payload = response.json()
    assert payload["category"] == "all"
    assert payload["totalMatches"] >= 1
    filenames = [match["filename"] for match in payload["results"]["contextMatches"]]
    assert "context/frameworks/observability-framework.md" in filenames
    assert empty.status_code == 400


async def test_search_docs_endpoint() -> None:
    async with get_client() as client:
        response = await client.post(
            "/api/search/docs",
            json={"query": "slo", "category": "knowledge", "max_results": 2},
        )
    assert response.status_code == 200
    results = response.json()["results"]
    assert [result["document_id"] for result in results] == ["context/knowledge-base/slo-notes.txt"]
    assert results[0]["relevance_score"] > 0


async def test_recommendations_endpoint() -> None:
    async with get_client() as client:
        response = await client.post("/api/recommendations", json={"context": "monitoring"})
        empty = await client.post("/api/recommendations", json={"context": " "})
    assert response.status_code == 200
    assert response.json()["total_recommendations"] >= 4
    assert empty.status_code == 400


async def test_docs_resources() -> None:
    async with get_client() as client:
        listing = await client.get("/api/docs")
        document = await client.get("/api/docs/context/docs/pipeline.json")
        missing = await client.get("/api/docs/context/nope.md")
    assert listing.status_code == 200
    uris = [item["uri"] for item in listing.json()]
    assert "devsecops:///README.md" in uris
    assert document.status_code == 200
    assert document.json()["doc_type"] == "json"
    assert "security scanning" in document.json()["text"]
    assert missing.status_code == 404


async def test_guidance_endpoints() -> None:
    async with get_client() as client:
        cuj = await client.get("/api/guidance/cuj", params={"topic": "creation"})
        sli_slo = await client.get("/api/guidance/sli-slo", params={"kind": "slo"})
        maturity = await client.get("/api/guidance/maturity", params={"level": 9})
    assert "To create CUJs" in cuj.json()["text"]
    assert "Service Level Objectives" in sli_slo.json()["text"]
    assert maturity.json()["text"] == "Invalid maturity level"


async def test_upload_pdf_extracts_concepts() -> None:
    async with get_client() as client:
        response = await client.post(
            "/api/upload",
            files={"pdf": ("runbook.pdf", _pdf_bytes("Service level indicator: queue depth"), "application/pdf")},
        )
        search = await client.post("/api/search", json={"query": "queue depth", "category": "pdfs"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["filename"] == "runbook.pdf"
    assert payload["concept_counts"]["slis"] >= 1
    assert [match["filename"] for match in search.json()["results"]["pdfMatches"]] == ["runbook.pdf"]


async def test_upload_rejects_oversized_and_invalid_files() -> None:
    original = settings.upload_max_bytes
    try:
        object.__setattr__(settings, "upload_max_bytes", 8)
        async with get_client() as client:
            too_big = await client.post("/api/upload", files={"pdf": ("big.txt", b"x" * 64, "text/plain")})
        object.__setattr__(settings, "upload_max_bytes", original)
        async with get_client() as client:
            broken = await client.post("/api/upload", files={"pdf": ("broken.pdf", b"not a pdf", "application/pdf")})
            missing = await client.post("/api/upload")
    finally:
        object.__setattr__(settings, "upload_max_bytes", original)
    assert too_big.status_code == 400
    assert broken.status_code == 400
    assert missing.status_code == 400


async def test_chat_falls_back_to_local() -> None:
    async with get_client() as client:
        response = await client.post("/api/chat", json={"message": "What is a CUJ?"})
        empty = await client.post("/api/chat", json={"message": ""})
    assert response.status_code == 200
    payload = response.json()
    assert payload["provider"] == "local"
    assert payload["fallback_reason"] == "no_provider"
    assert payload["intent"] == {"primary": "cuj", "question_type": "what", "specificity": "general"}
    assert "CUJs defined so far" in payload["response"]
    assert empty.status_code == 422


async def test_chat_uses_remote_provider_when_configured() -> None:
    original = settings.ollama_base_url
    original_timeout = settings.provider_timeout
    try:
        object.__setattr__(settings, "ollama_base_url", "http://127.0.0.1:9")
        object.__setattr__(settings, "provider_timeout", 0.5)
        async with get_client() as client:
            response = await client.post("/api/chat", json={"message": "How do I start with SLOs?"})
    finally:
        object.__setattr__(settings, "ollama_base_url", original)
        object.__setattr__(settings, "provider_timeout", original_timeout)
        reset_caches()
    assert response.status_code == 200
    payload = response.json()
    assert payload["provider"] == "local"
    assert payload["fallback_reason"] in {"provider_error", "provider_timeout"}
