from __future__ import annotations

"""FastAPI application entrypoint for the DevSecOps SME assistant."""

import dataclasses
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, WebSocket, WebSocketDisconnect

from sme_assistant.agents.intent import Intent
from sme_assistant.agents.router import ResponseRouter
from sme_assistant.app.dependencies import get_knowledge_base, get_router
from sme_assistant.app.metrics import metrics_middleware, metrics_response
from sme_assistant.app.schemas import (
    ChatEvent,
    ChatRequest,
    ChatResponse,
    DocContent,
    DocResource,
    DocumentHit,
    DocumentSearchRequest,
    DocumentSearchResponse,
    GuidanceResponse,
    IntentModel,
    RecommendationRequest,
    RecommendationResponse,
    SearchRequest,
    SearchResponseModel,
    UploadResponse,
)
from sme_assistant.app.settings import settings
from sme_assistant.assistant.responder import SynthesisFailure
from sme_assistant.knowledge.base import KnowledgeBase
from sme_assistant.knowledge.guidance import (
    cuj_guidance,
    observability_maturity,
    recommend,
    sli_slo_guidance,
)
from sme_assistant.knowledge.search import InvalidQuery
from sme_assistant.knowledge.types import ConceptKind, SearchResponse, utcnow
from sme_assistant.loaders.pdf import load_pdf_bytes
from sme_assistant.loaders.text import LoadFailure, load_text_bytes

logger = logging.getLogger(__name__)

RESOURCE_SCHEME = "devsecops:///"

# Listing names exposed over HTTP and the chat channel.
KNOWLEDGE_KINDS = {
    "cujs": (ConceptKind.CUJS, "cujs"),
    "slis": (ConceptKind.SLIS, "slis"),
    "slos": (ConceptKind.SLOS, "slos"),
    "best-practices": (ConceptKind.BEST_PRACTICES, "bestPractices"),
}


def _configure_logging() -> None:
    """Configure root logging using environment settings."""
    level_name = settings.log_level.strip().upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


_configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    knowledge_base = get_knowledge_base()
    logger.info("startup_complete", extra=knowledge_base.stats())
    yield


app = FastAPI(title="DevSecOps SME Assistant", version="0.1.0", lifespan=lifespan)


def _safe_error_message(exc: Exception) -> str:
    """Return a safe error type name for logs and responses."""
    return type(exc).__name__


def _intent_model(intent: Intent) -> IntentModel:
    return IntentModel(
        primary=intent.primary.value,
        question_type=intent.question_type.value,
        specificity=intent.specificity.value,
    )


def _knowledge_listing(knowledge_base: KnowledgeBase, kind: str) -> dict[str, Any]:
    concept_kind, key = KNOWLEDGE_KINDS[kind]
    items = list(knowledge_base.concepts.entries(concept_kind))
    return {key: items, "count": len(items), "lastUpdated": utcnow()}


def _search_payload(response: SearchResponse) -> SearchResponseModel:
    results = {
        key: [dataclasses.asdict(item) if dataclasses.is_dataclass(item) else item for item in items]
        for key, items in response.results.items()
    }
    return SearchResponseModel(
        query=response.query,
        category=response.category.value,
        results=results,
        total_matches=response.total_matches,
        timestamp=response.searched_at,
    )


async def _read_upload_bytes(upload: UploadFile, max_bytes: int | None) -> bytes:
    """Stream upload bytes with a hard size limit."""
    if not max_bytes or max_bytes <= 0:
        return await upload.read()
    buffer = bytearray()
    while True:
        chunk = await upload.read(65536)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File exceeds maximum size of {max_bytes} bytes",
            )
    return bytes(buffer)


def _store_upload(filename: str, data: bytes) -> Path | None:
    """Keep a timestamped copy of the upload when an upload directory is set."""
    if not settings.upload_dir_raw:
        return None
    target_dir = settings.upload_dir
    target = target_dir / f"{int(time.time() * 1000)}-{filename}"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        logger.warning(
            "upload_store_failed",
            extra={"upload_name": filename, "error": _safe_error_message(exc)},
        )
        return None
    return target


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Attach or create a request ID for traceability."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    return await metrics_middleware(request, call_next)


@app.get("/metrics")
async def metrics():
    """Expose Prometheus-style metrics."""
    return metrics_response()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/upload", response_model=UploadResponse)
async def upload(pdf: UploadFile | None = File(default=None)) -> UploadResponse:
    """Extract text from an uploaded PDF or text file and learn its concepts."""
    if pdf is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    filename = Path(pdf.filename or "upload.pdf").name
    data = await _read_upload_bytes(pdf, settings.upload_max_bytes)
    try:
        if filename.lower().endswith(".pdf"):
            content = load_pdf_bytes(data)
        else:
            content = load_text_bytes(data)
    except LoadFailure as exc:
        logger.warning(
            "upload_load_failed",
            extra={"upload_name": filename, "error": _safe_error_message(exc)},
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    _store_upload(filename, data)
    summary = get_knowledge_base().ingest_upload(filename, content)
    return UploadResponse(
        filename=summary.filename,
        content_length=summary.content_length,
        extracted_at=summary.extracted_at,
        summary=summary.summary,
        concept_counts=summary.concept_counts,
    )


@app.get("/api/knowledge-base/{kind}")
async def knowledge_listing(kind: str) -> dict[str, Any]:
    if kind not in KNOWLEDGE_KINDS:
        raise HTTPException(status_code=404, detail="Knowledge base type not found")
    return _knowledge_listing(get_knowledge_base(), kind)


@app.post("/api/search", response_model=SearchResponseModel, response_model_by_alias=True)
async def search(payload: SearchRequest) -> SearchResponseModel:
    try:
        response = get_knowledge_base().search.search(payload.query, payload.category)
    except InvalidQuery as exc:
        raise HTTPException(status_code=400, detail="Query is required") from exc
    return _search_payload(response)


@app.post("/api/search/docs", response_model=DocumentSearchResponse)
async def search_docs(payload: DocumentSearchRequest) -> DocumentSearchResponse:
    """Scored document search with snippets."""
    try:
        results = get_knowledge_base().search.search_documents(
            payload.query,
            category=payload.category,
            max_results=payload.max_results,
        )
    except InvalidQuery as exc:
        raise HTTPException(status_code=400, detail="Query is required") from exc
    return DocumentSearchResponse(
        query=payload.query,
        results=[
            DocumentHit(
                document_id=result.document_id,
                title=result.title,
                category=result.category.value,
                relevance_score=result.relevance_score,
                snippets=list(result.snippets),
            )
            for result in results
        ],
    )


@app.post("/api/recommendations", response_model=RecommendationResponse)
async def recommendations(payload: RecommendationRequest) -> RecommendationResponse:
    if not payload.context.strip():
        raise HTTPException(status_code=400, detail="Context is required")
    result = recommend(payload.context, get_knowledge_base().concepts)
    return RecommendationResponse(
        context=result.context,
        recommendations=result.recommendations,
        total_recommendations=result.total,
        source=result.source,
    )


@app.get("/api/docs", response_model=list[DocResource])
async def list_docs() -> list[DocResource]:
    return [
        DocResource(
            uri=f"{RESOURCE_SCHEME}{document.doc_id}",
            name=document.title,
            doc_type=document.doc_type.value,
            category=document.category.value,
            source=document.source.value,
        )
        for document in get_knowledge_base().store.all()
    ]


@app.get("/api/docs/{doc_id:path}", response_model=DocContent)
async def read_doc(doc_id: str) -> DocContent:
    document = get_knowledge_base().store.get(doc_id)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Resource not found: {doc_id}")
    return DocContent(
        uri=f"{RESOURCE_SCHEME}{document.doc_id}",
        doc_type=document.doc_type.value,
        text=document.content,
    )


@app.get("/api/guidance/cuj", response_model=GuidanceResponse)
async def guidance_cuj(topic: str = "definition") -> GuidanceResponse:
    return GuidanceResponse(topic=topic, text=cuj_guidance(topic))


@app.get("/api/guidance/sli-slo", response_model=GuidanceResponse)
async def guidance_sli_slo(kind: str = "both", use_case: str | None = None) -> GuidanceResponse:
    return GuidanceResponse(topic=kind, text=sli_slo_guidance(kind, use_case))


@app.get("/api/guidance/maturity", response_model=GuidanceResponse)
async def guidance_maturity(level: int | None = None) -> GuidanceResponse:
    topic = "all" if level is None else str(level)
    return GuidanceResponse(topic=topic, text=observability_maturity(level))


@app.post("/api/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest, request: Request) -> ChatResponse:
    """Answer a free-form question through the response router."""
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    try:
        routed = await get_router().route(payload.message)
    except SynthesisFailure as exc:
        logger.error(
            "chat_failed",
            extra={"request_id": request_id, "error": _safe_error_message(exc)},
        )
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    logger.info(
        "chat_complete",
        extra={
            "request_id": request_id,
            "provider": routed.provider,
            "primary": routed.intent.primary.value,
        },
    )
    return ChatResponse(
        response=routed.text,
        provider=routed.provider,
        intent=_intent_model(routed.intent),
        fallback_reason=routed.fallback_reason,
        request_id=request_id,
        timestamp=utcnow(),
    )


async def _chat_event(
    router: ResponseRouter,
    knowledge_base: KnowledgeBase,
    message: str,
    kind: str,
) -> ChatEvent:
    """Build the reply event for one chat channel message."""
    if kind in {"cujs", "slis", "slos"}:
        return ChatEvent(
            event="chat_response",
            message=_knowledge_listing(knowledge_base, kind),
            format="structured",
            timestamp=utcnow(),
        )
    if kind == "search":
        payload = _search_payload(knowledge_base.search.search(message)).model_dump(
            mode="json", by_alias=True
        )
        if payload["totalMatches"] == 0:
            payload["helpfulMessage"] = (
                f'No specific matches found for "{message}". Try uploading relevant PDFs '
                "or asking about general DevSecOps topics like security, monitoring, "
                "or deployment practices."
            )
        return ChatEvent(event="chat_response", message=payload, format="structured", timestamp=utcnow())
    if kind == "recommendations":
        result = recommend(message, knowledge_base.concepts)
        return ChatEvent(
            event="chat_response",
            message={
                "context": result.context,
                "recommendations": result.recommendations,
                "totalRecommendations": result.total,
                "source": result.source,
            },
            format="structured",
            timestamp=utcnow(),
        )
    # ai_chat, general and unknown types go through the router.
    routed = await router.route(message)
    return ChatEvent(
        event="chat_response",
        message=routed.text,
        format="ai_text",
        provider=routed.provider,
        timestamp=utcnow(),
    )


@app.websocket("/ws/chat")
async def chat_socket(websocket: WebSocket) -> None:
    await websocket.accept()
    logger.info("chat_socket_connected")
    router = get_router()
    knowledge_base = get_knowledge_base()
    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError as exc:
                event = ChatEvent(event="chat_error", error="Invalid JSON message", timestamp=utcnow())
                await websocket.send_json(event.model_dump(mode="json", exclude_none=True))
                logger.warning("chat_socket_invalid_json", extra={"error": _safe_error_message(exc)})
                continue
            if not isinstance(data, dict):
                data = {}
            message = str(data.get("message") or "")
            kind = str(data.get("type") or "general")
            try:
                event = await _chat_event(router, knowledge_base, message, kind)
            except (InvalidQuery, SynthesisFailure) as exc:
                logger.error(
                    "chat_socket_failed",
                    extra={"chat_type": kind, "error": _safe_error_message(exc)},
                )
                event = ChatEvent(event="chat_error", error=str(exc), timestamp=utcnow())
            await websocket.send_json(event.model_dump(mode="json", exclude_none=True))
    except WebSocketDisconnect:
        logger.info("chat_socket_disconnected")


def serve() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("sme_assistant.app.main:app", host=settings.host, port=settings.port)
