from __future__ import annotations

"""Tests for the document store and the knowledge-base load phase."""

from pathlib import Path

from sme_assistant.knowledge.base import KnowledgeBase
from sme_assistant.knowledge.store import DocumentStore
from sme_assistant.knowledge.types import DocumentCategory, DocumentSource, DocumentType
from sme_assistant.loaders.text import LoadFailure


def test_load_detects_type_and_category() -> None:
    store = DocumentStore()
    document = store.load("context/templates/cuj-template.md", "CUJ: login.")

    assert document.title == "cuj-template.md"
    assert document.doc_type is DocumentType.MARKDOWN
    assert document.category is DocumentCategory.TEMPLATE
    assert document.source is DocumentSource.CONTEXT
    assert "context/templates/cuj-template.md" in store


def test_reload_replaces_in_place() -> None:
    store = DocumentStore()
    store.load("a.md", "first")
    store.load("b.md", "second")
    store.load("a.md", "updated")

    assert [doc.doc_id for doc in store.all()] == ["a.md", "b.md"]
    assert store.get("a.md").content == "updated"
    assert len(store) == 2


def test_load_file_skips_unreadable_files(tmp_path: Path) -> None:
    def failing_reader(path: Path) -> str:
        raise LoadFailure(f"cannot read {path}")

    store = DocumentStore(reader=failing_reader)
    target = tmp_path / "notes.md"
    target.write_text("SLO: 99%", encoding="utf-8")

    assert store.load_file(target, "notes.md") is None
    assert len(store) == 0


def test_count_by_source() -> None:
    store = DocumentStore()
    store.load("context/a.md", "a")
    store.load("report.pdf", "b", source=DocumentSource.UPLOAD)

    assert store.count() == 2
    assert store.count(DocumentSource.UPLOAD) == 1
    assert [doc.doc_id for doc in store.by_source(DocumentSource.CONTEXT)] == ["context/a.md"]


def test_knowledge_base_loads_context_tree(loaded_knowledge_base: KnowledgeBase) -> None:
    store = loaded_knowledge_base.store
    ids = [doc.doc_id for doc in store.all()]

    assert ids == [
        "context/docs/pipeline.json",
        "context/frameworks/observability-framework.md",
        "context/knowledge-base/slo-notes.txt",
        "context/templates/cuj-template.md",
        "README.md",
    ]
    assert store.get("context/docs/pipeline.json").category is DocumentCategory.DOCS
    assert store.get("context/knowledge-base/slo-notes.txt").category is DocumentCategory.KNOWLEDGE
    assert loaded_knowledge_base.loaded


def test_knowledge_base_extracts_concepts_once(loaded_knowledge_base: KnowledgeBase) -> None:
    practices = loaded_knowledge_base.concepts.best_practices
    fragment = "Best practice: alert on error budget burn rate instead of raw CPU usage"

    assert practices.count(fragment) == 1
    assert loaded_knowledge_base.stats()["cujs"] > 0


def test_missing_context_dir_loads_nothing(tmp_path: Path) -> None:
    knowledge_base = KnowledgeBase()
    loaded = knowledge_base.load(context_dir=tmp_path / "missing")

    assert loaded == 0
    assert knowledge_base.stats()["documents"] == 0
    assert knowledge_base.loaded


def test_ingest_upload_tracks_source_and_type() -> None:
    knowledge_base = KnowledgeBase()
    summary = knowledge_base.ingest_upload("runbook.pdf", "SLI: checkout latency at p95.")

    document = knowledge_base.store.get("runbook.pdf")
    assert document.source is DocumentSource.UPLOAD
    assert document.doc_type is DocumentType.PDF
    assert summary.content_length == len("SLI: checkout latency at p95.")
    assert "runbook.pdf" in summary.summary
    assert summary.concept_counts["slis"] >= 1
    assert knowledge_base.stats()["uploads"] == 1
