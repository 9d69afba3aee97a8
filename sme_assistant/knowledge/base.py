from __future__ import annotations

"""Knowledge base: document store, concept sets and their load phase."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from sme_assistant.knowledge.extractor import ConceptExtractor, ConceptSets
from sme_assistant.knowledge.search import SearchEngine
from sme_assistant.knowledge.store import DocumentStore
from sme_assistant.knowledge.types import Document, DocumentSource, DocumentType
from sme_assistant.loaders.directory import iter_text_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadSummary:
    """Outcome of processing one uploaded document."""
    filename: str
    content_length: int
    extracted_at: datetime
    concept_counts: dict[str, int]

    @property
    def summary(self) -> str:
        return (
            f"Successfully processed {self.filename}. "
            f"Extracted {self.content_length} characters of content."
        )


@dataclass
class KnowledgeBase:
    """Owns the documents and derived concepts for one process."""
    store: DocumentStore = field(default_factory=DocumentStore)
    concepts: ConceptSets = field(default_factory=ConceptSets)
    extractor: ConceptExtractor = field(default_factory=ConceptExtractor)
    search_max_results: int = 5
    loaded: bool = False

    def __post_init__(self) -> None:
        self.search = SearchEngine(
            store=self.store,
            concepts=self.concepts,
            max_results=self.search_max_results,
        )

    def load(
        self,
        context_dir: Path | None = None,
        root_dir: Path | None = None,
        root_files: Iterable[str] = (),
    ) -> int:
        """Load the context tree and root files, then extract concepts.

        Files that fail to load are logged and skipped.
        """
        loaded = 0
        if context_dir is not None:
            for path, resource_id in iter_text_files(context_dir, context_dir.name or "context"):
                if self._ingest_file(path, resource_id):
                    loaded += 1
        if root_dir is not None:
            for name in root_files:
                path = root_dir / name
                if path.is_file() and self._ingest_file(path, name):
                    loaded += 1
        self.loaded = True
        logger.info(
            "knowledge_base_loaded",
            extra={"documents": loaded, **self.concepts.counts()},
        )
        return loaded

    def ingest(
        self,
        doc_id: str,
        content: str,
        *,
        source: DocumentSource = DocumentSource.CONTEXT,
        doc_type: DocumentType | None = None,
    ) -> Document:
        """Store a document and extract its concepts."""
        document = self.store.load(doc_id, content, source=source, doc_type=doc_type)
        self.extractor.process(document.content, self.concepts)
        return document

    def ingest_upload(self, filename: str, content: str) -> UploadSummary:
        doc_type = DocumentType.PDF if filename.lower().endswith(".pdf") else None
        document = self.ingest(filename, content, source=DocumentSource.UPLOAD, doc_type=doc_type)
        summary = UploadSummary(
            filename=filename,
            content_length=len(content),
            extracted_at=document.last_modified,
            concept_counts=self.concepts.counts(),
        )
        logger.info(
            "upload_processed",
            extra={"upload_name": filename, "content_length": summary.content_length},
        )
        return summary

    def stats(self) -> dict[str, int]:
        return {
            **self.concepts.counts(),
            "documents": len(self.store),
            "context_files": self.store.count(DocumentSource.CONTEXT),
            "uploads": self.store.count(DocumentSource.UPLOAD),
        }

    def _ingest_file(self, path: Path, resource_id: str) -> bool:
        document = self.store.load_file(path, resource_id)
        if document is None:
            return False
        self.extractor.process(document.content, self.concepts)
        return True
