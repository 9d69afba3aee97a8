from __future__ import annotations

"""In-memory document store."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, ValuesView

from sme_assistant.knowledge.types import (
    Document,
    DocumentCategory,
    DocumentSource,
    DocumentType,
    utcnow,
)
from sme_assistant.loaders.directory import categorize
from sme_assistant.loaders.pdf import load_pdf_file
from sme_assistant.loaders.text import LoadFailure, detect_type, load_text_file

logger = logging.getLogger(__name__)


def _read_file(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return load_pdf_file(path)
    return load_text_file(path)


@dataclass
class DocumentStore:
    """Documents keyed by stable identifier, kept in insertion order."""
    reader: Callable[[Path], str] = _read_file
    documents: dict[str, Document] = field(default_factory=dict)

    def load(
        self,
        doc_id: str,
        content: str,
        *,
        title: str | None = None,
        doc_type: DocumentType | None = None,
        category: DocumentCategory | None = None,
        source: DocumentSource = DocumentSource.CONTEXT,
        last_modified: datetime | None = None,
    ) -> Document:
        """Insert or replace a document."""
        name = title or Path(doc_id).name
        document = Document(
            doc_id=doc_id,
            title=name,
            content=content,
            doc_type=doc_type or detect_type(name),
            category=category or categorize(doc_id),
            source=source,
            last_modified=last_modified or utcnow(),
        )
        if doc_id in self.documents:
            # Replacement keeps the original position for stable ordering.
            logger.info("document_replaced", extra={"doc_id": doc_id})
        self.documents[doc_id] = document
        return document

    def load_file(
        self,
        path: Path,
        doc_id: str,
        source: DocumentSource = DocumentSource.CONTEXT,
    ) -> Document | None:
        """Read a file through the loader and store it; None if unreadable."""
        try:
            content = self.reader(path)
            modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        except (LoadFailure, OSError) as exc:
            logger.warning(
                "document_load_failed",
                extra={"doc_id": doc_id, "path": str(path), "detail": str(exc)},
            )
            return None
        return self.load(doc_id, content, source=source, last_modified=modified)

    def get(self, doc_id: str) -> Document | None:
        return self.documents.get(doc_id)

    def all(self) -> ValuesView[Document]:
        """Return a live, re-iterable view of all documents."""
        return self.documents.values()

    def by_source(self, source: DocumentSource) -> Iterator[Document]:
        return (doc for doc in self.documents.values() if doc.source == source)

    def count(self, source: DocumentSource | None = None) -> int:
        if source is None:
            return len(self.documents)
        return sum(1 for _ in self.by_source(source))

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.documents
