from __future__ import annotations

"""Core data types for documents, concepts and search."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class DocumentType(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    YAML = "yaml"
    PDF = "pdf"
    TEXT = "text"


class DocumentCategory(str, Enum):
    FRAMEWORK = "framework"
    TEMPLATE = "template"
    KNOWLEDGE = "knowledge"
    DOCS = "docs"

    @classmethod
    def parse(cls, value: str | None) -> "DocumentCategory | None":
        """Return the matching category, or None for empty/unknown values."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class DocumentSource(str, Enum):
    CONTEXT = "context"
    UPLOAD = "upload"


class ConceptKind(str, Enum):
    CUJS = "cujs"
    SLIS = "slis"
    SLOS = "slos"
    BEST_PRACTICES = "best_practices"


class SearchCategory(str, Enum):
    """Closed set of categories accepted by knowledge search."""
    CUJS = "cujs"
    SLIS = "slis"
    SLOS = "slos"
    BEST_PRACTICES = "best-practices"
    CONTEXT = "context"
    PDFS = "pdfs"
    ALL = "all"

    @classmethod
    def parse(cls, value: str | None) -> "SearchCategory":
        """Return the matching category, defaulting to ALL."""
        if not value:
            return cls.ALL
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.ALL

    @property
    def concept_kind(self) -> ConceptKind | None:
        return _CONCEPT_KIND_BY_CATEGORY.get(self)


_CONCEPT_KIND_BY_CATEGORY = {
    SearchCategory.CUJS: ConceptKind.CUJS,
    SearchCategory.SLIS: ConceptKind.SLIS,
    SearchCategory.SLOS: ConceptKind.SLOS,
    SearchCategory.BEST_PRACTICES: ConceptKind.BEST_PRACTICES,
}

# Keys used in search responses, matching the knowledge-base listing names.
RESULT_KEYS = {
    SearchCategory.CUJS: "cujs",
    SearchCategory.SLIS: "slis",
    SearchCategory.SLOS: "slos",
    SearchCategory.BEST_PRACTICES: "bestPractices",
    SearchCategory.CONTEXT: "contextMatches",
    SearchCategory.PDFS: "pdfMatches",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Document:
    """Loaded document with metadata."""
    doc_id: str
    title: str
    content: str
    doc_type: DocumentType = DocumentType.TEXT
    category: DocumentCategory = DocumentCategory.FRAMEWORK
    source: DocumentSource = DocumentSource.CONTEXT
    last_modified: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class SearchResult:
    """Scored document match with supporting snippets."""
    document_id: str
    relevance_score: int
    snippets: tuple[str, ...]
    title: str = ""
    category: DocumentCategory = DocumentCategory.FRAMEWORK


@dataclass(frozen=True)
class DocumentMatch:
    """Raw document match for the context and pdfs categories."""
    filename: str
    doc_type: DocumentType
    category: DocumentCategory
    last_modified: datetime
    relevant_snippets: tuple[str, ...]


@dataclass(frozen=True)
class SearchResponse:
    """Category-scoped search response."""
    query: str
    category: SearchCategory
    results: dict[str, list[Any]]
    total_matches: int
    searched_at: datetime = field(default_factory=utcnow)
