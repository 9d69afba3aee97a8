from __future__ import annotations

"""Keyword relevance search over documents and concept sets."""

import logging
import re
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator

from sme_assistant.knowledge.extractor import ConceptSets
from sme_assistant.knowledge.store import DocumentStore
from sme_assistant.knowledge.types import (
    RESULT_KEYS,
    Document,
    DocumentCategory,
    DocumentMatch,
    DocumentSource,
    SearchCategory,
    SearchResponse,
    SearchResult,
)

logger = logging.getLogger(__name__)


class InvalidQuery(ValueError):
    """Raised when a search query is empty."""
    pass


KEY_TERMS = ("cuj", "sli", "slo", "observability", "devsecops", "monitoring")
TITLE_WEIGHT = 10
KEY_TERM_WEIGHT = 5
MAX_SNIPPETS = 3

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def score_text(query: str, title: str, body: str) -> int:
    """Score a candidate with the title/occurrence/key-term heuristic."""
    query_lower = query.lower()
    title_lower = title.lower()
    body_lower = body.lower()
    score = 0
    if query_lower in title_lower:
        score += TITLE_WEIGHT
    score += body_lower.count(query_lower)
    for term in KEY_TERMS:
        if term in query_lower and term in body_lower:
            score += KEY_TERM_WEIGHT
    return score


def iter_snippets(content: str, query: str) -> Iterator[str]:
    """Yield trimmed sentence-like units that contain the query."""
    query_lower = query.lower()
    for sentence in _SENTENCE_SPLIT_RE.split(content):
        if query_lower not in sentence.lower():
            continue
        trimmed = sentence.strip()
        if trimmed:
            yield trimmed


def extract_snippets(content: str, query: str, max_snippets: int = MAX_SNIPPETS) -> tuple[str, ...]:
    return tuple(islice(iter_snippets(content, query), max_snippets))


def _require_query(query: str) -> str:
    if not isinstance(query, str) or not query.strip():
        raise InvalidQuery("Search query is required")
    return query


@dataclass
class SearchEngine:
    """Relevance search over a document store and its concept sets."""
    store: DocumentStore
    concepts: ConceptSets
    max_results: int = 5

    def search_documents(
        self,
        query: str,
        category: DocumentCategory | str | None = None,
        max_results: int | None = None,
    ) -> list[SearchResult]:
        """Return documents ranked by descending score, ties in load order."""
        _require_query(query)
        category_filter = self._resolve_category(category)
        scored: list[SearchResult] = []
        for document in self.store.all():
            if category_filter is not None and document.category != category_filter:
                continue
            score = score_text(query, document.title, document.content)
            if score <= 0:
                continue
            scored.append(
                SearchResult(
                    document_id=document.doc_id,
                    relevance_score=score,
                    snippets=extract_snippets(document.content, query),
                    title=document.title,
                    category=document.category,
                )
            )
        # list.sort is stable, so equal scores keep discovery order.
        scored.sort(key=lambda result: result.relevance_score, reverse=True)
        limit = self.max_results if max_results is None else max_results
        logger.info(
            "document_search_complete",
            extra={
                "query_length": len(query),
                "category": category_filter.value if category_filter else None,
                "matches": len(scored),
            },
        )
        return scored[:limit]

    def search(
        self,
        query: str,
        category: SearchCategory | str | None = SearchCategory.ALL,
    ) -> SearchResponse:
        """Search concept sets and raw documents for one or all categories."""
        _require_query(query)
        selected = category if isinstance(category, SearchCategory) else SearchCategory.parse(category)
        results: dict[str, list] = {}
        for candidate in SearchCategory:
            if candidate is SearchCategory.ALL:
                continue
            if selected is not SearchCategory.ALL and candidate is not selected:
                continue
            results[RESULT_KEYS[candidate]] = self._search_category(query, candidate)
        total = sum(len(items) for items in results.values())
        return SearchResponse(
            query=query,
            category=selected,
            results=results,
            total_matches=total,
        )

    def _search_category(self, query: str, category: SearchCategory) -> list:
        kind = category.concept_kind
        if kind is not None:
            return self._rank_concepts(query, self.concepts.entries(kind))
        if category is SearchCategory.CONTEXT:
            return self._match_documents(query, self.store.by_source(DocumentSource.CONTEXT))
        if category is SearchCategory.PDFS:
            return self._match_documents(query, self.store.by_source(DocumentSource.UPLOAD))
        raise ValueError(f"Unhandled search category: {category.value}")

    def _rank_concepts(self, query: str, entries: Iterable[str]) -> list[str]:
        query_lower = query.lower()
        matched = [
            (entry, score_text(query, "", entry))
            for entry in entries
            if query_lower in entry.lower()
        ]
        matched.sort(key=lambda item: item[1], reverse=True)
        return [entry for entry, _ in matched]

    def _match_documents(self, query: str, documents: Iterable[Document]) -> list[DocumentMatch]:
        query_lower = query.lower()
        matches: list[DocumentMatch] = []
        for document in documents:
            if query_lower not in document.doc_id.lower() and query_lower not in document.content.lower():
                continue
            matches.append(
                DocumentMatch(
                    filename=document.doc_id,
                    doc_type=document.doc_type,
                    category=document.category,
                    last_modified=document.last_modified,
                    relevant_snippets=extract_snippets(document.content, query),
                )
            )
        return matches

    def _resolve_category(self, category: DocumentCategory | str | None) -> DocumentCategory | None:
        if category is None or isinstance(category, DocumentCategory):
            return category
        resolved = DocumentCategory.parse(category)
        if resolved is None and category:
            logger.warning("search_category_ignored", extra={"category": category})
        return resolved
