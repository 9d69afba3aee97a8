from __future__ import annotations

"""Deterministic local answer synthesis from templates."""

import logging
import zlib
from dataclasses import dataclass
from typing import Sequence

from sme_assistant.agents.intent import TOPIC_HINTS, Intent, Topic, classify_intent
from sme_assistant.assistant.templates import (
    COMPARISON_TEMPLATES,
    SNIPPETS_HEADER,
    TEMPLATES,
    TOPIC_SEARCH_TERMS,
    TemplateKey,
)
from sme_assistant.knowledge.base import KnowledgeBase
from sme_assistant.knowledge.guidance import MATURITY_NAMES

logger = logging.getLogger(__name__)


class SynthesisFailure(RuntimeError):
    """Raised when a local response cannot be generated."""
    pass


MAX_CONTEXT_SNIPPETS = 3
COMPARISON_HINTS = dict(TOPIC_HINTS)[Topic.COMPARISON]


def template_keys(intent: Intent) -> list[TemplateKey]:
    """Lookup chain from the most specific key down to the topic alone."""
    return [
        (intent.primary, intent.question_type, intent.specificity),
        (intent.primary, intent.question_type, None),
        (intent.primary, None, intent.specificity),
        (intent.primary, None, None),
    ]


def gather_snippets(knowledge_base: KnowledgeBase, message: str, intent: Intent) -> list[str]:
    """Collect supporting snippets for the message, then for its topic."""
    queries = [message]
    term = TOPIC_SEARCH_TERMS.get(intent.primary)
    if term:
        queries.append(term)
    for query in queries:
        if not query.strip():
            continue
        snippets: list[str] = []
        for result in knowledge_base.search.search_documents(query):
            for snippet in result.snippets:
                if snippet not in snippets:
                    snippets.append(snippet)
                if len(snippets) >= MAX_CONTEXT_SNIPPETS:
                    return snippets
        if snippets:
            return snippets
    return []


@dataclass
class LocalResponder:
    """Template-driven responder used when no remote provider answers."""
    knowledge_base: KnowledgeBase

    def template_values(self) -> dict[str, object]:
        stats = self.knowledge_base.stats()
        concepts = self.knowledge_base.concepts
        return {
            "cujs": stats["cujs"],
            "slis": stats["slis"],
            "slos": stats["slos"],
            "best_practices": stats["best_practices"],
            "knowledge_total": concepts.total,
            "documents": stats["documents"],
            "context_files": stats["context_files"],
            "uploads": stats["uploads"],
            "maturity_levels": " → ".join(MATURITY_NAMES),
            "maturity_list": "\n".join(f"{idx}. {name}" for idx, name in enumerate(MATURITY_NAMES)),
        }

    def select_template(self, message: str, intent: Intent) -> str:
        lowered = message.lower()
        # Comparison wording wins even when a subject keyword set the topic.
        if intent.primary is Topic.COMPARISON or any(hint in lowered for hint in COMPARISON_HINTS):
            for terms, template in COMPARISON_TEMPLATES:
                if all(term in lowered for term in terms):
                    return template
        for key in template_keys(intent):
            variants = TEMPLATES.get(key)
            if variants:
                return _pick(variants, message)
        return _pick(TEMPLATES[(Topic.GENERAL, None, None)], message)

    def generate(
        self,
        message: str,
        intent: Intent | None = None,
        snippets: Sequence[str] | None = None,
    ) -> str:
        """Render the best matching template for the message."""
        intent = intent or classify_intent(message)
        try:
            template = self.select_template(message, intent)
            text = template.format(**self.template_values())
        except (KeyError, IndexError, ValueError) as exc:
            logger.error(
                "local_synthesis_failed",
                extra={"primary": intent.primary.value, "detail": type(exc).__name__},
            )
            raise SynthesisFailure("Unable to generate a local response") from exc
        if snippets:
            lines = "\n".join(f"• {snippet}" for snippet in snippets)
            text = f"{text}\n\n{SNIPPETS_HEADER}\n{lines}"
        return text


def _pick(variants: Sequence[str], message: str) -> str:
    """Choose a variant deterministically from the message text."""
    return variants[zlib.crc32(message.encode("utf-8", "surrogatepass")) % len(variants)]
