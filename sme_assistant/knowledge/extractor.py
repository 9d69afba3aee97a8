from __future__ import annotations

"""Pattern-based extraction of CUJ, SLI, SLO and best-practice fragments."""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from sme_assistant.knowledge.types import ConceptKind

logger = logging.getLogger(__name__)


def _rule(phrase: str) -> re.Pattern[str]:
    return re.compile(phrase + r"[:\-\s]([^.!?]*)", re.IGNORECASE)


CONCEPT_PATTERNS: dict[ConceptKind, tuple[re.Pattern[str], ...]] = {
    ConceptKind.CUJS: (
        _rule(r"critical user journey[s]?"),
        _rule(r"cuj[s]?"),
        _rule(r"user journey[s]?"),
    ),
    ConceptKind.SLIS: (
        _rule(r"service level indicator[s]?"),
        _rule(r"sli[s]?"),
        _rule(r"indicator[s]?"),
    ),
    ConceptKind.SLOS: (
        _rule(r"service level objective[s]?"),
        _rule(r"slo[s]?"),
        _rule(r"objective[s]?"),
    ),
    ConceptKind.BEST_PRACTICES: (
        _rule(r"best practice[s]?"),
        _rule(r"recommendation[s]?"),
        _rule(r"should"),
    ),
}


def match_fragments(text: str, patterns: Iterable[re.Pattern[str]]) -> list[str]:
    """Return trimmed whole-match fragments for each pattern, in rule order."""
    fragments: list[str] = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            fragment = match.group(0).strip()
            if fragment:
                fragments.append(fragment)
    return fragments


def extract(text: str) -> dict[ConceptKind, list[str]]:
    """Run every rule table against text without touching shared state."""
    if not isinstance(text, str) or not text:
        return {kind: [] for kind in CONCEPT_PATTERNS}
    return {kind: match_fragments(text, patterns) for kind, patterns in CONCEPT_PATTERNS.items()}


@dataclass
class ConceptSets:
    """Append-only, deduplicated concept collections in first-seen order."""
    cujs: list[str] = field(default_factory=list)
    slis: list[str] = field(default_factory=list)
    slos: list[str] = field(default_factory=list)
    best_practices: list[str] = field(default_factory=list)

    def entries(self, kind: ConceptKind) -> list[str]:
        return getattr(self, kind.value)

    def add(self, kind: ConceptKind, fragment: str) -> bool:
        """Append fragment unless an identical entry already exists."""
        entries = self.entries(kind)
        if fragment in entries:
            return False
        entries.append(fragment)
        return True

    def counts(self) -> dict[str, int]:
        return {kind.value: len(self.entries(kind)) for kind in ConceptKind}

    @property
    def total(self) -> int:
        return sum(self.counts().values())


@dataclass
class ConceptExtractor:
    """Apply the rule tables to document text and fill concept sets."""
    patterns: dict[ConceptKind, tuple[re.Pattern[str], ...]] = field(
        default_factory=lambda: dict(CONCEPT_PATTERNS)
    )

    def process(self, text: str, concepts: ConceptSets) -> int:
        """Extract fragments into concepts and return how many were new."""
        if not isinstance(text, str) or not text:
            return 0
        added = 0
        for kind, patterns in self.patterns.items():
            for fragment in match_fragments(text, patterns):
                if concepts.add(kind, fragment):
                    added += 1
        logger.debug("concepts_extracted", extra={"added": added, "chars": len(text)})
        return added
