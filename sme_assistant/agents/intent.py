from __future__ import annotations

"""Rule-based intent classification for chat messages."""

from dataclasses import dataclass
from enum import Enum


class Topic(str, Enum):
    CUJ = "cuj"
    SLI = "sli"
    SLO = "slo"
    OBSERVABILITY = "observability"
    SECURITY = "security"
    IMPLEMENTATION = "implementation"
    COMPARISON = "comparison"
    TROUBLESHOOTING = "troubleshooting"
    GENERAL = "general"


class QuestionType(str, Enum):
    HOW = "how"
    WHAT = "what"
    WHY = "why"
    WHEN = "when"
    RECOMMENDATION = "recommendation"
    GENERAL = "general"


class Specificity(str, Enum):
    BEGINNER = "beginner"
    ADVANCED = "advanced"
    EXAMPLE = "example"
    GENERAL = "general"


@dataclass(frozen=True)
class Intent:
    primary: Topic = Topic.GENERAL
    question_type: QuestionType = QuestionType.GENERAL
    specificity: Specificity = Specificity.GENERAL


# Order matters: the first group with a matching hint wins.
TOPIC_HINTS: tuple[tuple[Topic, tuple[str, ...]], ...] = (
    (Topic.CUJ, ("cuj", "critical user journey", "user journey")),
    (Topic.SLI, ("sli", "service level indicator", "indicator")),
    (Topic.SLO, ("slo", "service level objective", "objective")),
    (Topic.OBSERVABILITY, ("observability", "monitoring", "metrics")),
    (Topic.SECURITY, ("security", "devsecops", "vulnerability")),
    (Topic.IMPLEMENTATION, ("implement", "setup", "configure")),
    (Topic.COMPARISON, ("difference", "compare", "vs")),
    (Topic.TROUBLESHOOTING, ("problem", "issue", "troubleshoot", "debug")),
)

# (question type, leading words, contained phrases)
QUESTION_HINTS: tuple[tuple[QuestionType, tuple[str, ...], tuple[str, ...]], ...] = (
    (QuestionType.HOW, ("how",), ("how do", "how to")),
    (QuestionType.WHAT, ("what",), ("what is", "what are")),
    (QuestionType.WHY, ("why",), ("why should",)),
    (QuestionType.WHEN, ("when",), ("when to",)),
    (QuestionType.RECOMMENDATION, (), ("best practice", "recommend")),
)

SPECIFICITY_HINTS: tuple[tuple[Specificity, tuple[str, ...]], ...] = (
    (Specificity.BEGINNER, ("start", "begin", "getting started")),
    (Specificity.ADVANCED, ("advanced", "complex", "detailed")),
    (Specificity.EXAMPLE, ("example", "sample")),
)


def classify_intent(message: str) -> Intent:
    """Map a message to topic, question type and specificity."""
    lowered = message.lower()
    primary = next(
        (topic for topic, hints in TOPIC_HINTS if any(hint in lowered for hint in hints)),
        Topic.GENERAL,
    )
    question_type = next(
        (
            kind
            for kind, prefixes, phrases in QUESTION_HINTS
            if lowered.startswith(prefixes) or any(phrase in lowered for phrase in phrases)
        ),
        QuestionType.GENERAL,
    )
    specificity = next(
        (level for level, hints in SPECIFICITY_HINTS if any(hint in lowered for hint in hints)),
        Specificity.GENERAL,
    )
    return Intent(primary=primary, question_type=question_type, specificity=specificity)
