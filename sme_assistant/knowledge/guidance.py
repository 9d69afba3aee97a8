from __future__ import annotations

"""Static CUJ/SLI/SLO guidance, maturity levels and recommendations."""

from dataclasses import dataclass

from sme_assistant.knowledge.extractor import ConceptSets


CUJ_GUIDANCE = {
    "definition": (
        "Critical User Journeys (CUJs) are end-to-end workflows that deliver business value "
        "to your customers. They follow user-impacting paths through the system rather than "
        "purely technical processes."
    ),
    "creation": (
        "To create CUJs: 1) identify your customers (end users, other applications, other "
        "teams), 2) map each journey from entry to exit, 3) anchor it on business value, "
        "4) make sure every segment can be measured on its own."
    ),
    "examples": (
        "Example CUJ: 'Customer places order -> Payment processed -> Order confirmed -> "
        "Delivery scheduled'. Each segment is measured independently."
    ),
    "best_practices": (
        "CUJ best practices: focus on segments your application owns end to end, tie them "
        "to business outcomes, keep them measurable and let them drive the SLI/SLO strategy."
    ),
}

MATURITY_LEVELS = {
    0: "**Level 0 - No Visibility:** No systematic monitoring or logging. Users report the issues.",
    1: "**Level 1 - Basic Logging:** Application and infrastructure logs exist. Problem solving is reactive.",
    2: "**Level 2 - Structured Monitoring:** Organized metrics, dashboards and alerts. Proactive monitoring begins.",
    3: "**Level 3 - Advanced Observability:** Predictive, user-focused metrics on a full observability stack.",
}

MATURITY_NAMES = (
    "No visibility",
    "Basic logging",
    "Structured monitoring",
    "Advanced observability",
)

FRAMEWORK_TOOLS = ("Observe (logging)", "Obstack (metrics)", "PagerDuty (alerting)")

KEYWORD_RECOMMENDATIONS = {
    "security": (
        "Implement security scanning in CI/CD pipeline",
        "Regular vulnerability assessments",
        "Zero-trust architecture principles",
        "Secure coding practices training",
    ),
    "monitoring": (
        "Implement comprehensive observability",
        "Set up alerting for critical metrics",
        "Monitor user journey performance",
        "Track SLI/SLO compliance",
    ),
    "deployment": (
        "Blue-green deployment strategy",
        "Automated rollback mechanisms",
        "Feature flags for controlled releases",
        "Infrastructure as Code (IaC)",
    ),
}


def cuj_guidance(topic: str | None) -> str:
    """Return CUJ guidance for a topic, defaulting to the definition."""
    key = (topic or "").strip().lower()
    return CUJ_GUIDANCE.get(key, CUJ_GUIDANCE["definition"])


def sli_slo_guidance(kind: str = "both", use_case: str | None = None) -> str:
    kind = (kind or "both").strip().lower()
    sections: list[str] = []
    if kind in {"sli", "both"}:
        sections.append(
            "**SLIs (Service Level Indicators):**\n"
            "- Measure what users actually experience\n"
            "- Focus on availability, latency, error rates and throughput\n"
            "- Ask: 'What would users notice if this went wrong?'\n"
            "- Measure what you control, not external dependencies\n"
        )
    if kind in {"slo", "both"}:
        sections.append(
            "**SLOs (Service Level Objectives):**\n"
            "- Define reliability targets for your SLIs\n"
            "- Start with achievable targets based on current performance\n"
            "- Use error budgets to balance reliability against features\n"
            "- Review and adjust monthly\n"
        )
    if use_case and use_case.strip():
        sections.append(
            f"**For {use_case.strip()}:**\n"
            "Consider success rates, response times and availability that directly "
            "affect the user experience.\n"
        )
    return "\n".join(sections)


def observability_maturity(level: int | None = None) -> str:
    """Describe one maturity level, or all of them when level is None."""
    if level is not None:
        return MATURITY_LEVELS.get(level, "Invalid maturity level")
    levels = "\n\n".join(MATURITY_LEVELS.values())
    return (
        f"**Observability Maturity Levels:**\n\n{levels}\n\n"
        "The goal is to progress from reactive (Level 0-1) to proactive (Level 2-3) observability."
    )


@dataclass(frozen=True)
class Recommendations:
    context: str
    recommendations: list[str]
    source: str = "DevSecOps SME Knowledge Base"

    @property
    def total(self) -> int:
        return len(self.recommendations)


def recommend(context: str, concepts: ConceptSets) -> Recommendations:
    """Keyword recommendations plus best practices mentioning the context."""
    context_lower = context.lower()
    recommendations: list[str] = []
    for keyword, items in KEYWORD_RECOMMENDATIONS.items():
        if keyword in context_lower:
            recommendations.extend(items)
    recommendations.extend(
        practice for practice in concepts.best_practices if context_lower in practice.lower()
    )
    return Recommendations(context=context, recommendations=recommendations)
