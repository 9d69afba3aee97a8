from __future__ import annotations

"""Response routing: remote provider first, local synthesis as fallback."""

from dataclasses import dataclass, field
import asyncio
import logging
from typing import Sequence

from sme_assistant.agents.intent import Intent, classify_intent
from sme_assistant.app.metrics import record_chat_response
from sme_assistant.assistant.providers import Provider, ProviderError, ProviderPrompt, select_provider
from sme_assistant.assistant.responder import LocalResponder, SynthesisFailure, gather_snippets
from sme_assistant.assistant.templates import CONTEXT_SUMMARY, SYSTEM_PROMPT
from sme_assistant.knowledge.base import KnowledgeBase

logger = logging.getLogger(__name__)

LOCAL_PROVIDER = "local"


@dataclass(frozen=True)
class RoutedResponse:
    """Generated answer and how it was produced."""
    text: str
    provider: str
    intent: Intent
    fallback_reason: str | None = None


@dataclass
class ResponseRouter:
    """Route each message to the selected provider, falling back to local templates.

    The provider is chosen once, at construction, as the first available
    entry of ``providers``; it never changes for the router's lifetime.
    A failure of the local responder propagates as ``SynthesisFailure``.
    """
    knowledge_base: KnowledgeBase
    providers: Sequence[Provider] = ()
    responder: LocalResponder | None = None
    timeout: float = 30.0
    selected: Provider | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.responder is None:
            self.responder = LocalResponder(self.knowledge_base)
        self.selected = select_provider(list(self.providers))
        logger.info(
            "response_router_initialized",
            extra={"provider": self.provider_name},
        )

    @property
    def provider_name(self) -> str:
        return self.selected.config.name if self.selected else LOCAL_PROVIDER

    def build_prompt(self, message: str, snippets: Sequence[str] = ()) -> ProviderPrompt:
        """Build the provider request with live knowledge-base counts."""
        summary = CONTEXT_SUMMARY.format(**self.knowledge_base.stats())
        if snippets:
            summary += "\n\nRelevant documentation:\n" + "\n".join(f"- {s}" for s in snippets)
        return ProviderPrompt(system=SYSTEM_PROMPT, context_summary=summary, message=message)

    async def route(self, message: str) -> RoutedResponse:
        intent = classify_intent(message)
        snippets = gather_snippets(self.knowledge_base, message, intent)
        fallback_reason = "no_provider"
        if self.selected is not None:
            try:
                text = await asyncio.wait_for(
                    self.selected.generate(self.build_prompt(message, snippets)),
                    timeout=self.timeout,
                )
                record_chat_response(self.provider_name, "success")
                return RoutedResponse(text=text, provider=self.provider_name, intent=intent)
            except asyncio.TimeoutError:
                fallback_reason = "provider_timeout"
                logger.error("provider_timeout", extra={"provider": self.provider_name})
            except ProviderError as exc:
                fallback_reason = "provider_error"
                logger.error(
                    "provider_failed",
                    extra={"provider": self.provider_name, "detail": str(exc)},
                )
        try:
            text = self.responder.generate(message, intent=intent, snippets=snippets)
        except SynthesisFailure:
            record_chat_response(LOCAL_PROVIDER, "failure")
            raise
        record_chat_response(LOCAL_PROVIDER, fallback_reason)
        return RoutedResponse(
            text=text,
            provider=LOCAL_PROVIDER,
            intent=intent,
            fallback_reason=fallback_reason,
        )

    async def respond(self, message: str) -> str:
        """Return only the generated answer text."""
        return (await self.route(message)).text
