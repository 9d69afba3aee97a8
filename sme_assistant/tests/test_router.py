from __future__ import annotations

"""Tests for provider selection and local fallback in the response router."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from sme_assistant.agents.intent import Intent, Topic
from sme_assistant.agents.router import LOCAL_PROVIDER, ResponseRouter
from sme_assistant.assistant.providers import (
    AnthropicProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderConfig,
    ProviderError,
    ProviderPrompt,
)
from sme_assistant.assistant.responder import LocalResponder, SynthesisFailure
from sme_assistant.assistant.templates import SYSTEM_PROMPT
from sme_assistant.knowledge.base import KnowledgeBase

pytestmark = pytest.mark.anyio


@dataclass
class StubProvider:
    config: ProviderConfig
    reply: str = "remote answer"
    error: Exception | None = None
    delay: float = 0.0
    prompts: list[ProviderPrompt] = field(default_factory=list)

    async def generate(self, prompt: ProviderPrompt) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


def stub(name: str, available: bool = True, **kwargs) -> StubProvider:
    return StubProvider(config=ProviderConfig(name=name, available=available, endpoint=None, model="m"), **kwargs)


class BrokenResponder(LocalResponder):
    def select_template(self, message: str, intent: Intent) -> str:
        return "{missing_value}"


async def test_failing_provider_falls_back_to_local() -> None:
    router = ResponseRouter(KnowledgeBase(), providers=[stub("openai", error=ProviderError("boom"))])

    text = await router.respond("How do I define SLIs?")
    routed = await router.route("How do I define SLIs?")

    assert text.strip()
    assert routed.provider == LOCAL_PROVIDER
    assert routed.fallback_reason == "provider_error"
    assert routed.intent.primary is Topic.SLI


async def test_first_available_provider_is_selected() -> None:
    first = stub("openai", available=False)
    second = stub("anthropic", reply="from anthropic")
    third = stub("ollama", reply="from ollama")
    router = ResponseRouter(KnowledgeBase(), providers=[first, second, third])

    routed = await router.route("What is an SLO?")

    assert router.provider_name == "anthropic"
    assert routed.text == "from anthropic"
    assert routed.provider == "anthropic"
    assert routed.fallback_reason is None
    assert not first.prompts and not third.prompts


async def test_slow_provider_times_out() -> None:
    router = ResponseRouter(KnowledgeBase(), providers=[stub("ollama", delay=1.0)], timeout=0.01)
    routed = await router.route("What is observability?")

    assert routed.provider == LOCAL_PROVIDER
    assert routed.fallback_reason == "provider_timeout"


async def test_no_provider_uses_local() -> None:
    router = ResponseRouter(KnowledgeBase())
    routed = await router.route("What is a CUJ?")

    assert router.provider_name == LOCAL_PROVIDER
    assert routed.fallback_reason == "no_provider"
    assert "0 CUJs" in routed.text


async def test_prompt_carries_counts_and_snippets(loaded_knowledge_base: KnowledgeBase) -> None:
    provider = stub("openai")
    router = ResponseRouter(loaded_knowledge_base, providers=[provider])

    await router.respond("Tell me about objective setting")

    prompt = provider.prompts[0]
    assert prompt.system == SYSTEM_PROMPT
    assert prompt.message == "Tell me about objective setting"
    assert "CUJs:" in prompt.context_summary
    assert "Relevant documentation:" in prompt.context_summary


async def test_local_failure_surfaces() -> None:
    knowledge_base = KnowledgeBase()
    router = ResponseRouter(
        knowledge_base,
        providers=[stub("openai", error=ProviderError("down"))],
        responder=BrokenResponder(knowledge_base),
    )
    with pytest.raises(SynthesisFailure):
        await router.respond("What is a CUJ?")


def malformed_provider(name: str, body: dict):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    config = ProviderConfig(name=name, available=True, endpoint="http://provider.test/v1", model="m")
    if name == "openai":
        return OpenAIProvider(config, api_key="sk-test", transport=transport)
    if name == "anthropic":
        return AnthropicProvider(config, api_key="key", transport=transport)
    return OllamaProvider(config, transport=transport)


@pytest.mark.parametrize(
    ("name", "body"),
    [
        ("openai", {"choices": [{"message": "oops"}]}),
        ("openai", {"choices": "oops"}),
        ("anthropic", {"content": [{"type": "text", "text": None}]}),
        ("anthropic", {"content": "oops"}),
        ("ollama", {"message": "oops"}),
    ],
)
async def test_malformed_provider_payload_falls_back_to_local(name: str, body: dict) -> None:
    router = ResponseRouter(KnowledgeBase(), providers=[malformed_provider(name, body)])

    routed = await router.route("What is a CUJ?")

    assert routed.provider == LOCAL_PROVIDER
    assert routed.fallback_reason == "provider_error"
    assert "0 CUJs" in routed.text
