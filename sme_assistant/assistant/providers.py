from __future__ import annotations

"""Remote text-generation providers behind one generate() capability."""

from dataclasses import dataclass
import asyncio
import logging
from typing import Any, Protocol

import httpx


class ProviderError(RuntimeError):
    """Raised when a provider call fails or returns an unusable payload."""
    pass


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """Startup-time description of one provider."""
    name: str
    available: bool
    endpoint: str | None
    model: str


@dataclass(frozen=True)
class ProviderPrompt:
    """Provider-neutral request: instructions, context summary and message."""
    system: str
    context_summary: str
    message: str

    def system_with_context(self) -> str:
        if not self.context_summary:
            return self.system
        return f"{self.system}\n\n{self.context_summary}"


class Provider(Protocol):
    config: ProviderConfig

    async def generate(self, prompt: ProviderPrompt) -> str:
        ...


async def _post_json(
    url: str,
    payload: dict[str, Any],
    timeout: float,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded object, mapping failures to ProviderError."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise ProviderError(str(exc) or type(exc).__name__) from exc
    except ValueError as exc:
        raise ProviderError("Provider returned invalid JSON") from exc
    if not isinstance(data, dict):
        raise ProviderError("Provider returned a non-object payload")
    return data


def _require_text(content: object, provider: str) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ProviderError(f"Invalid {provider} response content")
    return content.strip()


def _message_content(message: object, provider: str) -> str:
    if not isinstance(message, dict):
        raise ProviderError(f"Invalid {provider} response message")
    return _require_text(message.get("content"), provider)


@dataclass(frozen=True)
class OpenAIProvider:
    """Chat completions API."""
    config: ProviderConfig
    api_key: str
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None

    async def generate(self, prompt: ProviderPrompt) -> str:
        if not self.api_key:
            raise ProviderError("OpenAI provider requires OPENAI_API_KEY")
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": prompt.system_with_context()},
                {"role": "user", "content": prompt.message},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        data = await _post_json(
            f"{(self.config.endpoint or '').rstrip('/')}/chat/completions",
            payload,
            self.timeout,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self.transport,
        )
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise ProviderError("Invalid OpenAI response")
        return _message_content(choices[0].get("message"), "OpenAI")


@dataclass(frozen=True)
class AnthropicProvider:
    """Messages API."""
    config: ProviderConfig
    api_key: str
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 30.0
    api_version: str = "2023-06-01"
    transport: httpx.AsyncBaseTransport | None = None

    async def generate(self, prompt: ProviderPrompt) -> str:
        if not self.api_key:
            raise ProviderError("Anthropic provider requires ANTHROPIC_API_KEY")
        payload = {
            "model": self.config.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": prompt.system_with_context(),
            "messages": [{"role": "user", "content": prompt.message}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }
        data = await _post_json(
            f"{(self.config.endpoint or '').rstrip('/')}/messages",
            payload,
            self.timeout,
            headers=headers,
            transport=self.transport,
        )
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ProviderError("Invalid Anthropic response")
        # Text blocks only; a null or non-string text is skipped.
        texts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict)
            and block.get("type", "text") == "text"
            and isinstance(block.get("text"), str)
        ]
        return _require_text("".join(texts), "Anthropic")


@dataclass(frozen=True)
class OllamaProvider:
    """Local Ollama chat API."""
    config: ProviderConfig
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None

    async def generate(self, prompt: ProviderPrompt) -> str:
        if not self.config.endpoint:
            raise ProviderError("Ollama provider requires OLLAMA_BASE_URL")
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": prompt.system_with_context()},
                {"role": "user", "content": prompt.message},
            ],
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }
        data = await _post_json(
            f"{self.config.endpoint.rstrip('/')}/api/chat",
            payload,
            self.timeout,
            transport=self.transport,
        )
        return _message_content(data.get("message"), "Ollama")


@dataclass(frozen=True)
class GeminiProvider:
    """Gemini generative models via google-generativeai."""
    config: ProviderConfig
    api_key: str
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 30.0

    async def generate(self, prompt: ProviderPrompt) -> str:
        if not self.api_key:
            raise ProviderError("Gemini provider requires GEMINI_API_KEY")
        try:
            import google.generativeai as genai
        except ImportError as exc:
            raise ProviderError("google-generativeai is required for GeminiProvider") from exc

        text = f"{prompt.system_with_context()}\n\nUser: {prompt.message}"

        def _run() -> str:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.config.model)
            response = model.generate_content(
                text,
                generation_config={
                    "temperature": self.temperature,
                    "max_output_tokens": self.max_tokens,
                },
            )
            return getattr(response, "text", "") or ""

        try:
            content = await asyncio.wait_for(asyncio.to_thread(_run), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise ProviderError("Gemini request timed out") from exc
        except Exception as exc:
            raise ProviderError(str(exc)) from exc
        return _require_text(content, "Gemini")


def select_provider(providers: list[Provider]) -> Provider | None:
    """Return the first available provider in priority order."""
    for provider in providers:
        if provider.config.available:
            return provider
    return None
