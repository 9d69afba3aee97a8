from __future__ import annotations

from functools import lru_cache

from sme_assistant.agents.router import ResponseRouter
from sme_assistant.app.settings import Settings, settings
from sme_assistant.assistant.providers import (
    AnthropicProvider,
    GeminiProvider,
    OllamaProvider,
    OpenAIProvider,
    Provider,
    ProviderConfig,
)
from sme_assistant.knowledge.base import KnowledgeBase

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com"


def build_provider_configs(config: Settings) -> list[ProviderConfig]:
    """Provider descriptions in priority order."""
    return [
        ProviderConfig(
            name="openai",
            available=bool(config.openai_api_key),
            endpoint=config.openai_base_url,
            model=config.openai_model,
        ),
        ProviderConfig(
            name="anthropic",
            available=bool(config.anthropic_api_key),
            endpoint=config.anthropic_base_url,
            model=config.anthropic_model,
        ),
        ProviderConfig(
            name="gemini",
            available=bool(config.gemini_api_key),
            endpoint=GEMINI_ENDPOINT,
            model=config.gemini_model,
        ),
        # Ollama only counts when its URL is configured explicitly.
        ProviderConfig(
            name="ollama",
            available=bool(config.ollama_base_url),
            endpoint=config.ollama_base_url,
            model=config.ollama_model,
        ),
    ]


def build_providers(config: Settings) -> list[Provider]:
    openai, anthropic, gemini, ollama = build_provider_configs(config)
    tuning = {
        "temperature": config.provider_temperature,
        "max_tokens": config.provider_max_tokens,
        "timeout": config.provider_timeout,
    }
    return [
        OpenAIProvider(config=openai, api_key=config.openai_api_key or "", **tuning),
        AnthropicProvider(config=anthropic, api_key=config.anthropic_api_key or "", **tuning),
        GeminiProvider(config=gemini, api_key=config.gemini_api_key or "", **tuning),
        OllamaProvider(config=ollama, **tuning),
    ]


@lru_cache
def get_knowledge_base() -> KnowledgeBase:
    knowledge_base = KnowledgeBase(search_max_results=settings.search_max_results)
    knowledge_base.load(
        context_dir=settings.context_dir,
        root_dir=settings.docs_root,
        root_files=settings.root_files,
    )
    return knowledge_base


@lru_cache
def get_router() -> ResponseRouter:
    return ResponseRouter(
        knowledge_base=get_knowledge_base(),
        providers=build_providers(settings),
        timeout=settings.provider_timeout,
    )


def reset_caches() -> None:
    get_router.cache_clear()
    get_knowledge_base.cache_clear()
