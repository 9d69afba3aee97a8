from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ROOT_FILES = "README.md,CONTEXT_GUIDE.md,AI_SETUP_GUIDE.md,CHATBOT_ALTERNATIVES.md"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    context_dir_raw: str = os.getenv("SME_CONTEXT_DIR", "context")
    root_files_raw: str = os.getenv("SME_ROOT_FILES", DEFAULT_ROOT_FILES)
    docs_root_raw: str = os.getenv("SME_DOCS_ROOT", ".")
    upload_dir_raw: str = os.getenv("SME_UPLOAD_DIR", "uploads")
    upload_max_bytes: int = int(os.getenv("SME_UPLOAD_MAX_BYTES", "10485760"))
    search_max_results: int = int(os.getenv("SME_SEARCH_MAX_RESULTS", "5"))
    provider_timeout: float = float(os.getenv("SME_PROVIDER_TIMEOUT", "30"))
    provider_temperature: float = float(os.getenv("SME_PROVIDER_TEMPERATURE", "0.7"))
    provider_max_tokens: int = int(os.getenv("SME_PROVIDER_MAX_TOKENS", "1000"))
    log_level: str = os.getenv("SME_LOG_LEVEL", "INFO")
    metrics_enabled: bool = _flag("SME_METRICS_ENABLED", "true")
    host: str = os.getenv("SME_HOST", "0.0.0.0")
    port: int = int(os.getenv("SME_PORT", "3000"))
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    anthropic_api_key: str | None = os.getenv("ANTHROPIC_API_KEY")
    anthropic_base_url: str = os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1")
    anthropic_model: str = os.getenv("ANTHROPIC_MODEL", "claude-3-sonnet-20240229")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-pro")
    ollama_base_url: str | None = os.getenv("OLLAMA_BASE_URL")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama2")

    @property
    def context_dir(self) -> Path:
        return Path(self.context_dir_raw)

    @property
    def docs_root(self) -> Path:
        return Path(self.docs_root_raw)

    @property
    def upload_dir(self) -> Path:
        return Path(self.upload_dir_raw)

    @property
    def root_files(self) -> tuple[str, ...]:
        return tuple(value.strip() for value in self.root_files_raw.split(",") if value.strip())


settings = Settings()
