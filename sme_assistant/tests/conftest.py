from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["SME_CONTEXT_DIR"] = str(FIXTURES_DIR / "context")
os.environ["SME_DOCS_ROOT"] = str(FIXTURES_DIR)
os.environ["SME_ROOT_FILES"] = "README.md,MISSING.md"
os.environ["SME_UPLOAD_DIR"] = ""
os.environ["SME_UPLOAD_MAX_BYTES"] = "65536"
os.environ.setdefault("SME_METRICS_ENABLED", "true")
for key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "OLLAMA_BASE_URL"):
    os.environ.pop(key, None)

from sme_assistant.knowledge.base import KnowledgeBase  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def context_dir() -> Path:
    return FIXTURES_DIR / "context"


@pytest.fixture
def loaded_knowledge_base(context_dir: Path) -> KnowledgeBase:
    knowledge_base = KnowledgeBase()
    knowledge_base.load(context_dir=context_dir, root_dir=FIXTURES_DIR, root_files=("README.md",))
    return knowledge_base
