from __future__ import annotations

"""PDF text extraction and cleanup."""

import re
from pathlib import Path

import fitz

from sme_assistant.loaders.text import LoadFailure


_WHITESPACE_RE = re.compile(r"[ \t\f\v]+")
_HYPHEN_BREAK_RE = re.compile(r"(\w)-\n(\w)")


def clean_pdf_text(text: str) -> str:
    """Join hyphenated line breaks and collapse runs of spaces."""
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n")
    cleaned = _HYPHEN_BREAK_RE.sub(r"\1\2", cleaned)
    lines = [_WHITESPACE_RE.sub(" ", line).strip() for line in cleaned.split("\n")]
    return "\n".join(line for line in lines if line)


def _extract(reader: "fitz.Document") -> str:
    text_parts: list[str] = []
    for page in reader:
        text_parts.append(page.get_text() or "")
    return clean_pdf_text("\n".join(text_parts))


def load_pdf_file(path: Path) -> str:
    """Extract text from a PDF on disk."""
    try:
        with fitz.open(str(path)) as reader:
            return _extract(reader)
    except (OSError, RuntimeError, ValueError) as exc:
        raise LoadFailure(f"Failed to process PDF {path.name}: {exc}") from exc


def load_pdf_bytes(data: bytes) -> str:
    """Extract text from PDF bytes."""
    try:
        with fitz.open(stream=data, filetype="pdf") as reader:
            return _extract(reader)
    except (OSError, RuntimeError, ValueError) as exc:
        raise LoadFailure(f"Failed to process PDF: {exc}") from exc
