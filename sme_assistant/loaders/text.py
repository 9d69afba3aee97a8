from __future__ import annotations

"""Plain text loader for ingestion."""

from pathlib import Path

from sme_assistant.knowledge.types import DocumentType


class LoadFailure(RuntimeError):
    """Raised when a document cannot be read or decoded."""
    pass


TEXT_EXTENSIONS = (".md", ".txt", ".json", ".yaml", ".yml", ".js", ".py", ".sh", ".sql")


def is_text_file(filename: str) -> bool:
    """Return True when the file extension is one we index as text."""
    return filename.lower().endswith(TEXT_EXTENSIONS)


def detect_type(filename: str) -> DocumentType:
    """Map a filename to its document type."""
    suffix = Path(filename).suffix.lower()
    if suffix == ".md":
        return DocumentType.MARKDOWN
    if suffix == ".json":
        return DocumentType.JSON
    if suffix in {".yaml", ".yml"}:
        return DocumentType.YAML
    if suffix == ".pdf":
        return DocumentType.PDF
    return DocumentType.TEXT


def load_text_file(path: Path) -> str:
    """Read a UTF-8 text file from disk."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadFailure(f"Could not read {path}: {exc}") from exc


def load_text_bytes(data: bytes) -> str:
    """Decode uploaded text bytes."""
    return data.decode("utf-8", errors="ignore")
