from __future__ import annotations

"""Recursive discovery of documentation files."""

import logging
from pathlib import Path
from typing import Iterator

from sme_assistant.knowledge.types import DocumentCategory
from sme_assistant.loaders.text import is_text_file

logger = logging.getLogger(__name__)


def categorize(resource_id: str) -> DocumentCategory:
    """Categorize a document from its resource path."""
    lowered = resource_id.lower()
    if "template" in lowered:
        return DocumentCategory.TEMPLATE
    if "knowledge-base" in lowered:
        return DocumentCategory.KNOWLEDGE
    if "docs" in lowered:
        return DocumentCategory.DOCS
    return DocumentCategory.FRAMEWORK


def iter_text_files(root: Path, prefix: str) -> Iterator[tuple[Path, str]]:
    """Yield (path, resource_id) for every indexable file below root.

    Unreadable directories are logged and skipped.
    """
    if not root.is_dir():
        logger.info("context_dir_missing", extra={"path": str(root)})
        return
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("context_dir_unreadable", extra={"path": str(root), "detail": str(exc)})
        return
    for entry in entries:
        resource_id = f"{prefix}/{entry.name}"
        if entry.is_dir():
            yield from iter_text_files(entry, resource_id)
        elif entry.is_file() and is_text_file(entry.name):
            yield entry, resource_id
