from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from sme_assistant.knowledge.types import DocumentCategory, DocumentType
from sme_assistant.loaders.directory import categorize, iter_text_files
from sme_assistant.loaders.pdf import clean_pdf_text, load_pdf_bytes, load_pdf_file
from sme_assistant.loaders.text import LoadFailure, detect_type, is_text_file, load_text_file


def _pdf_bytes(text: str) -> bytes:
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


def test_pdf_bytes_roundtrip() -> None:
    text = load_pdf_bytes(_pdf_bytes("Service level objective: 99.9% uptime"))
    assert "Service level objective" in text


def test_pdf_file_loader(tmp_path: Path) -> None:
    path = tmp_path / "guide.pdf"
    path.write_bytes(_pdf_bytes("Critical user journey: checkout"))
    assert "Critical user journey" in load_pdf_file(path)


def test_invalid_pdf_raises_load_failure() -> None:
    with pytest.raises(LoadFailure):
        load_pdf_bytes(b"not a pdf")


def test_clean_pdf_text_joins_hyphenated_breaks() -> None:
    assert clean_pdf_text("observa-\nbility   stack\n\n  ") == "observability stack"


def test_text_loader_wraps_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LoadFailure):
        load_text_file(tmp_path / "missing.md")


def test_type_detection() -> None:
    assert detect_type("a.md") is DocumentType.MARKDOWN
    assert detect_type("a.yml") is DocumentType.YAML
    assert detect_type("a.json") is DocumentType.JSON
    assert detect_type("a.log") is DocumentType.TEXT
    assert is_text_file("notes.TXT")
    assert not is_text_file("diagram.png")


def test_categorize_prefers_template() -> None:
    assert categorize("context/templates/docs.md") is DocumentCategory.TEMPLATE
    assert categorize("context/knowledge-base/a.md") is DocumentCategory.KNOWLEDGE
    assert categorize("context/docs/a.md") is DocumentCategory.DOCS
    assert categorize("README.md") is DocumentCategory.FRAMEWORK


def test_iter_text_files_is_sorted_and_filtered(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "z.md").write_text("z", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")

    ids = [resource_id for _, resource_id in iter_text_files(tmp_path, "context")]
    assert ids == ["context/a.txt", "context/b/z.md"]
