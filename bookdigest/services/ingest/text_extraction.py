"""Plain text extraction from uploaded book files."""

from __future__ import annotations

import io
import logging
from pathlib import PurePath

import pdfplumber

from bookdigest.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md", ".text"}


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text layer of every page (scanned pages yield nothing)."""
    pages: list[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    return "\n\n".join(pages)


def extract_text(data: bytes, filename: str) -> str:
    extension = PurePath(filename).suffix.lower()
    if extension == ".pdf":
        return extract_pdf_text(data)
    if extension in TEXT_EXTENSIONS:
        return data.decode("utf-8", errors="replace")
    raise ValidationError(f"Unsupported file type: {extension or filename}", field="files")


__all__ = ["TEXT_EXTENSIONS", "extract_pdf_text", "extract_text"]
