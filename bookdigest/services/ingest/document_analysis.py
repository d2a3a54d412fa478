"""Word-count analysis of uploaded documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from bookdigest.config.settings import IngestSettings, ingest_settings
from bookdigest.domain.models import Document
from bookdigest.llm_infrastructure.text_quality import (
    LOW_YIELD_WARNING,
    count_words,
    is_low_yield_extraction,
)

from .text_extraction import extract_text

logger = logging.getLogger(__name__)


@dataclass
class FileWordCount:
    filename: str
    words: int
    warning: str | None = None


@dataclass
class WordCountReport:
    total_words: int = 0
    files: list[FileWordCount] = field(default_factory=list)


class DocumentAnalysisService:
    """Counts words per document and flags likely image-only PDFs.

    A warning never fails the analysis; a file that cannot be read is
    reported with zero words and the extraction error.
    """

    def __init__(
        self,
        low_word_threshold: int = 100,
        large_file_bytes: int = 100_000,
        image_capable_extensions: Iterable[str] = (".pdf",),
        extractor: Callable[[bytes, str], str] = extract_text,
    ) -> None:
        self.low_word_threshold = low_word_threshold
        self.large_file_bytes = large_file_bytes
        self.image_capable_extensions = tuple(image_capable_extensions)
        self._extract = extractor

    @classmethod
    def from_settings(cls, settings: IngestSettings | None = None) -> "DocumentAnalysisService":
        settings = settings or ingest_settings
        return cls(
            low_word_threshold=settings.low_word_threshold,
            large_file_bytes=settings.large_file_bytes,
            image_capable_extensions=settings.image_capable_extensions,
        )

    def analyze_document(self, document: Document) -> FileWordCount:
        words = count_words(document.text)
        warning = None
        if is_low_yield_extraction(
            words,
            document.filename,
            document.byte_size,
            low_word_threshold=self.low_word_threshold,
            large_file_bytes=self.large_file_bytes,
            image_capable_extensions=self.image_capable_extensions,
        ):
            warning = LOW_YIELD_WARNING
        return FileWordCount(filename=document.filename or "", words=words, warning=warning)

    def analyze_files(self, files: Iterable[tuple[str, bytes]]) -> WordCountReport:
        """Analyze raw uploads given as ``(filename, data)`` pairs."""
        report = WordCountReport()
        for filename, data in files:
            try:
                text = self._extract(data, filename)
            except Exception as exc:
                logger.warning("Error analyzing %s: %s", filename, exc)
                report.files.append(
                    FileWordCount(
                        filename=filename,
                        words=0,
                        warning=f"Failed to extract text: {exc}",
                    )
                )
                continue
            result = self.analyze_document(
                Document(text=text, filename=filename, byte_size=len(data))
            )
            report.total_words += result.words
            report.files.append(result)
        return report


__all__ = ["FileWordCount", "WordCountReport", "DocumentAnalysisService"]
