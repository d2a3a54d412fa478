"""Simple demo: chunk, merge and word-count a sample text without any API calls."""

from __future__ import annotations

from bookdigest.config.settings import summarization_settings
from bookdigest.domain.models import Document
from bookdigest.llm_infrastructure.chunking import chunk_text, get_chunker, merge_chunks
from bookdigest.llm_infrastructure.summarization import validate_summary
from bookdigest.services.ingest import DocumentAnalysisService


def main() -> None:
    sample = (
        "Deep work is the ability to focus without distraction on a cognitively demanding task. "
        "It is a skill that allows you to quickly master complicated information. "
    ) * 20

    # --- Chunking demo ---
    print("=== Chunk Demo ===")
    chunks = chunk_text(sample, chunk_size=600, overlap=60)
    print(f"{len(sample)} chars -> {len(chunks)} chunks")
    for i, chunk in enumerate(chunks):
        print(f"  [{i}] {len(chunk)} chars: {chunk[:50]!r}...")

    # Registry-based chunker, configured from settings
    chunker = get_chunker(
        summarization_settings.chunk_method,
        chunk_size=summarization_settings.chunk_size,
        chunk_overlap=summarization_settings.chunk_overlap,
    )
    pieces = chunker.chunk(sample, doc_id="demo")
    print(f"settings chunker: {len(pieces)} chunk(s), last ends at {pieces[-1].end_offset}")

    # --- Merge demo ---
    print("\n=== Merge Demo ===")
    print(repr(merge_chunks(["  first part ", None, "", "second part"])))

    # --- Word count demo ---
    print("\n=== Word Count Demo ===")
    analysis = DocumentAnalysisService.from_settings()
    report = analysis.analyze_files(
        [
            ("notes.txt", sample.encode("utf-8")),
            ("book.docx", b"not supported"),
        ]
    )
    print(f"total words: {report.total_words}")
    for item in report.files:
        print(f"  {item.filename}: {item.words} words, warning={item.warning}")

    doc = Document.from_upload(sample, "Deep Work - Cal Newport.txt")
    print(f"inferred title={doc.title!r}, author={doc.author!r}")

    # --- Summary validation demo ---
    print("\n=== Summary Validation Demo ===")
    for payload in ({"raw_text": "Prose summary."}, {"custom": ["fields"]}):
        print(f"{payload} -> {validate_summary(payload).shape.value}")


if __name__ == "__main__":
    main()
