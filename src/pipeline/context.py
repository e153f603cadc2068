"""Merge a primary chapter and related passages into one prompt context."""

from src.config import RetrievalConfig
from src.models.book import ChapterWithContent
from src.models.query_result import AssembledContext, DocumentMatch

TRUNCATION_MARKER = "[Content truncated...]"
SOURCE_DELIMITER = "\n\n---\n\n"
RELATED_HEADER = "=== RELATED CONTENT FROM OTHER CHAPTERS ==="
UNKNOWN_BOOK = "Unknown Book"
UNKNOWN_CHAPTER = "Unknown Chapter"


def source_label(book_title: str, chapter_title: str) -> str:
    """Human-readable citation, e.g. "Sözler — Dördüncü Söz"."""
    return f"{book_title or UNKNOWN_BOOK} — {chapter_title or UNKNOWN_CHAPTER}"


def truncate_content(content: str, max_chars: int) -> str:
    """Cut ``content`` to ``max_chars`` and append a marker if anything was cut."""
    if len(content) <= max_chars:
        return content
    return f"{content[:max_chars]}\n\n{TRUNCATION_MARKER}"


class ContextAssembler:
    """Builds the bounded context string and its parallel source list.

    The primary chapter (if any) always comes first and gets the largest
    budget. Related passages from the primary chapter itself are dropped and
    at most ``max_related_sources`` of the rest are kept. Every entry in
    ``sources`` labels a block present in the context.

    Args:
        config: Retrieval settings holding the size limits.
    """

    def __init__(self, config: RetrievalConfig | None = None) -> None:
        self._config = config or RetrievalConfig()

    def build(
        self,
        primary: ChapterWithContent | None,
        related: list[DocumentMatch],
    ) -> AssembledContext:
        sections: list[str] = []
        sources: list[str] = []

        if primary is not None:
            label = source_label(primary.book_title, primary.title)
            content = truncate_content(primary.content, self._config.max_primary_chars)
            sections.append(f"=== PRIMARY SOURCE: {label} ===\n\n{content}")
            sources.append(label)

        kept = [
            match for match in related
            if primary is None or match.chapter_id != primary.id
        ][: self._config.max_related_sources]

        if kept:
            blocks = []
            for index, match in enumerate(kept, start=1):
                label = source_label(match.book_title, match.chapter_title)
                blocks.append(f"[Related Source {index} — {label}]\n{match.content}")
                if label not in sources:
                    sources.append(label)
            related_block = SOURCE_DELIMITER.join(blocks)
            if primary is not None:
                related_block = f"{RELATED_HEADER}\n\n{related_block}"
            sections.append(related_block)

        return AssembledContext(context="\n\n".join(sections), sources=sources)
