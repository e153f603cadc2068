"""Resolve chapter references to full chapter text."""

import logging

from src.errors import StorageError
from src.models.book import Chapter, ChapterWithContent
from src.models.query_result import ChapterType
from src.storage.repository import CorpusStore

logger = logging.getLogger(__name__)

# Section type -> slug of the book that holds those chapters
CHAPTER_TYPE_BOOK_SLUGS: dict[ChapterType, str] = {
    ChapterType.SOZ: "sozler",
    ChapterType.MEKTUP: "mektubat",
    ChapterType.LEMA: "lemalar",
    ChapterType.SUA: "sualar",
}

PARAGRAPH_SEPARATOR = "\n\n"


class ChapterResolver:
    """Finds chapters by number or title and assembles their content.

    Content is rebuilt from paragraphs on every call; nothing is cached.
    Storage failures are logged and reported as "not found".

    Args:
        store: Corpus store to read from.
    """

    def __init__(self, store: CorpusStore) -> None:
        self._store = store

    async def by_number(
        self, chapter_number: int, chapter_type: ChapterType | None = None
    ) -> ChapterWithContent | None:
        """Fetch a chapter by its number, optionally within one section type.

        Args:
            chapter_number: Book-scoped chapter number.
            chapter_type: Restricts the search to the matching book.

        Returns:
            The first matching chapter with its content, or None.
        """
        try:
            book_id = None
            if chapter_type is not None:
                slug = CHAPTER_TYPE_BOOK_SLUGS[chapter_type]
                book = await self._store.get_book_by_slug(slug)
                if book is None:
                    logger.info("No book with slug %s for chapter type %s", slug, chapter_type.value)
                    return None
                book_id = book.id

            chapters = await self._store.find_chapters_by_number(chapter_number, book_id)
            if not chapters:
                return None
            return await self._with_content(chapters[0])
        except StorageError:
            logger.exception("Failed to resolve chapter number %s", chapter_number)
            return None

    async def by_title(self, title: str) -> ChapterWithContent | None:
        """Best-effort match of a displayed chapter title.

        An exact case-insensitive title wins; otherwise the first chapter
        whose title contains ``title``, in book and chapter order.

        Args:
            title: Title text as shown in the reader.

        Returns:
            The matched chapter with its content, or None.
        """
        title = title.strip()
        if not title:
            return None
        try:
            chapters = await self._store.search_chapters_by_title(title, limit=1)
            if not chapters:
                return None
            return await self._with_content(chapters[0])
        except StorageError:
            logger.exception("Failed to resolve chapter title %r", title)
            return None

    async def list_chapters(self, book_slug: str) -> list[Chapter]:
        """List a book's chapters in reading order; empty for unknown books."""
        book = await self._store.get_book_by_slug(book_slug)
        if book is None:
            return []
        return await self._store.list_chapters(book.id)

    async def _with_content(self, chapter: Chapter) -> ChapterWithContent:
        paragraphs = await self._store.list_paragraphs(chapter.id)
        return ChapterWithContent(
            id=chapter.id,
            title=chapter.title,
            chapter_number=chapter.chapter_number,
            book_title=chapter.book_title,
            content=PARAGRAPH_SEPARATOR.join(p.content for p in paragraphs),
        )
