"""Read-only access to the corpus store.

Every public method is a coroutine; the blocking sqlite work runs in a worker
thread with a connection opened for that call only.
"""

import asyncio
import json
import logging
import math
import sqlite3
from pathlib import Path
from typing import Any

from src.errors import StorageError
from src.models.book import Book, Chapter, Paragraph
from src.models.dictionary import DictionaryEntry
from src.storage.database import get_connection

logger = logging.getLogger(__name__)

_CHAPTER_COLUMNS = """
    c.id, c.book_id, c.title, c.chapter_number,
    b.title AS book_title, b.slug AS book_slug
"""


class CorpusStore:
    """Reads books, chapters, paragraphs, passages and dictionary entries.

    Args:
        db_path: Path to the SQLite database created by
                 ``initialize_database``.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    # ── Books and chapters ──────────────────────────────────────────────

    async def get_book_by_slug(self, slug: str) -> Book | None:
        rows = await self._fetch(
            "SELECT id, title, slug FROM books WHERE slug = ?", (slug,)
        )
        return Book(**dict(rows[0])) if rows else None

    async def find_chapters_by_number(
        self, chapter_number: int, book_id: int | None = None
    ) -> list[Chapter]:
        """Return chapters with the given number, optionally in one book."""
        sql = (
            f"SELECT {_CHAPTER_COLUMNS} FROM chapters c "
            "JOIN books b ON b.id = c.book_id WHERE c.chapter_number = ?"
        )
        params: tuple[Any, ...] = (chapter_number,)
        if book_id is not None:
            sql += " AND c.book_id = ?"
            params += (book_id,)
        sql += " ORDER BY c.book_id"
        return [Chapter(**dict(row)) for row in await self._fetch(sql, params)]

    async def get_chapter(self, chapter_id: int) -> Chapter | None:
        rows = await self._fetch(
            f"SELECT {_CHAPTER_COLUMNS} FROM chapters c "
            "JOIN books b ON b.id = c.book_id WHERE c.id = ?",
            (chapter_id,),
        )
        return Chapter(**dict(rows[0])) if rows else None

    async def search_chapters_by_title(
        self, title: str, limit: int = 20
    ) -> list[Chapter]:
        """Case-insensitive title match, exact titles first.

        Remaining substring matches are ordered by book and chapter number so
        the same query always resolves to the same chapter.
        """
        rows = await self._fetch(
            f"SELECT {_CHAPTER_COLUMNS} FROM chapters c "
            "JOIN books b ON b.id = c.book_id "
            "WHERE instr(title_key(c.title), title_key(?)) > 0 "
            "ORDER BY title_key(c.title) = title_key(?) DESC, "
            "c.book_id, c.chapter_number LIMIT ?",
            (title, title, limit),
        )
        return [Chapter(**dict(row)) for row in rows]

    async def list_chapters(self, book_id: int) -> list[Chapter]:
        rows = await self._fetch(
            f"SELECT {_CHAPTER_COLUMNS} FROM chapters c "
            "JOIN books b ON b.id = c.book_id WHERE c.book_id = ? "
            "ORDER BY c.chapter_number",
            (book_id,),
        )
        return [Chapter(**dict(row)) for row in rows]

    async def list_paragraphs(self, chapter_id: int) -> list[Paragraph]:
        rows = await self._fetch(
            "SELECT id, chapter_id, content, sequence_number FROM paragraphs "
            "WHERE chapter_id = ? ORDER BY sequence_number",
            (chapter_id,),
        )
        return [Paragraph(**dict(row)) for row in rows]

    # ── Dictionary ──────────────────────────────────────────────────────

    async def get_dictionary_entry(self, word: str) -> DictionaryEntry | None:
        rows = await self._fetch(
            "SELECT word, definition, root_word FROM dictionary WHERE word = ?",
            (word,),
        )
        return DictionaryEntry(**dict(rows[0])) if rows else None

    async def get_dictionary_entry_by_root(
        self, root_word: str
    ) -> DictionaryEntry | None:
        rows = await self._fetch(
            "SELECT word, definition, root_word FROM dictionary "
            "WHERE root_word = ? ORDER BY word LIMIT 1",
            (root_word,),
        )
        return DictionaryEntry(**dict(rows[0])) if rows else None

    async def list_dictionary_prefix(
        self, prefix: str, limit: int = 50
    ) -> list[DictionaryEntry]:
        """Entries whose key starts with ``prefix``, shortest keys first."""
        rows = await self._fetch(
            "SELECT word, definition, root_word FROM dictionary "
            "WHERE substr(word, 1, length(?)) = ? "
            "ORDER BY length(word), word LIMIT ?",
            (prefix, prefix, limit),
        )
        return [DictionaryEntry(**dict(row)) for row in rows]

    # ── Passages ────────────────────────────────────────────────────────

    async def match_documents(
        self, query_embedding: list[float], match_threshold: float, match_count: int
    ) -> list[dict[str, Any]]:
        """Nearest-neighbour search by cosine similarity.

        Returns raw records sorted by similarity, highest first, keeping only
        those strictly above ``match_threshold``.
        """
        return await asyncio.to_thread(
            self._match_documents_sync, query_embedding, match_threshold, match_count
        )

    async def get_book_slug_for_chapter(self, chapter_id: int) -> str | None:
        rows = await self._fetch(
            "SELECT b.slug FROM chapters c JOIN books b ON b.id = c.book_id "
            "WHERE c.id = ?",
            (chapter_id,),
        )
        return rows[0]["slug"] if rows else None

    # ── Internals ───────────────────────────────────────────────────────

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[sqlite3.Row]:
        return await asyncio.to_thread(self._fetch_sync, sql, params)

    def _fetch_sync(self, sql: str, params: tuple[Any, ...]) -> list[sqlite3.Row]:
        try:
            conn = get_connection(self._db_path)
        except sqlite3.Error as exc:
            logger.error("Failed to open corpus database %s: %s", self._db_path, exc)
            raise StorageError(f"Failed to open corpus database: {exc}") from exc
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Corpus query failed: %s", exc)
            raise StorageError(f"Corpus query failed: {exc}") from exc
        finally:
            conn.close()

    def _match_documents_sync(
        self, query_embedding: list[float], match_threshold: float, match_count: int
    ) -> list[dict[str, Any]]:
        rows = self._fetch_sync(
            "SELECT d.id, d.content, d.embedding, d.chapter_id, "
            "c.title AS chapter_title, b.title AS book_title "
            "FROM documents d "
            "LEFT JOIN chapters c ON c.id = d.chapter_id "
            "LEFT JOIN books b ON b.id = c.book_id",
            (),
        )
        query_norm = _norm(query_embedding)
        matches: list[dict[str, Any]] = []
        for row in rows:
            try:
                embedding = json.loads(row["embedding"])
            except (TypeError, ValueError):
                logger.warning("Skipping document %s with unreadable embedding", row["id"])
                continue
            similarity = _cosine(query_embedding, query_norm, embedding)
            if similarity is None or similarity <= match_threshold:
                continue
            matches.append({
                "id": row["id"],
                "content": row["content"],
                "similarity": similarity,
                "book_title": row["book_title"],
                "chapter_title": row["chapter_title"],
                "chapter_id": row["chapter_id"],
            })

        matches.sort(key=lambda m: m["similarity"], reverse=True)
        return matches[:match_count]


def _norm(vector: list[float]) -> float:
    return math.sqrt(sum(x * x for x in vector))


def _cosine(
    query: list[float], query_norm: float, other: list[float]
) -> float | None:
    if len(other) != len(query) or query_norm == 0:
        return None
    other_norm = _norm(other)
    if other_norm == 0:
        return None
    return sum(a * b for a, b in zip(query, other)) / (query_norm * other_norm)
