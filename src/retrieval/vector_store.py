"""Embedding generation and similarity search over corpus passages."""

import logging
import math
from numbers import Real
from typing import Any

from src.config import EmbeddingConfig
from src.errors import (
    EmbeddingError,
    RetrievalError,
    StorageError,
    ValidationError,
)
from src.llm.client import OpenAIClientProvider
from src.models.query_result import DocumentMatch
from src.storage.repository import CorpusStore

logger = logging.getLogger(__name__)

MIN_MATCH_COUNT = 1
MAX_MATCH_COUNT = 100


def validate_search_options(match_threshold: float, match_count: int) -> None:
    """Reject out-of-range search parameters before any I/O.

    Raises:
        ValidationError: Naming the parameter that is out of range.
    """
    if (
        isinstance(match_threshold, bool)
        or not isinstance(match_threshold, Real)
        or math.isnan(match_threshold)
        or not 0.0 <= match_threshold <= 1.0
    ):
        raise ValidationError(
            f"match_threshold must be between 0 and 1, got {match_threshold!r}"
        )
    if (
        isinstance(match_count, bool)
        or not isinstance(match_count, int)
        or not MIN_MATCH_COUNT <= match_count <= MAX_MATCH_COUNT
    ):
        raise ValidationError(
            f"match_count must be between {MIN_MATCH_COUNT} and "
            f"{MAX_MATCH_COUNT}, got {match_count!r}"
        )


class VectorStore:
    """Embeds queries and retrieves the nearest corpus passages.

    Args:
        store: Corpus store exposing ``match_documents``.
        clients: Provider of the shared OpenAI client.
        config: Embedding model settings.
    """

    def __init__(
        self,
        store: CorpusStore,
        clients: OpenAIClientProvider,
        config: EmbeddingConfig | None = None,
    ) -> None:
        self._store = store
        self._clients = clients
        self._config = config or EmbeddingConfig()

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for ``text``.

        Raises:
            ValidationError: If ``text`` is empty or whitespace-only.
            ConfigurationError: If the OpenAI API key is not set.
            EmbeddingError: If the call fails or the response is malformed.
        """
        if not text or not text.strip():
            raise ValidationError("Embedding text must be a non-empty string")

        client = self._clients.get()
        try:
            response = await client.embeddings.create(
                model=self._config.model,
                input=text.strip(),
            )
        except Exception as exc:
            logger.exception("Error generating embedding")
            raise EmbeddingError("Failed to generate embedding for the query") from exc

        return _extract_embedding(response)

    async def retrieve(
        self,
        embedding: list[float],
        match_threshold: float = 0.3,
        match_count: int = 5,
    ) -> list[DocumentMatch]:
        """Find passages similar to ``embedding``, most similar first.

        Ordering is the store's; results are not re-sorted here.

        Raises:
            ValidationError: If threshold or count is out of range.
            RetrievalError: If the store fails.
        """
        validate_search_options(match_threshold, match_count)

        try:
            records = await self._store.match_documents(
                embedding, match_threshold, match_count
            )
        except StorageError as exc:
            logger.error("Similarity search failed: %s", exc)
            raise RetrievalError("Failed to search for similar documents") from exc

        matches: list[DocumentMatch] = []
        for record in records or []:
            match = _to_document_match(record)
            if match is not None:
                matches.append(match)
        return matches

    async def search(
        self,
        query: str,
        limit: int = 10,
        threshold: float = 0.25,
    ) -> list[DocumentMatch]:
        """Semantic search for the search page.

        Each match is enriched with its book slug so the reader can link to
        the chapter.

        Raises:
            ValidationError: For an empty query or out-of-range options.
            ConfigurationError, EmbeddingError, RetrievalError: On service
                failures.
        """
        if not query or not query.strip():
            raise ValidationError("Query must be a non-empty string")
        validate_search_options(threshold, limit)

        embedding = await self.embed(query)
        matches = await self.retrieve(embedding, threshold, limit)
        for match in matches:
            if match.chapter_id is None:
                continue
            try:
                match.book_slug = await self._store.get_book_slug_for_chapter(match.chapter_id)
            except StorageError:
                logger.warning("Could not resolve book slug for chapter %s", match.chapter_id)
        return matches


def _extract_embedding(response: Any) -> list[float]:
    try:
        embedding = response.data[0].embedding
    except (AttributeError, IndexError, TypeError) as exc:
        logger.error("Malformed embedding response: %r", response)
        raise EmbeddingError("Embedding response did not contain a vector") from exc

    if not embedding or not all(
        isinstance(x, Real) and not isinstance(x, bool) for x in embedding
    ):
        logger.error("Embedding response contained a non-numeric vector")
        raise EmbeddingError("Embedding response did not contain a vector")
    return [float(x) for x in embedding]


def _to_document_match(record: Any) -> DocumentMatch | None:
    if not isinstance(record, dict):
        return None
    content = record.get("content")
    similarity = record.get("similarity")
    if not content or not isinstance(content, str):
        return None
    if isinstance(similarity, bool) or not isinstance(similarity, Real):
        return None
    return DocumentMatch(
        id=record.get("id") or 0,
        content=content,
        similarity=float(similarity),
        book_title=record.get("book_title") or "",
        chapter_title=record.get("chapter_title") or "",
        chapter_id=record.get("chapter_id"),
    )
