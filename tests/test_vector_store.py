"""Tests for embedding generation and similarity retrieval."""

from types import SimpleNamespace
from typing import Any

import pytest

from src.errors import (
    ConfigurationError,
    EmbeddingError,
    RetrievalError,
    ValidationError,
)
from src.llm.client import OpenAIClientProvider
from src.retrieval.vector_store import VectorStore, validate_search_options
from src.storage.repository import CorpusStore


class RecordingStore:
    """Stands in for CorpusStore.match_documents and records calls."""

    def __init__(self, records: list[Any] | None = None) -> None:
        self.records = records or []
        self.calls: list[tuple[Any, ...]] = []

    async def match_documents(self, embedding, match_threshold, match_count):
        self.calls.append((embedding, match_threshold, match_count))
        return self.records


@pytest.fixture
def vector_store(store: CorpusStore, clients: OpenAIClientProvider) -> VectorStore:
    return VectorStore(store, clients)


class TestValidateSearchOptions:
    @pytest.mark.parametrize("threshold", [-0.1, 1.5, float("nan"), True, "0.5"])
    def test_bad_threshold(self, threshold: Any) -> None:
        with pytest.raises(ValidationError, match="match_threshold"):
            validate_search_options(threshold, 5)

    @pytest.mark.parametrize("count", [0, 101, 2.5, False])
    def test_bad_count(self, count: Any) -> None:
        with pytest.raises(ValidationError, match="match_count"):
            validate_search_options(0.3, count)

    @pytest.mark.parametrize("threshold,count", [(0.0, 1), (1.0, 100), (0.25, 5)])
    def test_bounds_accepted(self, threshold: float, count: int) -> None:
        validate_search_options(threshold, count)


class TestEmbed:
    @pytest.mark.asyncio
    async def test_returns_vector(self, vector_store: VectorStore, fake_openai) -> None:
        vector = await vector_store.embed("  namaz  ")
        assert vector == [1.0, 0.0, 0.0]
        assert fake_openai.embeddings.calls == [
            {"model": "text-embedding-3-small", "input": "namaz"}
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n"])
    async def test_empty_text_rejected_before_call(
        self, vector_store: VectorStore, fake_openai, text: str
    ) -> None:
        with pytest.raises(ValidationError):
            await vector_store.embed(text)
        assert fake_openai.embeddings.calls == []

    @pytest.mark.asyncio
    async def test_missing_api_key(self, store: CorpusStore) -> None:
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            await VectorStore(store, OpenAIClientProvider(None)).embed("namaz")

    @pytest.mark.asyncio
    async def test_service_failure_wrapped(self, vector_store: VectorStore, fake_openai) -> None:
        fake_openai.embeddings.error = RuntimeError("boom")
        with pytest.raises(EmbeddingError, match="Failed to generate embedding"):
            await vector_store.embed("namaz")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(data=[]),
            SimpleNamespace(),
            SimpleNamespace(data=[SimpleNamespace(embedding=[])]),
            SimpleNamespace(data=[SimpleNamespace(embedding=["a", "b"])]),
        ],
    )
    async def test_malformed_response(
        self, vector_store: VectorStore, fake_openai, response: Any
    ) -> None:
        fake_openai.embeddings.response = response
        with pytest.raises(EmbeddingError):
            await vector_store.embed("namaz")


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_sorted_matches_above_threshold(self, vector_store: VectorStore) -> None:
        matches = await vector_store.retrieve([1.0, 0.0, 0.0], match_threshold=0.25, match_count=5)
        assert [m.id for m in matches] == [1, 2, 4, 6]
        assert matches[0].similarity == pytest.approx(1.0)
        assert matches[0].book_title == "Sözler"
        assert matches[0].chapter_title == "Dördüncü Söz"
        assert matches[0].chapter_id == 3

    @pytest.mark.asyncio
    async def test_match_count_limits(self, vector_store: VectorStore) -> None:
        matches = await vector_store.retrieve([1.0, 0.0, 0.0], match_threshold=0.25, match_count=2)
        assert [m.id for m in matches] == [1, 2]

    @pytest.mark.asyncio
    async def test_nothing_above_threshold(self, vector_store: VectorStore) -> None:
        assert await vector_store.retrieve([0.0, -1.0, 0.0], match_threshold=0.5) == []

    @pytest.mark.asyncio
    async def test_out_of_range_threshold_rejected_before_call(
        self, clients: OpenAIClientProvider
    ) -> None:
        recording = RecordingStore()
        vector_store = VectorStore(recording, clients)  # type: ignore[arg-type]
        with pytest.raises(ValidationError, match="match_threshold"):
            await vector_store.retrieve([1.0], match_threshold=1.5)
        assert recording.calls == []

    @pytest.mark.asyncio
    async def test_malformed_records_dropped(self, clients: OpenAIClientProvider) -> None:
        recording = RecordingStore([
            {"id": 1, "content": "ok", "similarity": 0.9, "book_title": "B", "chapter_title": "C"},
            {"id": 2, "similarity": 0.8},
            {"id": 3, "content": "", "similarity": 0.8},
            {"id": 4, "content": "bad score", "similarity": "0.7"},
            {"id": 5, "content": "no score"},
            "not a record",
        ])
        vector_store = VectorStore(recording, clients)  # type: ignore[arg-type]
        matches = await vector_store.retrieve([1.0])
        assert [m.id for m in matches] == [1]

    @pytest.mark.asyncio
    async def test_storage_failure_wrapped(
        self, broken_store: CorpusStore, clients: OpenAIClientProvider
    ) -> None:
        with pytest.raises(RetrievalError, match="similar documents"):
            await VectorStore(broken_store, clients).retrieve([1.0, 0.0, 0.0])


class TestSearch:
    @pytest.mark.asyncio
    async def test_enriches_book_slug(self, vector_store: VectorStore) -> None:
        matches = await vector_store.search("namaz", limit=10, threshold=0.25)
        slugs = {m.id: m.book_slug for m in matches}
        assert slugs[1] == "sozler"
        assert slugs[6] == "mektubat"

    @pytest.mark.asyncio
    async def test_empty_query_rejected(self, vector_store: VectorStore, fake_openai) -> None:
        with pytest.raises(ValidationError):
            await vector_store.search("  ")
        assert fake_openai.embeddings.calls == []
