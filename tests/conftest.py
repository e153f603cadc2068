"""Shared fixtures: a small seeded corpus and fake OpenAI clients."""

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from src.llm.client import OpenAIClientProvider
from src.storage.database import get_connection, initialize_database
from src.storage.repository import CorpusStore

BOOKS = [
    (1, "Sözler", "sozler"),
    (2, "Mektubat", "mektubat"),
    (3, "Lem'alar", "lemalar"),
]

# (id, book_id, title, chapter_number)
CHAPTERS = [
    (1, 1, "Birinci Söz", 1),
    (2, 1, "Dördüncü Söz Üzerine", 2),
    (3, 1, "Dördüncü Söz", 4),
    (4, 1, "The Ninth Word", 9),
    (5, 2, "Dördüncü Mektup", 4),
    (6, 3, "Altıncı Lem'a", 6),
]

# (id, chapter_id, content, sequence_number); inserted out of order on purpose
PARAGRAPHS = [
    (3, 3, "Üçüncü paragraf.", 3),
    (1, 3, "Birinci paragraf.", 1),
    (2, 3, "İkinci paragraf.", 2),
    (4, 4, "Namaz bir hizmettir.", 1),
    (5, 4, "Namaz bir ticarettir.", 2),
    (6, 5, "Mektup içeriği.", 1),
]

# (id, chapter_id, content, embedding)
DOCUMENTS = [
    (1, 3, "Dördüncü Söz'den bir pasaj.", [1.0, 0.0, 0.0]),
    (2, 4, "Namaz hakkında bir pasaj.", [0.9, 0.1, 0.0]),
    (3, 5, "Mektubat'tan alakasız bir pasaj.", [0.0, 1.0, 0.0]),
    (4, 1, "Birinci Söz'den bir pasaj.", [0.8, 0.0, 0.2]),
    (5, None, "Bölümsüz bir pasaj.", [0.0, 0.0, 1.0]),
    (6, 5, "Mektubat'tan ilgili bir pasaj.", [0.7, 0.7, 0.0]),
]

# (word, definition, root_word)
DICTIONARY = [
    ("kitap", "book", None),
    ("kalb", "heart", None),
    ("kalbe", "to the heart", "kalb"),
    ("ehl-i sünnet", "people of the prophetic tradition", None),
    ("hayat-ı bâkiye", "eternal life", None),
    ("mücahede", "striving", "cihad"),
]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "corpus.db"
    initialize_database(path)
    conn = get_connection(path)
    try:
        conn.executemany("INSERT INTO books (id, title, slug) VALUES (?, ?, ?)", BOOKS)
        conn.executemany(
            "INSERT INTO chapters (id, book_id, title, chapter_number) VALUES (?, ?, ?, ?)",
            CHAPTERS,
        )
        conn.executemany(
            "INSERT INTO paragraphs (id, chapter_id, content, sequence_number) "
            "VALUES (?, ?, ?, ?)",
            PARAGRAPHS,
        )
        conn.executemany(
            "INSERT INTO documents (id, chapter_id, content, embedding) VALUES (?, ?, ?, ?)",
            [(i, c, text, json.dumps(vec)) for i, c, text, vec in DOCUMENTS],
        )
        conn.executemany(
            "INSERT INTO dictionary (word, definition, root_word) VALUES (?, ?, ?)",
            DICTIONARY,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def store(db_path: Path) -> CorpusStore:
    return CorpusStore(db_path)


@pytest.fixture
def broken_store(tmp_path: Path) -> CorpusStore:
    """A store whose database file cannot be opened."""
    return CorpusStore(tmp_path / "missing" / "corpus.db")


class FakeEmbeddings:
    def __init__(self, vector: list[float] | None = None, error: Exception | None = None) -> None:
        self.vector = vector if vector is not None else [1.0, 0.0, 0.0]
        self.error = error
        self.response: Any = None
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return SimpleNamespace(data=[SimpleNamespace(embedding=list(self.vector))])


class FakeChatCompletions:
    """Returns queued contents in order; an Exception in the queue is raised."""

    def __init__(self, responses: list[Any] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        content = self.responses.pop(0) if self.responses else None
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
        )


class FakeOpenAI:
    def __init__(self) -> None:
        self.embeddings = FakeEmbeddings()
        self.completions = FakeChatCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


class FakeClientProvider(OpenAIClientProvider):
    """Provider that hands out a pre-built fake client."""

    def __init__(self, client: FakeOpenAI) -> None:
        super().__init__(api_key="test-key")
        self._client = client


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def clients(fake_openai: FakeOpenAI) -> FakeClientProvider:
    return FakeClientProvider(fake_openai)
