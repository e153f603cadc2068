"""Data models for the Muzakir reader assistant."""

from src.models.book import Book, Chapter, ChapterWithContent, Paragraph
from src.models.dictionary import DictionaryEntry, DictionaryResult, LookupMethod
from src.models.query_result import (
    AnswerContext,
    AssembledContext,
    ChapterType,
    ChatRequest,
    ChatResponse,
    DocumentMatch,
    QueryUnderstanding,
)

__all__ = [
    "AnswerContext",
    "AssembledContext",
    "Book",
    "Chapter",
    "ChapterType",
    "ChapterWithContent",
    "ChatRequest",
    "ChatResponse",
    "DictionaryEntry",
    "DictionaryResult",
    "DocumentMatch",
    "LookupMethod",
    "Paragraph",
    "QueryUnderstanding",
]
