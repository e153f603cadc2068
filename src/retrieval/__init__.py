"""Chapter resolution and similarity retrieval."""

from src.retrieval.chapters import CHAPTER_TYPE_BOOK_SLUGS, ChapterResolver
from src.retrieval.vector_store import VectorStore, validate_search_options

__all__ = [
    "CHAPTER_TYPE_BOOK_SLUGS",
    "ChapterResolver",
    "VectorStore",
    "validate_search_options",
]
