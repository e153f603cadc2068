"""Corpus data models: books, chapters and paragraphs."""

from pydantic import BaseModel


class Book(BaseModel):
    """One volume of the corpus."""

    id: int
    title: str
    slug: str


class Chapter(BaseModel):
    """A chapter row joined with its parent book's title and slug.

    ``chapter_number`` is unique within a book and starts at 1
    (0 for front matter).
    """

    id: int
    book_id: int
    title: str
    chapter_number: int
    book_title: str = ""
    book_slug: str = ""


class Paragraph(BaseModel):
    """A paragraph of a chapter, ordered by ``sequence_number``."""

    id: int
    chapter_id: int
    content: str
    sequence_number: int


class ChapterWithContent(BaseModel):
    """A chapter assembled on demand from its paragraphs."""

    id: int
    title: str
    chapter_number: int
    book_title: str
    content: str = ""
