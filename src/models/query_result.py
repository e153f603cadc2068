"""Query-time data models: query understanding, matches and answers."""

from enum import Enum

from pydantic import BaseModel, Field


class ChapterType(str, Enum):
    """Section families of the corpus, each with its own chapter naming."""

    SOZ = "söz"
    MEKTUP = "mektup"
    LEMA = "lem'a"
    SUA = "şua"


class QueryUnderstanding(BaseModel):
    """Structured reading of a user question, produced once per request."""

    references_specific_chapter: bool = False
    chapter_number: int | None = None
    chapter_type: ChapterType | None = None
    related_to_current_context: bool = False
    search_query: str


class DocumentMatch(BaseModel):
    """A passage returned by the nearest-neighbour search."""

    id: int
    content: str
    similarity: float
    book_title: str = ""
    chapter_title: str = ""
    chapter_id: int | None = None
    book_slug: str | None = None


class AssembledContext(BaseModel):
    """Prompt context plus the parallel list of cited sources."""

    context: str = ""
    sources: list[str] = Field(default_factory=list)


class AnswerContext(AssembledContext):
    """Output of the question pipeline, ready for answer generation."""

    primary_chapter_found: bool = False


class ChatRequest(BaseModel):
    """An incoming chat question from the reader."""

    question: str
    current_chapter: str | None = None
    language: str = "tr"  # "tr" or "en"
    reference_text: str | None = None


class ChatResponse(BaseModel):
    """The generated answer and the sources it was grounded on."""

    response: str
    sources: list[str] = Field(default_factory=list)
