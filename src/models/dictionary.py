"""Dictionary data models."""

from enum import Enum

from pydantic import BaseModel


class LookupMethod(str, Enum):
    """Which step of the lookup waterfall produced the entry."""

    EXACT = "exact"
    PHRASE_MATCH = "phrase_match"
    SUFFIX_STRIPPED = "suffix_stripped"
    ROOT_WORD = "root_word"


class DictionaryEntry(BaseModel):
    """A row of the dictionary table."""

    word: str
    definition: str
    root_word: str | None = None


class DictionaryResult(BaseModel):
    """Result of a dictionary lookup."""

    found: bool
    entry: DictionaryEntry | None = None
    method: LookupMethod | None = None
