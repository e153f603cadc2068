"""Ordinal and section-type resolution for chapter references.

The tables below are plain data; the resolution functions only read them.
"""

import re

from src.models.query_result import ChapterType
from src.text.normalizer import fold_case

# Turkish ordinal words for 1-9 with their ASCII-only spellings
_TURKISH_UNIT_ORDINALS: dict[int, tuple[str, ...]] = {
    1: ("birinci",),
    2: ("ikinci",),
    3: ("üçüncü", "ucuncu"),
    4: ("dördüncü", "dorduncu"),
    5: ("beşinci", "besinci"),
    6: ("altıncı", "altinci"),
    7: ("yedinci",),
    8: ("sekizinci",),
    9: ("dokuzuncu",),
}

# Tens: (cardinal prefix spellings, ordinal spellings)
_TURKISH_TENS: dict[int, tuple[tuple[str, ...], tuple[str, ...]]] = {
    10: (("on",), ("onuncu",)),
    20: (("yirmi",), ("yirminci",)),
    30: (("otuz",), ("otuzuncu",)),
}

_ENGLISH_UNIT_ORDINALS: dict[int, str] = {
    1: "first",
    2: "second",
    3: "third",
    4: "fourth",
    5: "fifth",
    6: "sixth",
    7: "seventh",
    8: "eighth",
    9: "ninth",
}

_ENGLISH_TEENS: dict[int, str] = {
    10: "tenth",
    11: "eleventh",
    12: "twelfth",
    13: "thirteenth",
    14: "fourteenth",
    15: "fifteenth",
    16: "sixteenth",
    17: "seventeenth",
    18: "eighteenth",
    19: "nineteenth",
}

_ENGLISH_TENS: dict[int, tuple[str, str]] = {
    20: ("twenty", "twentieth"),
    30: ("thirty", "thirtieth"),
}


def _build_turkish_ordinals() -> dict[str, int]:
    table: dict[str, int] = {}
    for number, spellings in _TURKISH_UNIT_ORDINALS.items():
        for spelling in spellings:
            table[spelling] = number
    for tens, (prefixes, ordinals) in _TURKISH_TENS.items():
        for spelling in ordinals:
            table[spelling] = tens
        for prefix in prefixes:
            for unit, spellings in _TURKISH_UNIT_ORDINALS.items():
                for spelling in spellings:
                    table[f"{prefix} {spelling}"] = tens + unit
    return table


def _build_english_ordinals() -> dict[str, int]:
    table: dict[str, int] = {}
    for number, word in _ENGLISH_UNIT_ORDINALS.items():
        table[word] = number
    for number, word in _ENGLISH_TEENS.items():
        table[word] = number
    for tens, (prefix, ordinal) in _ENGLISH_TENS.items():
        table[ordinal] = tens
        for unit, word in _ENGLISH_UNIT_ORDINALS.items():
            table[f"{prefix}-{word}"] = tens + unit
            table[f"{prefix} {word}"] = tens + unit
    return table


# "dördüncü" -> 4, "on birinci" -> 11, "otuz üçüncü" -> 33, ...
TURKISH_ORDINALS: dict[str, int] = _build_turkish_ordinals()

# "fourth" -> 4, "twenty-first" / "twenty first" -> 21, ...
ENGLISH_ORDINALS: dict[str, int] = _build_english_ordinals()

CHAPTER_TYPE_KEYWORDS: dict[ChapterType, tuple[str, ...]] = {
    ChapterType.SOZ: ("söz", "soz", "word", "words", "sözler"),
    ChapterType.MEKTUP: ("mektup", "mektub", "letter", "letters", "mektubat"),
    ChapterType.LEMA: ("lem'a", "lema", "lemalar", "flash", "flashes"),
    ChapterType.SUA: ("şua", "sua", "sualar", "ray", "rays"),
}

# Generic words that name a chapter without naming its section
GENERIC_CHAPTER_WORDS: tuple[str, ...] = ("chapter", "section", "bölüm", "bolum")

DEFAULT_CHAPTER_TYPE = ChapterType.SOZ

_WHITESPACE = re.compile(r"\s+")


def parse_ordinal(phrase: str) -> int | None:
    """Resolve an ordinal phrase in Turkish or English to an integer.

    Args:
        phrase: E.g. "Dördüncü", "on birinci", "Twenty-First".

    Returns:
        The ordinal value, or None if the phrase is not in either table.
    """
    key = _WHITESPACE.sub(" ", fold_case(phrase)).strip()
    if not key:
        return None
    if key in TURKISH_ORDINALS:
        return TURKISH_ORDINALS[key]
    return ENGLISH_ORDINALS.get(key)


def parse_chapter_type(word: str) -> ChapterType | None:
    """Map a section keyword to its chapter type.

    Generic words such as "chapter" or "bölüm" resolve to the most common
    section type rather than None.

    Args:
        word: A section keyword, e.g. "Söz", "letters", "lem'a".

    Returns:
        The matching ChapterType, or None for unrelated words.
    """
    lowered = fold_case(word).strip()
    if not lowered:
        return None
    for chapter_type, keywords in CHAPTER_TYPE_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return chapter_type
    if any(generic in lowered for generic in GENERIC_CHAPTER_WORDS):
        return DEFAULT_CHAPTER_TYPE
    return None
