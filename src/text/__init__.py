"""Text utilities: normalization, suffix stripping and ordinal parsing."""

from src.text.affixes import TURKISH_SUFFIXES, candidate_roots
from src.text.normalizer import fold_case, normalize_word, title_key, turkish_lower
from src.text.ordinals import (
    ENGLISH_ORDINALS,
    TURKISH_ORDINALS,
    parse_chapter_type,
    parse_ordinal,
)

__all__ = [
    "ENGLISH_ORDINALS",
    "TURKISH_ORDINALS",
    "TURKISH_SUFFIXES",
    "candidate_roots",
    "fold_case",
    "normalize_word",
    "parse_chapter_type",
    "parse_ordinal",
    "title_key",
    "turkish_lower",
]
