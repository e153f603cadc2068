"""Turkish-aware text normalization shared by lookups and matching."""

import re

# Characters removed from dictionary lookup keys
PUNCTUATION_PATTERN = re.compile(r"[.,;!?'\"()\[\]{}:]")


def fold_case(text: str) -> str:
    """Lowercase text without changing its length.

    ``str.lower`` turns the Turkish dotted capital ``İ`` into two code points
    (``i`` plus a combining dot), which breaks span arithmetic on the original
    string. Mapping it to a plain ``i`` first keeps offsets aligned.

    Args:
        text: Text to lowercase.

    Returns:
        Lowercased text of the same length.
    """
    return text.replace("İ", "i").lower()


def title_key(text: str) -> str:
    """Comparison key for case-insensitive title matching.

    Collapses ``I``, ``ı``, ``İ`` and ``i`` into ``i`` so "ALTINCI" matches
    "Altıncı". Unlike ``fold_case`` the result is not aligned with the input.
    """
    return text.replace("İ", "i").lower().replace("ı", "i")


def turkish_lower(text: str) -> str:
    """Lowercase using Turkish rules (``I -> ı``, ``İ -> i``)."""
    return text.replace("İ", "i").replace("I", "ı").lower()


def normalize_word(text: str) -> str:
    """Normalize a word or phrase into a dictionary lookup key.

    Lowercases with Turkish rules, removes punctuation and trims surrounding
    whitespace. Hyphens and inner spaces are kept because multi-word entries
    are stored with them.

    Example:
        "Kitabın," -> "kitabın"
        "İMAN" -> "iman"

    Args:
        text: Raw word or phrase.

    Returns:
        The normalized key, or an empty string for empty input.
    """
    if not text:
        return ""
    return PUNCTUATION_PATTERN.sub("", turkish_lower(text)).strip()
