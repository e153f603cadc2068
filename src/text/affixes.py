"""Heuristic Turkish suffix stripping for dictionary fallback.

This is not a morphological analyzer. It only proposes stems that may exist
in the dictionary when the inflected form does not.
"""

# Ordered longest first within each group; the groups themselves are ordered
# from most to least specific so longer inflection chains are tried first.
TURKISH_SUFFIXES: tuple[str, ...] = (
    # Possessive + case combinations (with and without plural)
    "larımızdan",
    "lerimizden",
    "larınızdan",
    "lerinizden",
    "larımızla",
    "lerimizle",
    "larımıza",
    "lerimize",
    "larımızı",
    "lerimizi",
    "larından",
    "lerinden",
    "ımızdan",
    "imizden",
    "umuzdan",
    "ümüzden",
    "ınızdan",
    "inizden",
    "unuzdan",
    "ünüzden",
    "ümüzle",
    "imizle",
    "ımızla",
    "umuzla",
    "ınızla",
    "unuzla",
    "ümüzü",
    "imizi",
    "ımızı",
    "umuzu",
    "ınızı",
    "unuzu",
    "ümüze",
    "imize",
    "ımıza",
    "umuza",
    "ınıza",
    "unuza",
    # Possessive suffixes
    "larımız",
    "lerimiz",
    "ları",
    "leri",
    "ümüz",
    "imiz",
    "ımız",
    "umuz",
    "ınız",
    "unuz",
    "ünüz",
    "iniz",
    # Plural + case
    "lerden",
    "lardan",
    "lerde",
    "larda",
    "lerin",
    "ların",
    "lere",
    "lara",
    # Case suffixes
    "nden",
    "ndan",
    "den",
    "dan",
    "ten",
    "tan",
    "nin",
    "nın",
    "nun",
    "nün",
    "de",
    "da",
    "te",
    "ta",
    "le",
    "la",
    "in",
    "ın",
    "un",
    "ün",
    # Plural suffixes
    "ler",
    "lar",
    # Simple vowel suffixes
    "e",
    "a",
    "i",
    "ı",
    "u",
    "ü",
)

MIN_STEM_LENGTH = 2


def candidate_roots(word: str) -> list[str]:
    """Propose root forms of a normalized word by stripping suffixes.

    Every suffix of the inventory is tried in a single pass; a stem is
    emitted when the word ends with the suffix and at least two characters
    remain. Candidates follow inventory order, so stems produced by longer,
    more specific suffixes come first.

    Example:
        "kitaplarımızdan" -> ["kitap", "kitaplarımız", ...]

    Args:
        word: A word already passed through ``normalize_word``.

    Returns:
        Ordered, de-duplicated candidate stems. Each is at least two
        characters long and shorter than ``word``.
    """
    candidates: list[str] = []
    for suffix in TURKISH_SUFFIXES:
        if not word.endswith(suffix):
            continue
        stem = word[: -len(suffix)]
        if len(stem) >= MIN_STEM_LENGTH and stem not in candidates:
            candidates.append(stem)
    return candidates
