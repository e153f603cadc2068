"""Dictionary lookup for inline word definitions."""

from src.dictionary.service import DictionaryService, extract_lookup_target

__all__ = ["DictionaryService", "extract_lookup_target"]
