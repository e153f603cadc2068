"""Multi-strategy dictionary lookup for the inline word-definition popup."""

import logging
import re

from src.chain import StrategyChain
from src.models.dictionary import DictionaryEntry, DictionaryResult, LookupMethod
from src.storage.repository import CorpusStore
from src.text.affixes import candidate_roots
from src.text.normalizer import normalize_word

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 2
PREFIX_SCAN_LIMIT = 50

_SEPARATORS = re.compile(r"[\s\-‐‑–]+")


def extract_lookup_target(
    selected_text: str, trailing_text: str | None = None, words_after: int = 2
) -> tuple[str, str | None]:
    """Split a reader selection into the clicked word and its phrase context.

    A multi-word selection uses the words after the first as context.
    A single-word selection borrows up to ``words_after`` words from the
    text that follows it in the paragraph.

    Args:
        selected_text: The text the reader selected or double-clicked.
        trailing_text: Paragraph text immediately after the selection.
        words_after: How many trailing words to capture.

    Returns:
        ``(word, context)``; ``word`` is empty when nothing was selected and
        ``context`` is None when no phrase context is available.
    """
    words = selected_text.split()
    if not words:
        return "", None
    if len(words) > 1:
        return words[0], " ".join(words[1:])
    if not trailing_text or words_after <= 0:
        return words[0], None
    context = " ".join(trailing_text.split()[:words_after])
    return words[0], context or None


class DictionaryService:
    """Resolves clicked words against the dictionary table.

    Lookup steps, in priority order (first hit wins):
    1. Exact: the normalized word as a key
    2. Phrase: the word joined with its trailing context (only with context)
    3. Suffix-stripped: candidate roots from the suffix inventory
    4. Root word: the normalized word against the ``root_word`` column

    Args:
        store: Corpus store holding the dictionary table.
    """

    def __init__(self, store: CorpusStore) -> None:
        self._store = store

    async def lookup(self, raw_input: str, context: str | None = None) -> DictionaryResult:
        """Look up a word or phrase. Never raises.

        Args:
            raw_input: The clicked word as it appears in the text.
            context: Following words captured with the selection, if any.

        Returns:
            ``DictionaryResult(found=False)`` when nothing matches or the
            store fails; otherwise the entry and the step that found it.
        """
        normalized = normalize_word(raw_input)
        if len(normalized) < MIN_WORD_LENGTH:
            return DictionaryResult(found=False)

        chain: StrategyChain[DictionaryEntry] = StrategyChain([
            (LookupMethod.EXACT.value, self._exact),
            (LookupMethod.PHRASE_MATCH.value, self._phrase),
            (LookupMethod.SUFFIX_STRIPPED.value, self._suffix_stripped),
            (LookupMethod.ROOT_WORD.value, self._root_word),
        ])
        try:
            hit = await chain.run(raw_input, normalized, context)
        except Exception:
            logger.exception("Dictionary lookup failed for %r", raw_input)
            return DictionaryResult(found=False)

        if hit is None:
            return DictionaryResult(found=False)
        method, entry = hit
        return DictionaryResult(found=True, entry=entry, method=LookupMethod(method))

    async def _exact(
        self, raw_input: str, normalized: str, context: str | None
    ) -> DictionaryEntry | None:
        return await self._store.get_dictionary_entry(normalized)

    async def _phrase(
        self, raw_input: str, normalized: str, context: str | None
    ) -> DictionaryEntry | None:
        if not context:
            return None
        normalized_context = normalize_word(context)
        if not normalized_context:
            return None

        word = raw_input.strip()
        context = context.strip()
        for variant in (f"{word}-{context}", f"{word} {context}", f"{word}{context}"):
            entry = await self._store.get_dictionary_entry(normalize_word(variant))
            if entry is not None:
                return entry

        candidates = await self._store.list_dictionary_prefix(
            normalized, limit=PREFIX_SCAN_LIMIT
        )
        for candidate in candidates:
            continuation = candidate.word[len(normalized):]
            if _continuation_matches(continuation, normalized_context):
                return candidate
        return None

    async def _suffix_stripped(
        self, raw_input: str, normalized: str, context: str | None
    ) -> DictionaryEntry | None:
        for root in candidate_roots(normalized):
            entry = await self._store.get_dictionary_entry(root)
            if entry is not None:
                return entry
        return None

    async def _root_word(
        self, raw_input: str, normalized: str, context: str | None
    ) -> DictionaryEntry | None:
        return await self._store.get_dictionary_entry_by_root(normalized)


def _continuation_matches(continuation: str, context: str) -> bool:
    """Compare the rest of a candidate key with the captured context.

    Tries, in order: equality with separators removed; every context word
    found in (or equal to) some continuation word; substring containment in
    either direction.
    """
    compact_continuation = _SEPARATORS.sub("", continuation)
    compact_context = _SEPARATORS.sub("", context)
    if not compact_continuation or not compact_context:
        return False

    if compact_continuation == compact_context:
        return True

    continuation_words = [w for w in _SEPARATORS.split(continuation) if w]
    context_words = [w for w in _SEPARATORS.split(context) if w]
    if all(
        any(cw == w or cw in w for w in continuation_words) for cw in context_words
    ):
        return True

    return compact_continuation in compact_context or compact_context in compact_continuation
