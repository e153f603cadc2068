"""Query understanding: what chapter, if any, is a question about?

Common phrasings are resolved by ordered pattern rules without any network
call. Everything else goes to a small chat model constrained to JSON output.
"""

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from src.chain import StrategyChain
from src.config import ClassificationConfig
from src.llm.client import OpenAIClientProvider
from src.models.query_result import ChapterType, QueryUnderstanding
from src.text.normalizer import fold_case
from src.text.ordinals import (
    ENGLISH_ORDINALS,
    TURKISH_ORDINALS,
    parse_chapter_type,
    parse_ordinal,
)

logger = logging.getLogger(__name__)

TURKISH_PLACEHOLDER_QUERY = "ana tema içerik"
ENGLISH_PLACEHOLDER_QUERY = "main theme content"

TURKISH_SECTION_WORDS: tuple[str, ...] = (
    "söz", "soz", "mektup", "mektub", "lem'a", "lema", "şua", "sua", "bölüm", "bolum",
)
ENGLISH_SECTION_WORDS: tuple[str, ...] = (
    "word", "letter", "flash", "ray", "chapter", "section",
)


def _alternation(words: Any) -> str:
    # Longest first so "on birinci" wins over "birinci"
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


_SECTION_SUFFIX = r"(?:['’]?\w+)?"
_ALL_SECTIONS = _alternation(TURKISH_SECTION_WORDS + ENGLISH_SECTION_WORDS)
_NUMERIC_SUFFIX = r"(?:st|nd|rd|th|['’]?(?:inci|ıncı|uncu|üncü|nci|ncı|ncu|ncü))?"

ORDINAL_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "tr",
        re.compile(
            rf"(?<!\w)(?P<ordinal>{_alternation(TURKISH_ORDINALS)})\s+"
            rf"(?P<section>{_alternation(TURKISH_SECTION_WORDS)}){_SECTION_SUFFIX}"
        ),
    ),
    (
        "en",
        re.compile(
            rf"(?<!\w)(?P<ordinal>{_alternation(ENGLISH_ORDINALS)})\s+"
            rf"(?P<section>{_alternation(ENGLISH_SECTION_WORDS)}){_SECTION_SUFFIX}"
        ),
    ),
)

NUMERIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "4th word", "4. söz", "4üncü söz"
    re.compile(
        rf"(?<!\w)(?P<number>\d{{1,3}}){_NUMERIC_SUFFIX}\s*\.?\s*"
        rf"(?P<section>{_ALL_SECTIONS}){_SECTION_SUFFIX}"
    ),
    # "chapter 4", "söz no. 4", "letter #12"
    re.compile(
        rf"(?<!\w)(?P<section>{_ALL_SECTIONS})\s*(?:#|no\.?|number|numara)?\s*"
        rf"(?P<number>\d{{1,3}})(?!\d)"
    ),
)

CONTEXT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "en",
        re.compile(
            r"(?<!\w)(?:this chapter|this section|this passage|"
            r"what i['’]?m reading|what i am reading)(?!\w)"
        ),
    ),
    (
        "tr",
        re.compile(r"(?<!\w)(?:bu bölüm\w*|bu kısım\w*|bu pasaj\w*|okuduğum\w*|burada)(?!\w)"),
    ),
)

_WHITESPACE = re.compile(r"\s+")
_WORD_CHAR = re.compile(r"\w")


def _ordinal_prompt_lines() -> str:
    first_spelling: dict[int, str] = {}
    for phrase, number in TURKISH_ORDINALS.items():
        first_spelling.setdefault(number, phrase)
    return ", ".join(f"{first_spelling[n]} = {n}" for n in range(1, 11))


QUERY_UNDERSTANDING_PROMPT = f"""You are a query analyzer for the Risale-i Nur collection. Analyze the user's question and extract structured information.

The Risale-i Nur consists of books like:
- Sözler (Words) - chapters called "Söz" (e.g., Birinci Söz = 1st Word, Dördüncü Söz = 4th Word)
- Mektubat (Letters) - chapters called "Mektup"
- Lem'alar (Flashes) - chapters called "Lem'a"
- Şualar (Rays) - chapters called "Şua"

Turkish ordinal numbers: {_ordinal_prompt_lines()}. Compound ordinals join the tens word with the unit ordinal (on birinci = 11, yirmi dördüncü = 24).

Return ONLY a valid JSON object with these fields:
{{
  "referencesSpecificChapter": boolean,
  "chapterNumber": number | null,
  "chapterType": {" | ".join(f'"{t.value}"' for t in ChapterType)} | null,
  "relatedToCurrentContext": boolean,
  "searchQuery": "the core semantic query to search for"
}}

Rules:
- referencesSpecificChapter: true if the user explicitly mentions a chapter number/name
- chapterNumber: the chapter number if mentioned (e.g., "4th chapter" = 4, "dördüncü söz" = 4)
- chapterType: the type of chapter if identifiable
- relatedToCurrentContext: true if the question uses phrases like "this chapter", "this passage", "what I'm reading", "bu bölüm", "burada"
- searchQuery: the core topic/question for semantic search, with chapter references removed

Examples:
Q: "Dördüncü söz ne anlatıyor?" → {{"referencesSpecificChapter":true,"chapterNumber":4,"chapterType":"söz","relatedToCurrentContext":false,"searchQuery":"ana tema ve içerik"}}
Q: "Bu bölümde namazdan bahsediyor mu?" → {{"referencesSpecificChapter":false,"chapterNumber":null,"chapterType":null,"relatedToCurrentContext":true,"searchQuery":"namaz prayer"}}
Q: "İman nedir?" → {{"referencesSpecificChapter":false,"chapterNumber":null,"chapterType":null,"relatedToCurrentContext":false,"searchQuery":"iman faith belief definition"}}"""


def default_understanding(question: str) -> QueryUnderstanding:
    """The safe result: no chapter, no reading context, search the question."""
    return QueryUnderstanding(search_query=question)


def _residual_query(question: str, span: tuple[int, int], language: str) -> str:
    start, end = span
    residual = _WHITESPACE.sub(" ", question[:start] + " " + question[end:]).strip()
    if _WORD_CHAR.search(residual):
        return residual
    return TURKISH_PLACEHOLDER_QUERY if language == "tr" else ENGLISH_PLACEHOLDER_QUERY


def match_ordinal_reference(question: str) -> QueryUnderstanding | None:
    """"Dördüncü Söz", "the fourth word", "on birinci mektup"."""
    folded = fold_case(question)
    for language, pattern in ORDINAL_PATTERNS:
        match = pattern.search(folded)
        if match is None:
            continue
        number = parse_ordinal(match.group("ordinal"))
        if number is None:
            continue
        return QueryUnderstanding(
            references_specific_chapter=True,
            chapter_number=number,
            chapter_type=parse_chapter_type(match.group("section")),
            search_query=_residual_query(question, match.span(), language),
        )
    return None


def match_numeric_reference(question: str) -> QueryUnderstanding | None:
    """"4th Word", "4. söz", "chapter 4"."""
    folded = fold_case(question)
    for pattern in NUMERIC_PATTERNS:
        match = pattern.search(folded)
        if match is None:
            continue
        section = match.group("section")
        language = "tr" if section in TURKISH_SECTION_WORDS else "en"
        return QueryUnderstanding(
            references_specific_chapter=True,
            chapter_number=int(match.group("number")),
            chapter_type=parse_chapter_type(section),
            search_query=_residual_query(question, match.span(), language),
        )
    return None


def match_current_context(question: str) -> QueryUnderstanding | None:
    """"this chapter", "what I'm reading", "bu bölümde", "burada"."""
    folded = fold_case(question)
    for language, pattern in CONTEXT_PATTERNS:
        match = pattern.search(folded)
        if match is None:
            continue
        return QueryUnderstanding(
            related_to_current_context=True,
            search_query=_residual_query(question, match.span(), language),
        )
    return None


FAST_PATH_RULES: tuple[tuple[str, Callable[[str], QueryUnderstanding | None]], ...] = (
    ("ordinal", match_ordinal_reference),
    ("numeric", match_numeric_reference),
    ("current_context", match_current_context),
)


class QueryAnalyzer:
    """Classifies a question's chapter intent and extracts a search query.

    Args:
        clients: Provider of the shared OpenAI client.
        config: Model settings for the fallback classification call.
    """

    def __init__(
        self,
        clients: OpenAIClientProvider,
        config: ClassificationConfig | None = None,
    ) -> None:
        self._clients = clients
        self._config = config or ClassificationConfig()
        self._fast_path: StrategyChain[QueryUnderstanding] = StrategyChain(FAST_PATH_RULES)

    async def analyze(
        self, question: str, current_chapter_title: str | None = None
    ) -> QueryUnderstanding:
        """Analyze a question. Never raises.

        Args:
            question: The user's question.
            current_chapter_title: Title of the chapter open in the reader.

        Returns:
            A QueryUnderstanding; the default result when the model call
            fails or returns something unusable.
        """
        try:
            hit = self._fast_path.run_sync(question)
        except Exception:
            logger.exception("Pattern matching failed for question %r", question)
            hit = None
        if hit is not None:
            rule, understanding = hit
            logger.debug("Question matched fast-path rule %s", rule)
            return understanding

        try:
            return await self._classify_with_model(question, current_chapter_title)
        except Exception:
            logger.exception("Query classification failed; using default result")
            return default_understanding(question)

    async def _classify_with_model(
        self, question: str, current_chapter_title: str | None
    ) -> QueryUnderstanding:
        client = self._clients.get()

        user_message = (
            f'Current chapter being read: "{current_chapter_title}"\n\n'
            f"User question: {question}"
            if current_chapter_title
            else f"User question: {question}"
        )

        completion = await client.chat.completions.create(
            model=self._config.model,
            messages=[
                {"role": "system", "content": QUERY_UNDERSTANDING_PROMPT},
                {"role": "user", "content": user_message},
            ],
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            response_format={"type": "json_object"},
        )

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            logger.warning("Classifier returned an empty response")
            return default_understanding(question)
        return parse_classifier_output(content, question)


def parse_classifier_output(content: str, question: str) -> QueryUnderstanding:
    """Build a QueryUnderstanding from the model's JSON, defaulting each field.

    Both camelCase (as requested in the prompt) and snake_case keys are
    accepted.

    Raises:
        ValueError: If ``content`` is not valid JSON.
    """
    data = json.loads(content)
    if not isinstance(data, dict):
        logger.warning("Classifier returned non-object JSON: %r", content)
        return default_understanding(question)

    def field(camel: str, snake: str) -> Any:
        return data.get(camel, data.get(snake))

    search_query = field("searchQuery", "search_query")
    if not isinstance(search_query, str) or not search_query.strip():
        search_query = question

    return QueryUnderstanding(
        references_specific_chapter=field(
            "referencesSpecificChapter", "references_specific_chapter"
        ) is True,
        chapter_number=_coerce_chapter_number(field("chapterNumber", "chapter_number")),
        chapter_type=_coerce_chapter_type(field("chapterType", "chapter_type")),
        related_to_current_context=field(
            "relatedToCurrentContext", "related_to_current_context"
        ) is True,
        search_query=search_query.strip(),
    )


def _coerce_chapter_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        return None
    return number if number >= 0 else None


def _coerce_chapter_type(value: Any) -> ChapterType | None:
    if not isinstance(value, str):
        return None
    try:
        return ChapterType(value)
    except ValueError:
        return parse_chapter_type(value)
