"""The question pipeline: understand, resolve, retrieve, assemble."""

import asyncio
import logging

from src.config import RetrievalConfig
from src.errors import ValidationError
from src.models.book import ChapterWithContent
from src.models.query_result import AnswerContext, DocumentMatch, QueryUnderstanding
from src.pipeline.context import ContextAssembler
from src.query.understanding import QueryAnalyzer
from src.retrieval.chapters import ChapterResolver
from src.retrieval.vector_store import VectorStore

logger = logging.getLogger(__name__)


class QuestionPipeline:
    """Turns a reader's question into an assembled, attributed context.

    Chapter resolution and similarity retrieval do not depend on each other
    and run concurrently once the question has been analyzed.

    Args:
        analyzer: Query classifier.
        chapters: Chapter resolver.
        vector_store: Embedding and similarity search.
        config: Retrieval settings.
    """

    def __init__(
        self,
        analyzer: QueryAnalyzer,
        chapters: ChapterResolver,
        vector_store: VectorStore,
        config: RetrievalConfig | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._chapters = chapters
        self._vector_store = vector_store
        self._config = config or RetrievalConfig()
        self._assembler = ContextAssembler(self._config)

    async def answer_question(
        self,
        question: str,
        current_chapter_title: str | None = None,
        reference_text: str | None = None,
    ) -> AnswerContext:
        """Build the context for answering ``question``.

        Args:
            question: The user's question.
            current_chapter_title: Title of the chapter open in the reader.
            reference_text: Passage the user selected; biases retrieval.

        Returns:
            The assembled context, its sources and whether a primary chapter
            was found.

        Raises:
            ValidationError: If the question is empty.
            ConfigurationError, EmbeddingError, RetrievalError: On service
                failures during retrieval.
        """
        if not question or not question.strip():
            raise ValidationError("Question is required and must be a non-empty string")
        question = question.strip()

        understanding = await self._analyzer.analyze(question, current_chapter_title)
        logger.info(
            "Query understanding: chapter=%s type=%s current_context=%s search=%r",
            understanding.chapter_number,
            understanding.chapter_type.value if understanding.chapter_type else None,
            understanding.related_to_current_context,
            understanding.search_query,
        )

        wants_primary = self._wants_primary(understanding, current_chapter_title)
        match_count = (
            self._config.match_count_with_primary if wants_primary else self._config.match_count
        )

        primary_task = asyncio.create_task(
            self._resolve_primary(understanding, current_chapter_title)
        )
        try:
            related = await self._retrieve_related(
                understanding.search_query, reference_text, match_count
            )
        except BaseException:
            # Nothing will read the chapter once retrieval has failed
            primary_task.cancel()
            await asyncio.gather(primary_task, return_exceptions=True)
            raise
        primary = await primary_task

        assembled = self._assembler.build(primary, related)
        return AnswerContext(
            context=assembled.context,
            sources=assembled.sources,
            primary_chapter_found=primary is not None,
        )

    @staticmethod
    def _wants_primary(
        understanding: QueryUnderstanding, current_chapter_title: str | None
    ) -> bool:
        if understanding.references_specific_chapter and understanding.chapter_number is not None:
            return True
        return understanding.related_to_current_context and bool(current_chapter_title)

    async def _resolve_primary(
        self, understanding: QueryUnderstanding, current_chapter_title: str | None
    ) -> ChapterWithContent | None:
        if understanding.references_specific_chapter and understanding.chapter_number is not None:
            return await self._chapters.by_number(
                understanding.chapter_number, understanding.chapter_type
            )
        if understanding.related_to_current_context and current_chapter_title:
            return await self._chapters.by_title(current_chapter_title)
        return None

    async def _retrieve_related(
        self, search_query: str, reference_text: str | None, match_count: int
    ) -> list[DocumentMatch]:
        text = search_query
        if reference_text and reference_text.strip():
            reference = reference_text.strip()[: self._config.max_reference_chars]
            text = f"{search_query}\n\n{reference}"
        embedding = await self._vector_store.embed(text)
        return await self._vector_store.retrieve(
            embedding,
            match_threshold=self._config.match_threshold,
            match_count=match_count,
        )
