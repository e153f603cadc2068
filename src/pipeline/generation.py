"""Answer generation on top of the assembled context."""

import asyncio
import logging

from src.config import GenerationConfig, RetrievalConfig
from src.errors import GenerationError
from src.llm.client import OpenAIClientProvider
from src.models.query_result import AnswerContext, ChatRequest, ChatResponse
from src.pipeline.question import QuestionPipeline

logger = logging.getLogger(__name__)

NO_CONTEXT_MARKER = "No relevant context was found in the database for this question."
FALLBACK_RESPONSE = (
    "I apologize, but I was unable to generate a response. Please try again."
)

SYSTEM_PROMPT = """You are Muzakir, a knowledgeable and helpful AI assistant specialized in the Risale-i Nur collection by Bediüzzaman Said Nursi.

Your role is to help users understand and explore the spiritual and philosophical teachings contained in these works.

INSTRUCTIONS:
1. Base your answers on the Context provided below. The Context contains relevant excerpts from the Risale-i Nur.
2. When a PRIMARY SOURCE is present, it is the chapter the user asked about; focus your answer on it and use related sources only as support.
3. Synthesize and explain the information from the Context in a clear, helpful manner.
4. Maintain a respectful, scholarly tone appropriate for religious and philosophical discussion.
5. If the Context does not contain information relevant to the question, say so and suggest the user try a different question. Do not invent quotations."""

LANGUAGE_INSTRUCTIONS = {
    "tr": "Answer in Turkish.",
    "en": "Answer in English.",
}


class AnswerGenerator:
    """Calls the chat model with the question and its assembled context.

    Args:
        clients: Provider of the shared OpenAI client.
        config: Generation model settings.
    """

    def __init__(
        self,
        clients: OpenAIClientProvider,
        config: GenerationConfig | None = None,
    ) -> None:
        self._clients = clients
        self._config = config or GenerationConfig()

    async def generate(
        self,
        question: str,
        context: str,
        current_chapter_title: str | None = None,
        language: str = "tr",
    ) -> str:
        """Generate an answer.

        An empty ``context`` is replaced by an explicit no-context marker so
        the model declines instead of answering from memory.

        Raises:
            ConfigurationError: If the OpenAI API key is not set.
            GenerationError: If the model call fails.
        """
        client = self._clients.get()
        try:
            completion = await client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": self._system_prompt(language)},
                    {
                        "role": "user",
                        "content": build_user_message(question, context, current_chapter_title),
                    },
                ],
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except Exception as exc:
            logger.exception("Chat completion failed")
            raise GenerationError("Failed to generate an answer") from exc

        content = completion.choices[0].message.content if completion.choices else None
        return content or FALLBACK_RESPONSE

    @staticmethod
    def _system_prompt(language: str) -> str:
        instruction = LANGUAGE_INSTRUCTIONS.get(language)
        return f"{SYSTEM_PROMPT}\n\n{instruction}" if instruction else SYSTEM_PROMPT


def build_user_message(
    question: str, context: str, current_chapter_title: str | None = None
) -> str:
    """Compose the user turn sent to the answer model."""
    message = (
        f"Context:\n{context}\n\n---\n\nUser Question: {question}"
        if context
        else f"{NO_CONTEXT_MARKER}\n\nUser Question: {question}"
    )
    if current_chapter_title:
        message += f"\n\n(The user is currently reading: {current_chapter_title})"
    return message


class ChatService:
    """Request-level entry point: context assembly, then generation.

    Context assembly runs under ``request_timeout_seconds``; a timeout is
    treated as "no relevant context" rather than failing the request.

    Args:
        pipeline: Question pipeline.
        generator: Answer generator.
        config: Retrieval settings holding the timeout.
    """

    def __init__(
        self,
        pipeline: QuestionPipeline,
        generator: AnswerGenerator,
        config: RetrievalConfig | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._generator = generator
        self._config = config or RetrievalConfig()

    async def respond(self, request: ChatRequest) -> ChatResponse:
        try:
            answer_context = await asyncio.wait_for(
                self._pipeline.answer_question(
                    request.question,
                    current_chapter_title=request.current_chapter,
                    reference_text=request.reference_text,
                ),
                timeout=self._config.request_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Context assembly timed out after %.1fs; answering without context",
                self._config.request_timeout_seconds,
            )
            answer_context = AnswerContext()

        question = request.question.strip()
        if request.reference_text:
            question = f'Regarding the passage "{request.reference_text.strip()}": {question}'

        response = await self._generator.generate(
            question,
            answer_context.context,
            current_chapter_title=request.current_chapter,
            language=request.language,
        )
        return ChatResponse(response=response, sources=answer_context.sources)
