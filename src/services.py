"""Wires configuration into the pipeline components."""

from dataclasses import dataclass

from src.config import AppConfig
from src.dictionary.service import DictionaryService
from src.llm.client import OpenAIClientProvider
from src.pipeline.generation import AnswerGenerator, ChatService
from src.pipeline.question import QuestionPipeline
from src.query.understanding import QueryAnalyzer
from src.retrieval.chapters import ChapterResolver
from src.retrieval.vector_store import VectorStore
from src.storage.repository import CorpusStore


@dataclass
class Services:
    """The components a request handler needs, built once per process."""

    store: CorpusStore
    chapters: ChapterResolver
    dictionary: DictionaryService
    vector_store: VectorStore
    pipeline: QuestionPipeline
    chat: ChatService


def build_services(
    config: AppConfig, clients: OpenAIClientProvider | None = None
) -> Services:
    """Create all services sharing one store and one model client provider.

    Args:
        config: Loaded application configuration.
        clients: Optional provider override, e.g. a fake in tests.

    Returns:
        A populated Services container.
    """
    clients = clients or OpenAIClientProvider(config.openai_api_key)
    store = CorpusStore(config.storage.sqlite_path)
    chapters = ChapterResolver(store)
    vector_store = VectorStore(store, clients, config.embedding)
    pipeline = QuestionPipeline(
        analyzer=QueryAnalyzer(clients, config.classification),
        chapters=chapters,
        vector_store=vector_store,
        config=config.retrieval,
    )
    chat = ChatService(
        pipeline=pipeline,
        generator=AnswerGenerator(clients, config.generation),
        config=config.retrieval,
    )
    return Services(
        store=store,
        chapters=chapters,
        dictionary=DictionaryService(store),
        vector_store=vector_store,
        pipeline=pipeline,
        chat=chat,
    )
