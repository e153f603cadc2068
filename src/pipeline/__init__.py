"""Question pipeline: context assembly and answer generation."""

from src.pipeline.context import ContextAssembler
from src.pipeline.generation import AnswerGenerator, ChatService
from src.pipeline.question import QuestionPipeline

__all__ = [
    "AnswerGenerator",
    "ChatService",
    "ContextAssembler",
    "QuestionPipeline",
]
