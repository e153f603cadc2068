"""Access to the hosted model APIs."""

from src.llm.client import OpenAIClientProvider

__all__ = ["OpenAIClientProvider"]
