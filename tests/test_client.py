"""Tests for the shared OpenAI client provider."""

import pytest

from src.errors import ConfigurationError
from src.llm.client import OpenAIClientProvider


class TestOpenAIClientProvider:
    def test_missing_key_reported_on_first_use(self) -> None:
        provider = OpenAIClientProvider(None)
        assert provider.is_configured is False
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            provider.get()

    def test_empty_key_is_missing(self) -> None:
        with pytest.raises(ConfigurationError):
            OpenAIClientProvider("").get()

    def test_client_created_once(self) -> None:
        provider = OpenAIClientProvider("sk-test")
        assert provider.is_configured is True
        first = provider.get()
        assert provider.get() is first
