"""Lazily created OpenAI client shared by the pipeline components."""

import logging
import threading
from typing import Any

from src.errors import ConfigurationError

logger = logging.getLogger(__name__)


class OpenAIClientProvider:
    """Creates the ``AsyncOpenAI`` client on first use and reuses it.

    A missing API key is reported when a component first needs the client,
    not at construction time, so the rest of the application can start and
    serve non-model features without it.

    Args:
        api_key: OpenAI API key, usually ``AppConfig.openai_api_key``.
    """

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key
        self._client: Any = None
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def get(self) -> Any:
        """Return the shared client, creating it if needed.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                if not self._api_key:
                    raise ConfigurationError(
                        "OPENAI_API_KEY environment variable is not set"
                    )
                from openai import AsyncOpenAI

                logger.debug("Creating OpenAI client")
                self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client
