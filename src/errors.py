"""Exception types raised by the query pipeline.

Not-found outcomes are never errors: missing chapters resolve to ``None``,
missing dictionary words to ``DictionaryResult(found=False)`` and empty
similarity searches to ``[]``.
"""


class MuzakirError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(MuzakirError):
    """A required setting (usually an API key) is missing."""


class ValidationError(MuzakirError, ValueError):
    """Input rejected before any I/O was issued."""


class StorageError(MuzakirError):
    """The corpus store failed to answer a read."""


class EmbeddingError(MuzakirError):
    """The embedding service failed or returned a malformed response."""


class RetrievalError(MuzakirError):
    """The nearest-neighbour search failed."""


class GenerationError(MuzakirError):
    """The answer model failed to produce a completion."""
