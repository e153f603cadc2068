"""Query understanding."""

from src.query.understanding import QueryAnalyzer, default_understanding

__all__ = ["QueryAnalyzer", "default_understanding"]
