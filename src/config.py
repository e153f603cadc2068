"""Configuration loader for the Muzakir reader assistant."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Muzakir"
    version: str = "1.0.0"
    language: str = "tr"
    log_level: str = "INFO"


class EmbeddingConfig(BaseModel):
    """Embedding model configuration."""

    model: str = "text-embedding-3-small"


class ClassificationConfig(BaseModel):
    """Query classification model configuration."""

    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 200


class RetrievalConfig(BaseModel):
    """Retrieval and context assembly configuration."""

    match_threshold: float = 0.25
    match_count: int = 5
    match_count_with_primary: int = 3
    max_related_sources: int = 3
    max_primary_chars: int = 12000
    max_reference_chars: int = 200
    search_limit: int = 10
    request_timeout_seconds: float = 30.0


class GenerationConfig(BaseModel):
    """LLM answer generation configuration."""

    model: str = "gpt-4o-mini"
    max_tokens: int = 1024
    temperature: float = 0.3


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/muzakir.db"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # API key loaded from environment
    openai_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file, encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override API key from environment
    config.openai_api_key = os.getenv("OPENAI_API_KEY")

    return config
