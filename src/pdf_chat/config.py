"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings, populated from ``PDF_CHAT_*`` env vars or a .env file."""

    # LLM
    llm_base_url: str = Field(
        default="http://localhost:11435/v1",
        description=(
            "OpenAI-compatible endpoint of the locally hosted model, e.g. an "
            "Ollama server's '/v1' route or a vLLM server."
        ),
    )
    llm_model_name: str = Field(default="llama2", description="Model identifier served by the endpoint")
    llm_api_key: str = Field(default="", description="API key; local servers accept any value")
    llm_temperature: float = 0.0

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Chunking
    chunk_size: int = 500
    chunk_overlap: int = 50

    # Retrieval
    retrieval_k: int = 4
    collection_prefix: str = "pdf_chat"

    # Diagnostics
    log_chunks: bool = Field(default=True, description="Emit the chunk list as a log event on ingest")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PDF_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level instance; import `settings` rather than constructing Settings.
settings = Settings()
