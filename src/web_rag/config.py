"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

import logging
from uuid import uuid4

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="API key for the chat endpoint (dummy value for Ollama)")
    llm_model_name: str = Field(default="deepseek-r1:1.5b", description="Generation model identifier")
    llm_base_url: str = Field(
        default="http://localhost:11434/v1",
        description=(
            "Base URL of an OpenAI-compatible chat endpoint. The default "
            "points at a local Ollama server. Leave empty to use OpenAI cloud."
        ),
    )
    llm_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    llm_timeout: float = Field(default=120.0, gt=0, description="Seconds before a model call is abandoned")

    # Embedding
    embedding_model: str = "nomic-embed-text:latest"
    embedding_base_url: str = Field(
        default="http://localhost:11434/v1",
        description=(
            "OpenAI-compatible embedding endpoint. When empty, "
            "``embedding_model`` is loaded locally as a sentence-transformer."
        ),
    )

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_path: str = Field(default="", description="Use an on-disk Chroma database at this path instead of a server")
    chroma_collection: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Collection to ingest into. A fresh one is generated per process unless set.",
    )

    # Ingestion
    chunk_size: int = Field(default=512, gt=0)
    chunk_overlap: int = Field(default=0, ge=0)
    batch_size: int = Field(default=10, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    fetch_retries: int = Field(default=0, ge=0)
    write_retries: int = Field(default=0, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)

    # Retrieval
    top_k: int = Field(default=5, gt=0)
    score_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    log_level: str = "WARNING"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _check_overlap(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


# Singleton, import `settings` wherever needed.
settings = Settings()
