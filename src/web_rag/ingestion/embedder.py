"""Text → vector conversion behind a small interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from web_rag.config import settings

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Converts text into fixed-dimension vectors."""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed a single query string."""
        ...

    @abstractmethod
    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed several documents in one call, preserving order."""
        ...


class LangChainEmbedder(Embedder):
    """Adapter over any LangChain :class:`Embeddings` implementation."""

    def __init__(self, embeddings: Embeddings) -> None:
        self._embeddings = embeddings

    def embed(self, text: str) -> list[float]:
        return self._embeddings.embed_query(text)

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        return self._embeddings.embed_documents(list(texts))


def get_embedding_function(
    model: str = settings.embedding_model,
    base_url: str = settings.embedding_base_url,
    *,
    api_key: str = settings.openai_api_key,
    timeout: float = settings.llm_timeout,
) -> Embeddings:
    """Return the configured LangChain embedding function.

    With a *base_url* the model is served by an OpenAI-compatible endpoint
    (Ollama, vLLM, OpenAI); otherwise it is loaded locally as a
    sentence-transformer.
    """
    if base_url:
        from langchain_openai import OpenAIEmbeddings

        logger.info("Using embedding endpoint %s (model %s)", base_url, model)
        # Non-OpenAI servers expect raw strings, not pre-tokenised input.
        return OpenAIEmbeddings(
            model=model,
            base_url=base_url,
            api_key=api_key or "EMPTY",
            timeout=timeout,
            check_embedding_ctx_length=False,
        )

    from langchain_huggingface import HuggingFaceEmbeddings

    logger.info("Loading local embedding model %s", model)
    return HuggingFaceEmbeddings(model_name=model)


def get_embedder(**kwargs) -> Embedder:
    """Build an :class:`Embedder` from settings; *kwargs* override them."""
    return LangChainEmbedder(get_embedding_function(**kwargs))
