"""LLM initialisation: single place to swap providers.

The default target is a local Ollama server, which exposes an
OpenAI-compatible ``/v1/chat/completions`` endpoint, so ``ChatOpenAI``
works unchanged.  Point ``LLM_BASE_URL`` at vLLM or leave it empty for
the OpenAI cloud API.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from langchain_openai import ChatOpenAI

from web_rag.config import settings

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class GenerationModel(ABC):
    """Streams a chat completion as text fragments."""

    @abstractmethod
    def stream(self, messages: Sequence[BaseMessage], *, temperature: float = 0.8) -> Iterator[str]:
        """Yield output fragments in the order the model produces them.

        The returned iterator is lazy, finite and can be consumed once.
        """
        ...


class ChatModelGenerator(GenerationModel):
    """:class:`GenerationModel` backed by a LangChain chat model."""

    def __init__(self, chat_model: BaseChatModel) -> None:
        self._chat_model = chat_model

    def stream(self, messages: Sequence[BaseMessage], *, temperature: float = 0.8) -> Iterator[str]:
        model = self._chat_model.bind(temperature=temperature)
        for chunk in model.stream(list(messages)):
            text = _content_text(chunk.content)
            if text:
                yield text


def _content_text(content: str | list) -> str:
    """Flatten message content, which may be a list of content blocks."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def get_llm(
    temperature: float = settings.llm_temperature,
    *,
    model: str = settings.llm_model_name,
    base_url: str = settings.llm_base_url,
    api_key: str = settings.openai_api_key,
    timeout: float = settings.llm_timeout,
) -> ChatOpenAI:
    """Return the configured chat model.

    A dummy API key (``"EMPTY"``) is used for self-hosted endpoints,
    which do not require authentication.
    """
    kwargs: dict = {
        "model": model,
        "temperature": temperature,
        "timeout": timeout,
    }

    if base_url:
        logger.info("Using chat endpoint: %s", base_url)
        kwargs["base_url"] = base_url
        # Ollama doesn't need a real key; LangChain requires a non-empty value.
        kwargs["api_key"] = api_key or "EMPTY"
    else:
        kwargs["api_key"] = api_key

    return ChatOpenAI(**kwargs)


def get_generator(**kwargs) -> GenerationModel:
    """Build a :class:`GenerationModel` from settings; *kwargs* override them."""
    return ChatModelGenerator(get_llm(**kwargs))
