"""
Generation: chat-model access and prompt assembly.
"""

from web_rag.generation.prompts import build_answer_prompt, format_context

__all__ = [
    "ChatModelGenerator",
    "GenerationModel",
    "build_answer_prompt",
    "format_context",
    "get_generator",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import the model layer to avoid pulling in langchain_openai at import time."""
    if name in ("ChatModelGenerator", "GenerationModel", "get_generator"):
        from web_rag.generation import llm

        return getattr(llm, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
