"""Prompt templates for grounded answering.

Keeping prompts in one place makes them easy to audit, version, and A/B
test.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from web_rag.retrieval.models import Document

PREVIEW_CHARS = 100

ANSWER_SYSTEM = """\
You are a knowledge-base question answering assistant. The following \
documents were retrieved by vector similarity:

{context}
Answer the user's question based on the references above. When answering:
1. Prefer the references with higher similarity.
2. If the references are not sufficient to answer the question completely, \
say so explicitly.
"""


def build_answer_prompt(question: str, documents: Sequence[Document]) -> list[BaseMessage]:
    """Assemble the two-message prompt for a grounded answer.

    The system message embeds the numbered context; the user message is
    the question, verbatim.
    """
    return [
        SystemMessage(content=ANSWER_SYSTEM.format(context=format_context(documents))),
        HumanMessage(content=question),
    ]


def format_context(documents: Sequence[Document]) -> str:
    """Numbered listing ``"1. [similarity: 0.812345] …"`` in rank order."""
    lines = [
        f"{rank}. [similarity: {doc.similarity or 0.0:f}] {doc.content}\n"
        for rank, doc in enumerate(documents, 1)
    ]
    return "".join(lines)


def preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    """First *limit* characters on one line, with ``...`` when truncated."""
    if len(content) > limit:
        content = content[:limit] + "..."
    return content.replace("\n", " ")


def format_result(rank: int, doc: Document) -> str:
    """Two-line display of one retrieval result."""
    return (
        f"{rank}. [source: {doc.source}, chunk: {doc.chunk}, similarity: {doc.similarity or 0.0:.2f}]\n"
        f"   Summary: {preview(doc.content)}"
    )
