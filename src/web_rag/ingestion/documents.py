"""Wraps chunks with provenance metadata."""

from __future__ import annotations

from collections.abc import Sequence

from web_rag.retrieval.models import Document


def build_documents(url: str, chunks: Sequence[str]) -> list[Document]:
    """Return one :class:`Document` per chunk, indexed from ``"0"``."""
    return [
        Document(content=chunk, metadata={"source": url, "chunk": str(index)})
        for index, chunk in enumerate(chunks)
    ]
