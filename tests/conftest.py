"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from web_rag.retrieval.base import VectorStoreBase
from web_rag.retrieval.models import Document


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class FakeVectorStore(VectorStoreBase):
    """In-memory store recording every write and query.

    ``hits`` are returned verbatim (ignoring ``min_similarity``) so tests
    can check that callers enforce the retrieval policy themselves.  When
    ``hits`` is ``None``, written documents are returned with distance 0.1.
    ``fail_calls`` lists zero-based ``add_documents`` calls that raise.
    """

    def __init__(
        self,
        hits: list[Document] | None = None,
        *,
        fail_calls: Sequence[int] = (),
        healthy: bool = True,
    ) -> None:
        super().__init__("test-collection")
        self.hits = hits
        self.fail_calls = set(fail_calls)
        self.healthy = healthy
        self.calls: list[list[Document]] = []
        self.stored: list[Document] = []
        self.queries: list[tuple[str, int, float]] = []

    def add_documents(self, documents: Sequence[Document]) -> None:
        call = len(self.calls)
        self.calls.append(list(documents))
        if call in self.fail_calls:
            raise RuntimeError(f"write {call} rejected")
        self.stored.extend(documents)

    def similarity_search(self, query: str, *, k: int = 5, min_similarity: float = 0.0) -> list[Document]:
        self.queries.append((query, k, min_similarity))
        if self.hits is None:
            return [doc.with_score(0.1) for doc in self.stored[:k]]
        return self.hits[:k]

    def health_check(self) -> bool:
        return self.healthy


def make_doc(content: str, similarity: float | None = None, *, source: str = "https://example.com", chunk: int = 0) -> Document:
    """Build a document; *similarity* is stored as a cosine distance."""
    doc = Document(content=content, metadata={"source": source, "chunk": str(chunk)})
    if similarity is not None:
        doc = doc.with_score(1.0 - similarity)
    return doc


@pytest.fixture()
def store_factory() -> type[FakeVectorStore]:
    return FakeVectorStore


@pytest.fixture()
def doc_factory():
    return make_doc
