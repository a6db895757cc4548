"""Semantic retriever: top-k search with a similarity threshold.

Usage::

    from web_rag.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(store, k=5, score_threshold=0.7)
    for doc in retriever.search("What is pgvector?"):
        print(doc.source, doc.chunk, f"{doc.similarity:.2f}")
"""

from __future__ import annotations

import logging

from web_rag.retrieval.base import VectorStoreBase
from web_rag.retrieval.models import Document

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """Applies the retrieval policy on top of any :class:`VectorStoreBase`.

    The store is asked to filter natively, and the policy is enforced again
    here so that a lax backend can never leak extra or weak matches.

    Parameters
    ----------
    store:
        A concrete vector-store backend.
    k:
        Maximum number of results returned by :meth:`search`.
    score_threshold:
        Minimum similarity in ``[0, 1]``; weaker results are discarded.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        *,
        k: int = 5,
        score_threshold: float = 0.7,
    ) -> None:
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        if not 0.0 <= score_threshold <= 1.0:
            raise ValueError(f"score_threshold must be within [0, 1], got {score_threshold}")
        self._store = store
        self.k = k
        self.score_threshold = score_threshold

    def search(self, query: str) -> list[Document]:
        """Return at most ``k`` documents, most similar first."""
        hits = self._store.similarity_search(query, k=self.k, min_similarity=self.score_threshold)
        results = [doc for doc in hits if doc.similarity is not None and doc.similarity >= self.score_threshold]
        if len(results) < len(hits):
            logger.debug("Dropped %d results below threshold %.2f", len(hits) - len(results), self.score_threshold)
        results.sort(key=lambda doc: doc.similarity, reverse=True)
        return results[: self.k]
