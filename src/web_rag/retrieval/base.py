"""Abstract base class for vector-store backends.

Adding a new backend (pgvector, Qdrant, Pinecone …) only requires
subclassing :class:`VectorStoreBase` and implementing the abstract
methods.  Ingestion and answering never touch a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from web_rag.retrieval.models import Document


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace that isolates
        one ingestion run's documents from others.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add_documents(self, documents: Sequence[Document]) -> None:
        """Embed and persist one batch of *documents*.

        Raises on failure; callers decide whether to skip or abort.
        """
        ...

    @abstractmethod
    def similarity_search(
        self,
        query: str,
        *,
        k: int = 5,
        min_similarity: float = 0.0,
    ) -> list[Document]:
        """Return up to *k* documents closest to *query*, closest first.

        Each returned :class:`Document` carries its distance in ``score``.
        Backends translate *min_similarity* into their native metric, e.g.
        a maximum cosine distance of ``1 - min_similarity``.
        """
        ...

    # -- optional overrides ---------------------------------------------------

    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        return True
