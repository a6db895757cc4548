"""
Retrieval: vector storage, similarity search and the top-k policy.

This module wraps the vector store behind a clean interface so that
ingestion and answering never need to know which DB is backing them.

Public surface
--------------
- :class:`SemanticRetriever`: top-k search with a similarity threshold.
- :class:`VectorStoreBase`: abstract backend (subclass for pgvector, etc.).
- :class:`ChromaVectorStore`: default Chroma backend.
- :class:`Document`, :class:`IngestionReport`: data models.
"""

from web_rag.retrieval.base import VectorStoreBase
from web_rag.retrieval.models import Document, IngestionReport
from web_rag.retrieval.retriever import SemanticRetriever

__all__ = [
    "ChromaVectorStore",
    "Document",
    "IngestionReport",
    "SemanticRetriever",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from web_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
