"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

import chromadb

from web_rag.config import settings
from web_rag.ingestion.embedder import Embedder
from web_rag.retrieval.base import VectorStoreBase
from web_rag.retrieval.models import REQUIRED_METADATA, Document

logger = logging.getLogger(__name__)

# Cosine distance lies in [0, 2]; similarity is 1 - distance.
DISTANCE_METRIC = "cosine"


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    embedder:
        Converts document and query text to vectors.
    collection_name:
        Name of the Chroma collection; created on first use.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    path:
        When set, an on-disk database at this path is used instead of a
        server connection.
    client:
        A ready Chroma client, bypassing *host* / *port* / *path*.
    """

    def __init__(
        self,
        embedder: Embedder,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        path: str = settings.chroma_path,
        client: Any | None = None,
    ) -> None:
        super().__init__(collection_name)
        self._embedder = embedder
        if client is None:
            if path:
                client = chromadb.PersistentClient(path=path)
            else:
                client = chromadb.HttpClient(host=host, port=port)
        self._client = client
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": DISTANCE_METRIC},
        )
        logger.info("Using Chroma collection %r", collection_name)

    # -- VectorStoreBase overrides --------------------------------------------

    def add_documents(self, documents: Sequence[Document]) -> None:
        if not documents:
            return
        texts = [doc.content for doc in documents]
        self._collection.add(
            ids=[uuid4().hex for _ in documents],
            embeddings=self._embedder.embed_batch(texts),
            documents=texts,
            metadatas=[dict(doc.metadata) for doc in documents],
        )

    def similarity_search(
        self,
        query: str,
        *,
        k: int = 5,
        min_similarity: float = 0.0,
    ) -> list[Document]:
        results = self._collection.query(
            query_embeddings=[self._embedder.embed(query)],
            n_results=k,
            include=["documents", "metadatas", "distances"],
        )

        max_distance = 1.0 - min_similarity
        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        hits: list[Document] = []
        for content, meta, dist in zip(docs, metas, distances):
            if dist > max_distance or not (content or "").strip():
                continue
            metadata = {key: str(value) for key, value in (meta or {}).items()}
            if not all(key in metadata for key in REQUIRED_METADATA):
                logger.debug("Skipping hit without provenance metadata: %r", metadata)
                continue
            hits.append(
                Document(
                    content=content,
                    metadata=metadata,
                    score=dist,
                )
            )
        return hits

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
