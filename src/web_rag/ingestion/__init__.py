"""
Ingestion: page fetching, text extraction, chunking and batched storage.

This package turns a list of URLs into provenance-tagged chunks and
loads them into a vector store, skipping sources and batches that fail.
"""

from web_rag.ingestion.pipeline import IngestionPipeline, iter_batches

__all__ = ["IngestionPipeline", "iter_batches"]
