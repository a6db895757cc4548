"""Ingestion orchestrator: pages in, batched documents out.

Drives fetch → extract → chunk → build for every URL, tolerating
per-URL failures, then writes the collected documents to a vector store
in fixed-size batches.  This is a best-effort bulk load: a failed batch
is reported and skipped, never rolled back.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator, Sequence
from typing import TextIO

from web_rag.exceptions import ExtractionError, IngestionError
from web_rag.ingestion.chunker import split_text
from web_rag.ingestion.documents import build_documents
from web_rag.ingestion.extractor import extract_text
from web_rag.ingestion.fetcher import fetch_html
from web_rag.retrieval.base import VectorStoreBase
from web_rag.retrieval.models import Document, IngestionReport
from web_rag.retry import call_with_retries

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def iter_batches(documents: Sequence[Document], batch_size: int) -> Iterator[Sequence[Document]]:
    """Yield consecutive slices of at most *batch_size* documents."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    for start in range(0, len(documents), batch_size):
        yield documents[start : start + batch_size]


class IngestionPipeline:
    """Loads web pages into a :class:`VectorStoreBase`.

    Parameters
    ----------
    store:
        Destination vector store; its collection is the ingestion target.
    chunk_size / chunk_overlap:
        Forwarded to the splitter.
    batch_size:
        Documents per store write.
    request_timeout / fetch_retries:
        Forwarded to the fetcher.
    write_retries:
        Extra attempts per failed batch before it is skipped.
    retry_backoff:
        Base backoff in seconds for fetch and write retries.
    fetcher / extractor / splitter:
        Stage callables, replaceable for other sources or in tests.
    out:
        Stream receiving human-readable progress.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        *,
        chunk_size: int = 512,
        chunk_overlap: int = 0,
        batch_size: int = 10,
        request_timeout: float = 30.0,
        fetch_retries: int = 0,
        write_retries: int = 0,
        retry_backoff: float = 1.0,
        fetcher: Callable[..., str] = fetch_html,
        extractor: Callable[[str], str] = extract_text,
        splitter: Callable[..., list[str]] = split_text,
        out: TextIO | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._store = store
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.batch_size = batch_size
        self.request_timeout = request_timeout
        self.fetch_retries = fetch_retries
        self.write_retries = write_retries
        self.retry_backoff = retry_backoff
        self._fetch = fetcher
        self._extract = extractor
        self._split = splitter
        self._out = out or sys.stdout
        self._urls_succeeded: list[str] = []
        self._urls_failed: dict[str, str] = {}

    # -- public API -----------------------------------------------------------

    def ingest(self, urls: Sequence[str], on_progress: ProgressCallback | None = None) -> IngestionReport:
        """Load every URL and write the resulting documents to the store."""
        documents = self.load_documents(urls)
        return self.add_documents(documents, on_progress=on_progress)

    def load_documents(self, urls: Sequence[str]) -> list[Document]:
        """Fetch, extract, chunk and wrap every URL.

        Raises
        ------
        ValueError
            If *urls* is empty.
        IngestionError
            If not a single URL produced documents.
        """
        if not urls:
            raise ValueError("At least one URL is required")

        self._urls_succeeded = []
        self._urls_failed = {}
        all_docs: list[Document] = []
        for url in urls:
            try:
                docs = self.load_url(url)
            except Exception as exc:
                logger.warning("Skipping %s: %s", url, exc)
                self._urls_failed[url] = str(exc)
                self._print(f"Failed to load {url}: {exc}")
                continue
            all_docs.extend(docs)
            self._urls_succeeded.append(url)
            self._print(f"Split {url} into {len(docs)} chunks")

        if not all_docs:
            raise IngestionError("No web page was loaded successfully")
        return all_docs

    def load_url(self, url: str) -> list[Document]:
        """Run fetch → extract → chunk → build for a single *url*."""
        html = self._fetch(
            url,
            timeout=self.request_timeout,
            retries=self.fetch_retries,
            backoff=self.retry_backoff,
        )
        text = self._extract(html)
        chunks = self._split(text, chunk_size=self.chunk_size, chunk_overlap=self.chunk_overlap)
        if not chunks:
            raise ExtractionError(f"No visible text found at {url}")
        return build_documents(url, chunks)

    def add_documents(
        self,
        documents: Sequence[Document],
        on_progress: ProgressCallback | None = None,
    ) -> IngestionReport:
        """Write *documents* in batches, skipping batches that fail.

        ``on_progress(written, total)`` is called after every successful
        batch; by default a percentage line is printed instead.  Every call
        returns a new report; its URL fields describe the most recent
        :meth:`load_documents` call.
        """
        total = len(documents)
        report = IngestionReport(
            urls_succeeded=list(self._urls_succeeded),
            urls_failed=dict(self._urls_failed),
            documents_total=total,
        )
        progress = on_progress or self._print_progress

        for batch in iter_batches(documents, self.batch_size):
            report.batches_total += 1
            try:
                call_with_retries(
                    lambda: self._store.add_documents(batch),
                    retries=self.write_retries,
                    backoff=self.retry_backoff,
                    description=f"batch {report.batches_total}",
                )
            except Exception as exc:
                report.batches_failed += 1
                logger.error("Batch %d (%d documents) failed: %s", report.batches_total, len(batch), exc)
                self._print(f"\nFailed to add documents to the vector store: {exc}")
                continue

            report.documents_written += len(batch)
            progress(report.documents_written, total)

        self._print(f"\nLoaded {report.documents_written} of {total} document chunks into the vector store")
        logger.info(
            "Ingestion finished: %d/%d documents, %d/%d batches failed",
            report.documents_written,
            total,
            report.batches_failed,
            report.batches_total,
        )
        return report

    # -- internals ------------------------------------------------------------

    def _print(self, message: str) -> None:
        print(message, file=self._out, flush=True)

    def _print_progress(self, written: int, total: int) -> None:
        pct = written / total * 100 if total else 100.0
        print(
            f"\rAdding documents to vector store: {pct:.1f}% ({written}/{total})",
            end="",
            file=self._out,
            flush=True,
        )
