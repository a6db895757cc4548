"""Unit tests for the ingestion orchestrator.

Fetching is replaced by a dict-backed fake and the vector store by the
in-memory ``FakeVectorStore`` from ``conftest``, so no network or Chroma
server is needed.
"""

from __future__ import annotations

import io
from collections import defaultdict
from typing import Any

import pytest

from web_rag.exceptions import FetchError, IngestionError
from web_rag.ingestion.pipeline import IngestionPipeline, iter_batches
from web_rag.retrieval.models import Document

PAGES = {
    "https://a.example.com": "<html><body><p>Alpha page.</p><p>More alpha.</p></body></html>",
    "https://b.example.com": "<html><body><p>Beta page.</p></body></html>",
    "https://empty.example.com": "<html><body><script>track()</script></body></html>",
}


def fake_fetch(url: str, **kwargs: Any) -> str:
    if url not in PAGES:
        raise FetchError(url, "connection refused")
    return PAGES[url]


def _docs(n: int) -> list[Document]:
    return [Document(content=f"chunk {i}", metadata={"source": "https://x", "chunk": str(i)}) for i in range(n)]


def _pipeline(store, **kwargs: Any) -> IngestionPipeline:
    kwargs.setdefault("fetcher", fake_fetch)
    kwargs.setdefault("out", io.StringIO())
    return IngestionPipeline(store, **kwargs)


# ── load_documents ────────────────────────────────────────────────────


class TestLoadDocuments:
    def test_single_page_known_chunks(self, store_factory) -> None:
        """One page split into three known chunks yields three documents."""
        url = "https://a.example.com"
        pipeline = _pipeline(
            store_factory(),
            splitter=lambda text, **kw: ["alpha content", "beta content", "gamma content"],
        )
        docs = pipeline.load_documents([url])
        assert len(docs) == 3
        assert [d.metadata["chunk"] for d in docs] == ["0", "1", "2"]
        assert all(d.metadata["source"] == url for d in docs)

    def test_partial_failure_still_succeeds(self, store_factory) -> None:
        out = io.StringIO()
        pipeline = _pipeline(store_factory(), out=out)
        docs = pipeline.load_documents(["https://a.example.com", "https://down.example.com"])
        assert docs
        assert {d.source for d in docs} == {"https://a.example.com"}
        assert "Failed to load https://down.example.com" in out.getvalue()
        assert "Split https://a.example.com into 1 chunks" in out.getvalue()

    def test_page_without_text_counts_as_failure(self, store_factory) -> None:
        pipeline = _pipeline(store_factory())
        docs = pipeline.load_documents(["https://empty.example.com", "https://b.example.com"])
        assert {d.source for d in docs} == {"https://b.example.com"}

    def test_all_failures_raise(self, store_factory) -> None:
        pipeline = _pipeline(store_factory())
        with pytest.raises(IngestionError):
            pipeline.load_documents(["https://down.example.com", "https://empty.example.com"])

    def test_empty_url_list_is_an_input_error(self, store_factory) -> None:
        with pytest.raises(ValueError, match="At least one URL"):
            _pipeline(store_factory()).load_documents([])

    def test_chunk_indices_are_contiguous_per_source(self, store_factory) -> None:
        long_pages = {
            "https://long1.example.com": "<body>" + "<p>lorem ipsum dolor sit amet</p>" * 40 + "</body>",
            "https://long2.example.com": "<body>" + "<p>consectetur adipiscing elit</p>" * 25 + "</body>",
        }
        pipeline = _pipeline(
            store_factory(),
            fetcher=lambda url, **kw: long_pages[url],
            chunk_size=100,
        )
        docs = pipeline.load_documents(list(long_pages))

        per_source: dict[str, list[int]] = defaultdict(list)
        for doc in docs:
            per_source[doc.source].append(int(doc.chunk))
        assert set(per_source) == set(long_pages)
        for indices in per_source.values():
            assert indices == list(range(len(indices)))
            assert len(indices) > 1

    def test_stage_settings_are_forwarded(self, store_factory) -> None:
        seen: dict[str, Any] = {}

        def fetcher(url: str, **kwargs: Any) -> str:
            seen["fetch"] = kwargs
            return PAGES["https://b.example.com"]

        def splitter(text: str, **kwargs: Any) -> list[str]:
            seen["split"] = kwargs
            return [text]

        pipeline = _pipeline(
            store_factory(),
            fetcher=fetcher,
            splitter=splitter,
            chunk_size=64,
            chunk_overlap=8,
            request_timeout=3.0,
            fetch_retries=2,
            retry_backoff=0.5,
        )
        pipeline.load_documents(["https://b.example.com"])
        assert seen["fetch"] == {"timeout": 3.0, "retries": 2, "backoff": 0.5}
        assert seen["split"] == {"chunk_size": 64, "chunk_overlap": 8}


# ── add_documents ─────────────────────────────────────────────────────


class TestAddDocuments:
    def test_batches_of_ten(self, store_factory) -> None:
        store = store_factory()
        report = _pipeline(store, batch_size=10).add_documents(_docs(25))
        assert [len(batch) for batch in store.calls] == [10, 10, 5]
        assert report.batches_total == 3
        assert report.documents_written == 25
        assert report.complete

    def test_failed_batch_is_skipped_and_rest_attempted(self, store_factory) -> None:
        store = store_factory(fail_calls=[1])
        out = io.StringIO()
        report = _pipeline(store, batch_size=10, out=out).add_documents(_docs(25))
        assert [len(batch) for batch in store.calls] == [10, 10, 5]
        assert len(store.stored) == 15
        assert report.batches_failed == 1
        assert report.documents_written == 15
        assert not report.complete
        assert "Failed to add documents" in out.getvalue()

    def test_every_batch_failing_does_not_raise(self, store_factory) -> None:
        store = store_factory(fail_calls=[0, 1, 2])
        report = _pipeline(store, batch_size=10).add_documents(_docs(25))
        assert len(store.calls) == 3
        assert report.documents_written == 0

    def test_progress_callback(self, store_factory) -> None:
        progress: list[tuple[int, int]] = []
        _pipeline(store_factory(fail_calls=[1]), batch_size=10).add_documents(
            _docs(25), on_progress=lambda written, total: progress.append((written, total))
        )
        assert progress == [(10, 25), (15, 25)]

    def test_default_progress_output(self, store_factory) -> None:
        out = io.StringIO()
        _pipeline(store_factory(), batch_size=10, out=out).add_documents(_docs(25))
        text = out.getvalue()
        assert "40.0% (10/25)" in text
        assert "100.0% (25/25)" in text
        assert "Loaded 25 of 25 document chunks" in text

    def test_write_retries(self, store_factory) -> None:
        store = store_factory(fail_calls=[0])
        report = _pipeline(store, batch_size=10, write_retries=1, retry_backoff=0).add_documents(_docs(15))
        assert [len(batch) for batch in store.calls] == [10, 10, 5]
        assert report.documents_written == 15
        assert report.batches_failed == 0

    def test_each_call_returns_its_own_report(self, store_factory) -> None:
        pipeline = _pipeline(store_factory(), batch_size=10)
        first = pipeline.add_documents(_docs(3))
        second = pipeline.add_documents(_docs(12))
        assert first is not second
        assert (first.documents_total, first.documents_written, first.batches_total) == (3, 3, 1)
        assert (second.documents_total, second.documents_written, second.batches_total) == (12, 12, 2)

    def test_rejects_non_positive_batch_size(self, store_factory) -> None:
        with pytest.raises(ValueError):
            _pipeline(store_factory(), batch_size=0)


# ── ingest ────────────────────────────────────────────────────────────


class TestIngest:
    def test_all_urls_failing_writes_nothing(self, store_factory) -> None:
        store = store_factory()
        with pytest.raises(IngestionError):
            _pipeline(store).ingest(["https://down.example.com"])
        assert store.calls == []

    def test_report_tracks_urls(self, store_factory) -> None:
        store = store_factory()
        report = _pipeline(store).ingest(["https://a.example.com", "https://down.example.com", "https://b.example.com"])
        assert report.urls_succeeded == ["https://a.example.com", "https://b.example.com"]
        assert list(report.urls_failed) == ["https://down.example.com"]
        assert report.documents_written == report.documents_total == len(store.stored) == 2

    def test_later_run_leaves_earlier_report_untouched(self, store_factory) -> None:
        pipeline = _pipeline(store_factory())
        first = pipeline.ingest(["https://a.example.com", "https://down.example.com"])
        second = pipeline.ingest(["https://b.example.com"])
        assert first.urls_succeeded == ["https://a.example.com"]
        assert list(first.urls_failed) == ["https://down.example.com"]
        assert first.documents_total == 1
        assert second.urls_succeeded == ["https://b.example.com"]
        assert second.urls_failed == {}


def test_iter_batches_sizes() -> None:
    assert [len(b) for b in iter_batches(_docs(21), 10)] == [10, 10, 1]
    assert list(iter_batches([], 10)) == []
