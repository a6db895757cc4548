"""Exception hierarchy shared by the ingestion and answering layers."""

from __future__ import annotations


class WebRagError(Exception):
    """Base class for errors raised by :mod:`web_rag`."""


class FetchError(WebRagError):
    """A page could not be downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractionError(WebRagError):
    """A downloaded page produced no usable text."""


class IngestionError(WebRagError):
    """Ingestion cannot continue, e.g. every source failed."""
