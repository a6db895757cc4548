"""Domain models for ingested chunks and retrieval results."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

REQUIRED_METADATA = ("source", "chunk")


class Document(BaseModel):
    """A chunk of page text together with its provenance.

    Instances are frozen, metadata included: a document is built once
    during ingestion, written once to the store and never updated.
    Retrieval results are new instances carrying a ``score``.

    Attributes
    ----------
    content:
        The chunk text.  Never empty.
    metadata:
        Read-only provenance metadata.  Always holds ``"source"`` (the page
        URL) and ``"chunk"`` (the zero-based position of the chunk within
        that page, as a decimal string).
    score:
        Cosine *distance* to the query vector, set on retrieval results
        only.  Lower means more similar; see :attr:`similarity`.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(min_length=1)
    metadata: Mapping[str, str]
    score: float | None = None

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        missing = [key for key in REQUIRED_METADATA if key not in value]
        if missing:
            raise ValueError(f"metadata is missing required keys: {missing}")
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _dump_metadata(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def source(self) -> str:
        return self.metadata["source"]

    @property
    def chunk(self) -> str:
        return self.metadata["chunk"]

    @property
    def similarity(self) -> float | None:
        """Similarity in ``[0, 1]`` derived from the cosine distance."""
        if self.score is None:
            return None
        return min(1.0, max(0.0, 1.0 - self.score))

    def with_score(self, score: float) -> Document:
        """Return a copy of this document annotated with *score*."""
        return self.model_copy(update={"score": score})


class IngestionReport(BaseModel):
    """Outcome of one ingestion run."""

    urls_succeeded: list[str] = Field(default_factory=list)
    urls_failed: dict[str, str] = Field(default_factory=dict)
    documents_total: int = 0
    documents_written: int = 0
    batches_total: int = 0
    batches_failed: int = 0

    @property
    def complete(self) -> bool:
        return self.batches_failed == 0 and self.documents_written == self.documents_total
