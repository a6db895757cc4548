"""Text chunking strategies."""

from __future__ import annotations

from langchain_text_splitters import RecursiveCharacterTextSplitter

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]


def split_text(
    text: str,
    chunk_size: int = 512,
    chunk_overlap: int = 0,
) -> list[str]:
    """Split *text* into segments for embedding.

    Parameters
    ----------
    text:
        Plain text produced by the extractor.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.

    Returns
    -------
    list[str]
        Non-empty chunks, in order.  With zero overlap, joining them
        reproduces *text* up to whitespace.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if not 0 <= chunk_overlap < chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
        )

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=DEFAULT_SEPARATORS,
    )
    return [chunk for chunk in splitter.split_text(text) if chunk.strip()]
