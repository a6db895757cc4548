"""Visible-text extraction from HTML."""

from __future__ import annotations

from bs4 import BeautifulSoup

NON_CONTENT_TAGS = ("script", "style")


def extract_text(html: str) -> str:
    """Return the visible text of *html*'s ``<body>``.

    ``script`` and ``style`` elements are dropped first.  Each remaining
    text block is trimmed, empty blocks are skipped, and blocks are joined
    with a single newline.  Documents without a ``<body>`` fall back to the
    whole tree.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(list(NON_CONTENT_TAGS)):
        tag.decompose()

    root = soup.body or soup
    return root.get_text(separator="\n", strip=True)
