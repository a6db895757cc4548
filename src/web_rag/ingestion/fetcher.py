"""HTTP download of source pages."""

from __future__ import annotations

import logging

import requests

from web_rag.exceptions import FetchError
from web_rag.retry import call_with_retries

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"User-Agent": "web-rag/0.1"}


def fetch_html(
    url: str,
    *,
    timeout: float = 30.0,
    headers: dict[str, str] | None = None,
    retries: int = 0,
    backoff: float = 1.0,
) -> str:
    """Download *url* and return the decoded response body.

    Parameters
    ----------
    url:
        Page to download.
    timeout:
        Per-request timeout in seconds.
    headers:
        Extra HTTP headers merged over :data:`DEFAULT_HEADERS`.
    retries:
        Number of retry attempts for transient HTTP errors.
    backoff:
        Base wait in seconds, doubled after every retry.

    Raises
    ------
    FetchError
        On connection errors, timeouts and non-2xx responses, once the
        retries are exhausted.
    """
    merged = {**DEFAULT_HEADERS, **(headers or {})}

    def _get() -> requests.Response:
        resp = requests.get(url, headers=merged, timeout=timeout)
        resp.raise_for_status()
        return resp

    try:
        resp = call_with_retries(
            _get,
            retries=retries,
            backoff=backoff,
            retry_on=(requests.RequestException,),
            description=url,
        )
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc

    logger.debug("Fetched %s (%d bytes)", url, len(resp.content))
    return resp.text
