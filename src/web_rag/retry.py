"""Bounded retry with exponential backoff for transient network errors."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_retries(
    func: Callable[[], T],
    *,
    retries: int = 0,
    backoff: float = 1.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    description: str = "operation",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *func*, retrying up to *retries* extra times on *retry_on*.

    The wait before attempt ``n`` (1-based, counting retries only) is
    ``backoff * 2 ** (n - 1)`` seconds.  The last exception is re-raised
    once attempts are exhausted.
    """
    attempt = 0
    while True:
        try:
            return func()
        except retry_on as exc:
            if attempt >= retries:
                raise
            wait = backoff * 2**attempt
            attempt += 1
            logger.warning(
                "Retry %d/%d for %s (wait %.1fs): %s", attempt, retries, description, wait, exc
            )
            sleep(wait)
