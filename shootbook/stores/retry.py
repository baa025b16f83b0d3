"""Retry helper for read-only store calls.

Only read paths use this. A timed-out write may have landed, so the
assignment guard reconciles by re-reading instead of retrying.
"""

import logging
import random
import time
from typing import Callable, Optional, TypeVar

from shootbook.config import settings
from shootbook.errors import RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retry_delay(attempt: int, base_delay: float) -> float:
    base = base_delay * (2 ** (attempt - 1))
    return base + random.uniform(0, base_delay * 0.5 * attempt)


def with_read_retry(
    op_name: str,
    func: Callable[[], T],
    *,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
) -> T:
    """Run a read, retrying transient repository failures with backoff."""
    attempts = max_attempts or settings.repository.read_retry_attempts
    delay_base = settings.repository.read_retry_base_delay if base_delay is None else base_delay

    attempt = 1
    while True:
        try:
            return func()
        except RepositoryError as exc:
            if attempt >= attempts or not exc.retryable:
                raise
            delay = _retry_delay(attempt, delay_base)
            logger.warning(
                "Transient repository failure in %s (attempt %d/%d), retrying in %.3fs: %s",
                op_name, attempt, attempts, delay, exc,
            )
            time.sleep(delay)
            attempt += 1
