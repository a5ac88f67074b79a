"""Unit-of-work helpers shared by the services."""
from __future__ import annotations

import logging
import time
from typing import Callable, ContextManager, Optional, TypeVar

from ..core.exceptions import ConcurrencyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TransactionFactory = Callable[[], ContextManager]

DEFAULT_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 0.05


def run_in_transaction(
    transaction: TransactionFactory,
    work: Callable[[], T],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    retry_delay: Optional[float] = None,
) -> T:
    """Run `work` inside a fresh transaction, re-running it when the database aborts it as a deadlock victim.

    `work` must do all of its reads and writes inside the call: a rolled back
    attempt leaves nothing behind, so the next attempt starts from committed state.
    """
    if retry_delay is None:
        retry_delay = DEFAULT_RETRY_DELAY

    attempt = 0
    while True:
        attempt += 1
        try:
            with transaction():
                return work()
        except ConcurrencyError as e:
            if attempt >= attempts:
                logger.error("Transaction failed after %d attempts: %s", attempt, e)
                raise
            delay = retry_delay * (2 ** (attempt - 1))
            logger.warning("Transaction aborted (attempt %d), retrying in %.2fs: %s", attempt, delay, e)
            if delay:
                time.sleep(delay)
