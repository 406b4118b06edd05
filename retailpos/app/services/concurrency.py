from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (OperationalError, StaleDataError)


def run_with_retry(
    db: Session,
    func: Callable[[], T],
    *,
    attempts: int = 3,
    backoff_base: float = 0.05,
) -> T:
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, lock timeouts) and StaleDataError
    (optimistic locking conflicts). The session is rolled back before each
    retry; the last failure is re-raised once *attempts* are used up.
    """
    for attempt in range(attempts):
        try:
            return func()
        except TRANSIENT_ERRORS as exc:
            db.rollback()
            if attempt >= attempts - 1:
                raise
            logger.warning(
                "Transient store failure (attempt %d/%d): %s", attempt + 1, attempts, exc
            )
            time.sleep(backoff_base * (2 ** attempt))
    raise RuntimeError("run_with_retry called with attempts < 1")
