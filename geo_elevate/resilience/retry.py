"""Retry logic with exponential backoff and jitter

Implements retry logic for database writes that:
1. Only retries transient errors (SQLite lock/busy contention)
2. Uses exponential backoff with jitter so competing writers spread out
3. Gives up after max retries and surfaces a ConflictError
"""

import random
import logging
import sqlite3
import time
from typing import Callable, Any, TypeVar

from geo_elevate import config
from geo_elevate.exceptions import ConflictError, is_lock_error

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Retry configuration
BASE_DELAY = 0.05  # seconds
MAX_DELAY = 1.0  # seconds
JITTER = 0.1  # 10% random jitter


def is_retryable_error(exc: Exception) -> bool:
    """
    Determine if error is transient and should be retried.

    Retryable errors:
    - sqlite3.OperationalError "database is locked" / "database is busy"
    - ConflictError raised by lower layers

    Non-retryable errors:
    - Validation errors, missing records
    - Any other SQL error (constraint violations, syntax errors)

    Args:
        exc: The exception to check

    Returns:
        True if error should be retried, False otherwise
    """
    if isinstance(exc, ConflictError):
        return True

    if isinstance(exc, sqlite3.OperationalError):
        return is_lock_error(exc)

    return False


def calculate_backoff(attempt: int) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Formula: delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY) + jitter
    Jitter is random value between -10% and +10% of delay

    Args:
        attempt: The retry attempt number (0-indexed)

    Returns:
        Delay in seconds
    """
    delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)

    jitter_amount = random.uniform(-JITTER * delay, JITTER * delay)
    final_delay = delay + jitter_amount

    return max(final_delay, 0.0)


def retry_with_backoff(
    func: Callable[..., T],
    *args: Any,
    max_retries: int = None,
    **kwargs: Any
) -> T:
    """
    Retry a database operation with exponential backoff.

    Only retries lock contention. Once retries are exhausted the failure is
    raised as ConflictError so the client can retry the whole request.

    Args:
        func: Function to retry
        max_retries: Maximum number of retry attempts (default: CONFLICT_MAX_RETRIES)
        *args, **kwargs: Arguments to pass to func

    Returns:
        Result from func

    Raises:
        ConflictError if all retries are exhausted on lock contention,
        the original exception for non-retryable errors

    Example:
        result = retry_with_backoff(write_session, conn, user_id, max_retries=1)
    """
    if max_retries is None:
        max_retries = config.CONFLICT_MAX_RETRIES

    for attempt in range(max_retries + 1):
        try:
            return func(*args, **kwargs)

        except Exception as e:
            if not is_retryable_error(e):
                raise

            if attempt == max_retries:
                logger.error(
                    f"[RETRY] All {max_retries} retries exhausted for {func.__name__}"
                )
                cause = e.cause if isinstance(e, ConflictError) and e.cause else e
                raise ConflictError(
                    message=f"{func.__name__} kept conflicting with a concurrent write",
                    attempts=attempt + 1,
                    operation=func.__name__,
                    cause=cause
                ) from e

            backoff = calculate_backoff(attempt)

            logger.info(
                f"[RETRY] Attempt {attempt + 1}/{max_retries} for {func.__name__} "
                f"after {backoff:.2f}s (error: {type(e).__name__})"
            )

            time.sleep(backoff)

    raise RuntimeError("Retry logic failed unexpectedly")

