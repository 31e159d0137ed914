"""Resilience patterns for database writes

Retry with backoff for lock contention between concurrent writers.
"""

from geo_elevate.resilience.retry import retry_with_backoff, is_retryable_error

__all__ = [
    "retry_with_backoff",
    "is_retryable_error",
]
