"""Unit tests for retry logic"""
import sqlite3
import pytest
from unittest.mock import MagicMock, patch

from geo_elevate.exceptions import ConflictError, InvalidArgumentError
from geo_elevate.resilience.retry import (
    calculate_backoff,
    is_retryable_error,
    retry_with_backoff,
    BASE_DELAY,
    MAX_DELAY,
)


def _locked():
    return sqlite3.OperationalError("database is locked")


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("geo_elevate.resilience.retry.time.sleep") as sleep:
        yield sleep


class TestIsRetryableError:
    """Test error classification"""

    def test_locked_is_retryable(self):
        assert is_retryable_error(_locked()) is True

    def test_busy_is_retryable(self):
        assert is_retryable_error(sqlite3.OperationalError("database is busy")) is True

    def test_conflict_error_is_retryable(self):
        assert is_retryable_error(ConflictError()) is True

    def test_other_operational_error_not_retryable(self):
        assert is_retryable_error(sqlite3.OperationalError("no such table: users")) is False

    def test_integrity_error_not_retryable(self):
        assert is_retryable_error(sqlite3.IntegrityError("UNIQUE constraint failed")) is False

    def test_validation_error_not_retryable(self):
        assert is_retryable_error(InvalidArgumentError("bad")) is False


class TestCalculateBackoff:
    """Test backoff calculation"""

    def test_exponential_growth(self):
        with patch("geo_elevate.resilience.retry.random.uniform", return_value=0.0):
            assert calculate_backoff(0) == pytest.approx(BASE_DELAY)
            assert calculate_backoff(1) == pytest.approx(BASE_DELAY * 2)
            assert calculate_backoff(2) == pytest.approx(BASE_DELAY * 4)

    def test_capped_at_max_delay(self):
        assert calculate_backoff(50) <= MAX_DELAY * 1.1

    def test_never_negative(self):
        for attempt in range(10):
            assert calculate_backoff(attempt) >= 0.0


class TestRetryWithBackoff:
    """Test retry loop"""

    def test_success_first_try(self):
        func = MagicMock(return_value="ok", __name__="func")

        assert retry_with_backoff(func, 1, key="v", max_retries=1) == "ok"
        func.assert_called_once_with(1, key="v")

    def test_retries_once_then_succeeds(self, no_sleep):
        func = MagicMock(side_effect=[_locked(), "ok"], __name__="func")

        assert retry_with_backoff(func, max_retries=1) == "ok"
        assert func.call_count == 2
        no_sleep.assert_called_once()

    def test_exhausted_raises_conflict(self):
        func = MagicMock(side_effect=_locked(), __name__="write_session")

        with pytest.raises(ConflictError) as exc_info:
            retry_with_backoff(func, max_retries=1)

        assert func.call_count == 2
        assert exc_info.value.attempts == 2
        assert isinstance(exc_info.value.cause, sqlite3.OperationalError)

    def test_non_retryable_raised_immediately(self, no_sleep):
        func = MagicMock(side_effect=sqlite3.IntegrityError("boom"), __name__="func")

        with pytest.raises(sqlite3.IntegrityError):
            retry_with_backoff(func, max_retries=3)

        assert func.call_count == 1
        no_sleep.assert_not_called()

    def test_zero_retries(self):
        func = MagicMock(side_effect=_locked(), __name__="func")

        with pytest.raises(ConflictError):
            retry_with_backoff(func, max_retries=0)

        assert func.call_count == 1

    def test_default_uses_config(self):
        func = MagicMock(side_effect=_locked(), __name__="func")

        with patch("geo_elevate.resilience.retry.config.CONFLICT_MAX_RETRIES", 2):
            with pytest.raises(ConflictError):
                retry_with_backoff(func)

        assert func.call_count == 3


def test_exhausted_conflict_from_lower_layer_reports_attempts():
    lower = ConflictError(message="Database is locked", cause=_locked())
    func = MagicMock(side_effect=lower, __name__="apply_session")

    with pytest.raises(ConflictError) as exc_info:
        retry_with_backoff(func, max_retries=1)

    assert func.call_count == 2
    assert exc_info.value.attempts == 2
    assert exc_info.value.operation == "apply_session"
    assert isinstance(exc_info.value.cause, sqlite3.OperationalError)
