"""Unit tests for custom exception hierarchy"""
import logging
import sqlite3
import pytest
from datetime import datetime

from geo_elevate.exceptions import (
    GeoElevateError,
    InvalidArgumentError,
    DatabaseError,
    QueryError,
    RecordNotFoundError,
    ConflictError,
    ConfigurationError,
    is_lock_error,
    wrap_external_exception,
)


class TestGeoElevateError:
    """Test base exception class"""

    def test_basic_exception(self):
        error = GeoElevateError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        error = GeoElevateError(
            message="Session save failed",
            user_id=42,
            operation="record_session_xp",
            context={"game_type": "flags"},
            user_message="Could not save your game"
        )
        assert error.user_id == 42
        assert error.operation == "record_session_xp"
        assert error.context["game_type"] == "flags"
        assert error.user_message == "Could not save your game"

    def test_to_dict(self):
        error_dict = GeoElevateError(message="Test error", user_id=1).to_dict()
        assert error_dict["error"] == "GeoElevateError"
        assert error_dict["message"] == "Test error"
        assert "request_id" in error_dict
        assert "timestamp" in error_dict

    def test_auto_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="geo_elevate.exceptions"):
            GeoElevateError("logged error", operation="op")
        assert "logged error" in caplog.text


class TestSubclasses:
    """Test specialised errors"""

    def test_invalid_argument(self):
        error = InvalidArgumentError("must not be negative", field="earned_xp", value=-5)
        assert error.field == "earned_xp"
        assert error.value == -5
        assert "Invalid earned_xp" in error.user_message

    def test_record_not_found(self):
        error = RecordNotFoundError("User 9 not found", record_type="User", record_id=9)
        assert isinstance(error, DatabaseError)
        assert error.user_message == "User not found."

    def test_conflict(self):
        error = ConflictError(attempts=2)
        assert isinstance(error, DatabaseError)
        assert error.context["attempts"] == 2
        assert "try again" in error.user_message

    def test_configuration(self):
        error = ConfigurationError("bad cap", config_key="DAILY_XP_CAP")
        assert error.config_key == "DAILY_XP_CAP"


class TestWrapExternalException:
    """Test sqlite3 error wrapping"""

    def test_lock_error_becomes_conflict(self):
        wrapped = wrap_external_exception(sqlite3.OperationalError("database is locked"), "write")
        assert isinstance(wrapped, ConflictError)

    def test_sql_error_becomes_query_error(self):
        wrapped = wrap_external_exception(sqlite3.IntegrityError("UNIQUE failed"), "insert", user_id=3)
        assert isinstance(wrapped, QueryError)
        assert wrapped.user_id == 3

    def test_other_error_generic(self):
        cause = ValueError("odd")
        wrapped = wrap_external_exception(cause, "parse")
        assert type(wrapped) is GeoElevateError
        assert wrapped.cause is cause

    @pytest.mark.parametrize("text,expected", [
        ("database is locked", True),
        ("database table is locked", True),
        ("database is busy", True),
        ("no such column: x", False),
    ])
    def test_is_lock_error(self, text, expected):
        assert is_lock_error(sqlite3.OperationalError(text)) is expected
