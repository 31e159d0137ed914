"""
Standardized exception hierarchy for geo-elevate
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging
import sqlite3

logger = logging.getLogger(__name__)


class GeoElevateError(Exception):
    """
    Base exception for all geo-elevate errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise GeoElevateError(
            message="Failed to record session",
            user_id=42,
            operation="record_session_xp",
            context={"game_type": "flags"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[int] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by LogRecord
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (caller input)
# ==========================================

class InvalidArgumentError(GeoElevateError):
    """
    Raised when an argument fails validation before any write happens

    Examples:
    - Unknown game type
    - Negative or non-numeric XP amount

    Example:
        raise InvalidArgumentError(
            message="XP must be a non-negative integer",
            field="earned_xp",
            value=-5,
            user_id=42
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": repr(value)},
            **kwargs
        )


# ==========================================
# Database Errors
# ==========================================

class DatabaseError(GeoElevateError):
    """
    Base class for database-related errors
    """
    pass


class QueryError(DatabaseError):
    """Database query execution failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your progress. Please try again.",
            context={"query": query},
            **kwargs
        )


class RecordNotFoundError(DatabaseError):
    """Requested database record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[Any] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


class ConflictError(DatabaseError):
    """Concurrent write to the same user row could not be resolved"""

    def __init__(
        self,
        message: str = "Concurrent update conflict",
        attempts: Optional[int] = None,
        **kwargs
    ):
        self.attempts = attempts
        super().__init__(
            message=message,
            user_message="Your progress could not be saved because of a conflicting update. Please try again.",
            context={"attempts": attempts},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(GeoElevateError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def is_lock_error(error: Exception) -> bool:
    """True if a sqlite3 error means another writer holds the database lock"""
    if not isinstance(error, sqlite3.OperationalError):
        return False
    text = str(error).lower()
    return "locked" in text or "busy" in text


def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[int] = None,
    context: Optional[Dict[str, Any]] = None
) -> GeoElevateError:
    """
    Wrap external exceptions (sqlite3) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate GeoElevateError subclass

    Example:
        try:
            conn.execute(query, params)
        except sqlite3.Error as e:
            raise wrap_external_exception(e, operation="record_session_xp", user_id=42)
    """
    if is_lock_error(error):
        return ConflictError(
            message=f"Database is locked: {error}",
            user_id=user_id,
            operation=operation,
            cause=error
        )
    elif isinstance(error, sqlite3.Error):
        return QueryError(
            message=f"Database query failed: {error}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    # Generic fallback
    return GeoElevateError(
        message=f"{operation} failed: {error}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
