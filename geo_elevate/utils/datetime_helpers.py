"""
Standardized Date/Time Handling Utilities

All progression bookkeeping happens on UTC calendar days:
- Timestamps are stored in the DB as naive UTC text ("YYYY-MM-DD HH:MM:SS"),
  the same shape SQLite's CURRENT_TIMESTAMP produces, so DATE() works on them
- Naive datetimes passed in are assumed to already be UTC
- Streak and daily cap comparisons use the UTC date, never wall-clock instants
"""

import logging
from datetime import datetime, date
from typing import Optional, Union
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")
DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Convert datetime to UTC

    Args:
        dt: Datetime to convert (naive values are treated as UTC)

    Returns:
        Timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_date(value: Union[date, datetime]) -> date:
    """
    Normalize a date or datetime to its UTC calendar day

    Plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def format_db_timestamp(dt: datetime) -> str:
    """Format a datetime for storage (UTC, second precision)"""
    return to_utc(dt).strftime(DB_TIMESTAMP_FORMAT)


def parse_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored timestamp back into an aware UTC datetime

    Accepts both the storage format and ISO 8601 strings.
    """
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, DB_TIMESTAMP_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value)
    return to_utc(parsed)


def parse_db_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored DATE column ("YYYY-MM-DD")"""
    if not value:
        return None
    return date.fromisoformat(value[:10])

