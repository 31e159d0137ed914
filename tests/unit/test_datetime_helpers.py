"""Unit tests for date/time helpers"""
from datetime import date, datetime, timedelta, timezone

from geo_elevate.utils.datetime_helpers import (
    UTC,
    format_db_timestamp,
    parse_db_date,
    parse_db_timestamp,
    to_utc,
    utc_date,
)


def test_to_utc_naive_assumed_utc():
    result = to_utc(datetime(2024, 1, 10, 8, 30))
    assert result.tzinfo is UTC
    assert result.hour == 8


def test_to_utc_converts_aware():
    cet = timezone(timedelta(hours=1))
    result = to_utc(datetime(2024, 1, 10, 0, 30, tzinfo=cet))
    assert result == datetime(2024, 1, 9, 23, 30, tzinfo=timezone.utc)


def test_utc_date_crosses_midnight():
    cet = timezone(timedelta(hours=1))
    assert utc_date(datetime(2024, 1, 10, 0, 30, tzinfo=cet)) == date(2024, 1, 9)


def test_utc_date_passes_plain_dates_through():
    assert utc_date(date(2024, 1, 10)) == date(2024, 1, 10)


def test_format_db_timestamp():
    est = timezone(timedelta(hours=-5))
    assert format_db_timestamp(datetime(2024, 1, 10, 22, 15, 9, 123, tzinfo=est)) == "2024-01-11 03:15:09"


def test_parse_db_timestamp_formats():
    expected = datetime(2024, 1, 11, 3, 15, 9, tzinfo=timezone.utc)
    assert parse_db_timestamp("2024-01-11 03:15:09") == expected
    assert parse_db_timestamp("2024-01-11T03:15:09+00:00") == expected
    assert parse_db_timestamp(None) is None


def test_parse_db_date():
    assert parse_db_date("2024-01-11") == date(2024, 1, 11)
    assert parse_db_date("2024-01-11 10:00:00") == date(2024, 1, 11)
    assert parse_db_date("") is None
