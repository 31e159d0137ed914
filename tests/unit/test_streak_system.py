"""Unit tests for Streak System (geo_elevate/gamification/streak_system.py)"""
import logging
import pytest
from datetime import date, datetime, timedelta, timezone

from geo_elevate.db import queries
from geo_elevate.exceptions import InvalidArgumentError, RecordNotFoundError
from geo_elevate.gamification.streak_system import (
    get_streak_info,
    next_streak_state,
    repair_streak,
    update_streak,
)


# ============================================================================
# Pure Transition Tests
# ============================================================================

def test_next_streak_state_first_play():
    state = next_streak_state(None, 0, 0, date(2024, 1, 10))

    assert state["current_streak"] == 1
    assert state["longest_streak"] == 1
    assert state["last_played_date"] == date(2024, 1, 10)
    assert state["changed"] is True


def test_next_streak_state_consecutive_day():
    state = next_streak_state(date(2024, 1, 10), 5, 5, date(2024, 1, 11))

    assert state["current_streak"] == 6
    assert state["longest_streak"] == 6


def test_next_streak_state_same_day_unchanged():
    state = next_streak_state(date(2024, 1, 10), 3, 7, date(2024, 1, 10))

    assert state["current_streak"] == 3
    assert state["longest_streak"] == 7
    assert state["changed"] is False


def test_next_streak_state_same_day_zero_repaired():
    state = next_streak_state(date(2024, 1, 10), 0, 0, date(2024, 1, 10))

    assert state["current_streak"] == 1
    assert state["changed"] is True


def test_next_streak_state_gap_resets_to_one():
    state = next_streak_state(date(2024, 1, 10), 9, 9, date(2024, 1, 20))

    assert state["current_streak"] == 1
    assert state["longest_streak"] == 9
    assert state["last_played_date"] == date(2024, 1, 20)


def test_next_streak_state_backdated_ignored():
    state = next_streak_state(date(2024, 1, 10), 4, 4, date(2024, 1, 8))

    assert state["current_streak"] == 4
    assert state["last_played_date"] == date(2024, 1, 10)
    assert state["changed"] is False


# ============================================================================
# Persisted Streak Tests
# ============================================================================

def test_update_streak_first_activity(conn, user_id):
    """Test first activity creates streak of 1"""
    result = update_streak(conn, user_id, date(2024, 1, 10))

    assert result.current_streak == 1
    assert result.longest_streak == 1
    user = queries.get_user(conn, user_id)
    assert user["last_played_date"] == "2024-01-10"


def test_update_streak_consecutive_day(conn, make_user):
    """Test streak 5 on 2024-01-10, playing 2024-01-11 gives 6"""
    user_id = make_user(current_streak=5, longest_streak=10, last_played_date=date(2024, 1, 10))

    result = update_streak(conn, user_id, date(2024, 1, 11))

    assert result.current_streak == 6
    assert result.longest_streak == 10
    user = queries.get_user(conn, user_id)
    assert user["current_streak"] == 6
    assert user["last_played_date"] == "2024-01-11"


def test_update_streak_idempotent_same_day(conn, make_user):
    """Test a second call on the same day changes nothing"""
    user_id = make_user(current_streak=2, longest_streak=2, last_played_date=date(2024, 1, 10))

    first = update_streak(conn, user_id, date(2024, 1, 11))
    second = update_streak(conn, user_id, date(2024, 1, 11))

    assert first.current_streak == 3
    assert second.current_streak == 3
    assert second.changed is False
    assert queries.get_user(conn, user_id)["current_streak"] == 3


def test_update_streak_three_day_gap_resets(conn, make_user):
    user_id = make_user(current_streak=7, longest_streak=14, last_played_date=date(2024, 1, 7))

    result = update_streak(conn, user_id, date(2024, 1, 10))

    assert result.current_streak == 1
    assert result.longest_streak == 14


def test_update_streak_ten_day_gap_resets(conn, user_id):
    update_streak(conn, user_id, date(2024, 1, 10))

    result = update_streak(conn, user_id, date(2024, 1, 20))

    assert result.current_streak == 1
    assert queries.get_user(conn, user_id)["last_played_date"] == "2024-01-20"


def test_update_streak_raises_longest(conn, make_user):
    user_id = make_user(current_streak=4, longest_streak=4, last_played_date=date(2024, 1, 10))

    result = update_streak(conn, user_id, date(2024, 1, 11))

    assert result.longest_streak == 5


def test_update_streak_normalizes_datetime_to_utc_day(conn, make_user):
    """Test a late-evening local time lands on the next UTC day"""
    user_id = make_user(current_streak=1, longest_streak=1, last_played_date=date(2024, 1, 10))
    pst = timezone(timedelta(hours=-8))

    # 2024-01-10 20:00 PST == 2024-01-11 04:00 UTC
    result = update_streak(conn, user_id, datetime(2024, 1, 10, 20, 0, tzinfo=pst))

    assert result.played_on == date(2024, 1, 11)
    assert result.current_streak == 2


def test_update_streak_missing_user(conn):
    with pytest.raises(RecordNotFoundError):
        update_streak(conn, 424242, date(2024, 1, 10))


# ============================================================================
# Repair & Info Tests
# ============================================================================

def test_repair_streak_fixes_zero_after_playing_today(conn, make_user):
    user_id = make_user(current_streak=0, last_played_date=date(2024, 1, 11))

    result = repair_streak(conn, user_id, date(2024, 1, 11))

    assert result.changed is True
    assert queries.get_user(conn, user_id)["current_streak"] == 1


def test_repair_streak_leaves_healthy_streak(conn, make_user):
    user_id = make_user(current_streak=4, longest_streak=4, last_played_date=date(2024, 1, 11))

    result = repair_streak(conn, user_id, date(2024, 1, 11))

    assert result.changed is False
    assert queries.get_user(conn, user_id)["current_streak"] == 4


def test_repair_streak_ignores_user_who_did_not_play_today(conn, make_user):
    user_id = make_user(current_streak=0, last_played_date=date(2024, 1, 9))

    result = repair_streak(conn, user_id, date(2024, 1, 11))

    assert result.changed is False


def test_get_streak_info_at_risk(conn, make_user):
    user_id = make_user(current_streak=3, longest_streak=5, last_played_date=date(2024, 1, 10))

    info = get_streak_info(conn, user_id, date(2024, 1, 11))

    assert info.current_streak == 3
    assert info.played_today is False
    assert info.at_risk is True


def test_get_streak_info_broken_streak_reads_zero(conn, make_user):
    user_id = make_user(current_streak=3, longest_streak=5, last_played_date=date(2024, 1, 5))

    info = get_streak_info(conn, user_id, date(2024, 1, 11))

    assert info.current_streak == 0
    assert info.longest_streak == 5
    assert info.at_risk is False


def test_update_streak_rejects_string_day(conn, user_id):
    with pytest.raises(InvalidArgumentError) as exc_info:
        update_streak(conn, user_id, "2024-01-11")

    assert exc_info.value.field == "played_on"
    assert queries.get_user(conn, user_id)["last_played_date"] is None


def test_update_streak_logs_only_changes(conn, user_id, caplog):
    with caplog.at_level(logging.INFO, logger="geo_elevate.gamification.streak_system"):
        update_streak(conn, user_id, date(2024, 1, 11))
        update_streak(conn, user_id, date(2024, 1, 11))

    updates = [r for r in caplog.records if r.getMessage().startswith("Updated streak")]
    assert len(updates) == 1
    assert "0 to 1 days" in updates[0].getMessage()
