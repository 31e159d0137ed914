"""
Daily Play Streak System

Tracks consecutive UTC calendar days on which a user completed at least one
game session.

Transitions over (last_played_date, current_streak):
- never played: streak starts at 1
- same day: already counted, no change
- next day: streak + 1
- gap of more than one day: streak restarts at 1
- earlier than the last played day (backdated): no change

longest_streak is raised whenever current_streak passes it.
"""

from typing import Dict, Optional, Union
from datetime import date, datetime, timedelta
import logging
import sqlite3

from geo_elevate.db import queries, transaction
from geo_elevate.exceptions import RecordNotFoundError
from geo_elevate.models.user import StreakInfo, StreakUpdate
from geo_elevate.utils.datetime_helpers import parse_db_date, utc_date
from geo_elevate.validators import validate_timestamp

logger = logging.getLogger(__name__)


def next_streak_state(
    last_played_date: Optional[date],
    current_streak: int,
    longest_streak: int,
    played_on: date
) -> Dict[str, object]:
    """
    Pure streak transition

    Returns:
        {
            'current_streak': int,
            'longest_streak': int,
            'last_played_date': date | None,
            'changed': bool,
            'message': str
        }
    """
    current = current_streak
    last = last_played_date

    if last is None:
        current = 1
        last = played_on
        message = "Streak started! Day 1"

    elif played_on == last:
        if current == 0:
            # Rows written before streaks were tracked on first play read 0 here
            current = 1
        message = f"Already played today. Day {current}"

    elif played_on == last + timedelta(days=1):
        current += 1
        last = played_on
        message = f"Streak continues! Day {current}"

    elif played_on > last:
        gap_days = (played_on - last).days
        message = f"Streak reset after {gap_days} days. Previous: {current_streak} days. Day 1"
        current = 1
        last = played_on

    else:
        message = f"Played before last recorded day ({last.isoformat()}); streak unchanged"

    longest = max(longest_streak, current)

    return {
        "current_streak": current,
        "longest_streak": longest,
        "last_played_date": last,
        "changed": (current, longest, last) != (current_streak, longest_streak, last_played_date),
        "message": message,
    }


def _load_user(conn: sqlite3.Connection, user_id: int, operation: str) -> dict:
    user = queries.get_user(conn, user_id)
    if not user:
        raise RecordNotFoundError(
            message=f"User {user_id} not found",
            record_type="User",
            record_id=user_id,
            user_id=user_id,
            operation=operation
        )
    return user


def update_streak(
    conn: sqlite3.Connection,
    user_id: int,
    played_on: Union[date, datetime]
) -> StreakUpdate:
    """
    Update the user's streak for a day they played

    Idempotent for repeated calls with the same day.

    Args:
        user_id: User ID
        played_on: Day played; datetimes are reduced to their UTC date

    Raises:
        InvalidArgumentError: played_on isn't a date or datetime
        RecordNotFoundError: user doesn't exist
    """
    day = utc_date(validate_timestamp(played_on, field="played_on", user_id=user_id, allow_date=True))

    with transaction(conn):
        user = _load_user(conn, user_id, "update_streak")
        last = parse_db_date(user["last_played_date"])
        old_current = user["current_streak"] or 0
        old_longest = user["longest_streak"] or 0

        state = next_streak_state(last, old_current, old_longest, day)

        if state["changed"]:
            queries.update_user_streak(
                conn,
                user_id,
                state["current_streak"],
                state["longest_streak"],
                state["last_played_date"],
            )

    if state["changed"]:
        logger.info(
            f"Updated streak for user {user_id}: "
            f"{old_current} to {state['current_streak']} days (played {day.isoformat()})"
        )

    return StreakUpdate(
        user_id=user_id,
        played_on=day,
        previous_streak=old_current,
        current_streak=state["current_streak"],
        longest_streak=state["longest_streak"],
        last_played_date=state["last_played_date"],
        changed=state["changed"],
        message=state["message"],
    )


def repair_streak(conn: sqlite3.Connection, user_id: int, today: Union[date, datetime]) -> StreakUpdate:
    """
    Fix a user who played today but whose streak still reads 0

    Leaves every other user untouched.
    """
    day = utc_date(today)

    with transaction(conn):
        user = _load_user(conn, user_id, "repair_streak")
        last = parse_db_date(user["last_played_date"])
        current = user["current_streak"] or 0
        longest = user["longest_streak"] or 0

        needs_fix = last == day and current == 0
        if needs_fix:
            queries.update_user_streak(conn, user_id, 1, max(longest, 1), last)
            logger.info(f"Repaired streak for user {user_id}: 0 to 1")

    return StreakUpdate(
        user_id=user_id,
        played_on=day,
        previous_streak=current,
        current_streak=1 if needs_fix else current,
        longest_streak=max(longest, 1) if needs_fix else longest,
        last_played_date=last,
        changed=needs_fix,
        message="Streak repaired" if needs_fix else "No repair needed",
    )


def get_streak_info(conn: sqlite3.Connection, user_id: int, today: Union[date, datetime]) -> StreakInfo:
    """
    Read a user's streak as of a day

    A streak whose last play is older than yesterday is already broken and
    reported as 0, even though the stored value resets only on the next play.
    """
    day = utc_date(today)
    user = _load_user(conn, user_id, "get_streak_info")
    last = parse_db_date(user["last_played_date"])
    current = user["current_streak"] or 0

    played_today = last == day
    alive = last is not None and (played_today or last == day - timedelta(days=1))

    return StreakInfo(
        user_id=user_id,
        current_streak=current if alive else 0,
        longest_streak=user["longest_streak"] or 0,
        last_played_date=last,
        played_today=played_today,
        at_risk=alive and not played_today,
    )
