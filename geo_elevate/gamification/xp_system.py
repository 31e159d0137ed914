"""
XP and Daily Cap System

Manages XP accrual per game type and overall level progression.

Daily cap:
- Each game type accrues at most DAILY_XP_CAP XP per user per UTC day
- A session that would exceed the cap is credited only what remains
  (possibly 0); reaching the cap is not an error
- The session row stores the applied XP, never the requested amount

Leveling:
- Flat curve: every XP_PER_LEVEL XP is one level, starting at level 1
"""

from typing import Dict, List, Optional
from datetime import date, datetime
import logging
import sqlite3

from geo_elevate import config
from geo_elevate.db import queries, transaction
from geo_elevate.exceptions import RecordNotFoundError
from geo_elevate.models.game import DailyXpStatus, GameType, XpAward
from geo_elevate.utils.datetime_helpers import format_db_timestamp, utc_date
from geo_elevate.validators import validate_game_type, validate_timestamp, validate_xp_amount

logger = logging.getLogger(__name__)


def calculate_level_from_xp(total_xp: int, xp_per_level: Optional[int] = None) -> Dict[str, int]:
    """
    Calculate level from total XP

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int
        }
    """
    per_level = xp_per_level or config.XP_PER_LEVEL
    total_xp = max(0, total_xp)

    level = total_xp // per_level + 1
    xp_in_level = total_xp % per_level

    return {
        "current_level": level,
        "xp_in_current_level": xp_in_level,
        "xp_to_next_level": per_level - xp_in_level,
        "total_xp_for_next_level": level * per_level,
    }


def cap_message(game_type: GameType, applied_xp: int) -> str:
    if applied_xp == 0:
        return (
            f"You've reached your daily XP cap for {game_type.value}! "
            f"Try a different game type."
        )
    return f"XP reduced due to daily cap. Only {applied_xp} XP awarded."


def get_daily_xp_status(
    conn: sqlite3.Connection,
    user_id: int,
    game_type: str,
    on_date: date,
    daily_cap: Optional[int] = None
) -> DailyXpStatus:
    """
    XP already earned today for one game type and what's left under the cap

    Args:
        on_date: UTC day (datetimes are normalized to their UTC date)
    """
    game_type = validate_game_type(game_type, user_id=user_id)
    cap = config.DAILY_XP_CAP if daily_cap is None else daily_cap
    day = utc_date(on_date)

    earned_today = queries.get_xp_earned_on(conn, user_id, game_type.value, day)
    remaining = max(0, cap - earned_today)

    return DailyXpStatus(
        game_type=game_type,
        earned_today=earned_today,
        remaining=remaining,
        max_daily=cap,
        capped=remaining == 0,
    )


def get_daily_xp_overview(
    conn: sqlite3.Connection,
    user_id: int,
    on_date: date,
    daily_cap: Optional[int] = None
) -> List[DailyXpStatus]:
    """Daily cap status for every game type"""
    return [
        get_daily_xp_status(conn, user_id, game_type, on_date, daily_cap)
        for game_type in GameType
    ]


def record_session_xp(
    conn: sqlite3.Connection,
    user_id: int,
    game_type: str,
    earned_xp: int,
    completed_at: datetime,
    *,
    game_mode: str = "solo",
    difficulty_level: str = "medium",
    region_filter: Optional[str] = None,
    score: int = 0,
    correct_count: int = 0,
    total_questions: int = 10,
    daily_cap: Optional[int] = None
) -> XpAward:
    """
    Persist a finished session, crediting XP up to the daily cap

    Reads the day's total, computes the capped amount and writes both the
    session and the user's new total inside one transaction (or the caller's
    transaction if one is already open).

    Args:
        user_id: User ID
        game_type: One of GameType
        earned_xp: Candidate XP (non-negative integer)
        completed_at: Completion timestamp; its UTC date selects the day

    Returns:
        XpAward with the applied XP and cap information

    Raises:
        InvalidArgumentError: unknown game type, bad XP amount or timestamp
        RecordNotFoundError: user doesn't exist
    """
    game_type = validate_game_type(game_type, user_id=user_id)
    earned_xp = validate_xp_amount(earned_xp, user_id=user_id)
    completed_at = validate_timestamp(completed_at, user_id=user_id)
    cap = config.DAILY_XP_CAP if daily_cap is None else daily_cap
    day = utc_date(completed_at)

    with transaction(conn):
        user = queries.get_user(conn, user_id)
        if not user:
            raise RecordNotFoundError(
                message=f"User {user_id} not found",
                record_type="User",
                record_id=user_id,
                user_id=user_id,
                operation="record_session_xp"
            )

        earned_today = queries.get_xp_earned_on(conn, user_id, game_type.value, day)
        remaining = max(0, cap - earned_today)
        applied_xp = min(earned_xp, remaining)

        session_id = queries.insert_game_session(
            conn,
            user_id=user_id,
            game_type=game_type.value,
            xp_earned=applied_xp,
            completed_at=format_db_timestamp(completed_at),
            game_mode=game_mode,
            difficulty_level=difficulty_level,
            region_filter=region_filter,
            score=score,
            correct_count=correct_count,
            total_questions=total_questions,
        )

        if applied_xp:
            queries.add_user_xp(conn, user_id, applied_xp, config.XP_PER_LEVEL)

    old_total = user["overall_xp"]
    new_total = old_total + applied_xp
    old_level = calculate_level_from_xp(old_total)["current_level"]
    new_level = calculate_level_from_xp(new_total)["current_level"]
    capped = applied_xp < earned_xp

    if capped:
        logger.info(
            f"Daily cap hit for user {user_id} on {game_type.value}: "
            f"requested {earned_xp}, applied {applied_xp} ({earned_today}/{cap} already today)"
        )
    else:
        logger.info(f"Awarded {applied_xp} XP to user {user_id} for {game_type.value}")

    if new_level > old_level:
        logger.info(f"User {user_id} leveled up from {old_level} to {new_level}!")

    return XpAward(
        session_id=session_id,
        game_type=game_type,
        requested_xp=earned_xp,
        applied_xp=applied_xp,
        earned_today=earned_today + applied_xp,
        remaining=remaining - applied_xp,
        max_daily=cap,
        capped=capped,
        message=cap_message(game_type, applied_xp) if capped else None,
        overall_xp=new_total,
        overall_level=new_level,
        leveled_up=new_level > old_level,
    )
