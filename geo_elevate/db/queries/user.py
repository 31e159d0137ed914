"""User database queries"""
import logging
import sqlite3
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, username, email, overall_xp, overall_level, "
    "current_streak, longest_streak, last_played_date"
)


def create_user(conn: sqlite3.Connection, username: str, email: Optional[str] = None) -> int:
    """
    Insert a user with zeroed progression fields

    Returns:
        New user ID
    """
    cur = conn.execute(
        "INSERT INTO users (username, email) VALUES (?, ?)",
        (username, email)
    )
    logger.info(f"Created user {cur.lastrowid} ({username})")
    return cur.lastrowid


def get_user(conn: sqlite3.Connection, user_id: int) -> Optional[dict]:
    """Get a user's progression fields, or None if the user doesn't exist"""
    row = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE id = ?",
        (user_id,)
    ).fetchone()
    return dict(row) if row else None


def list_users(conn: sqlite3.Connection, limit: int = 10) -> list[dict]:
    rows = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users ORDER BY id LIMIT ?",
        (limit,)
    ).fetchall()
    return [dict(r) for r in rows]


def add_user_xp(conn: sqlite3.Connection, user_id: int, amount: int, xp_per_level: int) -> None:
    """
    Add XP to a user's running total and recompute their level

    Args:
        user_id: User ID
        amount: XP to add (already capped)
        xp_per_level: XP needed per level
    """
    conn.execute(
        """
        UPDATE users
        SET overall_xp = overall_xp + ?,
            overall_level = (overall_xp + ?) / ? + 1,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
        """,
        (amount, amount, xp_per_level, user_id)
    )


def update_user_streak(
    conn: sqlite3.Connection,
    user_id: int,
    current_streak: int,
    longest_streak: int,
    last_played_date: Optional[date]
) -> None:
    conn.execute(
        """
        UPDATE users
        SET current_streak = ?,
            longest_streak = ?,
            last_played_date = ?,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
        """,
        (
            current_streak,
            longest_streak,
            last_played_date.isoformat() if last_played_date else None,
            user_id
        )
    )
