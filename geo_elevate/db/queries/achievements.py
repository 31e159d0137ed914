"""Achievement queries"""
import logging
import sqlite3
from typing import Optional

logger = logging.getLogger(__name__)


def insert_achievement(
    conn: sqlite3.Connection,
    name: str,
    description: str,
    icon: str,
    category: str,
    requirement_type: str,
    requirement_value: int,
    xp_reward: int
) -> bool:
    """
    Insert an achievement definition unless one with the same name exists

    Returns:
        True if a row was inserted
    """
    cur = conn.execute(
        """
        INSERT OR IGNORE INTO achievements
            (name, description, icon, category, requirement_type, requirement_value, xp_reward)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (name, description, icon, category, requirement_type, requirement_value, xp_reward)
    )
    return cur.rowcount > 0


def get_all_achievements(conn: sqlite3.Connection) -> list[dict]:
    rows = conn.execute(
        """
        SELECT id, name, description, icon, category, requirement_type, requirement_value, xp_reward
        FROM achievements
        ORDER BY id
        """
    ).fetchall()
    return [dict(r) for r in rows]


def get_user_achievement(conn: sqlite3.Connection, user_id: int, achievement_id: int) -> Optional[dict]:
    row = conn.execute(
        """
        SELECT user_id, achievement_id, progress, unlocked_at
        FROM user_achievements
        WHERE user_id = ? AND achievement_id = ?
        """,
        (user_id, achievement_id)
    ).fetchone()
    return dict(row) if row else None


def save_user_achievement_progress(
    conn: sqlite3.Connection,
    user_id: int,
    achievement_id: int,
    progress: int,
    unlocked_at: Optional[str]
) -> None:
    """
    Store progress; unlocked_at is only set the first time it is provided
    """
    conn.execute(
        """
        INSERT INTO user_achievements (user_id, achievement_id, progress, unlocked_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id, achievement_id) DO UPDATE SET
            progress = excluded.progress,
            unlocked_at = COALESCE(user_achievements.unlocked_at, excluded.unlocked_at)
        """,
        (user_id, achievement_id, progress, unlocked_at)
    )


def get_user_achievements(conn: sqlite3.Connection, user_id: int) -> list[dict]:
    """All achievements with the user's progress (0 where never started)"""
    rows = conn.execute(
        """
        SELECT a.id AS achievement_id, a.name, a.description, a.icon, a.category,
               a.requirement_type, a.requirement_value, a.xp_reward,
               COALESCE(ua.progress, 0) AS progress, ua.unlocked_at
        FROM achievements a
        LEFT JOIN user_achievements ua
            ON ua.achievement_id = a.id AND ua.user_id = ?
        ORDER BY a.id
        """,
        (user_id,)
    ).fetchall()
    return [dict(r) for r in rows]
