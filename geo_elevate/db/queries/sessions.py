"""Game session and category stats queries"""
import logging
import sqlite3
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)


# ==========================================
# Game Sessions
# ==========================================

def get_xp_earned_on(conn: sqlite3.Connection, user_id: int, game_type: str, day: date) -> int:
    """
    Sum of XP the user earned for a game type on one UTC day

    completed_at is stored as UTC text, so DATE() yields the UTC day.
    """
    row = conn.execute(
        """
        SELECT COALESCE(SUM(xp_earned), 0) AS earned_today
        FROM game_sessions
        WHERE user_id = ? AND game_type = ? AND DATE(completed_at) = ?
        """,
        (user_id, game_type, day.isoformat())
    ).fetchone()
    return int(row["earned_today"])


def insert_game_session(
    conn: sqlite3.Connection,
    user_id: int,
    game_type: str,
    xp_earned: int,
    completed_at: str,
    game_mode: str = "solo",
    difficulty_level: str = "medium",
    region_filter: Optional[str] = None,
    score: int = 0,
    correct_count: int = 0,
    total_questions: int = 10
) -> int:
    """
    Insert a finished game session

    Args:
        completed_at: UTC timestamp already formatted for storage

    Returns:
        Session ID
    """
    cur = conn.execute(
        """
        INSERT INTO game_sessions (
            user_id, game_type, game_mode, difficulty_level, region_filter,
            score, correct_count, total_questions, xp_earned, completed_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id, game_type, game_mode, difficulty_level, region_filter,
            score, correct_count, total_questions, xp_earned, completed_at
        )
    )
    return cur.lastrowid


# ==========================================
# Category Stats
# ==========================================

def update_category_stats(
    conn: sqlite3.Connection,
    user_id: int,
    category: str,
    xp: int,
    correct_count: int,
    total_questions: int,
    score: int
) -> None:
    """Fold one finished game into the user's stats for its category"""
    conn.execute(
        """
        INSERT INTO user_category_stats (
            user_id, category, xp, games_played, total_correct, total_questions, high_score
        )
        VALUES (?, ?, ?, 1, ?, ?, ?)
        ON CONFLICT(user_id, category) DO UPDATE SET
            xp = xp + excluded.xp,
            games_played = games_played + 1,
            total_correct = total_correct + excluded.total_correct,
            total_questions = total_questions + excluded.total_questions,
            high_score = MAX(high_score, excluded.high_score),
            updated_at = CURRENT_TIMESTAMP
        """,
        (user_id, category, xp, correct_count, total_questions, score)
    )


def get_category_stats(conn: sqlite3.Connection, user_id: int) -> dict[str, dict]:
    """Category stats keyed by category name"""
    rows = conn.execute(
        """
        SELECT user_id, category, xp, games_played, total_correct, total_questions, high_score
        FROM user_category_stats
        WHERE user_id = ?
        """,
        (user_id,)
    ).fetchall()
    return {r["category"]: dict(r) for r in rows}
