"""Fact progress queries"""
import logging
import sqlite3
from typing import Optional

logger = logging.getLogger(__name__)

FACT_COLUMNS = (
    "user_id, fact_type, fact_id, times_seen, times_correct, times_wrong, last_seen_at"
)


def upsert_fact_outcome(
    conn: sqlite3.Connection,
    user_id: int,
    fact_type: str,
    fact_id: int,
    was_correct: bool,
    seen_at: str
) -> None:
    """
    Count one presentation of a fact

    Args:
        seen_at: UTC timestamp already formatted for storage
    """
    correct = 1 if was_correct else 0
    conn.execute(
        """
        INSERT INTO user_fact_progress (
            user_id, fact_type, fact_id, times_seen, times_correct, times_wrong, last_seen_at
        )
        VALUES (?, ?, ?, 1, ?, ?, ?)
        ON CONFLICT(user_id, fact_type, fact_id) DO UPDATE SET
            times_seen = times_seen + 1,
            times_correct = times_correct + excluded.times_correct,
            times_wrong = times_wrong + excluded.times_wrong,
            last_seen_at = excluded.last_seen_at
        """,
        (user_id, fact_type, fact_id, correct, 1 - correct, seen_at)
    )


def get_fact_progress(
    conn: sqlite3.Connection,
    user_id: int,
    fact_type: str,
    fact_id: int
) -> Optional[dict]:
    row = conn.execute(
        f"""
        SELECT {FACT_COLUMNS}
        FROM user_fact_progress
        WHERE user_id = ? AND fact_type = ? AND fact_id = ?
        """,
        (user_id, fact_type, fact_id)
    ).fetchone()
    return dict(row) if row else None


def get_facts_by_difficulty(
    conn: sqlite3.Connection,
    user_id: int,
    fact_type: Optional[str] = None,
    limit: int = 20
) -> list[dict]:
    """
    Facts ordered hardest first: most wrong answers, then most recently seen
    """
    query = f"SELECT {FACT_COLUMNS} FROM user_fact_progress WHERE user_id = ?"
    params: list = [user_id]

    if fact_type:
        query += " AND fact_type = ?"
        params.append(fact_type)

    query += " ORDER BY times_wrong DESC, last_seen_at DESC, fact_id ASC LIMIT ?"
    params.append(limit)

    rows = conn.execute(query, params).fetchall()
    return [dict(r) for r in rows]


def get_fact_totals_by_type(conn: sqlite3.Connection, user_id: int) -> list[dict]:
    """Per fact type totals for the mastery summary"""
    rows = conn.execute(
        """
        SELECT fact_type,
               COUNT(*) AS total_facts,
               COALESCE(SUM(times_seen), 0) AS times_seen,
               COALESCE(SUM(times_correct), 0) AS times_correct,
               COALESCE(SUM(times_wrong), 0) AS times_wrong
        FROM user_fact_progress
        WHERE user_id = ?
        GROUP BY fact_type
        ORDER BY fact_type
        """,
        (user_id,)
    ).fetchall()
    return [dict(r) for r in rows]
