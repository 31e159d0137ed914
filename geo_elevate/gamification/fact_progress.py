"""
Per-fact progress tracking

Counts how often each quiz fact (a country's flag, a capital, ...) was shown
to a user and how often they got it right, so difficult facts can be
resurfaced.
"""

from typing import List, Optional
from datetime import datetime
import logging
import sqlite3

from geo_elevate.db import queries, transaction
from geo_elevate.exceptions import RecordNotFoundError
from geo_elevate.models.fact import FactProgress, MasterySummary
from geo_elevate.utils.datetime_helpers import format_db_timestamp, parse_db_timestamp
from geo_elevate.validators import FactOutcomeInput, parse_model, validate_game_type, validate_timestamp

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_LIMIT = 20


def _to_model(row: dict) -> FactProgress:
    return FactProgress(
        user_id=row["user_id"],
        fact_type=row["fact_type"],
        fact_id=row["fact_id"],
        times_seen=row["times_seen"],
        times_correct=row["times_correct"],
        times_wrong=row["times_wrong"],
        last_seen_at=parse_db_timestamp(row["last_seen_at"]),
    )


def record_fact_outcome(
    conn: sqlite3.Connection,
    user_id: int,
    fact_id: int,
    fact_type: str,
    was_correct: bool,
    seen_at: datetime
) -> FactProgress:
    """
    Count one presentation of a fact and its outcome

    Args:
        user_id: User ID
        fact_id: ID of the fact within its type (e.g. a country ID)
        fact_type: Game type the fact belongs to
        was_correct: Whether the user answered correctly
        seen_at: When the fact was shown

    Returns:
        Updated counters

    Raises:
        InvalidArgumentError: bad fact type, ID, outcome or timestamp
        RecordNotFoundError: user doesn't exist
    """
    outcome = parse_model(
        FactOutcomeInput,
        user_id=user_id,
        fact_id=fact_id,
        fact_type=fact_type,
        was_correct=was_correct,
    )
    seen_at = validate_timestamp(seen_at, field="seen_at", user_id=user_id)

    with transaction(conn):
        if not queries.get_user(conn, user_id):
            raise RecordNotFoundError(
                message=f"User {user_id} not found",
                record_type="User",
                record_id=user_id,
                user_id=user_id,
                operation="record_fact_outcome"
            )

        queries.upsert_fact_outcome(
            conn,
            user_id,
            outcome.fact_type.value,
            outcome.fact_id,
            outcome.was_correct,
            format_db_timestamp(seen_at),
        )
        row = queries.get_fact_progress(conn, user_id, outcome.fact_type.value, outcome.fact_id)

    logger.debug(
        f"Fact {outcome.fact_type.value}/{outcome.fact_id} for user {user_id}: "
        f"{'correct' if outcome.was_correct else 'wrong'} (seen {row['times_seen']}x)"
    )
    return _to_model(row)


def get_review_queue(
    conn: sqlite3.Connection,
    user_id: int,
    fact_type: Optional[str] = None,
    limit: int = DEFAULT_REVIEW_LIMIT
) -> List[FactProgress]:
    """
    Facts to resurface, hardest first

    Ordered by times_wrong descending, then last_seen_at descending.
    """
    type_value = validate_game_type(fact_type, field="fact_type", user_id=user_id).value if fact_type else None
    rows = queries.get_facts_by_difficulty(conn, user_id, type_value, limit)
    return [_to_model(r) for r in rows]


def get_mastery_summary(conn: sqlite3.Connection, user_id: int) -> List[MasterySummary]:
    """Per fact type totals of facts tracked, times seen and accuracy"""
    summaries = []
    for row in queries.get_fact_totals_by_type(conn, user_id):
        seen = row["times_seen"]
        summaries.append(MasterySummary(
            fact_type=row["fact_type"],
            total_facts=row["total_facts"],
            times_seen=seen,
            times_correct=row["times_correct"],
            times_wrong=row["times_wrong"],
            accuracy=round(row["times_correct"] / seen, 4) if seen else 0.0,
        ))
    return summaries
