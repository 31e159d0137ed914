"""
SessionService - Game Completion Business Logic

Applies everything a finished game changes (capped XP, category stats,
streak, fact counters, achievements) as one atomic write scoped to the user.
"""

import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime

from geo_elevate.db import Database, queries, transaction
from geo_elevate.gamification import (
    record_fact_outcome,
    record_session_xp,
    update_achievement_progress,
    update_streak,
)
from geo_elevate.models.game import AnsweredFact, SessionResult
from geo_elevate.resilience.retry import retry_with_backoff
from geo_elevate.validators import SessionSubmission, parse_model, validate_timestamp, validate_user_id

logger = logging.getLogger(__name__)


class SessionService:
    """
    Service for game session completion.

    Responsibilities:
    - Validate the submission before any write
    - Run the read-modify-write in a single BEGIN IMMEDIATE transaction
    - Retry once on lock contention, then surface ConflictError
    - Return plain structured data for the API layer
    """

    def __init__(self, database: Database, max_retries: Optional[int] = None):
        """
        Initialize SessionService.

        Args:
            database: Database handle; a connection is acquired per call
            max_retries: Conflict retries (default: CONFLICT_MAX_RETRIES)
        """
        self.database = database
        self.max_retries = max_retries
        logger.debug("SessionService initialized")

    def complete_session(
        self,
        user_id: int,
        game_type: str,
        earned_xp: int,
        completed_at: datetime,
        *,
        score: int = 0,
        correct_count: int = 0,
        total_questions: int = 10,
        game_mode: str = "solo",
        difficulty_level: str = "medium",
        region_filter: Optional[str] = None,
        answered_facts: Optional[Iterable[AnsweredFact]] = None
    ) -> Dict[str, Any]:
        """
        Record a finished game.

        Args:
            user_id: User ID
            game_type: Game type tag
            earned_xp: Candidate XP before the daily cap
            completed_at: Completion timestamp (its UTC date is the play day)
            answered_facts: Facts shown during the game with their outcomes

        Returns:
            SessionResult as JSON-ready dict:
            {
                'user_id': int,
                'xp': {'applied_xp': int, 'capped': bool, 'remaining': int, ...},
                'current_streak': int,
                'longest_streak': int,
                'streak_changed': bool,
                'facts_recorded': int,
                'achievements_unlocked': list
            }

        Raises:
            InvalidArgumentError: bad submission (nothing written)
            RecordNotFoundError: unknown user (nothing written)
            ConflictError: concurrent writes kept colliding; client should retry
        """
        validate_user_id(user_id)
        submission = parse_model(
            SessionSubmission,
            user_id=user_id,
            game_type=game_type,
            earned_xp=earned_xp,
            score=score,
            correct_count=correct_count,
            total_questions=total_questions,
            game_mode=game_mode,
            difficulty_level=difficulty_level,
            region_filter=region_filter,
        )
        completed_at = validate_timestamp(completed_at, user_id=user_id)
        facts = list(answered_facts or [])

        with self.database.connection() as conn:
            result = retry_with_backoff(
                self._apply,
                conn,
                user_id,
                submission,
                facts,
                completed_at,
                max_retries=self.max_retries,
            )

        return result.model_dump(mode="json")

    def _apply(
        self,
        conn: sqlite3.Connection,
        user_id: int,
        submission: SessionSubmission,
        facts: List[AnsweredFact],
        completed_at: datetime
    ) -> SessionResult:
        with transaction(conn):
            xp_award = record_session_xp(
                conn,
                user_id,
                submission.game_type,
                submission.earned_xp,
                completed_at,
                game_mode=submission.game_mode,
                difficulty_level=submission.difficulty_level,
                region_filter=submission.region_filter,
                score=submission.score,
                correct_count=submission.correct_count,
                total_questions=submission.total_questions,
            )

            queries.update_category_stats(
                conn,
                user_id,
                submission.game_type.value,
                xp_award.applied_xp,
                submission.correct_count,
                submission.total_questions,
                submission.score,
            )

            streak = update_streak(conn, user_id, completed_at)

            for fact in facts:
                record_fact_outcome(
                    conn,
                    user_id,
                    fact.fact_id,
                    fact.fact_type or submission.game_type,
                    fact.was_correct,
                    completed_at,
                )

            unlocked = update_achievement_progress(
                conn,
                user_id,
                submission.game_type,
                submission.correct_count,
                submission.total_questions,
                streak.current_streak,
                completed_at,
            )

        logger.info(
            f"Completed {submission.game_type.value} session {xp_award.session_id} for user {user_id}: "
            f"{xp_award.applied_xp} XP, streak {streak.current_streak}, "
            f"{len(unlocked)} achievements unlocked"
        )

        return SessionResult(
            user_id=user_id,
            xp=xp_award,
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            streak_changed=streak.changed,
            facts_recorded=len(facts),
            achievements_unlocked=unlocked,
        )
