"""
Achievement System

Advances achievement progress after each completed game session.

Requirement types:
- correct_count: synced to the category's total correct answers
- games_played: +1 per game in the category ('general' counts any game)
- high_score_games: +1 per trivia game with >= 90% accuracy
- perfect_game: +1 per game with every answer correct
- streak_days: synced to the current daily streak

Progress is clamped to the requirement; unlocked_at is written once.
XP rewards are shown to the user but not credited.
"""

from typing import Dict, List
from datetime import datetime
import logging
import sqlite3

from geo_elevate.db import queries, transaction
from geo_elevate.models.achievement import Achievement, RequirementType
from geo_elevate.models.game import GameType
from geo_elevate.utils.datetime_helpers import format_db_timestamp

logger = logging.getLogger(__name__)

HIGH_SCORE_ACCURACY = 0.9

DEFAULT_ACHIEVEMENTS = [
    Achievement(name="First Steps", description="Complete your first game", icon="check",
                category="general", requirement_type=RequirementType.GAMES_PLAYED,
                requirement_value=1, xp_reward=50),
    Achievement(name="Flag Master", description="Identify 100 flags correctly", icon="flag",
                category="flags", requirement_type=RequirementType.CORRECT_COUNT,
                requirement_value=100, xp_reward=500),
    Achievement(name="Capital Expert", description="Identify 50 capitals correctly", icon="building",
                category="capitals", requirement_type=RequirementType.CORRECT_COUNT,
                requirement_value=50, xp_reward=300),
    Achievement(name="Linguist", description="Answer 30 language questions correctly", icon="language",
                category="languages", requirement_type=RequirementType.CORRECT_COUNT,
                requirement_value=30, xp_reward=300),
    Achievement(name="Map Navigator", description="Complete 20 map games", icon="map",
                category="maps", requirement_type=RequirementType.GAMES_PLAYED,
                requirement_value=20, xp_reward=250),
    Achievement(name="Trivia Champion", description="Score over 90% in 10 trivia games", icon="brain",
                category="trivia", requirement_type=RequirementType.HIGH_SCORE_GAMES,
                requirement_value=10, xp_reward=350),
    Achievement(name="Perfect Game", description="Score 100% on any game", icon="star",
                category="accuracy", requirement_type=RequirementType.PERFECT_GAME,
                requirement_value=1, xp_reward=200),
    Achievement(name="Dedicated Learner", description="Maintain a 30-day streak", icon="fire",
                category="streak", requirement_type=RequirementType.STREAK_DAYS,
                requirement_value=30, xp_reward=1000),
]


def seed_achievements(conn: sqlite3.Connection) -> int:
    """
    Install the default achievement catalogue

    Existing achievements (matched by name) are left alone.

    Returns:
        Number of achievements inserted
    """
    inserted = 0
    with transaction(conn):
        for ach in DEFAULT_ACHIEVEMENTS:
            if queries.insert_achievement(
                conn,
                ach.name,
                ach.description,
                ach.icon,
                ach.category,
                ach.requirement_type.value,
                ach.requirement_value,
                ach.xp_reward,
            ):
                inserted += 1

    logger.info(f"Seeded {inserted} achievements")
    return inserted


def _progress_for(
    achievement: dict,
    game_type: GameType,
    correct_count: int,
    total_questions: int,
    category_stats: Dict[str, dict],
    current_streak: int
) -> tuple[str, int]:
    """
    How a session moves one achievement

    Returns:
        ('absolute', value), ('increment', value) or ('none', 0)
    """
    try:
        requirement = RequirementType(achievement["requirement_type"])
    except ValueError:
        # Types tracked by other features (friends, multiplayer, ...)
        return "none", 0

    category = achievement["category"]

    if requirement == RequirementType.CORRECT_COUNT:
        stats = category_stats.get(category)
        if stats:
            return "absolute", stats["total_correct"]

    elif requirement == RequirementType.GAMES_PLAYED:
        if category == "general" or category == game_type.value:
            return "increment", 1

    elif requirement == RequirementType.HIGH_SCORE_GAMES:
        if game_type == GameType.TRIVIA and total_questions > 0:
            if correct_count / total_questions >= HIGH_SCORE_ACCURACY:
                return "increment", 1

    elif requirement == RequirementType.PERFECT_GAME:
        if total_questions > 0 and correct_count == total_questions:
            return "increment", 1

    elif requirement == RequirementType.STREAK_DAYS:
        return "absolute", current_streak

    return "none", 0


def update_achievement_progress(
    conn: sqlite3.Connection,
    user_id: int,
    game_type: GameType,
    correct_count: int,
    total_questions: int,
    current_streak: int,
    completed_at: datetime
) -> List[Dict[str, object]]:
    """
    Advance achievements after a completed session

    Must run after category stats and the streak have been updated so the
    synced requirement types see this session.

    Returns:
        Newly unlocked achievements:
        [{'achievement_id', 'name', 'description', 'icon', 'xp_reward'}]
    """
    newly_unlocked = []

    with transaction(conn):
        category_stats = queries.get_category_stats(conn, user_id)

        for achievement in queries.get_all_achievements(conn):
            mode, value = _progress_for(
                achievement, game_type, correct_count, total_questions,
                category_stats, current_streak
            )
            if mode == "none":
                continue

            existing = queries.get_user_achievement(conn, user_id, achievement["id"])
            old_progress = existing["progress"] if existing else 0
            target = achievement["requirement_value"]

            if mode == "absolute":
                new_progress = min(value, target)
            else:
                new_progress = min(old_progress + value, target)

            already_unlocked = bool(existing and existing["unlocked_at"])
            unlocked_now = new_progress >= target and not already_unlocked

            if new_progress == old_progress and not unlocked_now:
                continue

            queries.save_user_achievement_progress(
                conn,
                user_id,
                achievement["id"],
                new_progress,
                format_db_timestamp(completed_at) if unlocked_now else None,
            )

            if unlocked_now:
                logger.info(f"User {user_id} unlocked achievement '{achievement['name']}'")
                newly_unlocked.append({
                    "achievement_id": achievement["id"],
                    "name": achievement["name"],
                    "description": achievement["description"],
                    "icon": achievement["icon"],
                    "xp_reward": achievement["xp_reward"],
                })

    return newly_unlocked


def get_user_achievements(conn: sqlite3.Connection, user_id: int) -> List[Dict[str, object]]:
    """All achievements with the user's progress and unlock state"""
    achievements = queries.get_user_achievements(conn, user_id)
    for ach in achievements:
        ach["unlocked"] = ach["unlocked_at"] is not None
    return achievements
