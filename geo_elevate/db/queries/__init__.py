"""
Database queries - re-exported so callers can use 'from geo_elevate.db import queries'.

Every function takes an explicit sqlite3 connection; none open their own.

Module organization:
- user.py: User rows, overall XP, streak fields
- sessions.py: Game sessions, daily XP totals, category stats
- facts.py: Per-fact progress counters
- achievements.py: Achievement catalogue and per-user progress
"""

from geo_elevate.db.queries.user import (
    create_user,
    get_user,
    list_users,
    add_user_xp,
    update_user_streak,
)

from geo_elevate.db.queries.sessions import (
    get_xp_earned_on,
    insert_game_session,
    update_category_stats,
    get_category_stats,
)

from geo_elevate.db.queries.facts import (
    upsert_fact_outcome,
    get_fact_progress,
    get_facts_by_difficulty,
    get_fact_totals_by_type,
)

from geo_elevate.db.queries.achievements import (
    insert_achievement,
    get_all_achievements,
    get_user_achievement,
    save_user_achievement_progress,
    get_user_achievements,
)

__all__ = [
    # User
    "create_user",
    "get_user",
    "list_users",
    "add_user_xp",
    "update_user_streak",
    # Sessions
    "get_xp_earned_on",
    "insert_game_session",
    "update_category_stats",
    "get_category_stats",
    # Facts
    "upsert_fact_outcome",
    "get_fact_progress",
    "get_facts_by_difficulty",
    "get_fact_totals_by_type",
    # Achievements
    "insert_achievement",
    "get_all_achievements",
    "get_user_achievement",
    "save_user_achievement_progress",
    "get_user_achievements",
]
