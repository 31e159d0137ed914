"""
Gamification system for geo-elevate

- Daily XP accrual with a per-game-type cap
- Consecutive-day streak tracking
- Per-fact progress counters
- Achievement progress
"""

from geo_elevate.gamification.xp_system import (
    record_session_xp,
    get_daily_xp_status,
    get_daily_xp_overview,
    calculate_level_from_xp,
)
from geo_elevate.gamification.streak_system import (
    update_streak,
    repair_streak,
    get_streak_info,
    next_streak_state,
)
from geo_elevate.gamification.fact_progress import (
    record_fact_outcome,
    get_review_queue,
    get_mastery_summary,
)
from geo_elevate.gamification.achievement_system import (
    seed_achievements,
    update_achievement_progress,
    get_user_achievements,
)

__all__ = [
    "record_session_xp",
    "get_daily_xp_status",
    "get_daily_xp_overview",
    "calculate_level_from_xp",
    "update_streak",
    "repair_streak",
    "get_streak_info",
    "next_streak_state",
    "record_fact_outcome",
    "get_review_queue",
    "get_mastery_summary",
    "seed_achievements",
    "update_achievement_progress",
    "get_user_achievements",
]
