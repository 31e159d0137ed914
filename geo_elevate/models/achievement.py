"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class RequirementType(str, Enum):
    """How progress toward an achievement is measured"""
    CORRECT_COUNT = "correct_count"
    GAMES_PLAYED = "games_played"
    HIGH_SCORE_GAMES = "high_score_games"
    PERFECT_GAME = "perfect_game"
    STREAK_DAYS = "streak_days"


class Achievement(BaseModel):
    """Achievement definition"""
    id: Optional[int] = None
    name: str
    description: str
    icon: str = "trophy"
    category: str
    requirement_type: RequirementType
    requirement_value: int
    xp_reward: int = 100


class UserAchievement(BaseModel):
    """User's progress toward an achievement"""
    user_id: int
    achievement_id: int
    progress: int = 0
    unlocked_at: Optional[datetime] = None
