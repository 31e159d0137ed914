"""Pydantic models for geo-elevate progression data"""

from geo_elevate.models.game import (
    GameType,
    DailyXpStatus,
    XpAward,
    AnsweredFact,
    SessionResult,
)
from geo_elevate.models.user import User, StreakUpdate, StreakInfo
from geo_elevate.models.fact import FactProgress, MasterySummary
from geo_elevate.models.achievement import Achievement, UserAchievement, RequirementType

__all__ = [
    "GameType",
    "DailyXpStatus",
    "XpAward",
    "AnsweredFact",
    "SessionResult",
    "User",
    "StreakUpdate",
    "StreakInfo",
    "FactProgress",
    "MasterySummary",
    "Achievement",
    "UserAchievement",
    "RequirementType",
]
