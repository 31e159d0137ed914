"""Game session models"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class GameType(str, Enum):
    """Game types (also used as fact types and stat categories)"""
    FLAGS = "flags"
    CAPITALS = "capitals"
    MAPS = "maps"
    LANGUAGES = "languages"
    TRIVIA = "trivia"


class DailyXpStatus(BaseModel):
    """XP already earned today for one game type"""
    game_type: GameType
    earned_today: int
    remaining: int
    max_daily: int
    capped: bool


class XpAward(BaseModel):
    """Result of recording a session's XP against the daily cap"""
    session_id: int
    game_type: GameType
    requested_xp: int
    applied_xp: int
    earned_today: int
    remaining: int
    max_daily: int
    capped: bool
    message: Optional[str] = None
    overall_xp: int
    overall_level: int
    leveled_up: bool = False


class AnsweredFact(BaseModel):
    """A fact presented during a session and whether it was answered correctly"""
    fact_id: int
    was_correct: bool
    fact_type: Optional[GameType] = None


class SessionResult(BaseModel):
    """Everything a finished session changed, for the API layer to render"""
    user_id: int
    xp: XpAward
    current_streak: int
    longest_streak: int
    streak_changed: bool
    facts_recorded: int = 0
    achievements_unlocked: list[dict] = Field(default_factory=list)
