"""User-related Pydantic models"""
from typing import Optional
from datetime import date
from pydantic import BaseModel


class User(BaseModel):
    """Progression fields of a user row"""
    id: int
    username: str
    email: Optional[str] = None
    overall_xp: int = 0
    overall_level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    last_played_date: Optional[date] = None


class StreakUpdate(BaseModel):
    """Outcome of a streak transition"""
    user_id: int
    played_on: date
    previous_streak: int
    current_streak: int
    longest_streak: int
    last_played_date: Optional[date] = None
    changed: bool
    message: str


class StreakInfo(BaseModel):
    """Read-only view of a user's streak on a given day"""
    user_id: int
    current_streak: int
    longest_streak: int
    last_played_date: Optional[date] = None
    played_today: bool
    at_risk: bool  # alive but not yet extended today
