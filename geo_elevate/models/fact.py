"""Fact progress models"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from geo_elevate.models.game import GameType


class FactProgress(BaseModel):
    """Per-user counters for a single quiz fact"""
    user_id: int
    fact_type: GameType
    fact_id: int
    times_seen: int = 0
    times_correct: int = 0
    times_wrong: int = 0
    last_seen_at: Optional[datetime] = None

    @property
    def accuracy(self) -> float:
        if not self.times_seen:
            return 0.0
        return self.times_correct / self.times_seen


class MasterySummary(BaseModel):
    """Aggregate fact progress for one fact type"""
    fact_type: GameType
    total_facts: int
    times_seen: int
    times_correct: int
    times_wrong: int
    accuracy: float
