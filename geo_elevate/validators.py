"""
Centralized Pydantic Input Validation Layer

Every progression operation validates its inputs here before touching the
database, so a bad request never produces a partial write.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional, Union
from pydantic import BaseModel, Field, StrictBool, StrictInt, ValidationError, model_validator

from geo_elevate.exceptions import InvalidArgumentError
from geo_elevate.models.game import GameType

logger = logging.getLogger(__name__)


def validate_game_type(value: Any, field: str = "game_type", user_id: Optional[int] = None) -> GameType:
    """
    Coerce a game type tag, rejecting unknown values

    Raises:
        InvalidArgumentError: if value isn't one of the known game types
    """
    try:
        return GameType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in GameType)
        raise InvalidArgumentError(
            message=f"Unknown {field} '{value}'. Expected one of: {allowed}",
            field=field,
            value=value,
            user_id=user_id
        )


def validate_xp_amount(value: Any, user_id: Optional[int] = None) -> int:
    """
    Check a candidate XP amount is a non-negative integer

    Booleans are rejected even though bool subclasses int.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(
            message="XP must be an integer",
            field="earned_xp",
            value=value,
            user_id=user_id
        )
    if value < 0:
        raise InvalidArgumentError(
            message="XP must not be negative",
            field="earned_xp",
            value=value,
            user_id=user_id
        )
    return value


def validate_user_id(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(
            message="User ID must be a positive integer",
            field="user_id",
            value=value
        )
    return value


def validate_timestamp(
    value: Any,
    field: str = "completed_at",
    user_id: Optional[int] = None,
    allow_date: bool = False
) -> Union[date, datetime]:
    """
    Check a timestamp is a datetime (or a plain date when allow_date is set)

    Strings are rejected rather than parsed; callers pass real datetimes.
    """
    expected = date if allow_date else datetime
    if not isinstance(value, expected):
        raise InvalidArgumentError(
            message=f"{field} must be a {expected.__name__}",
            field=field,
            value=value,
            user_id=user_id
        )
    return value


# ============================================================================
# SESSION SUBMISSION VALIDATION
# ============================================================================

class SessionSubmission(BaseModel):
    """
    Validate the payload of a finished game

    Constraints:
    - game_type: one of the known game types
    - earned_xp: strict non-negative integer (candidate, before the daily cap)
    - correct_count <= total_questions
    """
    game_type: GameType
    earned_xp: StrictInt = Field(..., ge=0)
    score: StrictInt = Field(0, ge=0)
    correct_count: StrictInt = Field(0, ge=0)
    total_questions: StrictInt = Field(10, ge=0)
    game_mode: str = Field("solo", min_length=1, max_length=32)
    difficulty_level: str = Field("medium", min_length=1, max_length=32)
    region_filter: Optional[str] = Field(None, max_length=64)

    @model_validator(mode="after")
    def check_counts(self) -> "SessionSubmission":
        if self.correct_count > self.total_questions:
            raise ValueError(
                f"correct_count ({self.correct_count}) exceeds "
                f"total_questions ({self.total_questions})"
            )
        return self


class FactOutcomeInput(BaseModel):
    """Validate a single fact outcome"""
    fact_id: StrictInt = Field(..., ge=0)
    fact_type: GameType
    was_correct: StrictBool


def parse_model(model: type[BaseModel], user_id: Optional[int] = None, **data: Any) -> BaseModel:
    """
    Build a validation model, translating pydantic errors into InvalidArgumentError
    """
    try:
        return model(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise InvalidArgumentError(
            message=first.get("msg", str(e)),
            field=field,
            value=first.get("input"),
            user_id=user_id,
            cause=e
        )
