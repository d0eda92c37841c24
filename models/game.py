from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .card import Card


class FocusType(str, Enum):
    WEAK = "weak"
    STRONG = "strong"
    SLOW = "slow"


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class GameConfig(BaseModel):
    select: List[int]
    focus: Optional[FocusType] = None  # None = configured default_focus
    question_count: Optional[int] = Field(default=None, ge=1)


class AnswerSubmit(BaseModel):
    value: int
    elapsed_seconds: float = Field(ge=0, allow_inf_nan=False)
    question: Optional[str] = None


class AnswerOutcome(BaseModel):
    is_correct: bool
    points_awarded: int
    card: Card
    next_card: Optional[Card] = None
    finished: bool = False


class GameResult(BaseModel):
    session_id: str
    points: int
    correct_answers: int
    total_cards: int
    select: List[int]


class SessionView(BaseModel):
    session_id: Optional[str] = None
    status: SessionStatus
    focus: Optional[FocusType] = None
    question: Optional[str] = None
    answered: int = 0
    question_count: int = 0
    points: int = 0
    correct_answers: int = 0
    started_at: Optional[datetime] = None
