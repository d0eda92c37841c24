from typing import List

from pydantic import BaseModel


class GameHistory(BaseModel):
    session_id: str
    date: str  # ISO datetime
    select: List[int]
    points: int
    correct_answers: int


class Statistics(BaseModel):
    games_played: int = 0
    total_points: int = 0
    total_correct_answers: int = 0
