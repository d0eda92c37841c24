from .card import Card
from .game import (
    AnswerOutcome,
    AnswerSubmit,
    FocusType,
    GameConfig,
    GameResult,
    SessionStatus,
    SessionView,
)
from .history import GameHistory, Statistics

__all__ = [
    'Card', 'AnswerOutcome', 'AnswerSubmit', 'FocusType', 'GameConfig', 'GameResult',
    'SessionStatus', 'SessionView', 'GameHistory', 'Statistics',
]
