"""Session engine: drives one drill game from start to result.

The engine works on copies of the stored cards. Each answer is committed to
the store before the in-memory session advances, so a failed write leaves
the session where it was and the same answer can be submitted again.
"""
from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from models.card import Card
from models.game import (
    AnswerOutcome,
    FocusType,
    GameConfig,
    GameResult,
    SessionStatus,
    SessionView,
)
from utils.deck import build_deck, normalize_selection
from utils.errors import ConfigError, InvalidTransitionError
from utils.evaluator import DEFAULT_SCORING_RULES, evaluate
from utils.selection import select_next

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    session_id: str
    select: List[int]
    focus: FocusType
    question_count: int
    deck: Dict[str, Card]
    cards: List[Card] = field(default_factory=list)
    current_card_index: int = 0
    points: int = 0
    correct_answers: int = 0
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    asked: Set[str] = field(default_factory=set)

    @property
    def current_card(self) -> Optional[Card]:
        if self.current_card_index < len(self.cards):
            return self.cards[self.current_card_index]
        return None

    @property
    def answered(self) -> int:
        return self.current_card_index


class SessionEngine:
    def __init__(
        self,
        store,
        rules: Optional[dict] = None,
        rng: Optional[random.Random] = None,
        default_question_count: int = 0,
        default_focus: FocusType = FocusType.WEAK,
    ):
        if default_question_count < 0:
            raise ConfigError("default_question_count cannot be negative")
        self._store = store
        self._rules = rules or DEFAULT_SCORING_RULES
        self._rng = rng or random.Random()
        self._default_question_count = default_question_count
        self._default_focus = FocusType(default_focus)
        self.status = SessionStatus.NOT_STARTED
        self.state: Optional[GameState] = None
        self._result: Optional[GameResult] = None

    def start_session(self, config: GameConfig) -> GameState:
        select = normalize_selection(config.select)
        if self.status == SessionStatus.IN_PROGRESS:
            logger.info("Abandoning session %s without recording", self.state.session_id)
        deck = build_deck(select, self._store.load_deck(select))
        question_count = config.question_count or self._default_question_count or len(deck)
        self.state = GameState(
            session_id=uuid.uuid4().hex,
            select=select,
            focus=FocusType(config.focus or self._default_focus),
            question_count=question_count,
            deck={card.question: card for card in deck},
        )
        self._result = None
        self.status = SessionStatus.IN_PROGRESS
        self._draw()
        logger.info(
            "Started session %s: select=%s focus=%s questions=%d",
            self.state.session_id, select, self.state.focus.value, question_count,
        )
        return self.state

    def _draw(self) -> Card:
        state = self.state
        if len(state.asked) >= len(state.deck):
            # every fact asked once; start another cycle
            state.asked.clear()
        card = select_next(list(state.deck.values()), state.focus, state.asked, self._rng)
        state.asked.add(card.question)
        state.cards.append(card)
        return card

    @property
    def current_card(self) -> Optional[Card]:
        if self.status != SessionStatus.IN_PROGRESS:
            return None
        return self.state.current_card

    def submit_answer(
        self,
        value: int,
        elapsed_seconds: float,
        question: Optional[str] = None,
    ) -> AnswerOutcome:
        """Grade ``value`` against the current card and advance the session.

        ``question`` guards against answering a card the session has already
        moved past.
        """
        if self.status != SessionStatus.IN_PROGRESS:
            raise InvalidTransitionError(f"Cannot submit an answer while {self.status.value}")
        state = self.state
        current = state.deck[state.current_card.question]
        if question is not None and question != current.question:
            raise InvalidTransitionError(
                f"Answer for {question} but the current card is {current.question}"
            )

        is_correct, updated, points = evaluate(current, value, elapsed_seconds, self._rules)
        self._store.save_card(updated)

        state.deck[updated.question] = updated
        state.points += points
        if is_correct:
            state.correct_answers += 1
        state.current_card_index += 1
        logger.debug(
            "%s answered %s (%s) in %.1fs: level %d -> %d, +%d points",
            updated.question, value, "correct" if is_correct else "wrong",
            elapsed_seconds, current.level, updated.level, points,
        )

        next_card = None
        if state.answered >= state.question_count:
            self._finish()
        else:
            next_card = self._draw()
        return AnswerOutcome(
            is_correct=is_correct,
            points_awarded=points,
            card=updated,
            next_card=next_card,
            finished=self.status == SessionStatus.FINISHED,
        )

    def _finish(self) -> None:
        state = self.state
        self._result = GameResult(
            session_id=state.session_id,
            points=state.points,
            correct_answers=state.correct_answers,
            total_cards=state.answered,
            select=list(state.select),
        )
        self.status = SessionStatus.FINISHED
        logger.info(
            "Finished session %s: %d/%d correct, %d points",
            state.session_id, state.correct_answers, state.answered, state.points,
        )

    def get_result(self) -> GameResult:
        if self.status != SessionStatus.FINISHED:
            raise InvalidTransitionError(f"No result while {self.status.value}")
        return self._result.model_copy()

    def view(self) -> SessionView:
        if self.state is None:
            return SessionView(status=self.status)
        current = self.current_card
        return SessionView(
            session_id=self.state.session_id,
            status=self.status,
            focus=self.state.focus,
            question=current.question if current else None,
            answered=self.state.answered,
            question_count=self.state.question_count,
            points=self.state.points,
            correct_answers=self.state.correct_answers,
            started_at=self.state.start_time,
        )
