import random

import pytest

from models.game import GameConfig, SessionStatus
from utils.errors import ConfigError, InvalidTransitionError, PersistenceError
from utils.session import SessionEngine


class FlakyStore:
    """Wraps a store and fails the next card save."""

    def __init__(self, store):
        self._store = store
        self.fail_next_save = False

    def load_deck(self, select):
        return self._store.load_deck(select)

    def save_card(self, card):
        if self.fail_next_save:
            self.fail_next_save = False
            raise PersistenceError("disk full")
        self._store.save_card(card)


class NoDeckStore:
    def load_deck(self, select):
        raise AssertionError("deck must not be loaded")


def test_single_table_game_with_one_wrong_answer(store):
    engine = SessionEngine(store, rng=random.Random(7))
    engine.start_session(GameConfig(select=[6], focus="weak", question_count=7))

    first = engine.current_card
    outcome = engine.submit_answer(first.answer + 1, 4.0)
    assert not outcome.is_correct
    assert outcome.points_awarded == 0
    assert outcome.card.level == 1

    seen = {first.question}
    for _ in range(6):
        card = engine.current_card
        assert card.question not in seen
        seen.add(card.question)
        outcome = engine.submit_answer(card.answer, 3.0)
        assert outcome.is_correct
        assert outcome.card.level == card.level + 1

    assert outcome.finished
    assert outcome.next_card is None
    assert engine.status == SessionStatus.FINISHED
    result = engine.get_result()
    assert result.correct_answers == 6
    assert result.total_cards == 7
    assert result.points == 6 * 15
    assert result.select == [6]


def test_answers_are_committed_to_the_store(store):
    engine = SessionEngine(store, rng=random.Random(1))
    engine.start_session(GameConfig(select=[3], question_count=1))
    card = engine.current_card

    engine.submit_answer(card.answer, 2.0)

    saved = store.load_deck([3])[card.question]
    assert saved.level == 2
    assert saved.time == pytest.approx(0.7 * 60 + 0.3 * 2.0)


def test_next_session_starts_from_persisted_levels(store):
    engine = SessionEngine(store, rng=random.Random(2))
    engine.start_session(GameConfig(select=[2], question_count=8))
    for _ in range(8):
        engine.submit_answer(engine.current_card.answer, 1.0)

    engine.start_session(GameConfig(select=[2], question_count=1))

    assert engine.current_card.level == 2


def test_empty_selection_fails_before_any_card_is_created():
    engine = SessionEngine(NoDeckStore())

    with pytest.raises(ConfigError):
        engine.start_session(GameConfig(select=[]))
    assert engine.status == SessionStatus.NOT_STARTED
    assert engine.state is None


def test_submit_before_start_is_rejected(store):
    engine = SessionEngine(store)

    with pytest.raises(InvalidTransitionError):
        engine.submit_answer(4, 1.0)
    with pytest.raises(InvalidTransitionError):
        engine.get_result()


def test_submit_after_finish_is_rejected(store):
    engine = SessionEngine(store)
    engine.start_session(GameConfig(select=[9], question_count=1))
    engine.submit_answer(engine.current_card.answer, 1.0)

    with pytest.raises(InvalidTransitionError):
        engine.submit_answer(18, 1.0)


def test_answer_for_a_previous_card_is_rejected(store):
    engine = SessionEngine(store, rng=random.Random(4))
    engine.start_session(GameConfig(select=[5], question_count=3))
    first = engine.current_card
    engine.submit_answer(first.answer, 1.0, question=first.question)

    with pytest.raises(InvalidTransitionError):
        engine.submit_answer(first.answer, 1.0, question=first.question)


def test_failed_commit_leaves_session_unchanged(store):
    flaky = FlakyStore(store)
    engine = SessionEngine(flaky, rng=random.Random(5))
    engine.start_session(GameConfig(select=[4], question_count=2))
    card = engine.current_card

    flaky.fail_next_save = True
    with pytest.raises(PersistenceError):
        engine.submit_answer(card.answer, 1.0)
    assert engine.state.answered == 0
    assert engine.state.points == 0
    assert engine.current_card.question == card.question

    outcome = engine.submit_answer(card.answer, 1.0)
    assert outcome.is_correct
    assert engine.state.answered == 1


def test_default_length_is_one_pass_over_the_deck(store):
    engine = SessionEngine(store, rng=random.Random(6))
    state = engine.start_session(GameConfig(select=[3, 4]))

    assert state.question_count == 16


def test_configured_default_length_is_used(store):
    engine = SessionEngine(store, default_question_count=5)

    assert engine.start_session(GameConfig(select=[3])).question_count == 5


def test_deck_cycles_when_session_is_longer_than_deck(store):
    engine = SessionEngine(store, rng=random.Random(8))
    engine.start_session(GameConfig(select=[7], focus="strong", question_count=10))

    asked = []
    while engine.status == SessionStatus.IN_PROGRESS:
        card = engine.current_card
        asked.append(card.question)
        engine.submit_answer(card.answer, 1.0)

    assert len(asked) == 10
    assert len(set(asked[:8])) == 8
    assert engine.get_result().total_cards == 10


def test_view_reports_progress(store):
    engine = SessionEngine(store)
    assert engine.view().status == SessionStatus.NOT_STARTED

    engine.start_session(GameConfig(select=[2], question_count=2))
    engine.submit_answer(0, 1.0)
    view = engine.view()

    assert view.status == SessionStatus.IN_PROGRESS
    assert view.answered == 1
    assert view.question_count == 2
    assert view.question is not None


def test_configured_focus_applies_when_config_has_none(store):
    engine = SessionEngine(store, default_focus="strong")

    assert engine.start_session(GameConfig(select=[3])).focus == "strong"
    assert engine.start_session(GameConfig(select=[3], focus="slow")).focus == "slow"


def test_negative_default_length_is_rejected(store):
    with pytest.raises(ConfigError):
        SessionEngine(store, default_question_count=-3)


def test_infinite_elapsed_time_leaves_card_and_session_untouched(store):
    engine = SessionEngine(store, rng=random.Random(3))
    engine.start_session(GameConfig(select=[6], question_count=2))
    card = engine.current_card

    with pytest.raises(ValueError):
        engine.submit_answer(card.answer, float("inf"))

    assert engine.state.answered == 0
    assert card.question not in store.load_deck([6])
