import pytest

from models.card import Card
from utils.evaluator import damped_time, evaluate, get_scoring_rules


def test_correct_answer_raises_level_and_blends_time():
    card = Card(x=6, y=7, level=2, time=10.0)

    is_correct, updated, points = evaluate(card, 42, 5.0)

    assert is_correct
    assert updated.level == 3
    assert updated.time == pytest.approx(0.7 * 10.0 + 0.3 * 5.0)
    assert points == (10 + 5) * 2
    assert card.level == 2


def test_correct_but_slow_answer_gets_no_speed_bonus():
    card = Card(x=6, y=7, level=3, time=4.0)

    _, _, points = evaluate(card, 42, 6.0)

    assert points == 10 * 3


def test_wrong_answer_lowers_level_and_keeps_time():
    card = Card(x=6, y=7, level=3, time=12.0)

    is_correct, updated, points = evaluate(card, 43, 2.0)

    assert not is_correct
    assert updated.level == 2
    assert updated.time == 12.0
    assert points == 0


def test_level_stays_within_bounds_after_long_streaks():
    card = Card(x=8, y=8)
    for _ in range(20):
        _, card, _ = evaluate(card, 64, 1.0)
    assert card.level == 5

    for _ in range(20):
        _, card, _ = evaluate(card, 0, 1.0)
    assert card.level == 1


def test_negative_elapsed_time_is_rejected():
    with pytest.raises(ValueError):
        evaluate(Card(x=2, y=2), 4, -1.0)


def test_scoring_rules_come_from_config():
    rules = get_scoring_rules({"scoring": {"base_points": 20, "speed_bonus": 0, "time_weight": 0.5}})

    _, updated, points = evaluate(Card(x=3, y=3, time=10.0), 9, 2.0, rules)

    assert points == 20
    assert updated.time == damped_time(10.0, 2.0, 0.5) == 6.0


@pytest.mark.parametrize("elapsed", [float("inf"), float("nan")])
def test_non_finite_elapsed_time_is_rejected(elapsed):
    card = Card(x=6, y=7, time=10.0)

    with pytest.raises(ValueError):
        evaluate(card, 42, elapsed)
    assert card.time == 10.0
