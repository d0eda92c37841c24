import math
from typing import Any, Dict, Optional, Tuple

from models.card import MAX_LEVEL, MIN_LEVEL, Card

DEFAULT_SCORING_RULES = {
    "base_points": 10,
    "speed_bonus": 5,
    "time_weight": 0.3,
}


def get_scoring_rules(config: Optional[Dict[str, Any]] = None) -> dict:
    rules = DEFAULT_SCORING_RULES.copy()
    if config:
        rules.update(config.get("scoring", {}))
    return rules


def damped_time(previous: float, elapsed: float, weight: float) -> float:
    """Blend the latest response time into the card's baseline."""
    return (1 - weight) * previous + weight * elapsed


def award_points(level: int, elapsed: float, baseline: float, rules: dict) -> int:
    """Points for a correct answer at ``level``; faster than baseline earns the bonus."""
    points = rules["base_points"]
    if elapsed < baseline:
        points += rules["speed_bonus"]
    return points * level


def evaluate(
    card: Card,
    submitted_answer: int,
    elapsed_seconds: float,
    rules: Optional[dict] = None,
) -> Tuple[bool, Card, int]:
    """Grade an answer and return (is_correct, updated_card, points_awarded).

    The input card is left untouched.
    """
    if not math.isfinite(elapsed_seconds):
        raise ValueError("elapsed_seconds must be a finite number")
    if elapsed_seconds < 0:
        raise ValueError("elapsed_seconds cannot be negative")
    rules = rules or DEFAULT_SCORING_RULES
    is_correct = submitted_answer == card.answer
    if not is_correct:
        updated = card.model_copy(update={"level": max(MIN_LEVEL, card.level - 1)})
        return False, updated, 0
    points = award_points(card.level, elapsed_seconds, card.time, rules)
    updated = card.model_copy(
        update={
            "level": min(MAX_LEVEL, card.level + 1),
            "time": damped_time(card.time, elapsed_seconds, rules["time_weight"]),
        }
    )
    return True, updated, points
