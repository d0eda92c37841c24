from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from models.card import MAX_FACTOR, MIN_FACTOR, Card
from utils.errors import ConfigError

FACTORS = tuple(range(MIN_FACTOR, MAX_FACTOR + 1))


def normalize_selection(select: Optional[Iterable[int]]) -> List[int]:
    """Validate a number selection and return it sorted without duplicates."""
    numbers = sorted(set(select or ()))
    if not numbers:
        raise ConfigError("Select at least one number")
    invalid = [n for n in numbers if n not in FACTORS]
    if invalid:
        raise ConfigError(
            f"Numbers must be between {MIN_FACTOR} and {MAX_FACTOR}: {invalid}"
        )
    return numbers


def build_deck(
    select: Iterable[int],
    persisted_cards: Optional[Mapping[str, Card]] = None,
) -> List[Card]:
    """Pair every selected number with 2..9, reusing persisted learning state.

    Returned cards are copies; mutating them does not touch ``persisted_cards``.
    """
    numbers = normalize_selection(select)
    persisted_cards = persisted_cards or {}
    deck: List[Card] = []
    for x in numbers:
        for y in FACTORS:
            existing = persisted_cards.get(f"{x}×{y}")
            deck.append(existing.model_copy() if existing else Card(x=x, y=y))
    return deck
