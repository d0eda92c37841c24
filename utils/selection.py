from __future__ import annotations

import math
import random
from typing import AbstractSet, List, Optional, Sequence

from models.card import Card
from models.game import FocusType
from utils.errors import EmptyDeckError

SLOW_FRACTION = 0.1


def remaining_candidates(deck: Sequence[Card], excluding: AbstractSet[str]) -> List[Card]:
    """Cards not yet asked; the whole deck again once every card has been asked."""
    candidates = [card for card in deck if card.question not in excluding]
    return candidates or list(deck)


def _slowest(candidates: Sequence[Card]) -> List[Card]:
    ranked = sorted(candidates, key=lambda card: card.time, reverse=True)
    top = max(1, math.floor(len(ranked) * SLOW_FRACTION))
    threshold = ranked[top - 1].time
    return [card for card in ranked if card.time >= threshold]


def focus_pool(candidates: Sequence[Card], focus: FocusType) -> List[Card]:
    """Subset of candidates the focus mode draws from."""
    if focus == FocusType.WEAK:
        lowest = min(card.level for card in candidates)
        return [card for card in candidates if card.level == lowest]
    if focus == FocusType.STRONG:
        highest = max(card.level for card in candidates)
        return [card for card in candidates if card.level == highest]
    if focus == FocusType.SLOW:
        return _slowest(candidates)
    raise ValueError(f"Unknown focus: {focus!r}")


def select_next(
    deck: Sequence[Card],
    focus: FocusType,
    excluding: AbstractSet[str] = frozenset(),
    rng: Optional[random.Random] = None,
) -> Card:
    """Pick the next card to present for the given focus mode."""
    if not deck:
        raise EmptyDeckError("No cards to choose from")
    rng = rng or random.Random()
    pool = focus_pool(remaining_candidates(deck, excluding), FocusType(focus))
    return rng.choice(pool)
