from typing import Dict, Iterable, List

from models.card import MAX_LEVEL, MIN_LEVEL, Card

MASTERED_LEVEL = MAX_LEVEL


def level_distribution(cards: Iterable[Card]) -> Dict[int, int]:
    counts = {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
    for card in cards:
        counts[card.level] += 1
    return counts


def mastery_percent(mastered: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round((mastered / total) * 100, 1)


def table_overview(cards: Iterable[Card]) -> List[Dict]:
    """Per multiplication table: cards played, average level and mastery share."""
    tables: Dict[int, List[Card]] = {}
    for card in cards:
        tables.setdefault(card.x, []).append(card)
    overview = []
    for number in sorted(tables):
        table_cards = tables[number]
        mastered = sum(1 for card in table_cards if card.level >= MASTERED_LEVEL)
        overview.append({
            "number": number,
            "cards": len(table_cards),
            "average_level": round(sum(card.level for card in table_cards) / len(table_cards), 2),
            "mastered": mastered,
            "mastery_percent": mastery_percent(mastered, len(table_cards)),
        })
    return overview
