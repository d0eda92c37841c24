from fastapi import APIRouter, Depends

from db.store import SqliteStore, get_store
from utils.mastery import level_distribution, mastery_percent, table_overview, MASTERED_LEVEL

router = APIRouter()

@router.get("/")
async def stats_overview(store: SqliteStore = Depends(get_store)):
    """Totals across games plus how far each table has come."""
    statistics = store.load_statistics()
    cards = store.load_all_cards()
    mastered = sum(1 for card in cards if card.level >= MASTERED_LEVEL)
    return {
        "statistics": statistics.model_dump(),
        "cards_played": len(cards),
        "mastery_percent": mastery_percent(mastered, len(cards)),
        "levels": level_distribution(cards),
        "tables": table_overview(cards),
    }
