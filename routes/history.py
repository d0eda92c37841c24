from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from db.store import SqliteStore, get_store
from models.history import GameHistory

router = APIRouter()

@router.get("/", response_model=List[GameHistory])
async def game_history(
    limit: Optional[int] = Query(default=None, ge=1),
    store: SqliteStore = Depends(get_store),
):
    """Past sessions, oldest first."""
    return store.load_history(limit)
