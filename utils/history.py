from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from models.game import GameResult
from models.history import GameHistory, Statistics

logger = logging.getLogger(__name__)


def history_entry(result: GameResult, when: Optional[datetime] = None) -> GameHistory:
    when = when or datetime.now(timezone.utc)
    return GameHistory(
        session_id=result.session_id,
        date=when.isoformat(),
        select=list(result.select),
        points=result.points,
        correct_answers=result.correct_answers,
    )


def apply_result(stats: Statistics, points: int, correct_answers: int) -> Statistics:
    return Statistics(
        games_played=stats.games_played + 1,
        total_points=stats.total_points + points,
        total_correct_answers=stats.total_correct_answers + correct_answers,
    )


def record_result(store, result: GameResult, when: Optional[datetime] = None) -> Statistics:
    """Append the session to history and fold it into the running statistics.

    Both writes share one transaction; recording a session twice raises
    ``AlreadyRecordedError`` and leaves the statistics unchanged.
    """
    entry = history_entry(result, when)
    with store.transaction() as conn:
        stats = store.load_statistics(conn=conn, strict=True)
        store.append_history(entry, conn=conn)
        updated = apply_result(stats, result.points, result.correct_answers)
        store.save_statistics(updated, conn=conn)
    logger.info(
        "Recorded session %s: games_played=%d total_points=%d",
        result.session_id, updated.games_played, updated.total_points,
    )
    return updated


def replay_history(entries: Iterable[GameHistory]) -> Statistics:
    """Rebuild statistics from the history log."""
    stats = Statistics()
    for entry in entries:
        stats = apply_result(stats, entry.points, entry.correct_answers)
    return stats
