"""SQLite-backed store for cards, session history, statistics and preferences.

Reads degrade to empty/default values when the database is missing or
unreadable (first run). Writes raise ``PersistenceError`` and commit fully
before returning unless they run inside ``transaction()``.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from models.card import Card
from models.game import GameConfig
from models.history import GameHistory, Statistics
from utils.errors import AlreadyRecordedError, PersistenceError

from . import database

logger = logging.getLogger(__name__)

LAST_CONFIG_KEY = "last_game_config"


def _join_numbers(numbers: Iterable[int]) -> str:
    return ",".join(str(n) for n in numbers)


def _split_numbers(value: Optional[str]) -> List[int]:
    if not value:
        return []
    return [int(part) for part in value.split(",") if part.strip()]


def _card_from_row(row) -> Card:
    return Card(x=row["x"], y=row["y"], level=row["level"], time=row["time"])


class SqliteStore:
    def __init__(self, db_path: Optional[Path] = None):
        self._db_path = db_path

    @property
    def db_path(self) -> Path:
        return Path(self._db_path or database.DB_PATH)

    @contextmanager
    def _connection(self, conn: Optional[sqlite3.Connection] = None) -> Iterator[sqlite3.Connection]:
        if conn is not None:
            yield conn
            return
        with database.get_conn(self.db_path) as own:
            yield own
            own.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run several writes on one connection; commit on success, roll back on error."""
        with database.get_conn(self.db_path) as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    # Cards

    def load_deck(self, select: Iterable[int]) -> Dict[str, Card]:
        numbers = sorted(set(select))
        if not numbers:
            return {}
        placeholders = ",".join("?" for _ in numbers)
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    f"SELECT x, y, level, time FROM cards WHERE x IN ({placeholders})",
                    numbers,
                ).fetchall()
        except sqlite3.Error as exc:
            logger.warning("Could not load cards, starting fresh: %s", exc)
            return {}
        cards = [_card_from_row(row) for row in rows]
        return {card.question: card for card in cards}

    def load_all_cards(self) -> List[Card]:
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT x, y, level, time FROM cards ORDER BY x, y"
                ).fetchall()
        except sqlite3.Error as exc:
            logger.warning("Could not load cards: %s", exc)
            return []
        return [_card_from_row(row) for row in rows]

    def save_card(self, card: Card, conn: Optional[sqlite3.Connection] = None) -> None:
        try:
            with self._connection(conn) as active:
                active.execute(
                    """
                    INSERT INTO cards (question, x, y, level, time, updated_at)
                    VALUES (?, ?, ?, ?, ?, datetime('now'))
                    ON CONFLICT(question) DO UPDATE SET
                        level = excluded.level,
                        time = excluded.time,
                        updated_at = excluded.updated_at
                    """,
                    (card.question, card.x, card.y, card.level, card.time),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not save card {card.question}: {exc}") from exc

    # Statistics

    def _statistics_row(self, conn: sqlite3.Connection):
        return conn.execute(
            """
            SELECT games_played, total_points, total_correct_answers
            FROM statistics WHERE id = 1
            """
        ).fetchone()

    def load_statistics(
        self,
        conn: Optional[sqlite3.Connection] = None,
        strict: bool = False,
    ) -> Statistics:
        """Running totals; ``strict`` raises PersistenceError instead of defaulting."""
        try:
            with self._connection(conn) as active:
                row = self._statistics_row(active)
        except sqlite3.Error as exc:
            if strict:
                raise PersistenceError(f"Could not read statistics: {exc}") from exc
            logger.warning("Could not load statistics, using defaults: %s", exc)
            return Statistics()
        if not row:
            return Statistics()
        return Statistics(
            games_played=row["games_played"],
            total_points=row["total_points"],
            total_correct_answers=row["total_correct_answers"],
        )

    def save_statistics(self, stats: Statistics, conn: Optional[sqlite3.Connection] = None) -> None:
        try:
            with self._connection(conn) as active:
                active.execute(
                    """
                    INSERT INTO statistics (id, games_played, total_points, total_correct_answers)
                    VALUES (1, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        games_played = excluded.games_played,
                        total_points = excluded.total_points,
                        total_correct_answers = excluded.total_correct_answers
                    """,
                    (stats.games_played, stats.total_points, stats.total_correct_answers),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not save statistics: {exc}") from exc

    # History

    def append_history(self, entry: GameHistory, conn: Optional[sqlite3.Connection] = None) -> None:
        try:
            with self._connection(conn) as active:
                active.execute(
                    """
                    INSERT INTO history (session_id, date, select_numbers, points, correct_answers)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        entry.session_id,
                        entry.date,
                        _join_numbers(entry.select),
                        entry.points,
                        entry.correct_answers,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise AlreadyRecordedError(f"Session {entry.session_id} is already recorded") from exc
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not append history: {exc}") from exc

    def load_history(self, limit: Optional[int] = None) -> List[GameHistory]:
        """History entries in chronological order; ``limit`` keeps the most recent ones."""
        sql = "SELECT session_id, date, select_numbers, points, correct_answers FROM history ORDER BY id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        try:
            with self._connection() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            logger.warning("Could not load history: %s", exc)
            return []
        return [
            GameHistory(
                session_id=row["session_id"],
                date=row["date"],
                select=_split_numbers(row["select_numbers"]),
                points=row["points"],
                correct_answers=row["correct_answers"],
            )
            for row in reversed(rows)
        ]

    # Preferences

    def load_last_config(self) -> Optional[GameConfig]:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT value FROM preferences WHERE key = ?", (LAST_CONFIG_KEY,)
                ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Could not load last game config: %s", exc)
            return None
        if not row:
            return None
        try:
            return GameConfig.model_validate_json(row["value"])
        except ValueError as exc:
            logger.warning("Ignoring unreadable game config preference: %s", exc)
            return None

    def save_last_config(self, config: GameConfig) -> None:
        try:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO preferences (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (LAST_CONFIG_KEY, config.model_dump_json()),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not save game config: {exc}") from exc


def get_store() -> SqliteStore:
    """FastAPI dependency returning a store bound to the configured database."""
    return SqliteStore()
