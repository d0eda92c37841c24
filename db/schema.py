# SQL schema for multidrill database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Fact cards, one per ordered (x, y) pair ever played
CREATE TABLE IF NOT EXISTS cards (
    question TEXT PRIMARY KEY,
    x INTEGER NOT NULL CHECK(x BETWEEN 2 AND 9),
    y INTEGER NOT NULL CHECK(y BETWEEN 2 AND 9),
    level INTEGER NOT NULL DEFAULT 1 CHECK(level BETWEEN 1 AND 5),
    time REAL NOT NULL DEFAULT 60,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Completed sessions, append-only
CREATE TABLE IF NOT EXISTS history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT UNIQUE NOT NULL,
    date TEXT NOT NULL,
    select_numbers TEXT NOT NULL,
    points INTEGER NOT NULL,
    correct_answers INTEGER NOT NULL
);

-- Rolling totals (single row)
CREATE TABLE IF NOT EXISTS statistics (
    id INTEGER PRIMARY KEY CHECK(id = 1),
    games_played INTEGER NOT NULL DEFAULT 0,
    total_points INTEGER NOT NULL DEFAULT 0,
    total_correct_answers INTEGER NOT NULL DEFAULT 0
);

-- Last used settings and similar key/value state
CREATE TABLE IF NOT EXISTS preferences (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_cards_x ON cards (x);
CREATE INDEX IF NOT EXISTS idx_history_date ON history (date);
"""
