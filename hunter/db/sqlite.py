"""
SQLite implementation of the repository interface.

The embedded store used by the CLI. One connection is shared behind a
re-entrant lock; transactions take the write lock up front with
`BEGIN IMMEDIATE` so two completions of the same quest serialize.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from hunter.db.sql import SQLHunterRepository
from hunter.errors import StoreFailure
from hunter.models import create_character

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS characters (
    id INTEGER PRIMARY KEY,
    level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
    current_xp INTEGER NOT NULL DEFAULT 0 CHECK (current_xp >= 0),
    total_xp_earned INTEGER NOT NULL DEFAULT 0 CHECK (total_xp_earned >= 0),
    unspent_stat_points INTEGER NOT NULL DEFAULT 0 CHECK (unspent_stat_points >= 0),
    strength INTEGER NOT NULL DEFAULT 10,
    creation INTEGER NOT NULL DEFAULT 10,
    network INTEGER NOT NULL DEFAULT 10,
    vitality INTEGER NOT NULL DEFAULT 10,
    intelligence INTEGER NOT NULL DEFAULT 10,
    xp_strength INTEGER NOT NULL DEFAULT 0,
    xp_creation INTEGER NOT NULL DEFAULT 0,
    xp_network INTEGER NOT NULL DEFAULT 0,
    xp_vitality INTEGER NOT NULL DEFAULT 0,
    xp_intelligence INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quests (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    difficulty TEXT NOT NULL CHECK (difficulty IN ('E', 'D', 'C', 'B', 'A', 'S')),
    xp_reward INTEGER NOT NULL,
    attribute TEXT NOT NULL DEFAULT 'strength',
    status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'completed', 'failed')),
    kind TEXT NOT NULL DEFAULT 'normal' CHECK (kind IN ('normal', 'daily')),
    due_date TEXT,
    completed_at TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_quests_status ON quests (status);
CREATE INDEX IF NOT EXISTS idx_quests_kind ON quests (kind);

CREATE TABLE IF NOT EXISTS items (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    rarity TEXT NOT NULL CHECK (rarity IN ('common', 'rare', 'epic', 'legendary', 'mythic')),
    item_type TEXT NOT NULL CHECK (item_type IN ('weapon', 'armor', 'accessory', 'consumable')),
    obtained_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS system_config (
    config_key TEXT PRIMARY KEY,
    config_value TEXT NOT NULL
)
"""


class SQLiteHunterRepository(SQLHunterRepository):
    """
    SQLite implementation of HunterRepository.

    Creates the schema and the default character on first open.
    Pass ":memory:" for a throwaway database.
    """

    def __init__(self, path: str | Path = ":memory:") -> None:
        super().__init__()
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        # Autocommit mode; explicit BEGIN/COMMIT for transactions
        self._connection = sqlite3.connect(
            self.path, check_same_thread=False, isolation_level=None
        )
        self._connection.row_factory = sqlite3.Row
        if self.path != ":memory:":
            self._connection.execute("PRAGMA journal_mode=WAL")

        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock:
            for statement in SQLITE_SCHEMA.split(";"):
                statement = statement.strip()
                if statement:
                    self._run(statement, fetch=False)
            if self.get_character() is None:
                self.save_character(create_character())
                logger.info("Seeded default character in %s", self.path)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._connection.close()

    # Backend hooks
    def _run(self, query: str, params: tuple[Any, ...] = (), fetch: bool = True) -> list[dict[str, Any]]:
        with self._lock:
            try:
                cursor = self._connection.execute(query, params)
                try:
                    if fetch:
                        return [dict(row) for row in cursor.fetchall()]
                    return [{"rowcount": cursor.rowcount}]
                finally:
                    cursor.close()
            except sqlite3.Error as e:
                raise StoreFailure(f"SQLite error: {e}") from e

    def _begin(self) -> None:
        self._run("BEGIN IMMEDIATE", fetch=False)

    def _commit(self) -> None:
        self._run("COMMIT", fetch=False)

    def _rollback(self) -> None:
        try:
            self._connection.execute("ROLLBACK")
        except sqlite3.Error as e:
            logger.error("Rollback failed: %s", e)

    def _upsert(self, table: str, columns: list[str], key: str) -> str:
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns if c != key)
        return (
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT({key}) DO UPDATE SET {updates}"
        )

    def _encode_time(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime(TIME_FORMAT)

    def _decode_time(self, value: Any) -> datetime | None:
        if value is None:
            return None
        return datetime.fromisoformat(value)
