"""
MySQL implementation of the repository interface.

Uses mysql-connector-python against any MySQL-compatible server.
Transactions run at SERIALIZABLE isolation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import mysql.connector
from mysql.connector.cursor import MySQLCursor

from hunter.db.sql import SQLHunterRepository
from hunter.errors import StoreFailure
from hunter.models import create_character

logger = logging.getLogger(__name__)


class MySQLConnection:
    """
    Connection manager for the MySQL store.

    Reconnects lazily when the server drops the connection.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: str = "",
        database: str = "hunter_system",
    ) -> None:
        self.config = {
            "host": host,
            "port": port,
            "user": user,
            "password": password,
            "database": database,
            "autocommit": True,
        }
        self._connection: Any = None

    def get_connection(self) -> Any:
        """Get or create a database connection."""
        if self._connection is None or not self._connection.is_connected():
            self._connection = mysql.connector.connect(**self.config)
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
            self._connection = None


class MySQLHunterRepository(SQLHunterRepository):
    """
    MySQL implementation of HunterRepository.

    Run `init_mysql_schema` once before first use. A transaction holds
    one connection from begin to commit or rollback; if that connection
    drops, the transaction fails instead of reconnecting.
    """

    def __init__(self, connection: MySQLConnection) -> None:
        super().__init__()
        self._conn = connection
        self._tx_connection: Any = None

    def ensure_character(self) -> None:
        """Insert the default character if the table is empty."""
        with self._lock:
            if self.get_character() is None:
                self.save_character(create_character())
                logger.info("Seeded default character")

    def _connection(self) -> Any:
        if self._tx_connection is None:
            return self._conn.get_connection()
        if not self._tx_connection.is_connected():
            raise StoreFailure("MySQL connection lost during transaction")
        return self._tx_connection

    # Backend hooks
    def _run(self, query: str, params: tuple[Any, ...] = (), fetch: bool = True) -> list[dict[str, Any]]:
        with self._lock:
            try:
                conn = self._connection()
                cursor: MySQLCursor = conn.cursor(dictionary=True)
                try:
                    cursor.execute(query.replace("?", "%s"), params)
                    if fetch:
                        return [dict(row) for row in cursor.fetchall()]  # type: ignore[arg-type]
                    return [{"rowcount": cursor.rowcount}]
                finally:
                    cursor.close()
            except mysql.connector.Error as e:
                raise StoreFailure(f"MySQL error: {e}") from e

    def _begin(self) -> None:
        try:
            conn = self._conn.get_connection()
            conn.start_transaction(isolation_level="SERIALIZABLE")
        except mysql.connector.Error as e:
            raise StoreFailure(f"Could not start transaction: {e}") from e
        self._tx_connection = conn

    def _commit(self) -> None:
        conn = self._connection()
        try:
            conn.commit()
        except mysql.connector.Error as e:
            raise StoreFailure(f"Commit failed: {e}") from e
        self._tx_connection = None

    def _rollback(self) -> None:
        conn, self._tx_connection = self._tx_connection, None
        if conn is None:
            return
        try:
            conn.rollback()
        except mysql.connector.Error as e:
            logger.error("Rollback failed: %s", e)

    def _upsert(self, table: str, columns: list[str], key: str) -> str:
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = VALUES({c})" for c in columns if c != key)
        return (
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON DUPLICATE KEY UPDATE {updates}"
        )

    def _encode_time(self, value: datetime | None) -> datetime | None:
        # DATETIME columns hold naive UTC
        if value is None:
            return None
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def _decode_time(self, value: Any) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        return value.replace(tzinfo=timezone.utc)


# =============================================================================
# Schema Definition
# =============================================================================

MYSQL_SCHEMA = """
-- Player character
CREATE TABLE IF NOT EXISTS characters (
    id INT PRIMARY KEY,
    level INT NOT NULL DEFAULT 1,
    current_xp INT NOT NULL DEFAULT 0,
    total_xp_earned BIGINT NOT NULL DEFAULT 0,
    unspent_stat_points INT NOT NULL DEFAULT 0,
    strength INT NOT NULL DEFAULT 10,
    creation INT NOT NULL DEFAULT 10,
    network INT NOT NULL DEFAULT 10,
    vitality INT NOT NULL DEFAULT 10,
    intelligence INT NOT NULL DEFAULT 10,
    xp_strength INT NOT NULL DEFAULT 0,
    xp_creation INT NOT NULL DEFAULT 0,
    xp_network INT NOT NULL DEFAULT 0,
    xp_vitality INT NOT NULL DEFAULT 0,
    xp_intelligence INT NOT NULL DEFAULT 0,
    created_at DATETIME(6) NOT NULL,
    updated_at DATETIME(6) NOT NULL
);

-- Quests
CREATE TABLE IF NOT EXISTS quests (
    id VARCHAR(36) PRIMARY KEY,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    difficulty VARCHAR(1) NOT NULL,
    xp_reward INT NOT NULL,
    attribute VARCHAR(20) NOT NULL DEFAULT 'strength',
    status VARCHAR(20) NOT NULL DEFAULT 'active',
    kind VARCHAR(20) NOT NULL DEFAULT 'normal',
    due_date DATETIME(6),
    completed_at DATETIME(6),
    created_at DATETIME(6) NOT NULL,
    INDEX idx_status (status),
    INDEX idx_kind (kind)
);

-- Inventory
CREATE TABLE IF NOT EXISTS items (
    id VARCHAR(36) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    description TEXT,
    rarity VARCHAR(20) NOT NULL,
    item_type VARCHAR(20) NOT NULL,
    obtained_at DATETIME(6) NOT NULL,
    INDEX idx_rarity (rarity)
);

-- Key/value system state (last_daily_reset)
CREATE TABLE IF NOT EXISTS system_config (
    config_key VARCHAR(64) PRIMARY KEY,
    config_value TEXT NOT NULL
)
"""


def init_mysql_schema(connection: MySQLConnection) -> None:
    """Initialize the MySQL database schema."""
    conn = connection.get_connection()
    cursor = conn.cursor()
    try:
        for statement in MYSQL_SCHEMA.split(";"):
            statement = statement.strip()
            if statement:
                cursor.execute(statement)
        conn.commit()
    finally:
        cursor.close()
