"""
Database layer for the Hunter System.

Provides the repository interface and three implementations:
- InMemoryHunterRepository: For testing (no external dependencies)
- SQLiteHunterRepository: Embedded store for local use
- MySQLHunterRepository: Networked store (requires a running server)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hunter.db.interfaces import LAST_DAILY_RESET_KEY, HunterRepository
from hunter.db.memory import InMemoryHunterRepository
from hunter.db.mysql import MySQLConnection, MySQLHunterRepository, init_mysql_schema
from hunter.db.sqlite import SQLiteHunterRepository

if TYPE_CHECKING:
    from hunter.config import HunterConfig


def create_repository(config: HunterConfig) -> HunterRepository:
    """
    Build the repository selected by `config.storage`.

    The MySQL schema is created if missing and the default character
    seeded, so every backend is ready to use on return.
    """
    if config.storage == "memory":
        return InMemoryHunterRepository()
    if config.storage == "sqlite":
        return SQLiteHunterRepository(config.sqlite_path)
    if config.storage == "mysql":
        connection = MySQLConnection(
            host=config.mysql_host,
            port=config.mysql_port,
            user=config.mysql_user,
            password=config.mysql_password,
            database=config.mysql_database,
        )
        init_mysql_schema(connection)
        repository = MySQLHunterRepository(connection)
        repository.ensure_character()
        return repository
    raise ValueError(f"Unknown storage backend: {config.storage}")


__all__ = [
    # Protocol interface
    "HunterRepository",
    "LAST_DAILY_RESET_KEY",
    # In-memory implementation (for testing)
    "InMemoryHunterRepository",
    # Real database implementations
    "SQLiteHunterRepository",
    "MySQLConnection",
    "MySQLHunterRepository",
    "init_mysql_schema",
    # Factory
    "create_repository",
]
