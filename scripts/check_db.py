#!/usr/bin/env python3
"""
Database health check and initialization script.

Usage:
    python scripts/check_db.py          # Check the configured store
    python scripts/check_db.py --init   # Create the schema and default character
"""

from __future__ import annotations

import argparse
import os
import sys

# Add the repository root to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def check_sqlite(path: str) -> bool:
    """Check that the SQLite database opens and holds a character."""
    from hunter.db import SQLiteHunterRepository

    print(f"Checking SQLite at {path}...")

    try:
        repository = SQLiteHunterRepository(path)
        character = repository.get_character()
        repository.close()
        if character is None:
            print("  SQLite: No character")
            return False
        print(f"  SQLite: OK (level {character.level})")
        return True
    except Exception as e:
        print(f"  SQLite: Error - {e}")
        return False


def check_mysql(config) -> bool:
    """Check MySQL connectivity."""
    from hunter.db import MySQLConnection

    print(f"Checking MySQL at {config.mysql_host}:{config.mysql_port}...")

    try:
        conn = MySQLConnection(
            host=config.mysql_host,
            port=config.mysql_port,
            user=config.mysql_user,
            password=config.mysql_password,
            database=config.mysql_database,
        )
        db_conn = conn.get_connection()
        if db_conn.is_connected():
            print("  MySQL: Connected")
            conn.close()
            return True
        else:
            print("  MySQL: Connection failed")
            return False
    except Exception as e:
        print(f"  MySQL: Error - {e}")
        return False


def init_mysql(config) -> bool:
    """Initialize the MySQL schema and seed the character."""
    from hunter.db import MySQLConnection, MySQLHunterRepository, init_mysql_schema

    print("Initializing MySQL schema...")

    try:
        conn = MySQLConnection(
            host=config.mysql_host,
            port=config.mysql_port,
            user=config.mysql_user,
            password=config.mysql_password,
            database=config.mysql_database,
        )
        init_mysql_schema(conn)
        MySQLHunterRepository(conn).ensure_character()
        conn.close()
        print("  MySQL schema initialized")
        return True
    except Exception as e:
        print(f"  MySQL init error: {e}")
        return False


def main() -> int:
    """Main entry point."""
    from hunter.config import HunterConfig

    parser = argparse.ArgumentParser(description="Check and initialize the Hunter System store")
    parser.add_argument("--init", action="store_true", help="Initialize the database schema")
    args = parser.parse_args()

    config = HunterConfig()

    print(f"Hunter System Database Check ({config.storage})")
    print("=" * 40)

    if config.storage == "memory":
        print("  In-memory store: nothing to check")
        return 0

    if config.storage == "sqlite":
        # Opening the SQLite store creates its schema
        ok = check_sqlite(config.sqlite_path)
    else:
        ok = check_mysql(config)
        if ok and args.init:
            print()
            print("Schema Initialization")
            print("=" * 40)
            ok = init_mysql(config)

    print()
    print("Summary")
    print("=" * 40)
    print(f"  {config.storage}: {'OK' if ok else 'FAILED'}")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
