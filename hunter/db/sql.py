"""
Shared SQL implementation of the repository interface.

Queries are written once with `?` placeholders; each backend supplies
its own connection handling, upsert syntax and timestamp encoding.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

from hunter.errors import HunterError, StoreFailure
from hunter.models import (
    ATTRIBUTE_ORDER,
    Character,
    Item,
    ItemType,
    Quest,
    QuestFilter,
    Rarity,
)
from hunter.models.character import utcnow

T = TypeVar("T")

CHARACTER_COLUMNS: list[str] = (
    ["id", "level", "current_xp", "total_xp_earned", "unspent_stat_points"]
    + [a.value for a in ATTRIBUTE_ORDER]
    + [f"xp_{a.value}" for a in ATTRIBUTE_ORDER]
    + ["created_at", "updated_at"]
)

QUEST_COLUMNS: list[str] = [
    "id",
    "title",
    "description",
    "difficulty",
    "xp_reward",
    "attribute",
    "status",
    "kind",
    "due_date",
    "completed_at",
    "created_at",
]

ITEM_COLUMNS: list[str] = ["id", "name", "description", "rarity", "item_type", "obtained_at"]


class SQLHunterRepository:
    """
    Base class for relational HunterRepository implementations.

    Subclasses implement `_run`, `_begin`, `_commit`, `_rollback`,
    `_upsert` and the timestamp codec.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0

    # =========================================================================
    # Backend hooks
    # =========================================================================

    def _run(self, query: str, params: tuple[Any, ...] = (), fetch: bool = True) -> list[dict[str, Any]]:
        """Execute one statement; return rows as dicts (or the rowcount as [{"rowcount": n}])."""
        raise NotImplementedError

    def _begin(self) -> None:
        raise NotImplementedError

    def _commit(self) -> None:
        raise NotImplementedError

    def _rollback(self) -> None:
        raise NotImplementedError

    def _upsert(self, table: str, columns: list[str], key: str) -> str:
        """Build an insert-or-update statement for `table` keyed on `key`."""
        raise NotImplementedError

    def _encode_time(self, value: datetime | None) -> Any:
        raise NotImplementedError

    def _decode_time(self, value: Any) -> datetime | None:
        raise NotImplementedError

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group operations atomically."""
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._begin()
            self._depth += 1
            try:
                yield
            except HunterError:
                if outermost:
                    self._rollback()
                raise
            except Exception as e:
                if outermost:
                    self._rollback()
                    raise StoreFailure(f"Transaction rolled back: {e}") from e
                raise
            else:
                if outermost:
                    try:
                        self._commit()
                    except StoreFailure:
                        self._rollback()
                        raise
            finally:
                self._depth -= 1

    def with_transaction(self, fn: Callable[[], T]) -> T:
        """Run `fn` inside `transaction()` and return its result."""
        with self.transaction():
            return fn()

    def _rowcount(self, query: str, params: tuple[Any, ...]) -> int:
        result = self._run(query, params, fetch=False)
        return result[0]["rowcount"] if result else 0

    # =========================================================================
    # Character Operations
    # =========================================================================

    def get_character(self) -> Character | None:
        """Get the player character."""
        rows = self._run("SELECT * FROM characters ORDER BY id LIMIT 1")
        if not rows:
            return None
        return self._row_to_character(rows[0])

    def save_character(self, character: Character) -> None:
        """Insert or update the player character."""
        character.updated_at = utcnow()
        params = (
            [
                character.id,
                character.level,
                character.current_xp,
                character.total_xp_earned,
                character.unspent_stat_points,
            ]
            + [character.attributes[a] for a in ATTRIBUTE_ORDER]
            + [character.attribute_xp[a] for a in ATTRIBUTE_ORDER]
            + [self._encode_time(character.created_at), self._encode_time(character.updated_at)]
        )
        self._run(self._upsert("characters", CHARACTER_COLUMNS, "id"), tuple(params), fetch=False)

    def _row_to_character(self, row: dict[str, Any]) -> Character:
        """Convert a database row to a Character object."""
        return Character(
            id=row["id"],
            level=row["level"],
            current_xp=row["current_xp"],
            total_xp_earned=row["total_xp_earned"],
            unspent_stat_points=row["unspent_stat_points"],
            attributes={a: row[a.value] for a in ATTRIBUTE_ORDER},
            attribute_xp={a: row[f"xp_{a.value}"] for a in ATTRIBUTE_ORDER},
            created_at=self._decode_time(row["created_at"]),
            updated_at=self._decode_time(row["updated_at"]),
        )

    # =========================================================================
    # Quest Operations
    # =========================================================================

    def _where(self, quest_filter: QuestFilter | None) -> tuple[str, tuple[Any, ...]]:
        """Translate a QuestFilter into a WHERE clause and parameters."""
        if quest_filter is None:
            return "", ()

        conditions: list[str] = []
        params: list[Any] = []
        if quest_filter.kind is not None:
            conditions.append("kind = ?")
            params.append(quest_filter.kind.value)
        if quest_filter.status is not None:
            conditions.append("status = ?")
            params.append(quest_filter.status.value)
        if quest_filter.difficulty is not None:
            conditions.append("difficulty = ?")
            params.append(quest_filter.difficulty.value)
        if quest_filter.completed_after is not None:
            conditions.append("completed_at > ?")
            params.append(self._encode_time(quest_filter.completed_after))

        if not conditions:
            return "", ()
        return " WHERE " + " AND ".join(conditions), tuple(params)

    def get_quest(self, quest_id: UUID) -> Quest | None:
        """Get a quest by ID."""
        rows = self._run("SELECT * FROM quests WHERE id = ?", (str(quest_id),))
        if not rows:
            return None
        return self._row_to_quest(rows[0])

    def list_quests(self, quest_filter: QuestFilter | None = None) -> list[Quest]:
        """Get quests matching a filter, newest first."""
        where, params = self._where(quest_filter)
        rows = self._run(f"SELECT * FROM quests{where} ORDER BY created_at DESC", params)
        return [self._row_to_quest(row) for row in rows]

    def save_quest(self, quest: Quest) -> None:
        """Insert or update a quest."""
        params = (
            str(quest.id),
            quest.title,
            quest.description,
            quest.difficulty.value,
            quest.xp_reward,
            quest.attribute.value,
            quest.status.value,
            quest.kind.value,
            self._encode_time(quest.due_date),
            self._encode_time(quest.completed_at),
            self._encode_time(quest.created_at),
        )
        self._run(self._upsert("quests", QUEST_COLUMNS, "id"), params, fetch=False)

    def delete_quest(self, quest_id: UUID) -> bool:
        """Delete a quest."""
        return self._rowcount("DELETE FROM quests WHERE id = ?", (str(quest_id),)) > 0

    def delete_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Delete quests matching a filter."""
        where, params = self._where(quest_filter)
        return self._rowcount(f"DELETE FROM quests{where}", params)

    def count_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Count quests matching a filter."""
        where, params = self._where(quest_filter)
        rows = self._run(f"SELECT COUNT(*) AS count FROM quests{where}", params)
        return int(rows[0]["count"]) if rows else 0

    def _row_to_quest(self, row: dict[str, Any]) -> Quest:
        """Convert a database row to a Quest object."""
        return Quest(
            id=UUID(row["id"]),
            title=row["title"],
            description=row["description"] or "",
            difficulty=row["difficulty"],
            xp_reward=row["xp_reward"],
            attribute=row["attribute"],
            status=row["status"],
            kind=row["kind"],
            due_date=self._decode_time(row["due_date"]),
            completed_at=self._decode_time(row["completed_at"]),
            created_at=self._decode_time(row["created_at"]),
        )

    # =========================================================================
    # Item Operations
    # =========================================================================

    def create_item(self, item: Item) -> None:
        """Add an item to the inventory."""
        placeholders = ", ".join("?" for _ in ITEM_COLUMNS)
        self._run(
            f"INSERT INTO items ({', '.join(ITEM_COLUMNS)}) VALUES ({placeholders})",
            (
                str(item.id),
                item.name,
                item.description,
                item.rarity.value,
                item.item_type.value,
                self._encode_time(item.obtained_at),
            ),
            fetch=False,
        )

    def get_item(self, item_id: UUID) -> Item | None:
        """Get an item by ID."""
        rows = self._run("SELECT * FROM items WHERE id = ?", (str(item_id),))
        if not rows:
            return None
        return self._row_to_item(rows[0])

    def list_items(
        self,
        rarity: Rarity | None = None,
        item_type: ItemType | None = None,
    ) -> list[Item]:
        """Get inventory items, newest first."""
        conditions: list[str] = []
        params: list[Any] = []
        if rarity is not None:
            conditions.append("rarity = ?")
            params.append(rarity.value)
        if item_type is not None:
            conditions.append("item_type = ?")
            params.append(item_type.value)

        query = "SELECT * FROM items"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY obtained_at DESC"
        return [self._row_to_item(row) for row in self._run(query, tuple(params))]

    def delete_item(self, item_id: UUID) -> bool:
        """Delete an item."""
        return self._rowcount("DELETE FROM items WHERE id = ?", (str(item_id),)) > 0

    def clear_items(self) -> int:
        """Delete every item."""
        return self._rowcount("DELETE FROM items", ())

    def _row_to_item(self, row: dict[str, Any]) -> Item:
        """Convert a database row to an Item object."""
        return Item(
            id=UUID(row["id"]),
            name=row["name"],
            description=row["description"] or "",
            rarity=row["rarity"],
            item_type=row["item_type"],
            obtained_at=self._decode_time(row["obtained_at"]),
        )

    # =========================================================================
    # System Config
    # =========================================================================

    def get_config(self, key: str) -> str | None:
        """Get a config value."""
        rows = self._run("SELECT config_value FROM system_config WHERE config_key = ?", (key,))
        return rows[0]["config_value"] if rows else None

    def set_config(self, key: str, value: str) -> None:
        """Insert or update a config value."""
        self._run(
            self._upsert("system_config", ["config_key", "config_value"], "config_key"),
            (key, value),
            fetch=False,
        )

    def delete_config(self, key: str) -> None:
        """Remove a config value if present."""
        self._run("DELETE FROM system_config WHERE config_key = ?", (key,), fetch=False)
