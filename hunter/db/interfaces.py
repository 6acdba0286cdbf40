"""
Database interface definitions for the Hunter System.

Uses a Protocol class to define the contract for record storage.
Implementations can use real drivers or in-memory stores for testing.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol, TypeVar
from uuid import UUID

if TYPE_CHECKING:
    from hunter.models import Character, Item, ItemType, Quest, QuestFilter, Rarity

T = TypeVar("T")

LAST_DAILY_RESET_KEY = "last_daily_reset"


class HunterRepository(Protocol):
    """
    Interface for Hunter System record storage.

    Stores the single character, quests, items and system config.
    Mutations grouped under `transaction()` commit together or not at all.
    """

    # Transactions
    def transaction(self) -> AbstractContextManager[None]:
        """
        Group operations atomically.

        Domain errors raised inside roll back and propagate unchanged;
        any other failure rolls back and surfaces as StoreFailure.
        """
        ...

    def with_transaction(self, fn: Callable[[], T]) -> T:
        """Run `fn` inside `transaction()` and return its result."""
        ...

    # Character operations
    def get_character(self) -> Character | None:
        """Get the player character."""
        ...

    def save_character(self, character: Character) -> None:
        """Insert or update the player character."""
        ...

    # Quest operations
    def get_quest(self, quest_id: UUID) -> Quest | None:
        """Get a quest by ID."""
        ...

    def list_quests(self, quest_filter: QuestFilter | None = None) -> list[Quest]:
        """Get quests matching a filter, newest first."""
        ...

    def save_quest(self, quest: Quest) -> None:
        """Insert or update a quest."""
        ...

    def delete_quest(self, quest_id: UUID) -> bool:
        """Delete a quest. Returns False if it did not exist."""
        ...

    def delete_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Delete quests matching a filter. Returns the number deleted."""
        ...

    def count_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Count quests matching a filter."""
        ...

    # Item operations
    def create_item(self, item: Item) -> None:
        """Add an item to the inventory."""
        ...

    def get_item(self, item_id: UUID) -> Item | None:
        """Get an item by ID."""
        ...

    def list_items(
        self,
        rarity: Rarity | None = None,
        item_type: ItemType | None = None,
    ) -> list[Item]:
        """Get inventory items, newest first."""
        ...

    def delete_item(self, item_id: UUID) -> bool:
        """Delete an item. Returns False if it did not exist."""
        ...

    def clear_items(self) -> int:
        """Delete every item. Returns the number deleted."""
        ...

    # System config
    def get_config(self, key: str) -> str | None:
        """Get a config value."""
        ...

    def set_config(self, key: str, value: str) -> None:
        """Insert or update a config value."""
        ...

    def delete_config(self, key: str) -> None:
        """Remove a config value if present."""
        ...
