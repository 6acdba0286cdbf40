"""
In-memory implementation of the repository interface for testing.

Stores everything in dictionaries, making tests fast and isolated from
actual database infrastructure. Transactions take a re-entrant lock and
restore a snapshot on failure, so atomicity holds the same way it does
against a real store.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from copy import deepcopy
from typing import TypeVar
from uuid import UUID

from hunter.errors import HunterError, StoreFailure
from hunter.models import Character, Item, ItemType, Quest, QuestFilter, Rarity, create_character
from hunter.models.character import utcnow

T = TypeVar("T")


class InMemoryHunterRepository:
    """
    In-memory implementation of HunterRepository.

    Seeds the default character on creation unless `seed=False`.
    """

    def __init__(self, seed: bool = True) -> None:
        self._lock = threading.RLock()
        self._depth = 0

        self._character: Character | None = create_character() if seed else None
        self._quests: dict[UUID, Quest] = {}
        self._items: dict[UUID, Item] = {}
        self._config: dict[str, str] = {}

    # Transactions
    def _snapshot(self) -> tuple:
        return deepcopy((self._character, self._quests, self._items, self._config))

    def _restore(self, snapshot: tuple) -> None:
        self._character, self._quests, self._items, self._config = snapshot

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group operations atomically."""
        with self._lock:
            outermost = self._depth == 0
            snapshot = self._snapshot() if outermost else None
            self._depth += 1
            try:
                yield
            except HunterError:
                if outermost:
                    self._restore(snapshot)
                raise
            except Exception as e:
                if outermost:
                    self._restore(snapshot)
                    raise StoreFailure(f"Transaction rolled back: {e}") from e
                raise
            finally:
                self._depth -= 1

    def with_transaction(self, fn: Callable[[], T]) -> T:
        """Run `fn` inside `transaction()` and return its result."""
        with self.transaction():
            return fn()

    # Character operations
    def get_character(self) -> Character | None:
        """Get the player character."""
        with self._lock:
            return deepcopy(self._character)

    def save_character(self, character: Character) -> None:
        """Insert or update the player character."""
        with self._lock:
            character.updated_at = utcnow()
            self._character = deepcopy(character)

    # Quest operations
    def get_quest(self, quest_id: UUID) -> Quest | None:
        """Get a quest by ID."""
        with self._lock:
            quest = self._quests.get(quest_id)
            return deepcopy(quest) if quest else None

    def list_quests(self, quest_filter: QuestFilter | None = None) -> list[Quest]:
        """Get quests matching a filter, newest first."""
        quest_filter = quest_filter or QuestFilter()
        with self._lock:
            matches = [q for q in self._quests.values() if quest_filter.matches(q)]
        matches.sort(key=lambda q: q.created_at, reverse=True)
        return [deepcopy(q) for q in matches]

    def save_quest(self, quest: Quest) -> None:
        """Insert or update a quest."""
        with self._lock:
            self._quests[quest.id] = deepcopy(quest)

    def delete_quest(self, quest_id: UUID) -> bool:
        """Delete a quest."""
        with self._lock:
            return self._quests.pop(quest_id, None) is not None

    def delete_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Delete quests matching a filter."""
        quest_filter = quest_filter or QuestFilter()
        with self._lock:
            doomed = [qid for qid, q in self._quests.items() if quest_filter.matches(q)]
            for quest_id in doomed:
                del self._quests[quest_id]
            return len(doomed)

    def count_quests(self, quest_filter: QuestFilter | None = None) -> int:
        """Count quests matching a filter."""
        quest_filter = quest_filter or QuestFilter()
        with self._lock:
            return sum(1 for q in self._quests.values() if quest_filter.matches(q))

    # Item operations
    def create_item(self, item: Item) -> None:
        """Add an item to the inventory."""
        with self._lock:
            if item.id in self._items:
                raise StoreFailure(f"Item {item.id} already exists")
            self._items[item.id] = deepcopy(item)

    def get_item(self, item_id: UUID) -> Item | None:
        """Get an item by ID."""
        with self._lock:
            item = self._items.get(item_id)
            return deepcopy(item) if item else None

    def list_items(
        self,
        rarity: Rarity | None = None,
        item_type: ItemType | None = None,
    ) -> list[Item]:
        """Get inventory items, newest first."""
        with self._lock:
            items = [
                i
                for i in self._items.values()
                if (rarity is None or i.rarity == rarity)
                and (item_type is None or i.item_type == item_type)
            ]
        items.sort(key=lambda i: i.obtained_at, reverse=True)
        return [deepcopy(i) for i in items]

    def delete_item(self, item_id: UUID) -> bool:
        """Delete an item."""
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def clear_items(self) -> int:
        """Delete every item."""
        with self._lock:
            count = len(self._items)
            self._items.clear()
            return count

    # System config
    def get_config(self, key: str) -> str | None:
        """Get a config value."""
        with self._lock:
            return self._config.get(key)

    def set_config(self, key: str, value: str) -> None:
        """Insert or update a config value."""
        with self._lock:
            self._config[key] = value

    def delete_config(self, key: str) -> None:
        """Remove a config value if present."""
        with self._lock:
            self._config.pop(key, None)
