"""
Hunter Service.

The player-facing operations: completing and managing quests, applying
experience, spending stat points, browsing the inventory and reading the
profile. Every mutation runs inside one repository transaction, so a
failure leaves no partial state and a second completion of the same
quest observes the first one's terminal status.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from pydantic import BaseModel, Field

from hunter.db.interfaces import LAST_DAILY_RESET_KEY, HunterRepository
from hunter.engine import (
    LedgerResult,
    QuestXPContext,
    RewardGenerator,
    apply_xp_to_character,
    calculate_quest_xp,
    level_for_total_xp,
    milestone_events,
    progress_percentage,
    rank_name,
    xp_required_for_level,
)
from hunter.errors import InvalidStateError, NotFoundError, ValidationError
from hunter.models import (
    ATTRIBUTE_ORDER,
    RARITY_ORDER,
    XP_REWARDS,
    Attribute,
    Character,
    Difficulty,
    Item,
    ItemType,
    Quest,
    QuestFilter,
    QuestKind,
    QuestRewards,
    QuestStatus,
    Rarity,
    create_character,
    create_quest,
    parse_attribute,
    parse_difficulty,
)
from hunter.models.character import MIN_ATTRIBUTE_VALUE, utcnow
from hunter.services.flavor import FlavorService

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

ANTI_GRIND_WINDOW = timedelta(hours=24)

ITEM_SORT_KEYS = ("rarity", "newest", "oldest", "name")


# =============================================================================
# Result Models
# =============================================================================


class QuestCompletionResult(BaseModel):
    """Result of completing a quest."""

    quest: Quest
    xp_gained: int
    leveled_up: bool = False
    levels_gained: int = 0
    old_level: int
    new_level: int
    stat_point_changes: dict[Attribute, int]
    rewards: QuestRewards
    character: Character
    rank: str


class HunterProfile(BaseModel):
    """Snapshot of the character for display."""

    level: int
    rank: str
    current_xp: int
    xp_for_next_level: int
    progress_percentage: int
    total_xp_earned: int
    attributes: dict[Attribute, int]
    unspent_stat_points: int
    quest_counts: dict[QuestStatus, int] = Field(default_factory=dict)
    item_count: int = 0


class Achievement(BaseModel):
    """A long-term goal with progress toward it."""

    id: str
    name: str
    description: str
    progress: int
    max: int
    unlocked: bool


class ItemSummary(BaseModel):
    """Inventory counts."""

    total: int
    by_rarity: dict[Rarity, int]
    by_type: dict[ItemType, int]


# =============================================================================
# Hunter Service
# =============================================================================


@dataclass
class HunterService:
    """
    Service for the player's progression, quests and inventory.

    Constructed with a repository; reward randomness and flavor text
    are injectable, as is the clock.
    """

    repository: HunterRepository
    rewards: RewardGenerator = field(default_factory=RewardGenerator)
    flavor: FlavorService = field(default_factory=FlavorService)
    clock: Callable[[], datetime] = utcnow

    def _require_character(self) -> Character:
        character = self.repository.get_character()
        if character is None:
            raise NotFoundError("Character not found")
        return character

    def _require_quest(self, quest_id: UUID) -> Quest:
        quest = self.repository.get_quest(quest_id)
        if quest is None:
            raise NotFoundError(f"Quest not found: {quest_id}")
        return quest

    # =========================================================================
    # Progression
    # =========================================================================

    def complete_quest(self, quest_id: UUID) -> QuestCompletionResult:
        """
        Complete a quest, awarding XP, stat points and loot.

        Args:
            quest_id: The quest to complete

        Returns:
            QuestCompletionResult with XP, level change and rewards

        Raises:
            NotFoundError: The quest does not exist
            InvalidStateError: The quest is already completed or failed
            StoreFailure: The store failed; nothing was changed
        """
        with self.repository.transaction():
            quest = self._require_quest(quest_id)
            if not quest.is_active:
                raise InvalidStateError(f"Quest is not active (status: {quest.status.value})")

            character = self._require_character()
            now = self.clock()

            completed_on_time = quest.due_date is not None and now <= quest.due_date
            recent_easy = 0
            if quest.difficulty == Difficulty.E:
                recent_easy = self.repository.count_quests(
                    QuestFilter(
                        status=QuestStatus.COMPLETED,
                        difficulty=Difficulty.E,
                        completed_after=now - ANTI_GRIND_WINDOW,
                    )
                )

            xp_gained = calculate_quest_xp(
                quest,
                QuestXPContext(
                    completed_on_time=completed_on_time,
                    recent_easy_completions=recent_easy,
                ),
            )

            old_level = character.level
            ledger = apply_xp_to_character(character, xp_gained, quest.attribute)
            events = milestone_events(old_level, character.level)
            rewards = self.rewards.generate_quest_rewards(quest.difficulty, events)

            quest.complete(now)
            self.repository.save_quest(quest)
            self.repository.save_character(character)
            for item in rewards.items:
                self.repository.create_item(item)

        if ledger.leveled_up:
            logger.info(
                "Level up: %d -> %d (%s)", old_level, character.level, rank_name(character.level)
            )

        return QuestCompletionResult(
            quest=quest,
            xp_gained=xp_gained,
            leveled_up=ledger.leveled_up,
            levels_gained=ledger.levels_gained,
            old_level=old_level,
            new_level=character.level,
            stat_point_changes=ledger.stat_point_changes,
            rewards=rewards,
            character=character,
            rank=rank_name(character.level),
        )

    def add_experience(
        self, character_id: int, amount: int, attribute: Attribute | str
    ) -> LedgerResult:
        """
        Apply raw XP to the character outside of a quest.

        Raises:
            NotFoundError: No character with this ID
            ValidationError: Negative amount or unknown attribute
        """
        with self.repository.transaction():
            character = self.repository.get_character()
            if character is None or character.id != character_id:
                raise NotFoundError(f"Character not found: {character_id}")

            old_level = character.level
            result = apply_xp_to_character(character, amount, attribute)
            self.repository.save_character(character)

        if result.leveled_up:
            logger.info("Level up: %d -> %d", old_level, result.new_level)
        return result

    def allocate_stats(self, allocation: Mapping[Attribute | str, int]) -> Character:
        """
        Spend unspent stat points on attributes.

        Args:
            allocation: Points to add per attribute

        Returns:
            The updated character

        Raises:
            ValidationError: Unknown attribute, negative or zero total,
                or more points than are available
        """
        points: dict[Attribute, int] = {}
        for name, value in allocation.items():
            attribute = parse_attribute(name)
            if value < 0:
                raise ValidationError(f"Cannot allocate negative points to {attribute.value}")
            points[attribute] = points.get(attribute, 0) + value

        total = sum(points.values())
        if total <= 0:
            raise ValidationError("Must allocate at least one stat point")

        with self.repository.transaction():
            character = self._require_character()
            if total > character.unspent_stat_points:
                raise ValidationError(
                    f"Not enough stat points: {total} requested, "
                    f"{character.unspent_stat_points} available"
                )
            for attribute, value in points.items():
                character.attributes[attribute] += value
            character.unspent_stat_points -= total
            self.repository.save_character(character)

        return character

    # =========================================================================
    # Quest Management
    # =========================================================================

    async def create_quest(
        self,
        title: str,
        difficulty: Difficulty | str,
        *,
        description: str = "",
        attribute: Attribute | str = Attribute.STRENGTH,
        due_date: datetime | None = None,
    ) -> Quest:
        """
        Create a normal quest.

        A blank description is filled with flavor text; flavor failures
        fall back to templates and never block creation.
        """
        title = title.strip()
        if not title:
            raise ValidationError("Title is required")
        rank = parse_difficulty(difficulty)
        target = parse_attribute(attribute)

        if not description.strip():
            description = await self.flavor.quest_flavor(title, rank)

        quest = create_quest(
            title,
            rank,
            description=description,
            attribute=target,
            due_date=due_date,
        )
        self.repository.save_quest(quest)
        return quest

    def update_quest(
        self,
        quest_id: UUID,
        *,
        title: str | None = None,
        description: str | None = None,
        difficulty: Difficulty | str | None = None,
        attribute: Attribute | str | None = None,
        due_date: datetime | None = None,
        clear_due_date: bool = False,
    ) -> Quest:
        """
        Edit an active normal quest.

        Changing the difficulty resets the XP reward to match. Pass
        `clear_due_date=True` to remove an existing due date.
        """
        if clear_due_date and due_date is not None:
            raise ValidationError("Cannot both set and clear the due date")
        if not clear_due_date and all(
            v is None for v in (title, description, difficulty, attribute, due_date)
        ):
            raise ValidationError("No fields to update")

        updates: dict[str, object] = {}
        if title is not None:
            if not title.strip():
                raise ValidationError("Title is required")
            updates["title"] = title.strip()
        if description is not None:
            updates["description"] = description
        if difficulty is not None:
            rank = parse_difficulty(difficulty)
            updates["difficulty"] = rank
            updates["xp_reward"] = XP_REWARDS[rank]
        if attribute is not None:
            updates["attribute"] = parse_attribute(attribute)
        if due_date is not None:
            updates["due_date"] = due_date
        elif clear_due_date:
            updates["due_date"] = None

        with self.repository.transaction():
            quest = self._require_quest(quest_id)
            if quest.kind == QuestKind.DAILY:
                raise InvalidStateError("Daily quests cannot be edited")
            if not quest.is_active:
                raise InvalidStateError(f"Quest is not active (status: {quest.status.value})")

            quest = quest.model_validate({**quest.model_dump(), **updates})
            self.repository.save_quest(quest)

        return quest

    def fail_quest(self, quest_id: UUID) -> Quest:
        """Mark an active quest as failed."""
        with self.repository.transaction():
            quest = self._require_quest(quest_id)
            quest.fail(self.clock())
            self.repository.save_quest(quest)
        return quest

    def delete_quest(self, quest_id: UUID) -> None:
        """Delete a normal quest. Daily quests are managed by the daily cycle."""
        with self.repository.transaction():
            quest = self._require_quest(quest_id)
            if quest.kind == QuestKind.DAILY:
                raise InvalidStateError("Daily quests are managed by the System")
            self.repository.delete_quest(quest_id)

    def get_quest(self, quest_id: UUID) -> Quest:
        """Get a quest by ID."""
        return self._require_quest(quest_id)

    def list_quests(
        self,
        status: QuestStatus | str | None = None,
        difficulty: Difficulty | str | None = None,
        kind: QuestKind | str | None = None,
    ) -> list[Quest]:
        """List quests, newest first."""
        try:
            quest_filter = QuestFilter(
                status=QuestStatus(status) if status else None,
                difficulty=parse_difficulty(difficulty) if difficulty else None,
                kind=QuestKind(kind) if kind else None,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return self.repository.list_quests(quest_filter)

    # =========================================================================
    # Inventory
    # =========================================================================

    def list_items(
        self,
        rarity: Rarity | str | None = None,
        item_type: ItemType | str | None = None,
        sort_by: str = "newest",
    ) -> list[Item]:
        """
        List inventory items.

        Args:
            rarity: Only items of this rarity
            item_type: Only items of this type
            sort_by: "rarity" (best first), "newest", "oldest" or "name"
        """
        if sort_by not in ITEM_SORT_KEYS:
            raise ValidationError(f"Unknown sort: {sort_by}")
        try:
            rarity = Rarity(rarity) if rarity else None
            item_type = ItemType(item_type) if item_type else None
        except ValueError as e:
            raise ValidationError(str(e)) from e

        items = self.repository.list_items(rarity=rarity, item_type=item_type)

        if sort_by == "oldest":
            items.sort(key=lambda i: i.obtained_at)
        elif sort_by == "name":
            items.sort(key=lambda i: i.name.lower())
        elif sort_by == "rarity":
            # Stable: newest first within a rarity
            items.sort(key=lambda i: RARITY_ORDER.index(i.rarity), reverse=True)
        return items

    def get_item(self, item_id: UUID) -> Item:
        """Get an item by ID."""
        item = self.repository.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    def discard_item(self, item_id: UUID) -> None:
        """Remove an item from the inventory."""
        if not self.repository.delete_item(item_id):
            raise NotFoundError(f"Item not found: {item_id}")

    def item_summary(self) -> ItemSummary:
        """Count items per rarity and per type."""
        items = self.repository.list_items()
        by_rarity = {r: 0 for r in RARITY_ORDER}
        by_type = {t: 0 for t in ItemType}
        for item in items:
            by_rarity[item.rarity] += 1
            by_type[item.item_type] += 1
        return ItemSummary(total=len(items), by_rarity=by_rarity, by_type=by_type)

    # =========================================================================
    # Profile
    # =========================================================================

    def get_profile(self) -> HunterProfile:
        """Current level, XP, rank, attributes and record counts."""
        character = self._require_character()
        return HunterProfile(
            level=character.level,
            rank=rank_name(character.level),
            current_xp=character.current_xp,
            xp_for_next_level=xp_required_for_level(character.level),
            progress_percentage=progress_percentage(character.current_xp, character.level),
            total_xp_earned=character.total_xp_earned,
            attributes=dict(character.attributes),
            unspent_stat_points=character.unspent_stat_points,
            quest_counts={
                status: self.repository.count_quests(QuestFilter(status=status))
                for status in QuestStatus
            },
            item_count=len(self.repository.list_items()),
        )

    def get_achievements(self) -> list[Achievement]:
        """Progress toward every achievement."""
        character = self._require_character()
        completed = self.repository.count_quests(QuestFilter(status=QuestStatus.COMPLETED))
        items = self.repository.list_items()
        top_tier = sum(1 for i in items if i.rarity in (Rarity.LEGENDARY, Rarity.MYTHIC))

        def achievement(key: str, name: str, description: str, progress: int, target: int) -> Achievement:
            return Achievement(
                id=key,
                name=name,
                description=description,
                progress=progress,
                max=target,
                unlocked=progress >= target,
            )

        return [
            achievement("first_quest", "First Steps", "Complete your first quest", min(1, completed), 1),
            achievement("quest_master", "Quest Master", "Complete 100 quests", completed, 100),
            achievement("level_10", "Rising Hunter", "Reach level 10", character.level, 10),
            achievement("level_50", "S-Rank Hunter", "Reach level 50", character.level, 50),
            achievement("collector", "Collector", "Obtain 50 items", len(items), 50),
            achievement(
                "legendary_hunter",
                "Legendary Hunter",
                "Obtain 10 legendary or mythic items",
                top_tier,
                10,
            ),
        ]

    # =========================================================================
    # Maintenance
    # =========================================================================

    def reset_progress(self) -> Character:
        """
        Start over: seed character, no quests, no items.

        The daily marker is cleared too, so the next daily check is a
        first run and applies no penalty.
        """
        with self.repository.transaction():
            current = self._require_character()
            character = create_character(current.id)
            self.repository.save_character(character)
            quests = self.repository.delete_quests()
            items = self.repository.clear_items()
            self.repository.delete_config(LAST_DAILY_RESET_KEY)

        logger.info("Progress reset (%d quests, %d items removed)", quests, items)
        return character

    def set_progress(
        self,
        total_xp: int | None = None,
        attributes: Mapping[Attribute | str, int] | None = None,
        unspent_stat_points: int | None = None,
    ) -> Character:
        """
        Overwrite progression for development and testing.

        Args:
            total_xp: Lifetime XP; level and current XP are derived from it
                and current XP is spread evenly over the attribute counters
            attributes: Attribute values to set (each at least 1)
            unspent_stat_points: Unspent stat points to set

        Returns:
            The updated character
        """
        if total_xp is not None and total_xp < 0:
            raise ValidationError("total_xp must be non-negative")
        if unspent_stat_points is not None and unspent_stat_points < 0:
            raise ValidationError("unspent_stat_points must be non-negative")

        values: dict[Attribute, int] = {}
        for name, value in (attributes or {}).items():
            if value < MIN_ATTRIBUTE_VALUE:
                raise ValidationError(f"Attribute values must be at least {MIN_ATTRIBUTE_VALUE}")
            values[parse_attribute(name)] = value

        with self.repository.transaction():
            character = self._require_character()

            if total_xp is not None:
                level, current_xp = level_for_total_xp(total_xp)
                character.level = level
                character.current_xp = current_xp
                character.total_xp_earned = total_xp

                share, extra = divmod(current_xp, len(ATTRIBUTE_ORDER))
                character.attribute_xp = {
                    a: share + (1 if i < extra else 0) for i, a in enumerate(ATTRIBUTE_ORDER)
                }

            character.attributes.update(values)
            if unspent_stat_points is not None:
                character.unspent_stat_points = unspent_stat_points

            self.repository.save_character(character)

        return character
