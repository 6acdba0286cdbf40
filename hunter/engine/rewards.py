"""
Reward Generator.

Rarity rolls, item generation and quest reward packages. All randomness
flows through an injectable `random.Random` so rolls can be reproduced.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from hunter.content.loot_tables import ITEM_DESCRIPTIONS, ITEM_NAMES
from hunter.models.item import ITEM_TYPES, RARITY_ORDER, Item, Rarity
from hunter.models.quest import Difficulty
from hunter.models.reward import MilestoneEvent, MilestoneType, QuestRewards

# =============================================================================
# Tables
# =============================================================================

# Per-difficulty rarity chances, in RARITY_ORDER; each row sums to 1.0
DROP_RATES: dict[Difficulty, dict[Rarity, float]] = {
    Difficulty.E: {Rarity.COMMON: 0.80, Rarity.RARE: 0.15, Rarity.EPIC: 0.04, Rarity.LEGENDARY: 0.01, Rarity.MYTHIC: 0.0},
    Difficulty.D: {Rarity.COMMON: 0.60, Rarity.RARE: 0.30, Rarity.EPIC: 0.08, Rarity.LEGENDARY: 0.02, Rarity.MYTHIC: 0.0},
    Difficulty.C: {Rarity.COMMON: 0.40, Rarity.RARE: 0.40, Rarity.EPIC: 0.15, Rarity.LEGENDARY: 0.04, Rarity.MYTHIC: 0.01},
    Difficulty.B: {Rarity.COMMON: 0.20, Rarity.RARE: 0.40, Rarity.EPIC: 0.25, Rarity.LEGENDARY: 0.12, Rarity.MYTHIC: 0.03},
    Difficulty.A: {Rarity.COMMON: 0.10, Rarity.RARE: 0.30, Rarity.EPIC: 0.35, Rarity.LEGENDARY: 0.20, Rarity.MYTHIC: 0.05},
    Difficulty.S: {Rarity.COMMON: 0.0, Rarity.RARE: 0.20, Rarity.EPIC: 0.40, Rarity.LEGENDARY: 0.30, Rarity.MYTHIC: 0.10},
}

# Rarity table for milestone "guaranteed rare" rewards
MILESTONE_RATES: dict[Rarity, float] = {
    Rarity.RARE: 0.60,
    Rarity.EPIC: 0.25,
    Rarity.LEGENDARY: 0.12,
    Rarity.MYTHIC: 0.03,
}

DROP_CHANCES: dict[Difficulty, float] = {
    Difficulty.E: 0.3,
    Difficulty.D: 0.5,
    Difficulty.C: 0.7,
    Difficulty.B: 0.9,
    Difficulty.A: 1.0,
    Difficulty.S: 1.0,
}

LEGENDARY_CHOICE_COUNT = 3


def _pick_weighted(roll: float, weights: dict[Rarity, float], fallback: Rarity) -> Rarity:
    """Walk cumulative weights in rarity order and return the first bucket covering roll."""
    cumulative = 0.0
    for rarity in RARITY_ORDER:
        if rarity not in weights:
            continue
        cumulative += weights[rarity]
        if roll < cumulative:
            return rarity
    return fallback


@dataclass
class RarityTable:
    """Weighted rarity selection."""

    rng: random.Random = field(default_factory=random.Random)

    def roll_rarity(self, difficulty: Difficulty) -> Rarity:
        """Roll a rarity for a quest of the given difficulty."""
        return _pick_weighted(self.rng.random(), DROP_RATES[difficulty], Rarity.COMMON)

    def roll_milestone_rarity(self) -> Rarity:
        """Roll a rare-or-better rarity for a milestone reward."""
        return _pick_weighted(self.rng.random(), MILESTONE_RATES, Rarity.RARE)


@dataclass
class RewardGenerator:
    """
    Turns quest completions and level milestones into loot.

    A shared `random.Random` drives both the rarity table and the item
    choices; pass a seeded one for reproducible rewards.
    """

    rng: random.Random = field(default_factory=random.Random)
    rarity_table: RarityTable = field(init=False)

    def __post_init__(self) -> None:
        self.rarity_table = RarityTable(rng=self.rng)

    def generate_item(self, difficulty: Difficulty, forced_rarity: Rarity | None = None) -> Item:
        """
        Generate a random item.

        Args:
            difficulty: Quest difficulty (affects rarity)
            forced_rarity: Skip the roll and use this rarity

        Returns:
            A new Item with a name and description from the matching pool
        """
        rarity = forced_rarity or self.rarity_table.roll_rarity(difficulty)
        item_type = self.rng.choice(ITEM_TYPES)

        return Item(
            name=self.rng.choice(ITEM_NAMES[item_type][rarity]),
            description=self.rng.choice(ITEM_DESCRIPTIONS[item_type][rarity]),
            rarity=rarity,
            item_type=item_type,
        )

    def generate_item_choices(self, count: int, rarity: Rarity) -> list[Item]:
        """Generate `count` items of one rarity with distinct names."""
        pool_size = sum(len(ITEM_NAMES[t][rarity]) for t in ITEM_TYPES)
        if count > pool_size:
            raise ValueError(f"Only {pool_size} distinct {rarity.value} names exist")

        items: list[Item] = []
        used_names: set[str] = set()
        while len(items) < count:
            item = self.generate_item(Difficulty.S, rarity)
            if item.name not in used_names:
                items.append(item)
                used_names.add(item.name)
        return items

    def should_drop_item(self, difficulty: Difficulty) -> bool:
        """Decide whether a completion drops a standard item."""
        return self.rng.random() < DROP_CHANCES[difficulty]

    def generate_quest_rewards(
        self,
        difficulty: Difficulty,
        milestone_events: list[MilestoneEvent] | None = None,
    ) -> QuestRewards:
        """
        Build the reward package for a quest completion.

        Args:
            difficulty: Difficulty of the completed quest
            milestone_events: Level-up milestones reached by the completion

        Returns:
            QuestRewards with dropped items and special events
        """
        rewards = QuestRewards()

        if self.should_drop_item(difficulty):
            rewards.items.append(self.generate_item(difficulty))

        for event in milestone_events or []:
            if event.event_type == MilestoneType.GUARANTEED_RARE:
                rarity = self.rarity_table.roll_milestone_rarity()
                rewards.items.append(self.generate_item(difficulty, rarity))
                rewards.special.append(event)
            elif event.event_type == MilestoneType.LEGENDARY_CHOICE:
                choices = self.generate_item_choices(LEGENDARY_CHOICE_COUNT, Rarity.LEGENDARY)
                rewards.special.append(event.model_copy(update={"choices": choices}))
            else:
                rewards.special.append(event)

        return rewards
