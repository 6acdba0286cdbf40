"""
Core data models for the Hunter System.

Models are plain pydantic records. Repositories persist them and the
engine and services operate on them.
"""

from hunter.models.character import (
    ATTRIBUTE_ORDER,
    Attribute,
    Character,
    create_character,
    parse_attribute,
)
from hunter.models.item import (
    ITEM_TYPES,
    RARITY_ORDER,
    Item,
    ItemType,
    Rarity,
    create_item,
    parse_item_type,
    parse_rarity,
)
from hunter.models.quest import (
    XP_REWARDS,
    Difficulty,
    Quest,
    QuestFilter,
    QuestKind,
    QuestStatus,
    create_quest,
    parse_difficulty,
)
from hunter.models.reward import MilestoneEvent, MilestoneType, QuestRewards

__all__ = [
    # Character
    "Attribute",
    "ATTRIBUTE_ORDER",
    "Character",
    "create_character",
    "parse_attribute",
    # Quest
    "Difficulty",
    "Quest",
    "QuestFilter",
    "QuestKind",
    "QuestStatus",
    "XP_REWARDS",
    "create_quest",
    "parse_difficulty",
    # Item
    "Item",
    "ItemType",
    "ITEM_TYPES",
    "Rarity",
    "RARITY_ORDER",
    "create_item",
    "parse_item_type",
    "parse_rarity",
    # Rewards
    "MilestoneEvent",
    "MilestoneType",
    "QuestRewards",
]
