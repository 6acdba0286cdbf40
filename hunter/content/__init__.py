"""
Static game content: loot tables, the daily quest slate and text templates.
"""

from hunter.content.loot_tables import ITEM_DESCRIPTIONS, ITEM_NAMES
from hunter.content.templates import (
    DAILY_QUESTS,
    DIFFICULTY_TONE,
    ITEM_FLAVOR,
    LEVEL_UP_MESSAGES,
    QUEST_FLAVOR,
    RARITY_TONE,
    DailyQuestTemplate,
)

__all__ = [
    "DAILY_QUESTS",
    "DIFFICULTY_TONE",
    "DailyQuestTemplate",
    "ITEM_DESCRIPTIONS",
    "ITEM_FLAVOR",
    "ITEM_NAMES",
    "LEVEL_UP_MESSAGES",
    "QUEST_FLAVOR",
    "RARITY_TONE",
]
