"""
Fixed text templates: the daily quest slate and flavor-text fallbacks.
"""

from __future__ import annotations

from dataclasses import dataclass

from hunter.models.character import Attribute
from hunter.models.item import Rarity
from hunter.models.quest import Difficulty


@dataclass(frozen=True)
class DailyQuestTemplate:
    """One entry of the daily slate."""

    title: str
    description: str
    attribute: Attribute
    difficulty: Difficulty = Difficulty.E


DAILY_QUESTS: tuple[DailyQuestTemplate, ...] = (
    DailyQuestTemplate(
        title="Brush routine",
        description="Complete your daily brush routine.",
        attribute=Attribute.VITALITY,
    ),
    DailyQuestTemplate(
        title="Study 1 hour",
        description="Spend at least 1 hour studying.",
        attribute=Attribute.INTELLIGENCE,
    ),
    DailyQuestTemplate(
        title="5 pushups or 30s plank",
        description="Do 5 pushups or a 30-second plank.",
        attribute=Attribute.STRENGTH,
    ),
    DailyQuestTemplate(
        title="Handshake with acquaintance",
        description="Greet an acquaintance with a handshake.",
        attribute=Attribute.NETWORK,
    ),
    DailyQuestTemplate(
        title="Spend 10 minutes thinking about a project",
        description="Brainstorm or think about a project for 10 minutes.",
        attribute=Attribute.CREATION,
    ),
)

QUEST_FLAVOR: dict[Difficulty, list[str]] = {
    Difficulty.E: [
        "A simple task that needs attention. Every journey begins with small steps.",
        "Basic preparation is key to any hunter's success.",
        "Even the smallest quests build experience.",
        "The System recognizes all efforts, no matter how small.",
    ],
    Difficulty.D: [
        "A standard mission for an aspiring hunter.",
        "This task will test your fundamental skills.",
        "Complete this to prove your dedication.",
        "The path of a hunter requires consistent effort.",
    ],
    Difficulty.C: [
        "A challenging task that demands focus and skill.",
        "Only capable hunters should attempt this quest.",
        "Your growth as a hunter accelerates with challenges like these.",
        "The System acknowledges your improving capabilities.",
    ],
    Difficulty.B: [
        "A difficult mission that will push your limits.",
        "This quest separates true hunters from amateurs.",
        "Great rewards await those who overcome this challenge.",
        "Your rank reflects your willingness to face hard trials.",
    ],
    Difficulty.A: [
        "A critical mission of the highest importance.",
        "Few hunters are qualified to attempt this quest.",
        "Legends are forged through quests like these.",
        "The System has marked you for greatness.",
    ],
    Difficulty.S: [
        "A catastrophic threat that demands immediate attention.",
        "Only the strongest hunters survive S-rank missions.",
        "The fate of many rests on your shoulders.",
        "This is what separates National Level Hunters from the rest.",
    ],
}

ITEM_FLAVOR: dict[Rarity, list[str]] = {
    Rarity.COMMON: [
        "A useful tool for any hunter.",
        "Standard equipment, but reliable.",
        "Every hunter needs the basics.",
    ],
    Rarity.RARE: [
        "An uncommon find with hidden potential.",
        "This item surpasses ordinary gear.",
        "A valuable addition to your arsenal.",
    ],
    Rarity.EPIC: [
        "Power resonates from this artifact.",
        "Forged with rare materials and ancient techniques.",
        "Only strong hunters can wield this effectively.",
    ],
    Rarity.LEGENDARY: [
        "A legendary artifact of immense power.",
        "Stories will be told of those who wield this.",
        "The System itself recognizes this item's significance.",
    ],
    Rarity.MYTHIC: [
        "An impossible creation that defies reality.",
        "Even the System struggles to categorize this artifact.",
        "Monarchs of old would envy this treasure.",
    ],
}

LEVEL_UP_MESSAGES: tuple[str, ...] = (
    "Level {level} achieved. Your power grows.",
    "The System acknowledges your progress. Level {level}.",
    "You have surpassed your limits. Level {level}.",
    "{rank} - Your journey continues.",
    "Level Up! The path of a hunter is never-ending.",
)

DIFFICULTY_TONE: dict[Difficulty, str] = {
    Difficulty.E: "easy",
    Difficulty.D: "normal",
    Difficulty.C: "challenging",
    Difficulty.B: "hard",
    Difficulty.A: "critical",
    Difficulty.S: "catastrophic",
}

RARITY_TONE: dict[Rarity, str] = {
    Rarity.COMMON: "basic",
    Rarity.RARE: "uncommon",
    Rarity.EPIC: "powerful",
    Rarity.LEGENDARY: "legendary",
    Rarity.MYTHIC: "mythical",
}
