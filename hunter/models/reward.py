"""
Reward models for the Hunter System.

Milestone events are emitted for levels reached during an XP award and
are turned into loot by the reward generator.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from hunter.models.item import Item


class MilestoneType(str, Enum):
    """Special events produced by level-ups."""

    LEGENDARY_CHOICE = "legendary_choice"  # Every 10th level: pick 1 of 3 legendaries
    GUARANTEED_RARE = "guaranteed_rare"  # Every 5th level: one rare-or-better item
    RANK_UP = "rank_up"  # Level matches a rank threshold


class MilestoneEvent(BaseModel):
    """A level-up milestone, optionally carrying item choices."""

    event_type: MilestoneType
    level: int
    message: str
    rank: str | None = None
    choices: list[Item] = Field(default_factory=list)
    """Items offered for a legendary choice; claiming one happens elsewhere."""


class QuestRewards(BaseModel):
    """Everything a quest completion yields besides XP."""

    items: list[Item] = Field(default_factory=list)
    special: list[MilestoneEvent] = Field(default_factory=list)
