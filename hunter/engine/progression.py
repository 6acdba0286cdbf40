"""
Progression Engine.

XP curve, hunter ranks, quest XP modifiers and level milestones.
Everything here is pure: no I/O, no randomness.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from hunter.models.quest import XP_REWARDS, Difficulty, Quest
from hunter.models.reward import MilestoneEvent, MilestoneType

# =============================================================================
# Constants
# =============================================================================

XP_CURVE_BASE = 100
XP_CURVE_EXPONENT = 1.1

ON_TIME_BONUS = 1.2

# Anti-grind: E-rank spam beyond the threshold loses 5% per extra quest, capped at 50%
ANTI_GRIND_THRESHOLD = 10
ANTI_GRIND_STEP = 0.05
ANTI_GRIND_MAX_PENALTY = 0.5

RANK_NAMES: dict[int, str] = {
    1: "E-Rank Hunter",
    5: "D-Rank Hunter",
    10: "C-Rank Hunter",
    20: "B-Rank Hunter",
    35: "A-Rank Hunter",
    50: "S-Rank Hunter",
    75: "National Level Hunter",
    100: "Shadow Monarch",
}
DEFAULT_RANK = RANK_NAMES[1]

LEGENDARY_CHOICE_INTERVAL = 10
GUARANTEED_RARE_INTERVAL = 5


class QuestXPContext(BaseModel):
    """Facts about a completion that modify its XP."""

    completed_on_time: bool = False
    recent_easy_completions: int = Field(default=0, ge=0)
    """E-rank quests completed in the trailing 24 hours."""


# =============================================================================
# XP Curve
# =============================================================================


def xp_required_for_level(level: int) -> int:
    """XP needed to go from `level` to `level + 1` (the level's bucket)."""
    return math.floor(XP_CURVE_BASE * math.pow(level, XP_CURVE_EXPONENT))


def total_xp_for_level(level: int) -> int:
    """Total XP needed to reach `level` from level 1."""
    if level <= 1:
        return 0
    return sum(xp_required_for_level(i) for i in range(1, level))


def level_for_total_xp(total_xp: int) -> tuple[int, int]:
    """
    Find the level a lifetime XP total corresponds to.

    Returns:
        (level, current_xp) where current_xp is the XP into that level
    """
    if total_xp < 0:
        raise ValueError("total_xp must be non-negative")

    level = 1
    remaining = total_xp
    while remaining >= xp_required_for_level(level):
        remaining -= xp_required_for_level(level)
        level += 1
    return level, remaining


def progress_percentage(current_xp: int, level: int) -> int:
    """Progress toward the next level, 0-100."""
    needed = xp_required_for_level(level)
    return min(100, math.floor(current_xp / needed * 100))


# =============================================================================
# Ranks
# =============================================================================


def rank_name(level: int) -> str:
    """Return the hunter rank for a level."""
    for threshold in sorted(RANK_NAMES, reverse=True):
        if level >= threshold:
            return RANK_NAMES[threshold]
    return DEFAULT_RANK


# =============================================================================
# Quest XP
# =============================================================================


def calculate_quest_xp(quest: Quest, context: QuestXPContext | None = None) -> int:
    """
    Calculate XP for completing a quest.

    Applies the on-time bonus for quests with a due date and the anti-grind
    penalty for E-rank spam. Multipliers compose; the result is floored.
    """
    context = context or QuestXPContext()
    base_xp = XP_REWARDS[Difficulty(quest.difficulty)]
    multiplier = 1.0

    if quest.due_date is not None and context.completed_on_time:
        multiplier *= ON_TIME_BONUS

    if (
        quest.difficulty == Difficulty.E
        and context.recent_easy_completions > ANTI_GRIND_THRESHOLD
    ):
        penalty = min(
            ANTI_GRIND_MAX_PENALTY,
            (context.recent_easy_completions - ANTI_GRIND_THRESHOLD) * ANTI_GRIND_STEP,
        )
        multiplier *= 1 - penalty

    return math.floor(base_xp * multiplier)


# =============================================================================
# Milestones
# =============================================================================


def milestone_events(old_level: int, new_level: int) -> list[MilestoneEvent]:
    """
    Events for every level reached going from old_level to new_level.

    Every 10th level offers a legendary choice, every other 5th level a
    guaranteed rare. A level that is exactly a rank threshold adds a rank-up.
    """
    events: list[MilestoneEvent] = []
    for level in range(old_level + 1, new_level + 1):
        if level % LEGENDARY_CHOICE_INTERVAL == 0:
            events.append(
                MilestoneEvent(
                    event_type=MilestoneType.LEGENDARY_CHOICE,
                    level=level,
                    message=f"Level {level} Milestone! Choose 1 of 3 Legendary Items",
                )
            )
        elif level % GUARANTEED_RARE_INTERVAL == 0:
            events.append(
                MilestoneEvent(
                    event_type=MilestoneType.GUARANTEED_RARE,
                    level=level,
                    message=f"Level {level} Milestone! Guaranteed Rare+ Item",
                )
            )

        if level in RANK_NAMES:
            rank = RANK_NAMES[level]
            events.append(
                MilestoneEvent(
                    event_type=MilestoneType.RANK_UP,
                    level=level,
                    message=f"Rank Up! You are now a {rank}!",
                    rank=rank,
                )
            )
    return events
