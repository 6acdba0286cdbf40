"""
Progression and reward engine for the Hunter System.

Pure computation: XP curve and modifiers, the attribute ledger and
loot generation. Persistence lives in the services layer.
"""

from __future__ import annotations

from hunter.engine.ledger import (
    STAT_POINTS_PER_LEVEL,
    LedgerResult,
    add_xp,
    apply_xp_to_character,
    distribute_stat_points,
)
from hunter.engine.progression import (
    RANK_NAMES,
    QuestXPContext,
    calculate_quest_xp,
    level_for_total_xp,
    milestone_events,
    progress_percentage,
    rank_name,
    total_xp_for_level,
    xp_required_for_level,
)
from hunter.engine.rewards import RarityTable, RewardGenerator

__all__ = [
    # Progression
    "QuestXPContext",
    "RANK_NAMES",
    "calculate_quest_xp",
    "level_for_total_xp",
    "milestone_events",
    "progress_percentage",
    "rank_name",
    "total_xp_for_level",
    "xp_required_for_level",
    # Ledger
    "LedgerResult",
    "STAT_POINTS_PER_LEVEL",
    "add_xp",
    "apply_xp_to_character",
    "distribute_stat_points",
    # Rewards
    "RarityTable",
    "RewardGenerator",
]
