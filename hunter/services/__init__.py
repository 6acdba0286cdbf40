"""
Services for the Hunter System.

Services orchestrate the engine and the repository:
- HunterService: quest completion, experience, stats, inventory, profile
- DailyQuestService / DailyResetScheduler: the daily quest cycle
- FlavorService: LLM flavor text with template fallback
"""

from __future__ import annotations

from hunter.services.daily import (
    DailyCycleReport,
    DailyQuestService,
    DailyResetScheduler,
    seconds_until_next_midnight,
)
from hunter.services.flavor import (
    FlavorProvider,
    FlavorService,
    MockFlavorProvider,
    OpenAICompatibleProvider,
    create_flavor_service,
)
from hunter.services.hunter import (
    Achievement,
    HunterProfile,
    HunterService,
    ItemSummary,
    QuestCompletionResult,
)

__all__ = [
    # Hunter
    "Achievement",
    "HunterProfile",
    "HunterService",
    "ItemSummary",
    "QuestCompletionResult",
    # Daily cycle
    "DailyCycleReport",
    "DailyQuestService",
    "DailyResetScheduler",
    "seconds_until_next_midnight",
    # Flavor
    "FlavorProvider",
    "FlavorService",
    "MockFlavorProvider",
    "OpenAICompatibleProvider",
    "create_flavor_service",
]
