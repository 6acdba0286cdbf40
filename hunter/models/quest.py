"""
Quest models for the Hunter System.

Quests carry a reward contract fixed by difficulty at creation time.
Normal quests are written by the player; daily quests are regenerated
by the daily cycle and never edited.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from hunter.errors import InvalidStateError, ValidationError
from hunter.models.character import Attribute, parse_attribute, utcnow


class Difficulty(str, Enum):
    """Quest rank, E (easy daily task) through S (boss tier)."""

    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"


class QuestStatus(str, Enum):
    """Status of a quest. Only ACTIVE quests can change."""

    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class QuestKind(str, Enum):
    """Who owns the quest's life-cycle."""

    NORMAL = "normal"  # Player-authored
    DAILY = "daily"  # System-managed, regenerated each day


XP_REWARDS: dict[Difficulty, int] = {
    Difficulty.E: 50,
    Difficulty.D: 100,
    Difficulty.C: 200,
    Difficulty.B: 400,
    Difficulty.A: 800,
    Difficulty.S: 1600,
}


def parse_difficulty(value: Difficulty | str) -> Difficulty:
    """Convert a string to a Difficulty, raising ValidationError if unknown."""
    try:
        return Difficulty(value)
    except ValueError:
        raise ValidationError(f"Invalid difficulty level: {value}") from None


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Quest(BaseModel):
    """A task with a reward contract."""

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(min_length=1)
    description: str = ""

    difficulty: Difficulty
    xp_reward: int = Field(ge=0)
    """Base XP, fixed by difficulty."""

    attribute: Attribute = Attribute.STRENGTH
    """Attribute credited with the XP on completion."""

    status: QuestStatus = QuestStatus.ACTIVE
    kind: QuestKind = QuestKind.NORMAL

    due_date: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("due_date", "completed_at", "created_at")
    @classmethod
    def _naive_means_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @property
    def is_active(self) -> bool:
        return self.status == QuestStatus.ACTIVE

    def complete(self, when: datetime | None = None) -> None:
        """Mark quest as completed."""
        if self.status != QuestStatus.ACTIVE:
            raise InvalidStateError(f"Quest {self.id} is not active")
        self.status = QuestStatus.COMPLETED
        self.completed_at = when or utcnow()

    def fail(self, when: datetime | None = None) -> None:
        """Mark quest as failed."""
        if self.status != QuestStatus.ACTIVE:
            raise InvalidStateError(f"Quest {self.id} is not active")
        self.status = QuestStatus.FAILED
        self.completed_at = when or utcnow()


class QuestFilter(BaseModel):
    """Selection criteria for listing, counting and deleting quests."""

    kind: QuestKind | None = None
    status: QuestStatus | None = None
    difficulty: Difficulty | None = None
    completed_after: datetime | None = None

    @field_validator("completed_after")
    @classmethod
    def _naive_means_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def matches(self, quest: Quest) -> bool:
        """Check whether a quest satisfies every set criterion."""
        if self.kind is not None and quest.kind != self.kind:
            return False
        if self.status is not None and quest.status != self.status:
            return False
        if self.difficulty is not None and quest.difficulty != self.difficulty:
            return False
        if self.completed_after is not None:
            if quest.completed_at is None or quest.completed_at <= self.completed_after:
                return False
        return True


# =============================================================================
# Factory Functions
# =============================================================================


def create_quest(
    title: str,
    difficulty: Difficulty | str,
    *,
    description: str = "",
    attribute: Attribute | str = Attribute.STRENGTH,
    kind: QuestKind = QuestKind.NORMAL,
    due_date: datetime | None = None,
) -> Quest:
    """
    Factory function to create an active quest.

    Args:
        title: Display title
        difficulty: Quest rank (E-S); sets the XP reward
        description: Quest description or flavor text
        attribute: Attribute credited on completion
        kind: NORMAL for player quests, DAILY for system quests
        due_date: Optional deadline for the on-time bonus

    Returns:
        A new Quest instance
    """
    rank = parse_difficulty(difficulty)
    return Quest(
        title=title,
        description=description,
        difficulty=rank,
        xp_reward=XP_REWARDS[rank],
        attribute=parse_attribute(attribute),
        kind=kind,
        due_date=due_date,
    )
