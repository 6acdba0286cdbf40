"""
Character model for the Hunter System.

The character is the single progression subject: level, XP toward the
next level, five attributes and the per-attribute XP that feeds stat-point
distribution on level-up.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from hunter.errors import ValidationError


class Attribute(str, Enum):
    """The five character attributes, in tie-break order."""

    STRENGTH = "strength"
    CREATION = "creation"
    NETWORK = "network"
    VITALITY = "vitality"
    INTELLIGENCE = "intelligence"


ATTRIBUTE_ORDER: tuple[Attribute, ...] = tuple(Attribute)

SEED_ATTRIBUTE_VALUE = 10
MIN_ATTRIBUTE_VALUE = 1
DEFAULT_CHARACTER_ID = 1


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_attribute(value: Attribute | str) -> Attribute:
    """Convert a string to an Attribute, raising ValidationError if unknown."""
    try:
        return Attribute(value)
    except ValueError:
        raise ValidationError(f"Unknown attribute: {value}") from None


def seed_attributes(value: int = SEED_ATTRIBUTE_VALUE) -> dict[Attribute, int]:
    """A full attribute map with every attribute set to the same value."""
    return {attribute: value for attribute in ATTRIBUTE_ORDER}


class Character(BaseModel):
    """
    The player's hunter.

    Invariants:
    - current_xp < xp_required_for_level(level)
    - sum(attribute_xp.values()) == current_xp
    """

    id: int = DEFAULT_CHARACTER_ID
    level: int = Field(default=1, ge=1)
    current_xp: int = Field(default=0, ge=0)
    """XP accumulated toward the next level."""

    total_xp_earned: int = Field(default=0, ge=0)
    """Lifetime XP counter."""

    attributes: dict[Attribute, int] = Field(default_factory=seed_attributes)
    attribute_xp: dict[Attribute, int] = Field(default_factory=lambda: seed_attributes(0))
    """XP credited to each attribute within the level currently being filled."""

    unspent_stat_points: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _fill_missing_attributes(self) -> Character:
        for attribute in ATTRIBUTE_ORDER:
            self.attributes.setdefault(attribute, SEED_ATTRIBUTE_VALUE)
            self.attribute_xp.setdefault(attribute, 0)
        return self

    def apply_daily_penalty(self) -> None:
        """Decrease every attribute by one, never below the minimum."""
        for attribute in ATTRIBUTE_ORDER:
            self.attributes[attribute] = max(
                MIN_ATTRIBUTE_VALUE, self.attributes[attribute] - 1
            )


def create_character(character_id: int = DEFAULT_CHARACTER_ID) -> Character:
    """Create a character with seed values (level 1, all attributes 10)."""
    return Character(id=character_id)
