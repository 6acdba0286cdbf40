"""
Item models for the Hunter System.

Items are loot records created by the reward generator. They are
immutable once obtained; the player can only discard them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from hunter.errors import ValidationError
from hunter.models.character import utcnow


class Rarity(str, Enum):
    """Loot rarity, lowest to highest."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


RARITY_ORDER: tuple[Rarity, ...] = tuple(Rarity)


class ItemType(str, Enum):
    """Kinds of loot."""

    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"
    CONSUMABLE = "consumable"


ITEM_TYPES: tuple[ItemType, ...] = tuple(ItemType)


def parse_rarity(value: Rarity | str) -> Rarity:
    """Convert a string to a Rarity, raising ValidationError if unknown."""
    try:
        return Rarity(value)
    except ValueError:
        raise ValidationError(f"Unknown rarity: {value}") from None


def parse_item_type(value: ItemType | str) -> ItemType:
    """Convert a string to an ItemType, raising ValidationError if unknown."""
    try:
        return ItemType(value)
    except ValueError:
        raise ValidationError(f"Unknown item type: {value}") from None


class Item(BaseModel):
    """A loot record in the player's inventory."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    rarity: Rarity
    item_type: ItemType
    obtained_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}


def create_item(
    name: str,
    rarity: Rarity | str,
    item_type: ItemType | str,
    *,
    description: str = "",
) -> Item:
    """Factory function to create an item with validated enums."""
    return Item(
        name=name,
        description=description,
        rarity=parse_rarity(rarity),
        item_type=parse_item_type(item_type),
    )
