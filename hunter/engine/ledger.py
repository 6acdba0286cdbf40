"""
Attribute Ledger.

Applies an XP award tagged with one attribute to a character snapshot,
rolling over as many levels as the award completes. Each completed level
awards exactly STAT_POINTS_PER_LEVEL stat points, split across attributes
in proportion to the XP each one contributed to that level.

Distribution per completed level:
- percent = contribution / total_level_xp * 100
- points = floor(percent / 17)
- any shortfall to 5 goes one point at a time to the largest
  `percent % 17` remainders; ties keep attribute order.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from pydantic import BaseModel, Field

from hunter.engine.progression import xp_required_for_level
from hunter.errors import ValidationError
from hunter.models.character import ATTRIBUTE_ORDER, Attribute, Character, parse_attribute

STAT_POINTS_PER_LEVEL = 5
PERCENT_PER_STAT_POINT = 17


class LedgerResult(BaseModel):
    """Outcome of applying XP to a character snapshot."""

    new_level: int
    new_current_xp: int
    new_attribute_xp: dict[Attribute, int]
    leveled_up: bool = False
    levels_gained: int = 0
    stat_point_changes: dict[Attribute, int] = Field(
        default_factory=lambda: {a: 0 for a in ATTRIBUTE_ORDER}
    )
    """Stat points per attribute, summed over every level gained."""

    levels_reached: list[int] = Field(default_factory=list)


def distribute_stat_points(contributions: Mapping[Attribute, int]) -> dict[Attribute, int]:
    """
    Split one level's stat points by each attribute's share of the level XP.

    Args:
        contributions: XP each attribute put into the completed level

    Returns:
        Points per attribute; always sums to STAT_POINTS_PER_LEVEL
    """
    total_level_xp = sum(contributions.get(a, 0) for a in ATTRIBUTE_ORDER)
    points = {a: 0 for a in ATTRIBUTE_ORDER}
    if total_level_xp <= 0:
        return points

    remainders: list[tuple[Attribute, float]] = []
    for attribute in ATTRIBUTE_ORDER:
        percent = contributions.get(attribute, 0) / total_level_xp * 100
        points[attribute] = math.floor(percent / PERCENT_PER_STAT_POINT)
        remainders.append((attribute, percent % PERCENT_PER_STAT_POINT))

    shortfall = STAT_POINTS_PER_LEVEL - sum(points.values())
    if shortfall > 0:
        # sorted() is stable, so equal remainders stay in attribute order
        ranked = sorted(remainders, key=lambda entry: entry[1], reverse=True)
        for i in range(shortfall):
            attribute, _ = ranked[i % len(ranked)]
            points[attribute] += 1

    return points


def add_xp(
    level: int,
    current_xp: int,
    attribute_xp: Mapping[Attribute, int],
    amount: int,
    attribute: Attribute | str,
) -> LedgerResult:
    """
    Apply `amount` XP credited to `attribute`.

    Args:
        level: Current level
        current_xp: XP into the current level
        attribute_xp: Per-attribute XP within the current level
        amount: XP to add (non-negative)
        attribute: Attribute receiving the XP

    Returns:
        LedgerResult with the new level, XP counters and stat points
    """
    target = parse_attribute(attribute)
    if amount < 0:
        raise ValidationError(f"XP amount must be non-negative, got {amount}")
    if level < 1:
        raise ValidationError(f"Level must be at least 1, got {level}")
    if not 0 <= current_xp < xp_required_for_level(level):
        raise ValidationError(f"current_xp {current_xp} is outside level {level}'s bucket")

    counters = {a: attribute_xp.get(a, 0) for a in ATTRIBUTE_ORDER}
    stat_point_changes = {a: 0 for a in ATTRIBUTE_ORDER}
    levels_reached: list[int] = []

    # Target attribute's XP within the level currently being filled
    tracked = counters[target]
    remaining = amount

    while remaining > 0:
        space = xp_required_for_level(level) - current_xp

        if remaining < space:
            current_xp += remaining
            tracked += remaining
            remaining = 0
            break

        tracked += space
        contributions = dict(counters)
        contributions[target] = tracked

        for a, points in distribute_stat_points(contributions).items():
            stat_point_changes[a] += points

        remaining -= space
        level += 1
        current_xp = 0
        counters = {a: 0 for a in ATTRIBUTE_ORDER}
        tracked = 0
        levels_reached.append(level)

    counters[target] = tracked

    return LedgerResult(
        new_level=level,
        new_current_xp=current_xp,
        new_attribute_xp=counters,
        leveled_up=bool(levels_reached),
        levels_gained=len(levels_reached),
        stat_point_changes=stat_point_changes,
        levels_reached=levels_reached,
    )


def apply_xp_to_character(
    character: Character, amount: int, attribute: Attribute | str
) -> LedgerResult:
    """
    Run the ledger against a character and write the outcome back to it.

    Updates level, XP counters, lifetime XP and attributes in place.
    Each level gained also adds STAT_POINTS_PER_LEVEL unspent points
    for the player to allocate.
    """
    result = add_xp(
        character.level,
        character.current_xp,
        character.attribute_xp,
        amount,
        attribute,
    )
    character.level = result.new_level
    character.current_xp = result.new_current_xp
    character.attribute_xp = dict(result.new_attribute_xp)
    character.total_xp_earned += amount
    for a, points in result.stat_point_changes.items():
        character.attributes[a] = character.attributes.get(a, 0) + points
    character.unspent_stat_points += STAT_POINTS_PER_LEVEL * result.levels_gained
    return result
