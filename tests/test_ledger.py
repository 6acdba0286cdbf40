"""
Tests for the attribute ledger: multi-level XP and stat-point distribution.
"""

from __future__ import annotations

import random

import pytest

from hunter.engine.ledger import (
    STAT_POINTS_PER_LEVEL,
    add_xp,
    apply_xp_to_character,
    distribute_stat_points,
)
from hunter.engine.progression import total_xp_for_level, xp_required_for_level
from hunter.errors import ValidationError
from hunter.models import ATTRIBUTE_ORDER, Attribute, create_character

S = Attribute.STRENGTH
C = Attribute.CREATION
N = Attribute.NETWORK
V = Attribute.VITALITY
I = Attribute.INTELLIGENCE  # noqa: E741


def zeros() -> dict[Attribute, int]:
    return {a: 0 for a in ATTRIBUTE_ORDER}


# =============================================================================
# distribute_stat_points
# =============================================================================


class TestDistributeStatPoints:
    """Tests for splitting one level's points."""

    def test_single_attribute_gets_everything(self):
        points = distribute_stat_points({S: 100})
        assert points == {S: 5, C: 0, N: 0, V: 0, I: 0}

    def test_even_split_remainder_ties_go_in_attribute_order(self):
        """Five equal shares of 20%: floor(20/17)=1 each, no shortfall."""
        points = distribute_stat_points({a: 20 for a in ATTRIBUTE_ORDER})
        assert points == {a: 1 for a in ATTRIBUTE_ORDER}

    def test_half_and_half(self):
        """50/50: 2 each, the tied remainder goes to the earlier attribute."""
        points = distribute_stat_points({S: 50, I: 50})
        assert points == {S: 3, C: 0, N: 0, V: 0, I: 2}

    def test_tie_order_follows_enumeration_not_input_order(self):
        points = distribute_stat_points({I: 50, N: 50})
        assert points[N] == 3
        assert points[I] == 2

    def test_largest_remainder_wins(self):
        """
        60/40: 60% -> 3 (rem 9), 40% -> 2 (rem 6). Sum 5, no shortfall.
        70/30: 70% -> 4 (rem 2), 30% -> 1 (rem 13). Sum 5.
        """
        assert distribute_stat_points({S: 60, C: 40})[S] == 3
        points = distribute_stat_points({S: 70, C: 30})
        assert (points[S], points[C]) == (4, 1)

    def test_shortfall_prefers_bigger_remainder(self):
        """
        33/33/34: 33% -> 1 (rem 16), 34% -> 2 (rem 0). Sum 4, shortfall 1.
        S and C tie on remainder; S comes first.
        """
        points = distribute_stat_points({S: 33, C: 33, N: 34})
        assert sum(points.values()) == 5
        assert points == {S: 2, C: 1, N: 2, V: 0, I: 0}

    def test_empty_level_awards_nothing(self):
        assert distribute_stat_points({}) == zeros()

    def test_always_five_points(self):
        rng = random.Random(1234)
        for _ in range(500):
            contributions = {a: rng.randint(0, 300) for a in ATTRIBUTE_ORDER}
            if sum(contributions.values()) == 0:
                continue
            points = distribute_stat_points(contributions)
            assert sum(points.values()) == STAT_POINTS_PER_LEVEL
            assert all(p >= 0 for p in points.values())


# =============================================================================
# add_xp
# =============================================================================


class TestAddXP:
    """Tests for applying XP through the ledger."""

    def test_scenario_a_partial_fill(self):
        """50 strength XP at level 1 fills half the bucket."""
        result = add_xp(1, 0, zeros(), 50, S)

        assert result.new_level == 1
        assert result.new_current_xp == 50
        assert result.new_attribute_xp[S] == 50
        assert not result.leveled_up
        assert result.levels_gained == 0
        assert result.stat_point_changes == zeros()

    def test_scenario_b_level_up_split(self):
        """60 intelligence XP on top of 50 strength crosses into level 2."""
        first = add_xp(1, 0, zeros(), 50, S)
        result = add_xp(first.new_level, first.new_current_xp, first.new_attribute_xp, 60, I)

        assert result.new_level == 2
        assert result.new_current_xp == 10
        assert result.new_attribute_xp == {S: 0, C: 0, N: 0, V: 0, I: 10}
        assert result.leveled_up
        assert result.levels_gained == 1
        assert result.levels_reached == [2]
        assert result.stat_point_changes == {S: 3, C: 0, N: 0, V: 0, I: 2}

    def test_exact_fill_levels_up_with_zero_overflow(self):
        result = add_xp(1, 0, zeros(), 100, V)
        assert result.new_level == 2
        assert result.new_current_xp == 0
        assert result.new_attribute_xp == zeros()
        assert result.stat_point_changes[V] == 5

    def test_multi_level_award(self):
        """A big award rolls over several buckets; 5 points per level."""
        amount = total_xp_for_level(4) + 7  # 100 + 214 + 334 + 7
        result = add_xp(1, 0, zeros(), amount, C)

        assert result.new_level == 4
        assert result.new_current_xp == 7
        assert result.levels_gained == 3
        assert result.levels_reached == [2, 3, 4]
        assert result.stat_point_changes[C] == 15
        assert sum(result.stat_point_changes.values()) == 15
        assert result.new_attribute_xp == {S: 0, C: 7, N: 0, V: 0, I: 0}

    def test_other_attributes_only_count_in_first_level(self):
        """
        Non-target counters belong to the level being filled; after the
        first boundary they are zeroed and later levels are all target XP.
        """
        start = {S: 0, C: 0, N: 50, V: 0, I: 0}
        result = add_xp(1, 50, start, 50 + 214, S)

        # Level 1: N 50%, S 50% -> S 3, N 2 (S earlier in order)
        # Level 2: S 100% -> S 5
        assert result.new_level == 3
        assert result.stat_point_changes == {S: 8, C: 0, N: 2, V: 0, I: 0}
        assert result.new_attribute_xp == zeros()

    def test_zero_amount_is_noop(self):
        start = {S: 10, C: 5, N: 0, V: 0, I: 0}
        result = add_xp(1, 15, start, 0, S)
        assert result.new_level == 1
        assert result.new_current_xp == 15
        assert result.new_attribute_xp == start

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            add_xp(1, 0, zeros(), -1, S)

    def test_unknown_attribute_rejected(self):
        with pytest.raises(ValidationError):
            add_xp(1, 0, zeros(), 10, "agility")

    def test_attribute_by_name(self):
        result = add_xp(1, 0, zeros(), 30, "network")
        assert result.new_attribute_xp[N] == 30

    def test_corrupt_current_xp_rejected(self):
        with pytest.raises(ValidationError):
            add_xp(1, 100, zeros(), 10, S)

    def test_invariants_hold_over_random_awards(self):
        """sum(attribute_xp) == current_xp < bucket, and 5 points per level."""
        rng = random.Random(42)
        level, current, counters = 1, 0, zeros()

        for _ in range(300):
            attribute = rng.choice(ATTRIBUTE_ORDER)
            amount = rng.choice([0, 1, 50, 99, 200, 1600, 5000])
            result = add_xp(level, current, counters, amount, attribute)

            assert sum(result.new_attribute_xp.values()) == result.new_current_xp
            assert result.new_current_xp < xp_required_for_level(result.new_level)
            assert sum(result.stat_point_changes.values()) == 5 * result.levels_gained
            assert result.new_level == level + result.levels_gained

            level = result.new_level
            current = result.new_current_xp
            counters = result.new_attribute_xp


class TestApplyXPToCharacter:
    """Tests for writing ledger results back to a character."""

    def test_updates_character_in_place(self):
        character = create_character()
        apply_xp_to_character(character, 50, S)
        apply_xp_to_character(character, 60, I)

        assert character.level == 2
        assert character.current_xp == 10
        assert character.total_xp_earned == 110
        assert character.attributes[S] == 13
        assert character.attributes[I] == 12
        assert character.attributes[C] == 10
        assert character.unspent_stat_points == 5

    def test_multi_level_awards_unspent_points_per_level(self):
        character = create_character()
        character.unspent_stat_points = 2
        result = apply_xp_to_character(character, total_xp_for_level(4), V)

        assert result.levels_gained == 3
        assert character.unspent_stat_points == 2 + 15
        assert character.attributes[V] == 25
