"""
Tests for the progression engine: XP curve, ranks, quest XP and milestones.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from hunter.engine.progression import (
    QuestXPContext,
    calculate_quest_xp,
    level_for_total_xp,
    milestone_events,
    progress_percentage,
    rank_name,
    total_xp_for_level,
    xp_required_for_level,
)
from hunter.errors import ValidationError
from hunter.models import MilestoneType, create_quest
from hunter.models.character import utcnow

# =============================================================================
# XP Curve Tests
# =============================================================================


class TestXPCurve:
    """Tests for the level XP curve."""

    def test_level_one_bucket(self):
        """Level 1 needs exactly 100 XP."""
        assert xp_required_for_level(1) == 100

    def test_buckets_are_floored(self):
        """Buckets follow floor(100 * level^1.1)."""
        assert xp_required_for_level(2) == 214
        assert xp_required_for_level(10) == 1258

    def test_buckets_grow(self):
        for level in range(1, 100):
            assert xp_required_for_level(level + 1) > xp_required_for_level(level)

    def test_total_xp_for_level(self):
        assert total_xp_for_level(0) == 0
        assert total_xp_for_level(1) == 0
        assert total_xp_for_level(2) == 100
        assert total_xp_for_level(3) == 314

    def test_level_for_total_xp(self):
        """The bucket search inverts total_xp_for_level."""
        assert level_for_total_xp(0) == (1, 0)
        assert level_for_total_xp(99) == (1, 99)
        assert level_for_total_xp(100) == (2, 0)
        assert level_for_total_xp(313) == (2, 213)
        assert level_for_total_xp(314) == (3, 0)

    def test_level_for_total_xp_round_trips(self):
        for level in (1, 5, 20, 60):
            assert level_for_total_xp(total_xp_for_level(level)) == (level, 0)

    def test_level_for_total_xp_rejects_negative(self):
        with pytest.raises(ValueError):
            level_for_total_xp(-1)

    def test_progress_percentage(self):
        assert progress_percentage(0, 1) == 0
        assert progress_percentage(50, 1) == 50
        assert progress_percentage(99, 1) == 99
        assert progress_percentage(107, 2) == 50

    def test_progress_percentage_caps_at_100(self):
        assert progress_percentage(500, 1) == 100


# =============================================================================
# Rank Tests
# =============================================================================


class TestRankName:
    """Tests for hunter rank names."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (1, "E-Rank Hunter"),
            (4, "E-Rank Hunter"),
            (5, "D-Rank Hunter"),
            (10, "C-Rank Hunter"),
            (19, "C-Rank Hunter"),
            (20, "B-Rank Hunter"),
            (35, "A-Rank Hunter"),
            (50, "S-Rank Hunter"),
            (75, "National Level Hunter"),
            (100, "Shadow Monarch"),
            (250, "Shadow Monarch"),
        ],
    )
    def test_rank_thresholds(self, level, expected):
        assert rank_name(level) == expected

    def test_below_first_threshold_defaults(self):
        assert rank_name(0) == "E-Rank Hunter"


# =============================================================================
# Quest XP Tests
# =============================================================================


class TestCalculateQuestXP:
    """Tests for quest XP modifiers."""

    @pytest.mark.parametrize(
        ("difficulty", "xp"),
        [("E", 50), ("D", 100), ("C", 200), ("B", 400), ("A", 800), ("S", 1600)],
    )
    def test_base_xp_by_difficulty(self, difficulty, xp):
        quest = create_quest("Task", difficulty)
        assert calculate_quest_xp(quest) == xp

    def test_on_time_bonus(self):
        """Quests with a due date completed on time get x1.2."""
        quest = create_quest("Report", "C", due_date=utcnow() + timedelta(days=1))
        xp = calculate_quest_xp(quest, QuestXPContext(completed_on_time=True))
        assert xp == 240

    def test_no_bonus_without_due_date(self):
        quest = create_quest("Report", "C")
        assert calculate_quest_xp(quest, QuestXPContext(completed_on_time=True)) == 200

    def test_no_bonus_when_late(self):
        quest = create_quest("Report", "C", due_date=utcnow() - timedelta(days=1))
        assert calculate_quest_xp(quest, QuestXPContext(completed_on_time=False)) == 200

    def test_anti_grind_threshold(self):
        """Up to 10 recent E-rank completions carry no penalty."""
        quest = create_quest("Dishes", "E")
        xp = calculate_quest_xp(quest, QuestXPContext(recent_easy_completions=10))
        assert xp == 50

    def test_anti_grind_first_step(self):
        """11 recent E-rank completions: 50 * 0.95 floors to 47."""
        quest = create_quest("Dishes", "E")
        xp = calculate_quest_xp(quest, QuestXPContext(recent_easy_completions=11))
        assert xp == 47

    def test_anti_grind_caps_at_half(self):
        quest = create_quest("Dishes", "E")
        assert calculate_quest_xp(quest, QuestXPContext(recent_easy_completions=20)) == 25
        assert calculate_quest_xp(quest, QuestXPContext(recent_easy_completions=500)) == 25

    def test_anti_grind_only_affects_e_rank(self):
        quest = create_quest("Gym", "D")
        assert calculate_quest_xp(quest, QuestXPContext(recent_easy_completions=30)) == 100

    def test_modifiers_compose(self):
        """On-time bonus and anti-grind multiply before flooring."""
        quest = create_quest("Dishes", "E", due_date=utcnow() + timedelta(hours=1))
        context = QuestXPContext(completed_on_time=True, recent_easy_completions=20)
        # 50 * 1.2 * 0.5
        assert calculate_quest_xp(quest, context) == 30

    def test_invalid_difficulty_rejected(self):
        with pytest.raises(ValidationError, match="Invalid difficulty level"):
            create_quest("Task", "Z")


# =============================================================================
# Milestone Tests
# =============================================================================


class TestMilestoneEvents:
    """Tests for level milestone events."""

    def test_no_events_without_level_change(self):
        assert milestone_events(3, 3) == []

    def test_plain_level_has_no_events(self):
        assert milestone_events(1, 2) == []

    def test_fifth_level_guaranteed_rare_and_rank(self):
        events = milestone_events(4, 5)
        assert [e.event_type for e in events] == [
            MilestoneType.GUARANTEED_RARE,
            MilestoneType.RANK_UP,
        ]
        assert events[0].message == "Level 5 Milestone! Guaranteed Rare+ Item"
        assert events[1].rank == "D-Rank Hunter"
        assert events[1].message == "Rank Up! You are now a D-Rank Hunter!"

    def test_tenth_level_legendary_choice(self):
        events = milestone_events(9, 10)
        assert events[0].event_type == MilestoneType.LEGENDARY_CHOICE
        assert events[0].message == "Level 10 Milestone! Choose 1 of 3 Legendary Items"
        assert events[1].event_type == MilestoneType.RANK_UP

    def test_fifteenth_level_no_rank(self):
        events = milestone_events(14, 15)
        assert [e.event_type for e in events] == [MilestoneType.GUARANTEED_RARE]

    def test_multi_level_jump_emits_every_level(self):
        """Every level passed counts, not only the final one."""
        events = milestone_events(3, 11)
        levels = [(e.level, e.event_type) for e in events]
        assert levels == [
            (5, MilestoneType.GUARANTEED_RARE),
            (5, MilestoneType.RANK_UP),
            (10, MilestoneType.LEGENDARY_CHOICE),
            (10, MilestoneType.RANK_UP),
        ]

    def test_rank_only_threshold(self):
        """Level 35 is a rank threshold and a multiple of 5."""
        events = milestone_events(34, 35)
        assert [e.event_type for e in events] == [
            MilestoneType.GUARANTEED_RARE,
            MilestoneType.RANK_UP,
        ]
