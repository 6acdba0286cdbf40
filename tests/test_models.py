"""
Tests for the Hunter System data models.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from hunter.errors import InvalidStateError, ValidationError
from hunter.models import (
    ATTRIBUTE_ORDER,
    Attribute,
    Character,
    Difficulty,
    Item,
    ItemType,
    Quest,
    QuestFilter,
    QuestKind,
    QuestStatus,
    Rarity,
    create_character,
    create_item,
    create_quest,
    parse_attribute,
    parse_item_type,
    parse_rarity,
)


class TestCharacter:
    """Tests for Character model."""

    def test_seed_values(self):
        character = create_character()
        assert character.id == 1
        assert character.level == 1
        assert character.current_xp == 0
        assert character.unspent_stat_points == 0
        assert all(character.attributes[a] == 10 for a in ATTRIBUTE_ORDER)
        assert sum(character.attribute_xp.values()) == 0

    def test_missing_attributes_filled(self):
        character = Character(attributes={Attribute.STRENGTH: 14})
        assert character.attributes[Attribute.STRENGTH] == 14
        assert character.attributes[Attribute.VITALITY] == 10
        assert set(character.attribute_xp) == set(ATTRIBUTE_ORDER)

    def test_level_must_be_positive(self):
        with pytest.raises(ValueError):
            Character(level=0)

    def test_daily_penalty_floors_at_one(self):
        character = create_character()
        character.attributes[Attribute.NETWORK] = 1
        character.apply_daily_penalty()

        assert character.attributes[Attribute.NETWORK] == 1
        assert character.attributes[Attribute.STRENGTH] == 9

    def test_parse_attribute(self):
        assert parse_attribute("intelligence") == Attribute.INTELLIGENCE
        with pytest.raises(ValidationError, match="Unknown attribute"):
            parse_attribute("charisma")


class TestQuest:
    """Tests for Quest model."""

    def test_create_quest(self):
        quest = create_quest("Read a chapter", "D", attribute="intelligence")

        assert quest.difficulty == Difficulty.D
        assert quest.xp_reward == 100
        assert quest.attribute == Attribute.INTELLIGENCE
        assert quest.status == QuestStatus.ACTIVE
        assert quest.kind == QuestKind.NORMAL
        assert quest.created_at.tzinfo is not None

    def test_blank_title_rejected(self):
        with pytest.raises(ValueError):
            create_quest("", "E")

    def test_complete(self):
        quest = create_quest("Task", "E")
        when = datetime(2026, 1, 2, 3, 4, tzinfo=timezone.utc)
        quest.complete(when)

        assert quest.status == QuestStatus.COMPLETED
        assert quest.completed_at == when
        assert not quest.is_active

    def test_terminal_states_are_final(self):
        quest = create_quest("Task", "E")
        quest.fail()
        assert quest.status == QuestStatus.FAILED

        with pytest.raises(InvalidStateError):
            quest.complete()
        with pytest.raises(InvalidStateError):
            quest.fail()

    def test_naive_datetimes_are_utc(self):
        quest = Quest(
            title="Task",
            difficulty=Difficulty.C,
            xp_reward=200,
            due_date=datetime(2026, 6, 1, 12, 0),
        )
        assert quest.due_date.tzinfo == timezone.utc
        assert quest.due_date.hour == 12


class TestQuestFilter:
    """Tests for QuestFilter matching."""

    def test_empty_filter_matches_all(self):
        assert QuestFilter().matches(create_quest("Task", "S"))

    def test_each_criterion(self):
        quest = create_quest("Task", "E", kind=QuestKind.DAILY)

        assert QuestFilter(kind=QuestKind.DAILY).matches(quest)
        assert not QuestFilter(kind=QuestKind.NORMAL).matches(quest)
        assert QuestFilter(status=QuestStatus.ACTIVE).matches(quest)
        assert not QuestFilter(difficulty=Difficulty.S).matches(quest)

    def test_completed_after(self):
        quest = create_quest("Task", "E")
        cutoff = datetime(2026, 1, 1, tzinfo=timezone.utc)

        assert not QuestFilter(completed_after=cutoff).matches(quest)
        quest.complete(cutoff + timedelta(minutes=1))
        assert QuestFilter(completed_after=cutoff).matches(quest)
        assert not QuestFilter(completed_after=cutoff + timedelta(minutes=1)).matches(quest)


class TestItem:
    """Tests for Item model."""

    def test_create_item(self):
        item = create_item("Iron Sword", "common", "weapon", description="Plain.")
        assert item.rarity == Rarity.COMMON
        assert item.item_type == ItemType.WEAPON
        assert item.obtained_at.tzinfo is not None

    def test_items_are_immutable(self):
        item = create_item("Iron Sword", "common", "weapon")
        with pytest.raises(ValueError):
            item.name = "Gold Sword"

    def test_unknown_enums(self):
        with pytest.raises(ValidationError, match="Unknown rarity"):
            parse_rarity("shiny")
        with pytest.raises(ValidationError, match="Unknown item type"):
            parse_item_type("shield")

    def test_item_equality_by_fields(self):
        item = create_item("Ring", "rare", "accessory")
        assert Item(**item.model_dump()).model_dump() == item.model_dump()
