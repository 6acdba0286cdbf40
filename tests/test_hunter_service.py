"""
Tests for the hunter service: quest completion, experience, stats,
quest management, inventory and profile.
"""

from __future__ import annotations

import random
import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from hunter.content import QUEST_FLAVOR
from hunter.db import LAST_DAILY_RESET_KEY, InMemoryHunterRepository
from hunter.engine import RewardGenerator, total_xp_for_level
from hunter.errors import InvalidStateError, NotFoundError, StoreFailure, ValidationError
from hunter.models import (
    ATTRIBUTE_ORDER,
    Attribute,
    Difficulty,
    Item,
    ItemType,
    MilestoneType,
    QuestKind,
    QuestStatus,
    Rarity,
    create_quest,
)
from hunter.services.flavor import FlavorService, MockFlavorProvider
from hunter.services.hunter import HunterService

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    """In-memory repository with the default character."""
    return InMemoryHunterRepository()


@pytest.fixture
def service(repo):
    """Hunter service with seeded rewards and a fixed clock."""
    return HunterService(
        repository=repo,
        rewards=RewardGenerator(rng=random.Random(0)),
        flavor=FlavorService(provider=MockFlavorProvider(default="The System watches.")),
        clock=lambda: NOW,
    )


def _add(repo, title="Task", difficulty="C", **kwargs):
    quest = create_quest(title, difficulty, **kwargs)
    repo.save_quest(quest)
    return quest


# =============================================================================
# Quest Completion
# =============================================================================


class TestCompleteQuest:
    """Tests for completing quests."""

    def test_awards_xp_and_levels_up(self, service, repo):
        quest = _add(repo, difficulty="C", attribute="strength")

        result = service.complete_quest(quest.id)

        assert result.xp_gained == 200
        assert result.leveled_up
        assert result.old_level == 1
        assert result.new_level == 2
        assert result.levels_gained == 1
        assert result.stat_point_changes[Attribute.STRENGTH] == 5

        character = repo.get_character()
        assert character.level == 2
        assert character.current_xp == 100
        assert character.attribute_xp[Attribute.STRENGTH] == 100
        assert character.total_xp_earned == 200
        assert character.attributes[Attribute.STRENGTH] == 15

    def test_level_ups_award_unspent_points(self, service, repo):
        """Every level gained adds 5 points the player can allocate."""
        quest = _add(repo, difficulty="S")

        result = service.complete_quest(quest.id)

        assert result.levels_gained >= 2
        assert result.character.unspent_stat_points == 5 * result.levels_gained
        assert repo.get_character().unspent_stat_points == 5 * result.levels_gained

        character = service.allocate_stats({"network": 5})
        assert character.unspent_stat_points == 5 * (result.levels_gained - 1)

    def test_marks_quest_completed(self, service, repo):
        quest = _add(repo)
        result = service.complete_quest(quest.id)

        stored = repo.get_quest(quest.id)
        assert stored.status == QuestStatus.COMPLETED
        assert stored.completed_at == NOW
        assert result.quest.status == QuestStatus.COMPLETED

    def test_second_completion_is_invalid_state(self, service, repo):
        quest = _add(repo)
        service.complete_quest(quest.id)
        before = repo.get_character()

        with pytest.raises(InvalidStateError):
            service.complete_quest(quest.id)

        assert repo.get_character().total_xp_earned == before.total_xp_earned

    def test_failed_quest_cannot_be_completed(self, service, repo):
        quest = _add(repo)
        service.fail_quest(quest.id)
        with pytest.raises(InvalidStateError):
            service.complete_quest(quest.id)

    def test_missing_quest(self, service):
        with pytest.raises(NotFoundError):
            service.complete_quest(uuid4())

    def test_on_time_bonus(self, service, repo):
        quest = _add(repo, difficulty="C", due_date=NOW + timedelta(hours=2))
        assert service.complete_quest(quest.id).xp_gained == 240

    def test_late_completion_has_no_bonus(self, service, repo):
        quest = _add(repo, difficulty="C", due_date=NOW - timedelta(hours=2))
        assert service.complete_quest(quest.id).xp_gained == 200

    def test_anti_grind_after_eleven_recent_easy(self, service, repo):
        """11 E-rank completions in the last 24h: the next one gives 47."""
        for i in range(11):
            quest = _add(repo, title=f"Chore {i}", difficulty="E")
            quest.complete(NOW - timedelta(hours=1))
            repo.save_quest(quest)

        quest = _add(repo, title="One more chore", difficulty="E")
        assert service.complete_quest(quest.id).xp_gained == 47

    def test_anti_grind_ignores_old_completions(self, service, repo):
        for i in range(11):
            quest = _add(repo, title=f"Chore {i}", difficulty="E")
            quest.complete(NOW - timedelta(days=2))
            repo.save_quest(quest)

        quest = _add(repo, title="One more chore", difficulty="E")
        assert service.complete_quest(quest.id).xp_gained == 50

    def test_a_rank_always_drops_an_item(self, service, repo):
        quest = _add(repo, difficulty="A")
        result = service.complete_quest(quest.id)

        assert len(result.rewards.items) >= 1
        stored = {i.id for i in repo.list_items()}
        assert {i.id for i in result.rewards.items} == stored

    def test_milestone_level_gives_rare_item_and_rank_up(self, service, repo):
        service.set_progress(total_xp=total_xp_for_level(5) - 10)
        quest = _add(repo, difficulty="E")

        result = service.complete_quest(quest.id)

        assert result.new_level == 5
        assert result.rank == "D-Rank Hunter"
        types = [e.event_type for e in result.rewards.special]
        assert types == [MilestoneType.GUARANTEED_RARE, MilestoneType.RANK_UP]
        assert any(i.rarity != Rarity.COMMON for i in result.rewards.items)

    def test_concurrent_double_completion_awards_once(self, service, repo):
        quest = _add(repo, difficulty="B")
        outcomes: list[str] = []
        barrier = threading.Barrier(2)

        def attempt():
            barrier.wait()
            try:
                service.complete_quest(quest.id)
                outcomes.append("ok")
            except InvalidStateError:
                outcomes.append("invalid")

        threads = [threading.Thread(target=attempt) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["invalid", "ok"]
        assert repo.get_character().total_xp_earned == 400


class BrokenItemStore(InMemoryHunterRepository):
    """Fails every item insert."""

    def create_item(self, item) -> None:
        raise RuntimeError("connection lost")


class TestCompletionRollback:
    """A store failure leaves quest, character and inventory untouched."""

    def test_store_failure_rolls_back(self):
        repo = BrokenItemStore()
        service = HunterService(repository=repo, rewards=RewardGenerator(rng=random.Random(1)))
        quest = _add(repo, difficulty="S")

        with pytest.raises(StoreFailure):
            service.complete_quest(quest.id)

        assert repo.get_quest(quest.id).status == QuestStatus.ACTIVE
        character = repo.get_character()
        assert character.level == 1
        assert character.total_xp_earned == 0
        assert repo.list_items() == []


# =============================================================================
# Experience and Stats
# =============================================================================


class TestAddExperience:
    def test_returns_ledger_result(self, service, repo):
        result = service.add_experience(1, 50, "vitality")
        assert result.new_current_xp == 50
        assert repo.get_character().attribute_xp[Attribute.VITALITY] == 50

    def test_unknown_character(self, service):
        with pytest.raises(NotFoundError):
            service.add_experience(2, 50, "vitality")

    def test_negative_amount(self, service):
        with pytest.raises(ValidationError):
            service.add_experience(1, -5, "vitality")

    def test_unknown_attribute(self, service):
        with pytest.raises(ValidationError):
            service.add_experience(1, 5, "charisma")


class TestAllocateStats:
    def test_spends_points(self, service, repo):
        service.set_progress(unspent_stat_points=5)

        character = service.allocate_stats({"strength": 3, Attribute.VITALITY: 1})

        assert character.attributes[Attribute.STRENGTH] == 13
        assert character.attributes[Attribute.VITALITY] == 11
        assert character.unspent_stat_points == 1
        assert repo.get_character().unspent_stat_points == 1

    def test_insufficient_points(self, service, repo):
        service.set_progress(unspent_stat_points=2)
        with pytest.raises(ValidationError, match="Not enough stat points"):
            service.allocate_stats({"strength": 3})
        assert repo.get_character().attributes[Attribute.STRENGTH] == 10

    def test_zero_total_rejected(self, service):
        with pytest.raises(ValidationError):
            service.allocate_stats({"strength": 0})

    def test_negative_rejected(self, service):
        service.set_progress(unspent_stat_points=5)
        with pytest.raises(ValidationError):
            service.allocate_stats({"strength": 3, "network": -1})

    def test_unknown_attribute(self, service):
        service.set_progress(unspent_stat_points=5)
        with pytest.raises(ValidationError):
            service.allocate_stats({"luck": 1})


# =============================================================================
# Quest Management
# =============================================================================


class TestCreateQuest:
    @pytest.mark.asyncio
    async def test_blank_description_gets_flavor(self, service, repo):
        quest = await service.create_quest("Run 5k", "B", attribute="vitality")

        assert quest.description == "The System watches."
        assert quest.xp_reward == 400
        assert quest.attribute == Attribute.VITALITY
        assert quest.kind == QuestKind.NORMAL
        assert repo.get_quest(quest.id) is not None

    @pytest.mark.asyncio
    async def test_given_description_kept(self, service):
        quest = await service.create_quest("Run 5k", "B", description="Along the river")
        assert quest.description == "Along the river"

    @pytest.mark.asyncio
    async def test_flavor_failure_falls_back_to_template(self, repo):
        provider = MockFlavorProvider(error=ConnectionError("refused"))
        service = HunterService(repository=repo, flavor=FlavorService(provider=provider))

        quest = await service.create_quest("Run 5k", "D")

        assert quest.description in QUEST_FLAVOR[Difficulty.D]

    @pytest.mark.asyncio
    async def test_invalid_difficulty(self, service):
        with pytest.raises(ValidationError, match="Invalid difficulty level"):
            await service.create_quest("Run", "X")

    @pytest.mark.asyncio
    async def test_blank_title(self, service):
        with pytest.raises(ValidationError):
            await service.create_quest("   ", "E")


class TestUpdateQuest:
    def test_difficulty_change_resets_reward(self, service, repo):
        quest = _add(repo, difficulty="E")
        updated = service.update_quest(quest.id, difficulty="A", title="Bigger task")

        assert updated.difficulty == Difficulty.A
        assert updated.xp_reward == 800
        assert repo.get_quest(quest.id).title == "Bigger task"

    def test_empty_update_rejected(self, service, repo):
        quest = _add(repo)
        with pytest.raises(ValidationError):
            service.update_quest(quest.id)

    def test_set_and_clear_due_date(self, service, repo):
        quest = _add(repo, due_date=NOW + timedelta(days=3))

        moved = service.update_quest(quest.id, due_date=NOW + timedelta(days=7))
        assert moved.due_date == NOW + timedelta(days=7)

        cleared = service.update_quest(quest.id, clear_due_date=True)
        assert cleared.due_date is None
        assert repo.get_quest(quest.id).due_date is None
        assert repo.get_quest(quest.id).title == "Task"

    def test_set_and_clear_due_date_together_rejected(self, service, repo):
        quest = _add(repo, due_date=NOW)
        with pytest.raises(ValidationError, match="both set and clear"):
            service.update_quest(quest.id, due_date=NOW + timedelta(days=1), clear_due_date=True)
        assert repo.get_quest(quest.id).due_date == NOW

    def test_completed_quest_cannot_be_edited(self, service, repo):
        quest = _add(repo)
        service.complete_quest(quest.id)
        with pytest.raises(InvalidStateError):
            service.update_quest(quest.id, title="Changed")

    def test_daily_quest_cannot_be_edited(self, service, repo):
        quest = _add(repo, difficulty="E", kind=QuestKind.DAILY)
        with pytest.raises(InvalidStateError):
            service.update_quest(quest.id, title="Changed")


class TestDeleteAndFail:
    def test_delete_normal_quest(self, service, repo):
        quest = _add(repo)
        service.delete_quest(quest.id)
        assert repo.get_quest(quest.id) is None

    def test_delete_daily_quest_refused(self, service, repo):
        quest = _add(repo, difficulty="E", kind=QuestKind.DAILY)
        with pytest.raises(InvalidStateError):
            service.delete_quest(quest.id)
        assert repo.get_quest(quest.id) is not None

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_quest(uuid4())

    def test_fail_quest(self, service, repo):
        quest = _add(repo)
        failed = service.fail_quest(quest.id)
        assert failed.status == QuestStatus.FAILED
        with pytest.raises(InvalidStateError):
            service.fail_quest(quest.id)

    def test_list_quests_filters(self, service, repo):
        a = _add(repo, title="A", difficulty="E")
        _add(repo, title="B", difficulty="C")
        service.complete_quest(a.id)

        assert [q.title for q in service.list_quests(status="completed")] == ["A"]
        assert [q.title for q in service.list_quests(difficulty="C")] == ["B"]
        with pytest.raises(ValidationError):
            service.list_quests(status="paused")


# =============================================================================
# Inventory
# =============================================================================


def _stock(repo):
    base = NOW - timedelta(days=3)
    items = [
        Item(name="Zweihander", rarity=Rarity.RARE, item_type=ItemType.WEAPON, obtained_at=base),
        Item(name="Amulet", rarity=Rarity.MYTHIC, item_type=ItemType.ACCESSORY, obtained_at=base + timedelta(days=1)),
        Item(name="Potion", rarity=Rarity.COMMON, item_type=ItemType.CONSUMABLE, obtained_at=base + timedelta(days=2)),
    ]
    for item in items:
        repo.create_item(item)
    return items


class TestInventory:
    def test_sorting(self, service, repo):
        _stock(repo)
        assert [i.name for i in service.list_items()] == ["Potion", "Amulet", "Zweihander"]
        assert [i.name for i in service.list_items(sort_by="oldest")] == ["Zweihander", "Amulet", "Potion"]
        assert [i.name for i in service.list_items(sort_by="name")] == ["Amulet", "Potion", "Zweihander"]
        assert [i.name for i in service.list_items(sort_by="rarity")] == ["Amulet", "Zweihander", "Potion"]

    def test_filters(self, service, repo):
        _stock(repo)
        assert [i.name for i in service.list_items(rarity="mythic")] == ["Amulet"]
        assert [i.name for i in service.list_items(item_type="weapon")] == ["Zweihander"]

    def test_bad_sort_or_filter(self, service):
        with pytest.raises(ValidationError):
            service.list_items(sort_by="weight")
        with pytest.raises(ValidationError):
            service.list_items(rarity="shiny")

    def test_discard(self, service, repo):
        items = _stock(repo)
        service.discard_item(items[0].id)
        assert repo.get_item(items[0].id) is None
        with pytest.raises(NotFoundError):
            service.discard_item(items[0].id)

    def test_get_item(self, service, repo):
        items = _stock(repo)
        assert service.get_item(items[1].id).name == "Amulet"
        with pytest.raises(NotFoundError):
            service.get_item(uuid4())

    def test_summary(self, service, repo):
        _stock(repo)
        summary = service.item_summary()
        assert summary.total == 3
        assert summary.by_rarity[Rarity.MYTHIC] == 1
        assert summary.by_rarity[Rarity.EPIC] == 0
        assert summary.by_type[ItemType.WEAPON] == 1


# =============================================================================
# Profile, Achievements, Maintenance
# =============================================================================


class TestProfile:
    def test_profile(self, service, repo):
        service.set_progress(total_xp=150)
        _add(repo)

        profile = service.get_profile()

        assert profile.level == 2
        assert profile.current_xp == 50
        assert profile.xp_for_next_level == 214
        assert profile.progress_percentage == 23
        assert profile.rank == "E-Rank Hunter"
        assert profile.quest_counts[QuestStatus.ACTIVE] == 1
        assert profile.item_count == 0

    def test_achievements(self, service, repo):
        quest = _add(repo, difficulty="E")
        service.complete_quest(quest.id)

        achievements = {a.id: a for a in service.get_achievements()}

        assert len(achievements) == 6
        assert achievements["first_quest"].unlocked
        assert achievements["quest_master"].progress == 1
        assert not achievements["quest_master"].unlocked
        assert achievements["level_10"].max == 10


class TestMaintenance:
    def test_reset_progress(self, service, repo):
        quest = _add(repo, difficulty="S")
        service.complete_quest(quest.id)
        _add(repo, difficulty="E", kind=QuestKind.DAILY)
        repo.set_config(LAST_DAILY_RESET_KEY, "2026-05-01")

        character = service.reset_progress()

        assert character.level == 1
        assert character.total_xp_earned == 0
        assert character.attributes == {a: 10 for a in ATTRIBUTE_ORDER}
        assert repo.list_quests() == []
        assert repo.list_items() == []
        assert repo.get_config(LAST_DAILY_RESET_KEY) is None

    def test_set_progress_spreads_current_xp(self, service, repo):
        character = service.set_progress(total_xp=total_xp_for_level(3) + 7)

        assert character.level == 3
        assert character.current_xp == 7
        assert character.total_xp_earned == 321
        assert list(character.attribute_xp.values()) == [2, 2, 1, 1, 1]
        assert sum(repo.get_character().attribute_xp.values()) == 7

    def test_set_progress_attributes_and_points(self, service):
        character = service.set_progress(attributes={"network": 25}, unspent_stat_points=4)
        assert character.attributes[Attribute.NETWORK] == 25
        assert character.unspent_stat_points == 4

    def test_set_progress_validation(self, service):
        with pytest.raises(ValidationError):
            service.set_progress(total_xp=-1)
        with pytest.raises(ValidationError):
            service.set_progress(attributes={"strength": 0})
        with pytest.raises(ValidationError):
            service.set_progress(unspent_stat_points=-3)
