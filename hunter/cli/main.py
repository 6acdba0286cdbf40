"""
Command line interface for the Hunter System.

Usage:
    hunter status
    hunter add "Read chapter 3" --difficulty C --attribute intelligence
    hunter complete 3f2a
    hunter scheduler

Quest and item IDs may be abbreviated to any unique prefix.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from hunter import __version__
from hunter.config import HunterConfig
from hunter.db import HunterRepository, create_repository
from hunter.engine import RewardGenerator
from hunter.errors import HunterError, ValidationError
from hunter.models import ATTRIBUTE_ORDER, RARITY_ORDER, Difficulty, ItemType, QuestKind, QuestStatus
from hunter.services import (
    DailyQuestService,
    DailyResetScheduler,
    HunterService,
    create_flavor_service,
)

logger = logging.getLogger(__name__)

# Commands that should not trigger the automatic daily check
NO_DAILY_CHECK = {"reset", "seed", "scheduler", "daily"}


@dataclass
class HunterApp:
    """Services wired to one repository."""

    repository: HunterRepository
    hunter: HunterService
    daily: DailyQuestService

    @classmethod
    def from_config(cls, config: HunterConfig) -> HunterApp:
        repository = create_repository(config)
        return cls(
            repository=repository,
            hunter=HunterService(
                repository=repository,
                rewards=RewardGenerator(),
                flavor=create_flavor_service(config),
            ),
            daily=DailyQuestService(repository=repository, tz=config.tz),
        )


# =============================================================================
# Helpers
# =============================================================================


def _resolve_id(text: str, candidates: list[UUID], label: str) -> UUID:
    """Accept a full UUID or a unique prefix of one of `candidates`."""
    try:
        return UUID(text)
    except ValueError:
        pass

    prefix = text.lower()
    matches = [c for c in candidates if str(c).startswith(prefix)]
    if not matches:
        raise ValidationError(f"No {label} matches '{text}'")
    if len(matches) > 1:
        raise ValidationError(f"'{text}' matches {len(matches)} {label}s; use a longer prefix")
    return matches[0]


def _parse_assignments(pairs: list[str]) -> dict[str, int]:
    """Parse name=value arguments."""
    result: dict[str, int] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            raise ValidationError(f"Expected name=value, got '{pair}'")
        try:
            result[name.strip().lower()] = int(value)
        except ValueError:
            raise ValidationError(f"Not a number: '{value}'") from None
    return result


def _short(uuid: UUID) -> str:
    return str(uuid)[:8]


# =============================================================================
# Commands
# =============================================================================


def cmd_status(app: HunterApp, args: argparse.Namespace) -> None:
    profile = app.hunter.get_profile()
    print(f"Level {profile.level} - {profile.rank}")
    print(
        f"XP: {profile.current_xp}/{profile.xp_for_next_level} "
        f"({profile.progress_percentage}%)  Total: {profile.total_xp_earned}"
    )
    for attribute in ATTRIBUTE_ORDER:
        print(f"  {attribute.value:<13}{profile.attributes[attribute]:>4}")
    if profile.unspent_stat_points:
        print(f"Unspent stat points: {profile.unspent_stat_points}")
    counts = ", ".join(f"{s.value} {n}" for s, n in profile.quest_counts.items())
    print(f"Quests: {counts}  Items: {profile.item_count}")


def cmd_quests(app: HunterApp, args: argparse.Namespace) -> None:
    quests = app.hunter.list_quests(status=args.status, difficulty=args.difficulty, kind=args.kind)
    if not quests:
        print("No quests.")
        return
    for quest in quests:
        marker = "*" if quest.kind == QuestKind.DAILY else " "
        due = f"  due {quest.due_date:%Y-%m-%d %H:%M}" if quest.due_date else ""
        print(
            f"{_short(quest.id)} {marker}[{quest.difficulty.value}] {quest.title} "
            f"({quest.attribute.value}, {quest.xp_reward} XP, {quest.status.value}){due}"
        )


def cmd_add(app: HunterApp, args: argparse.Namespace) -> None:
    due = None
    if args.due:
        try:
            due = datetime.fromisoformat(args.due)
        except ValueError:
            raise ValidationError(f"Invalid due date: '{args.due}'") from None
        # Naive input is local wall-clock time
        if due.tzinfo is None:
            due = due.replace(tzinfo=app.daily.tz) if app.daily.tz else due.astimezone()
    quest = asyncio.run(
        app.hunter.create_quest(
            args.title,
            args.difficulty,
            description=args.description or "",
            attribute=args.attribute,
            due_date=due,
        )
    )
    print(f"Created {_short(quest.id)} [{quest.difficulty.value}] {quest.title} ({quest.xp_reward} XP)")
    print(f"  {quest.description}")


def cmd_complete(app: HunterApp, args: argparse.Namespace) -> None:
    quest_id = _resolve_id(args.id, [q.id for q in app.hunter.list_quests()], "quest")
    result = app.hunter.complete_quest(quest_id)

    print(f"Quest complete: {result.quest.title}  +{result.xp_gained} XP")
    if result.leveled_up:
        message = asyncio.run(app.hunter.flavor.level_up_message(result.new_level, result.rank))
        print(f"LEVEL UP! {result.old_level} -> {result.new_level}  {message}")
        gains = ", ".join(
            f"{a.value} +{n}" for a, n in result.stat_point_changes.items() if n
        )
        print(f"  Stats: {gains}")
        print(f"  Unspent points: {result.character.unspent_stat_points}")
    for item in result.rewards.items:
        flavor = asyncio.run(app.hunter.flavor.item_flavor(item.name, item.rarity, item.item_type))
        print(f"  Obtained [{item.rarity.value}] {item.name}")
        print(f"    {flavor}")
    for event in result.rewards.special:
        print(f"  {event.message}")
        for choice in event.choices:
            print(f"    - {choice.name} ({choice.item_type.value})")


def cmd_fail(app: HunterApp, args: argparse.Namespace) -> None:
    quest_id = _resolve_id(args.id, [q.id for q in app.hunter.list_quests()], "quest")
    quest = app.hunter.fail_quest(quest_id)
    print(f"Quest failed: {quest.title}")


def cmd_delete(app: HunterApp, args: argparse.Namespace) -> None:
    quest_id = _resolve_id(args.id, [q.id for q in app.hunter.list_quests()], "quest")
    app.hunter.delete_quest(quest_id)
    print("Quest deleted.")


def cmd_daily(app: HunterApp, args: argparse.Namespace) -> None:
    report = app.daily.run_daily_cycle_check()
    if not report.performed:
        print(f"Daily quests already reset for {report.date}.")
        return
    print(f"Daily quests reset for {report.date}: {report.quests_created} new quests.")
    if report.penalty_applied:
        print(f"  Only {report.completed_count} dailies completed: every attribute -1.")


def cmd_allocate(app: HunterApp, args: argparse.Namespace) -> None:
    character = app.hunter.allocate_stats(_parse_assignments(args.assignments))
    print(f"Stats allocated. Unspent points: {character.unspent_stat_points}")


def cmd_items(app: HunterApp, args: argparse.Namespace) -> None:
    items = app.hunter.list_items(rarity=args.rarity, item_type=args.type, sort_by=args.sort)
    if not items:
        print("Inventory is empty.")
        return
    for item in items:
        print(f"{_short(item.id)} [{item.rarity.value}] {item.name} ({item.item_type.value})")
    summary = app.hunter.item_summary()
    print(", ".join(f"{r.value} {n}" for r, n in summary.by_rarity.items()))


def cmd_discard(app: HunterApp, args: argparse.Namespace) -> None:
    item_id = _resolve_id(args.id, [i.id for i in app.hunter.list_items()], "item")
    app.hunter.discard_item(item_id)
    print("Item discarded.")


def cmd_achievements(app: HunterApp, args: argparse.Namespace) -> None:
    for achievement in app.hunter.get_achievements():
        mark = "x" if achievement.unlocked else " "
        progress = min(achievement.progress, achievement.max)
        print(f"[{mark}] {achievement.name}: {achievement.description} ({progress}/{achievement.max})")


def cmd_reset(app: HunterApp, args: argparse.Namespace) -> None:
    if not args.yes:
        raise ValidationError("Reset deletes all progress; pass --yes to confirm")
    app.hunter.reset_progress()
    print("Progress reset.")


def cmd_seed(app: HunterApp, args: argparse.Namespace) -> None:
    character = app.hunter.set_progress(
        total_xp=args.total_xp,
        attributes=_parse_assignments(args.attr) if args.attr else None,
        unspent_stat_points=args.points,
    )
    print(f"Level {character.level}, {character.current_xp} XP into the level.")


def cmd_scheduler(app: HunterApp, args: argparse.Namespace) -> None:
    async def run() -> None:
        scheduler = DailyResetScheduler(app.daily, retry_interval=args.retry)
        await scheduler.start()
        try:
            await asyncio.Event().wait()
        finally:
            await scheduler.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("Scheduler stopped.")


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hunter", description="Hunter System quest tracker")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    difficulties = [d.value for d in Difficulty]
    attributes = [a.value for a in ATTRIBUTE_ORDER]

    p = sub.add_parser("status", help="Show level, XP and attributes")
    p.set_defaults(handler=cmd_status)

    p = sub.add_parser("quests", help="List quests")
    p.add_argument("--status", choices=[s.value for s in QuestStatus])
    p.add_argument("--difficulty", choices=difficulties)
    p.add_argument("--kind", choices=[k.value for k in QuestKind])
    p.set_defaults(handler=cmd_quests)

    p = sub.add_parser("add", help="Create a quest")
    p.add_argument("title")
    p.add_argument("--difficulty", "-d", required=True, choices=difficulties)
    p.add_argument("--attribute", "-a", default="strength", choices=attributes)
    p.add_argument("--due", help="Due date (ISO 8601)")
    p.add_argument("--description")
    p.set_defaults(handler=cmd_add)

    for name, handler, text in (
        ("complete", cmd_complete, "Complete a quest"),
        ("fail", cmd_fail, "Mark a quest as failed"),
        ("delete", cmd_delete, "Delete a quest"),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument("id", help="Quest ID or unique prefix")
        p.set_defaults(handler=handler)

    p = sub.add_parser("daily", help="Run the daily quest check now")
    p.set_defaults(handler=cmd_daily)

    p = sub.add_parser("allocate", help="Spend stat points, e.g. strength=2 vitality=1")
    p.add_argument("assignments", nargs="+")
    p.set_defaults(handler=cmd_allocate)

    p = sub.add_parser("items", help="List inventory")
    p.add_argument("--rarity", choices=[r.value for r in RARITY_ORDER])
    p.add_argument("--type", choices=[t.value for t in ItemType])
    p.add_argument("--sort", default="newest", choices=["rarity", "newest", "oldest", "name"])
    p.set_defaults(handler=cmd_items)

    p = sub.add_parser("discard", help="Discard an item")
    p.add_argument("id", help="Item ID or unique prefix")
    p.set_defaults(handler=cmd_discard)

    p = sub.add_parser("achievements", help="Show achievement progress")
    p.set_defaults(handler=cmd_achievements)

    p = sub.add_parser("reset", help="Delete all progress")
    p.add_argument("--yes", action="store_true", help="Confirm the reset")
    p.set_defaults(handler=cmd_reset)

    p = sub.add_parser("seed", help="Set progression directly (development)")
    p.add_argument("--total-xp", type=int)
    p.add_argument("--points", type=int, help="Unspent stat points")
    p.add_argument("--attr", action="append", default=[], help="name=value, repeatable")
    p.set_defaults(handler=cmd_seed)

    p = sub.add_parser("scheduler", help="Run the daily reset scheduler until interrupted")
    p.add_argument("--retry", type=float, default=300.0, help="Seconds between retries after a failure")
    p.set_defaults(handler=cmd_scheduler)

    return parser


def main(argv: list[str] | None = None, app: HunterApp | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if app is None:
        config = HunterConfig()
        logging.basicConfig(
            level=config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        app = HunterApp.from_config(config)

    handler: Callable[[HunterApp, argparse.Namespace], None] = args.handler
    try:
        if args.command not in NO_DAILY_CHECK:
            app.daily.run_daily_cycle_check()
        handler(app, args)
    except HunterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
