"""
Daily Quest Cycle.

Once per local calendar day the previous day's daily slate is judged and
replaced:

1. If a previous reset exists and fewer than 3 daily quests were
   completed, every attribute drops by 1 (never below 1).
2. All daily quests are deleted.
3. A fresh slate of five E-rank daily quests is inserted, one per
   attribute.
4. `last_daily_reset` is set to today.

The whole transition is one transaction. The marker is re-read inside
it, so two concurrent checks cannot both penalize.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from pydantic import BaseModel

from hunter.content import DAILY_QUESTS
from hunter.db.interfaces import LAST_DAILY_RESET_KEY, HunterRepository
from hunter.errors import NotFoundError
from hunter.models import QuestFilter, QuestKind, QuestStatus, create_quest
from hunter.models.character import utcnow

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MIN_DAILY_COMPLETIONS = 3

DEFAULT_RETRY_INTERVAL = 300.0  # seconds between attempts after a failed check
MIDNIGHT_MARGIN = 1.0  # wake slightly after midnight, never before


class DailyCycleReport(BaseModel):
    """Outcome of one daily cycle check."""

    performed: bool
    date: str
    """Local calendar day the check ran for (YYYY-MM-DD)."""

    previous_reset: str | None = None
    completed_count: int = 0
    penalty_applied: bool = False
    quests_created: int = 0


def seconds_until_next_midnight(now: datetime) -> float:
    """Seconds from an aware `now` to the next midnight in its timezone."""
    tomorrow = now.date() + timedelta(days=1)
    midnight = datetime.combine(tomorrow, time.min, tzinfo=now.tzinfo)
    delta = midnight.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    return max(0.0, delta.total_seconds())


@dataclass
class DailyQuestService:
    """
    Runs the daily transition against a repository.

    Day boundaries follow `tz` (system local time when None).
    """

    repository: HunterRepository
    tz: tzinfo | None = None
    clock: Callable[[], datetime] = utcnow

    def now(self) -> datetime:
        """Current time in the configured timezone."""
        return self.clock().astimezone(self.tz)

    def today(self) -> date:
        """Current local calendar date."""
        return self.now().date()

    def run_daily_cycle_check(self) -> DailyCycleReport:
        """
        Perform the daily transition if it has not run today.

        Returns:
            DailyCycleReport; `performed` is False when today's
            transition already happened

        Raises:
            StoreFailure: The transition was rolled back; the next
                check retries it from the start
        """
        today = self.today().isoformat()

        if self.repository.get_config(LAST_DAILY_RESET_KEY) == today:
            return DailyCycleReport(performed=False, date=today, previous_reset=today)

        with self.repository.transaction():
            previous = self.repository.get_config(LAST_DAILY_RESET_KEY)
            if previous == today:
                return DailyCycleReport(performed=False, date=today, previous_reset=previous)

            completed = 0
            penalty = False
            if previous is not None:
                completed = self.repository.count_quests(
                    QuestFilter(kind=QuestKind.DAILY, status=QuestStatus.COMPLETED)
                )
                if completed < MIN_DAILY_COMPLETIONS:
                    character = self.repository.get_character()
                    if character is None:
                        raise NotFoundError("Character not found")
                    character.apply_daily_penalty()
                    self.repository.save_character(character)
                    penalty = True

            self.repository.delete_quests(QuestFilter(kind=QuestKind.DAILY))

            created_at = self.clock()
            for template in DAILY_QUESTS:
                quest = create_quest(
                    template.title,
                    template.difficulty,
                    description=template.description,
                    attribute=template.attribute,
                    kind=QuestKind.DAILY,
                )
                quest.created_at = created_at
                self.repository.save_quest(quest)

            self.repository.set_config(LAST_DAILY_RESET_KEY, today)

        if previous is None:
            logger.info("First daily cycle for %s, created %d quests", today, len(DAILY_QUESTS))
        elif penalty:
            logger.info(
                "Daily cycle for %s: %d/%d dailies completed, penalty applied",
                today,
                completed,
                MIN_DAILY_COMPLETIONS,
            )
        else:
            logger.info("Daily cycle for %s: %d dailies completed, no penalty", today, completed)

        return DailyCycleReport(
            performed=True,
            date=today,
            previous_reset=previous,
            completed_count=completed,
            penalty_applied=penalty,
            quests_created=len(DAILY_QUESTS),
        )


@dataclass
class DailyResetScheduler:
    """
    Background task that runs the daily check at startup and after
    every local midnight.

    A failed check is logged and retried after `retry_interval` seconds.
    """

    service: DailyQuestService
    retry_interval: float = DEFAULT_RETRY_INTERVAL

    last_report: DailyCycleReport | None = field(init=False, default=None)
    consecutive_failures: int = field(init=False, default=0)

    _is_running: bool = field(init=False, default=False)
    _task: asyncio.Task | None = field(init=False, default=None)

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def start(self) -> None:
        """Start the scheduler background task."""
        if self._is_running:
            logger.warning("DailyResetScheduler already running")
            return

        self._is_running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("DailyResetScheduler started")

    async def stop(self) -> None:
        """Stop the scheduler background task."""
        if not self._is_running:
            return

        self._is_running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("DailyResetScheduler stopped")

    async def run_once(self) -> DailyCycleReport:
        """Run one check off the event loop thread."""
        report = await asyncio.to_thread(self.service.run_daily_cycle_check)
        self.last_report = report
        self.consecutive_failures = 0
        return report

    async def _run_loop(self) -> None:
        while self._is_running:
            try:
                await self.run_once()
                delay = seconds_until_next_midnight(self.service.now()) + MIDNIGHT_MARGIN

            except asyncio.CancelledError:
                raise

            except Exception as exc:
                self.consecutive_failures += 1
                logger.error(
                    "Daily cycle check failed (attempt %d): %s; retrying in %.0fs",
                    self.consecutive_failures,
                    exc,
                    self.retry_interval,
                )
                delay = self.retry_interval

            await asyncio.sleep(delay)
