# src/taskbell/tasks/task_scheduler.py

from __future__ import annotations

"""
Alarm scheduler.

A small polling loop that, on every tick:
- scans the task list once,
- fires every armed task whose due minute is the current minute,
- never fires a task that is already ringing (the active set is the guard),
- never re-fires an occurrence that was dismissed.

Sound is best-effort (a playback error is logged), the prompt is not.
Everything runs on the event-loop thread: ticks, store mutations and
dismiss calls never interleave.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from ..audio.player import AlarmPlayer
from ..core.ports import NotificationHandle, NotificationPresenter
from ..errors import PlaybackError
from .task_models import AlarmPhase, Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ALARM_DISMISSED = "Alarm dismissed"


def local_now() -> datetime:
    """Naive local wall-clock time of the running process."""
    return datetime.now()


@dataclass(slots=True)
class ActiveAlarm:
    task_id: str
    title: str
    occurrence: tuple[str, date, str]
    fired_at: datetime
    handle: NotificationHandle = None


class AlarmScheduler:
    """
    Fires and dismisses task alarms.

    Registers itself as a TaskStore listener, so completing, deleting or
    rescheduling a ringing task dismisses it, and every change triggers an
    immediate tick (a task added for "now" rings without waiting a full period).

    The shared sound starts with the first alarm to fire and stops only when
    the last live alarm is dismissed.
    """

    def __init__(
        self,
        store: TaskStore,
        player: AlarmPlayer,
        presenter: NotificationPresenter,
        *,
        interval_seconds: float = 60.0,
        clock: Clock = local_now,
    ) -> None:
        self._store = store
        self._player = player
        self._presenter = presenter
        self._interval_seconds = float(interval_seconds)
        self._clock = clock

        self._active: dict[str, ActiveAlarm] = {}
        self._dismissed: set[tuple[str, date, str]] = set()
        self._runner: asyncio.Task[None] | None = None
        self._closed = False
        self.tick_count = 0

        self._store.add_listener(self)

    # ---- state ----

    @property
    def active_alarms(self) -> frozenset[str]:
        return frozenset(self._active)

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def now(self) -> datetime:
        return self._clock()

    def is_firing(self, task_id: str) -> bool:
        return task_id in self._active

    def phase_of(self, task: Task, now: datetime | None = None) -> AlarmPhase:
        if task.id in self._active:
            return AlarmPhase.FIRING
        if not task.alarm_enabled or task.completed:
            return AlarmPhase.NOT_ARMED
        if now is None:
            now = self._clock()
        # A dismissed occurrence only counts during its own minute.
        if task.occurrence in self._dismissed and task.is_due_at(now):
            return AlarmPhase.DISMISSED
        return AlarmPhase.ARMED

    # ---- tick ----

    def _should_fire(self, task: Task, now: datetime) -> bool:
        return (
            task.alarm_enabled
            and not task.completed
            and task.id not in self._active
            and task.occurrence not in self._dismissed
            and task.is_due_at(now)
        )

    def _prune_dismissed(self, now: datetime) -> None:
        # An occurrence can only match again during its own minute.
        minute = now.strftime("%H:%M")
        today = now.date()
        self._dismissed = {occ for occ in self._dismissed if occ[1] == today and occ[2] == minute}

    def _stop_sound(self) -> None:
        try:
            self._player.stop()
        except PlaybackError:
            logger.exception("Alarm sound failed to stop; retrying on the next tick")

    def _silence_if_idle(self) -> None:
        # Retry a stop that failed earlier: no live alarm, no sound.
        if not self._active and self._player.is_playing:
            self._stop_sound()

    def _fire(self, task: Task, now: datetime) -> None:
        alarm = ActiveAlarm(task_id=task.id, title=task.title, occurrence=task.occurrence, fired_at=now)
        self._active[task.id] = alarm
        logger.info("Alarm fired task_id=%s due=%s %s", task.id, task.due_date, task.due_time)

        try:
            self._player.start()
        except PlaybackError:
            logger.exception("Alarm sound failed task_id=%s; showing the prompt anyway", task.id)

        try:
            alarm.handle = self._presenter.show_alarm(
                task_id=task.id,
                title=task.title,
                due_date=task.due_date,
                due_time=task.due_time,
            )
        except Exception:
            logger.exception("show_alarm failed task_id=%s", task.id)

    def tick(self, now: datetime | None = None) -> list[str]:
        """
        Evaluate all tasks once. Returns the ids that started firing.

        Never raises: a bad task is logged and skipped.
        """
        if self._closed:
            return []

        if now is None:
            now = self._clock()
        self.tick_count += 1
        self._prune_dismissed(now)
        self._silence_if_idle()

        try:
            tasks = self._store.list()
        except Exception:
            logger.exception("TaskStore.list failed during tick")
            return []

        fired: list[str] = []
        for task in tasks:
            try:
                if self._should_fire(task, now):
                    self._fire(task, now)
                    fired.append(task.id)
            except Exception:
                logger.exception("Alarm evaluation failed task_id=%s", getattr(task, "id", "?"))
        return fired

    # ---- dismiss ----

    def dismiss(self, task_id: str) -> bool:
        """
        End a live alarm. Safe to call repeatedly or for ids that never fired.

        Returns True if an alarm was actually dismissed.
        """
        alarm = self._active.pop(task_id, None)
        if alarm is None:
            return False

        self._dismissed.add(alarm.occurrence)

        if not self._active:
            self._stop_sound()

        try:
            self._presenter.close(alarm.handle)
        except Exception:
            logger.exception("Closing alarm prompt failed task_id=%s", task_id)

        try:
            self._presenter.notify(ALARM_DISMISSED, alarm.title)
        except Exception:
            logger.exception("Dismiss notice failed task_id=%s", task_id)

        logger.info("Alarm dismissed task_id=%s (still firing: %d)", task_id, len(self._active))
        return True

    def dismiss_all(self) -> int:
        count = 0
        for task_id in list(self._active):
            if self.dismiss(task_id):
                count += 1
        return count

    # ---- TaskListener ----

    def task_retiring(self, task_id: str) -> None:
        self.dismiss(task_id)

    def tasks_changed(self) -> None:
        self.tick()

    # ---- lifecycle ----

    def start(self) -> asyncio.Task[None]:
        """Start the periodic loop on the running event loop."""
        if self._closed:
            raise RuntimeError("AlarmScheduler is closed")
        if self._runner is None or self._runner.done():
            self._runner = asyncio.create_task(
                run_alarm_scheduler(self, interval_seconds=self._interval_seconds),
                name="alarm-scheduler",
            )
            logger.info("Alarm scheduler started (interval=%.1fs).", self._interval_seconds)
        return self._runner

    async def stop(self) -> None:
        """
        Cancel the loop, detach from the store and silence everything.

        After stop() no callback reaches the store or the player again.
        """
        runner, self._runner = self._runner, None
        if runner is not None and not runner.done():
            runner.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await runner

        self._store.remove_listener(self)
        self.dismiss_all()
        self._closed = True
        logger.info("Alarm scheduler stopped.")


async def run_alarm_scheduler(
        scheduler: AlarmScheduler,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """
    Periodic tick loop.

    Fixed-rate: each deadline is the previous one plus interval_seconds, so the
    time spent inside tick() does not accumulate as drift. If the loop falls
    behind (e.g. the machine slept), it ticks immediately and resumes from now.

    To stop the loop, cancel the coroutine/task.
    """
    loop = asyncio.get_running_loop()
    interval = max(0.05, float(interval_seconds))
    next_at = loop.time()

    while True:
        try:
            scheduler.tick()
        except Exception:
            logger.exception("Alarm tick failed")

        next_at += interval
        delay = next_at - loop.time()
        if delay < 0:
            logger.debug("Alarm scheduler fell behind by %.2fs", -delay)
            next_at = loop.time()
            delay = 0.0
        await asyncio.sleep(delay)
