# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from taskbell.errors import PersistenceError, PlaybackError

# A fixed "today" keeps the tests independent of the real date.
TODAY = datetime(2026, 3, 14, 8, 59, 0)


class FakeClock:
    """Mutable wall clock handed to AlarmScheduler as its `clock`."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int, second: int = 0) -> datetime:
        self.now = self.now.replace(hour=hour, minute=minute, second=second)
        return self.now


class MemoryKeyValueStore:
    """In-memory KeyValueStore. Set `fail_writes`/`fail_reads` to simulate storage errors."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.fail_reads = False
        self.writes = 0

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise PersistenceError("read failed")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full")
        self.writes += 1
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass(slots=True)
class FakeAudioBackend:
    """AudioBackend that records calls instead of making noise."""

    fail_start: bool = False
    fail_stop: bool = False
    play_calls: int = 0
    stop_calls: int = 0
    playing: bool = False

    def play_loop(self) -> None:
        if self.fail_start:
            raise PlaybackError("autoplay blocked")
        self.play_calls += 1
        self.playing = True

    def stop(self) -> None:
        if self.fail_stop:
            raise RuntimeError("device gone")
        self.stop_calls += 1
        self.playing = False


@dataclass(slots=True)
class ShownAlarm:
    task_id: str
    title: str
    due_date: date
    due_time: str


@dataclass(slots=True)
class FakePresenter:
    """NotificationPresenter that keeps prompts in lists for assertions."""

    shown: list[ShownAlarm] = field(default_factory=list)
    closed: list[str] = field(default_factory=list)
    notes: list[tuple[str, str]] = field(default_factory=list)
    fail_show: bool = False

    def show_alarm(self, *, task_id: str, title: str, due_date: date, due_time: str) -> str:
        if self.fail_show:
            raise RuntimeError("toast container unmounted")
        self.shown.append(ShownAlarm(task_id, title, due_date, due_time))
        return f"handle-{task_id}"

    def close(self, handle: str | None) -> None:
        if handle is not None:
            self.closed.append(handle)

    def notify(self, title: str, description: str) -> None:
        self.notes.append((title, description))

    @property
    def open_ids(self) -> set[str]:
        opened = {a.task_id for a in self.shown}
        return {i for i in opened if f"handle-{i}" not in self.closed}
