# tests/conftest.py

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskbell.cli.bootstrap import create_initial_state
from taskbell.core.state import AppState

from .fakes import TODAY, FakeAudioBackend, FakeClock, FakePresenter, MemoryKeyValueStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskbell-test",
        log_level="DEBUG",
        console_enabled=False,
        default_task_time="09:00",
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        tasks_key="scheduledTasks",
        tick_interval_seconds=60.0,
        sound_enabled=True,
        alarm_sound_path="",
        alarm_tone_hz=880.0,
        alarm_volume=0.4,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(TODAY)


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def audio() -> FakeAudioBackend:
    return FakeAudioBackend()


@pytest.fixture()
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    kv: MemoryKeyValueStore,
    presenter: FakePresenter,
    audio: FakeAudioBackend,
    clock: FakeClock,
) -> AppState:
    """
    AppState wired with deterministic fakes (memory store, silent audio,
    recording presenter, settable clock).
    """
    return create_initial_state(
        settings=settings,
        kv=kv,
        presenter=presenter,
        audio=audio,
        clock=clock,
    )


@pytest.fixture()
def local_tz(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[str], None]]:
    """
    Switch the process-local time zone, e.g. local_tz("IST-05:30").

    POSIX TZ strings need no zoneinfo database.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")

    def switch(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()
