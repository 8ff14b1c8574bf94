# tests/test_bootstrap.py

from __future__ import annotations

import logging
from datetime import date
from types import SimpleNamespace

import pytest

from taskbell.audio.sounddevice_backend import SoundDeviceBackend
from taskbell.cli.bootstrap import build_audio_backend, create_initial_state
from taskbell.connectors.console_connector import ConsolePresenter
from taskbell.logging_setup import _ConsoleNoiseFilter, setup_logging
from taskbell.storage.kv_store import SQLiteKeyValueStore


def test_real_wiring_uses_sqlite_and_console(settings: SimpleNamespace) -> None:
    settings.sound_enabled = False
    state = create_initial_state(settings=settings)

    assert isinstance(state.presenter, ConsolePresenter)
    assert state.player.state.value == "idle"
    task = state.task_store.add("Study", "2026-03-14", "09:00")
    assert settings.store_db_path.exists()

    again = create_initial_state(settings=settings)
    assert again.task_store.get(task.id).title == "Study"
    assert isinstance(again.task_store._kv, SQLiteKeyValueStore)


def test_build_audio_backend(settings: SimpleNamespace) -> None:
    assert isinstance(build_audio_backend(settings), SoundDeviceBackend)
    settings.sound_enabled = False
    assert build_audio_backend(settings) is None


def test_console_presenter_prints_closes_and_notifies(capsys: pytest.CaptureFixture[str]) -> None:
    presenter = ConsolePresenter()
    handle = presenter.show_alarm(task_id="t1", title="Study", due_date=date(2026, 3, 14), due_time="09:00")
    assert presenter.open_prompts == {"t1"}

    presenter.close(handle)
    presenter.close(handle)
    presenter.close(None)
    assert presenter.open_prompts == frozenset()

    presenter.notify("Alarm dismissed", "Study")

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("*** Task Alarm! It's time for: Study (Mar 14 09:00) -> /dismiss t1")
    assert lines[1].endswith("] Alarm dismissed: Study")


def test_console_noise_filter() -> None:
    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert f.filter(rec("taskbell.tasks.task_scheduler", logging.DEBUG))
    assert not f.filter(rec("sounddevice", logging.WARNING))
    assert f.filter(rec("sounddevice", logging.ERROR))
    assert not f.filter(rec("py.warnings", logging.WARNING))


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("taskbell.test").info("hello")
        for h in root.handlers:
            h.flush()
        assert "hello" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
