# src/taskbell/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/player/presenter/scheduler).

Each component is constructed exactly once here and owned by AppState.
"""

from __future__ import annotations

import logging

from ..audio.player import AlarmPlayer
from ..audio.sounddevice_backend import SoundDeviceBackend
from ..config import get_settings
from ..connectors.console_connector import ConsolePresenter
from ..core.ports import AudioBackend, KeyValueStore, NotificationPresenter
from ..core.state import AppState
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.task_scheduler import AlarmScheduler, Clock, local_now
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_audio_backend(settings) -> AudioBackend | None:
    if not settings.sound_enabled:
        logger.info("Alarm sound disabled by settings.")
        return None
    return SoundDeviceBackend(
        sound_path=settings.alarm_sound_path or None,
        tone_hz=settings.alarm_tone_hz,
        volume=settings.alarm_volume,
    )


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    presenter: NotificationPresenter | None = None,
    audio: AudioBackend | None = None,
    clock: Clock = local_now,
) -> AppState:
    """
    Create AppState from the provided settings.

    Collaborators are injectable (tests pass fakes); anything not given is
    built from settings. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SQLiteKeyValueStore(settings.store_db_path)
    if presenter is None:
        presenter = ConsolePresenter()
    if audio is None:
        audio = build_audio_backend(settings)

    task_store = TaskStore(kv, key=settings.tasks_key)
    player = AlarmPlayer(audio)
    scheduler = AlarmScheduler(
        task_store,
        player,
        presenter,
        interval_seconds=settings.tick_interval_seconds,
        clock=clock,
    )

    return AppState(
        settings=settings,
        task_store=task_store,
        player=player,
        presenter=presenter,
        scheduler=scheduler,
    )
