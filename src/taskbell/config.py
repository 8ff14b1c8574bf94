# src/taskbell/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Read once at the composition root; components get it injected.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBELL"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Front end ----
    console_enabled: bool
    default_task_time: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    tasks_key: str

    # ---- Scheduler ----
    tick_interval_seconds: float

    # ---- Alarm sound ----
    sound_enabled: bool
    alarm_sound_path: str
    alarm_tone_hz: float
    alarm_volume: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskbell").strip() or "taskbell"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        default_task_time = _env(_k("DEFAULT_TASK_TIME"), "09:00").strip() or "09:00"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskbell"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3")
        tasks_key = _env(_k("TASKS_KEY"), "scheduledTasks").strip() or "scheduledTasks"

        # Minute-resolution matching: a period above 60s could skip a due minute.
        tick_interval_seconds = min(60.0, max(1.0, _env_float(_k("TICK_INTERVAL_SECONDS"), 60.0)))

        sound_enabled = _env_bool(_k("SOUND_ENABLED"), True)
        alarm_sound_path = _env(_k("ALARM_SOUND_PATH"), "").strip()
        alarm_tone_hz = _env_float(_k("ALARM_TONE_HZ"), 880.0)
        alarm_volume = min(1.0, max(0.0, _env_float(_k("ALARM_VOLUME"), 0.4)))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            default_task_time=default_task_time,
            data_dir=data_dir,
            store_db_path=store_db_path,
            tasks_key=tasks_key,
            tick_interval_seconds=tick_interval_seconds,
            sound_enabled=sound_enabled,
            alarm_sound_path=alarm_sound_path,
            alarm_tone_hz=alarm_tone_hz,
            alarm_volume=alarm_volume,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
