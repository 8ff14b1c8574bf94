# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific values in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKBELL_APP_NAME": "App display name (default: taskbell).",
    "TASKBELL_LOG_LEVEL": "Console logging level (default: INFO).",
    # Front end
    "TASKBELL_CONSOLE_ENABLED": "Enable the interactive console (true/false, default: true).",
    "TASKBELL_DEFAULT_TASK_TIME": "Time used when /add is given no time (default: 09:00).",
    # Paths (gitignored)
    "TASKBELL_DATA_DIR": "Local data directory (default: .local/taskbell).",
    "TASKBELL_STORE_DB_PATH": "Key-value SQLite path (default: <data_dir>/store.sqlite3).",
    "TASKBELL_TASKS_KEY": "Storage key of the task list (default: scheduledTasks).",
    # Scheduler
    "TASKBELL_TICK_INTERVAL_SECONDS": "Seconds between alarm checks, clamped to 1..60 (default: 60).",
    # Alarm sound
    "TASKBELL_SOUND_ENABLED": "Play a looping alarm sound (true/false, default: true).",
    "TASKBELL_ALARM_SOUND_PATH": "Optional audio file (WAV, FLAC, OGG, ...) to loop instead of the built-in tone.",
    "TASKBELL_ALARM_TONE_HZ": "Pitch of the built-in tone (default: 880).",
    "TASKBELL_ALARM_VOLUME": "Volume of the built-in tone, 0..1 (default: 0.4).",
}
