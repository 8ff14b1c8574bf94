# src/taskbell/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and the alarm scheduler depend on Protocols instead of concrete
implementations, so storage, notification UI and audio output stay swappable
and tests can run without a sound card or a database.
"""

from datetime import date
from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Durable key-value store (localStorage-like).

    Implementations raise PersistenceError on storage failure.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


NotificationHandle = Any
# Opaque value returned by show_alarm() and handed back to close().


class NotificationPresenter(Protocol):
    """
    UI-side port: how the scheduler surfaces alarms.

    show_alarm() must present a prompt that does not expire on its own and
    offers a dismiss action; the UI reports that action back by calling
    AlarmScheduler.dismiss(task_id).
    """

    def show_alarm(
            self,
            *,
            task_id: str,
            title: str,
            due_date: date,
            due_time: str,
    ) -> NotificationHandle: ...

    def close(self, handle: NotificationHandle) -> None: ...

    def notify(self, title: str, description: str) -> None: ...


class AudioBackend(Protocol):
    """Low-level output for the single looped alarm sound."""

    def play_loop(self) -> None: ...
    def stop(self) -> None: ...


class TaskListener(Protocol):
    """
    Observer of TaskStore mutations.

    task_retiring() is called before a task is completed, deleted or moved to
    another due instant; tasks_changed() after every mutation has been applied.
    """

    def task_retiring(self, task_id: str) -> None: ...
    def tasks_changed(self) -> None: ...
