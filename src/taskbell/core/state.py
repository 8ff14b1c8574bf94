# src/taskbell/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .ports import NotificationPresenter

if TYPE_CHECKING:
    from ..audio.player import AlarmPlayer
    from ..tasks.task_scheduler import AlarmScheduler
    from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything the front end needs, wired once by the composition root
    (cli/bootstrap.py). Each component is owned here and nowhere else.
    """

    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    task_store: TaskStore
    player: AlarmPlayer
    presenter: NotificationPresenter
    scheduler: AlarmScheduler
