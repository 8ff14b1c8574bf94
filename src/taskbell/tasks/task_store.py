# src/taskbell/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from datetime import date

from ..core.ports import KeyValueStore, TaskListener
from ..errors import PersistenceError, TaskNotFoundError
from .task_codec import dumps_tasks, loads_tasks
from .task_models import Task, normalize_time, normalize_title, parse_due_date

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "scheduledTasks"


class TaskStore:
    """
    In-memory task list backed by a durable key-value store.

    Persistence contract:
    - the list is read once, in __init__
    - after every mutation the full list is written under one key
    - a failed write is logged; the in-memory list stays authoritative and
      the next mutation writes the full list again

    Listeners (the alarm scheduler) are told before a task stops being
    eligible to ring (complete/delete/reschedule) and after every change.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_TASKS_KEY) -> None:
        self._kv = kv
        self._key = key
        self._tasks: list[Task] = []
        self._listeners: list[TaskListener] = []
        self._dirty = False
        self._load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- low-level helpers ----

    def _load(self) -> None:
        try:
            raw = self._kv.get(self._key)
        except PersistenceError:
            logger.exception("Failed to read task list; starting empty.")
            raw = None
        self._tasks = loads_tasks(raw)

    def _persist(self) -> None:
        try:
            self._kv.set(self._key, dumps_tasks(self._tasks))
        except PersistenceError:
            self._dirty = True
            logger.exception("Failed to persist task list (total=%d); keeping in-memory state.", len(self._tasks))
            return
        if self._dirty:
            logger.info("Task list persisted again after an earlier failure.")
        self._dirty = False

    def _find(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def _new_id(self) -> str:
        taken = {t.id for t in self._tasks}
        while True:
            candidate = uuid.uuid4().hex[:8]
            if candidate not in taken:
                return candidate

    def _notify_retiring(self, task_id: str) -> None:
        for listener in list(self._listeners):
            try:
                listener.task_retiring(task_id)
            except Exception:
                logger.exception("TaskListener.task_retiring failed task_id=%s", task_id)

    def _commit(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            try:
                listener.tasks_changed()
            except Exception:
                logger.exception("TaskListener.tasks_changed failed")

    # ---- listeners ----

    def add_listener(self, listener: TaskListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TaskListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ---- public API ----

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task:
        return self._find(task_id)

    def list(self) -> list[Task]:
        """
        Tasks ordered by due instant (date, then time).

        sorted() is stable, so tasks due at the same minute keep insertion order.
        """
        return sorted(self._tasks, key=lambda t: t.sort_key)

    def add(
        self,
        title: str,
        due_date: date | str | None,
        due_time: str | None,
        alarm_enabled: bool = False,
    ) -> Task:
        task = Task(
            id=self._new_id(),
            title=normalize_title(title),
            due_date=parse_due_date(due_date),
            due_time=normalize_time(due_time),
            completed=False,
            alarm_enabled=bool(alarm_enabled),
        )
        self._tasks.append(task)
        logger.debug(
            "Task added id=%s date=%s time=%s alarm=%s",
            task.id,
            task.due_date,
            task.due_time,
            task.alarm_enabled,
        )
        self._commit()
        return task

    def toggle_complete(self, task_id: str) -> Task:
        task = self._find(task_id)
        if not task.completed:
            # A completed task never keeps ringing.
            self._notify_retiring(task_id)
        task.completed = not task.completed
        logger.debug("Task %s completed=%s", task_id, task.completed)
        self._commit()
        return task

    def toggle_alarm(self, task_id: str) -> Task:
        task = self._find(task_id)
        task.alarm_enabled = not task.alarm_enabled
        logger.debug("Task %s alarm_enabled=%s", task_id, task.alarm_enabled)
        self._commit()
        return task

    def edit(
        self,
        task_id: str,
        *,
        title: str | None = None,
        due_date: date | str | None = None,
        due_time: str | None = None,
    ) -> Task:
        """
        Change title and/or due instant. Fields left as None are kept.

        Moving the due instant of a firing task dismisses it first; the task
        is then armed again for its new instant.
        """
        task = self._find(task_id)
        new_title = task.title if title is None else normalize_title(title)
        new_date = task.due_date if due_date is None else parse_due_date(due_date)
        new_time = task.due_time if due_time is None else normalize_time(due_time)

        if (new_date, new_time) != (task.due_date, task.due_time):
            self._notify_retiring(task_id)

        task.title = new_title
        task.due_date = new_date
        task.due_time = new_time
        logger.debug("Task %s edited date=%s time=%s", task_id, new_date, new_time)
        self._commit()
        return task

    def delete(self, task_id: str) -> bool:
        try:
            task = self._find(task_id)
        except TaskNotFoundError:
            return False
        self._notify_retiring(task_id)
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        self._commit()
        return True
