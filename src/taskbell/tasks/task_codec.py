# src/taskbell/tasks/task_codec.py

"""
Wire format of the persisted task list.

One JSON array, one object per task, in storage (insertion) order:

    [{"id": "...", "title": "...", "date": "YYYY-MM-DD", "time": "HH:MM",
      "completed": false, "alarmEnabled": true}, ...]

Reading is lenient: a payload that is not a JSON array loads as an empty list,
and a single bad record is skipped without dropping the others.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from ..errors import PersistenceError, ValidationError
from .task_models import Task, normalize_time, parse_due_date

logger = logging.getLogger(__name__)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "date": task.due_date.isoformat(),
        "time": task.due_time,
        "completed": task.completed,
        "alarmEnabled": task.alarm_enabled,
    }


def record_to_task(item: dict[str, Any]) -> Task:
    """Build a Task from one stored record. Raises ValidationError on bad data."""
    task_id = str(item.get("id") or "").strip()
    if not task_id:
        raise ValidationError("record has no id")

    title = str(item.get("title") or "").strip()
    if not title:
        raise ValidationError(f"record {task_id} has no title")

    # Older payloads used "alarm" for the flag.
    alarm_raw = item.get("alarmEnabled", item.get("alarm", False))

    return Task(
        id=task_id,
        title=title,
        due_date=parse_due_date(item.get("date")),
        due_time=normalize_time(item.get("time")),
        completed=bool(item.get("completed", False)),
        alarm_enabled=bool(alarm_raw),
    )


def dumps_tasks(tasks: Iterable[Task]) -> str:
    try:
        return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Failed to encode task list: {e}") from e


def loads_tasks(raw: str | None) -> list[Task]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored task list is not valid JSON; starting empty.")
        return []
    if not isinstance(data, list):
        logger.warning("Stored task list is not a JSON array; starting empty.")
        return []

    out: list[Task] = []
    seen: set[str] = set()
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping stored task #%d: not an object", i)
            continue
        try:
            task = record_to_task(item)
        except ValidationError as e:
            logger.warning("Skipping stored task #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping stored task #%d: duplicate id %s", i, task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out
