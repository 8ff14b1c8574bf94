# src/taskbell/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import date

from ..core.state import AppState
from .task_models import Task

logger = logging.getLogger(__name__)

ALARM_TITLE = "Task Alarm!"


def short_date(d: date) -> str:
    """Short form used in task lists, e.g. "May 3"."""
    return f"{d.strftime('%b')} {d.day}"


def long_date(d: date) -> str:
    """Long form used in task details, e.g. "May 3rd, 2025"."""
    day = d.day
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{d.strftime('%B')} {day}{suffix}, {d.year}"


def alarm_text(title: str) -> str:
    return f"It's time for: {title}"


def describe_task(task: Task) -> str:
    alarm = " with alarm" if task.alarm_enabled else ""
    return f"Scheduled for {long_date(task.due_date)} at {task.due_time}{alarm}"


def format_task_line(state: AppState, task: Task) -> str:
    mark = "x" if task.completed else " "
    bell = ""
    if state.scheduler.is_firing(task.id):
        bell = " [RINGING]"
    elif task.alarm_enabled:
        bell = " [alarm]"
    return f"[{mark}] {task.id}  {short_date(task.due_date)} {task.due_time}  {task.title}{bell}"


def schedule_task(
    state: AppState,
    *,
    title: str,
    due_date: date | str | None = None,
    due_time: str | None = None,
    alarm: bool = False,
) -> tuple[Task, str]:
    """
    Convenience helper: add a task with the usual defaults (today, 09:00).

    Returns the task and a confirmation line for the user.
    Raises ValidationError on bad input.
    """
    if due_date is None:
        due_date = state.scheduler.now().date()
    if due_time is None:
        due_time = state.settings.default_task_time

    task = state.task_store.add(title, due_date, due_time, alarm_enabled=alarm)
    if task.alarm_enabled:
        msg = f'Alarm set for "{task.title}" at {task.due_time} on {short_date(task.due_date)}'
    else:
        msg = "Task added: your task has been scheduled"
    logger.info("Scheduled task id=%s alarm=%s", task.id, task.alarm_enabled)
    return task, msg


def alarm_toggled_message(task: Task) -> str:
    if task.alarm_enabled:
        return f'Alarm set for "{task.title}" at {task.due_time} on {short_date(task.due_date)}'
    return f'Alarm removed for "{task.title}"'
