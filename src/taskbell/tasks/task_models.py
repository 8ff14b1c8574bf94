# src/taskbell/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from ..errors import ValidationError

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class AlarmPhase(StrEnum):
    """
    Per-task alarm state.

    NOT_ARMED -> alarm disabled or task completed
    ARMED     -> alarm enabled, task open, due instant not matched yet
    FIRING    -> alarm triggered and not dismissed
    DISMISSED -> this occurrence was dismissed (terminal until the due instant changes)
    """

    NOT_ARMED = "not_armed"
    ARMED = "armed"
    FIRING = "firing"
    DISMISSED = "dismissed"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    due_date: date
    due_time: str  # "HH:MM", local time
    completed: bool = False
    alarm_enabled: bool = False

    @property
    def occurrence(self) -> tuple[str, date, str]:
        """Identity of one due instant of this task."""
        return (self.id, self.due_date, self.due_time)

    @property
    def sort_key(self) -> tuple[date, str]:
        # "HH:MM" is zero-padded, so string order is time order.
        return (self.due_date, self.due_time)

    def is_due_at(self, now: datetime) -> bool:
        """Minute-resolution match against a local wall-clock instant."""
        return self.due_date == now.date() and self.due_time == now.strftime("%H:%M")


def normalize_time(raw: str | None) -> str:
    """
    Validate a time-of-day and return it as zero-padded "HH:MM".

    Accepts "9:05" and "09:05"; rejects anything outside 00:00..23:59.
    """
    text = (raw or "").strip()
    if not text:
        raise ValidationError("time is required")
    m = _TIME_RE.match(text)
    if not m:
        raise ValidationError(f"time must be HH:MM, got {raw!r}")
    hour, minute = int(m.group(1)), int(m.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(f"time out of range: {raw!r}")
    return f"{hour:02d}:{minute:02d}"


def parse_due_date(raw: date | str | None) -> date:
    """
    Accept a date, an ISO-8601 "YYYY-MM-DD" string or a full ISO timestamp.

    Timestamps with an offset (older payloads stored "...T18:30:00.000Z")
    name the calendar day in local time, not in the offset's zone.
    """
    if raw is None:
        raise ValidationError("date is required")
    if isinstance(raw, datetime):
        return _local_day(raw)
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        raise ValidationError("date is required")
    try:
        if len(text) > 10:
            return _local_day(datetime.fromisoformat(text))
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"date must be YYYY-MM-DD, got {raw!r}") from None


def _local_day(dt: datetime) -> date:
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def normalize_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError("title is required")
    return title
