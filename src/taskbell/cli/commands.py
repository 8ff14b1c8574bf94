# src/taskbell/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import cast

from ..core.state import AppState
from ..errors import TaskNotFoundError, ValidationError
from ..tasks.task_api import alarm_toggled_message, describe_task, format_task_line, schedule_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskNotFoundError as e:
            return str(e)
        except ValidationError as e:
            return f"Incomplete task: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_date_arg(state: AppState, raw: str) -> str:
    word = raw.lower()
    today = state.scheduler.now().date()
    if word == "today":
        return today.isoformat()
    if word == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    return raw


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    firing = sorted(state.scheduler.active_alarms)
    return (
        "Status:\n"
        f"  Tasks: {len(state.task_store)}\n"
        f"  Scheduler: {'running' if state.scheduler.running else 'stopped'}"
        f" (every {getattr(s, 'tick_interval_seconds', 60)}s)\n"
        f"  Sound: {state.player.state.value}"
        f"{'' if getattr(s, 'sound_enabled', True) else ' (disabled)'}\n"
        f"  Ringing: {', '.join(firing) if firing else 'none'}"
    )


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <YYYY-MM-DD|today|tomorrow> <HH:MM> [!] <title...>
    A "!" before the title enables the alarm.
    """
    if len(args) < 3:
        return "Usage: /add <YYYY-MM-DD|today|tomorrow> <HH:MM> [!] <title...>"

    due_date = _parse_date_arg(state, args[0])
    due_time = args[1]
    rest = args[2:]
    alarm = False
    if rest and rest[0] == "!":
        alarm = True
        rest = rest[1:]

    task, msg = schedule_task(
        state,
        title=" ".join(rest),
        due_date=due_date,
        due_time=due_time,
        alarm=alarm,
    )

    now = state.scheduler.now()
    if emit and task.alarm_enabled and task.sort_key < (now.date(), now.strftime("%H:%M")):
        emit("That time has already passed; this alarm will not ring.")
    return msg


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list()
    if not tasks:
        return "No tasks scheduled yet. Add tasks to start planning your day."
    return "\n".join(format_task_line(state, t) for t in tasks)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = state.task_store.get(args[0])
    return f"{task.title}\n{describe_task(task)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = state.task_store.toggle_complete(args[0])
    return f'"{task.title}" marked {"done" if task.completed else "not done"}.'


def cmd_alarm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /alarm <id>"
    task = state.task_store.toggle_alarm(args[0])
    return alarm_toggled_message(task)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title <text...>
    /edit <id> date <YYYY-MM-DD|today|tomorrow>
    /edit <id> time <HH:MM>
    """
    if len(args) < 3:
        return "Usage: /edit <id> title|date|time <value>"

    task_id, field_name, value = args[0], args[1].lower(), args[2:]
    if field_name == "title":
        task = state.task_store.edit(task_id, title=" ".join(value))
    elif field_name == "date":
        task = state.task_store.edit(task_id, due_date=_parse_date_arg(state, value[0]))
    elif field_name == "time":
        task = state.task_store.edit(task_id, due_time=value[0])
    else:
        return "Usage: /edit <id> title|date|time <value>"
    return f"Task updated. {describe_task(task)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    if state.task_store.delete(args[0]):
        return "Task deleted: your task has been removed."
    return f"Task not found: {args[0]}"


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    """
    /dismiss        -> dismiss every ringing alarm
    /dismiss <id>   -> dismiss one alarm

    The presenter announces each dismissed alarm; the reply says what is left.
    """
    if not args:
        n = state.scheduler.dismiss_all()
        return f"Dismissed {n} alarm(s)." if n else "No alarm is ringing."

    if not state.scheduler.dismiss(args[0]):
        return f"No alarm is ringing for {args[0]}."
    remaining = sorted(state.scheduler.active_alarms)
    if remaining:
        return f"Still ringing: {', '.join(remaining)}"
    return "No other alarm is ringing."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show scheduler/sound status.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <date|today|tomorrow> <HH:MM> [!] <title> (! = alarm).",
)
registry.register("list", cmd_list, help_text="List tasks by due time.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("done", cmd_done, help_text="Toggle completed: /done <id>.")
registry.register("alarm", cmd_alarm, help_text="Toggle the alarm of a task: /alarm <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> title|date|time <value>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("dismiss", cmd_dismiss, help_text="Dismiss alarms: /dismiss [id].", aliases=["d"])
