# src/taskbell/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import date, datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import ALARM_TITLE, alarm_text, short_date

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsolePresenter:
    """
    NotificationPresenter for a terminal.

    An alarm prompt is printed once and stays "open" until closed; the user
    dismisses it with /dismiss <id>. The handle is the task id. Closing is
    silent; the scheduler follows it with a notify() line.
    """

    def __init__(self) -> None:
        self._open: set[str] = set()

    @property
    def open_prompts(self) -> frozenset[str]:
        return frozenset(self._open)

    def show_alarm(self, *, task_id: str, title: str, due_date: date, due_time: str) -> str:
        self._open.add(task_id)
        _print_ts(
            f"*** {ALARM_TITLE} {alarm_text(title)} "
            f"({short_date(due_date)} {due_time}) -> /dismiss {task_id}"
        )
        return task_id

    def close(self, handle: str | None) -> None:
        if handle is None or handle not in self._open:
            return
        self._open.discard(handle)

    def notify(self, title: str, description: str) -> None:
        _print_ts(f"{title}: {description}")


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin in a daemon thread and hand lines to the event loop.

    A daemon thread never blocks process exit while waiting on input().
    None is queued on EOF/Ctrl+C.
    """

    def put(item: str | None) -> bool:
        try:
            loop.call_soon_threadsafe(lines.put_nowait, item)
        except RuntimeError:
            # Event loop already closed.
            return False
        return True

    def reader() -> None:
        while True:
            try:
                line = input(">>> ")
            except (EOFError, KeyboardInterrupt):
                put(None)
                return
            if not put(line):
                return

    t = threading.Thread(target=reader, name="stdin-reader", daemon=True)
    t.start()
    return t


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    Lines are read in a worker thread; every command is executed on the
    event-loop thread, so store mutations never race with scheduler ticks.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), lines)

    while True:
        raw = await lines.get()
        if raw is None:
            logger.info("Console input closed, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
