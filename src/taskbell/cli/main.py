# src/taskbell/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the alarm scheduler, then runs
the console REPL (or just waits for a signal when the console is disabled).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..errors import PlaybackError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.scheduler.stop()
    except Exception:
        logger.exception("Alarm scheduler stop failed.")

    try:
        state.player.stop()
    except PlaybackError:
        logger.debug("Player stop failed.", exc_info=True)

    if state.task_store.has_unsaved_changes:
        logger.warning("Exiting with task changes that could not be persisted.")


async def run(state: AppState) -> None:
    state.scheduler.start()

    stop_main = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows event loops).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signum, _handle_signal, signum)

    try:
        if state.settings.console_enabled:
            console = asyncio.create_task(run_console_loop(state), name="console")
            waiter = asyncio.create_task(stop_main.wait(), name="stop-signal")
            done, pending = await asyncio.wait({console, waiter}, return_when=asyncio.FIRST_COMPLETED)
            for t in pending:
                t.cancel()
        else:
            logger.info("Console disabled. Running the alarm scheduler only. Press Ctrl+C to stop.")
            await stop_main.wait()
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")


if __name__ == "__main__":
    main()
