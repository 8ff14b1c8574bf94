# src/taskbell/audio/player.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import AudioBackend
from ..errors import PlaybackError

logger = logging.getLogger(__name__)


class PlayerState(StrEnum):
    IDLE = "idle"
    PLAYING = "playing"


class AlarmPlayer:
    """
    The one shared alarm sound.

    Constructed once by the composition root and injected where needed;
    there is no per-task sound. start() and stop() are idempotent, which is
    the whole mutual-exclusion discipline (everything runs on one thread).

    The state only becomes PLAYING after the backend accepted the request,
    so a failed start leaves the player IDLE and the next start() retries.
    """

    def __init__(self, backend: AudioBackend | None) -> None:
        self._backend = backend
        self._state = PlayerState.IDLE

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlayerState.PLAYING

    def start(self) -> None:
        """Begin looped playback. Raises PlaybackError if the backend fails."""
        if self._state is PlayerState.PLAYING:
            return
        if self._backend is None:
            # Sound disabled; the alarm is visual only.
            logger.debug("Alarm sound disabled; start() ignored.")
            return
        try:
            self._backend.play_loop()
        except PlaybackError:
            raise
        except Exception as e:
            raise PlaybackError(f"Alarm playback failed to start: {e!r}") from e
        self._state = PlayerState.PLAYING
        logger.info("Alarm sound started.")

    def stop(self) -> None:
        """
        Halt playback and rewind. No-op when idle.

        If the backend fails to stop, the player stays PLAYING so a later
        stop() tries again.
        """
        if self._state is PlayerState.IDLE:
            return
        if self._backend is not None:
            try:
                self._backend.stop()
            except PlaybackError:
                raise
            except Exception as e:
                raise PlaybackError(f"Alarm playback failed to stop: {e!r}") from e
        self._state = PlayerState.IDLE
        logger.info("Alarm sound stopped.")
