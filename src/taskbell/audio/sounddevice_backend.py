# src/taskbell/audio/sounddevice_backend.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from ..errors import PlaybackError

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100


def synth_alarm_tone(
    *,
    frequency_hz: float = 880.0,
    volume: float = 0.4,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> np.ndarray:
    """
    One second of a classic "beep-beep" pattern: two 150 ms tones, then silence.

    Looped, this sounds like an alarm clock.
    """
    volume = float(max(0.0, min(1.0, volume)))
    total = sample_rate
    t = np.arange(total, dtype=np.float32) / float(sample_rate)
    tone = np.sin(2.0 * np.pi * float(frequency_hz) * t).astype(np.float32)

    envelope = np.zeros(total, dtype=np.float32)
    beep = int(0.15 * sample_rate)
    gap = int(0.10 * sample_rate)
    envelope[:beep] = 1.0
    envelope[beep + gap: 2 * beep + gap] = 1.0

    return (tone * envelope * volume).reshape(-1, 1)


def load_sound_file(path: str | Path) -> tuple[np.ndarray, int]:
    """
    Decode an audio file (WAV, FLAC, OGG, MP3 with a recent libsndfile)
    into a float32 (frames, channels) array.
    """
    p = Path(path)
    try:
        import soundfile as sf  # type: ignore
    except Exception as e:
        raise PlaybackError(f"soundfile is unavailable: {e!r}") from e

    try:
        data, sample_rate = sf.read(str(p), dtype="float32", always_2d=True)
    except (OSError, RuntimeError) as e:
        raise PlaybackError(f"Cannot read alarm sound {p}: {e}") from e

    if len(data) == 0:
        raise PlaybackError(f"Alarm sound {p} is empty")
    return data, int(sample_rate)


class SoundDeviceBackend:
    """
    Looped alarm playback through `sounddevice`.

    The sound is either an audio file from settings or a synthesized tone.
    sounddevice is imported lazily so a machine without PortAudio can still
    run the scheduler; in that case play_loop() raises PlaybackError and the
    alarm stays visual.
    """

    def __init__(
        self,
        *,
        sound_path: str | Path | None = None,
        tone_hz: float = 880.0,
        volume: float = 0.4,
    ) -> None:
        self._sound_path = Path(sound_path) if sound_path else None
        self._tone_hz = float(tone_hz)
        self._volume = float(volume)

        self._sd: Any = None  # sounddevice module (runtime import)
        self._data: np.ndarray | None = None
        self._sample_rate: int = DEFAULT_SAMPLE_RATE

    def _ensure_ready(self) -> None:
        if self._sd is None:
            try:
                import sounddevice as sd  # type: ignore
            except Exception as e:
                raise PlaybackError(f"sounddevice is unavailable: {e!r}") from e
            self._sd = sd

        if self._data is not None:
            return

        if self._sound_path is not None:
            data, sr = load_sound_file(self._sound_path)
            self._data = data * self._volume
            self._sample_rate = sr
            logger.info("Alarm sound loaded from %s (sample_rate=%s).", self._sound_path, sr)
        else:
            self._data = synth_alarm_tone(frequency_hz=self._tone_hz, volume=self._volume)
            self._sample_rate = DEFAULT_SAMPLE_RATE
            logger.info("Alarm sound: synthesized %.0f Hz tone.", self._tone_hz)

    def play_loop(self) -> None:
        self._ensure_ready()
        try:
            self._sd.play(self._data, self._sample_rate, loop=True)
        except Exception as e:
            raise PlaybackError(f"sounddevice.play failed: {e!r}") from e

    def stop(self) -> None:
        if self._sd is None:
            return
        try:
            self._sd.stop()
        except Exception as e:
            raise PlaybackError(f"sounddevice.stop failed: {e!r}") from e
