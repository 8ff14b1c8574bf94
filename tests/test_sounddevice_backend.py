# tests/test_sounddevice_backend.py

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from taskbell.audio.sounddevice_backend import SoundDeviceBackend, load_sound_file, synth_alarm_tone
from taskbell.errors import PlaybackError


class FakeSoundDevice:
    def __init__(self) -> None:
        self.played: list[tuple[np.ndarray, int, bool]] = []
        self.stopped = 0

    def play(self, data, samplerate, loop=False):
        self.played.append((data, samplerate, loop))

    def stop(self):
        self.stopped += 1


def _write_sound(path: Path, frames: int = 100, channels: int = 2, fmt: str = "WAV") -> None:
    data = np.full((frames, channels), 0.125, dtype=np.float32)
    sf.write(str(path), data, 8000, format=fmt)


def test_synth_tone_shape_and_volume() -> None:
    tone = synth_alarm_tone(frequency_hz=440, volume=0.5, sample_rate=8000)
    assert tone.shape == (8000, 1)
    assert tone.dtype == np.float32
    assert float(np.abs(tone).max()) <= 0.5 + 1e-6
    # The tail of the second is silent.
    assert float(np.abs(tone[-1000:]).max()) == 0.0


def test_load_sound_file(tmp_path: Path) -> None:
    path = tmp_path / "alarm.wav"
    _write_sound(path)
    data, sr = load_sound_file(path)
    assert sr == 8000
    assert data.shape == (100, 2)
    assert data.dtype == np.float32
    assert float(data[0, 0]) == pytest.approx(0.125, abs=1e-3)


def test_load_sound_file_reads_other_formats(tmp_path: Path) -> None:
    path = tmp_path / "alarm.flac"
    _write_sound(path, channels=1, fmt="FLAC")
    data, sr = load_sound_file(path)
    assert sr == 8000
    assert data.shape == (100, 1)


def test_load_sound_file_rejects_missing_and_garbage(tmp_path: Path) -> None:
    with pytest.raises(PlaybackError):
        load_sound_file(tmp_path / "missing.wav")
    path = tmp_path / "garbage.wav"
    path.write_bytes(b"definitely not audio")
    with pytest.raises(PlaybackError):
        load_sound_file(path)


def test_play_loop_loops_synth_tone() -> None:
    backend = SoundDeviceBackend(tone_hz=660, volume=0.2)
    fake = FakeSoundDevice()
    backend._sd = fake

    backend.play_loop()
    backend.stop()

    (data, sr, loop) = fake.played[0]
    assert loop is True
    assert sr == 44100
    assert data.shape[1] == 1
    assert fake.stopped == 1


def test_play_loop_uses_sound_file(tmp_path: Path) -> None:
    path = tmp_path / "alarm.wav"
    _write_sound(path)
    backend = SoundDeviceBackend(sound_path=path)
    fake = FakeSoundDevice()
    backend._sd = fake

    backend.play_loop()
    assert fake.played[0][1] == 8000


def test_stop_before_any_playback_is_noop() -> None:
    SoundDeviceBackend().stop()
