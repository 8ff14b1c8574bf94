# tests/test_alarm_player.py

from __future__ import annotations

import pytest

from taskbell.audio.player import AlarmPlayer, PlayerState
from taskbell.errors import PlaybackError

from .fakes import FakeAudioBackend


def test_start_and_stop_are_idempotent() -> None:
    backend = FakeAudioBackend()
    player = AlarmPlayer(backend)

    player.stop()
    assert backend.stop_calls == 0

    player.start()
    player.start()
    assert player.state is PlayerState.PLAYING
    assert backend.play_calls == 1

    player.stop()
    player.stop()
    assert player.state is PlayerState.IDLE
    assert backend.stop_calls == 1


def test_failed_start_stays_idle_and_can_retry() -> None:
    backend = FakeAudioBackend(fail_start=True)
    player = AlarmPlayer(backend)

    with pytest.raises(PlaybackError):
        player.start()
    assert player.state is PlayerState.IDLE

    backend.fail_start = False
    player.start()
    assert player.is_playing


def test_backend_errors_are_wrapped() -> None:
    backend = FakeAudioBackend()
    player = AlarmPlayer(backend)
    player.start()
    backend.fail_stop = True

    with pytest.raises(PlaybackError):
        player.stop()
    assert player.state is PlayerState.PLAYING


def test_failed_stop_keeps_playing_until_a_retry_succeeds() -> None:
    backend = FakeAudioBackend()
    player = AlarmPlayer(backend)
    player.start()

    backend.fail_stop = True
    with pytest.raises(PlaybackError):
        player.stop()
    assert backend.playing is True
    assert player.is_playing

    backend.fail_stop = False
    player.stop()
    assert backend.playing is False
    assert backend.stop_calls == 1
    assert player.state is PlayerState.IDLE


def test_without_backend_the_player_is_silent() -> None:
    player = AlarmPlayer(None)
    player.start()
    player.stop()
    assert player.state is PlayerState.IDLE
