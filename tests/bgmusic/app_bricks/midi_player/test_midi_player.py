# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import threading
import time
from unittest.mock import patch

import pytest

from bgmusic.app_bricks.midi_player import (
    DeviceUnavailableError,
    MidiPlayer,
    PlaybackEngine,
    Play,
    Stop,
    Transport,
    VolumeAdjust,
)
from bgmusic.app_bricks.midi_player.volume import CHANNEL_VOLUME_CC
from bgmusic.app_peripherals.sequencer import MidiSequencer
from conftest import FakeSynthesizer, wait_until, write_midi

POLL_INTERVAL = 0.02


def _poller_threads() -> list[threading.Thread]:
    return [t for t in threading.enumerate() if t.name == "MidiPlayer-Poller" and t.is_alive()]


@pytest.fixture
def player(fake_synth):
    engine = PlaybackEngine(synthesizer=fake_synth, sequencer=MidiSequencer(stop_timeout=1.0), load_timeout=2.0)
    midi_player = MidiPlayer(poll_interval=POLL_INTERVAL, engine=engine)
    yield midi_player
    if midi_player.is_running():
        midi_player.stop()


class TestMidiPlayerLifecycle:
    def test_start_stop(self, player, fake_synth):
        assert not player.is_running()

        player.start()
        assert player.is_running()
        assert player.engine.is_open()
        assert fake_synth.is_open()

        player.stop()
        assert not player.is_running()
        assert not player.engine.is_open()
        assert not fake_synth.is_open()

    def test_double_start(self, player, fake_synth):
        """Test that starting a running player does nothing."""
        player.start()
        player.start()

        assert player.is_running()
        assert fake_synth.open_count == 1

    def test_stop_when_not_running(self, player):
        """Test that stopping a player that never started does not crash."""
        player.stop()

        assert not player.is_running()

    def test_multiple_start_stop(self, player):
        for _ in range(3):
            player.start()
            assert player.is_running()
            player.stop()
            assert not player.is_running()

    def test_device_unavailable(self):
        """Test that an unavailable device is raised and no thread is started."""
        engine = PlaybackEngine(synthesizer=FakeSynthesizer(fail_open=True), sequencer=MidiSequencer())
        player = MidiPlayer(poll_interval=POLL_INTERVAL, engine=engine)

        with pytest.raises(DeviceUnavailableError):
            player.start()

        assert not player.is_running()

    def test_stop_is_prompt(self, fake_synth):
        """Test that stop() returns within about one poll interval."""
        engine = PlaybackEngine(synthesizer=fake_synth, sequencer=MidiSequencer())
        player = MidiPlayer(poll_interval=0.5, engine=engine)
        player.start()

        started = time.monotonic()
        player.stop()

        assert time.monotonic() - started < 0.6

    def test_stop_releases_playing_devices(self, player, theme_mid):
        player.start()
        player.post_command(str(theme_mid))
        assert wait_until(lambda: player.engine.is_playing())

        player.stop()

        assert not player.engine.is_playing()
        assert player.state.transport == Transport.STOPPED

    def test_stop_during_slow_load_then_restart(self, fake_synth, theme_mid):
        """Test that stop() waits out a slow track load and restart leaves a single player thread."""
        loading = threading.Event()
        release = threading.Event()

        def slow_load(path):
            loading.set()
            release.wait(3.0)

        engine = PlaybackEngine(synthesizer=fake_synth, sequencer=MidiSequencer(stop_timeout=1.0), load_timeout=0.3)
        player = MidiPlayer(poll_interval=POLL_INTERVAL, engine=engine)

        try:
            with patch("bgmusic.app_bricks.midi_player.engine.load_track", side_effect=slow_load):
                player.start()
                player.post_command(str(theme_mid))
                assert loading.wait(2.0)

                player.stop()

                assert not player.is_running()
                assert not engine.is_open()
                assert engine.state.transport == Transport.IDLE

                player.start()
                time.sleep(POLL_INTERVAL * 5)

                assert len(_poller_threads()) == 1
                assert fake_synth.of_type("note_on") == []
        finally:
            release.set()
            if player.is_running():
                player.stop()

    def test_stop_keeps_devices_while_thread_is_busy(self, fake_synth):
        """Test that devices are not released under a player thread that is still working."""
        busy = threading.Event()
        release = threading.Event()

        def blocking_stop():
            busy.set()
            release.wait(5.0)

        engine = PlaybackEngine(synthesizer=fake_synth, sequencer=MidiSequencer(stop_timeout=1.0), load_timeout=0.1)
        player = MidiPlayer(poll_interval=POLL_INTERVAL, engine=engine)
        player.SHUTDOWN_GRACE = 0.1

        try:
            player.start()
            engine.stop = blocking_stop
            player.stop_playback()
            assert busy.wait(2.0)

            player.stop()

            assert player.is_running()
            assert engine.is_open()
            assert fake_synth.is_open()

            player.start()
            assert len(_poller_threads()) == 1
        finally:
            release.set()

        player.stop()
        assert not player.is_running()
        assert not engine.is_open()
        assert _poller_threads() == []

    def test_context_manager(self, player):
        with player as p:
            assert p.is_running()
        assert not player.is_running()

    def test_invalid_poll_interval(self):
        with pytest.raises(ValueError):
            MidiPlayer(poll_interval=-1, engine=PlaybackEngine(synthesizer=FakeSynthesizer()))

    def test_device_forwarded_to_engine(self):
        """Test that device settings reach the engine it creates."""
        with patch("bgmusic.app_bricks.midi_player.midi_player.PlaybackEngine") as mock_engine_cls:
            MidiPlayer(device="hw:1,0", load_timeout=3.0)

        mock_engine_cls.assert_called_once_with(device="hw:1,0", load_timeout=3.0)


class TestMidiPlayerProducerApi:
    def test_post_command_never_blocks(self, player):
        """Test that posting works even when the player is not running."""
        player.post_command("theme.mid", volume=-100)
        player.post_command("voladjust", volume=-300)

        assert player.mailbox.peek() == VolumeAdjust(-300)

    def test_convenience_methods(self, player):
        player.play("a.mid", loop=False, volume=-50)
        assert player.mailbox.take() == Play("a.mid", loop=False)

        player.stop_playback()
        assert player.mailbox.take() == Stop()

        player.set_volume(-900)
        assert player.mailbox.take() == VolumeAdjust(-900)

    def test_empty_command_rejected(self, player):
        with pytest.raises(ValueError):
            player.post_command("")


class TestMidiPlayerScenarios:
    def test_play_volume_stop(self, player, fake_synth, theme_mid):
        """Test the play, volume change and stop sequence end to end."""
        player.start()

        player.post_command(str(theme_mid), volume=0)
        assert wait_until(lambda: player.state.transport == Transport.PLAYING)
        assert player.state.current_track == str(theme_mid)
        assert wait_until(lambda: fake_synth.of_type("note_on"))

        player.post_command("voladjust", volume=-600)
        assert wait_until(lambda: player.state.current_volume == -600)
        assert wait_until(lambda: fake_synth.controller_values(CHANNEL_VOLUME_CC)[-16:] == [(c, 64) for c in range(16)])
        assert player.state.transport == Transport.PLAYING

        player.post_command("stop")
        assert wait_until(lambda: player.state.transport == Transport.STOPPED)
        assert not player.engine.is_playing()

    def test_steady_state_reposting_does_not_restart(self, player, fake_synth, tmp_path):
        """Test that a producer re-posting its desired track every tick plays it once."""
        track = write_midi(tmp_path / "long.mid", notes=(60,), ticks_per_note=480 * 20)
        player.start()

        for _ in range(10):
            player.post_command(str(track))
            time.sleep(POLL_INTERVAL)

        assert wait_until(lambda: fake_synth.of_type("note_on"))
        time.sleep(POLL_INTERVAL * 3)
        assert len(fake_synth.of_type("note_on")) == 1

    def test_overwritten_command_is_never_played(self, player, tmp_path):
        """Test that a command overwritten before the next tick is lost."""
        a_mid = write_midi(tmp_path / "a.mid")
        b_mid = write_midi(tmp_path / "b.mid")
        played = []
        original_play = player.engine.play

        def recording_play(track, loop=True, volume_level=None):
            played.append(track)
            original_play(track, loop, volume_level=volume_level)

        player.engine.play = recording_play
        # Both posts land before the player thread exists
        player.post_command(str(a_mid))
        player.post_command(str(b_mid))
        player.start()

        assert wait_until(lambda: player.state.current_track == str(b_mid))
        time.sleep(POLL_INTERVAL * 3)
        assert played == [str(b_mid)]

    def test_missing_track_keeps_player_alive(self, player, theme_mid, tmp_path):
        """Test that a failing track does not end the player thread."""
        player.start()

        player.post_command(str(tmp_path / "missing.mid"))
        time.sleep(POLL_INTERVAL * 5)
        assert player.is_running()
        assert player.state.transport == Transport.IDLE

        player.post_command(str(theme_mid))
        assert wait_until(lambda: player.state.transport == Transport.PLAYING)

    def test_volume_adjust_carries_over_to_next_track(self, player, fake_synth, theme_mid):
        player.start()
        player.post_command("voladjust", volume=-1200)
        assert wait_until(lambda: player.state.current_volume == -1200)

        player.play(theme_mid)

        assert wait_until(lambda: player.state.transport == Transport.PLAYING)
        assert fake_synth.controller_values(CHANNEL_VOLUME_CC)[-16:] == [(c, 32) for c in range(16)]
