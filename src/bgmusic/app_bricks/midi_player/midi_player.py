# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import os
import threading
from pathlib import Path

from bgmusic.app_utils import Logger

from .commands import Command, Play, Stop, VolumeAdjust, decode_command
from .engine import PlaybackEngine
from .mailbox import Mailbox
from .poller import CommandPoller
from .state import PlayerState

logger = Logger("MidiPlayer")


class MidiPlayer:
    """
    Background MIDI music player.

    Requests are posted from any thread and return immediately; a single
    background thread picks up the latest request every poll interval and
    drives the sequencer and synthesizer. Requests posted faster than that
    overwrite each other, only the most recent one is executed.

    Example:
        ```python
        with MidiPlayer() as player:
            player.post_command("music/theme.mid", volume=0)  # play and loop
            player.post_command("voladjust", volume=-600)  # quieter
            player.post_command("stop")
        ```
    """

    POLL_INTERVAL = 0.1
    """Seconds between two mailbox checks when idle."""

    LOAD_TIMEOUT = 5.0
    """Maximum seconds allowed to read and decode a track."""

    SHUTDOWN_GRACE = 2.0
    """Extra seconds stop() waits for the player thread beyond a full track load."""

    def __init__(
        self,
        device: str | int | None = os.getenv("MIDI_OUTPUT_DEVICE") or None,
        poll_interval: float = POLL_INTERVAL,
        load_timeout: float = LOAD_TIMEOUT,
        engine: PlaybackEngine | None = None,
    ):
        """
        Initialize the MIDI player. Devices are acquired on start().

        Args:
            device (str | int, optional): Synthesizer device, see Synthesizer. Defaults
                to the MIDI_OUTPUT_DEVICE environment variable, or the first mido
                output port if unset.
            poll_interval (float): Seconds between mailbox checks (default: 0.1).
            load_timeout (float): Maximum seconds to load a track (default: 5.0).
            engine (PlaybackEngine, optional): Pre-configured engine. If provided,
                device and load_timeout are ignored.

        Raises:
            ValueError: If poll_interval or load_timeout is not positive.
        """
        if poll_interval <= 0:
            raise ValueError(f"Invalid poll interval '{poll_interval}'. Must be positive")

        self.mailbox = Mailbox()
        self.engine = engine if engine is not None else PlaybackEngine(device=device, load_timeout=load_timeout)
        self.poll_interval = poll_interval

        self._lifecycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._poller_thread: threading.Thread | None = None

    @property
    def state(self) -> PlayerState:
        """Current player state. Only the player thread mutates it."""
        return self.engine.state

    def start(self) -> None:
        """
        Acquire the MIDI devices and start the player thread.

        Starting a running player logs a warning and does nothing.

        Raises:
            DeviceUnavailableError: If the sequencer or synthesizer can't be opened.
                The player thread is not started.
        """
        with self._lifecycle_lock:
            if self.is_running():
                logger.warning("MidiPlayer is already running")
                return

            logger.info("Starting MidiPlayer...")
            try:
                self.engine.open()
            except Exception as e:
                logger.error(f"MIDI unavailable: {e}")
                raise

            # A fresh event per run, so a thread left over from a previous run never resumes
            self._stop_event = threading.Event()
            poller = CommandPoller(self.mailbox, self.engine, poll_interval=self.poll_interval)
            self._poller_thread = threading.Thread(
                target=poller.run, args=(self._stop_event,), daemon=True, name="MidiPlayer-Poller"
            )
            self._poller_thread.start()
            logger.info("MIDI player initialized")

    def stop(self) -> None:
        """
        Stop the player thread and release the MIDI devices.

        The thread is given time to finish a track load in progress. If it is
        still alive after that, the devices are left open and the player keeps
        reporting as running so that a later stop() can retry.

        Stopping a player that is not running logs a warning and does nothing.
        """
        with self._lifecycle_lock:
            if self._poller_thread is None:
                logger.warning("MidiPlayer is not running")
                return

            logger.info("Stopping MidiPlayer...")
            self._stop_event.set()
            self._poller_thread.join(timeout=self._join_timeout())
            if self._poller_thread.is_alive():
                logger.warning("Player thread did not terminate in time, MIDI devices left open")
                return
            self._poller_thread = None

            self.engine.close()
            self.mailbox.clear()
            logger.info("MIDI player stopped")

    def _join_timeout(self) -> float:
        # Worst case for the player thread: one bounded load plus one poll wait
        return self.engine.load_timeout + self.poll_interval + self.SHUTDOWN_GRACE

    def is_running(self) -> bool:
        """Check if the player thread is alive."""
        return self._poller_thread is not None and self._poller_thread.is_alive()

    def post(self, command: Command) -> None:
        """
        Post a command for the player thread, replacing any pending one.

        Never blocks on playback; safe to call from any thread, running or not.
        """
        self.mailbox.post(command)

    def post_command(self, track_or_keyword: str, volume: int = 0) -> None:
        """
        Post a request in string form.

        Args:
            track_or_keyword (str): "stop" to stop playback, "voladjust" to change
                only the volume, or the path of a track to play and loop.
            volume (int): Volume level, 0 for full scale and negative for quieter
                (typically -1200 to 0).

        Raises:
            ValueError: If track_or_keyword is empty.
        """
        self.post(decode_command(track_or_keyword, volume))

    def play(self, track: str | Path, loop: bool = True, volume: int | None = None) -> None:
        """Post a request to play a track."""
        self.post(Play(str(track), loop=loop, volume=volume))

    def stop_playback(self) -> None:
        """Post a request to stop the current track."""
        self.post(Stop())

    def set_volume(self, level: int) -> None:
        """Post a request to change the volume level."""
        self.post(VolumeAdjust(level))

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit."""
        self.stop()
        return False
