# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from pathlib import Path

import mido

from bgmusic.app_peripherals.sequencer import MidiSequencer, SequencerError
from bgmusic.app_peripherals.synthesizer import BaseSynthesizer, Synthesizer, SynthesizerError
from bgmusic.app_utils import Logger

from . import volume
from .errors import DeviceUnavailableError, PlaybackError, TrackLoadTimeoutError
from .state import PlayerState, Transport
from .tracks import load_track

logger = Logger("PlaybackEngine")


class PlaybackEngine:
    """
    Owns the sequencer and synthesizer and drives them on behalf of the player.

    All methods are meant to be called from a single thread (the player thread);
    the engine state is not protected against concurrent mutation.
    """

    def __init__(
        self,
        device: str | int | None = None,
        synthesizer: BaseSynthesizer | None = None,
        sequencer: MidiSequencer | None = None,
        load_timeout: float = 5.0,
    ):
        """
        Initialize the engine. No device is touched until open() is called.

        Args:
            device (str | int, optional): Synthesizer device passed to the
                Synthesizer factory when no synthesizer instance is provided.
            synthesizer (BaseSynthesizer, optional): Pre-configured synthesizer.
                If None, one is created from device on open().
            sequencer (MidiSequencer, optional): Pre-configured sequencer. If None,
                a MidiSequencer is created on open().
            load_timeout (float): Maximum seconds allowed to read and decode a track.

        Raises:
            ValueError: If load_timeout is not positive.
        """
        if load_timeout <= 0:
            raise ValueError(f"Invalid load timeout '{load_timeout}'. Must be positive")

        self.device = device
        self.load_timeout = load_timeout

        self._provided_synthesizer = synthesizer
        self._provided_sequencer = sequencer
        self.synthesizer: BaseSynthesizer | None = synthesizer
        self.sequencer: MidiSequencer | None = sequencer

        self._state = PlayerState()
        self._loader: ThreadPoolExecutor | None = None
        self._is_open = False

    @property
    def state(self) -> PlayerState:
        """Current player state."""
        return self._state

    def is_open(self) -> bool:
        """Check if both devices are acquired."""
        return self._is_open

    def is_playing(self) -> bool:
        """Check if the sequencer is currently playing a track."""
        return self._is_open and self.sequencer is not None and self.sequencer.is_running()

    def open(self) -> None:
        """
        Acquire the sequencer and the synthesizer and connect them.

        Either both devices end up open or none is. Opening an open engine does nothing.

        Raises:
            DeviceUnavailableError: If a device can't be created or opened.
        """
        if self._is_open:
            return

        sequencer = self._provided_sequencer
        synthesizer = self._provided_synthesizer
        try:
            if sequencer is None:
                sequencer = MidiSequencer()
            sequencer.open()
            if synthesizer is None:
                synthesizer = Synthesizer(self.device)
            synthesizer.open()
        except (SequencerError, SynthesizerError) as e:
            if synthesizer is not None:
                synthesizer.close()
            if sequencer is not None:
                sequencer.close()
            raise DeviceUnavailableError(f"MIDI unavailable: {e}") from e

        sequencer.connect(synthesizer.get_receiver())
        self.sequencer = sequencer
        self.synthesizer = synthesizer
        self._loader = ThreadPoolExecutor(max_workers=1, thread_name_prefix="TrackLoader")
        self._state = PlayerState(current_volume=self._state.current_volume)
        self._is_open = True

        logger.info(f"Sequencer: {sequencer.name}")
        logger.info(f"Synthesizer: {synthesizer.name}")

    def close(self) -> None:
        """Stop playback and release both devices. Closing a closed engine does nothing."""
        if not self._is_open:
            return

        try:
            self.sequencer.close()
        except Exception as e:
            logger.warning(f"Failed to close sequencer: {e}")
        self.sequencer.connect(None)
        self.synthesizer.close()

        self._loader.shutdown(wait=False, cancel_futures=True)
        self._loader = None

        if self._state.transport == Transport.PLAYING:
            self._state.transport = Transport.STOPPED
        self.sequencer = self._provided_sequencer
        self.synthesizer = self._provided_synthesizer
        self._is_open = False

    def play(self, track: str | Path, loop: bool = True, volume_level: int | None = None) -> None:
        """
        Load a track and start playing it, replacing any current playback.

        The track is loaded before anything else is touched: if loading fails the
        current playback and the transport state are left as they were.

        Args:
            track (str | Path): Path of the MIDI file.
            loop (bool): Repeat the track until stopped if True, play it once otherwise.
            volume_level (int, optional): Volume level to use from now on. If None,
                the current volume is re-applied.

        Raises:
            TrackNotFoundError: If the file does not exist.
            TrackDecodeError: If the file is not a valid MIDI file.
            TrackLoadTimeoutError: If loading takes longer than load_timeout.
            PlaybackError: If the engine is closed or the sequencer refuses to start.
        """
        if not self._is_open:
            raise PlaybackError("Playback engine is not open")

        sequence = self._load(track)

        previous_volume = self._state.current_volume
        level = volume_level if volume_level is not None else previous_volume

        try:
            if self.sequencer.is_running():
                self.sequencer.stop()
            self.sequencer.set_sequence(sequence)
            self.sequencer.set_loop_count(MidiSequencer.LOOP_CONTINUOUSLY if loop else 0)
            self.apply_volume(level)
            self.sequencer.start()
        except SequencerError as e:
            # The requested volume only sticks if playback actually started
            self._state.current_volume = previous_volume
            if self._state.transport == Transport.PLAYING:
                self._state.transport = Transport.STOPPED
            raise PlaybackError(f"Failed to start playback of {track}: {e}") from e

        self._state.current_track = str(track)
        self._state.transport = Transport.PLAYING
        logger.info(f"Playing MIDI: {track}" + (" (looping)" if loop else ""))

    def stop(self) -> None:
        """Halt playback. Stopping an idle or stopped engine does nothing."""
        if not self._is_open:
            return

        was_running = self.sequencer.is_running()
        self.sequencer.stop()
        if was_running:
            logger.info("MIDI playback stopped")

        if self._state.transport == Transport.PLAYING:
            self._state.transport = Transport.STOPPED

    def apply_volume(self, level: int) -> None:
        """
        Set the master volume on every synthesizer channel.

        The level is always recorded as the current volume. If the synthesizer is
        not open it is not pushed to the device; it will be applied when the next
        track starts.

        Args:
            level (int): Volume level, 0 for full scale and negative for quieter.
        """
        self._state.current_volume = level

        if self.synthesizer is None or not self.synthesizer.is_open():
            logger.debug(f"Synthesizer not open, volume {level} recorded only")
            return

        try:
            value = volume.apply_volume(self.synthesizer, level)
            logger.debug(f"Volume {level} applied as channel volume {value}")
        except SynthesizerError as e:
            logger.error(f"Error setting MIDI volume: {e}")

    def _load(self, track: str | Path) -> mido.MidiFile:
        future = self._loader.submit(load_track, track)
        try:
            return future.result(timeout=self.load_timeout)
        except FutureTimeoutError:
            # The stuck worker can't be interrupted, leave it behind with its executor
            self._loader.shutdown(wait=False, cancel_futures=True)
            self._loader = ThreadPoolExecutor(max_workers=1, thread_name_prefix="TrackLoader")
            raise TrackLoadTimeoutError(f"Loading {track} took longer than {self.load_timeout}s")

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
