# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import threading
import time
from collections.abc import Callable

import mido

from .errors import SequencerStateError
from bgmusic.app_utils import Logger

logger = Logger("Sequencer")

type Receiver = Callable[[mido.Message], None]


class MidiSequencer:
    """
    Software MIDI sequencer.

    Replays the timed events of a loaded mido.MidiFile against a connected
    receiver (usually a synthesizer), optionally looping. Playback runs in a
    background thread; meta messages are consumed for timing only and never
    transmitted.
    """

    LOOP_CONTINUOUSLY = -1
    """Loop count value for endless repetition."""

    ALL_NOTES_OFF = 123
    """Controller sent to every channel when playback is halted."""

    def __init__(self, channels: int = 16, stop_timeout: float = 2.0):
        """
        Initialize the sequencer.

        Args:
            channels (int): Number of MIDI channels silenced on stop. Default: 16.
            stop_timeout (float): Seconds to wait for the playback thread to exit
                on stop. Default: 2.0.
        """
        self.name = self.__class__.__name__
        self.channels = channels
        self.stop_timeout = stop_timeout

        self._seq_lock = threading.RLock()
        self._is_open = False
        self._receiver: Receiver | None = None
        self._sequence: mido.MidiFile | None = None
        self._loop_count = 0

        self._halt = threading.Event()
        self._playback_thread: threading.Thread | None = None

    def open(self) -> None:
        """Open the sequencer. Opening an already open sequencer does nothing."""
        with self._seq_lock:
            if self._is_open:
                return
            self._is_open = True
            logger.info(f"{self.name} opened")

    def close(self) -> None:
        """Stop playback if running and close the sequencer."""
        with self._seq_lock:
            if not self._is_open:
                return
            self.stop()
            self._sequence = None
            self._is_open = False
            logger.info(f"{self.name} closed")

    def is_open(self) -> bool:
        """Check if the sequencer is open."""
        return self._is_open

    def connect(self, receiver: Receiver | None) -> None:
        """
        Connect the sequencer transmitter to a receiver.

        Args:
            receiver (Receiver): Callable accepting every transmitted mido.Message,
                or None to disconnect.
        """
        with self._seq_lock:
            self._receiver = receiver

    def set_sequence(self, sequence: mido.MidiFile) -> None:
        """
        Install the sequence to play.

        Args:
            sequence (mido.MidiFile): The decoded track.

        Raises:
            SequencerStateError: If the sequencer is closed or currently playing.
        """
        with self._seq_lock:
            if not self._is_open:
                raise SequencerStateError(f"{self.name} is not open")
            if self.is_running():
                raise SequencerStateError(f"Cannot replace the sequence while {self.name} is running")
            self._sequence = sequence

    def get_sequence(self) -> mido.MidiFile | None:
        """Get the installed sequence, if any."""
        return self._sequence

    @property
    def loop_count(self) -> int:
        """
        Get or set how many extra times the sequence is repeated.

        0 plays the sequence once, n plays it n + 1 times and
        MidiSequencer.LOOP_CONTINUOUSLY repeats it until stopped.

        Raises:
            ValueError: If the loop count is invalid.
        """
        return self._loop_count

    @loop_count.setter
    def loop_count(self, count: int):
        if count < 0 and count != self.LOOP_CONTINUOUSLY:
            raise ValueError(f"Invalid loop count '{count}'. Must be non-negative or LOOP_CONTINUOUSLY")
        self._loop_count = count

    def set_loop_count(self, count: int) -> None:
        """Same as setting the loop_count property."""
        self.loop_count = count

    def start(self) -> None:
        """
        Start playing the installed sequence from the beginning.

        Starting a running sequencer does nothing.

        Raises:
            SequencerStateError: If the sequencer is closed, or has no sequence or receiver.
        """
        with self._seq_lock:
            if not self._is_open:
                raise SequencerStateError(f"{self.name} is not open")
            if self._sequence is None:
                raise SequencerStateError(f"No sequence installed in {self.name}")
            if self._receiver is None:
                raise SequencerStateError(f"{self.name} transmitter is not connected")
            if self.is_running():
                return

            self._halt = threading.Event()
            self._playback_thread = threading.Thread(
                target=self._playback_loop,
                args=(self._sequence, self._loop_count, self._receiver, self._halt),
                daemon=True,
                name="MidiSequencer-Playback",
            )
            self._playback_thread.start()

    def stop(self) -> None:
        """Halt playback and silence every channel. Stopping an idle sequencer does nothing."""
        with self._seq_lock:
            thread = self._playback_thread
            if thread is None:
                return

            self._halt.set()
            if thread is not threading.current_thread():
                thread.join(timeout=self.stop_timeout)
                if thread.is_alive():
                    logger.warning("Playback thread did not terminate in time")
            self._playback_thread = None
            self._all_notes_off()

    def is_running(self) -> bool:
        """Check if a sequence is currently being played."""
        thread = self._playback_thread
        return thread is not None and thread.is_alive() and not self._halt.is_set()

    def _all_notes_off(self):
        if self._receiver is None:
            return
        for channel in range(self.channels):
            try:
                self._receiver(mido.Message("control_change", channel=channel, control=self.ALL_NOTES_OFF, value=0))
            except Exception as e:
                logger.warning(f"Failed to silence channel {channel}: {e}")
                return

    def _playback_loop(self, sequence: mido.MidiFile, loop_count: int, receiver: Receiver, halt: threading.Event):
        """Main playback loop running in background thread."""
        logger.debug("Sequencer playback loop started")

        passes = 0
        while not halt.is_set():
            pass_start = time.monotonic()
            offset = 0.0
            for msg in sequence:
                offset += msg.time
                delay = pass_start + offset - time.monotonic()
                if halt.wait(delay if delay > 0 else 0):
                    break
                if msg.is_meta:
                    continue
                try:
                    receiver(msg)
                except Exception as e:
                    logger.error(f"Error transmitting {msg}: {e}")
                    halt.set()
                    break

            if halt.is_set():
                break
            if offset == 0.0:
                # Zero-length sequence, nothing to repeat
                break
            if loop_count != self.LOOP_CONTINUOUSLY and passes >= loop_count:
                break
            passes += 1

        logger.debug("Sequencer playback loop terminated")
