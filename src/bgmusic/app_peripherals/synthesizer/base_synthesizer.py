# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

import mido

from .errors import SynthesizerConfigError, SynthesizerOpenError, SynthesizerWriteError
from bgmusic.app_utils import Logger

logger = Logger("Synthesizer")

MIDI_CHANNELS = 16

type Receiver = Callable[[mido.Message], None]


class BaseSynthesizer(ABC):
    """
    Abstract base class for synthesizer implementations.

    A synthesizer is the rendering end of the MIDI chain: it receives channel
    messages (notes, controllers, program changes) and turns them into audible
    output. This class defines the common interface that all synthesizer
    implementations must follow, regardless of how the messages reach the
    rendering engine (raw ALSA device, rtmidi port, ...).

    Messages are always mido.Message instances.
    """

    def __init__(self, channels: int = MIDI_CHANNELS):
        """
        Initialize the synthesizer base.

        Args:
            channels (int): Number of MIDI channels addressed by channel-wide
                operations such as volume changes. Default: 16.

        Raises:
            SynthesizerConfigError: If the provided configuration is not valid.
        """
        if not (1 <= channels <= MIDI_CHANNELS):
            raise SynthesizerConfigError(f"Number of channels must be between 1 and {MIDI_CHANNELS}")
        self._channels = channels

        self.logger = logger  # This will be overridden by subclasses if needed
        self.name = self.__class__.__name__  # This will be overridden by subclasses if needed

        self._synth_lock = threading.Lock()
        self._is_open = False

    @property
    def channels(self) -> range:
        """Read-only property with the MIDI channel numbers (0-based) driven by this synthesizer."""
        return range(self._channels)

    def open(self) -> None:
        """
        Open the synthesizer device.

        Opening an already open synthesizer does nothing.

        Raises:
            SynthesizerOpenError: If the device can't be opened.
        """
        with self._synth_lock:
            if self._is_open:
                return

            self.logger.info(f"Opening {self.name}...")
            try:
                self._open_synth()
            except SynthesizerOpenError:
                raise
            except Exception as e:
                raise SynthesizerOpenError(f"Failed to open {self.name}: {e}") from e

            self._is_open = True
            self.logger.info(f"Successfully opened {self.name}")

    def close(self) -> None:
        """Close the synthesizer and release the device."""
        with self._synth_lock:
            if not self._is_open:
                return

            self.logger.info(f"Closing {self.name}...")
            try:
                self._close_synth()
                self.logger.info(f"Successfully closed {self.name}")
            except Exception as e:
                self.logger.warning(f"Failed to close synthesizer: {e}")
            finally:
                self._is_open = False

    def is_open(self) -> bool:
        """Check if the synthesizer is open."""
        return self._is_open

    def send(self, message: mido.Message) -> None:
        """
        Send a MIDI message to the synthesizer.

        Args:
            message (mido.Message): The message to render.

        Raises:
            SynthesizerWriteError: If the synthesizer is not open or the write fails.
        """
        with self._synth_lock:
            if not self._is_open:
                raise SynthesizerWriteError(f"Attempted to write to {self.name} before opening it.")

            try:
                self._write_message(message)
            except SynthesizerWriteError:
                raise
            except Exception as e:
                raise SynthesizerWriteError(f"Failed to write {message} to {self.name}: {e}") from e

    def get_receiver(self) -> Receiver:
        """
        Get the receiving end of this synthesizer.

        The receiver is what a sequencer transmitter gets connected to.

        Returns:
            Receiver: A callable accepting a mido.Message.
        """
        return self.send

    def set_channel_controller(self, channel: int, controller: int, value: int) -> None:
        """
        Set a controller on a single MIDI channel.

        Args:
            channel (int): MIDI channel (0-15).
            controller (int): Controller number (0-127), e.g. 7 for channel volume.
            value (int): Controller value (0-127).

        Raises:
            ValueError: If any argument is out of range.
            SynthesizerWriteError: If the synthesizer is not open or the write fails.
        """
        if channel not in self.channels:
            raise ValueError(f"Channel {channel} out of range for {self.name}")
        if not (0 <= controller <= 127):
            raise ValueError(f"Invalid controller number: {controller}")
        if not (0 <= value <= 127):
            raise ValueError(f"Invalid controller value: {value}")

        self.send(mido.Message("control_change", channel=channel, control=controller, value=value))

    @abstractmethod
    def _open_synth(self):
        """Open the synthesizer connection. Must be implemented by subclasses."""
        pass

    @abstractmethod
    def _close_synth(self):
        """Close the synthesizer connection. Must be implemented by subclasses."""
        pass

    @abstractmethod
    def _write_message(self, message: mido.Message):
        """Write a single message to the synthesizer. Must be implemented by subclasses."""
        pass

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
