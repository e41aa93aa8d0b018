# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import glob
import os
import re

import mido

from .base_synthesizer import BaseSynthesizer, MIDI_CHANNELS
from .errors import SynthesizerConfigError, SynthesizerOpenError
from bgmusic.app_utils import Logger

logger = Logger("ALSASynthesizer")

_RAW_MIDI_GLOB = "/dev/snd/midiC*D*"


class ALSASynthesizer(BaseSynthesizer):
    """
    Synthesizer reached through a raw ALSA MIDI device (/dev/snd/midiC*D*).

    Messages are written byte-wise to the device file, so any USB or on-board
    MIDI synthesizer exposed by ALSA can be driven without extra libraries.
    """

    USB_MIDI_1 = "usb:1"
    USB_MIDI_2 = "usb:2"

    def __init__(self, device: str | int | None = USB_MIDI_1, channels: int = MIDI_CHANNELS):
        """
        Initialize the ALSA synthesizer.

        Args:
            device (str | int, optional): Device identifier. Supports:
                - None or ALSASynthesizer.USB_MIDI_1: first raw MIDI device
                - ALSASynthesizer.USB_MIDI_2: second raw MIDI device
                - int | str: ordinal index (e.g. 0, 1, "0", "1")
                - str: ALSA name in "hw:X,Y" or "hw:X" format
                - str: device file path (e.g. "/dev/snd/midiC1D0")
            channels (int): Number of MIDI channels. Default: 16.

        Raises:
            SynthesizerConfigError: If no device matches the identifier.
        """
        super().__init__(channels=channels)
        self.logger = logger
        self.device_path = self._resolve_device(device)
        self.name = f"ALSASynthesizer({self.device_path})"
        self._fd = None

    @staticmethod
    def list_devices() -> list[str]:
        """
        List available raw ALSA MIDI devices.

        Returns:
            list[str]: Device names in "hw:X,Y" format, sorted by card and device.
        """
        devices = []
        for path in sorted(glob.glob(_RAW_MIDI_GLOB)):
            match = re.search(r"midiC(\d+)D(\d+)$", path)
            if match:
                card, dev = match.groups()
                devices.append(f"hw:{card},{dev}")

        if not devices:
            logger.warning("No MIDI devices found in /dev/snd")
        return devices

    @staticmethod
    def _device_path(hw_name: str) -> str:
        parts = hw_name[3:].split(",")
        card = int(parts[0])
        dev = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        return f"/dev/snd/midiC{card}D{dev}"

    def _resolve_device(self, device: str | int | None) -> str:
        if isinstance(device, str) and device.startswith("/dev/"):
            if not os.path.exists(device):
                raise SynthesizerConfigError(f"MIDI device file '{device}' does not exist")
            return device

        if isinstance(device, str) and device.startswith("hw:"):
            try:
                return self._device_path(device)
            except ValueError as e:
                raise SynthesizerConfigError(f"Invalid ALSA MIDI device name '{device}'") from e

        available = self.list_devices()
        if not available:
            raise SynthesizerConfigError("No ALSA MIDI devices found.")

        if device is None or device == self.USB_MIDI_1:
            index = 0
        elif device == self.USB_MIDI_2:
            index = 1
        elif isinstance(device, int) or (isinstance(device, str) and device.isdigit()):
            index = int(device)
        else:
            raise SynthesizerConfigError(f"Unsupported ALSA MIDI device identifier '{device}'")

        if index >= len(available):
            raise SynthesizerConfigError(f"MIDI device index {index} out of range. Available: {available}")

        return self._device_path(available[index])

    def _open_synth(self):
        try:
            self._fd = open(self.device_path, "wb", buffering=0)
        except OSError as e:
            raise SynthesizerOpenError(f"Failed to open MIDI device {self.device_path}: {e}") from e
        self.logger.info(f"Opened raw ALSA device: {self.device_path}")

    def _close_synth(self):
        if self._fd:
            self._fd.close()
            self._fd = None

    def _write_message(self, message: mido.Message):
        self._fd.write(bytes(message.bin()))
