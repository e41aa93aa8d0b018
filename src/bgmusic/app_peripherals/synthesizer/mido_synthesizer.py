# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import mido

from .base_synthesizer import BaseSynthesizer, MIDI_CHANNELS
from .errors import SynthesizerConfigError, SynthesizerOpenError
from bgmusic.app_utils import Logger

logger = Logger("MidoSynthesizer")


class MidoSynthesizer(BaseSynthesizer):
    """
    Synthesizer reached through a mido output port.

    This covers software synthesizers (FluidSynth, TiMidity, the OS built-in
    wavetable synth) and any hardware port visible to the mido backend.
    """

    def __init__(self, port_name: str | None = None, channels: int = MIDI_CHANNELS):
        """
        Initialize the mido synthesizer.

        Args:
            port_name (str, optional): Output port name. Exact names are used as-is,
                otherwise the first port whose name contains it (case-insensitive)
                is selected. If None, the first available output port is used.
            channels (int): Number of MIDI channels. Default: 16.

        Raises:
            SynthesizerConfigError: If no output port matches.
        """
        super().__init__(channels=channels)
        self.logger = logger
        self.port_name = self._resolve_port(port_name)
        self.name = f"MidoSynthesizer({self.port_name})"
        self._port = None

    @staticmethod
    def list_devices() -> list[str]:
        """
        List available MIDI output ports.

        Returns:
            list[str]: Port names as reported by the mido backend.
        """
        try:
            return list(mido.get_output_names())
        except Exception as e:
            logger.warning(f"Unable to list MIDI output ports: {e}")
            return []

    def _resolve_port(self, port_name: str | None) -> str:
        available = self.list_devices()
        if not available:
            raise SynthesizerConfigError("No MIDI output ports found.")

        if port_name is None:
            return available[0]

        if port_name in available:
            return port_name

        for name in available:
            if port_name.lower() in name.lower():
                logger.info(f"Matched port '{port_name}' to '{name}'")
                return name

        raise SynthesizerConfigError(f"MIDI output port '{port_name}' not found. Available: {available}")

    def _open_synth(self):
        try:
            self._port = mido.open_output(self.port_name)
        except (OSError, IOError) as e:
            raise SynthesizerOpenError(f"Failed to open MIDI output port '{self.port_name}': {e}") from e

    def _close_synth(self):
        if self._port:
            self._port.close()
            self._port = None

    def _write_message(self, message: mido.Message):
        self._port.send(message)
