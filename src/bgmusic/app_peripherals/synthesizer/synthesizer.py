# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from .base_synthesizer import BaseSynthesizer, MIDI_CHANNELS


class Synthesizer:
    """
    Unified Synthesizer class that can be configured for different device types.

    This class serves as both a factory and a wrapper, automatically creating
    the appropriate synthesizer implementation based on the provided device.

    Supports:
        - Raw ALSA MIDI devices (/dev/snd/midiC*D*, "hw:X,Y")
        - mido output ports (software synthesizers and hardware ports)
    """

    # =============================================================================
    # Predefined devices
    # =============================================================================
    USB_MIDI_1 = "usb:1"
    """Shorthand for the first raw ALSA MIDI device available."""
    USB_MIDI_2 = "usb:2"
    """Shorthand for the second raw ALSA MIDI device available."""

    # =============================================================================
    # MIDI constants
    # =============================================================================
    CHANNELS_ALL = MIDI_CHANNELS
    """All 16 MIDI channels"""

    def __new__(cls, device: str | int | None = None, channels: int = CHANNELS_ALL) -> BaseSynthesizer:
        """
        Create a synthesizer instance based on the device type.

        Args:
            device (str | int, optional): Synthesizer device identifier. Supports:
                - str: ALSA device name in "hw:X,Y" format
                - str: ALSA device file path (e.g. "/dev/snd/midiC1D0")
                - str: Synthesizer.USB_MIDI_x macros
                - int: raw ALSA MIDI device ordinal index
                - str: mido output port name, full or partial
                - None: first mido output port available
            channels (int): Number of MIDI channels. Default: 16.

        Returns:
            BaseSynthesizer: Appropriate synthesizer implementation instance

        Raises:
            SynthesizerConfigError: If no device matches or parameters are invalid

        Examples:
            ```python
            synth = Synthesizer()  # First mido output port
            synth = Synthesizer("FluidSynth")  # mido port matched by partial name
            synth = Synthesizer(Synthesizer.USB_MIDI_1)  # First raw ALSA MIDI device
            synth = Synthesizer("hw:1,0")
            synth = Synthesizer("/dev/snd/midiC1D0")
            ```
        """
        # Imported here to avoid circular dependency
        from .alsa_synthesizer import ALSASynthesizer
        from .mido_synthesizer import MidoSynthesizer

        if isinstance(device, int) or (
            isinstance(device, str) and (device.startswith(("hw:", "/dev/")) or device in (cls.USB_MIDI_1, cls.USB_MIDI_2))
        ):
            return ALSASynthesizer(device=device, channels=channels)

        return MidoSynthesizer(port_name=device, channels=channels)
