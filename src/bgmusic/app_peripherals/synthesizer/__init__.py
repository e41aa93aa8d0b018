# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from .synthesizer import Synthesizer
from .base_synthesizer import BaseSynthesizer, MIDI_CHANNELS
from .alsa_synthesizer import ALSASynthesizer
from .mido_synthesizer import MidoSynthesizer
from .errors import *

__all__ = [
    "Synthesizer",
    "BaseSynthesizer",
    "ALSASynthesizer",
    "MidoSynthesizer",
    "MIDI_CHANNELS",
    "SynthesizerError",
    "SynthesizerOpenError",
    "SynthesizerWriteError",
    "SynthesizerConfigError",
]
