# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from .sequencer import MidiSequencer
from .errors import *

__all__ = [
    "MidiSequencer",
    "SequencerError",
    "SequencerStateError",
]
