# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Hardware Synthesizer Example

Drives a USB MIDI sound module through its raw ALSA device and switches
between two tracks.
"""

import time

from bgmusic.app_bricks.midi_player import MidiPlayer
from bgmusic.app_peripherals.synthesizer import Synthesizer

with MidiPlayer(device=Synthesizer.USB_MIDI_1) as player:
    player.play("intro.mid", loop=False, volume=-200)
    time.sleep(8)
    player.play("theme.mid")
    time.sleep(20)
