# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
MIDI Player Volume Example

Fades a looping track out by posting volume adjustments, then in again.
Volume levels are logarithmic: 0 is full scale, -1200 is about a quarter.
"""

import time

from bgmusic.app_bricks.midi_player import MidiPlayer

with MidiPlayer() as player:
    player.play("theme.mid")
    time.sleep(3)

    for level in range(0, -1201, -100):
        player.set_volume(level)
        time.sleep(0.2)  # Keep above the poll interval so no step is overwritten

    for level in range(-1200, 1, 100):
        player.set_volume(level)
        time.sleep(0.2)

    time.sleep(3)
