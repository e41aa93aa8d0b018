# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Basic MIDI Player Example

Plays a MIDI file in a loop on the first MIDI output port, then stops it.
"""

import time

from bgmusic.app_bricks.midi_player import MidiPlayer

with MidiPlayer() as player:
    player.post_command("theme.mid", volume=0)  # Play and loop
    time.sleep(10)
    player.post_command("stop")
    time.sleep(0.5)
