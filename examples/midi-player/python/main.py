# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

# EXAMPLE_NAME = "Background music"
import signal
import sys
import threading
from pathlib import Path

from bgmusic.app_bricks.midi_player import MidiPlayer, DeviceUnavailableError

MUSIC_DIR = Path(__file__).parent / "music"
PLAYLIST = ["menu.mid", "level1.mid", "boss.mid"]

# Initialize the brick
player = MidiPlayer()
done = threading.Event()


def next_scene(index: int):
    track = MUSIC_DIR / PLAYLIST[index % len(PLAYLIST)]
    print(f"🎵: {track.name}")
    player.post_command(str(track), volume=-300)


signal.signal(signal.SIGINT, lambda *_: done.set())

try:
    player.start()
except DeviceUnavailableError as e:
    print(f"❌: {e}")
    sys.exit(1)

scene = 0
next_scene(scene)
while not done.wait(15):
    scene += 1
    next_scene(scene)

player.stop()  # Also halts the current track
