# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from .midi_player import MidiPlayer
from .engine import PlaybackEngine
from .poller import CommandPoller
from .mailbox import Mailbox
from .commands import Command, Play, Stop, VolumeAdjust, decode_command
from .state import PlayerState, Transport
from .tracks import load_track
from .volume import level_to_gain, gain_to_controller, level_to_controller
from .errors import *

__all__ = [
    "MidiPlayer",
    "PlaybackEngine",
    "CommandPoller",
    "Mailbox",
    "Command",
    "Play",
    "Stop",
    "VolumeAdjust",
    "decode_command",
    "PlayerState",
    "Transport",
    "load_track",
    "level_to_gain",
    "gain_to_controller",
    "level_to_controller",
    "MidiPlayerError",
    "DeviceUnavailableError",
    "PlaybackError",
    "TrackNotFoundError",
    "TrackDecodeError",
    "TrackLoadTimeoutError",
]
