# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from dataclasses import dataclass
from enum import Enum

from .commands import Command


class Transport(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    STOPPED = "stopped"


@dataclass
class PlayerState:
    """Playback state, owned by the engine and only mutated from the player thread."""

    current_track: str | None = None
    current_volume: int = 0
    transport: Transport = Transport.IDLE
    last_dispatched_command: Command | None = None
