# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

from dataclasses import dataclass, field

STOP_KEYWORD = "stop"
VOLUME_KEYWORD = "voladjust"


@dataclass(frozen=True)
class Play:
    """Load a track and play it, looping it forever if requested."""

    track: str
    loop: bool = True
    # Volume posted along with the request. It is applied with the track but does
    # not take part in equality, so re-posting the same track at another volume
    # does not restart it.
    volume: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Stop:
    """Stop the current playback."""


@dataclass(frozen=True)
class VolumeAdjust:
    """Change the master volume (logarithmic units, 0 is full scale)."""

    level: int


type Command = Play | Stop | VolumeAdjust


def decode_command(track_or_keyword: str, volume: int = 0) -> Command:
    """
    Decode a producer request into a command.

    Args:
        track_or_keyword (str): "stop", "voladjust" or the path of a track to
            play and loop.
        volume (int): Volume level. Used by "voladjust" and carried along with
            play requests; ignored by "stop".

    Returns:
        Command: The decoded command.

    Raises:
        ValueError: If track_or_keyword is empty.
    """
    if not track_or_keyword:
        raise ValueError("A track path or a command keyword is required")

    if track_or_keyword == STOP_KEYWORD:
        return Stop()
    if track_or_keyword == VOLUME_KEYWORD:
        return VolumeAdjust(int(volume))
    return Play(track_or_keyword, loop=True, volume=int(volume))
