# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import struct
from pathlib import Path

import mido

from .errors import TrackDecodeError, TrackNotFoundError


def load_track(path: str | Path) -> mido.MidiFile:
    """
    Read and decode a Standard MIDI File.

    Args:
        path (str | Path): Path of the .mid file.

    Returns:
        mido.MidiFile: The decoded track, ready to be sequenced.

    Raises:
        TrackNotFoundError: If the file does not exist.
        TrackDecodeError: If the file can't be read or is not a playable MIDI file.
    """
    track_path = Path(path)
    if not track_path.is_file():
        raise TrackNotFoundError(f"MIDI file not found: {path}")

    try:
        midi_file = mido.MidiFile(track_path)
    except (OSError, EOFError, ValueError, KeyError, IndexError, struct.error) as e:
        raise TrackDecodeError(f"Invalid MIDI file {path}: {e}") from e

    # Type 2 files hold independent patterns that can't be merged into one timeline
    if midi_file.type == 2:
        raise TrackDecodeError(f"Unsupported MIDI file type 2: {path}")

    return midi_file
