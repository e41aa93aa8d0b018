# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0


class MidiPlayerError(Exception):
    """Base exception for MidiPlayer-related errors."""

    pass


class DeviceUnavailableError(MidiPlayerError):
    """Exception raised when the sequencer or synthesizer cannot be acquired."""

    pass


class PlaybackError(MidiPlayerError):
    """Base exception for recoverable errors while starting playback of a track."""

    pass


class TrackNotFoundError(PlaybackError):
    """Exception raised when the requested track file does not exist."""

    pass


class TrackDecodeError(PlaybackError):
    """Exception raised when the track file is not a valid MIDI file."""

    pass


class TrackLoadTimeoutError(PlaybackError):
    """Exception raised when loading a track takes longer than allowed."""

    pass
