# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0


class SequencerError(Exception):
    """Base exception for Sequencer-related errors."""

    pass


class SequencerStateError(SequencerError):
    """Exception raised when an operation is not allowed in the current sequencer state."""

    pass
