# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0


class SynthesizerError(Exception):
    """Base exception for Synthesizer-related errors."""

    pass


class SynthesizerOpenError(SynthesizerError):
    """Exception raised when the synthesizer cannot be opened."""

    pass


class SynthesizerWriteError(SynthesizerError):
    """Exception raised when sending a message to the synthesizer fails."""

    pass


class SynthesizerConfigError(SynthesizerError):
    """Exception raised when synthesizer configuration is invalid."""

    pass
