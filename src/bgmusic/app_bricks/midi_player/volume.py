# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import numpy as np

from bgmusic.app_peripherals.synthesizer import BaseSynthesizer

CHANNEL_VOLUME_CC = 7
"""MIDI controller number for channel volume."""

LEVEL_DIVISOR = 2000.0
"""Level units per decade of gain: 0 is full scale, -1200 is about a quarter."""

CONTROLLER_MAX = 127


def level_to_gain(level: int) -> float:
    """
    Convert a logarithmic volume level to a linear gain.

    Args:
        level (int): Volume level, 0 for full scale and negative for quieter
            (typically -1200 to 0).

    Returns:
        float: Gain in range [0.0, 1.0].
    """
    gain = np.power(10.0, level / LEVEL_DIVISOR)
    return float(np.clip(gain, 0.0, 1.0))


def gain_to_controller(gain: float) -> int:
    """
    Convert a linear gain to a 7-bit controller value, rounding half up.

    Args:
        gain (float): Gain in range [0.0, 1.0]. Values outside are clamped.

    Returns:
        int: Controller value in range [0, 127].
    """
    value = np.floor(np.clip(gain, 0.0, 1.0) * CONTROLLER_MAX + 0.5)
    return int(value)


def level_to_controller(level: int) -> int:
    """Convert a logarithmic volume level straight to a channel volume value."""
    return gain_to_controller(level_to_gain(level))


def apply_volume(synthesizer: BaseSynthesizer, level: int) -> int:
    """
    Set the channel volume of every synthesizer channel from a volume level.

    Args:
        synthesizer (BaseSynthesizer): An open synthesizer.
        level (int): Volume level (see level_to_gain).

    Returns:
        int: The controller value sent to the channels.

    Raises:
        SynthesizerWriteError: If the synthesizer is not open or a write fails.
    """
    value = level_to_controller(level)
    for channel in synthesizer.channels:
        synthesizer.set_channel_controller(channel, CHANNEL_VOLUME_CC, value)
    return value
