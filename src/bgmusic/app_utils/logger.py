# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import logging
import os
import sys

__all__ = ["Logger"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "bgmusic"


def _default_level() -> int:
    level_name = os.getenv("BGMUSIC_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(_default_level())
    return root


def Logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a named logger for a component.

    All component loggers are children of the "bgmusic" logger, which writes to
    stderr. Its level defaults to the BGMUSIC_LOG_LEVEL environment variable (INFO
    if unset).

    Args:
        name (str): Component name, e.g. "MidiPlayer".
        level (int, optional): Level for this component only. If None, the level
            of the "bgmusic" logger applies.

    Returns:
        logging.Logger: The component logger.
    """
    _root_logger()
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    if level is not None:
        logger.setLevel(level)
    return logger
