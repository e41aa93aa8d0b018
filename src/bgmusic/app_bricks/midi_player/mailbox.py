# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import threading

from .commands import Command


class Mailbox:
    """
    Single-slot command handoff between a producer and the player thread.

    A post replaces any command that has not been taken yet: only the most
    recent request matters, so there is no queue and no backpressure.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._command: Command | None = None

    def post(self, command: Command) -> None:
        """Store a command, overwriting any unread one."""
        with self._lock:
            self._command = command

    def take(self) -> Command | None:
        """Return the pending command and empty the slot, or None if empty."""
        with self._lock:
            command, self._command = self._command, None
        return command

    def peek(self) -> Command | None:
        """Return the pending command without removing it."""
        with self._lock:
            return self._command

    def clear(self) -> None:
        """Drop any pending command."""
        with self._lock:
            self._command = None
