# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import threading

from bgmusic.app_utils import Logger

from .commands import Command, Play, Stop, VolumeAdjust
from .engine import PlaybackEngine
from .errors import PlaybackError
from .mailbox import Mailbox

logger = Logger("CommandPoller")


class CommandPoller:
    """
    Background loop turning mailbox commands into engine calls.

    Volume commands are applied every time they are received. Play and Stop
    commands are applied once: a command equal to the last dispatched one is
    dropped, so a producer can keep posting its desired state without
    restarting the track on every poll.
    """

    def __init__(self, mailbox: Mailbox, engine: PlaybackEngine, poll_interval: float = 0.1):
        if poll_interval <= 0:
            raise ValueError(f"Invalid poll interval '{poll_interval}'. Must be positive")

        self.mailbox = mailbox
        self.engine = engine
        self.poll_interval = poll_interval

    def run(self, stop_event: threading.Event) -> None:
        """
        Poll the mailbox until stop_event is set.

        Args:
            stop_event (threading.Event): Shutdown signal. The loop notices it
                within one poll interval.
        """
        logger.info("MIDI player thread started")

        while not stop_event.is_set():
            try:
                handled = self.tick()
            except Exception as e:
                logger.error(f"MIDI player error: {e}", exc_info=True)
                handled = False

            if not handled:
                stop_event.wait(self.poll_interval)

        logger.info("MIDI player thread stopped")

    def tick(self) -> bool:
        """
        Take at most one command from the mailbox and dispatch it.

        Playback errors are logged and swallowed, never raised.

        Returns:
            bool: False if the mailbox was empty, True otherwise.
        """
        command = self.mailbox.take()
        if command is None:
            return False

        self.dispatch(command)
        return True

    def dispatch(self, command: Command) -> None:
        """Apply a single command to the engine, honouring the apply-once policy."""
        state = self.engine.state

        if isinstance(command, VolumeAdjust):
            self.engine.apply_volume(command.level)
            logger.info(f"MIDI volume adjusted to: {command.level}")
            return

        if command == state.last_dispatched_command:
            logger.debug(f"Ignoring repeated command {command}")
            return

        state.last_dispatched_command = command

        match command:
            case Stop():
                self.engine.stop()
            case Play(track=track, loop=loop, volume=level):
                try:
                    self.engine.play(track, loop, volume_level=level)
                except PlaybackError as e:
                    logger.error(f"Error playing MIDI: {e}")
                    return
                self.engine.apply_volume(state.current_volume)
            case _:
                logger.warning(f"Unknown command {command!r} ignored")
