# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

"""
Pytest configuration for tests relying on MIDI devices.

Synthesizers are replaced by an in-memory fake recording every message, and
mido output ports are mocked, so tests run without any MIDI hardware or rtmidi
backend. MIDI files are generated on the fly with mido.
"""

import time
import threading
from pathlib import Path
from unittest.mock import MagicMock

import mido
import pytest

from bgmusic.app_peripherals.sequencer import MidiSequencer
from bgmusic.app_peripherals.synthesizer import BaseSynthesizer, SynthesizerOpenError
from bgmusic.app_bricks.midi_player import PlaybackEngine


MOCK_OUTPUT_PORTS = ["Midi Through:Midi Through Port-0 14:0", "FLUID Synth (1234):Synth input port (1234:0) 128:0"]


class FakeSynthesizer(BaseSynthesizer):
    """In-memory synthesizer that records every message it receives."""

    def __init__(self, fail_open: bool = False):
        super().__init__()
        self.name = "FakeSynthesizer"
        self.fail_open = fail_open
        self.messages: list[mido.Message] = []
        self.open_count = 0
        self.close_count = 0

    def _open_synth(self):
        if self.fail_open:
            raise SynthesizerOpenError("Fake device is busy")
        self.open_count += 1

    def _close_synth(self):
        self.close_count += 1

    def _write_message(self, message: mido.Message):
        self.messages.append(message)

    def of_type(self, msg_type: str) -> list[mido.Message]:
        return [m for m in list(self.messages) if m.type == msg_type]

    def controller_values(self, control: int) -> list[tuple[int, int]]:
        """(channel, value) pairs sent for a controller, in order."""
        return [(m.channel, m.value) for m in self.of_type("control_change") if m.control == control]


def write_midi(path: Path, notes=(60, 64, 67), ticks_per_note: int = 48) -> Path:
    """
    Write a single-track MIDI file playing notes one after another.

    At 480 ticks per beat and 120 BPM, 48 ticks last 50ms.
    """
    midi_file = mido.MidiFile(type=1, ticks_per_beat=480)
    track = mido.MidiTrack()
    midi_file.tracks.append(track)
    track.append(mido.MetaMessage("set_tempo", tempo=500000, time=0))
    for note in notes:
        track.append(mido.Message("note_on", channel=0, note=note, velocity=100, time=0))
        track.append(mido.Message("note_off", channel=0, note=note, velocity=0, time=ticks_per_note))
    midi_file.save(path)
    return path


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll predicate until it is true or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def fake_synth():
    return FakeSynthesizer()


@pytest.fixture
def sequencer():
    seq = MidiSequencer(stop_timeout=1.0)
    yield seq
    seq.close()


@pytest.fixture
def engine(fake_synth, sequencer):
    """An open PlaybackEngine wired to a fake synthesizer and a real sequencer."""
    eng = PlaybackEngine(synthesizer=fake_synth, sequencer=sequencer, load_timeout=2.0)
    eng.open()
    yield eng
    eng.close()


@pytest.fixture
def theme_mid(tmp_path):
    return write_midi(tmp_path / "theme.mid")


@pytest.fixture
def mock_mido_ports(monkeypatch):
    """
    Patch mido port functions with mocks.

    Returns a dict with the mocked "get_output_names" and "open_output"; every
    port opened is a MagicMock appended to "ports".
    """
    ports = []
    lock = threading.Lock()

    def fake_open_output(name=None, **kwargs):
        port = MagicMock()
        port.name = name
        with lock:
            ports.append(port)
        return port

    get_output_names = MagicMock(return_value=list(MOCK_OUTPUT_PORTS))
    open_output = MagicMock(side_effect=fake_open_output)
    monkeypatch.setattr("bgmusic.app_peripherals.synthesizer.mido_synthesizer.mido.get_output_names", get_output_names)
    monkeypatch.setattr("bgmusic.app_peripherals.synthesizer.mido_synthesizer.mido.open_output", open_output)

    return {"get_output_names": get_output_names, "open_output": open_output, "ports": ports}
