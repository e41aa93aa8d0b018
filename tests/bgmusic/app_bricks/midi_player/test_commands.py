# SPDX-FileCopyrightText: Copyright (C) ARDUINO SRL (http://www.arduino.cc)
#
# SPDX-License-Identifier: MPL-2.0

import pytest

from bgmusic.app_bricks.midi_player import Play, Stop, VolumeAdjust, decode_command


class TestDecodeCommand:
    def test_stop_keyword(self):
        assert decode_command("stop", -300) == Stop()

    def test_volume_keyword(self):
        assert decode_command("voladjust", -600) == VolumeAdjust(-600)

    def test_track_path(self):
        command = decode_command("music/theme.mid", -200)

        assert command == Play("music/theme.mid", loop=True)
        assert command.loop is True
        assert command.volume == -200

    def test_empty_string(self):
        with pytest.raises(ValueError):
            decode_command("")

    def test_keywords_are_case_sensitive(self):
        """Test that only the exact keywords are interpreted, anything else is a track."""
        assert decode_command("STOP") == Play("STOP")


class TestCommandEquality:
    def test_content_equality(self):
        assert Play("a.mid") == Play("a.mid")
        assert Play("a.mid") is not Play("a.mid")
        assert Stop() == Stop()
        assert VolumeAdjust(-100) == VolumeAdjust(-100)

    def test_play_differs_by_track_and_loop(self):
        assert Play("a.mid") != Play("b.mid")
        assert Play("a.mid", loop=True) != Play("a.mid", loop=False)

    def test_play_volume_is_not_identity(self):
        """Test that a play request at another volume is the same request."""
        assert Play("a.mid", volume=0) == Play("a.mid", volume=-600)

    def test_variants_differ(self):
        assert Stop() != Play("stop")
        assert VolumeAdjust(0) != Stop()

    def test_commands_are_immutable(self):
        with pytest.raises(AttributeError):
            Play("a.mid").track = "b.mid"  # type: ignore
