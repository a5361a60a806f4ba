"""Unit tests for wtdraw.dsp.pitch module."""

import pytest

from wtdraw.dsp.pitch import PREVIEW_NOTE_HZ, base_frequency, playback_rate


class TestPitch:
    def test_base_frequency_default(self):
        assert base_frequency() == pytest.approx(21.533, abs=1e-3)

    def test_base_frequency_custom(self):
        assert base_frequency(48000, 1024) == pytest.approx(46.875)

    def test_playback_rate_for_preview_note(self):
        rate = playback_rate()
        assert rate == pytest.approx(PREVIEW_NOTE_HZ * 2048 / 44100)
        assert rate * base_frequency() == pytest.approx(PREVIEW_NOTE_HZ)

    def test_octave_doubles_rate(self):
        assert playback_rate(2 * PREVIEW_NOTE_HZ) == pytest.approx(2 * playback_rate())

    @pytest.mark.parametrize("target", [0.0, -65.41])
    def test_invalid_target(self, target):
        with pytest.raises(ValueError):
            playback_rate(target)

    def test_invalid_frame_size(self):
        with pytest.raises(ValueError):
            base_frequency(44100, 0)
