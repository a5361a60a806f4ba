"""Unit tests for the wavetable WAV writer."""

import struct
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf
from scipy.io import wavfile

from wtdraw.dsp.waves import generate_saw, generate_sine
from wtdraw.format import export_wavetable_to_wav, save_wavetable_wav
from wtdraw.format.writer import encode_frames
from wtdraw.types import FRAME_SIZE

EXPECTED_SINGLE_FRAME_HEADER = (
    b"RIFF"
    + struct.pack("<I", 36 + FRAME_SIZE * 4)
    + b"WAVE"
    + b"fmt "
    + struct.pack("<IHHIIHH", 16, 3, 1, 44100, 176400, 4, 32)
    + b"data"
    + struct.pack("<I", FRAME_SIZE * 4)
)


class TestExportWavetable:
    """Test the exact byte layout of exported files."""

    def test_single_silent_frame(self):
        data = export_wavetable_to_wav([np.zeros(FRAME_SIZE, dtype=np.float32)])

        assert len(data) == 44 + FRAME_SIZE * 4 == 8236
        assert data[:44] == EXPECTED_SINGLE_FRAME_HEADER
        assert data[44:] == bytes(FRAME_SIZE * 4)

    @pytest.mark.parametrize("count", [1, 2, 7, 256])
    def test_sizes_scale_with_frame_count(self, count):
        data = export_wavetable_to_wav([generate_sine()] * count)
        data_size = count * FRAME_SIZE * 4

        assert len(data) == 44 + data_size
        assert struct.unpack("<I", data[4:8])[0] == 36 + data_size
        assert struct.unpack("<I", data[40:44])[0] == data_size

    def test_samples_are_little_endian_float32(self):
        saw = generate_saw()
        data = export_wavetable_to_wav([saw])

        assert data[44:48] == struct.pack("<f", 1.0)
        np.testing.assert_array_equal(np.frombuffer(data[44:], dtype="<f4"), saw)

    def test_frames_in_order(self):
        frames = [np.full(FRAME_SIZE, k / 4, dtype=np.float32) for k in range(4)]
        samples = np.frombuffer(export_wavetable_to_wav(frames)[44:], dtype="<f4")

        for k in range(4):
            assert np.all(samples[k * FRAME_SIZE : (k + 1) * FRAME_SIZE] == k / 4)

    def test_custom_sample_rate(self):
        data = export_wavetable_to_wav([generate_sine()], sample_rate=48000)
        assert struct.unpack("<II", data[24:32]) == (48000, 192000)

    def test_empty_table(self):
        with pytest.raises(ValueError, match="empty"):
            export_wavetable_to_wav([])

    @pytest.mark.parametrize("length", [0, FRAME_SIZE - 1, FRAME_SIZE * 2])
    def test_wrong_frame_length(self, length):
        with pytest.raises(ValueError, match=r"frames\[1\]"):
            encode_frames([generate_sine(), np.zeros(length, dtype=np.float32)])

    def test_float64_input_is_converted(self):
        sine64 = generate_sine().astype(np.float64)
        assert export_wavetable_to_wav([sine64]) == export_wavetable_to_wav([generate_sine()])


class TestThirdPartyReaders:
    """Exported files must open in ordinary WAV readers."""

    def test_scipy_reads_export(self, tmp_path: Path):
        frames = [generate_sine(), generate_saw()]
        path = save_wavetable_wav(tmp_path / "table.wav", frames)

        rate, data = wavfile.read(path)

        assert rate == 44100
        assert data.dtype == np.float32
        assert data.shape == (2 * FRAME_SIZE,)
        np.testing.assert_array_equal(data, np.concatenate(frames))

    def test_soundfile_reads_export(self, tmp_path: Path):
        path = save_wavetable_wav(tmp_path / "table.wav", [generate_saw()])

        info = sf.info(str(path))
        data, rate = sf.read(path, dtype="float32")

        assert info.subtype == "FLOAT"
        assert info.channels == 1
        assert rate == 44100
        np.testing.assert_array_equal(data, generate_saw())

    def test_save_returns_path(self, tmp_path: Path):
        target = tmp_path / "out.wav"
        result = save_wavetable_wav(str(target), [generate_sine()])

        assert result == target
        assert target.stat().st_size == 8236
