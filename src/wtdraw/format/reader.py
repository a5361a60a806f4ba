"""Wavetable file reader.

Loads wavetables written by :mod:`wtdraw.format.writer` back into frames.
"""

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from wtdraw.format.riff import (
    DATA_ID,
    FMT_ID,
    WAVE_FORMAT_IEEE_FLOAT,
    FmtChunk,
    RiffError,
    parse_fmt_chunk,
    read_chunks,
)
from wtdraw.types import FRAME_SIZE, MAX_FRAMES, SampleBuffer


@dataclass
class WavetableFile:
    """Frames and format information loaded from a wavetable WAV file."""

    frames: list[SampleBuffer]
    sample_rate: int

    @property
    def num_frames(self) -> int:
        return len(self.frames)


def decode_wavetable_wav(data: bytes) -> WavetableFile:
    """Decode WAV bytes produced by :func:`export_wavetable_to_wav`.

    Raises:
        RiffError: If the bytes are not a mono 32-bit float WAV whose sample
            count is a whole number of frames (between 1 and ``MAX_FRAMES``).
    """
    chunks = read_chunks(io.BytesIO(data))

    if FMT_ID not in chunks:
        raise RiffError("fmt chunk not found in WAV file")
    if DATA_ID not in chunks:
        raise RiffError("data chunk not found in WAV file")

    fmt: FmtChunk = parse_fmt_chunk(chunks[FMT_ID])
    if fmt.audio_format != WAVE_FORMAT_IEEE_FLOAT or fmt.bits_per_sample != 32:
        raise RiffError(
            f"Unsupported audio format: format={fmt.audio_format}, bits={fmt.bits_per_sample}"
        )
    if fmt.num_channels != 1:
        raise RiffError(f"Expected mono audio, got {fmt.num_channels} channels")

    data = chunks[DATA_ID]
    if len(data) % 4:
        raise RiffError(f"data chunk size {len(data)} is not a whole number of float32 samples")

    samples = np.frombuffer(data, dtype="<f4")
    num_frames, remainder = divmod(len(samples), FRAME_SIZE)
    if remainder or not 1 <= num_frames <= MAX_FRAMES:
        raise RiffError(
            f"data chunk holds {len(samples)} samples, expected 1 to {MAX_FRAMES} "
            f"frames of {FRAME_SIZE}"
        )

    frames = [frame.astype(np.float32) for frame in samples.reshape(num_frames, FRAME_SIZE)]
    return WavetableFile(frames=frames, sample_rate=fmt.sample_rate)


def load_wavetable_wav(path: Path | str) -> WavetableFile:
    """Load a wavetable WAV file from disk.

    Raises:
        RiffError: If the file cannot be opened or is not a valid wavetable.
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise RiffError(f"File not found: {path}") from e
    except OSError as e:
        raise RiffError(f"Cannot open file: {path}") from e

    return decode_wavetable_wav(data)
