"""Wavetable file writer.

Exports an ordered list of frames as a single mono 32-bit float WAV file
with the frames' cycles laid end to end, which is the layout Serum, Vital and
most other wavetable synths import directly.
"""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from wtdraw.format.riff import build_float_wav
from wtdraw.types import FRAME_SIZE, SAMPLE_RATE


def encode_frames(frames: Sequence[NDArray[np.floating]]) -> bytes:
    """Concatenate frames in order as little-endian float32 bytes.

    Raises:
        ValueError: If there are no frames or any frame is not exactly
            ``FRAME_SIZE`` samples long.
    """
    if len(frames) == 0:
        raise ValueError("frames cannot be empty")

    for i, frame in enumerate(frames):
        shape = np.shape(frame)
        if shape != (FRAME_SIZE,):
            raise ValueError(f"frames[{i}] should have shape ({FRAME_SIZE},), got {shape}")

    table = np.stack([np.asarray(frame, dtype="<f4") for frame in frames])
    return table.astype("<f4", copy=False).tobytes(order="C")


def export_wavetable_to_wav(
    frames: Sequence[NDArray[np.floating]],
    sample_rate: int = SAMPLE_RATE,
) -> bytes:
    """Serialize a wavetable to WAV file bytes.

    Args:
        frames: Ordered frames, each ``FRAME_SIZE`` samples
        sample_rate: Sample rate written to the header

    Returns:
        44-byte header followed by ``len(frames) * FRAME_SIZE`` float32 samples
    """
    return build_float_wav(encode_frames(frames), sample_rate)


def save_wavetable_wav(
    path: Path | str,
    frames: Sequence[NDArray[np.floating]],
    sample_rate: int = SAMPLE_RATE,
) -> Path:
    """Write a wavetable to ``path`` and return the path written."""
    path = Path(path)
    path.write_bytes(export_wavetable_to_wav(frames, sample_rate))
    return path
