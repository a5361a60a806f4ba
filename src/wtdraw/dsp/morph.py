import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from wtdraw.types import SampleBuffer

logger = logging.getLogger(__name__)

MIN_MORPH_FRAMES = 3


def interpolate_frames(
    frame_a: NDArray[np.floating], frame_b: NDArray[np.floating], mix: float
) -> SampleBuffer:
    """Linear per-sample crossfade; ``mix=0`` gives ``frame_a``, ``mix=1`` gives ``frame_b``."""
    a = np.asarray(frame_a, dtype=np.float32)
    b = np.asarray(frame_b, dtype=np.float32)
    if a.shape != b.shape:
        raise ValueError(f"Cannot interpolate frames of shape {a.shape} and {b.shape}")

    if mix == 0.0:
        return a.copy()
    if mix == 1.0:
        return b.copy()

    mixed = a.astype(np.float64) * (1.0 - mix) + b.astype(np.float64) * mix
    return mixed.astype(np.float32)


def morph_table(frames: Sequence[NDArray[np.floating]]) -> list[SampleBuffer]:
    """Replace every interior frame by a linear blend of the first and last frames.

    Frame ``k`` of ``count`` becomes ``interpolate_frames(first, last, k / (count - 1))``.
    Tables with fewer than three frames have no interior and are returned as
    unchanged copies.

    Args:
        frames: Ordered frames of the table

    Returns:
        New list of distinct frame buffers
    """
    count = len(frames)
    if count < MIN_MORPH_FRAMES:
        logger.debug("Morph needs at least %d frames, table has %d", MIN_MORPH_FRAMES, count)
        return [np.array(frame, dtype=np.float32, copy=True) for frame in frames]

    first = np.array(frames[0], dtype=np.float32, copy=True)
    last = np.array(frames[-1], dtype=np.float32, copy=True)

    morphed = [first]
    for k in range(1, count - 1):
        morphed.append(interpolate_frames(first, last, k / (count - 1)))
    morphed.append(last)
    return morphed
