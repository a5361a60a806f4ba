import numpy as np
from numpy.typing import NDArray

from wtdraw.types import SampleBuffer
from wtdraw.utils import SILENCE_THRESHOLD


def normalize(buffer: NDArray[np.floating]) -> SampleBuffer:
    """Scale a frame so that its peak absolute value is exactly 1.0.

    Near-silent frames (peak at or below ``SILENCE_THRESHOLD``) are returned
    unchanged rather than blown up by a tiny divisor.

    Args:
        buffer: Input frame

    Returns:
        A new float32 frame with the same shape and sign pattern
    """
    samples = np.asarray(buffer, dtype=np.float32)
    max_amplitude = float(np.max(np.abs(samples))) if samples.size else 0.0
    if max_amplitude <= SILENCE_THRESHOLD:
        return samples.copy()

    # Divide in float64 so the peak sample lands on exactly +/-1.0
    return (samples.astype(np.float64) / max_amplitude).astype(np.float32)


def sanitize(values: NDArray[np.floating]) -> SampleBuffer:
    """Replace non-finite samples with 0 and hard-clip the rest to [-1, 1]."""
    values = np.asarray(values, dtype=np.float64)
    cleaned = np.where(np.isfinite(values), values, 0.0)
    return np.clip(cleaned, -1.0, 1.0).astype(np.float32)
