"""Freehand frame editing with a soft tent-shaped brush.

A drag gesture is modelled by :class:`BrushStroke`, which keeps the previous
pointer sample only for the lifetime of one gesture and fills the gap between
consecutive samples so that fast pointer motion never leaves holes.
"""

import numpy as np
from numpy.typing import NDArray

from wtdraw.types import BRUSH_RADIUS, FRAME_SIZE, PointerSample, SampleBuffer
from wtdraw.utils import clamp


def brush_weights(radius: int = BRUSH_RADIUS) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
    """Offsets ``-radius..radius`` and their linear falloff ``1 - |d| / radius``."""
    if radius < 1:
        raise ValueError(f"Brush radius must be >= 1, got {radius}")

    offsets = np.arange(-radius, radius + 1)
    return offsets, 1.0 - np.abs(offsets) / radius


def apply_brush(
    buffer: NDArray[np.floating],
    center_index: int,
    amplitude: float,
    radius: int = BRUSH_RADIUS,
) -> NDArray[np.int64]:
    """Pull samples around ``center_index`` towards ``amplitude`` in place.

    Each sample within ``radius`` of the center becomes
    ``old * (1 - falloff) + amplitude * falloff``; the center lands exactly on
    ``amplitude`` and samples at or beyond ``radius`` are untouched in value.
    Offsets that fall outside the buffer are skipped.

    Args:
        buffer: Frame to edit (modified in place)
        center_index: Sample index under the pointer
        amplitude: Target amplitude
        radius: Brush half-width in samples

    Returns:
        The indices the brush was applied to
    """
    offsets, falloff = brush_weights(radius)
    indices = center_index + offsets
    in_range = (indices >= 0) & (indices < len(buffer))
    indices, falloff = indices[in_range], falloff[in_range]

    blended = buffer[indices] * (1.0 - falloff) + amplitude * falloff
    buffer[indices] = blended.astype(buffer.dtype)
    return indices


def pointer_to_sample(x: float, y: float, width: float, height: float) -> PointerSample:
    """Map a pointer position on a drawing surface to a frame index and amplitude.

    The top edge maps to +1, the bottom edge to -1. Positions are clamped to
    the surface.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Surface must have a positive size, got {width}x{height}")

    x = clamp(x, 0.0, width)
    y = clamp(y, 0.0, height)

    index = min(int(np.floor(x / width * FRAME_SIZE)), FRAME_SIZE - 1)
    amplitude = 1.0 - 2.0 * y / height
    return PointerSample(index=index, amplitude=amplitude)


class BrushStroke:
    """One drag gesture over a frame.

    The stroke works on its own copy of the frame it was created with;
    callers read the edited frame back from :attr:`buffer` and commit it
    wherever it belongs.

    Example:
        >>> stroke = BrushStroke(frame)
        >>> stroke.start(PointerSample(0, 0.0))
        >>> stroke.move(PointerSample(100, 1.0))
        >>> stroke.end()
        >>> store.replace_current(stroke.buffer)
    """

    def __init__(self, buffer: NDArray[np.floating], radius: int = BRUSH_RADIUS) -> None:
        if radius < 1:
            raise ValueError(f"Brush radius must be >= 1, got {radius}")

        self.buffer: SampleBuffer = np.array(buffer, dtype=np.float32, copy=True)
        self.radius = radius
        self.previous: PointerSample | None = None
        self.touched: set[int] = set()

    @property
    def active(self) -> bool:
        return self.previous is not None

    def _apply(self, index: int, amplitude: float) -> None:
        applied = apply_brush(self.buffer, index, amplitude, self.radius)
        self.touched.update(int(i) for i in applied)

    def start(self, sample: PointerSample) -> SampleBuffer:
        """Begin the gesture with a single brush application."""
        self._apply(sample.index, sample.amplitude)
        self.previous = sample
        return self.buffer

    def move(self, sample: PointerSample) -> SampleBuffer:
        """Continue the gesture, interpolating across skipped indices."""
        prev = self.previous
        if prev is None:
            return self.start(sample)

        steps = abs(sample.index - prev.index)
        if steps == 0:
            # Vertical-only motion
            self._apply(sample.index, sample.amplitude)
        else:
            direction = 1 if sample.index > prev.index else -1
            for step in range(steps + 1):
                amp = prev.amplitude + (sample.amplitude - prev.amplitude) * (step / steps)
                self._apply(prev.index + step * direction, amp)

        self.previous = sample
        return self.buffer

    def end(self) -> SampleBuffer:
        """Finish the gesture; the previous pointer position is forgotten."""
        self.previous = None
        return self.buffer
