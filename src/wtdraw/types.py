from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

FRAME_SIZE = 2048
MAX_FRAMES = 256
HARMONIC_COUNT = 16
SAMPLE_RATE = 44100
BRUSH_RADIUS = 15

SampleBuffer: TypeAlias = NDArray[np.float32]
Wavetable: TypeAlias = list[SampleBuffer]
HarmonicSpec: TypeAlias = Sequence[float]


class GeneratorMode(str, Enum):
    draw = "draw"
    math = "math"
    harmonic = "harmonic"
    image = "image"


@dataclass(frozen=True)
class PointerSample:
    index: int
    amplitude: float


def empty_buffer() -> SampleBuffer:
    """Return a silent frame."""
    return np.zeros(FRAME_SIZE, dtype=np.float32)


def as_buffer(values: Sequence[float] | NDArray[np.floating]) -> SampleBuffer:
    """Copy ``values`` into a new float32 frame, checking its length."""
    buffer = np.array(values, dtype=np.float32, copy=True)
    if buffer.shape != (FRAME_SIZE,):
        raise ValueError(f"Frame must have shape ({FRAME_SIZE},), got {buffer.shape}")
    return buffer
