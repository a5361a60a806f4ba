import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numba import njit
from numpy import pi
from numpy.typing import NDArray

from wtdraw.dsp.formula import FormulaError, compile_formula
from wtdraw.dsp.process import normalize, sanitize
from wtdraw.types import (
    FRAME_SIZE,
    HARMONIC_COUNT,
    GeneratorMode,
    HarmonicSpec,
    SampleBuffer,
)
from wtdraw.utils import assert_exhaustiveness

logger = logging.getLogger(__name__)

DEFAULT_FORMULA = "Math.sin(x) * Math.cos(t * 5)"


@njit
def additive_core(amplitudes: np.ndarray, size: int) -> np.ndarray:
    """Numba-optimized sum of sine partials, harmonic ``h + 1`` at ``amplitudes[h]``."""
    out = np.zeros(size, dtype=np.float64)

    for h in range(len(amplitudes)):
        amp = amplitudes[h]
        if amp == 0.0:
            continue

        harmonic_num = h + 1
        for i in range(size):
            out[i] += amp * np.sin(2.0 * np.pi * harmonic_num * i / size)

    return out


@dataclass
class FormulaResult:
    """Outcome of rendering a formula into a frame."""

    buffer: SampleBuffer
    error: str | None = None
    """Compile error message when the sine fallback was used."""

    failed_samples: int = 0
    """Number of samples that raised or were non-finite and were set to 0."""

    @property
    def ok(self) -> bool:
        return self.error is None


class WaveGenerator:
    def generate(
        self,
        mode: GeneratorMode,
        *,
        formula: str = DEFAULT_FORMULA,
        harmonics: HarmonicSpec | None = None,
        luminance: Sequence[float] | NDArray[np.floating] | None = None,
    ) -> SampleBuffer:
        match mode:
            case GeneratorMode.math:
                return self.formula(formula)
            case GeneratorMode.harmonic:
                return self.harmonics(harmonics if harmonics is not None else default_harmonics())
            case GeneratorMode.image:
                if luminance is None:
                    raise ValueError("Image mode requires luminance values")
                return self.luminance(luminance)
            case GeneratorMode.draw:
                raise ValueError("Draw mode edits frames with a brush stroke, it does not generate")
            case _:
                assert_exhaustiveness(mode)

    def sine(self) -> SampleBuffer:
        """Generate one cycle of a sine wave."""
        i = np.arange(FRAME_SIZE, dtype=np.float64)
        return np.sin(2 * pi * i / FRAME_SIZE).astype(np.float32)

    def sawtooth(self) -> SampleBuffer:
        """Generate a falling ramp from +1 towards -1, discontinuous at the wrap."""
        i = np.arange(FRAME_SIZE, dtype=np.float64)
        return (1.0 - 2.0 * i / FRAME_SIZE).astype(np.float32)

    def harmonics(self, amplitudes: HarmonicSpec) -> SampleBuffer:
        """Additive synthesis from a harmonic amplitude vector.

        Args:
            amplitudes: Amplitude per harmonic; index 0 is the fundamental

        Returns:
            Peak-normalized frame (left as-is when all amplitudes are ~0)
        """
        amps = np.asarray(amplitudes, dtype=np.float64)
        if amps.ndim != 1:
            raise ValueError(f"Harmonic amplitudes must be 1D, got shape {amps.shape}")

        return normalize(additive_core(amps, FRAME_SIZE))

    def luminance(self, values: Sequence[float] | NDArray[np.floating]) -> SampleBuffer:
        """Map an image brightness row (0..255 per sample) to a normalized frame.

        Raises:
            ValueError: If ``values`` does not hold exactly one entry per sample
        """
        brightness = np.asarray(values, dtype=np.float64)
        if brightness.shape != (FRAME_SIZE,):
            raise ValueError(
                f"Luminance row must have {FRAME_SIZE} entries, got shape {brightness.shape}"
            )

        return normalize(brightness / 127.5 - 1.0)

    def formula(self, expression: str, rng: np.random.Generator | None = None) -> SampleBuffer:
        return self.evaluate_formula(expression, rng=rng).buffer

    def evaluate_formula(
        self, expression: str, rng: np.random.Generator | None = None
    ) -> FormulaResult:
        """Render a formula into a frame, one independent evaluation per sample.

        A formula that cannot be compiled falls back to a sine frame and the
        compile error is reported on the result. Per sample, anything that
        raises or is non-finite becomes 0 and every other value is clipped to
        [-1, 1].
        """
        try:
            formula = compile_formula(expression, rng=rng)
        except FormulaError as e:
            logger.warning("Formula %r rejected, falling back to sine: %s", expression, e)
            return FormulaResult(buffer=self.sine(), error=str(e))

        values = np.empty(FRAME_SIZE, dtype=np.float64)
        failed = 0

        for i in range(FRAME_SIZE):
            t = i / FRAME_SIZE
            x = t * 2 * math.pi
            try:
                value = float(formula(x, t, i, FRAME_SIZE))
            except (ArithmeticError, ValueError, TypeError, RecursionError):
                value = math.nan

            if not math.isfinite(value):
                failed += 1
            values[i] = value

        if failed:
            logger.debug("Formula %r produced %d unusable samples", expression, failed)

        return FormulaResult(buffer=sanitize(values), failed_samples=failed)


def default_harmonics() -> list[float]:
    """Fundamental only, every overtone silent."""
    return [1.0] + [0.0] * (HARMONIC_COUNT - 1)


def random_harmonics(rng: np.random.Generator | None = None) -> list[float]:
    """Uniform random amplitude in [0, 1) for every harmonic."""
    generator = rng if rng is not None else np.random.default_rng()
    return [float(a) for a in generator.random(HARMONIC_COUNT)]


def generate_sine() -> SampleBuffer:
    return WaveGenerator().sine()


def generate_saw() -> SampleBuffer:
    return WaveGenerator().sawtooth()


def generate_from_formula(expression: str) -> SampleBuffer:
    """Convenience helper; falls back to sine when the formula is rejected."""
    return WaveGenerator().formula(expression)


def generate_from_harmonics(amplitudes: HarmonicSpec) -> SampleBuffer:
    return WaveGenerator().harmonics(amplitudes)


def generate_from_luminance(values: Sequence[float] | NDArray[np.floating]) -> SampleBuffer:
    return WaveGenerator().luminance(values)
