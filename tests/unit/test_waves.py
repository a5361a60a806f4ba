"""Unit tests for wtdraw.dsp.waves module."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from wtdraw.dsp.waves import (
    WaveGenerator,
    additive_core,
    default_harmonics,
    generate_from_harmonics,
    generate_from_luminance,
    generate_saw,
    generate_sine,
    random_harmonics,
)
from wtdraw.types import FRAME_SIZE, HARMONIC_COUNT, GeneratorMode
from wtdraw.utils import SILENCE_THRESHOLD


class TestBasicShapes:
    """Test the fixed-shape generators."""

    def test_sine_shape(self):
        wave = generate_sine()

        assert wave.shape == (FRAME_SIZE,)
        assert wave.dtype == np.float32
        assert wave[0] == 0.0
        assert wave[FRAME_SIZE // 4] == 1.0
        assert wave[3 * FRAME_SIZE // 4] == -1.0

    def test_sine_matches_formula(self):
        i = np.arange(FRAME_SIZE)
        expected = np.sin(2 * np.pi * i / FRAME_SIZE)
        np.testing.assert_allclose(generate_sine(), expected, atol=1e-7)

    def test_saw_ramp(self):
        wave = generate_saw()

        assert wave.dtype == np.float32
        assert wave[0] == 1.0
        assert wave[FRAME_SIZE // 2] == 0.0
        assert wave[-1] == pytest.approx(1 - 2 * (FRAME_SIZE - 1) / FRAME_SIZE)
        # Strictly falling across the cycle
        assert np.all(np.diff(wave) < 0)

    def test_each_call_returns_distinct_buffer(self):
        a = generate_sine()
        b = generate_sine()
        a[0] = 0.5
        assert b[0] == 0.0


class TestHarmonics:
    """Test additive synthesis."""

    def test_fundamental_only_is_sine(self):
        np.testing.assert_allclose(generate_from_harmonics([1.0]), generate_sine(), atol=1e-6)

    def test_fundamental_amplitude_is_normalized_away(self):
        quiet = generate_from_harmonics([0.25])
        np.testing.assert_allclose(quiet, generate_sine(), atol=1e-6)

    def test_second_harmonic_only(self):
        wave = generate_from_harmonics([0.0, 1.0])
        i = np.arange(FRAME_SIZE)
        np.testing.assert_allclose(wave, np.sin(4 * np.pi * i / FRAME_SIZE), atol=1e-6)

    def test_zero_amplitudes_are_skipped_without_changing_output(self):
        sparse = generate_from_harmonics([1.0, 0.0, 0.5])
        i = np.arange(FRAME_SIZE)
        raw = np.sin(2 * np.pi * i / FRAME_SIZE) + 0.5 * np.sin(6 * np.pi * i / FRAME_SIZE)
        np.testing.assert_allclose(sparse, raw / np.max(np.abs(raw)), atol=1e-6)

    def test_all_zero_amplitudes_stay_silent(self):
        wave = generate_from_harmonics([0.0] * HARMONIC_COUNT)
        assert wave.shape == (FRAME_SIZE,)
        assert np.all(wave == 0.0)

    def test_no_amplitudes_is_silent(self):
        assert np.all(generate_from_harmonics([]) == 0.0)

    def test_rejects_nested_amplitudes(self):
        with pytest.raises(ValueError):
            generate_from_harmonics([[1.0, 0.5]])

    @given(
        st.lists(
            st.floats(min_value=0.0, max_value=1.0, allow_nan=False),
            min_size=HARMONIC_COUNT,
            max_size=HARMONIC_COUNT,
        )
    )
    @settings(max_examples=30, deadline=None)
    def test_peak_is_unity_unless_silent(self, amplitudes):
        """Property: output peak is exactly 1.0 unless the raw sum is near-silent."""
        raw_peak = np.max(np.abs(additive_core(np.asarray(amplitudes), FRAME_SIZE)))
        wave = generate_from_harmonics(amplitudes)

        assert wave.shape == (FRAME_SIZE,)
        if raw_peak > SILENCE_THRESHOLD:
            assert np.max(np.abs(wave)) == pytest.approx(1.0, abs=1e-6)
        else:
            assert np.max(np.abs(wave)) <= SILENCE_THRESHOLD * (1 + 1e-6)


class TestHarmonicPresets:
    def test_default_is_fundamental_only(self):
        preset = default_harmonics()
        assert len(preset) == HARMONIC_COUNT
        assert preset[0] == 1.0
        assert all(a == 0.0 for a in preset[1:])

    def test_random_is_reproducible_with_seed(self):
        a = random_harmonics(np.random.default_rng(42))
        b = random_harmonics(np.random.default_rng(42))

        assert a == b
        assert len(a) == HARMONIC_COUNT
        assert all(0.0 <= amp < 1.0 for amp in a)


class TestLuminance:
    """Test the image-luminance generator."""

    def test_full_brightness_maps_to_top(self):
        wave = generate_from_luminance(np.full(FRAME_SIZE, 255.0))
        np.testing.assert_allclose(wave, 1.0)

    def test_black_maps_to_bottom(self):
        wave = generate_from_luminance(np.zeros(FRAME_SIZE))
        np.testing.assert_allclose(wave, -1.0)

    def test_mid_grey_is_silent(self):
        wave = generate_from_luminance(np.full(FRAME_SIZE, 127.5))
        assert np.all(wave == 0.0)

    def test_ramp_is_normalized(self):
        ramp = np.linspace(0, 200, FRAME_SIZE)
        wave = generate_from_luminance(ramp)

        expected = ramp / 127.5 - 1.0
        expected = expected / np.max(np.abs(expected))
        np.testing.assert_allclose(wave, expected, atol=1e-6)
        assert np.max(np.abs(wave)) == 1.0

    @pytest.mark.parametrize("length", [0, 1, FRAME_SIZE - 1, FRAME_SIZE + 1])
    def test_wrong_length_fails_fast(self, length):
        with pytest.raises(ValueError, match="Luminance row"):
            generate_from_luminance(np.zeros(length))


class TestWaveGeneratorDispatch:
    def test_math_mode(self):
        wave = WaveGenerator().generate(GeneratorMode.math, formula="t")
        assert wave[FRAME_SIZE // 2] == 0.5

    def test_harmonic_mode_defaults_to_fundamental(self):
        wave = WaveGenerator().generate(GeneratorMode.harmonic)
        np.testing.assert_allclose(wave, generate_sine(), atol=1e-6)

    def test_image_mode(self):
        wave = WaveGenerator().generate(GeneratorMode.image, luminance=np.zeros(FRAME_SIZE))
        np.testing.assert_allclose(wave, -1.0)

    def test_image_mode_requires_luminance(self):
        with pytest.raises(ValueError):
            WaveGenerator().generate(GeneratorMode.image)

    def test_draw_mode_is_not_a_generator(self):
        with pytest.raises(ValueError):
            WaveGenerator().generate(GeneratorMode.draw)
