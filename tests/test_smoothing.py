"""
Smoothing Module Tests

Tests for the frequency-domain Gaussian smoother.
"""

import numpy as np
import pytest

from framesync import smoothing
from framesync.errors import ValidationError


class TestGaussianKernel:
    """Tests for gaussian_kernel."""

    def test_unit_sum(self):
        """Kernel sums to 1."""
        kernel = smoothing.gaussian_kernel(101, 0.05)
        assert kernel.sum() == pytest.approx(1.0)

    def test_peak_at_center(self):
        """Peak sits at n // 2 for even and odd lengths."""
        assert np.argmax(smoothing.gaussian_kernel(101, 0.05)) == 50
        assert np.argmax(smoothing.gaussian_kernel(100, 0.05)) == 50

    def test_symmetric(self):
        """Odd-length kernel is symmetric."""
        kernel = smoothing.gaussian_kernel(51, 0.1)
        np.testing.assert_allclose(kernel, kernel[::-1])

    def test_invalid_sigma(self):
        """sigma <= 0 raises ValueError."""
        with pytest.raises(ValueError):
            smoothing.gaussian_kernel(10, 0.0)

    def test_nan_sigma(self):
        """NaN sigma raises ValueError instead of a NaN kernel."""
        with pytest.raises(ValueError):
            smoothing.gaussian_kernel(10, np.nan)


class TestSmoothGaussianFFT:
    """Tests for smooth_gaussian_fft."""

    def test_length_preserved(self):
        """Output length equals input length."""
        rng = np.random.default_rng(0)
        signal = rng.normal(size=257)
        assert len(smoothing.smooth_gaussian_fft(signal, 0.01)) == 257

    def test_real_output_for_real_input(self):
        """Real input gives a real array."""
        result = smoothing.smooth_gaussian_fft(np.arange(20.0), 0.1)
        assert not np.iscomplexobj(result)

    def test_constant_preserved(self):
        """A constant signal is unchanged."""
        result = smoothing.smooth_gaussian_fft(np.full(64, 3.5), 0.05)
        np.testing.assert_allclose(result, 3.5)

    def test_linearity(self):
        """smooth(k * x) == k * smooth(x)."""
        rng = np.random.default_rng(1)
        signal = rng.normal(size=200)
        np.testing.assert_allclose(
            smoothing.smooth_gaussian_fft(2.5 * signal, 0.02),
            2.5 * smoothing.smooth_gaussian_fft(signal, 0.02),
            atol=1e-12
        )

    def test_additivity(self):
        """smooth(x + y) == smooth(x) + smooth(y)."""
        rng = np.random.default_rng(2)
        x, y = rng.normal(size=(2, 128))
        np.testing.assert_allclose(
            smoothing.smooth_gaussian_fft(x + y, 0.03),
            smoothing.smooth_gaussian_fft(x, 0.03) + smoothing.smooth_gaussian_fft(y, 0.03),
            atol=1e-12
        )

    def test_no_shift(self):
        """A centered impulse stays centered."""
        signal = np.zeros(101)
        signal[50] = 1.0
        result = smoothing.smooth_gaussian_fft(signal, 0.02)
        assert np.argmax(result) == 50
        assert result.sum() == pytest.approx(1.0)

    def test_reduces_noise(self):
        """Smoothing lowers the variance of white noise."""
        rng = np.random.default_rng(4)
        signal = rng.normal(size=1000)
        assert np.var(smoothing.smooth_gaussian_fft(signal, 0.005)) < np.var(signal)

    def test_circular_edges(self):
        """An impulse at index 0 leaks to the end of the signal."""
        signal = np.zeros(100)
        signal[0] = 1.0
        result = smoothing.smooth_gaussian_fft(signal, 0.02)
        assert result[-1] > 1e-3
        assert result[-1] == pytest.approx(result[1])

    def test_complex_input(self):
        """Complex input keeps its imaginary part."""
        signal = np.exp(1j * np.linspace(0, 2 * np.pi, 64, endpoint=False))
        result = smoothing.smooth_gaussian_fft(signal, 0.01)
        assert np.iscomplexobj(result)
        assert len(result) == 64

    def test_empty(self):
        """Empty input returns an empty array."""
        assert smoothing.smooth_gaussian_fft([], 0.1).shape == (0,)

    @pytest.mark.parametrize("sigma", [0.0, -0.1, np.nan])
    def test_invalid_sigma(self, sigma):
        """sigma <= 0 or NaN raises ValueError."""
        with pytest.raises(ValueError):
            smoothing.smooth_gaussian_fft(np.ones(10), sigma)

    def test_rejects_2d(self):
        """Signal must be 1-D."""
        with pytest.raises(ValidationError):
            smoothing.smooth_gaussian_fft(np.ones((4, 4)), 0.1)
