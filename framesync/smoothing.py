"""
Smoothing Module - Frequency-Domain Gaussian Smoothing

The kernel width is a fraction of the whole sequence length, so the
convolution is done as a product of spectra (circular convolution).

DESIGN CONSTRAINTS:
- Pure numpy/scipy, no state
- Output length == input length
- Real input -> real output
"""

import numpy as np
from scipy import fft as scipy_fft

from framesync.errors import ValidationError


def gaussian_kernel(n_samples: int, sigma: float) -> np.ndarray:
    """
    Unit-sum Gaussian kernel centered at n_samples // 2.

    Shape: exp(-0.5 * (offset / (n_samples * sigma)) ** 2)

    Parameters:
        n_samples: Kernel length (same as the signal)
        sigma: Width as a fraction of n_samples (> 0)

    Returns:
        (n_samples,) float64 array summing to 1
    """
    if not sigma > 0:
        raise ValueError(f"sigma must be positive, got {sigma}")

    offsets = np.arange(n_samples, dtype=np.float64) - n_samples // 2
    kernel = np.exp(-0.5 * (offsets / (n_samples * sigma)) ** 2)
    return kernel / np.sum(kernel)


def smooth_gaussian_fft(signal, sigma: float) -> np.ndarray:
    """
    Smooth a 1-D signal with a Gaussian kernel in the frequency domain.

    CONTRACT:
    - Input: signal (1D real or complex), sigma (> 0, fraction of length)
    - Output: same length; real when the input is real
    - Linear: smooth(k * x) == k * smooth(x)
    - Constant signals are preserved (unit-sum kernel)
    - Edges wrap around (circular convolution)

    ALGORITHM:
        K = FFT(ifftshift(kernel))
        y = IFFT(FFT(x) * K)

    Parameters:
        signal: 1D sequence
        sigma: Kernel width relative to the signal length

    Returns:
        Smoothed signal

    Raises:
        ValueError: If sigma is not positive (including NaN)
        ValidationError: If signal is not 1-D
    """
    if not sigma > 0:
        raise ValueError(f"sigma must be positive, got {sigma}")

    signal = np.asarray(signal)
    if signal.ndim != 1:
        raise ValidationError(f"Signal must be 1-D, got shape {signal.shape}")

    n_samples = len(signal)
    if n_samples == 0:
        return signal.astype(np.float64)

    kernel = gaussian_kernel(n_samples, sigma)
    # Move the kernel center to index 0 so the output is not shifted
    kernel_spectrum = scipy_fft.fft(scipy_fft.ifftshift(kernel))

    smoothed = scipy_fft.ifft(scipy_fft.fft(signal) * kernel_spectrum)

    if np.iscomplexobj(signal):
        return smoothed
    return np.real(smoothed)
