"""
Stack Module - Frame Stack Utilities

Operations on image stacks that are already in memory as
(n_frames, height, width) arrays. No image decoding happens here.

- split_even_odd: interleaved acquisition channels
- project_stack: per-pixel projection across frames
- measure_roi_intensity: per-frame scalar inside a region of interest
"""

import warnings
from typing import Tuple

import numpy as np

from framesync.errors import ShapeMismatchError, ValidationError


PROJECTION_METHODS: Tuple[str, ...] = ('max', 'mean', 'sum', 'min', 'median', 'std', 'var')


def _check_stack(stack: np.ndarray) -> None:
    if stack.ndim != 3:
        raise ValidationError(
            f"Stack must be (n_frames, height, width), got shape {stack.shape}"
        )


def split_even_odd(stack) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a stack into even and odd frames.

    Frames are numbered from 1, so the odd stack holds frames 1, 3, 5, ...
    (indices 0, 2, 4, ...) and the even stack frames 2, 4, 6, ...

    Returns:
        Tuple of (even_stack, odd_stack)
    """
    stack = np.asarray(stack)
    _check_stack(stack)
    return stack[1::2], stack[0::2]


def project_stack(stack, method: str = 'max') -> np.ndarray:
    """
    Project a stack along the frame axis.

    Parameters:
        stack: (n_frames, height, width) array
        method: 'max', 'mean', 'sum', 'min', 'median', 'std' or 'var'
            ('std' and 'var' use the n - 1 normalization)

    Returns:
        (height, width) projection
    """
    stack = np.asarray(stack)
    _check_stack(stack)
    method = method.lower()

    if method == 'max':
        return np.max(stack, axis=0)
    elif method == 'mean':
        return np.mean(stack, axis=0)
    elif method == 'sum':
        return np.sum(stack, axis=0, dtype=np.float64)
    elif method == 'min':
        return np.min(stack, axis=0)
    elif method == 'median':
        return np.median(stack, axis=0)
    elif method == 'std':
        return np.std(stack.astype(np.float64), axis=0, ddof=1)
    elif method == 'var':
        return np.var(stack.astype(np.float64), axis=0, ddof=1)
    else:
        raise ValueError(f"Unsupported projection type: {method}")


def measure_roi_intensity(stack, mask) -> np.ndarray:
    """
    Mean intensity inside a region of interest for every frame.

    CONTRACT:
    - Input: stack (n_frames, height, width), mask (height, width) boolean
    - Output: (n_frames,) float64
    - Blank frames (every pixel identical, e.g. dropped frames) are NaN;
      the trigger detector maps them to "no event"

    Raises:
        ShapeMismatchError: If the mask does not match the frame shape
        ValidationError: If the mask selects no pixel
    """
    stack = np.asarray(stack)
    _check_stack(stack)
    mask = np.asarray(mask, dtype=bool)

    if mask.shape != stack.shape[1:]:
        raise ShapeMismatchError(
            f"ROI mask shape {mask.shape} does not match frame shape {stack.shape[1:]}",
            name='mask', expected=stack.shape[1:], actual=mask.shape
        )
    if not mask.any():
        raise ValidationError("ROI mask selects no pixels", field='mask')

    n_frames = stack.shape[0]
    if n_frames == 0:
        return np.array([], dtype=np.float64)

    flat = stack.reshape(n_frames, -1)
    blank = np.ptp(flat, axis=1) == 0

    intensity = np.mean(stack[:, mask].astype(np.float64), axis=1)
    intensity[blank] = np.nan

    if blank.any():
        warnings.warn(
            f"{int(np.sum(blank))} of {n_frames} frames are blank, "
            f"their ROI intensity is left unmeasured"
        )

    return intensity
