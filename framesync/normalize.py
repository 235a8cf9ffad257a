"""
Normalization Module - Range Rescaling

Affine rescaling of numeric arrays into a target range with explicit
policies for degenerate spans and special values.

CONTRACT SUMMARY:
- Empty input is returned unchanged
- input_limits clamp the data before scaling
- Span below DEGENERATE_TOLERANCE -> midpoint of output_range everywhere
- +/-Inf pass through unscaled, NaN stays NaN
"""

import numbers
from typing import Optional, Sequence, Tuple

import numpy as np

from framesync.errors import ValidationError


DEFAULT_OUTPUT_RANGE: Tuple[float, float] = (0.0, 1.0)
DEGENERATE_TOLERANCE: float = 1e-12


def _validate_pair(value, field: str) -> Tuple[float, float]:
    """Check that value holds exactly two finite real numbers."""
    if isinstance(value, (str, bytes)) or not hasattr(value, '__len__'):
        raise ValidationError(
            f"{field} must be a pair of numbers, got {value!r}", field=field
        )
    items = list(np.ravel(value)) if isinstance(value, np.ndarray) else list(value)
    if len(items) != 2:
        raise ValidationError(
            f"{field} must hold exactly two values, got {len(items)}", field=field
        )
    for item in items:
        if isinstance(item, (bool, np.bool_)) or not isinstance(item, numbers.Real):
            raise ValidationError(
                f"{field} values must be real numbers, got {item!r}", field=field
            )
        if not np.isfinite(item):
            raise ValidationError(
                f"{field} values must be finite, got {item!r}", field=field
            )
    return float(items[0]), float(items[1])


def normalize_range(
    data,
    output_range: Sequence[float] = DEFAULT_OUTPUT_RANGE,
    input_limits: Optional[Sequence[float]] = None
) -> np.ndarray:
    """
    Rescale an array into output_range.

    CONTRACT:
    - Input: array-like of any shape
    - Output: float64 array of the same shape
    - Without input_limits, min/max come from the finite values of data
    - With input_limits, values are clamped to [min, max] first
    - Degenerate span (< DEGENERATE_TOLERANCE): filled with the midpoint
      of output_range, no division
    - +/-Inf positions keep the input value, NaN positions stay NaN
    - Deterministic: same input -> same output

    Equation:
        y = (x - min) / (max - min) * (hi - lo) + lo

    Parameters:
        data: Values to rescale
        output_range: Target (lo, hi), default (0, 1)
        input_limits: Optional (min, max) used instead of the data range

    Returns:
        Rescaled array

    Raises:
        ValidationError: If output_range or input_limits is not exactly two finite
            real numbers, or input_limits has min > max
    """
    lo, hi = _validate_pair(output_range, 'output_range')
    limits = None
    if input_limits is not None:
        limits = _validate_pair(input_limits, 'input_limits')
        if limits[0] > limits[1]:
            raise ValidationError(
                f"input_limits must be ordered (min <= max), got {limits}",
                field='input_limits'
            )

    data = np.asarray(data)
    if data.size == 0:
        return data

    original = data.astype(np.float64)
    finite = np.isfinite(original)

    if limits is not None:
        d_min, d_max = limits
        values = np.clip(original, d_min, d_max)
    elif finite.any():
        values = original
        d_min = float(np.min(original[finite]))
        d_max = float(np.max(original[finite]))
    else:
        values = original
        d_min = d_max = 0.0

    span = d_max - d_min
    if span < DEGENERATE_TOLERANCE:
        normalized = np.full(original.shape, (lo + hi) / 2.0, dtype=np.float64)
    else:
        normalized = (values - d_min) / span * (hi - lo) + lo

    # Special values override the affine result
    infinite = np.isinf(original)
    normalized[infinite] = original[infinite]
    normalized[np.isnan(original)] = np.nan

    return normalized


def to_uint8(image, input_limits: Optional[Sequence[float]] = None) -> np.ndarray:
    """
    Convert an image to 8-bit grayscale.

    The image is rescaled to [0, 1], multiplied by 255 and rounded.
    Non-finite pixels become 0 (NaN, -Inf) or 255 (+Inf).

    Parameters:
        image: 2-D array (any numeric dtype)
        input_limits: Optional (min, max) mapped to black and white

    Returns:
        uint8 array of the same shape
    """
    scaled = normalize_range(image, (0.0, 1.0), input_limits)
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=1.0, neginf=0.0)
    scaled = np.clip(scaled, 0.0, 1.0)
    return np.round(scaled * 255.0).astype(np.uint8)
