"""
Trigger Module - Hysteresis Trigger Detection

Turns a per-frame intensity trace (e.g. the brightness of a sync LED in a
region of interest) into a ternary event signal:

    intensity >  high          -> 1   (event active)
    intensity <= low           -> 0   (event inactive)
    low < intensity <= high    -> NaN (undetermined)

The undetermined band is not rounded to either side; callers decide what to
do with it (the aligner discards it). A value exactly equal to high is
undetermined, a value exactly equal to low is inactive.

Frames whose intensity could not be measured (NaN, +Inf or -Inf) keep the
initial 0.
"""

from typing import Dict, List

import numpy as np

from framesync.errors import ConfigError, ValidationError


UNDETERMINED: float = np.nan
EVENT_ACTIVE: float = 1.0
EVENT_INACTIVE: float = 0.0


def validate_thresholds(high: float, low: float) -> None:
    """
    Check the hysteresis thresholds before calling the detector.

    Raises:
        ConfigError: If high <= low or a threshold is not finite
    """
    if not (np.isfinite(high) and np.isfinite(low)):
        raise ConfigError(f"Trigger thresholds must be finite, got high={high}, low={low}")
    if high <= low:
        raise ConfigError(
            f"Trigger high threshold must exceed the low threshold, got high={high}, low={low}",
            option='high'
        )


def detect_trigger_hysteresis(intensity, high: float, low: float) -> np.ndarray:
    """
    Classify each frame of an intensity trace as event / no event / undetermined.

    CONTRACT:
    - Input: intensity (1D float array, length N), thresholds high > low
    - Output: (N,) float64 array over {0.0, 1.0, NaN}
    - Non-finite intensities -> 0.0
    - Deterministic: same input -> same output

    PRECONDITION:
        high > low. The detector does not check it and never swaps the
        thresholds; use validate_thresholds() first. If the thresholds
        overlap anyway, "> high" takes precedence over "<= low".

    NaN and +/-Inf intensities count as unmeasured and stay 0, including
    +Inf although it exceeds high.

    Parameters:
        intensity: Per-frame intensity trace
        high: Upper threshold (strictly above -> event)
        low: Lower threshold (at or below -> no event)

    Returns:
        Event signal
    """
    intensity = np.asarray(intensity, dtype=np.float64)
    if intensity.ndim != 1:
        raise ValidationError(f"Intensity trace must be 1-D, got shape {intensity.shape}")

    event = np.zeros(len(intensity), dtype=np.float64)
    measured = np.isfinite(intensity)

    above = measured & (intensity > high)
    below = measured & ~above & (intensity <= low)
    between = measured & ~above & ~below

    event[above] = EVENT_ACTIVE
    event[below] = EVENT_INACTIVE
    event[between] = UNDETERMINED

    return event


def count_trigger_frames(event) -> int:
    """Number of frames where the event signal equals 1."""
    return int(np.count_nonzero(np.asarray(event) == EVENT_ACTIVE))


def find_trigger_segments(event) -> List[Dict]:
    """
    Find contiguous runs of active frames.

    Parameters:
        event: Event signal from detect_trigger_hysteresis

    Returns:
        List of dicts with:
            - 'start_idx': first active frame
            - 'end_idx': one past the last active frame
            - 'n_frames': run length
    """
    active = (np.asarray(event) == EVENT_ACTIVE).astype(np.int8)
    if len(active) == 0:
        return []

    # Rising edges at +1, falling edges at -1
    edges = np.diff(np.concatenate(([0], active, [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)

    return [
        {'start_idx': int(start), 'end_idx': int(end), 'n_frames': int(end - start)}
        for start, end in zip(starts, ends)
    ]
