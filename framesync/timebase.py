"""
Timebase Module - Frame Time Axis Utilities

Maps frame indices to acquisition times for a fixed frame rate.

DESIGN CONSTRAINTS:
- Frame i is acquired at start + i / frame_rate
- Deterministic: same inputs -> same outputs
- No config imports (explicit parameters)
"""

import numpy as np


DEFAULT_START_TIME_SEC: float = 0.0


def _check_frame_rate(frame_rate_hz: float) -> None:
    if frame_rate_hz <= 0:
        raise ValueError(f"frame_rate_hz must be positive, got {frame_rate_hz}")


def compute_frame_time_axis(
    n_frames: int,
    frame_rate_hz: float,
    start_time_sec: float = DEFAULT_START_TIME_SEC
) -> np.ndarray:
    """
    Acquisition time of every frame.

    Parameters:
        n_frames: Number of frames
        frame_rate_hz: Camera frame rate (> 0)
        start_time_sec: Time of frame 0

    Returns:
        (n_frames,) float64 array, empty when n_frames <= 0
    """
    _check_frame_rate(frame_rate_hz)
    if n_frames <= 0:
        return np.array([], dtype=np.float64)
    return start_time_sec + np.arange(n_frames, dtype=np.float64) / frame_rate_hz


def frame_index_to_time(
    frame_idx: int,
    frame_rate_hz: float,
    start_time_sec: float = DEFAULT_START_TIME_SEC
) -> float:
    """Acquisition time of a single frame."""
    _check_frame_rate(frame_rate_hz)
    return float(start_time_sec + frame_idx / frame_rate_hz)


def retained_times(
    indices,
    frame_rate_hz: float,
    start_time_sec: float = DEFAULT_START_TIME_SEC
) -> np.ndarray:
    """
    Acquisition times of the frames kept by the aligner.

    Parameters:
        indices: Retained frame indices (from alignment.retained_indices)
        frame_rate_hz: Camera frame rate (> 0)
        start_time_sec: Time of frame 0

    Returns:
        float64 array, same length as indices
    """
    _check_frame_rate(frame_rate_hz)
    indices = np.asarray(indices, dtype=np.float64)
    return start_time_sec + indices / frame_rate_hz
