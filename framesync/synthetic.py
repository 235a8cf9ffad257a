"""
Synthetic Session Generators

Deterministic recording sessions with known ground truth, used by the
demo mode of the CLI and by the test suite. No external files required.
"""

from typing import Dict, Optional, Sequence, Tuple

import numpy as np


def generate_trigger_trace(
    n_frames: int = 600,
    active_ranges: Sequence[Tuple[int, int]] = ((100, 500),),
    baseline: float = 230.0,
    active_level: float = 260.0,
    noise: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """
    Intensity of a sync LED region of interest.

    Inactive frames stay below 245, active frames above 254. The frame
    just before every active range sits in the undetermined band (250).

    Parameters:
        n_frames: Number of frames
        active_ranges: (start, end) frame ranges, end exclusive
        baseline: Mean inactive intensity
        active_level: Mean active intensity
        noise: Uniform noise amplitude
        seed: Random seed

    Returns:
        (n_frames,) float64 intensity trace
    """
    rng = np.random.default_rng(seed)
    trace = baseline + rng.uniform(-noise, noise, n_frames)

    for start, end in active_ranges:
        trace[start:end] = active_level + rng.uniform(-noise, noise, end - start)
        if start > 0:
            trace[start - 1] = 250.0

    return trace


def generate_behavior_channels(
    n_frames: int = 600,
    frame_rate_hz: float = 30.0,
    seed: int = 0
) -> Dict[str, np.ndarray]:
    """
    Raw behavioral channels with different units and offsets.

    Returns:
        Dict with 'pupil' (pixels), 'whisker_pad' and 'whisker_long'
        (frame-difference energy), 'accel_x', 'accel_y', 'accel_z' (g)
    """
    rng = np.random.default_rng(seed + 1)
    t = np.arange(n_frames) / frame_rate_hz

    pupil = 40.0 + 8.0 * np.sin(2 * np.pi * 0.05 * t) + rng.normal(0, 1.0, n_frames)
    whisking = np.abs(np.sin(2 * np.pi * 0.5 * t))
    whisker_pad = 1e4 * whisking + rng.normal(0, 500.0, n_frames)
    whisker_long = 3e3 * whisking ** 2 + rng.normal(0, 200.0, n_frames)

    return {
        'pupil': pupil,
        'whisker_pad': whisker_pad,
        'whisker_long': whisker_long,
        'accel_x': 0.1 * np.sin(2 * np.pi * 0.2 * t) + rng.normal(0, 0.02, n_frames),
        'accel_y': 0.05 * np.cos(2 * np.pi * 0.2 * t) + rng.normal(0, 0.02, n_frames),
        'accel_z': 1.0 + rng.normal(0, 0.01, n_frames),
    }


def generate_session(
    n_frames: int = 600,
    active_ranges: Sequence[Tuple[int, int]] = ((100, 500),),
    frame_rate_hz: float = 30.0,
    shuffle: bool = True,
    seed: int = 0
) -> Dict:
    """
    Complete session: frame names, trigger intensity and behavior channels.

    Frames are named "frame_<i>.tif" without zero padding; with shuffle the
    names and every trace are permuted together, as a directory listing
    would return them.

    Returns:
        Dict with:
            - 'frame_names': list of str
            - 'trigger': (n_frames,) intensity
            - 'channels': dict of (n_frames,) traces
            - 'listing_order': permutation applied to the true frame order
    """
    trigger = generate_trigger_trace(n_frames, active_ranges, seed=seed)
    channels = generate_behavior_channels(n_frames, frame_rate_hz, seed=seed)
    names = [f"frame_{i}.tif" for i in range(n_frames)]

    if shuffle:
        listing = np.random.default_rng(seed + 2).permutation(n_frames)
    else:
        listing = np.arange(n_frames)

    return {
        'frame_names': [names[i] for i in listing],
        'trigger': trigger[listing],
        'channels': {name: trace[listing] for name, trace in channels.items()},
        'listing_order': listing,
    }


def generate_trigger_stack(
    intensity,
    frame_shape: Tuple[int, int] = (16, 16),
    roi: Tuple[slice, slice] = (slice(2, 6), slice(2, 6)),
    blank_frames: Optional[Sequence[int]] = None,
    seed: int = 0
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Image stack whose ROI pixels carry the given intensity trace.

    Parameters:
        intensity: Per-frame ROI intensity
        frame_shape: (height, width)
        roi: Region of interest as a pair of slices
        blank_frames: Frames set to zero everywhere (dropped frames)
        seed: Random seed for the background

    Returns:
        Tuple of (stack (n_frames, h, w) float64, mask (h, w) bool)
    """
    intensity = np.asarray(intensity, dtype=np.float64)
    rng = np.random.default_rng(seed)
    stack = rng.uniform(10.0, 50.0, (len(intensity),) + tuple(frame_shape))

    mask = np.zeros(frame_shape, dtype=bool)
    mask[roi] = True
    stack[:, mask] = intensity[:, np.newaxis]

    if blank_frames is not None:
        stack[list(blank_frames)] = 0.0

    return stack, mask
