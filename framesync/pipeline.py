"""
Pipeline Module - Session Synchronization

Runs the primitives in the order the downstream consumers rely on:

1. Natural ordering of frame names (optional, reorders every trace)
2. Per-channel conditioning: range normalization, then Gaussian smoothing
3. Hysteresis trigger detection on the dedicated intensity trace
4. Trigger-masked alignment of all conditioned channels

The primitives do not enforce this order; this module does.
"""

import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from framesync.alignment import align_channels, check_channel_length, retained_indices
from framesync.errors import ShapeMismatchError
from framesync.natural_order import natural_sort
from framesync.normalize import DEFAULT_OUTPUT_RANGE, normalize_range
from framesync.params import DEFAULT_CONFIG, SyncConfig, validate_config
from framesync.smoothing import smooth_gaussian_fft
from framesync.timebase import retained_times
from framesync.triggers import detect_trigger_hysteresis, find_trigger_segments


# Behavioral channels measured per frame, in export order
CHANNEL_NAMES: Tuple[str, ...] = (
    'pupil',
    'whisker_pad',
    'whisker_long',
    'accel_x',
    'accel_y',
    'accel_z',
)

# Intensity channel the trigger is detected on
TRIGGER_CHANNEL: str = 'trigger'


@dataclass
class SyncResult:
    """
    Output of synchronize().

    Attributes:
        event: Event signal over all (ordered) frames
        indices: Retained frame indices (positions in the ordered frames)
        times: Acquisition times of the retained frames
        aligned: Aligned channel set, every array of length len(indices)
        segments: Contiguous trigger-active runs
        frame_order: Natural order permutation (None without frame names)
        frame_names: Frame names in natural order (None without frame names)
    """
    event: np.ndarray
    indices: np.ndarray
    times: np.ndarray
    aligned: Dict[str, np.ndarray]
    segments: List[Dict] = field(default_factory=list)
    frame_order: Optional[List[int]] = None
    frame_names: Optional[List] = None

    @property
    def n_frames(self) -> int:
        return len(self.event)

    @property
    def n_retained(self) -> int:
        return len(self.indices)


def init_channels(n_frames: int, names: Sequence[str] = CHANNEL_NAMES) -> Dict[str, np.ndarray]:
    """Zero-filled trace for every channel name."""
    return {name: np.zeros(n_frames, dtype=np.float64) for name in names}


def condition_channel(
    trace,
    sigma: float,
    output_range: Sequence[float] = DEFAULT_OUTPUT_RANGE,
    input_limits: Optional[Sequence[float]] = None,
    smooth: bool = True
) -> np.ndarray:
    """
    Normalize a raw trace, then smooth it.

    Non-finite samples are held at the midpoint of output_range while
    smoothing and put back afterwards, so one NaN does not contaminate
    the whole spectrum.

    Parameters:
        trace: Raw per-frame trace
        sigma: Smoothing width (fraction of the trace length)
        output_range: Normalization target range
        input_limits: Optional normalization clamping limits
        smooth: Apply the smoother after normalization

    Returns:
        Conditioned trace (float64, same length)
    """
    normalized = normalize_range(np.asarray(trace, dtype=np.float64), output_range, input_limits)
    if not smooth or normalized.size == 0:
        return normalized

    finite = np.isfinite(normalized)
    midpoint = (output_range[0] + output_range[1]) / 2.0
    filled = np.where(finite, normalized, midpoint)

    smoothed = smooth_gaussian_fft(filled, sigma)
    smoothed[~finite] = normalized[~finite]
    return smoothed


def synchronize(
    intensity,
    channels: Mapping[str, object],
    config: SyncConfig = DEFAULT_CONFIG,
    frame_names: Optional[Sequence] = None
) -> SyncResult:
    """
    Condition, trigger-detect and align one recording session.

    Parameters:
        intensity: Per-frame trigger intensity trace
        channels: Raw behavioral channels keyed by name
        config: Pipeline configuration
        frame_names: Optional frame identifiers; when given, every trace is
            reordered into natural frame order first

    Returns:
        SyncResult

    Raises:
        ConfigError: Invalid configuration (e.g. high <= low)
        ShapeMismatchError: Traces or frame names of different lengths
        ValidationError: No channels, malformed frame names
    """
    validate_config(config)

    intensity = np.asarray(intensity, dtype=np.float64)
    n_frames = len(intensity)
    traces = {}
    for name, channel in channels.items():
        array = np.asarray(channel, dtype=np.float64)
        check_channel_length(name, array, n_frames)
        traces[name] = array

    order = None
    ordered_names = None
    if frame_names is not None:
        if len(frame_names) != n_frames:
            raise ShapeMismatchError(
                f"Got {len(frame_names)} frame names for {n_frames} frames",
                name='frame_names', expected=(n_frames,), actual=(len(frame_names),)
            )
        ordered_names, order = natural_sort(list(frame_names), config.ordering.to_sort_options())
        intensity = intensity[order]
        traces = {name: trace[order] for name, trace in traces.items()}

    norm = config.normalization
    conditioned = {
        name: condition_channel(
            trace,
            config.smoothing.sigma,
            output_range=norm.output_range,
            input_limits=norm.input_limits,
            smooth=config.smoothing.enabled
        )
        for name, trace in traces.items()
    }

    event = detect_trigger_hysteresis(intensity, config.trigger.high, config.trigger.low)
    aligned = align_channels(event, conditioned)
    indices = retained_indices(event)

    if len(indices) == 0:
        warnings.warn("No trigger-active frames found, aligned channels are empty")

    times = retained_times(indices, config.timebase.frame_rate_hz, config.timebase.start_time_sec)

    return SyncResult(
        event=event,
        indices=indices,
        times=times,
        aligned=aligned,
        segments=find_trigger_segments(event),
        frame_order=order,
        frame_names=ordered_names
    )
