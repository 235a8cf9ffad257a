"""
Alignment Module - Trigger-Masked Channel Alignment

Reduces several per-frame channels to the frames where the trigger event
was active. All channels are masked with the same retained-index set, so
position k of every aligned channel refers to the same frame.
"""

from typing import Dict, Mapping

import numpy as np

from framesync.errors import ShapeMismatchError, ValidationError
from framesync.triggers import EVENT_ACTIVE


def retained_indices(event) -> np.ndarray:
    """Frame indices where the event signal equals 1 (int64, ascending)."""
    return np.flatnonzero(np.asarray(event) == EVENT_ACTIVE)


def check_channel_length(name: str, channel: np.ndarray, n_frames: int) -> None:
    """Raise ShapeMismatchError unless channel is 1-D with n_frames samples."""
    if channel.ndim != 1:
        raise ShapeMismatchError(
            f"Channel {name!r} must be 1-D, got shape {channel.shape}",
            name=name, expected=(n_frames,), actual=channel.shape
        )
    if len(channel) != n_frames:
        raise ShapeMismatchError(
            f"Channel {name!r} has {len(channel)} samples, expected {n_frames}",
            name=name, expected=(n_frames,), actual=channel.shape
        )


def mask_channel(event, channel) -> np.ndarray:
    """
    Replace every sample outside the active event with NaN.

    Returns a float64 copy of the channel; length is unchanged.
    """
    event = np.asarray(event)
    channel = np.asarray(channel, dtype=np.float64)
    check_channel_length('channel', channel, len(event))

    masked = channel.copy()
    masked[event != EVENT_ACTIVE] = np.nan
    return masked


def align_channels(event, channels: Mapping[str, object]) -> Dict[str, np.ndarray]:
    """
    Trim channels to the frames where the event signal equals 1.

    CONTRACT:
    - Input: event (N,) over {0, 1, NaN}; channels: name -> (N,) sequence
    - Output: name -> (M,) float64 array, M = number of 1-valued samples
    - Undetermined (NaN) and inactive (0) samples are dropped
    - NaN values already present in a channel at retained frames are kept,
      compaction follows the event mask only
    - M == 0 is a valid result (all channels empty)
    - Output keys follow the input mapping order

    Parameters:
        event: Event signal from detect_trigger_hysteresis
        channels: Raw channels keyed by name

    Returns:
        Aligned channel set

    Raises:
        ValidationError: If no channels are given
        ShapeMismatchError: If a channel length differs from the event length
    """
    event = np.asarray(event, dtype=np.float64)
    if event.ndim != 1:
        raise ShapeMismatchError(
            f"Event signal must be 1-D, got shape {event.shape}",
            name='event', actual=event.shape
        )
    if not channels:
        raise ValidationError("At least one channel is required for alignment")

    n_frames = len(event)
    arrays = {}
    # Validate every channel before producing any output
    for name, channel in channels.items():
        array = np.asarray(channel, dtype=np.float64)
        check_channel_length(name, array, n_frames)
        arrays[name] = array

    keep = event == EVENT_ACTIVE
    return {name: array[keep] for name, array in arrays.items()}
