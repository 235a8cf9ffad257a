"""
Session I/O Module

Loads and saves per-frame measurements produced by the image measurement
stage. A session is a plain numpy archive (numpy.savez) with one array per
channel, the trigger intensity under 'trigger' and optionally the frame
identifiers under 'frame_names'.
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

import numpy as np

from framesync.errors import ShapeMismatchError, ValidationError


TRIGGER_KEY: str = 'trigger'
FRAME_NAMES_KEY: str = 'frame_names'


def load_session(file_path: Union[str, Path], trigger_key: str = TRIGGER_KEY) -> Dict:
    """
    Load a session archive.

    Parameters:
        file_path: Path to a .npz archive
        trigger_key: Archive key of the trigger intensity trace

    Returns:
        Dict with 'trigger' (ndarray), 'channels' (dict of ndarrays, archive
        order) and 'frame_names' (list of str or None)

    Raises:
        FileNotFoundError: If the archive does not exist
        ValidationError: If the trigger trace is missing
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Session file not found: {file_path}")

    with np.load(file_path, allow_pickle=False) as archive:
        if trigger_key not in archive.files:
            raise ValidationError(
                f"Session {file_path.name} has no {trigger_key!r} trace", field=trigger_key
            )
        trigger = np.asarray(archive[trigger_key], dtype=np.float64)
        frame_names = None
        if FRAME_NAMES_KEY in archive.files:
            frame_names = [str(name) for name in archive[FRAME_NAMES_KEY]]
        channels = {
            key: np.asarray(archive[key], dtype=np.float64)
            for key in archive.files
            if key not in (trigger_key, FRAME_NAMES_KEY)
        }

    return {'trigger': trigger, 'channels': channels, 'frame_names': frame_names}


def save_session(
    file_path: Union[str, Path],
    trigger,
    channels: Mapping[str, object],
    frame_names: Optional[Sequence[str]] = None
) -> Path:
    """
    Save a session archive.

    Raises:
        ValidationError: If a channel uses a reserved key
        ShapeMismatchError: If traces differ in length
    """
    file_path = Path(file_path)
    # numpy.savez appends the suffix itself when it is missing
    if file_path.suffix != '.npz':
        file_path = file_path.with_name(file_path.name + '.npz')
    trigger = np.asarray(trigger, dtype=np.float64)

    arrays = {TRIGGER_KEY: trigger}
    for name, channel in channels.items():
        if name in (TRIGGER_KEY, FRAME_NAMES_KEY):
            raise ValidationError(f"Channel name {name!r} is reserved", field=name)
        array = np.asarray(channel, dtype=np.float64)
        if array.shape != trigger.shape:
            raise ShapeMismatchError(
                f"Channel {name!r} has shape {array.shape}, trigger has {trigger.shape}",
                name=name, expected=trigger.shape, actual=array.shape
            )
        arrays[name] = array

    if frame_names is not None:
        if len(frame_names) != len(trigger):
            raise ShapeMismatchError(
                f"Got {len(frame_names)} frame names for {len(trigger)} frames",
                name=FRAME_NAMES_KEY
            )
        arrays[FRAME_NAMES_KEY] = np.asarray(list(frame_names), dtype=str)

    file_path.parent.mkdir(parents=True, exist_ok=True)
    np.savez(file_path, **arrays)
    return file_path
