"""
Export Module

Generate JSON outputs for synchronization results.
All outputs follow a versioned schema for consistency.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from framesync.pipeline import SyncResult


SCHEMA_VERSION: str = "1.0"


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


def _finite_or_none(values: np.ndarray) -> List[Optional[float]]:
    """Channel values as a list, NaN and Inf written as null (strict JSON)."""
    return [float(v) if np.isfinite(v) else None for v in values]


def _event_counts(event: np.ndarray) -> Dict[str, int]:
    return {
        'active': int(np.count_nonzero(event == 1.0)),
        'inactive': int(np.count_nonzero(event == 0.0)),
        'undetermined': int(np.count_nonzero(np.isnan(event))),
    }


def create_sync_json(
    result: SyncResult,
    params: Dict,
    session_metadata: Optional[Dict] = None
) -> Dict:
    """
    Create complete synchronization JSON following schema.

    Parameters:
        result: SyncResult from pipeline.synchronize
        params: Dict of all parameters used (SyncConfig.to_dict())
        session_metadata: Optional extra metadata (source file, etc.)

    Returns:
        Complete dict ready for JSON serialization
    """
    retained_names = None
    if result.frame_names is not None:
        retained_names = [result.frame_names[i] for i in result.indices]

    channels = {}
    for name, values in result.aligned.items():
        finite = values[np.isfinite(values)]
        channels[name] = {
            'values': _finite_or_none(values),
            'length': len(values),
            'range': [float(np.min(finite)), float(np.max(finite))] if len(finite) else None,
        }

    return {
        'schema_version': SCHEMA_VERSION,

        'session_metadata': {
            'n_frames': result.n_frames,
            'n_retained': result.n_retained,
            **(session_metadata or {}),
        },

        'params': params,

        'trigger': {
            'event_counts': _event_counts(result.event),
            'segments': result.segments,
        },

        'retained_frames': {
            'indices': result.indices,
            'times_sec': result.times,
            'frame_names': retained_names,
        },

        'channels': channels,
    }


def create_summary_json(sync_json: Dict) -> Dict:
    """
    Create summary JSON with key statistics.

    Parameters:
        sync_json: Full JSON from create_sync_json

    Returns:
        Summary dict with top-level stats
    """
    segments = sync_json['trigger']['segments']
    times = np.asarray(sync_json['retained_frames']['times_sec'], dtype=np.float64)

    if segments:
        longest = max(segments, key=lambda s: s['n_frames'])
        longest_segment = {'start_idx': longest['start_idx'], 'n_frames': longest['n_frames']}
    else:
        longest_segment = None

    return {
        'schema_version': SCHEMA_VERSION,
        'n_frames': sync_json['session_metadata']['n_frames'],
        'n_retained': sync_json['session_metadata']['n_retained'],
        'event_counts': sync_json['trigger']['event_counts'],
        'num_segments': len(segments),
        'longest_segment': longest_segment,
        'retained_span_sec': float(times[-1] - times[0]) if len(times) > 1 else 0.0,
        'channels': list(sync_json['channels'].keys()),
    }


def save_json(data: Dict, output_path: Path) -> None:
    """
    Save data as JSON with pretty printing.

    Parameters:
        data: Dictionary to save
        output_path: Path to output file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2, cls=NumpyEncoder, allow_nan=False)


def export_all_outputs(
    result: SyncResult,
    output_dir: Path,
    session_name: str,
    params: Dict,
    session_metadata: Optional[Dict] = None
) -> List[Path]:
    """
    Write the sync and summary JSON files of one session.

    Returns:
        List of created file paths
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    sync_json = create_sync_json(result, params, session_metadata)
    sync_path = output_dir / f"{session_name}_sync.json"
    save_json(sync_json, sync_path)

    summary_json = create_summary_json(sync_json)
    summary_path = output_dir / f"{session_name}_summary.json"
    save_json(summary_json, summary_path)

    return [sync_path, summary_path]


def print_sync_summary(summary_json: Dict, session_name: str) -> None:
    """
    Print concise synchronization summary to console.

    Parameters:
        summary_json: Summary JSON dict
        session_name: Session name
    """
    counts = summary_json['event_counts']

    print(f"\n{'='*60}")
    print(f"Sync Summary: {session_name}")
    print(f"{'='*60}")
    print(f"Frames: {summary_json['n_frames']}, retained: {summary_json['n_retained']}")
    print(f"Trigger frames: {counts['active']} active, {counts['inactive']} inactive, "
          f"{counts['undetermined']} undetermined")
    print(f"Trigger segments: {summary_json['num_segments']}")

    if summary_json['longest_segment'] is not None:
        longest = summary_json['longest_segment']
        print(f"Longest segment: {longest['n_frames']} frames from frame {longest['start_idx']}")

    print(f"Retained span: {summary_json['retained_span_sec']:.2f}s")
    print(f"Channels: {', '.join(summary_json['channels'])}")
    print(f"{'='*60}\n")
