#!/usr/bin/env python3
"""
framesync - Command Line Interface

Main entry point for synchronizing behavioral channels of recording
sessions. Uses framesync.pipeline for all signal processing.
"""

import argparse
import json
import sys
import traceback
from pathlib import Path
from typing import Optional

import config
from framesync import export, synthetic
from framesync.errors import ConfigError
from framesync.natural_order import list_frame_files
from framesync.params import (
    NormalizationParams,
    OrderingParams,
    SmoothingParams,
    SyncConfig,
    TimebaseParams,
    TriggerParams,
    validate_config,
)
from framesync.pipeline import CHANNEL_NAMES, synchronize
from framesync.session_io import load_session


def build_config(params: dict) -> SyncConfig:
    """Build the pipeline configuration from a CLI parameters dict."""
    return SyncConfig(
        ordering=OrderingParams(remove_dot_entries=params['remove_dot_entries']),
        trigger=TriggerParams(high=params['trigger_high'], low=params['trigger_low']),
        smoothing=SmoothingParams(sigma=params['sigma'], enabled=params['smooth']),
        normalization=NormalizationParams(output_range=tuple(params['output_range'])),
        timebase=TimebaseParams(frame_rate_hz=params['frame_rate']),
    )


def run_session(
    session: dict,
    session_name: str,
    output_dir: Path,
    params: dict,
    session_metadata: dict,
    verbose: bool = False
) -> None:
    """
    Synchronize an in-memory session and export the results.

    Used by both process_single_session and run_demo_mode.

    Parameters:
        session: Dict with 'trigger', 'channels' and 'frame_names'
        session_name: Prefix of the output files
        output_dir: Output directory
        params: Parameters dict
        session_metadata: Metadata copied into the sync JSON
        verbose: Print verbose messages
    """
    cfg = build_config(params)

    if verbose:
        print("Synchronizing channels...")

    result = synchronize(
        session['trigger'],
        session['channels'],
        config=cfg,
        frame_names=session['frame_names']
    )

    if verbose:
        print(f"   Retained {result.n_retained} of {result.n_frames} frames "
              f"in {len(result.segments)} trigger segments")
        print("Exporting results...")

    created_files = export.export_all_outputs(
        result, output_dir, session_name, cfg.to_dict(), session_metadata
    )

    if verbose:
        print(f"   Created {len(created_files)} output files in {output_dir}")

    summary_path = output_dir / f"{session_name}_summary.json"
    with open(summary_path) as f:
        summary = json.load(f)
    export.print_sync_summary(summary, session_name)


def process_single_session(
    file_path: Path,
    output_dir: Path,
    params: dict,
    frames_dir: Optional[Path] = None,
    verbose: bool = False
) -> bool:
    """
    Process a single session archive through the full pipeline.

    Parameters:
        file_path: Path to the session archive
        output_dir: Output directory for results
        params: Parameters dict (from config or overrides)
        frames_dir: Optional frame directory providing the frame names
        verbose: Print verbose progress messages

    Returns:
        True if successful, False otherwise
    """
    try:
        if verbose:
            print(f"\nProcessing: {file_path.name}")
            print("-" * 60)
            print("Loading session...")

        session = load_session(file_path, trigger_key=params['trigger_key'])

        if frames_dir is not None:
            frame_files = list_frame_files(frames_dir, config.FRAME_EXTENSIONS)
            session['frame_names'] = [str(p) for p in frame_files]

        if verbose:
            print(f"   {len(session['trigger'])} frames, "
                  f"channels: {', '.join(session['channels'])}")
            missing = [name for name in CHANNEL_NAMES if name not in session['channels']]
            if missing:
                print(f"   Missing channels: {', '.join(missing)}")

        run_session(
            session,
            file_path.stem,
            output_dir,
            params,
            {'source_file': str(file_path)},
            verbose
        )
        return True

    except Exception as e:
        print(f"ERROR processing {file_path.name}: {e}", file=sys.stderr)
        if verbose:
            traceback.print_exc()
        return False


def process_directory(
    input_dir: Path,
    output_dir: Path,
    params: dict,
    verbose: bool = False
) -> dict:
    """
    Process all session archives in a directory.

    Parameters:
        input_dir: Input directory containing session archives
        output_dir: Output directory for results
        params: Parameters dict
        verbose: Print verbose messages

    Returns:
        Dict with success/failure counts
    """
    session_files = list_frame_files(input_dir, [config.SESSION_SUFFIX])

    if not session_files:
        print(f"No session files found in {input_dir}")
        return {'success': 0, 'failed': 0}

    print(f"Found {len(session_files)} session files")

    success_count = 0
    failed_count = 0

    for session_file in session_files:
        session_output_dir = output_dir / session_file.stem

        success = process_single_session(session_file, session_output_dir, params, verbose=verbose)

        if success:
            success_count += 1
        else:
            failed_count += 1

    print(f"\nProcessing complete: {success_count} successful, {failed_count} failed")

    return {'success': success_count, 'failed': failed_count}


def run_demo_mode(output_dir: Path, params: dict, verbose: bool = False) -> bool:
    """
    Run demo mode using synthetic sessions.

    Parameters:
        output_dir: Output directory for demo results
        params: Parameters dict
        verbose: Print verbose messages

    Returns:
        True if successful
    """
    print("Running demo mode with synthetic sessions...")

    demo_sessions = [
        {
            'name': 'demo_single_block',
            'session': synthetic.generate_session(600, ((100, 500),), seed=0),
            'description': 'One trigger block, shuffled frame listing'
        },
        {
            'name': 'demo_two_blocks',
            'session': synthetic.generate_session(900, ((50, 300), (500, 850)), seed=1),
            'description': 'Two trigger blocks'
        },
        {
            'name': 'demo_no_trigger',
            'session': synthetic.generate_session(300, (), seed=2),
            'description': 'Trigger never asserted'
        },
    ]

    print(f"Generated {len(demo_sessions)} synthetic sessions")

    for demo in demo_sessions:
        print(f"\nProcessing: {demo['name']} ({demo['description']})")
        print("-" * 60)

        try:
            run_session(
                demo['session'],
                demo['name'],
                output_dir / demo['name'],
                params,
                {'source_file': None, 'description': demo['description']},
                verbose
            )
        except Exception as e:
            print(f"ERROR: {e}", file=sys.stderr)
            if verbose:
                traceback.print_exc()
            return False

    print(f"\nDemo complete! Results saved to {output_dir}")
    return True


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='framesync - Trigger-synchronized behavioral channels',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Synchronize a single session
  %(prog)s session.npz --output results/

  # Take frame order from a frame directory
  %(prog)s session.npz --frames-dir frames/ --output results/

  # Synchronize every session of a directory
  %(prog)s sessions/ --output results/

  # Run demo mode
  %(prog)s --demo --output demo_results/
        """
    )

    parser.add_argument(
        'input',
        nargs='?',
        type=str,
        help='Session archive (.npz) or directory (not needed for --demo)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        required=True,
        help='Output directory for results'
    )

    parser.add_argument(
        '--demo',
        action='store_true',
        help='Run demo mode with synthetic sessions (no input file needed)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print verbose progress messages'
    )

    parser.add_argument(
        '--frames-dir',
        type=str,
        help='Frame directory whose naturally ordered file names label the frames'
    )

    parser.add_argument(
        '--no-smooth',
        action='store_true',
        help='Skip Gaussian smoothing'
    )

    # Parameter overrides
    parser.add_argument(
        '--high',
        type=float,
        help=f'Trigger high threshold (default: {config.TRIGGER_HIGH_THRESHOLD})'
    )

    parser.add_argument(
        '--low',
        type=float,
        help=f'Trigger low threshold (default: {config.TRIGGER_LOW_THRESHOLD})'
    )

    parser.add_argument(
        '--sigma',
        type=float,
        help=f'Smoothing width as a fraction of the trace length (default: {config.SMOOTHING_SIGMA})'
    )

    parser.add_argument(
        '--frame-rate',
        type=float,
        help=f'Camera frame rate in Hz (default: {config.FRAME_RATE_HZ})'
    )

    parser.add_argument(
        '--trigger-key',
        type=str,
        default=config.TRIGGER_KEY,
        help=f'Archive key of the trigger intensity (default: {config.TRIGGER_KEY})'
    )

    args = parser.parse_args()

    # Validate arguments
    if not args.demo and not args.input:
        parser.error("Either provide a session file/directory or use --demo")

    # Build parameters dict
    params = {
        'trigger_high': args.high if args.high is not None else config.TRIGGER_HIGH_THRESHOLD,
        'trigger_low': args.low if args.low is not None else config.TRIGGER_LOW_THRESHOLD,
        'sigma': args.sigma if args.sigma is not None else config.SMOOTHING_SIGMA,
        'smooth': not args.no_smooth,
        'output_range': config.OUTPUT_RANGE,
        'frame_rate': args.frame_rate if args.frame_rate is not None else config.FRAME_RATE_HZ,
        'remove_dot_entries': config.REMOVE_DOT_ENTRIES,
        'trigger_key': args.trigger_key,
    }

    try:
        validate_config(build_config(params))
    except ConfigError as e:
        parser.error(str(e))

    output_dir = Path(args.output)

    # Run appropriate mode
    if args.demo:
        success = run_demo_mode(output_dir, params, args.verbose)
        sys.exit(0 if success else 1)

    else:
        input_path = Path(args.input)

        if not input_path.exists():
            print(f"ERROR: Input path does not exist: {input_path}", file=sys.stderr)
            sys.exit(1)

        if input_path.is_file():
            frames_dir = Path(args.frames_dir) if args.frames_dir else None
            success = process_single_session(
                input_path, output_dir, params, frames_dir, args.verbose
            )
            sys.exit(0 if success else 1)

        elif input_path.is_dir():
            if args.frames_dir:
                parser.error("--frames-dir applies to a single session file only")
            results = process_directory(input_path, output_dir, params, args.verbose)
            sys.exit(0 if results['failed'] == 0 else 1)

        else:
            print(f"ERROR: Invalid input path: {input_path}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    main()
