"""
markertrack Command Line Interface

Usage:
    markertrack <command> [options]

Commands:
    preview     Show how a threshold segments one frame
    track       Track markers through a video

Examples:
    markertrack preview input.mp4 -t 135 -f 1
    markertrack track input.mp4 -t 135 --roi 40,60,30,30 --roi 200,60,30,30 \\
        -out video -out gif --save tracked.npz
    markertrack track input.mp4 -c tracking.json --start-time 2 --end-time 10
"""

import logging
import sys
import argparse
import itertools
import warnings
from pathlib import Path

import cv2

from markertrack import __version__
from markertrack.core.mask import parse_roi


logger = logging.getLogger("markertrack")


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the package logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    return logger


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='markertrack',
        description='Punctate marker tracking in video',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '-V', '--version',
        action='version',
        version=f'markertrack {__version__}',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Preview command
    preview_parser = subparsers.add_parser(
        'preview',
        help='Show how a threshold segments one frame',
    )
    preview_parser.add_argument('input', help='Input video file')
    preview_parser.add_argument(
        '-t', '--threshold',
        type=float,
        required=True,
        help='Intensity threshold; pixels darker than this are foreground',
    )
    preview_parser.add_argument(
        '-f', '--frame',
        type=int,
        default=1,
        help='Frame to preview (default: 1)',
    )
    preview_parser.add_argument(
        '-o', '--output',
        default=None,
        help='Output PNG (default: <input>_preview.png)',
    )

    # Track command
    track_parser = subparsers.add_parser(
        'track',
        help='Track markers through a video',
    )
    track_parser.add_argument('input', help='Input video file')
    track_parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=None,
        help='Intensity threshold (default: from config)',
    )
    track_parser.add_argument(
        '-c', '--config',
        default=None,
        help='JSON configuration file',
    )
    track_parser.add_argument(
        '--roi',
        action='append',
        type=parse_roi,
        default=[],
        metavar='X,Y,W,H',
        help='Region containing markers (can be used multiple times)',
    )
    track_parser.add_argument(
        '-fs', '--first-frame',
        type=int,
        default=1,
        help='First frame to process (default: 1)',
    )
    track_parser.add_argument(
        '-fe', '--frame-end',
        type=int,
        default=None,
        help='Last frame to process (default: end of video)',
    )
    track_parser.add_argument(
        '--start-time',
        type=float,
        default=None,
        help='Start of the range to track, in seconds',
    )
    track_parser.add_argument(
        '--end-time',
        type=float,
        default=None,
        help='End of the range to track, in seconds',
    )
    track_parser.add_argument(
        '--assignment',
        choices=['hungarian', 'nearest'],
        default=None,
        help='Marker assignment policy (default: hungarian)',
    )
    track_parser.add_argument(
        '-out', '--output',
        action='append',
        dest='outputs',
        metavar='SPEC',
        help='Output specification, e.g. video, gif, csv=filename=pos.csv',
    )
    track_parser.add_argument(
        '--save',
        default=None,
        help='Save trajectories to .npz or .csv',
    )
    track_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress output',
    )
    track_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log per-frame details',
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(getattr(args, 'verbose', False))

    if args.command == 'preview':
        return run_preview(args)
    elif args.command == 'track':
        return run_track(args)
    else:
        parser.print_help()
        return 1


def run_preview(args) -> int:
    """Render a threshold preview montage for one frame."""
    from markertrack.core.video import VideoReader
    from markertrack.outputs.overlay import render_preview
    from markertrack.tracking.preview import preview_threshold

    with VideoReader(args.input, args.frame, args.frame) as reader:
        frame = next(iter(reader), None)
    if frame is None:
        logger.error("Could not read frame %d from %s", args.frame, args.input)
        return 1

    preview = preview_threshold(frame.data, args.threshold)
    output = Path(args.output or f"{Path(args.input).stem}_preview.png")
    if not cv2.imwrite(str(output), render_preview(preview)):
        logger.error("Failed to write %s", output)
        return 1

    print(f"Frame {frame.index}: {preview.num_blobs} blob(s) at threshold {args.threshold}")
    for i, (x, y) in enumerate(preview.centroids):
        print(f"  {i}: ({x:.2f}, {y:.2f})")
    print(f"Preview written to {output}")
    return 0


def _build_config(args):
    from markertrack.core.config import TrackingConfig, apply_env_overrides, load_config

    config = load_config(args.config) if args.config else TrackingConfig()
    apply_env_overrides(config)
    if args.threshold is not None:
        config.threshold = args.threshold
    if args.assignment is not None:
        config.assignment = args.assignment
    return config


def run_track(args) -> int:
    """Run marker tracking over a video."""
    from markertrack.core.mask import mask_from_rois
    from markertrack.core.video import VideoReader
    from markertrack.outputs import OutputManager
    from markertrack.tracking import (
        AmbiguousAssignmentWarning,
        InitializationError,
        MissedDetectionWarning,
        OutputError,
        TrackingSession,
    )

    config = _build_config(args)
    if config.threshold is None:
        logger.error("No threshold given; use -t or set it in the config")
        return 1
    rois = args.roi

    if args.start_time is not None or args.end_time is not None:
        if args.start_time is None or args.end_time is None:
            logger.error("--start-time and --end-time must be given together")
            return 1
        reader = VideoReader.from_time_range(args.input, args.start_time, args.end_time)
    else:
        reader = VideoReader(args.input, args.first_frame, args.frame_end)

    output_manager = None
    if args.outputs:
        output_manager = OutputManager(args.input)
        for spec in args.outputs:
            output_manager.add_output(spec)

    session = TrackingSession(
        config,
        on_frame_tracked=output_manager.process_frame if output_manager else None,
    )

    print(f"Tracking markers in {args.input}")
    missed = 0
    with reader:
        props = reader.properties
        frames = iter(reader)
        first = next(frames, None)
        if first is None:
            logger.error("No frames to track in %s", args.input)
            return 1

        mask = mask_from_rois(first.shape, rois) if rois else None
        try:
            k = session.initialize(first, mask=mask)
        except InitializationError as e:
            logger.error("%s", e)
            return 1
        print(f"Found {k} marker(s) on frame {first.index}")

        try:
            if output_manager:
                output_manager.initialize_all(props.to_dict())

            with warnings.catch_warnings():
                # Reported per frame from the results below
                warnings.simplefilter("ignore", MissedDetectionWarning)
                warnings.simplefilter("ignore", AmbiguousAssignmentWarning)
                # The first frame is tracked too, so it gets a trajectory row
                for result in itertools.chain([session.step(first)], session.track(frames)):
                    if result.missed:
                        missed += 1
                        logger.warning(
                            "Frame %d: found %d of %d marker(s), keeping previous positions",
                            result.frame_index, len(result.candidates), k,
                        )
                    if result.ambiguous:
                        logger.warning(
                            "Frame %d: markers %s share a candidate",
                            result.frame_index, list(result.ambiguous),
                        )
                    if not args.quiet:
                        print(f"\rFrame {result.frame_index}: {k} marker(s)", end='')
        except OutputError as e:
            logger.error("%s", e)
            return 1
        finally:
            if output_manager:
                output_manager.finalize_all()

    if not args.quiet:
        print()
    print(f"Tracked {len(session.log)} frame(s), {missed} with missed detections")

    if args.save:
        save_path = Path(args.save)
        if save_path.suffix.lower() == '.csv':
            session.log.to_csv(save_path)
        else:
            session.log.save_npz(save_path)
        print(f"Trajectories saved to {save_path}")
    if output_manager:
        for path in output_manager.get_output_paths():
            print(f"Wrote {path}")

    print("Done!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
