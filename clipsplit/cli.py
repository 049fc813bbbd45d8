"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from clipsplit.engine import plan_split, process
from clipsplit.errors import SplitError, ValidationError
from clipsplit.ffutil import format_ffmpeg_time
from clipsplit.manifest import (
    DEFAULT_TARGET_SIZE_GB,
    Manifest,
    load_manifest,
    parse_exclusion,
)
from clipsplit.models import TimeRange
from clipsplit.utils import format_duration, format_file_size, gb_to_bytes, is_valid_partition_size


def parse_exclude_arg(text: str) -> TimeRange:
    """Parse ``START-END`` (seconds or timestamps) into a TimeRange."""
    start, sep, end = text.partition("-")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected START-END, got {text!r}")
    try:
        return parse_exclusion({"start": start, "end": end})
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _add_request_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("video", nargs="?", type=Path, help="Input video file")
    p.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    p.add_argument("--output-dir", "-o", type=Path, help="Directory for the partitions (default: next to the input)")
    size = p.add_mutually_exclusive_group()
    size.add_argument("--target-gb", type=float, default=DEFAULT_TARGET_SIZE_GB, help="Target size per partition in GB")
    size.add_argument("--target-bytes", type=int, help="Target size per partition in bytes")
    p.add_argument(
        "--exclude", "-x", action="append", type=parse_exclude_arg, default=[],
        metavar="START-END", help="Time range to leave out, e.g. 00:10:00-00:12:30 (repeatable)",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Log planning and ffmpeg details")


def _build_manifest(args: argparse.Namespace) -> Manifest:
    if args.manifest:
        return load_manifest(args.manifest)

    if args.target_bytes is not None:
        target = args.target_bytes
    else:
        if not is_valid_partition_size(args.target_gb):
            raise ValidationError(f"--target-gb must be in (0, 100], got {args.target_gb}")
        target = gb_to_bytes(args.target_gb)

    return Manifest(
        input=args.video,
        output_dir=args.output_dir or args.video.parent,
        target_size_bytes=target,
        exclusions=args.exclude,
    )


def _print_plan(manifest: Manifest) -> None:
    plan = plan_split(manifest)
    print(f"Input:     {manifest.input}")
    print(f"Duration:  {format_duration(plan.duration)} ({format_file_size(plan.file_size)})")
    print(f"Effective: {format_duration(plan.effective_duration)}")
    print(f"Target:    {format_file_size(manifest.target_size_bytes)} per partition")
    print()
    for point in plan.partitions:
        segments = ", ".join(
            f"{format_ffmpeg_time(s.start)}-{format_ffmpeg_time(s.end)}"
            for s in plan.segments_for(point)
        )
        print(
            f"  {plan.output_path_for(point).name}: "
            f"{format_ffmpeg_time(point.start)}-{format_ffmpeg_time(point.end)} "
            f"~{format_file_size(point.estimated_size_bytes)}  <- {segments}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="clipsplit",
        description="ClipSplit — split large videos into size-bounded parts, skipping excluded ranges.",
    )
    sub = parser.add_subparsers(dest="command")

    split = sub.add_parser("split", help="Split a video file into partitions")
    _add_request_args(split)

    plan = sub.add_parser("plan", help="Show the partitions a split would produce")
    _add_request_args(plan)

    serve = sub.add_parser("serve", help="Launch the web API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.INFO if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        from clipsplit.web import create_app
        app = create_app()
        print(f"ClipSplit API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if not args.manifest and not args.video:
        print("Error: provide either a VIDEO argument or --manifest.", file=sys.stderr)
        sys.exit(1)

    try:
        m = _build_manifest(args)
        if args.command == "plan":
            _print_plan(m)
            return

        def on_progress(stage: str, frac: float) -> None:
            print(f"  [{frac:3.0%}] {stage}")

        result = process(m, on_progress=on_progress)
    except (SplitError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! {len(result.output_paths)} partition(s) created:")
    for path in result.output_paths:
        print(f"  {path}")
    print(f"  Duration: {result.duration_original:.1f}s -> {result.duration_effective:.1f}s")
