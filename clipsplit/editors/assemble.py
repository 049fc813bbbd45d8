"""Segment assembler — writes each planned partition to its own output file."""

import logging
from pathlib import Path
from typing import Callable

from clipsplit import ffutil
from clipsplit.errors import ComputationError
from clipsplit.manifest import Manifest
from clipsplit.models import PartitionPoint, TimeRange
from clipsplit.planning.timeline import map_effective_range

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".mp4"


def _stem_and_suffix(input_path: Path) -> tuple[str, str]:
    return input_path.stem or "output", input_path.suffix or DEFAULT_SUFFIX


def output_path_for(manifest: Manifest, index: int) -> Path:
    """Final path of the partition with 0-based ``index``: ``{stem}_part{N}{suffix}``."""
    stem, suffix = _stem_and_suffix(manifest.input)
    return manifest.output_dir / f"{stem}_part{index + 1}{suffix}"


def temp_path_for(
    manifest: Manifest, index: int, segment_index: int, tag: str | None = None
) -> Path:
    stem, suffix = _stem_and_suffix(manifest.input)
    prefix = f"_temp_{tag}_" if tag else "_temp_"
    return manifest.output_dir / f"{prefix}{stem}_p{index + 1}_s{segment_index}{suffix}"


def _remove_temp_files(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", path, e)


def assemble(
    manifest: Manifest,
    points: list[PartitionPoint],
    included: list[TimeRange],
    on_progress: Callable[[float], None] | None = None,
    tag: str | None = None,
) -> list[Path]:
    """Extract every partition, joining multi-segment partitions with concat.

    Partitions are written one at a time in index order. A partition that
    lies inside a single included interval is extracted straight to its final
    path; one that straddles excluded ranges is extracted piecewise into
    temporary files which are then concatenated in order and removed.

    ``tag`` namespaces the temporary file names so concurrent requests on the
    same source and output directory do not collide.

    The first ffmpeg failure propagates; partitions written before it stay on
    disk.
    """
    ordered = sorted(points, key=lambda p: p.index)
    output_paths: list[Path] = []

    for n, point in enumerate(ordered):
        segments = map_effective_range(point.start, point.end, included)
        if not segments:
            raise ComputationError(
                f"Partition {point.index + 1} does not map onto any included media",
                details={"start": point.start, "end": point.end},
            )

        final_path = output_path_for(manifest, point.index)

        if len(segments) == 1:
            seg = segments[0]
            ffutil.extract_segment(manifest.input, final_path, seg.start, seg.end)
        else:
            temp_paths: list[Path] = []
            try:
                for i, seg in enumerate(segments):
                    temp_path = temp_path_for(manifest, point.index, i, tag)
                    temp_paths.append(temp_path)
                    ffutil.extract_segment(manifest.input, temp_path, seg.start, seg.end)
                ffutil.concat_files(temp_paths, final_path, manifest.output_dir)
            finally:
                _remove_temp_files(temp_paths)

        logger.info(
            "Wrote %s from %d segment(s)", final_path.name, len(segments)
        )
        output_paths.append(final_path)

        if on_progress:
            on_progress((n + 1) / len(ordered))

    return output_paths
