"""Orchestrator — validates a split request, plans it, and writes the partitions."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from clipsplit import ffutil
from clipsplit.editors.assemble import assemble, output_path_for
from clipsplit.errors import ComputationError, ValidationError
from clipsplit.manifest import Manifest
from clipsplit.models import PartitionPoint, TimeRange
from clipsplit.planning.partition import plan_partitions, total_excluded_duration
from clipsplit.planning.timeline import compute_included_intervals, map_effective_range

logger = logging.getLogger(__name__)


@dataclass
class SplitPlan:
    """Everything needed to execute a split, computed before any extraction runs."""

    manifest: Manifest
    duration: float
    file_size: int
    partitions: list[PartitionPoint]
    included: list[TimeRange]

    @property
    def effective_duration(self) -> float:
        return self.duration - total_excluded_duration(self.manifest.exclusions)

    def segments_for(self, point: PartitionPoint) -> list[TimeRange]:
        return map_effective_range(point.start, point.end, self.included)

    def output_path_for(self, point: PartitionPoint) -> Path:
        return output_path_for(self.manifest, point.index)


@dataclass
class EngineResult:
    output_paths: list[Path] = field(default_factory=list)
    partitions: list[PartitionPoint] = field(default_factory=list)
    duration_original: float = 0.0
    duration_effective: float = 0.0


def validate(manifest: Manifest) -> None:
    """Raise ValidationError if the request cannot possibly succeed."""
    if not manifest.input.exists():
        raise ValidationError(
            f"Input file not found: {manifest.input}",
            details={"input": str(manifest.input)},
        )
    if not manifest.output_dir.is_dir():
        raise ValidationError(
            f"Output directory not found: {manifest.output_dir}",
            details={"output_dir": str(manifest.output_dir)},
        )
    if manifest.target_size_bytes <= 0:
        raise ValidationError("Target partition size must be greater than zero")


def plan_split(manifest: Manifest) -> SplitPlan:
    """Validate the request, probe the input and compute its partitions."""
    validate(manifest)
    ffutil.check_ffmpeg()

    file_size = manifest.input.stat().st_size
    duration = ffutil.get_duration(manifest.input)

    points = plan_partitions(
        duration, file_size, manifest.target_size_bytes, manifest.exclusions
    )
    if not points:
        raise ComputationError(
            "No partition points calculated. Check file size and target partition size.",
            details={
                "duration": duration,
                "file_size": file_size,
                "target_size_bytes": manifest.target_size_bytes,
            },
        )

    included = compute_included_intervals(manifest.exclusions, duration)
    logger.info(
        "%s: %.3fs, %d bytes -> %d partition(s) across %d included interval(s)",
        manifest.input.name, duration, file_size, len(points), len(included),
    )
    return SplitPlan(
        manifest=manifest,
        duration=duration,
        file_size=file_size,
        partitions=points,
        included=included,
    )


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
    tag: str | None = None,
) -> EngineResult:
    """Execute the full split.

    Args:
        manifest: Validated split request.
        on_progress: Optional callback(stage_name, fraction_complete).
        tag: Optional namespace for temporary file names.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    _progress("Probing video metadata", 0.0)
    plan = plan_split(manifest)
    count = len(plan.partitions)
    _progress(f"Planned {count} partition(s)", 0.05)

    def _partition_progress(frac: float) -> None:
        done = round(frac * count)
        _progress(f"Wrote partition {done} of {count}", 0.05 + frac * 0.95)

    output_paths = assemble(
        manifest,
        plan.partitions,
        plan.included,
        on_progress=_partition_progress,
        tag=tag,
    )

    _progress("Done", 1.0)
    return EngineResult(
        output_paths=output_paths,
        partitions=plan.partitions,
        duration_original=plan.duration,
        duration_effective=plan.effective_duration,
    )
