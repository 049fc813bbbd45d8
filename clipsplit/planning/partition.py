"""Partition planner — decides how many outputs a split needs and where they fall."""

import logging
import math

from clipsplit.models import PartitionPoint, TimeRange

logger = logging.getLogger(__name__)


def total_excluded_duration(exclusions: list[TimeRange]) -> float:
    """Sum of the excluded lengths in seconds, overlaps counted twice."""
    return sum(e.end - e.start for e in exclusions)


def plan_partitions(
    duration: float,
    file_size: int,
    target_size: int,
    exclusions: list[TimeRange],
) -> list[PartitionPoint]:
    """Split the effective timeline into partitions of roughly ``target_size`` bytes.

    Boundaries are expressed in effective time, i.e. with every exclusion cut
    out and the remainder packed together. Size is assumed proportional to
    time (constant bitrate), so the effective size is the file size scaled by
    the kept fraction of the duration.

    Returns an empty list when the input cannot be partitioned (nothing left
    after exclusions, empty file, or a non-positive target).
    """
    if not math.isfinite(duration) or duration <= 0 or file_size <= 0 or target_size <= 0:
        return []

    effective_duration = duration - total_excluded_duration(exclusions)
    if not math.isfinite(effective_duration) or effective_duration <= 0:
        return []

    effective_size = file_size * (effective_duration / duration)
    partition_count = math.ceil(effective_size / target_size)
    if partition_count <= 0:
        return []

    time_per_partition = effective_duration / partition_count
    points: list[PartitionPoint] = []

    for i in range(partition_count):
        start = i * time_per_partition
        # Pin the last boundary so rounding never leaves a sliver uncovered
        if i == partition_count - 1:
            end = effective_duration
        else:
            end = (i + 1) * time_per_partition

        points.append(
            PartitionPoint(
                index=i,
                start=start,
                end=end,
                estimated_size_bytes=int((end - start) / effective_duration * effective_size),
            )
        )

    logger.debug(
        "Planned %d partition(s) over %.3fs effective (%.3fs excluded)",
        partition_count, effective_duration, duration - effective_duration,
    )
    return points
