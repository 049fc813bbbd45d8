"""Timeline mapping between the original and the gap-removed (effective) timeline.

The effective timeline is what remains once every excluded range is cut out
and the included intervals are packed back to back. Partitions are planned on
the effective timeline; ffmpeg needs original-timeline timestamps, so each
partition is translated back into one segment per included interval it
touches.
"""

from clipsplit.models import TimeRange

# Overlaps this short are floating-point noise at a gap boundary, not content.
SLIVER_SECS = 1e-9


def compute_included_intervals(
    exclusions: list[TimeRange], duration: float
) -> list[TimeRange]:
    """Return the sorted, disjoint complement of ``exclusions`` within ``[0, duration]``.

    Exclusions may be unsorted and may overlap or nest. The cursor only ever
    moves forward, so an exclusion nested inside an earlier, longer one is a
    no-op and a partially overlapping one extends the excluded run.
    """
    included: list[TimeRange] = []
    pos = 0.0

    for excl in sorted(exclusions, key=lambda e: e.start):
        if pos >= duration:
            break
        if excl.start > pos:
            included.append(TimeRange(start=pos, end=min(excl.start, duration)))
        pos = max(pos, excl.end)

    if pos < duration:
        included.append(TimeRange(start=pos, end=duration))

    return included


def map_effective_range(
    effective_start: float,
    effective_end: float,
    included: list[TimeRange],
) -> list[TimeRange]:
    """Map ``[effective_start, effective_end)`` onto original-timeline segments.

    Walks the included intervals while tracking how much effective time they
    account for, clips each one against the requested range, and shifts the
    overlap back by the interval's original offset. Segments come back in
    increasing original time and their lengths sum to the requested length.
    """
    segments: list[TimeRange] = []
    effective_pos = 0.0

    for interval in included:
        length = interval.end - interval.start
        interval_effective_end = effective_pos + length

        if interval_effective_end > effective_start and effective_pos < effective_end:
            overlap_start = max(effective_start, effective_pos)
            overlap_end = min(effective_end, interval_effective_end)

            if overlap_end - overlap_start > SLIVER_SECS:
                offset = interval.start - effective_pos
                segments.append(
                    TimeRange(start=overlap_start + offset, end=overlap_end + offset)
                )

        effective_pos = interval_effective_end
        if effective_pos >= effective_end:
            break

    return segments
