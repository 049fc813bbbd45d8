"""Pure partition planning and timeline mapping."""

from clipsplit.planning.partition import plan_partitions, total_excluded_duration
from clipsplit.planning.timeline import compute_included_intervals, map_effective_range

__all__ = [
    "plan_partitions",
    "total_excluded_duration",
    "compute_included_intervals",
    "map_effective_range",
]
