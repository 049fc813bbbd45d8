"""Unit tests for included-interval computation and effective-to-original mapping."""

import pytest

from clipsplit.models import TimeRange
from clipsplit.planning.partition import plan_partitions
from clipsplit.planning.timeline import compute_included_intervals, map_effective_range


def _pairs(ranges: list[TimeRange]) -> list[tuple[float, float]]:
    return [(r.start, r.end) for r in ranges]


def _assert_increasing_disjoint(ranges: list[TimeRange]) -> None:
    for r in ranges:
        assert r.start < r.end
    for prev, nxt in zip(ranges, ranges[1:]):
        assert prev.end <= nxt.start


# ---------------------------------------------------------------------------
# compute_included_intervals
# ---------------------------------------------------------------------------

class TestComputeIncludedIntervals:
    def test_no_exclusions(self):
        assert _pairs(compute_included_intervals([], 100.0)) == [(0.0, 100.0)]

    def test_single_gap(self):
        included = compute_included_intervals([TimeRange(start=20.0, end=40.0)], 100.0)
        assert _pairs(included) == [(0.0, 20.0), (40.0, 100.0)]

    def test_unsorted_input(self):
        exclusions = [TimeRange(start=70.0, end=80.0), TimeRange(start=10.0, end=20.0)]
        included = compute_included_intervals(exclusions, 100.0)
        assert _pairs(included) == [(0.0, 10.0), (20.0, 70.0), (80.0, 100.0)]

    def test_exclusion_at_start(self):
        included = compute_included_intervals([TimeRange(start=0.0, end=15.0)], 60.0)
        assert _pairs(included) == [(15.0, 60.0)]

    def test_exclusion_at_end(self):
        included = compute_included_intervals([TimeRange(start=45.0, end=60.0)], 60.0)
        assert _pairs(included) == [(0.0, 45.0)]

    def test_overlapping_exclusions(self):
        exclusions = [TimeRange(start=10.0, end=30.0), TimeRange(start=25.0, end=50.0)]
        included = compute_included_intervals(exclusions, 100.0)
        assert _pairs(included) == [(0.0, 10.0), (50.0, 100.0)]

    def test_nested_exclusion_is_noop(self):
        exclusions = [TimeRange(start=10.0, end=60.0), TimeRange(start=20.0, end=30.0)]
        included = compute_included_intervals(exclusions, 100.0)
        assert _pairs(included) == [(0.0, 10.0), (60.0, 100.0)]

    def test_adjacent_exclusions(self):
        exclusions = [TimeRange(start=10.0, end=20.0), TimeRange(start=20.0, end=30.0)]
        included = compute_included_intervals(exclusions, 100.0)
        assert _pairs(included) == [(0.0, 10.0), (30.0, 100.0)]

    def test_everything_excluded(self):
        assert compute_included_intervals([TimeRange(start=0.0, end=100.0)], 100.0) == []

    def test_exclusion_past_end_is_clipped(self):
        exclusions = [TimeRange(start=90.0, end=120.0), TimeRange(start=150.0, end=160.0)]
        included = compute_included_intervals(exclusions, 100.0)
        assert _pairs(included) == [(0.0, 90.0)]

    def test_does_not_mutate_input(self):
        exclusions = [TimeRange(start=50.0, end=60.0), TimeRange(start=10.0, end=20.0)]
        compute_included_intervals(exclusions, 100.0)
        assert exclusions[0].start == 50.0


# ---------------------------------------------------------------------------
# map_effective_range
# ---------------------------------------------------------------------------

class TestMapEffectiveRange:
    INCLUDED = [TimeRange(start=0.0, end=20.0), TimeRange(start=40.0, end=100.0)]

    def test_straddles_gap(self):
        segments = map_effective_range(0.0, 40.0, self.INCLUDED)
        assert _pairs(segments) == [(0.0, 20.0), (40.0, 60.0)]

    def test_inside_one_interval(self):
        segments = map_effective_range(40.0, 80.0, self.INCLUDED)
        assert _pairs(segments) == [(60.0, 100.0)]

    def test_ends_exactly_at_gap(self):
        segments = map_effective_range(0.0, 20.0, self.INCLUDED)
        assert _pairs(segments) == [(0.0, 20.0)]

    def test_starts_exactly_after_gap(self):
        segments = map_effective_range(20.0, 30.0, self.INCLUDED)
        assert _pairs(segments) == [(40.0, 50.0)]

    def test_spans_several_gaps(self):
        included = [
            TimeRange(start=0.0, end=10.0),
            TimeRange(start=20.0, end=30.0),
            TimeRange(start=40.0, end=50.0),
        ]
        segments = map_effective_range(5.0, 25.0, included)
        assert _pairs(segments) == [(5.0, 10.0), (20.0, 30.0), (40.0, 45.0)]

    def test_empty_range(self):
        assert map_effective_range(10.0, 10.0, self.INCLUDED) == []

    def test_no_included_intervals(self):
        assert map_effective_range(0.0, 10.0, []) == []

    def test_rounding_sliver_at_boundary_is_dropped(self):
        included = [TimeRange(start=0.0, end=0.1 + 0.2), TimeRange(start=1.0, end=2.0)]
        # 0.1 + 0.2 is a hair above 0.3
        segments = map_effective_range(0.3, 0.5, included)
        assert len(segments) == 1
        assert segments[0].start == pytest.approx(1.0)
        assert segments[0].end == pytest.approx(1.2)


# ---------------------------------------------------------------------------
# Planner + mapper together
# ---------------------------------------------------------------------------

class TestPlanAndMap:
    def test_concrete_scenario(self):
        exclusions = [TimeRange(start=20.0, end=40.0)]
        included = compute_included_intervals(exclusions, 100.0)
        points = plan_partitions(100.0, 10_737_418_240, 4_294_967_296, exclusions)

        assert len(points) == 2
        first = map_effective_range(points[0].start, points[0].end, included)
        second = map_effective_range(points[1].start, points[1].end, included)
        assert _pairs(first) == [(0.0, 20.0), (40.0, 60.0)]
        assert _pairs(second) == [(60.0, 100.0)]

    @pytest.mark.parametrize(
        "exclusions",
        [
            [],
            [(20.0, 40.0)],
            [(0.0, 5.5), (33.3, 41.7), (90.1, 100.0)],
            [(12.25, 13.0), (13.0, 14.75), (61.0, 62.0), (70.0, 99.0)],
            [(50.0, 60.0), (10.0, 20.0), (55.0, 70.0)],
        ],
    )
    @pytest.mark.parametrize("target", [100, 170, 333, 999])
    def test_segments_cover_each_partition(self, exclusions, target):
        excl = [TimeRange(start=s, end=e) for s, e in exclusions]
        included = compute_included_intervals(excl, 100.0)
        points = plan_partitions(100.0, 1000, target, excl)
        assert points

        previous_end = -1.0
        for point in points:
            segments = map_effective_range(point.start, point.end, included)
            assert segments
            _assert_increasing_disjoint(segments)
            total = sum(s.end - s.start for s in segments)
            assert total == pytest.approx(point.end - point.start, abs=1e-6)
            # Consecutive partitions never overlap on the original timeline
            assert segments[0].start >= previous_end - 1e-9
            previous_end = segments[-1].end

    def test_segments_avoid_exclusions(self):
        excl = [TimeRange(start=10.0, end=20.0), TimeRange(start=45.0, end=55.0)]
        included = compute_included_intervals(excl, 100.0)
        for point in plan_partitions(100.0, 1000, 150, excl):
            for seg in map_effective_range(point.start, point.end, included):
                for e in excl:
                    assert seg.end <= e.start + 1e-9 or seg.start >= e.end - 1e-9
