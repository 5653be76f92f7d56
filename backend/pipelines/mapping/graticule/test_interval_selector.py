from __future__ import annotations

import pytest

from .exceptions import GraticuleConfigurationError
from .interval_selector import IntervalSelector
from .options import DEFAULT_DEGREE_INTERVALS, DEFAULT_DISTANCE_INTERVALS


@pytest.mark.parametrize(
    "resolution, expected",
    [
        # target 12: 10 is the first entry <= target, so the entry before it wins
        (0.12, 15),
        # target exactly on an entry still steps back to the coarser one
        (0.10, 15),
        (0.7, 90),
        (100.0, 90),
        (1e-9, 1 / 3600),
    ],
)
def test_select_degrees(resolution: float, expected: float) -> None:
    selector = IntervalSelector(DEFAULT_DEGREE_INTERVALS, 100)
    assert selector.select(resolution) == pytest.approx(expected)


def test_select_distance() -> None:
    selector = IntervalSelector(DEFAULT_DISTANCE_INTERVALS, 100)
    assert selector.select(500.0) == 100000
    assert selector.select(0.01) == 10


def test_smaller_resolution_never_gives_a_larger_interval() -> None:
    selector = IntervalSelector(DEFAULT_DEGREE_INTERVALS, 100)
    resolutions = [10 ** (e / 10) for e in range(20, -80, -1)]
    intervals = [selector.select(r) for r in resolutions]
    assert all(b <= a for a, b in zip(intervals, intervals[1:]))


def test_table_is_sorted_descending() -> None:
    selector = IntervalSelector([1, 10, 5], 100)
    assert selector.intervals == (10.0, 5.0, 1.0)


@pytest.mark.parametrize("intervals", [[], [10, 0], [5, -1]])
def test_invalid_tables_are_rejected(intervals) -> None:
    with pytest.raises(GraticuleConfigurationError):
        IntervalSelector(intervals, 100)


def test_invalid_target_size_is_rejected() -> None:
    with pytest.raises(GraticuleConfigurationError):
        IntervalSelector(DEFAULT_DEGREE_INTERVALS, 0)
