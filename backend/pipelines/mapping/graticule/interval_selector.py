"""
Interval Selector
Maps a resolution to a grid spacing from a descending interval table
"""
from typing import Sequence, Tuple

from .exceptions import GraticuleConfigurationError


class IntervalSelector:

    def __init__(self, intervals: Sequence[float], target_size: float):
        if not intervals:
            raise GraticuleConfigurationError("Interval table must not be empty")
        if any(not interval > 0 for interval in intervals):
            raise GraticuleConfigurationError(f"Intervals must be positive: {list(intervals)}")
        if not target_size > 0:
            raise GraticuleConfigurationError(f"target_size must be positive, got {target_size}")
        self.intervals: Tuple[float, ...] = tuple(sorted((float(i) for i in intervals), reverse=True))
        self.target_size = target_size

    def select(self, resolution: float) -> float:
        """
        Interval in graticule units for an adjusted ``resolution``.

        Walks the table from the coarsest entry and stops at the first one that
        is <= ``target_size * resolution``, returning the entry before it.
        """
        interval = self.intervals[0]
        target = self.target_size * resolution
        for candidate in self.intervals:
            if candidate <= target:
                break
            interval = candidate
        return interval
