"""
Regular Line Builder
Evenly spaced meridians and parallels for constant-scale projections
"""
import logging
from typing import Tuple

from pipelines.mapping.extent import Extent
from .curve_fitter import GeodesicCurveFitter
from .grid_bounds import GridBounds
from .line_arena import LineArena, LineAxis

logger = logging.getLogger(__name__)


class RegularLineBuilder:

    def __init__(self, fitter: GeodesicCurveFitter, max_lines: int):
        self.fitter = fitter
        self.max_lines = max_lines

    def build(self, interval: float, center: Tuple[float, float], bounds: GridBounds,
              view_extent: Extent, squared_tolerance: float,
              meridians: LineArena, parallels: LineArena) -> None:
        """
        Walk outward from the line through ``center`` in steps of ``interval``,
        at most ``max_lines`` steps each way and never past ``bounds``. Only
        lines whose extent meets ``view_extent`` stay live.
        """
        center_lon = min(max(center[0], bounds.min_x), bounds.max_x)
        center_lat = min(max(center[1], bounds.min_y), bounds.max_y)

        idx = self._add(LineAxis.MERIDIAN, center_lon, bounds, view_extent, squared_tolerance, meridians, 0)

        cnt = 0
        lon = center_lon - interval
        while lon >= bounds.min_x and cnt < self.max_lines:
            cnt += 1
            idx = self._add(LineAxis.MERIDIAN, lon, bounds, view_extent, squared_tolerance, meridians, idx)
            lon -= interval

        cnt = 0
        lon = center_lon + interval
        while lon <= bounds.max_x and cnt < self.max_lines:
            cnt += 1
            idx = self._add(LineAxis.MERIDIAN, lon, bounds, view_extent, squared_tolerance, meridians, idx)
            lon += interval

        meridians.truncate(idx)

        idx = self._add(LineAxis.PARALLEL, center_lat, bounds, view_extent, squared_tolerance, parallels, 0)

        cnt = 0
        lat = center_lat - interval
        while lat >= bounds.min_y and cnt < self.max_lines:
            cnt += 1
            idx = self._add(LineAxis.PARALLEL, lat, bounds, view_extent, squared_tolerance, parallels, idx)
            lat -= interval

        cnt = 0
        lat = center_lat + interval
        while lat <= bounds.max_y and cnt < self.max_lines:
            cnt += 1
            idx = self._add(LineAxis.PARALLEL, lat, bounds, view_extent, squared_tolerance, parallels, idx)
            lat += interval

        parallels.truncate(idx)

    def _add(self, axis: LineAxis, value: float, bounds: GridBounds, view_extent: Extent,
             squared_tolerance: float, arena: LineArena, index: int) -> int:
        # An invisible line is left in its slot and overwritten by the next one
        line = self.fitter.build_line(value, axis, bounds, squared_tolerance, arena.slot(index))
        if line.extent.intersects(view_extent):
            return index + 1
        return index
