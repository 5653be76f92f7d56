"""
Adaptive Line Builder
Grid for world projections whose scale varies with latitude (Web Mercator):
parallels stepped by ground distance, meridians offset by ground distance
"""
import logging
from typing import Tuple

from pipelines.mapping.extent import Extent
from .curve_fitter import GeodesicCurveFitter
from .grid_bounds import GridBounds
from .line_arena import LineArena, LineAxis
from .projection_context import ProjectionContext

logger = logging.getLogger(__name__)

BEARING_SOUTH = 180.0
BEARING_NORTH = 0.0


class AdaptiveLineBuilder:
    """
    ``ground_model`` is any calculator with ``offset(coordinate, distance, bearing)``
    (HaversineCalculator or GeodesicCalculator).
    """

    def __init__(self, context: ProjectionContext, fitter: GeodesicCurveFitter,
                 max_lines: int, ground_model):
        self.context = context
        self.fitter = fitter
        self.max_lines = max_lines
        self.ground_model = ground_model

    def build(self, interval: float, resolution: float, center: Tuple[float, float],
              bounds: GridBounds, view_extent: Extent, squared_tolerance: float,
              meridians: LineArena, parallels: LineArena) -> None:
        """
        ``interval`` is the unscaled ground distance between lines and
        ``resolution`` the nominal view resolution.
        """
        center_x, center_y = center

        # Parallels
        start_lat = min(max(center_y, bounds.min_y), bounds.max_y)
        idx = self._add_parallel(start_lat, bounds, view_extent, squared_tolerance, parallels, 0)

        lat = start_lat
        cnt = 0
        while lat >= bounds.min_y and cnt < self.max_lines:
            cnt += 1
            lat = self._step(center_x, lat, interval, BEARING_SOUTH)
            if lat > bounds.min_y:
                idx = self._add_parallel(lat, bounds, view_extent, squared_tolerance, parallels, idx)

        lat = start_lat
        cnt = 0
        while lat <= bounds.max_y and cnt < self.max_lines:
            cnt += 1
            lat = self._step(center_x, lat, interval, BEARING_NORTH)
            if lat < bounds.max_y:
                idx = self._add_parallel(lat, bounds, view_extent, squared_tolerance, parallels, idx)

        parallels.truncate(idx)

        # Meridians
        lon = min(max(center_x, bounds.min_x), bounds.max_x)
        line = self.fitter.build_line(lon, LineAxis.MERIDIAN, bounds, squared_tolerance, meridians.slot(0))
        idx = 1 if line.extent.intersects(view_extent) else 0

        last_idx = idx
        cnt = 0
        while cnt < self.max_lines:
            cnt += 1
            idx = self._add_meridian(center_x, resolution, -cnt * interval, bounds,
                                     view_extent, squared_tolerance, meridians, idx)
            if idx == last_idx:
                break
            last_idx = idx

        cnt = 0
        while cnt < self.max_lines:
            cnt += 1
            idx = self._add_meridian(center_x, resolution, cnt * interval, bounds,
                                     view_extent, squared_tolerance, meridians, idx)
            if idx == last_idx:
                break
            last_idx = idx

        meridians.truncate(idx)

    def _step(self, x: float, y: float, distance: float, bearing: float) -> float:
        """y of the point ``distance`` ground units from (x, y) along ``bearing``."""
        ctx = self.context
        lonlat = ctx.graticule_to_geographic([x, y], None, 2)
        lonlat = self.ground_model.offset((lonlat[0], lonlat[1]), distance, bearing)
        projected = ctx.geographic_to_graticule([lonlat[0], lonlat[1]], None, 2)
        return float(projected[1])

    def _add_parallel(self, lat: float, bounds: GridBounds, view_extent: Extent,
                      squared_tolerance: float, arena: LineArena, index: int) -> int:
        line = self.fitter.build_line(lat, LineAxis.PARALLEL, bounds, squared_tolerance, arena.slot(index))
        if line.extent.intersects(view_extent):
            return index + 1
        return index

    def _add_meridian(self, center_x: float, resolution: float, offset: float, bounds: GridBounds,
                      view_extent: Extent, squared_tolerance: float, arena: LineArena, index: int) -> int:
        line = self.fitter.build_world_projection_meridian(
            center_x, resolution, offset, bounds, squared_tolerance, arena.slot(index))
        if line.extent.intersects(view_extent):
            return index + 1
        return index
