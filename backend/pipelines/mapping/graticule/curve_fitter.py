"""
Curve Fitter
Produces the view-projection geometry of single grid lines
"""
import logging
from typing import List

import numpy as np

from . import geodesic
from .exceptions import GraticuleInvariantError
from .grid_bounds import GridBounds
from .line_arena import GridLine, LineAxis
from .projection_context import ProjectionContext

logger = logging.getLogger(__name__)


class GeodesicCurveFitter:

    def __init__(self, context: ProjectionContext):
        self.context = context

    def build_line(self, value: float, axis: LineAxis, bounds: GridBounds,
                   squared_tolerance: float, slot: GridLine) -> GridLine:
        """
        Fill ``slot`` with the meridian (constant x) or parallel (constant y) at
        ``value`` spanning ``bounds``.

        When graticule and view projections are equivalent the line is the
        straight two-point segment; otherwise it is curve-fitted through the
        graticule->view transform.
        """
        ctx = self.context
        if ctx.projections_equivalent:
            if axis == LineAxis.MERIDIAN:
                flat = [value, bounds.min_y, value, bounds.max_y]
            else:
                flat = [bounds.min_x, value, bounds.max_x, value]
        elif axis == LineAxis.MERIDIAN:
            flat = geodesic.meridian(value, bounds.min_y, bounds.max_y,
                                     ctx.graticule_to_view, squared_tolerance)
        else:
            flat = geodesic.parallel(value, bounds.min_x, bounds.max_x,
                                     ctx.graticule_to_view, squared_tolerance)

        if len(flat) == 0:
            raise GraticuleInvariantError(
                f"{axis.value} at {value} has no representable points in {ctx.view.code}")
        return slot.set_flat_coordinates(value, flat)

    def build_world_projection_meridian(self, center_x: float, resolution: float, offset: float,
                                        bounds: GridBounds, squared_tolerance: float,
                                        slot: GridLine) -> GridLine:
        """
        Fill ``slot`` with the line lying ``offset`` ground units east of
        ``center_x`` at every y, for projections whose scale grows with latitude.
        The result is clipped to the graticule projection's x extent.
        """
        ctx = self.context
        projection = ctx.graticule
        min_y, max_y = bounds.min_y, bounds.max_y

        def interpolate(fractions: np.ndarray):
            ys = min_y + (max_y - min_y) * fractions
            local = np.array([projection.get_point_resolution(resolution, (center_x, y)) for y in ys])
            with np.errstate(divide="ignore", invalid="ignore"):
                xs = center_x + offset * resolution / local
            return xs, ys

        flat = geodesic.line(interpolate, ctx.graticule_to_view, squared_tolerance)
        if len(flat) < 4:
            raise GraticuleInvariantError(
                f"World meridian at offset {offset} produced {len(flat) // 2} points")
        flat = self.clip_world_meridian(flat)
        return slot.set_flat_coordinates(center_x + offset, flat)

    def clip_world_meridian(self, flat_coordinates) -> List[float]:
        """
        Trim a world-projection meridian to the graticule x extent: keep at most
        one point outside the extent at each end, then move that point onto
        the extent edge by linear interpolation.

        Returns an empty list when no interior point is within the extent.
        """
        min_x = self.context.graticule_extent.min_x
        max_x = self.context.graticule_extent.max_x
        flat = [float(v) for v in flat_coordinates]
        ll = len(flat)
        end = ll - 4
        start = 2

        while (flat[end] < min_x or flat[end] > max_x) and end > 0:
            end -= 2
        while start < ll and (flat[start] < min_x or flat[start] > max_x):
            start += 2

        if start != 2 or end != ll - 4:
            if end - start + 6 < 4:
                return []
            del flat[:start - 2]
            end -= start - 2
            del flat[end + 4:]

        ll = len(flat)
        if ll >= 4:
            if flat[ll - 2] < min_x:
                line_end_at_x(flat, min_x)
            if flat[0] < min_x:
                line_start_at_x(flat, min_x)
            if flat[ll - 2] > max_x:
                line_end_at_x(flat, max_x)
            if flat[0] > max_x:
                line_start_at_x(flat, max_x)
        return flat


def line_start_at_x(flat: List[float], x: float) -> None:
    """Slide the first point along the first segment until it sits at ``x``."""
    x1, y1, x2, y2 = flat[0], flat[1], flat[2], flat[3]
    if x2 != x1:
        flat[1] = y1 + (y2 - y1) * (x - x1) / (x2 - x1)
    flat[0] = x


def line_end_at_x(flat: List[float], x: float) -> None:
    """Slide the last point along the last segment until it sits at ``x``."""
    ll = len(flat)
    x1, y1, x2, y2 = flat[ll - 4], flat[ll - 3], flat[ll - 2], flat[ll - 1]
    if x2 != x1:
        flat[ll - 1] = y1 + (y2 - y1) * (x - x1) / (x2 - x1)
    flat[ll - 2] = x
