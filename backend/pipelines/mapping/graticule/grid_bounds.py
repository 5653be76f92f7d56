"""
Grid Bounds
Interval-aligned min/max grid coordinates clamped to projection validity
"""
import math
from dataclasses import dataclass

from pipelines.mapping.extent import Extent
from .projection_context import ProjectionContext


@dataclass
class GridBounds:
    min_x: float = -math.inf
    max_x: float = math.inf
    min_y: float = -math.inf
    max_y: float = math.inf

    def clamp_to(self, limit: Extent) -> "GridBounds":
        return GridBounds(
            min_x=_clamp(self.min_x, limit.min_x, limit.max_x),
            max_x=_clamp(self.max_x, limit.min_x, limit.max_x),
            min_y=_clamp(self.min_y, limit.min_y, limit.max_y),
            max_y=_clamp(self.max_y, limit.min_y, limit.max_y),
        )

    def to_extent(self) -> Extent:
        return Extent(self.min_x, self.min_y, self.max_x, self.max_y)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class GridBoundsCalculator:

    def __init__(self, context: ProjectionContext):
        self.context = context

    def calculate(self, interval: float, graticule_extent: Extent) -> GridBounds:
        """
        Align ``graticule_extent`` outward to ``interval`` and clamp to the
        graticule projection's extent (and the view's world extent where the
        graticule can contain it).

        One extra interval is added on each side: a rectangle straddling the
        centre of e.g. the UK grid can reach a higher latitude at the middle of
        its top edge than at its corners.
        """
        ctx = self.context
        bounds = GridBounds(
            min_x=math.floor(graticule_extent.min_x / interval) * interval - interval,
            max_x=math.ceil(graticule_extent.max_x / interval) * interval + interval,
            min_y=math.floor(graticule_extent.min_y / interval) * interval - interval,
            max_y=math.ceil(graticule_extent.max_y / interval) * interval + interval,
        )

        bounds = bounds.clamp_to(ctx.graticule_extent)

        if ctx.graticule.is_degrees:
            view_limit = ctx.view_world_extent
            if ctx.graticule_world_extent.contains_extent(view_limit):
                bounds = bounds.clamp_to(view_limit)
        else:
            view_limit = ctx.view_world_extent.apply_transform(ctx.geographic_to_graticule)
            if ctx.graticule_extent.contains_extent(view_limit):
                bounds = bounds.clamp_to(view_limit)

        return bounds
