"""
Extent Resolver
Works out, in graticule units, the area over which grid lines should be
generated for the current view.
"""
import logging
from typing import Optional, Tuple

from pipelines.mapping.extent import Extent
from .projection_context import ProjectionContext

logger = logging.getLogger(__name__)

# Allowed drift of a view->EPSG:4326->view round trip, as a fraction of view width/height
ROUND_TRIP_TOLERANCE = 0.1


def nearly_equals(a: float, b: float, tolerance: float) -> bool:
    return abs(a - b) <= (tolerance or 1e-6)


class ExtentResolver:
    """
    This is tricky at low zooms, where the view extent may be bigger than the
    view projection's extent, or the graticule projection's extent is small
    compared to the view.
    """

    def __init__(self, context: ProjectionContext):
        self.context = context

    def resolve(self, center: Tuple[float, float], extent: Extent) -> Optional[Extent]:
        """
        Graticule-unit extent to draw for a view ``extent`` and ``center``
        (view units), or None when the view does not overlap the graticule.
        """
        ctx = self.context
        w = extent.width
        h = extent.height
        vp_extent = ctx.view_extent
        vp_world_extent = ctx.view_world_extent
        grat_world_extent = ctx.graticule_world_extent

        extent_geo = extent.apply_transform(ctx.view_to_geographic)

        # Corners outside the view projection's extent are pinned to its
        # world extent corners.
        if not vp_extent.contains_coordinate(extent.top_right):
            extent_geo = extent_geo.with_corner("top_right", vp_world_extent.top_right)
        if not vp_extent.contains_coordinate(extent.bottom_left):
            extent_geo = extent_geo.with_corner("bottom_left", vp_world_extent.bottom_left)

        rev_extent = extent_geo.apply_transform(ctx.geographic_to_view)
        rev_center = rev_extent.center
        tol_w = w * ROUND_TRIP_TOLERANCE
        tol_h = h * ROUND_TRIP_TOLERANCE

        round_trip_ok = (
            nearly_equals(center[0], rev_center[0], tol_w) and
            nearly_equals(center[1], rev_center[1], tol_h) and
            nearly_equals(rev_extent.width, w, tol_w) and
            nearly_equals(rev_extent.height, h, tol_h)
        )

        if not round_trip_ok:
            # Broken transform (e.g. view corners off a world projection's
            # disc): use the overlap of both world extents.
            logger.debug("⚠️ View extent round trip through EPSG:4326 is unreliable, "
                         "using world extent overlap")
            overlap = vp_world_extent.intersection(grat_world_extent)
            if overlap.is_empty():
                return None
            return overlap.apply_transform(ctx.geographic_to_graticule)

        if not extent_geo.intersects(grat_world_extent):
            return None

        if extent_geo.contains_extent(grat_world_extent):
            return ctx.graticule_extent

        if extent_geo.width > grat_world_extent.width or extent_geo.height > grat_world_extent.height:
            return ctx.graticule_extent

        visible = extent.intersection(vp_extent)
        if ctx.projections_equivalent:
            return visible
        return visible.apply_transform(ctx.view_to_graticule)
