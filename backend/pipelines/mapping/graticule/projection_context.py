"""
Projection Context
The graticule and view projections, their extents, and the four standing
transforms between them and EPSG:4326.
"""
import logging
from typing import Optional, Union

from pipelines.mapping.extent import Extent
from pipelines.mapping.projection import (
    GEOGRAPHIC_CODE,
    CoordinateTransformer,
    Projection,
    ScaleKind,
    TransformFunction,
    equivalent,
    get_projection,
    identity_transform,
)

logger = logging.getLogger(__name__)


class ProjectionContext:
    """
    Holds everything derived from the (graticule, view) projection pair.

    The graticule side is fixed at construction; the view side is rebuilt by
    ``update_view_projection`` whenever the host's projection stops being
    equivalent to the one last seen.
    """

    def __init__(self, graticule_projection: Union[str, Projection],
                 transformer: Optional[CoordinateTransformer] = None):
        self._transformer = transformer or CoordinateTransformer()
        self.geographic = get_projection(GEOGRAPHIC_CODE)

        self.graticule: Projection = get_projection(graticule_projection)
        self.graticule_to_geographic: TransformFunction = self._transformer.get_transform(
            self.graticule, self.geographic)
        self.geographic_to_graticule: TransformFunction = self._transformer.get_transform(
            self.geographic, self.graticule)
        self.graticule_extent: Extent = self.graticule.extent
        self.graticule_world_extent: Extent = self.graticule.world_extent
        if self.graticule_world_extent is None:
            self.graticule_world_extent = self.graticule_extent.apply_transform(self.graticule_to_geographic)

        self.view: Optional[Projection] = None
        self.view_extent: Optional[Extent] = None
        self.view_world_extent: Optional[Extent] = None
        self.view_to_geographic: TransformFunction = identity_transform
        self.geographic_to_view: TransformFunction = identity_transform
        self.graticule_to_view: TransformFunction = identity_transform
        self.view_to_graticule: TransformFunction = identity_transform
        self.projections_equivalent = False
        self.scale_kind: ScaleKind = self.graticule.scale_kind

        logger.debug(f"🌐 Graticule projection {self.graticule.code} "
                     f"extent={self.graticule_extent.to_list()} "
                     f"world={self.graticule_world_extent.to_list()}")

    def needs_update(self, projection: Projection) -> bool:
        return self.view is None or not equivalent(projection, self.view)

    def update_view_projection(self, projection: Union[str, Projection]) -> None:
        """Rebuild the view-side transforms and extents for ``projection``."""
        projection = get_projection(projection)
        self.view = projection

        self.geographic_to_view = self._transformer.get_transform(self.geographic, projection)
        self.view_to_geographic = self._transformer.get_transform(projection, self.geographic)
        self.graticule_to_view = self._transformer.get_transform(self.graticule, projection)
        self.view_to_graticule = self._transformer.get_transform(projection, self.graticule)

        self.view_extent = projection.extent
        self.view_world_extent = projection.world_extent
        if self.view_world_extent is None:
            self.view_world_extent = self.view_extent.apply_transform(self.view_to_geographic)

        self.projections_equivalent = equivalent(self.graticule, projection)
        self.scale_kind = self.graticule.scale_kind

        logger.info(f"🔄 View projection set to {projection.code} "
                    f"(equivalent={self.projections_equivalent}, builder={self.scale_kind.value})")
