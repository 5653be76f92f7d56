"""
Projection Registry
Resolves projection identifiers to the metadata the graticule needs:
valid extent, geographic world extent, units and local point resolution.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Dict, Optional, Sequence, Union

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from pipelines.mapping.calculators.haversine_calculator import HaversineCalculator
from pipelines.mapping.extent import Extent

logger = logging.getLogger(__name__)

# Web Mercator sphere radius and half-width of its square extent
WEB_MERCATOR_RADIUS = 6378137.0
WEB_MERCATOR_HALF_SIZE = math.pi * WEB_MERCATOR_RADIUS
WEB_MERCATOR_CODES = ("EPSG:3857", "EPSG:102100", "EPSG:102113", "EPSG:900913", "EPSG:3785")

GEOGRAPHIC_CODE = "EPSG:4326"


class ProjectionError(Exception):
    """Base error for projection lookups."""


class ProjectionNotFoundError(ProjectionError, LookupError):
    """Raised when an identifier cannot be resolved to a usable projection."""


class ProjectionUnits(str, Enum):
    DEGREES = "degrees"
    METERS = "m"
    FEET = "ft"
    US_FEET = "us-ft"

    @property
    def meters_per_unit(self) -> Optional[float]:
        return _METERS_PER_UNIT.get(self)


_METERS_PER_UNIT = {
    ProjectionUnits.METERS: 1.0,
    ProjectionUnits.FEET: 0.3048,
    ProjectionUnits.US_FEET: 1200 / 3937,
}


class ScaleKind(str, Enum):
    """Whether a projection's ground scale per unit is constant or varies with latitude."""

    CONSTANT = "constant"
    LATITUDE_VARIABLE = "latitude-variable"


@dataclass(frozen=True)
class Projection:
    """
    Read-only description of a projection.

    ``world_extent`` is the valid area in EPSG:4326 degrees, or None when it
    has to be derived from ``extent``.
    """

    code: str
    units: ProjectionUnits
    extent: Extent
    world_extent: Optional[Extent] = None
    scale_kind: ScaleKind = ScaleKind.CONSTANT
    crs: CRS = field(default=None, compare=False, repr=False)
    meters_per_unit: Optional[float] = field(default=None, compare=False)

    @property
    def is_degrees(self) -> bool:
        return self.units == ProjectionUnits.DEGREES

    @cached_property
    def _to_geographic(self) -> Transformer:
        return Transformer.from_crs(self.crs, CRS.from_epsg(4326), always_xy=True)

    def get_point_resolution(self, resolution: float, point: Sequence[float]) -> float:
        """
        Ground resolution (in this projection's units) of one pixel at ``point``.

        Returns 0 when the point lies where the projection is not defined.
        """
        if self.is_degrees:
            return resolution

        if self.scale_kind == ScaleKind.LATITUDE_VARIABLE:
            return resolution / math.cosh(point[1] / WEB_MERCATOR_RADIUS)

        # Transform a one-pixel cross to EPSG:4326, measure both spans on the
        # normal sphere and average them.
        x, y = point[0], point[1]
        half = resolution / 2
        lons, lats = self._to_geographic.transform(
            [x - half, x + half, x, x],
            [y, y, y - half, y + half],
            errcheck=False,
        )
        if not all(math.isfinite(v) for v in list(lons) + list(lats)):
            return 0.0
        sphere = HaversineCalculator()
        width = sphere.distance((lons[0], lats[0]), (lons[1], lats[1]))
        height = sphere.distance((lons[2], lats[2]), (lons[3], lats[3]))
        point_resolution = (width + height) / 2
        if not math.isfinite(point_resolution):
            return 0.0
        if self.meters_per_unit:
            point_resolution /= self.meters_per_unit
        return point_resolution


_REGISTRY: Dict[str, Projection] = {}


def _geographic() -> Projection:
    return Projection(
        code=GEOGRAPHIC_CODE,
        units=ProjectionUnits.DEGREES,
        extent=Extent(-180, -90, 180, 90),
        world_extent=Extent(-180, -90, 180, 90),
        crs=CRS.from_epsg(4326),
    )


def _web_mercator(code: str) -> Projection:
    return Projection(
        code=code,
        units=ProjectionUnits.METERS,
        extent=Extent(-WEB_MERCATOR_HALF_SIZE, -WEB_MERCATOR_HALF_SIZE,
                      WEB_MERCATOR_HALF_SIZE, WEB_MERCATOR_HALF_SIZE),
        world_extent=Extent(-180, -85, 180, 85),
        scale_kind=ScaleKind.LATITUDE_VARIABLE,
        crs=CRS.from_epsg(3857),
        meters_per_unit=1.0,
    )


def _units_for(crs: CRS) -> ProjectionUnits:
    if crs.is_geographic:
        return ProjectionUnits.DEGREES
    unit_name = (crs.axis_info[0].unit_name or "").lower() if crs.axis_info else ""
    if unit_name in ("metre", "meter"):
        return ProjectionUnits.METERS
    if unit_name == "us survey foot":
        return ProjectionUnits.US_FEET
    if unit_name == "foot":
        return ProjectionUnits.FEET
    raise ProjectionNotFoundError(f"Unsupported axis unit '{unit_name}' for {crs.name}")


def _from_crs(code: str) -> Projection:
    """Build a projection from anything pyproj can resolve, using its area of use."""
    try:
        crs = CRS.from_user_input(code)
    except CRSError as e:
        raise ProjectionNotFoundError(f"Unknown projection {code}: {e}") from e

    area = crs.area_of_use
    if area is None:
        raise ProjectionNotFoundError(f"Projection {code} declares no area of use")

    units = _units_for(crs)
    world_extent = Extent(area.west, area.south, area.east, area.north)

    if crs.is_geographic:
        extent = world_extent
    else:
        to_crs = Transformer.from_crs(CRS.from_epsg(4326), crs, always_xy=True)
        extent = Extent(*to_crs.transform_bounds(area.west, area.south, area.east, area.north,
                                                 densify_pts=21))

    method = ""
    if crs.coordinate_operation is not None:
        method = (crs.coordinate_operation.method_name or "").lower()
    scale_kind = ScaleKind.LATITUDE_VARIABLE if "pseudo mercator" in method else ScaleKind.CONSTANT

    meters_per_unit = None
    if not crs.is_geographic:
        meters_per_unit = crs.axis_info[0].unit_conversion_factor

    logger.info(f"🗺️ Resolved projection {code} ({crs.name}) units={units.value} extent={extent.to_list()}")
    return Projection(
        code=code,
        units=units,
        extent=extent,
        world_extent=world_extent,
        scale_kind=scale_kind,
        crs=crs,
        meters_per_unit=meters_per_unit,
    )


def get_projection(code_or_projection: Union[str, Projection, None]) -> Projection:
    """
    Resolve a projection identifier (e.g. "EPSG:3857") or pass a Projection through.

    Raises:
        ProjectionNotFoundError: the identifier cannot be resolved
    """
    if isinstance(code_or_projection, Projection):
        return code_or_projection
    if not code_or_projection:
        raise ProjectionNotFoundError("No projection given")

    key = str(code_or_projection).strip().upper()
    if key not in _REGISTRY:
        if key in ("EPSG:4326", "CRS:84", "OGC:CRS84"):
            projection = _geographic()
        elif key in WEB_MERCATOR_CODES:
            projection = _web_mercator(key)
        else:
            projection = _from_crs(key)
        _REGISTRY[key] = projection
    return _REGISTRY[key]


def equivalent(a: Optional[Projection], b: Optional[Projection]) -> bool:
    """True when two projections are geometrically identical for transform purposes."""
    if a is None or b is None:
        return False
    if a is b or a.code == b.code:
        return True
    if a.units != b.units or a.crs is None or b.crs is None:
        return False
    return a.crs.equals(b.crs, ignore_axis_order=True)
