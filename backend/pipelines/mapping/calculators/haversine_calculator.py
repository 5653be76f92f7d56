"""
Haversine Calculator Module
Spherical ground-distance calculations on the normal sphere
"""
import math
from typing import Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


class HaversineCalculator:
    """
    Fast spherical calculations using the Haversine formula.
    Coordinates are (lon, lat) pairs in decimal degrees.
    """

    # Radius of the "normal" sphere used for map-scale estimates
    EARTH_RADIUS_METERS = 6370997.0

    name = "sphere"

    def __init__(self, radius: float = EARTH_RADIUS_METERS):
        self.radius = radius

    def offset(
        self,
        coordinate: Sequence[float],
        distance_meters: float,
        bearing_degrees: float
    ) -> Tuple[float, float]:
        """
        Point reached by travelling ``distance_meters`` from ``coordinate``
        along the great circle with initial ``bearing_degrees`` (clockwise from north).
        """
        lat1 = math.radians(coordinate[1])
        lon1 = math.radians(coordinate[0])
        bearing = math.radians(bearing_degrees)
        d = distance_meters / self.radius

        lat2 = math.asin(
            math.sin(lat1) * math.cos(d) +
            math.cos(lat1) * math.sin(d) * math.cos(bearing)
        )
        lon2 = lon1 + math.atan2(
            math.sin(bearing) * math.sin(d) * math.cos(lat1),
            math.cos(d) - math.sin(lat1) * math.sin(lat2)
        )

        return (math.degrees(lon2), math.degrees(lat2))

    def distance(self, c1: Sequence[float], c2: Sequence[float]) -> float:
        """Great circle distance in meters between two (lon, lat) points."""
        lat1 = math.radians(c1[1])
        lat2 = math.radians(c2[1])
        dlat = (lat2 - lat1) / 2
        dlon = math.radians(c2[0] - c1[0]) / 2

        a = math.sin(dlat) ** 2 + math.sin(dlon) ** 2 * math.cos(lat1) * math.cos(lat2)
        return 2 * self.radius * math.atan2(math.sqrt(a), math.sqrt(1 - a))
