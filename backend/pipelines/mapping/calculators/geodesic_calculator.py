"""
Geodesic Calculator Module
Ellipsoidal ground-distance calculations using GeographicLib
"""
from typing import Sequence, Tuple
from geographiclib.geodesic import Geodesic
import logging

logger = logging.getLogger(__name__)


class GeodesicCalculator:
    """
    Ellipsoidal geodesic calculations using GeographicLib/Karney's algorithm.
    Same (lon, lat) interface as HaversineCalculator so callers can swap ground models.
    """

    name = "ellipsoid"

    def __init__(self):
        """Initialize geodesic calculator with WGS84 ellipsoid"""
        self.geod = Geodesic.WGS84
        logger.debug("🧭 Geodesic Calculator initialized with WGS84 ellipsoid")

    def offset(
        self,
        coordinate: Sequence[float],
        distance_meters: float,
        bearing_degrees: float
    ) -> Tuple[float, float]:
        """Solve the direct geodesic problem from a (lon, lat) start point."""
        result = self.geod.Direct(
            lat1=coordinate[1],
            lon1=coordinate[0],
            azi1=bearing_degrees,
            s12=distance_meters
        )
        return (result['lon2'], result['lat2'])

    def distance(self, c1: Sequence[float], c2: Sequence[float]) -> float:
        """Solve the inverse geodesic problem, returning the distance in meters."""
        result = self.geod.Inverse(
            lat1=c1[1],
            lon1=c1[0],
            lat2=c2[1],
            lon2=c2[0]
        )
        return result['s12']
