"""
Ground Calculators
Spherical and ellipsoidal distance/offset models
"""
from .haversine_calculator import HaversineCalculator
from .geodesic_calculator import GeodesicCalculator

GROUND_MODELS = {
    HaversineCalculator.name: HaversineCalculator,
    GeodesicCalculator.name: GeodesicCalculator,
}


def get_ground_model(name: str):
    """Instantiate the ground model registered under ``name`` ("sphere" or "ellipsoid")."""
    if name not in GROUND_MODELS:
        raise ValueError(f"Unknown ground model: {name} (expected one of {sorted(GROUND_MODELS)})")
    return GROUND_MODELS[name]()


__all__ = ["HaversineCalculator", "GeodesicCalculator", "GROUND_MODELS", "get_ground_model"]
