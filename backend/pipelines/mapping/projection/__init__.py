"""
Projection Module
Projection metadata and coordinate transforms between projections
"""
from .projection_registry import (
    GEOGRAPHIC_CODE,
    Projection,
    ProjectionError,
    ProjectionNotFoundError,
    ProjectionUnits,
    ScaleKind,
    equivalent,
    get_projection,
)
from .transformer import CoordinateTransformer, TransformFunction, get_transform, identity_transform

__all__ = [
    "GEOGRAPHIC_CODE",
    "Projection",
    "ProjectionError",
    "ProjectionNotFoundError",
    "ProjectionUnits",
    "ScaleKind",
    "equivalent",
    "get_projection",
    "CoordinateTransformer",
    "TransformFunction",
    "get_transform",
    "identity_transform",
]
