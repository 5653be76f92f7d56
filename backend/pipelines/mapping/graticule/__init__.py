"""
Graticule Module
Meridian/parallel grid generation for map views in any projection
"""
from .engine import GraticuleEngine
from .exceptions import GraticuleConfigurationError, GraticuleError, GraticuleInvariantError
from .grid_bounds import GridBounds
from .host import FrameState, MapView, Observable, RecordingVectorContext, RenderEvent, Subscription
from .line_arena import GridLine, LineArena, LineAxis
from .options import (
    DEFAULT_DEGREE_INTERVALS,
    DEFAULT_DISTANCE_INTERVALS,
    DEFAULT_STROKE_STYLE,
    GraticuleOptions,
    StrokeStyle,
    default_intervals,
)

__all__ = [
    "GraticuleEngine",
    "GraticuleError",
    "GraticuleConfigurationError",
    "GraticuleInvariantError",
    "GridBounds",
    "FrameState",
    "MapView",
    "Observable",
    "RecordingVectorContext",
    "RenderEvent",
    "Subscription",
    "GridLine",
    "LineArena",
    "LineAxis",
    "DEFAULT_DEGREE_INTERVALS",
    "DEFAULT_DISTANCE_INTERVALS",
    "DEFAULT_STROKE_STYLE",
    "GraticuleOptions",
    "StrokeStyle",
    "default_intervals",
]
