"""
Graticule Options
Immutable construction-time configuration for the graticule engine
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from pipelines.mapping.projection import GEOGRAPHIC_CODE

# Degree steps from 90° down to one arc-second
DEFAULT_DEGREE_INTERVALS: Tuple[float, ...] = (
    90, 45, 30, 15, 10, 5, 2, 1,
    30 / 60, 20 / 60, 10 / 60, 5 / 60, 3 / 60, 2 / 60, 1 / 60,
    30 / 3600, 20 / 3600, 10 / 3600, 5 / 3600, 3 / 3600, 2 / 3600, 1 / 3600,
)

DEFAULT_DISTANCE_INTERVALS: Tuple[float, ...] = (
    1000000, 500000, 200000, 100000, 50000, 20000, 10000, 5000,
    2000, 1000, 500, 200, 100, 50, 20, 10,
)

DEFAULT_TARGET_SIZE = 100
DEFAULT_MAX_LINES = 100


@dataclass(frozen=True)
class StrokeStyle:
    color: str = "rgba(0,0,0,0.2)"
    width: float = 1.0
    line_dash: Optional[Tuple[float, ...]] = None

    def to_dict(self) -> dict:
        return {"color": self.color, "width": self.width, "line_dash": list(self.line_dash or [])}


DEFAULT_STROKE_STYLE = StrokeStyle()


@dataclass(frozen=True)
class GraticuleOptions:
    """
    Options for a GraticuleEngine.

    ``intervals`` overrides the default table for the graticule projection's
    unit kind; it is sorted descending before use. ``map`` is the host view to
    attach at construction time. ``ground_model`` selects the distance model
    for world-projection parallel stepping ("sphere" or "ellipsoid").
    """

    projection: Any = GEOGRAPHIC_CODE
    intervals: Optional[Tuple[float, ...]] = None
    target_size: float = DEFAULT_TARGET_SIZE
    max_lines: int = DEFAULT_MAX_LINES
    stroke_style: StrokeStyle = DEFAULT_STROKE_STYLE
    map: Any = field(default=None, compare=False)
    ground_model: str = "sphere"


def default_intervals(is_degrees: bool) -> Tuple[float, ...]:
    return DEFAULT_DEGREE_INTERVALS if is_degrees else DEFAULT_DISTANCE_INTERVALS
