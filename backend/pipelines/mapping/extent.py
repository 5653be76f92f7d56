"""
Extent
Axis-aligned bounding box value type shared by the projection and graticule modules
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class Extent:
    """
    Immutable ``[min_x, min_y, max_x, max_y]`` box in some projection's units.

    An extent whose min exceeds its max on either axis is empty; ``Extent.empty()``
    returns the canonical empty box (``+inf`` mins, ``-inf`` maxes).
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def empty(cls) -> "Extent":
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Extent":
        if len(values) != 4:
            raise ValueError(f"Extent needs 4 values, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]), float(values[3]))

    @classmethod
    def bounding(cls, points: Iterable[Coordinate]) -> "Extent":
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for x, y in points:
            if x < min_x:
                min_x = x
            if x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            if y > max_y:
                max_y = y
        return cls(min_x, min_y, max_x, max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Coordinate:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def top_right(self) -> Coordinate:
        return (self.max_x, self.max_y)

    @property
    def bottom_left(self) -> Coordinate:
        return (self.min_x, self.min_y)

    def is_empty(self) -> bool:
        return self.max_x < self.min_x or self.max_y < self.min_y

    def contains_coordinate(self, coordinate: Coordinate) -> bool:
        x, y = coordinate
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def contains_extent(self, other: "Extent") -> bool:
        return (self.min_x <= other.min_x and other.max_x <= self.max_x and
                self.min_y <= other.min_y and other.max_y <= self.max_y)

    def intersects(self, other: "Extent") -> bool:
        return (self.min_x <= other.max_x and self.max_x >= other.min_x and
                self.min_y <= other.max_y and self.max_y >= other.min_y)

    def intersection(self, other: "Extent") -> "Extent":
        """Overlap of the two boxes, or the empty extent when they are disjoint."""
        if not self.intersects(other):
            return Extent.empty()
        return Extent(
            max(self.min_x, other.min_x),
            max(self.min_y, other.min_y),
            min(self.max_x, other.max_x),
            min(self.max_y, other.max_y),
        )

    def with_corner(self, corner: str, coordinate: Coordinate) -> "Extent":
        """Copy with the ``top_right`` or ``bottom_left`` corner replaced."""
        x, y = coordinate
        if corner == "top_right":
            return Extent(self.min_x, self.min_y, x, y)
        if corner == "bottom_left":
            return Extent(x, y, self.max_x, self.max_y)
        raise ValueError(f"Unknown corner: {corner}")

    def corners(self) -> List[float]:
        """Flat coordinates of the four corners (stride 2)."""
        return [
            self.min_x, self.min_y,
            self.min_x, self.max_y,
            self.max_x, self.min_y,
            self.max_x, self.max_y,
        ]

    def apply_transform(self, transform: Callable[..., Sequence[float]]) -> "Extent":
        """Bounding box of the four corners after ``transform`` (stride 2 flat coords)."""
        out = transform(self.corners(), None, 2)
        xs = [out[0], out[2], out[4], out[6]]
        ys = [out[1], out[3], out[5], out[7]]
        return Extent(min(xs), min(ys), max(xs), max(ys))

    def to_list(self) -> List[float]:
        return [self.min_x, self.min_y, self.max_x, self.max_y]
