"""
Line Arena
Reusable, index-addressed storage for graticule line geometries
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import LineString

from pipelines.mapping.extent import Extent


class LineAxis(str, Enum):
    MERIDIAN = "meridian"
    PARALLEL = "parallel"


class GridLine:
    """
    Open polyline in view-projection coordinates, tagged with the longitude
    (meridian) or latitude (parallel) value it represents.
    """

    __slots__ = ("axis", "value", "_flat", "_extent")

    def __init__(self, axis: LineAxis, value: float = math.nan, flat_coordinates: Optional[Sequence[float]] = None):
        self.axis = axis
        self.value = value
        self._flat = np.empty(0)
        self._extent: Optional[Extent] = None
        if flat_coordinates is not None:
            self.set_flat_coordinates(value, flat_coordinates)

    def set_flat_coordinates(self, value: float, flat_coordinates: Sequence[float]) -> "GridLine":
        """Overwrite this slot's geometry and value in place."""
        self.value = value
        self._flat = np.asarray(flat_coordinates, dtype=float).reshape(-1)
        self._extent = None
        return self

    @property
    def flat_coordinates(self) -> np.ndarray:
        return self._flat

    @property
    def point_count(self) -> int:
        return len(self._flat) // 2

    @property
    def coordinates(self) -> List[Tuple[float, float]]:
        flat = self._flat
        return [(float(flat[i]), float(flat[i + 1])) for i in range(0, len(flat) - 1, 2)]

    @property
    def extent(self) -> Extent:
        if self._extent is None:
            if len(self._flat) == 0:
                self._extent = Extent.empty()
            else:
                xs = self._flat[0::2]
                ys = self._flat[1::2]
                self._extent = Extent(float(xs.min()), float(ys.min()), float(xs.max()), float(ys.max()))
        return self._extent

    def copy(self) -> "GridLine":
        return GridLine(self.axis, self.value, self._flat.copy())

    def to_linestring(self) -> LineString:
        return LineString(self.coordinates)

    def __repr__(self) -> str:
        return f"GridLine({self.axis.value}, value={self.value!r}, points={self.point_count})"


class LineArena:
    """
    Slots are created on demand and never freed; ``truncate`` only moves the
    live count, so a frame that emits fewer lines than the last one keeps the
    spare slots for later frames.
    """

    def __init__(self, axis: LineAxis):
        self.axis = axis
        self._slots: List[GridLine] = []
        self.live_count = 0

    def slot(self, index: int) -> GridLine:
        """Existing slot at ``index``, or a new one appended when ``index`` is one past the end."""
        if index < len(self._slots):
            return self._slots[index]
        if index == len(self._slots):
            line = GridLine(self.axis)
            self._slots.append(line)
            return line
        raise IndexError(f"Slot {index} would leave a gap (capacity {len(self._slots)})")

    def truncate(self, count: int) -> None:
        if count < 0 or count > len(self._slots):
            raise IndexError(f"Cannot set live count {count} (capacity {len(self._slots)})")
        self.live_count = count

    def clear(self) -> None:
        self.live_count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self.live_count

    def __iter__(self) -> Iterator[GridLine]:
        return iter(self._slots[:self.live_count])

    def __getitem__(self, index: int) -> GridLine:
        if index < 0:
            index += self.live_count
        if not 0 <= index < self.live_count:
            raise IndexError(f"Line {index} is not live (live count {self.live_count})")
        return self._slots[index]

    def snapshot(self) -> List[GridLine]:
        """Copies of the live lines, safe to keep after the next frame."""
        return [line.copy() for line in self]
