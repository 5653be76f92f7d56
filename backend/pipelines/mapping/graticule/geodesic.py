"""
Curve Subdivision
Approximates a line of constant longitude/latitude in another projection by
recursive bisection under a squared pixel-distance tolerance.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

import numpy as np

from pipelines.mapping.projection import TransformFunction

logger = logging.getLogger(__name__)

# Upper bound on midpoint evaluations per line
MAX_ITERATIONS = 100000

# Segments narrower than this (as a fraction of the whole line) are accepted as-is
MIN_FRACTION_SPAN = 1e-6

# fractions -> (xs, ys) in the source projection
InterpolateFunction = Callable[[np.ndarray], Tuple[np.ndarray, np.ndarray]]


def squared_segment_distance(x, y, x1, y1, x2, y2):
    """Squared distance from (x, y) to the segment (x1, y1)-(x2, y2); works elementwise on arrays."""
    x, y, x1, y1, x2, y2 = (np.asarray(v, dtype=float) for v in (x, y, x1, y1, x2, y2))
    dx = x2 - x1
    dy = y2 - y1
    length2 = dx * dx + dy * dy
    with np.errstate(invalid="ignore", divide="ignore"):
        t = np.where(length2 != 0, ((x - x1) * dx + (y - y1) * dy) / length2, 0.0)
    t = np.clip(t, 0.0, 1.0)
    px = x1 + dx * t
    py = y1 + dy * t
    return (x - px) ** 2 + (y - py) ** 2


def line(interpolate: InterpolateFunction, transform: TransformFunction, squared_tolerance: float) -> np.ndarray:
    """
    Flat (stride 2) target coordinates of the curve ``transform(interpolate(f))``
    for ``f`` in [0, 1].

    Each level of bisection is evaluated as one vectorised transform. A segment
    is accepted once its transformed midpoint lies within tolerance of its
    chord. Points the transform cannot represent are dropped.
    """
    def project(fractions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        xs, ys = interpolate(fractions)
        flat = np.empty(2 * len(fractions))
        flat[0::2] = xs
        flat[1::2] = ys
        flat = transform(flat, flat, 2)
        return np.asarray(flat[0::2], dtype=float), np.asarray(flat[1::2], dtype=float)

    ends_x, ends_y = project(np.array([0.0, 1.0]))
    points: Dict[float, Tuple[float, float]] = {
        0.0: (ends_x[0], ends_y[0]),
        1.0: (ends_x[1], ends_y[1]),
    }
    pending: List[Tuple[float, float]] = [(0.0, 1.0)]
    evaluations = 0

    while pending and evaluations < MAX_ITERATIONS:
        pending = pending[:MAX_ITERATIONS - evaluations]
        frac_a = np.array([seg[0] for seg in pending])
        frac_b = np.array([seg[1] for seg in pending])
        frac_m = (frac_a + frac_b) / 2
        mx, my = project(frac_m)
        evaluations += len(frac_m)

        ax = np.array([points[f][0] for f in frac_a])
        ay = np.array([points[f][1] for f in frac_a])
        bx = np.array([points[f][0] for f in frac_b])
        by = np.array([points[f][1] for f in frac_b])

        close = squared_segment_distance(mx, my, ax, ay, bx, by) < squared_tolerance
        nowhere = ~(np.isfinite(ax) | np.isfinite(bx) | np.isfinite(mx))
        narrow = (frac_b - frac_a) < MIN_FRACTION_SPAN

        split = []
        for i in np.flatnonzero(~(close | nowhere | narrow)):
            fm = float(frac_m[i])
            points[fm] = (mx[i], my[i])
            split.append((float(frac_a[i]), fm))
            split.append((fm, float(frac_b[i])))
        pending = split

    if pending:
        logger.debug(f"⚠️ Curve subdivision stopped after {evaluations} evaluations")

    flat = []
    for fraction in sorted(points):
        x, y = points[fraction]
        if np.isfinite(x) and np.isfinite(y):
            flat.append(x)
            flat.append(y)
    return np.array(flat, dtype=float)


def meridian(lon: float, lat1: float, lat2: float, transform: TransformFunction,
             squared_tolerance: float) -> np.ndarray:
    """Line of constant ``lon`` from ``lat1`` to ``lat2`` (source units) in target coordinates."""
    def interpolate(fractions):
        return np.full(len(fractions), lon, dtype=float), lat1 + (lat2 - lat1) * fractions

    return line(interpolate, transform, squared_tolerance)


def parallel(lat: float, lon1: float, lon2: float, transform: TransformFunction,
             squared_tolerance: float) -> np.ndarray:
    """Line of constant ``lat`` from ``lon1`` to ``lon2`` (source units) in target coordinates."""
    def interpolate(fractions):
        return lon1 + (lon2 - lon1) * fractions, np.full(len(fractions), lat, dtype=float)

    return line(interpolate, transform, squared_tolerance)
