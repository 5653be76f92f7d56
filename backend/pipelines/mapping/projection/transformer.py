"""
Coordinate Transformer
Builds flat-coordinate transform functions between projections using pyproj
"""
import logging
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np
from pyproj import Transformer
from pyproj.exceptions import ProjError

from .projection_registry import Projection, ProjectionNotFoundError, equivalent, get_projection

logger = logging.getLogger(__name__)

# transform(flat_coordinates, output=None, stride=2) -> output
TransformFunction = Callable[..., Sequence[float]]


def identity_transform(flat_coordinates: Sequence[float], output=None, stride: int = 2):
    """Copy ``flat_coordinates`` into ``output`` (or a new array) unchanged."""
    values = np.asarray(flat_coordinates, dtype=float)
    if output is None:
        return values.copy()
    if output is not flat_coordinates:
        output[:] = values
    return output


class CoordinateTransformer:
    """
    Caches one pyproj Transformer per (source, target) projection pair and
    exposes it as a TransformFunction over flat (x0, y0, x1, y1, ...) sequences.

    Coordinates are always in (x, y) / (lon, lat) order. Points a projection
    cannot represent come back as ``inf`` rather than raising.
    """

    def __init__(self):
        self._transforms: Dict[Tuple[str, str], TransformFunction] = {}

    def get_transform(
        self,
        source: Union[str, Projection],
        target: Union[str, Projection]
    ) -> TransformFunction:
        """
        Get the transform function from ``source`` to ``target``.

        Raises:
            ProjectionNotFoundError: either projection cannot be resolved or no
                pyproj operation connects them
        """
        source = get_projection(source)
        target = get_projection(target)

        if equivalent(source, target):
            return identity_transform

        key = (source.code, target.code)
        if key not in self._transforms:
            try:
                transformer = Transformer.from_crs(source.crs, target.crs, always_xy=True)
            except ProjError as e:
                raise ProjectionNotFoundError(
                    f"No transformation from {source.code} to {target.code}: {e}"
                ) from e
            self._transforms[key] = self._wrap(transformer)
            logger.debug(f"📍 Created {source.code}→{target.code} transformer")
        return self._transforms[key]

    @staticmethod
    def _wrap(transformer: Transformer) -> TransformFunction:
        def transform(flat_coordinates: Sequence[float], output=None, stride: int = 2):
            values = np.asarray(flat_coordinates, dtype=float)
            xs, ys = transformer.transform(values[0::stride], values[1::stride], errcheck=False)
            if output is None:
                output = values.copy()
            output[0::stride] = xs
            output[1::stride] = ys
            return output

        return transform

    def clear_cache(self):
        """Drop all cached transformers."""
        cache_size = len(self._transforms)
        self._transforms.clear()
        logger.info(f"🧹 Cleared {cache_size} cached transformers")


_default_transformer: Optional[CoordinateTransformer] = None


def get_transform(source: Union[str, Projection], target: Union[str, Projection]) -> TransformFunction:
    """Module-level shortcut using a shared CoordinateTransformer."""
    global _default_transformer
    if _default_transformer is None:
        _default_transformer = CoordinateTransformer()
    return _default_transformer.get_transform(source, target)
