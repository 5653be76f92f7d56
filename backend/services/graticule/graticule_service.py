"""
Graticule Service
Drives GraticuleEngine instances for one-shot HTTP requests: each request is
composed as a single frame of a private MapView and the drawn lines are
returned as GeoJSON.
"""
import logging
import math
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from shapely.geometry import mapping

from config import settings
from pipelines.mapping.extent import Extent
from pipelines.mapping.graticule import (
    FrameState,
    GraticuleConfigurationError,
    GraticuleEngine,
    GraticuleOptions,
    GridLine,
    LineAxis,
    MapView,
    RecordingVectorContext,
    default_intervals,
)
from pipelines.mapping.projection import Projection, ProjectionNotFoundError, get_projection

logger = logging.getLogger(__name__)

EngineKey = Tuple[str, Optional[Tuple[float, ...]], float, int, str]


class GraticuleService:
    """
    Keeps a small LRU of engines keyed by their options. Engines are not
    thread-safe, so each compute holds the service lock.
    """

    def __init__(self, cache_size: int = settings.GRATICULE_ENGINE_CACHE_SIZE,
                 max_request_pixels: int = settings.GRATICULE_MAX_REQUEST_PIXELS):
        self.cache_size = max(1, cache_size)
        self.max_request_pixels = max_request_pixels
        self._engines: "OrderedDict[EngineKey, GraticuleEngine]" = OrderedDict()
        self._lock = threading.Lock()

    def get_engine(
        self,
        projection: Optional[str] = None,
        intervals: Optional[Sequence[float]] = None,
        target_size: Optional[float] = None,
        max_lines: Optional[int] = None,
        ground_model: Optional[str] = None,
    ) -> GraticuleEngine:
        key: EngineKey = (
            (projection or settings.GRATICULE_PROJECTION).strip().upper(),
            tuple(float(i) for i in intervals) if intervals else None,
            float(target_size if target_size is not None else settings.GRATICULE_TARGET_SIZE),
            int(max_lines if max_lines is not None else settings.GRATICULE_MAX_LINES),
            ground_model or settings.GRATICULE_GROUND_MODEL,
        )
        engine = self._engines.get(key)
        if engine is not None:
            self._engines.move_to_end(key)
            return engine

        options = GraticuleOptions(
            projection=key[0],
            intervals=key[1],
            target_size=key[2],
            max_lines=key[3],
            ground_model=key[4],
        )
        engine = GraticuleEngine(options, map=MapView(name=f"graticule:{key[0]}"))
        self._engines[key] = engine
        while len(self._engines) > self.cache_size:
            evicted_key, evicted = self._engines.popitem(last=False)
            evicted.set_map(None)
            logger.debug(f"🧹 Evicted graticule engine {evicted_key}")
        logger.info(f"🧭 Created graticule engine {key}")
        return engine

    def compute(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Compose one frame and collect the drawn lines.

        Args:
            request: dict with ``extent`` (view units), ``resolution`` and
                optionally ``view_projection``, ``center``, ``pixel_ratio``,
                ``projection``, ``intervals``, ``target_size``, ``max_lines``,
                ``ground_model``

        Returns:
            dict: interval, grid bounds, stroke style and a GeoJSON
            FeatureCollection of the lines

        Raises:
            GraticuleConfigurationError: invalid request or unusable projection
            GraticuleInvariantError: a line could not be built
        """
        extent_values = request.get("extent") or []
        if len(extent_values) != 4:
            raise GraticuleConfigurationError("extent must be [min_x, min_y, max_x, max_y]")
        extent = Extent.from_sequence(extent_values)
        if extent.is_empty() or not all(math.isfinite(v) for v in extent.to_list()):
            raise GraticuleConfigurationError(f"Invalid extent {extent_values}")

        resolution = float(request.get("resolution") or 0)
        if not resolution > 0 or not math.isfinite(resolution):
            raise GraticuleConfigurationError("resolution must be a positive number")

        pixels = (extent.width / resolution) * (extent.height / resolution)
        if pixels > self.max_request_pixels:
            raise GraticuleConfigurationError(
                f"View of {pixels:.0f} pixels exceeds the limit of {self.max_request_pixels}")

        center = request.get("center") or extent.center
        if len(center) != 2:
            raise GraticuleConfigurationError("center must be [x, y]")

        pixel_ratio = float(request.get("pixel_ratio") if request.get("pixel_ratio") is not None else 1.0)
        if not pixel_ratio > 0 or not math.isfinite(pixel_ratio):
            raise GraticuleConfigurationError("pixel_ratio must be a positive number")

        view_projection = self.resolve_projection(request.get("view_projection") or "EPSG:3857")
        frame_state = FrameState(
            extent=extent,
            center=(float(center[0]), float(center[1])),
            projection=view_projection,
            resolution=resolution,
            pixel_ratio=pixel_ratio,
        )

        with self._lock:
            engine = self.get_engine(
                projection=request.get("projection"),
                intervals=request.get("intervals"),
                target_size=request.get("target_size"),
                max_lines=request.get("max_lines"),
                ground_model=request.get("ground_model"),
            )
            vector_context = engine.get_map().compose(frame_state, RecordingVectorContext())
            interval = engine.get_interval()
            bounds = engine.get_grid_bounds()

        lines = [line for line, _ in vector_context.drawn]
        meridian_count = sum(1 for line in lines if line.axis == LineAxis.MERIDIAN)
        has_lines = bool(lines)

        logger.info(f"🕸️ Graticule {engine.context.graticule.code} over {view_projection.code}: "
                    f"{meridian_count} meridians, {len(lines) - meridian_count} parallels")

        return {
            "success": True,
            "projection": engine.context.graticule.code,
            "view_projection": view_projection.code,
            "interval": interval if math.isfinite(interval) else None,
            "grid_bounds": bounds.to_extent().to_list() if has_lines else None,
            "stroke": engine.stroke_style.to_dict(),
            "meridian_count": meridian_count,
            "parallel_count": len(lines) - meridian_count,
            "lines": self.to_feature_collection(lines),
        }

    @staticmethod
    def to_feature_collection(lines: List[GridLine]) -> Dict[str, Any]:
        features = []
        for line in lines:
            if line.point_count < 2:
                continue
            features.append({
                "type": "Feature",
                "geometry": mapping(line.to_linestring()),
                "properties": {"axis": line.axis.value, "value": float(line.value)},
            })
        return {"type": "FeatureCollection", "features": features}

    def get_intervals(self, projection: Optional[str] = None) -> Dict[str, Any]:
        resolved = self.resolve_projection(projection or settings.GRATICULE_PROJECTION)
        return {
            "projection": resolved.code,
            "units": resolved.units.value,
            "intervals": list(default_intervals(resolved.is_degrees)),
        }

    def describe_projection(self, code: str) -> Dict[str, Any]:
        resolved = self.resolve_projection(code)
        world_extent = resolved.world_extent
        return {
            "code": resolved.code,
            "name": resolved.crs.name if resolved.crs is not None else resolved.code,
            "units": resolved.units.value,
            "scale_kind": resolved.scale_kind.value,
            "extent": resolved.extent.to_list(),
            "world_extent": world_extent.to_list() if world_extent is not None else None,
        }

    @staticmethod
    def resolve_projection(code: str) -> Projection:
        try:
            return get_projection(code)
        except ProjectionNotFoundError as e:
            raise GraticuleConfigurationError(str(e)) from e


_service: Optional[GraticuleService] = None


def get_graticule_service() -> GraticuleService:
    global _service
    if _service is None:
        _service = GraticuleService()
    return _service
