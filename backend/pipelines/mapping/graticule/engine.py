"""
Graticule Engine
Computes the meridians and parallels of a graticule projection for each
rendered frame of a host view, and draws them after composition.
"""
import logging
import math
from dataclasses import replace
from typing import List, Optional, Tuple

from pipelines.mapping.calculators import get_ground_model
from pipelines.mapping.extent import Extent
from pipelines.mapping.projection import ProjectionNotFoundError, ScaleKind
from .adaptive_builder import AdaptiveLineBuilder
from .curve_fitter import GeodesicCurveFitter
from .exceptions import GraticuleConfigurationError, GraticuleInvariantError
from .extent_resolver import ExtentResolver
from .grid_bounds import GridBounds, GridBoundsCalculator
from .host import FrameState, MapView, Observable, RenderEvent, Subscription
from .interval_selector import IntervalSelector
from .line_arena import GridLine, LineArena, LineAxis
from .options import GraticuleOptions, StrokeStyle, default_intervals
from .projection_context import ProjectionContext
from .regular_builder import RegularLineBuilder

logger = logging.getLogger(__name__)


class GraticuleEngine(Observable):
    """
    Grid of meridians and parallels overlaid on a MapView.

    Lines are recomputed on every post-composition event of the attached map
    and drawn with ``stroke_style``. Listeners registered with ``on_change``
    are notified when the selected interval changes or the map is swapped.
    """

    def __init__(self, options: Optional[GraticuleOptions] = None, **overrides):
        super().__init__()
        options = options or GraticuleOptions()
        if overrides:
            options = replace(options, **overrides)

        if not isinstance(options.max_lines, int) or options.max_lines <= 0:
            raise GraticuleConfigurationError(f"max_lines must be a positive integer, got {options.max_lines}")

        try:
            self.context = ProjectionContext(options.projection)
        except ProjectionNotFoundError as e:
            raise GraticuleConfigurationError(f"Cannot use graticule projection {options.projection}: {e}") from e

        try:
            ground_model = get_ground_model(options.ground_model)
        except ValueError as e:
            raise GraticuleConfigurationError(str(e)) from e

        intervals = options.intervals
        if intervals is None:
            intervals = default_intervals(self.context.graticule.is_degrees)

        self.options = options
        self.max_lines = options.max_lines
        self.stroke_style: StrokeStyle = options.stroke_style

        self.interval_selector = IntervalSelector(intervals, options.target_size)
        self.extent_resolver = ExtentResolver(self.context)
        self.bounds_calculator = GridBoundsCalculator(self.context)
        self.fitter = GeodesicCurveFitter(self.context)
        self.regular_builder = RegularLineBuilder(self.fitter, self.max_lines)
        self.adaptive_builder = AdaptiveLineBuilder(self.context, self.fitter, self.max_lines, ground_model)

        self.interval = math.inf
        self.bounds = GridBounds()
        self.meridians = LineArena(LineAxis.MERIDIAN)
        self.parallels = LineArena(LineAxis.PARALLEL)

        self._map: Optional[MapView] = None
        self._subscription: Optional[Subscription] = None

        logger.info(f"🧭 Graticule engine created for {self.context.graticule.code} "
                    f"({len(self.interval_selector.intervals)} intervals, max_lines={self.max_lines})")

        if options.map is not None:
            self.set_map(options.map)

    # Public accessors

    def get_map(self) -> Optional[MapView]:
        return self._map

    def set_map(self, map_view: Optional[MapView]) -> None:
        """
        Detach from the current map (if any) and attach to ``map_view``.
        Both maps are asked to re-render.
        """
        if self._map is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            self._map.render()
        if map_view is not None:
            self._subscription = map_view.on_postcompose(self.handle_postcompose)
            map_view.render()
        self._map = map_view
        logger.info(f"🔗 Graticule attached to {map_view!r}" if map_view is not None else "🔗 Graticule detached")
        self.changed()

    def get_interval(self) -> float:
        """Last selected interval in graticule units (``inf`` before the first frame)."""
        return self.interval

    def get_meridians(self) -> List[GridLine]:
        return self.meridians.snapshot()

    def get_parallels(self) -> List[GridLine]:
        return self.parallels.snapshot()

    def get_grid_bounds(self) -> GridBounds:
        return replace(self.bounds)

    # Frame handling

    def handle_postcompose(self, event: RenderEvent) -> None:
        """Recompute the grid for the event's frame and draw it: meridians, then parallels."""
        self.update(event.frame_state)

        vector_context = event.vector_context
        vector_context.set_fill_stroke_style(None, self.stroke_style)
        for line in self.meridians:
            vector_context.draw_line_string(line)
        for line in self.parallels:
            vector_context.draw_line_string(line)

    def update(self, frame_state: FrameState) -> None:
        """Recompute the live lines for ``frame_state`` without drawing them."""
        pixel_ratio = frame_state.pixel_ratio
        resolution = frame_state.resolution
        squared_tolerance = resolution * resolution / (4 * pixel_ratio * pixel_ratio)

        if self.context.needs_update(frame_state.projection):
            self.context.update_view_projection(frame_state.projection)

        self.create_graticule(frame_state.extent, frame_state.center, resolution, squared_tolerance)

    def create_graticule(self, extent: Extent, center: Tuple[float, float],
                         resolution: float, squared_tolerance: float) -> None:
        """
        Regenerate meridians and parallels for a view ``extent``, ``center`` and
        ``resolution`` (all in view units). The view projection must have been
        set with ``context.update_view_projection`` first.
        """
        ctx = self.context

        if ctx.graticule.is_degrees and not ctx.view.is_degrees:
            resolution = self.get_degrees_resolution(resolution, center)

        extent = extent.intersection(ctx.view_extent)
        if extent.is_empty():
            self._clear()
            return

        graticule_extent = self.extent_resolver.resolve(center, extent)
        if graticule_extent is None:
            logger.debug("🚫 View does not overlap the graticule projection")
            self._clear()
            return

        graticule_center = graticule_extent.center
        adjusted_resolution = ctx.graticule.get_point_resolution(resolution, graticule_center)
        if not adjusted_resolution or not math.isfinite(adjusted_resolution):
            logger.debug(f"🚫 No point resolution at {graticule_center}")
            self._clear()
            return

        interval = self.interval_selector.select(adjusted_resolution)
        if interval != self.interval:
            logger.info(f"📏 Graticule interval {self.interval} → {interval}")
            self.interval = interval
            self.changed()

        # Rescale the interval from ground units to nominal projection units
        interval *= resolution / adjusted_resolution

        self.bounds = self.bounds_calculator.calculate(interval, graticule_extent)

        try:
            if ctx.scale_kind == ScaleKind.LATITUDE_VARIABLE:
                self.adaptive_builder.build(
                    self.interval, resolution, graticule_center, self.bounds, extent,
                    squared_tolerance, self.meridians, self.parallels)
            else:
                anchored = (
                    math.floor(graticule_center[0] / interval) * interval,
                    math.floor(graticule_center[1] / interval) * interval,
                )
                self.regular_builder.build(
                    interval, anchored, self.bounds, extent,
                    squared_tolerance, self.meridians, self.parallels)
        except GraticuleInvariantError as e:
            logger.warning(f"⚠️ Graticule build failed, lines cleared: {e}")
            self._clear()
            raise

        logger.debug(f"🕸️ {len(self.meridians)} meridians, {len(self.parallels)} parallels "
                     f"at interval {self.interval}")

    def get_degrees_resolution(self, resolution: float, center: Tuple[float, float]) -> float:
        """Approximate degrees per pixel at ``center`` from a one-pixel cross."""
        x, y = center
        half = resolution / 2
        cross = [x - half, y, x + half, y, x, y - half, x, y + half]
        lonlat = self.context.view_to_geographic(cross, None, 2)
        width = abs(lonlat[0] - lonlat[2])
        # A cross straddling the antimeridian comes back wrapped
        if width > 180:
            width = 360 - width
        height = abs(lonlat[5] - lonlat[7])
        return float((width + height) / 2)

    def _clear(self) -> None:
        self.meridians.clear()
        self.parallels.clear()
