from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import pytest

from pipelines.mapping.extent import Extent
from pipelines.mapping.projection import get_projection
from .engine import GraticuleEngine
from .exceptions import GraticuleConfigurationError, GraticuleInvariantError
from .grid_bounds import GridBounds
from .host import FrameState, MapView, RecordingVectorContext
from .line_arena import LineAxis
from .options import GraticuleOptions, StrokeStyle

WEB_MERCATOR_HALF = 20037508.342789244
DEGREES_PER_METER_AT_EQUATOR = 180 / WEB_MERCATOR_HALF


def _frame(
    extent: Sequence[float],
    projection: str = "EPSG:4326",
    resolution: Optional[float] = None,
    center: Optional[Tuple[float, float]] = None,
    pixel_ratio: float = 1.0,
) -> FrameState:
    view_extent = Extent.from_sequence(extent)
    return FrameState(
        extent=view_extent,
        center=center or view_extent.center,
        projection=get_projection(projection),
        resolution=resolution or view_extent.width / 1000,
        pixel_ratio=pixel_ratio,
    )


def _values(lines) -> List[float]:
    return [line.value for line in lines]


def test_world_view_in_the_graticule_projection() -> None:
    engine = GraticuleEngine()
    engine.update(_frame([-180, -90, 180, 90], resolution=360 / 512))

    assert engine.get_interval() == 90
    assert engine.get_grid_bounds() == GridBounds(min_x=-180, max_x=180, min_y=-90, max_y=90)
    assert _values(engine.get_meridians()) == [0, -90, -180, 90, 180]
    assert _values(engine.get_parallels()) == [0, -90, 90]


def test_equivalent_projections_draw_axis_aligned_segments() -> None:
    engine = GraticuleEngine()
    engine.update(_frame([10, 40, 20, 50], resolution=0.012))

    for line in engine.get_meridians():
        assert line.point_count == 2
        assert line.coordinates[0][0] == line.coordinates[1][0] == line.value
    for line in engine.get_parallels():
        assert line.point_count == 2
        assert line.coordinates[0][1] == line.coordinates[1][1] == line.value


def test_only_visible_lines_are_kept() -> None:
    engine = GraticuleEngine()
    view = [10, 40, 20, 50]
    engine.update(_frame(view, resolution=0.012))

    assert engine.get_interval() == 2
    assert _values(engine.get_meridians()) == [14, 12, 10, 16, 18, 20]
    assert _values(engine.get_parallels()) == [44, 42, 40, 46, 48, 50]
    view_extent = Extent.from_sequence(view)
    for line in engine.get_meridians() + engine.get_parallels():
        assert line.extent.intersects(view_extent)


@pytest.mark.parametrize("max_lines", [1, 3, 5])
def test_line_count_is_capped_per_axis(max_lines: int) -> None:
    engine = GraticuleEngine(max_lines=max_lines)
    engine.update(_frame([-180, -90, 180, 90], resolution=0.001))

    assert len(engine.get_meridians()) == 2 * max_lines + 1
    assert len(engine.get_parallels()) == 2 * max_lines + 1


def test_same_frame_twice_gives_the_same_lines() -> None:
    engine = GraticuleEngine()
    frame = _frame([-30, -20, 40, 35])
    engine.update(frame)
    first = [line.coordinates for line in engine.get_meridians() + engine.get_parallels()]
    engine.update(frame)
    second = [line.coordinates for line in engine.get_meridians() + engine.get_parallels()]
    assert first == second


def test_graticule_over_web_mercator_view() -> None:
    engine = GraticuleEngine()
    engine.update(_frame([-1e6, 5e6, 2e6, 8e6], projection="EPSG:3857", resolution=3000))

    assert engine.get_interval() == 5
    # -10 degrees is just west of the view
    assert _values(engine.get_meridians()) == [0, -5, 5, 10, 15]
    assert _values(engine.get_parallels()) == [45, 50, 55]
    for line in engine.get_meridians():
        for x, _ in line.coordinates:
            assert x * DEGREES_PER_METER_AT_EQUATOR == pytest.approx(line.value, abs=1e-9)
    for line in engine.get_parallels():
        ys = [y for _, y in line.coordinates]
        assert max(ys) - min(ys) == pytest.approx(0, abs=1e-6)


def test_degrees_resolution_of_a_mercator_view() -> None:
    engine = GraticuleEngine()
    engine.context.update_view_projection(get_projection("EPSG:3857"))
    resolution = engine.get_degrees_resolution(1000.0, (0.0, 0.0))
    assert resolution == pytest.approx(1000.0 * DEGREES_PER_METER_AT_EQUATOR, rel=1e-6)


@pytest.mark.parametrize("offset", [2000.0, 100.0])
def test_degrees_resolution_next_to_the_antimeridian(offset: float) -> None:
    engine = GraticuleEngine()
    engine.context.update_view_projection(get_projection("EPSG:3857"))
    resolution = engine.get_degrees_resolution(1000.0, (WEB_MERCATOR_HALF - offset, 0.0))
    assert resolution == pytest.approx(1000.0 * DEGREES_PER_METER_AT_EQUATOR, rel=1e-6)


def test_interval_is_stable_when_the_center_crosses_the_antimeridian() -> None:
    extent = [WEB_MERCATOR_HALF - 1e6, -5e5, WEB_MERCATOR_HALF - 50, 5e5]
    intervals = []
    for offset in (2000.0, 100.0):
        engine = GraticuleEngine()
        engine.update(_frame(extent, projection="EPSG:3857", resolution=1000,
                             center=(WEB_MERCATOR_HALF - offset, 0.0)))
        intervals.append(engine.get_interval())
    assert intervals == [1, 1]


def test_view_outside_the_view_projection_draws_nothing() -> None:
    engine = GraticuleEngine()
    engine.update(_frame([200, 0, 250, 10]))
    assert engine.get_meridians() == []
    assert engine.get_parallels() == []
    assert engine.get_interval() == math.inf


def test_view_outside_the_graticule_world_then_recovers() -> None:
    engine = GraticuleEngine(projection="EPSG:27700")
    engine.update(_frame([1.2e7, -4.5e6, 1.6e7, -1.5e6], projection="EPSG:3857"))
    assert engine.get_meridians() == []
    assert engine.get_parallels() == []

    engine.update(_frame([-5e5, 6.7e6, 2e5, 7.4e6], projection="EPSG:3857"))
    assert engine.get_interval() == 100000
    assert engine.get_meridians()
    assert engine.get_parallels()

    engine.update(_frame([1.2e7, -4.5e6, 1.6e7, -1.5e6], projection="EPSG:3857"))
    assert engine.get_meridians() == []
    assert engine.get_parallels() == []


def test_interval_change_notifies_listeners() -> None:
    engine = GraticuleEngine()
    notifications: List[float] = []
    engine.on_change(lambda target: notifications.append(target.get_interval()))

    engine.update(_frame([-180, -90, 180, 90], resolution=360 / 512))
    engine.update(_frame([-180, -90, 180, 90], resolution=360 / 512))
    assert notifications == [90]

    engine.update(_frame([10, 40, 20, 50], resolution=0.012))
    assert notifications == [90, 2]


def test_attach_and_detach_request_renders() -> None:
    first = MapView("first")
    second = MapView("second")
    engine = GraticuleEngine(map=first)
    assert engine.get_map() is first
    assert first.listener_count == 1
    assert first.render_requests == 1

    engine.set_map(second)
    assert first.listener_count == 0
    assert first.render_requests == 2
    assert second.listener_count == 1
    assert second.render_requests == 1

    engine.set_map(None)
    assert engine.get_map() is None
    assert second.listener_count == 0
    assert second.render_requests == 2


def test_set_map_notifies_change() -> None:
    engine = GraticuleEngine()
    revision = engine.revision
    engine.set_map(MapView())
    assert engine.revision == revision + 1


def test_postcompose_draws_meridians_then_parallels() -> None:
    stroke = StrokeStyle(color="#ff0000", width=2.0)
    map_view = MapView()
    engine = GraticuleEngine(GraticuleOptions(stroke_style=stroke, map=map_view))

    context = map_view.compose(_frame([10, 40, 20, 50], resolution=0.012), RecordingVectorContext())
    axes = [line.axis for line, _ in context.drawn]
    assert axes == [LineAxis.MERIDIAN] * 6 + [LineAxis.PARALLEL] * 6
    assert all(style is stroke for _, style in context.drawn)
    assert context.fill is None
    assert len(engine.get_meridians()) == 6


def test_detached_engine_stops_drawing() -> None:
    map_view = MapView()
    engine = GraticuleEngine(map=map_view)
    engine.set_map(None)
    context = map_view.compose(_frame([10, 40, 20, 50], resolution=0.012))
    assert context.drawn == []


def test_higher_pixel_ratio_never_gives_coarser_lines() -> None:
    engine = GraticuleEngine(projection="EPSG:27700")
    frame = _frame([-5e5, 6.7e6, 2e5, 7.4e6], projection="EPSG:3857", resolution=700)
    engine.update(frame)
    coarse = sum(line.point_count for line in engine.get_meridians() + engine.get_parallels())
    engine.update(FrameState(frame.extent, frame.center, frame.projection, frame.resolution, pixel_ratio=4.0))
    fine = sum(line.point_count for line in engine.get_meridians() + engine.get_parallels())
    assert fine >= coarse


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_lines": 0},
        {"max_lines": -5},
        {"intervals": ()},
        {"intervals": (10, 0)},
        {"projection": "EPSG:999999"},
        {"ground_model": "flat"},
    ],
)
def test_invalid_options_are_rejected(overrides) -> None:
    with pytest.raises(GraticuleConfigurationError):
        GraticuleEngine(**overrides)


def test_custom_interval_table() -> None:
    engine = GraticuleEngine(intervals=(20, 7))
    engine.update(_frame([-180, -90, 180, 90], resolution=0.5))
    assert engine.get_interval() == 20


def test_failed_build_leaves_no_lines_behind(monkeypatch) -> None:
    engine = GraticuleEngine()
    frame = _frame([10, 40, 20, 50], resolution=0.012)
    engine.update(frame)
    assert engine.get_meridians()

    def failing_build(interval, center, bounds, extent, squared_tolerance, meridians, parallels):
        meridians.slot(0).set_flat_coordinates(0.0, [0.0, 0.0, 0.0, 1.0])
        raise GraticuleInvariantError("no finite points")

    monkeypatch.setattr(engine.regular_builder, "build", failing_build)
    with pytest.raises(GraticuleInvariantError):
        engine.update(frame)

    assert engine.get_meridians() == []
    assert engine.get_parallels() == []
