from __future__ import annotations

import math

import pytest

from pipelines.mapping.extent import Extent
from .projection_registry import (
    WEB_MERCATOR_HALF_SIZE,
    ProjectionNotFoundError,
    ProjectionUnits,
    ScaleKind,
    equivalent,
    get_projection,
)


def test_geographic_builtin() -> None:
    projection = get_projection("EPSG:4326")
    assert projection.is_degrees
    assert projection.extent == Extent(-180, -90, 180, 90)
    assert projection.world_extent == Extent(-180, -90, 180, 90)
    assert projection.scale_kind == ScaleKind.CONSTANT


def test_web_mercator_builtin() -> None:
    projection = get_projection("EPSG:3857")
    assert projection.units == ProjectionUnits.METERS
    assert projection.extent.max_x == pytest.approx(20037508.342789244)
    assert projection.world_extent == Extent(-180, -85, 180, 85)
    assert projection.scale_kind == ScaleKind.LATITUDE_VARIABLE


def test_lookup_is_cached_and_case_insensitive() -> None:
    assert get_projection("epsg:3857") is get_projection("EPSG:3857")


@pytest.mark.parametrize("alias", ["EPSG:900913", "EPSG:102100"])
def test_web_mercator_aliases_are_equivalent(alias: str) -> None:
    assert equivalent(get_projection(alias), get_projection("EPSG:3857"))


def test_geographic_and_mercator_are_not_equivalent() -> None:
    assert not equivalent(get_projection("EPSG:4326"), get_projection("EPSG:3857"))
    assert not equivalent(None, get_projection("EPSG:4326"))


def test_pyproj_projection_uses_area_of_use() -> None:
    projection = get_projection("EPSG:27700")
    assert projection.units == ProjectionUnits.METERS
    assert projection.scale_kind == ScaleKind.CONSTANT
    world = projection.world_extent
    # British National Grid covers Great Britain
    assert world.contains_coordinate((-2.0, 54.0))
    assert not world.contains_coordinate((10.0, 54.0))
    assert projection.extent.contains_coordinate((400000, 500000))


@pytest.mark.parametrize("code", ["EPSG:999999", "not a projection", ""])
def test_unknown_projection_raises(code: str) -> None:
    with pytest.raises(ProjectionNotFoundError):
        get_projection(code)


def test_point_resolution_degrees_is_unchanged() -> None:
    assert get_projection("EPSG:4326").get_point_resolution(0.5, (10, 60)) == 0.5


def test_point_resolution_web_mercator_shrinks_with_latitude() -> None:
    projection = get_projection("EPSG:3857")
    assert projection.get_point_resolution(1000.0, (0, 0)) == pytest.approx(1000.0)
    # cosh(y / R) is 2 at 60 degrees north
    y = 6378137.0 * math.log(math.tan(math.radians(45 + 30)))
    assert projection.get_point_resolution(1000.0, (0, y)) == pytest.approx(500.0, rel=1e-9)


def test_point_resolution_of_projected_grid_is_near_nominal() -> None:
    projection = get_projection("EPSG:27700")
    # Close to the central meridian the grid scale is ~0.9996
    resolution = projection.get_point_resolution(100.0, (400000, 300000))
    assert resolution == pytest.approx(100.0, rel=0.01)


def test_point_resolution_outside_projection_is_zero() -> None:
    projection = get_projection("EPSG:27700")
    assert projection.get_point_resolution(100.0, (math.inf, 0)) == 0.0


def test_web_mercator_half_size() -> None:
    assert WEB_MERCATOR_HALF_SIZE == pytest.approx(20037508.342789244)
