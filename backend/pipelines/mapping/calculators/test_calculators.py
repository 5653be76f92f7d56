from __future__ import annotations

import pytest

from . import GeodesicCalculator, HaversineCalculator, get_ground_model


def test_haversine_offset_north_moves_latitude_only() -> None:
    sphere = HaversineCalculator()
    lon, lat = sphere.offset((10.0, 0.0), 111194.87, 0.0)
    assert lon == pytest.approx(10.0, abs=1e-9)
    # 1 degree of arc on the 6370997 m sphere
    assert lat == pytest.approx(1.0, abs=1e-4)


def test_haversine_offset_and_distance_agree() -> None:
    sphere = HaversineCalculator()
    start = (-3.0, 55.0)
    end = sphere.offset(start, 250000.0, 180.0)
    assert end[1] < start[1]
    assert sphere.distance(start, end) == pytest.approx(250000.0, rel=1e-9)


def test_geodesic_offset_and_distance_agree() -> None:
    ellipsoid = GeodesicCalculator()
    start = (151.2, -33.9)
    end = ellipsoid.offset(start, 100000.0, 0.0)
    assert end[1] > start[1]
    assert ellipsoid.distance(start, end) == pytest.approx(100000.0, rel=1e-9)


@pytest.mark.parametrize(
    "name, expected",
    [("sphere", HaversineCalculator), ("ellipsoid", GeodesicCalculator)],
)
def test_get_ground_model(name: str, expected: type) -> None:
    assert isinstance(get_ground_model(name), expected)


def test_get_ground_model_rejects_unknown_name() -> None:
    with pytest.raises(ValueError):
        get_ground_model("flat")
