from __future__ import annotations

from pipelines.mapping.extent import Extent
from .extent_resolver import ExtentResolver, nearly_equals
from .projection_context import ProjectionContext


def _resolver(graticule: str, view: str) -> ExtentResolver:
    context = ProjectionContext(graticule)
    context.update_view_projection(view)
    return ExtentResolver(context)


def test_view_covering_the_world_uses_the_graticule_extent() -> None:
    resolver = _resolver("EPSG:4326", "EPSG:4326")
    assert resolver.resolve((0, 0), Extent(-180, -90, 180, 90)) == Extent(-180, -90, 180, 90)


def test_equivalent_projections_pass_the_view_extent_through() -> None:
    resolver = _resolver("EPSG:4326", "EPSG:4326")
    assert resolver.resolve((5, 5), Extent(0, 0, 10, 10)) == Extent(0, 0, 10, 10)


def test_view_outside_the_graticule_world_resolves_to_none() -> None:
    resolver = _resolver("EPSG:27700", "EPSG:3857")
    australia = Extent(1.2e7, -4.5e6, 1.6e7, -1.5e6)
    assert resolver.resolve(australia.center, australia) is None


def test_view_over_the_graticule_is_transformed_into_graticule_units() -> None:
    resolver = _resolver("EPSG:27700", "EPSG:3857")
    britain = Extent(-5e5, 6.7e6, 2e5, 7.4e6)
    extent = resolver.resolve(britain.center, britain)
    assert extent is not None
    # easting/northing of a point in the Midlands
    assert extent.contains_coordinate((400000, 400000))


def test_broken_round_trip_falls_back_to_world_overlap() -> None:
    resolver = _resolver("EPSG:4326", "EPSG:3857")

    def collapse(flat, output=None, stride=2):
        return [0.0] * len(flat)

    resolver.context.view_to_geographic = collapse
    extent = Extent(-1e6, -1e6, 1e6, 1e6)
    assert resolver.resolve((0, 0), extent) == Extent(-180, -85, 180, 85)


def test_nearly_equals_uses_default_tolerance_for_zero() -> None:
    assert nearly_equals(1.0, 1.0 + 1e-7, 0)
    assert not nearly_equals(1.0, 1.1, 0)
    assert nearly_equals(1.0, 1.1, 0.2)
