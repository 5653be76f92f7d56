from __future__ import annotations

import math

import numpy as np
import pytest

from .transformer import CoordinateTransformer, identity_transform


def test_identity_transform_for_equivalent_projections() -> None:
    transformer = CoordinateTransformer()
    assert transformer.get_transform("EPSG:3857", "EPSG:900913") is identity_transform


def test_identity_transform_copies_or_writes_in_place() -> None:
    flat = np.array([1.0, 2.0, 3.0, 4.0])
    copy = identity_transform(flat)
    assert copy is not flat
    assert list(copy) == [1.0, 2.0, 3.0, 4.0]
    output = np.zeros(4)
    assert identity_transform(flat, output, 2) is output
    assert list(output) == [1.0, 2.0, 3.0, 4.0]


def test_geographic_to_web_mercator() -> None:
    transform = CoordinateTransformer().get_transform("EPSG:4326", "EPSG:3857")
    out = transform([0.0, 0.0, 180.0, 0.0])
    assert out[0] == pytest.approx(0.0, abs=1e-6)
    assert out[1] == pytest.approx(0.0, abs=1e-6)
    assert out[2] == pytest.approx(20037508.342789244)


def test_transform_writes_into_output() -> None:
    transform = CoordinateTransformer().get_transform("EPSG:3857", "EPSG:4326")
    flat = np.array([0.0, 0.0, 20037508.342789244, 0.0])
    out = transform(flat, flat, 2)
    assert out is flat
    assert flat[2] == pytest.approx(180.0)


def test_transforms_are_cached_per_pair() -> None:
    transformer = CoordinateTransformer()
    first = transformer.get_transform("EPSG:4326", "EPSG:3857")
    assert transformer.get_transform("EPSG:4326", "EPSG:3857") is first
    transformer.clear_cache()
    assert transformer.get_transform("EPSG:4326", "EPSG:3857") is not first


def test_unrepresentable_points_do_not_raise() -> None:
    transform = CoordinateTransformer().get_transform("EPSG:4326", "EPSG:3857")
    out = transform([0.0, 90.0])
    assert not math.isfinite(out[1]) or abs(out[1]) > 1e8
