"""Tests for Douglas-Peucker simplification."""

import math

import pytest

from tests.conftest import line, make_feature, point

from tactimap.engine import simplify as simplify_module
from tactimap.engine.simplify import (
    Simplifier,
    douglas_peucker,
    reduction_percent,
    segment_distance,
    simplify_feature_set,
)
from tactimap.geo.geometry import Polygon
from tactimap.geo.visitor import count_vertices

ZIGZAG = (
    (0.0, 0.0),
    (1.0, 0.35),
    (2.0, -0.12),
    (3.0, 0.81),
    (4.0, 0.05),
    (5.0, -0.6),
    (6.0, 0.22),
    (7.0, 0.02),
    (8.0, 1.3),
    (9.0, 0.4),
    (10.0, 0.0),
)


def _circle_ring(n: int = 50, radius: float = 0.0005) -> list[list[float]]:
    pts = [
        [-73.578 + radius * math.cos(2 * math.pi * i / (n - 1)),
         45.496 + radius * math.sin(2 * math.pi * i / (n - 1))]
        for i in range(n - 1)
    ]
    return pts + [pts[0]]


def test_collapses_near_straight_line():
    assert douglas_peucker([[0, 0], [5, 0.01], [10, 0]], 0.02) == ((0.0, 0.0), (10.0, 0.0))


def test_keeps_vertex_above_tolerance():
    assert douglas_peucker([[0, 0], [5, 0.01], [10, 0]], 0.005) == (
        (0.0, 0.0),
        (5.0, 0.01),
        (10.0, 0.0),
    )


def test_two_points_unchanged():
    assert douglas_peucker([[0, 0], [1, 1]], 100) == ((0.0, 0.0), (1.0, 1.0))
    assert douglas_peucker([], 1) == ()


def test_output_is_ordered_subset_with_endpoints():
    out = douglas_peucker(ZIGZAG, 0.3)
    assert out[0] == ZIGZAG[0]
    assert out[-1] == ZIGZAG[-1]
    indices = [ZIGZAG.index(p) for p in out]
    assert indices == sorted(indices)


def test_larger_tolerance_never_adds_vertices():
    counts = [len(douglas_peucker(ZIGZAG, eps)) for eps in (0.0, 0.1, 0.3, 0.5, 1.0, 2.0)]
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 2


def test_long_input_does_not_recurse():
    pts = [(float(i), math.sin(i / 3.0)) for i in range(20000)]
    out = douglas_peucker(pts, 0.01)
    assert out[0] == pts[0]
    assert out[-1] == pts[-1]


def test_resimplifying_removes_nothing_more():
    ring = tuple((float(x), float(y)) for x, y in _circle_ring())
    ring_eps = 2.0 / 78710.0

    for eps in (0.05, 0.3, 0.7):
        once = douglas_peucker(ZIGZAG, eps)
        assert douglas_peucker(once, eps) == once

        accelerated = Simplifier(eps, accelerated=True)
        once = accelerated.line(ZIGZAG)
        assert accelerated.line(once) == once

    once = douglas_peucker(ring, ring_eps)
    assert douglas_peucker(once, ring_eps) == once

    for accelerated in (True, False):
        simplifier = Simplifier(ring_eps, accelerated=accelerated)
        once = simplifier.ring(ring)
        assert len(once) < len(ring)
        assert simplifier.ring(once) == once


def test_segment_distance_is_clamped():
    assert segment_distance((2, 1), (0, 0), (1, 0)) == pytest.approx(math.sqrt(2))
    assert segment_distance((0.5, 1), (0, 0), (1, 0)) == pytest.approx(1.0)
    assert segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)


def test_reduction_percent_rounds_half_up():
    assert reduction_percent(3, 2) == 33
    assert reduction_percent(2, 1) == 50
    assert reduction_percent(8, 1) == 88
    assert reduction_percent(0, 0) == 0


def test_accelerated_matches_fallback_on_open_lines():
    for eps in (0.05, 0.3, 0.7):
        assert Simplifier(eps, accelerated=True).line(ZIGZAG) == douglas_peucker(ZIGZAG, eps)


def test_accelerator_failure_falls_back(monkeypatch):
    def boom(points, epsilon):
        raise RuntimeError("no GEOS")

    monkeypatch.setattr(simplify_module, "_geos_simplify", boom)
    assert Simplifier(0.3, accelerated=True).line(ZIGZAG) == douglas_peucker(ZIGZAG, 0.3)


def test_collapsing_ring_keeps_original():
    ring = ((0.0, 0.0), (10.0, 0.0), (5.0, 0.001), (0.0, 0.0))
    assert Simplifier(1.0, accelerated=False).ring(ring) == ring
    assert Simplifier(1.0, accelerated=True).ring(ring) == ring


def test_polygon_feature_set_reduces_vertices():
    building = make_feature({"type": "Polygon", "coordinates": [_circle_ring()]}, name="Round")
    result = simplify_feature_set({"buildings": (building,)}, 2.0)

    simplified = result.features["buildings"][0]
    assert isinstance(simplified.geometry, Polygon)
    assert result.stats.before == 50
    assert 4 <= result.stats.after < 50
    assert result.stats.total_reduction > 0
    assert simplified.properties["_simplify_before"] == 50
    assert simplified.properties["_simplify_after"] == result.stats.after
    assert simplified.properties["name"] == "Round"


def test_feature_set_is_not_mutated_and_points_pass_through():
    path = make_feature(line((0, 0), (0.5, 0.00001), (1, 0)))
    entrance = make_feature(point(0, 0))
    fs = {"paths": (path,), "entrances": (entrance,)}

    result = simplify_feature_set(fs, 2.0)

    assert count_vertices(path.geometry) == 3
    assert "_simplify_before" not in path.properties
    assert result.features["entrances"] == (entrance,)
    assert count_vertices(result.features["paths"][0].geometry) == 2
    assert result.stats.by_layer["paths"].reduction == 33
    assert "entrances" not in result.stats.by_layer


def test_stats_to_dict():
    path = make_feature(line((0, 0), (0.5, 0.00001), (1, 0)))
    d = simplify_feature_set({"paths": (path,)}, 2.0).stats.to_dict()
    assert d == {
        "before": 3,
        "after": 2,
        "total_reduction": 33,
        "by_layer": {"paths": {"before": 3, "after": 2, "reduction": 33}},
    }


def test_negative_tolerance_rejected():
    with pytest.raises(ValueError):
        simplify_feature_set({}, -1.0)
