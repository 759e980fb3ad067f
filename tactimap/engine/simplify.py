"""Douglas-Peucker simplification of line and polygon layers.

Tolerance is given in metres and converted to degrees with a fixed
metres-per-degree factor (see spatial_constants). Each line or ring is
simplified independently. Rings that would collapse below a closed triangle
keep their original vertices.

The GEOS simplifier (via shapely) is tried first when ``accelerated`` is set;
any failure falls back to the numpy implementation below, which is also the
reference for the observable results.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Sequence

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import LineString as ShapelyLineString

from tactimap.engine.spatial_constants import (
    DEFAULT_TOLERANCE_M,
    METRES_PER_DEGREE,
    MIN_RING_POINTS,
)
from tactimap.geo.features import BUILDINGS, MAJOR_STREETS, PATHS, STREETS, Feature
from tactimap.geo.geometry import (
    Geometry,
    GeometryCollection,
    Line,
    LineString,
    MultiLineString,
    MultiPolygon,
    Polygon,
    Rings,
)
from tactimap.geo.visitor import count_vertices

logger = logging.getLogger(__name__)

SIMPLIFIABLE_LAYERS = (BUILDINGS, PATHS, MAJOR_STREETS, STREETS)


# == Statistics ================================================================


def reduction_percent(before: int, after: int) -> int:
    """round((1 - after/before) * 100), halves rounding up; 0 when before is 0."""
    if before <= 0:
        return 0
    return int(math.floor((1 - after / before) * 100 + 0.5))


@dataclass(frozen=True)
class LayerStats:
    before: int = 0
    after: int = 0

    @property
    def reduction(self) -> int:
        return reduction_percent(self.before, self.after)


@dataclass(frozen=True)
class SimplifyStats:
    before: int = 0
    after: int = 0
    by_layer: Mapping[str, LayerStats] = field(default_factory=dict)

    @property
    def total_reduction(self) -> int:
        return reduction_percent(self.before, self.after)

    def to_dict(self) -> dict:
        return {
            "before": self.before,
            "after": self.after,
            "total_reduction": self.total_reduction,
            "by_layer": {
                name: {"before": s.before, "after": s.after, "reduction": s.reduction}
                for name, s in self.by_layer.items()
            },
        }


@dataclass(frozen=True)
class SimplificationResult:
    features: dict[str, tuple[Feature, ...]]
    stats: SimplifyStats


# == Core algorithm ============================================================


def metres_to_degrees(metres: float, metres_per_degree: float = METRES_PER_DEGREE) -> float:
    return metres / metres_per_degree


def segment_distance(
    p: Sequence[float], a: Sequence[float], b: Sequence[float]
) -> float:
    """Distance from P to the closest point of segment A-B (not its extension)."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    len2 = dx * dx + dy * dy
    if len2 == 0:
        return math.hypot(p[0] - a[0], p[1] - a[1])
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / len2
    t = max(0.0, min(1.0, t))
    return math.hypot(a[0] + t * dx - p[0], a[1] + t * dy - p[1])


def _segment_distances(
    pts: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Vectorised segment_distance for every row of ``pts``."""
    d = b - a
    len2 = float(d @ d)
    if len2 == 0:
        return np.hypot(pts[:, 0] - a[0], pts[:, 1] - a[1])
    t = np.clip(((pts - a) @ d) / len2, 0.0, 1.0)
    closest = a + t[:, None] * d
    return np.hypot(closest[:, 0] - pts[:, 0], closest[:, 1] - pts[:, 1])


def douglas_peucker(points: Sequence[Sequence[float]], epsilon: float) -> Line:
    """Simplify a coordinate sequence; ``epsilon`` is in coordinate units.

    Uses an explicit stack of (start, end) spans instead of recursion, so very
    long rings cannot exhaust the interpreter stack. Keeping the split vertex of
    every span that exceeds ``epsilon`` gives the same output as the recursive
    left/right concatenation.
    """
    line = tuple((float(p[0]), float(p[1])) for p in points)
    n = len(line)
    if n <= 2:
        return line

    arr = np.asarray(line, dtype=np.float64)
    keep = np.zeros(n, dtype=bool)
    keep[0] = keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue
        dists = _segment_distances(arr[start + 1 : end], arr[start], arr[end])
        # argmax returns the first maximum, matching a strict ">" scan
        offset = int(np.argmax(dists))
        if dists[offset] > epsilon:
            idx = start + 1 + offset
            keep[idx] = True
            stack.append((idx, end))
            stack.append((start, idx))

    return tuple(line[i] for i in np.flatnonzero(keep))


def _geos_simplify(points: Line, epsilon: float) -> Line:
    simplified = ShapelyLineString(points).simplify(epsilon, preserve_topology=False)
    coords = tuple((float(x), float(y)) for x, y, *_ in simplified.coords)
    if len(coords) < 2:
        raise ValueError(f"GEOS returned {len(coords)} coordinates")
    return coords


# == Geometry level ============================================================


class Simplifier:
    """Applies Douglas-Peucker to every line and ring of a geometry."""

    def __init__(self, epsilon: float, accelerated: bool = True) -> None:
        self.epsilon = epsilon
        self.accelerated = accelerated

    def line(self, points: Line) -> Line:
        if len(points) <= 2:
            return tuple(points)
        if self.accelerated:
            try:
                return _geos_simplify(points, self.epsilon)
            except Exception as e:
                logger.debug("GEOS simplify failed, using fallback: %s", e)
        return douglas_peucker(points, self.epsilon)

    def ring(self, ring: Line) -> Line:
        simplified = self.line(ring)
        if len(simplified) < MIN_RING_POINTS:
            return ring
        return simplified

    def rings(self, rings: Rings) -> Rings:
        return tuple(self.ring(r) for r in rings)

    def geometry(self, geometry: Geometry | None) -> Geometry | None:
        """New geometry with lines/rings simplified; other kinds returned as-is."""
        if isinstance(geometry, LineString):
            return LineString(self.line(geometry.coordinates))
        if isinstance(geometry, MultiLineString):
            return MultiLineString(tuple(self.line(ln) for ln in geometry.coordinates))
        if isinstance(geometry, Polygon):
            return Polygon(self.rings(geometry.coordinates))
        if isinstance(geometry, MultiPolygon):
            return MultiPolygon(tuple(self.rings(p) for p in geometry.coordinates))
        if isinstance(geometry, GeometryCollection):
            return GeometryCollection(tuple(self.geometry(g) for g in geometry.geometries))
        return geometry


# == Feature Set level =========================================================


def simplify_feature_set(
    feature_set: Mapping[str, Sequence[Feature]],
    tolerance_m: float = DEFAULT_TOLERANCE_M,
    *,
    metres_per_degree: float = METRES_PER_DEGREE,
    accelerated: bool = True,
    layers: Sequence[str] = SIMPLIFIABLE_LAYERS,
) -> SimplificationResult:
    """Simplify the line/polygon layers of a Feature Set.

    Layers not listed in ``layers`` pass through unchanged. Every simplified
    feature gets ``_simplify_before``, ``_simplify_after`` and
    ``_simplify_reduction`` properties. The input is never mutated.
    """
    if tolerance_m < 0:
        raise ValueError(f"Tolerance must be non-negative, got {tolerance_m}")

    simplifier = Simplifier(metres_to_degrees(tolerance_m, metres_per_degree), accelerated)
    result: dict[str, tuple[Feature, ...]] = {}
    by_layer: dict[str, LayerStats] = {}
    total_before = total_after = 0

    for layer, features in feature_set.items():
        if layer not in layers:
            result[layer] = tuple(features)
            continue

        layer_before = layer_after = 0
        out: list[Feature] = []
        for feature in features:
            before = count_vertices(feature.geometry)
            geometry = simplifier.geometry(feature.geometry)
            after = count_vertices(geometry)
            layer_before += before
            layer_after += after
            out.append(
                feature.with_geometry(geometry).with_properties(
                    _simplify_reduction=reduction_percent(before, after),
                    _simplify_before=before,
                    _simplify_after=after,
                )
            )

        result[layer] = tuple(out)
        by_layer[layer] = LayerStats(layer_before, layer_after)
        total_before += layer_before
        total_after += layer_after
        logger.debug("Simplified %s: %d -> %d vertices", layer, layer_before, layer_after)

    stats = SimplifyStats(total_before, total_after, by_layer)
    logger.info(
        "Simplification at %.2fm: %d -> %d vertices (%d%%)",
        tolerance_m,
        stats.before,
        stats.after,
        stats.total_reduction,
    )
    return SimplificationResult(result, stats)
