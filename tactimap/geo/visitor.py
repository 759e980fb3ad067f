"""Coordinate traversal over any geometry variant. No engine imports."""

from __future__ import annotations

from typing import Callable, Iterable

from tactimap.geo.features import Feature
from tactimap.geo.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

CoordVisitor = Callable[[float, float], None]


def visit_coords(geometry: Geometry | None, fn: CoordVisitor) -> None:
    """Call ``fn(x, y)`` once per coordinate, depth-first, in structure order.

    Missing or unsupported geometry visits nothing.
    """
    if geometry is None:
        return
    if isinstance(geometry, Point):
        fn(*geometry.coordinates)
    elif isinstance(geometry, (MultiPoint, LineString)):
        for x, y in geometry.coordinates:
            fn(x, y)
    elif isinstance(geometry, (Polygon, MultiLineString)):
        for ring in geometry.coordinates:
            for x, y in ring:
                fn(x, y)
    elif isinstance(geometry, MultiPolygon):
        for poly in geometry.coordinates:
            for ring in poly:
                for x, y in ring:
                    fn(x, y)
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geometries:
            visit_coords(member, fn)


def collect_coords(geometry: Geometry | None) -> list[tuple[float, float]]:
    out: list[tuple[float, float]] = []
    visit_coords(geometry, lambda x, y: out.append((x, y)))
    return out


def count_vertices(geometry: Geometry | None) -> int:
    count = 0

    def _tick(x: float, y: float) -> None:
        nonlocal count
        count += 1

    visit_coords(geometry, _tick)
    return count


def coords_bounds(features: Iterable[Feature]) -> tuple[float, float, float, float] | None:
    """(min_x, min_y, max_x, max_y) over every coordinate, or None when there are none."""
    bounds = [float("inf"), float("inf"), float("-inf"), float("-inf")]

    def _grow(x: float, y: float) -> None:
        if x < bounds[0]:
            bounds[0] = x
        if y < bounds[1]:
            bounds[1] = y
        if x > bounds[2]:
            bounds[2] = x
        if y > bounds[3]:
            bounds[3] = y

    for f in features:
        visit_coords(f.geometry, _grow)

    if bounds[0] == float("inf"):
        return None
    return (bounds[0], bounds[1], bounds[2], bounds[3])


def centroid(geometry: Geometry | None) -> tuple[float, float] | None:
    """Mean of all visited coordinates."""
    pts = collect_coords(geometry)
    if not pts:
        return None
    n = len(pts)
    return (sum(p[0] for p in pts) / n, sum(p[1] for p in pts) / n)
