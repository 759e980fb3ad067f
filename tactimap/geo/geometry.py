"""Geometry variants parsed from GeoJSON.

Coordinates are stored in GeoJSON convention as ``(x, y)`` = ``(lng, lat)``
tuples. Extra ordinates (altitude) are dropped on parse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Union

logger = logging.getLogger(__name__)

Coord = tuple[float, float]
Line = tuple[Coord, ...]
Rings = tuple[Line, ...]


@dataclass(frozen=True)
class Point:
    kind: ClassVar[str] = "Point"
    coordinates: Coord

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": list(self.coordinates)}


@dataclass(frozen=True)
class MultiPoint:
    kind: ClassVar[str] = "MultiPoint"
    coordinates: Line

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": _line_out(self.coordinates)}


@dataclass(frozen=True)
class LineString:
    kind: ClassVar[str] = "LineString"
    coordinates: Line

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": _line_out(self.coordinates)}


@dataclass(frozen=True)
class MultiLineString:
    kind: ClassVar[str] = "MultiLineString"
    coordinates: Rings

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": [_line_out(ln) for ln in self.coordinates]}


@dataclass(frozen=True)
class Polygon:
    """Rings: first is the outer boundary, the rest are holes."""

    kind: ClassVar[str] = "Polygon"
    coordinates: Rings

    @property
    def exterior(self) -> Line:
        return self.coordinates[0] if self.coordinates else ()

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": [_line_out(r) for r in self.coordinates]}


@dataclass(frozen=True)
class MultiPolygon:
    kind: ClassVar[str] = "MultiPolygon"
    coordinates: tuple[Rings, ...]

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "coordinates": [[_line_out(r) for r in poly] for poly in self.coordinates],
        }


@dataclass(frozen=True)
class GeometryCollection:
    kind: ClassVar[str] = "GeometryCollection"
    geometries: tuple["Geometry", ...]

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "geometries": [g.to_geojson() for g in self.geometries]}


@dataclass(frozen=True)
class UnsupportedGeometry:
    """A geometry type we don't know how to draw. Carried through, never rendered."""

    kind: str
    raw: tuple[tuple[str, Any], ...] = ()

    def to_geojson(self) -> dict[str, Any]:
        return dict(self.raw) or {"type": self.kind}


Geometry = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
    UnsupportedGeometry,
]


def _array(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"expected a coordinate array, got {type(value).__name__}")
    return value


def _coord(c: Any) -> Coord:
    c = _array(c)
    return (float(c[0]), float(c[1]))


def _line(seq: Any) -> Line:
    return tuple(_coord(c) for c in _array(seq))


def _rings(seq: Any) -> Rings:
    return tuple(_line(r) for r in _array(seq))


def _line_out(line: Line) -> list[list[float]]:
    return [[x, y] for x, y in line]


def geometry_from_geojson(obj: Any) -> Geometry | None:
    """Parse a GeoJSON geometry object.

    Returns None for absent or malformed input so callers can treat the
    feature as having zero vertices.
    """
    if not isinstance(obj, dict):
        return None
    kind = obj.get("type")
    if not isinstance(kind, str):
        return None

    try:
        if kind == "GeometryCollection":
            members = []
            for member in obj.get("geometries") or []:
                geom = geometry_from_geojson(member)
                if geom is not None:
                    members.append(geom)
            return GeometryCollection(tuple(members))

        if kind not in _PARSERS:
            return UnsupportedGeometry(kind, tuple(sorted(obj.items())))

        coords = obj.get("coordinates")
        if coords is None:
            return None
        return _PARSERS[kind](coords)
    except (TypeError, ValueError, IndexError, KeyError) as e:
        logger.debug("Malformed %s geometry dropped: %s", kind, e)
        return None


_PARSERS = {
    "Point": lambda c: Point(_coord(c)),
    "MultiPoint": lambda c: MultiPoint(_line(c)),
    "LineString": lambda c: LineString(_line(c)),
    "MultiLineString": lambda c: MultiLineString(_rings(c)),
    "Polygon": lambda c: Polygon(_rings(c)),
    "MultiPolygon": lambda c: MultiPolygon(tuple(_rings(p) for p in _array(c))),
}
