"""Drawing primitives produced by the renderer, in page (mm) coordinates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str
    stroke: str
    stroke_width: float
    name: str | None = None


@dataclass(frozen=True)
class Path:
    """Open polyline."""

    points: tuple[tuple[float, float], ...]
    stroke: str
    stroke_width: float
    dash_array: tuple[float, ...] | None = None
    name: str | None = None


@dataclass(frozen=True)
class PolygonShape:
    """Closed outer ring; holes are not drawn."""

    points: tuple[tuple[float, float], ...]
    fill: str
    stroke: str
    stroke_width: float
    name: str | None = None


@dataclass(frozen=True)
class Group:
    children: tuple["Element", ...] = ()
    name: str | None = None


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    rotation: float = 0.0
    anchor: str = "middle"
    font_size: float = 2.2
    fill: str = "#444444"
    dy: float = 0.0


Element = Union[Circle, Path, PolygonShape, Group, Text]


@dataclass(frozen=True)
class DrawingLayer:
    id: str
    label: str
    elements: tuple[Element, ...] = ()
    clipped: bool = False


@dataclass(frozen=True)
class LegendItem:
    label: str
    color: str
    width: float
    dash_array: tuple[float, ...] | None = None
    marker: bool = False


@dataclass(frozen=True)
class Legend:
    x: float
    y: float
    width: float
    height: float
    items: tuple[LegendItem, ...] = ()


@dataclass(frozen=True)
class Drawing:
    width: float
    height: float
    layers: tuple[DrawingLayer, ...] = ()
    legend: Legend | None = None
    # (x, y, width, height) the clipped layers are confined to
    clip_rect: tuple[float, float, float, float] | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def layer(self, layer_id: str) -> DrawingLayer | None:
        for lyr in self.layers:
            if lyr.id == layer_id:
                return lyr
        return None

    @property
    def primitive_count(self) -> int:
        return sum(count_primitives(e) for lyr in self.layers for e in lyr.elements)


def count_primitives(element: Element) -> int:
    """Leaf shapes and text runs; empty groups count zero."""
    if isinstance(element, Group):
        return sum(count_primitives(c) for c in element.children)
    return 1
