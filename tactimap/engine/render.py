"""Render a styled Feature Set into an ordered Drawing.

Layer stacking is fixed, back to front: minor streets, major streets, paths,
buildings, entrances, labels, legend. Embossed points and lines must sit above
area fills, so callers cannot reorder it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Mapping, Sequence

from tactimap.engine.config import LayoutPolicy, Page
from tactimap.engine.projection import Projection, place_margin_label, projection_for
from tactimap.engine.spatial_constants import DEFAULT_LABEL_INSET
from tactimap.errors import NothingToRenderError
from tactimap.geo.features import (
    BUILDINGS,
    ENTRANCES,
    MAJOR_STREETS,
    PATHS,
    STREET_LABELS,
    STREETS,
    Feature,
    StyleRecord,
)
from tactimap.geo.geometry import (
    Geometry,
    GeometryCollection,
    Line,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Rings,
)
from tactimap.svg.primitives import (
    Circle,
    Drawing,
    DrawingLayer,
    Element,
    Group,
    Legend,
    LegendItem,
    Path,
    PolygonShape,
    Text,
    count_primitives,
)

logger = logging.getLogger(__name__)

# (source layer, group id, aria label), back to front
STACKING: tuple[tuple[str, str, str], ...] = (
    (STREETS, "background", "Minor street grid"),
    (MAJOR_STREETS, "major-streets", "Major streets"),
    (PATHS, "midground", "Pedestrian paths"),
    (BUILDINGS, "foreground", "Building footprints"),
    (ENTRANCES, "poi", "Entrances"),
)
GEOMETRY_LAYERS = tuple(layer for layer, _, _ in STACKING)

# Defaults when a style record leaves a field empty
POINT_RADIUS = 2.0
POINT_COLOR = "#e05c5c"
POINT_STROKE_WIDTH = 0.5
LINE_COLOR = "#000000"
LINE_WIDTH = 0.5
POLYGON_STROKE = "#1a1a1a"
POLYGON_STROKE_WIDTH = 2.2

LINE_LABEL_FONT_SIZE = 2.2
LINE_LABEL_DY = -0.6
MARGIN_LABEL_FONT_SIZE = 2.8
LABEL_COLOR = "#444444"

LEGEND_WIDTH = 68.0
LEGEND_ROW = 8.0

_MARGIN_ROTATION = {"top": 0.0, "bottom": 0.0, "left": -90.0, "right": 90.0}


# == Per-geometry rendering ====================================================


def _or(value, default):
    return default if value is None else value


def render_point(coords: tuple[float, float], style: StyleRecord, proj: Projection) -> Circle:
    cx, cy = proj.project(*coords)
    return Circle(
        cx=cx,
        cy=cy,
        r=_or(style.radius, POINT_RADIUS),
        fill=_or(style.fill_color, POINT_COLOR),
        stroke=_or(style.stroke_color, POINT_COLOR),
        stroke_width=_or(style.stroke_width, POINT_STROKE_WIDTH),
    )


def render_line(coords: Line, style: StyleRecord, proj: Projection) -> Path | None:
    if not coords or len(coords) < 2:
        return None
    return Path(
        points=tuple(proj.project_line(coords)),
        stroke=_or(style.stroke_color, LINE_COLOR),
        stroke_width=_or(style.stroke_width, LINE_WIDTH),
        dash_array=style.dash_array or None,
    )


def render_polygon(rings: Rings, style: StyleRecord, proj: Projection) -> PolygonShape | None:
    if not rings:
        return None
    outer = rings[0]
    if not outer or len(outer) < 3:
        return None
    return PolygonShape(
        points=tuple(proj.project_line(outer)),
        fill=_or(style.fill_color, "none"),
        stroke=_or(style.stroke_color, POLYGON_STROKE),
        stroke_width=_or(style.stroke_width, POLYGON_STROKE_WIDTH),
    )


def _group(children: list[Element | None]) -> Group:
    return Group(tuple(c for c in children if c is not None))


def render_geometry(
    geometry: Geometry | None, style: StyleRecord, proj: Projection
) -> Element | None:
    """One element per geometry; None when there is nothing drawable."""
    if isinstance(geometry, Point):
        return render_point(geometry.coordinates, style, proj)
    if isinstance(geometry, LineString):
        return render_line(geometry.coordinates, style, proj)
    if isinstance(geometry, Polygon):
        return render_polygon(geometry.coordinates, style, proj)
    if isinstance(geometry, MultiPoint):
        return _group([render_point(c, style, proj) for c in geometry.coordinates])
    if isinstance(geometry, MultiLineString):
        return _group([render_line(ln, style, proj) for ln in geometry.coordinates])
    if isinstance(geometry, MultiPolygon):
        return _group([render_polygon(p, style, proj) for p in geometry.coordinates])
    if isinstance(geometry, GeometryCollection):
        return _group([render_geometry(g, style, proj) for g in geometry.geometries])
    # None or UnsupportedGeometry
    return None


def render_feature(feature: Feature, proj: Projection) -> Element | None:
    style = feature.style or StyleRecord(category="unstyled")
    element = render_geometry(feature.geometry, style, proj)
    if element is None or not feature.name:
        return element
    return replace(element, name=feature.name)


# == Labels ====================================================================


def normalize_angle(degrees: float) -> float:
    """Fold an angle into (-90, 90] so text never reads upside down."""
    while degrees > 90:
        degrees -= 180
    while degrees <= -90:
        degrees += 180
    return degrees


def _label_line(geometry: Geometry | None) -> Line | None:
    if isinstance(geometry, LineString):
        line = geometry.coordinates
    elif isinstance(geometry, MultiLineString):
        line = next((ln for ln in geometry.coordinates if len(ln) >= 2), ())
    else:
        return None
    return line if len(line) >= 2 else None


def render_line_labels(features: Sequence[Feature], proj: Projection) -> list[Text]:
    """Name labels along lines, first occurrence of each name wins."""
    seen: set[str] = set()
    labels: list[Text] = []
    for f in features:
        name = f.name
        if not name or name in seen:
            continue
        line = _label_line(f.geometry)
        if line is None:
            continue

        mid = len(line) // 2
        ax, ay = proj.project(*line[mid - 1])
        bx, by = proj.project(*line[mid])
        mx = round((ax + bx) / 2, 3)
        my = round((ay + by) / 2, 3)
        angle = normalize_angle(math.degrees(math.atan2(by - ay, bx - ax)))

        labels.append(
            Text(
                x=mx,
                y=my,
                text=name,
                rotation=round(angle, 3),
                font_size=LINE_LABEL_FONT_SIZE,
                fill=LABEL_COLOR,
                dy=LINE_LABEL_DY,
            )
        )
        seen.add(name)
    return labels


def render_margin_labels(
    features: Sequence[Feature], proj: Projection, page: Page, inset: float
) -> list[Text]:
    seen: set[str] = set()
    labels: list[Text] = []
    for f in features:
        placed = place_margin_label(f, proj, page, inset)
        if placed is None:
            logger.debug("Margin label skipped (no name or side): %s", dict(f.properties))
            continue
        if placed.name in seen:
            continue
        fill = f.style.fill_color if f.style and f.style.fill_color else LABEL_COLOR
        labels.append(
            Text(
                x=placed.x,
                y=placed.y,
                text=placed.name,
                rotation=_MARGIN_ROTATION[placed.side],
                font_size=MARGIN_LABEL_FONT_SIZE,
                fill=fill,
                dy=round(MARGIN_LABEL_FONT_SIZE * 0.35, 3),
            )
        )
        seen.add(placed.name)
    return labels


# == Legend ====================================================================


def build_legend(feature_set: Mapping[str, Sequence[Feature]], drawn: Sequence[str], page: Page) -> Legend | None:
    """One entry per drawn geometry layer, using that layer's style record."""
    items: list[LegendItem] = []
    for layer in drawn:
        style = next((f.style for f in feature_set.get(layer, ()) if f.style), None)
        if style is None:
            continue
        marker = style.radius is not None
        items.append(
            LegendItem(
                label=style.description or style.category,
                color=(style.fill_color if marker else style.stroke_color) or LINE_COLOR,
                width=_or(style.stroke_width, LINE_WIDTH),
                dash_array=style.dash_array,
                marker=marker,
            )
        )
    if not items:
        return None
    height = LEGEND_ROW * (len(items) + 1)
    return Legend(
        x=page.margins.left,
        y=page.height - page.margins.bottom - height,
        width=LEGEND_WIDTH,
        height=height,
        items=tuple(items),
    )


# == Entry point ===============================================================


def render_drawing(
    feature_set: Mapping[str, Sequence[Feature]],
    page: Page | None = None,
    layout: LayoutPolicy = LayoutPolicy.FULL_EXTENT,
    legend: bool = True,
    label_inset: float = DEFAULT_LABEL_INSET,
) -> Drawing:
    """Project and render every layer.

    Raises NothingToRenderError (or its NoBoundingBoxError subclass) when the
    feature set yields no drawable shapes.
    """
    page = page or Page()
    proj = projection_for(feature_set, page, layout, GEOMETRY_LAYERS)
    margin_mode = layout is LayoutPolicy.MARGIN_RESERVED

    layers: list[DrawingLayer] = []
    drawn: list[str] = []
    for source, group_id, label in STACKING:
        elements = []
        for f in feature_set.get(source, ()):
            el = render_feature(f, proj)
            if el is not None:
                elements.append(el)
        if any(count_primitives(e) for e in elements):
            drawn.append(source)
        layers.append(
            DrawingLayer(
                id=group_id,
                label=label,
                elements=tuple(elements),
                clipped=margin_mode and source != BUILDINGS,
            )
        )

    if not drawn:
        raise NothingToRenderError("nothing to render: no drawable features")

    layers.append(
        DrawingLayer(
            id="street-labels",
            label="Street names",
            elements=tuple(render_line_labels(feature_set.get(MAJOR_STREETS, ()), proj)),
            clipped=margin_mode,
        )
    )
    if margin_mode:
        layers.append(
            DrawingLayer(
                id="margin-labels",
                label="Margin street names",
                elements=tuple(
                    render_margin_labels(
                        feature_set.get(STREET_LABELS, ()), proj, page, label_inset
                    )
                ),
            )
        )

    rect = proj.content
    drawing = Drawing(
        width=page.width,
        height=page.height,
        layers=tuple(layers),
        legend=build_legend(feature_set, drawn, page) if legend else None,
        clip_rect=(rect.left, rect.top, rect.width, rect.height) if margin_mode else None,
        metadata={"layout": layout.value},
    )
    logger.info(
        "Rendered %d primitives across %d layers (%s layout)",
        drawing.primitive_count,
        len(drawn),
        layout.value,
    )
    return drawing
