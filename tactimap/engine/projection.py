"""Linear projection of source coordinates onto a fixed physical page.

A single isotropic scale fits the bounding box into the page's content
rectangle (page minus margins); the result is centred on both axes and the
vertical axis is flipped (north up, page y down). Assumes a small, locally
planar extent: no geodesic correction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from tactimap.engine.config import LayoutPolicy, Page
from tactimap.engine.spatial_constants import (
    COORD_PRECISION,
    DEFAULT_LABEL_INSET,
    DEGENERATE_RANGE,
)
from tactimap.errors import NoBoundingBoxError
from tactimap.geo.features import BUILDINGS, Feature
from tactimap.geo.visitor import centroid, coords_bounds

logger = logging.getLogger(__name__)

MARGIN_SIDES = ("top", "bottom", "left", "right")


@dataclass(frozen=True)
class BBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def padded(self, epsilon: float = DEGENERATE_RANGE) -> "BBox":
        """Widen any zero-extent axis to ``epsilon``, centred on the original value."""
        min_x, max_x, min_y, max_y = self.min_x, self.max_x, self.min_y, self.max_y
        if self.width == 0:
            min_x, max_x = min_x - epsilon / 2, max_x + epsilon / 2
        if self.height == 0:
            min_y, max_y = min_y - epsilon / 2, max_y + epsilon / 2
        return BBox(min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class ContentRect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class Projection:
    min_x: float
    max_y: float
    scale: float
    offset_x: float
    offset_y: float
    content: ContentRect

    def project(self, x: float, y: float) -> tuple[float, float]:
        px = self.offset_x + (x - self.min_x) * self.scale
        py = self.offset_y + (self.max_y - y) * self.scale
        return (round(px, COORD_PRECISION), round(py, COORD_PRECISION))

    def project_line(self, coords: Iterable[Sequence[float]]) -> list[tuple[float, float]]:
        return [self.project(c[0], c[1]) for c in coords]


def compute_bbox(features: Iterable[Feature]) -> BBox | None:
    bounds = coords_bounds(features)
    if bounds is None:
        return None
    return BBox(*bounds)


def build_projection(bbox: BBox, page: Page) -> Projection:
    """Fit ``bbox`` into the page's content rectangle, preserving aspect ratio."""
    box = bbox.padded()
    usable_w = page.usable_width
    usable_h = page.usable_height

    scale = min(usable_w / box.width, usable_h / box.height)

    rendered_w = box.width * scale
    rendered_h = box.height * scale
    offset_x = page.margins.left + (usable_w - rendered_w) / 2
    offset_y = page.margins.top + (usable_h - rendered_h) / 2

    content = ContentRect(
        left=page.margins.left,
        top=page.margins.top,
        right=page.width - page.margins.right,
        bottom=page.height - page.margins.bottom,
    )
    return Projection(box.min_x, box.max_y, scale, offset_x, offset_y, content)


def extent_features(
    feature_set: Mapping[str, Sequence[Feature]],
    layout: LayoutPolicy,
    layers: Sequence[str],
) -> list[Feature]:
    """Features whose coordinates drive the bounding box under ``layout``."""
    if layout is LayoutPolicy.MARGIN_RESERVED:
        return list(feature_set.get(BUILDINGS, ()))
    out: list[Feature] = []
    for layer in layers:
        out.extend(feature_set.get(layer, ()))
    return out


def projection_for(
    feature_set: Mapping[str, Sequence[Feature]],
    page: Page,
    layout: LayoutPolicy,
    layers: Sequence[str],
) -> Projection:
    bbox = compute_bbox(extent_features(feature_set, layout, layers))
    if bbox is None:
        raise NoBoundingBoxError("nothing to render: no coordinates to derive a bounding box from")
    proj = build_projection(bbox, page)
    logger.debug(
        "Projection (%s): bbox=%s scale=%.3f offset=(%.3f, %.3f)",
        layout.value,
        bbox,
        proj.scale,
        proj.offset_x,
        proj.offset_y,
    )
    return proj


# == Margin labels =============================================================


@dataclass(frozen=True)
class MarginLabel:
    name: str
    side: str
    x: float
    y: float


def _clamp(value: float, lo: float, hi: float) -> float:
    if lo > hi:
        return (lo + hi) / 2
    return max(lo, min(hi, value))


def place_margin_label(
    feature: Feature,
    projection: Projection,
    page: Page,
    inset: float = DEFAULT_LABEL_INSET,
) -> MarginLabel | None:
    """Snap a label's projected centroid onto the margin strip named by its ``side``.

    The axis across the strip is set to the strip's midpoint; the axis along it
    is clamped to the content span, ``inset`` from either end. Returns None when
    the feature has no name, no usable side tag, or no coordinates.
    """
    name = feature.name
    side = str(feature.properties.get("side") or "").strip().lower()
    if not name or side not in MARGIN_SIDES:
        return None

    c = centroid(feature.geometry)
    if c is None:
        return None
    px, py = projection.project(*c)
    rect = projection.content

    if side in ("top", "bottom"):
        y = rect.top / 2 if side == "top" else (rect.bottom + page.height) / 2
        x = _clamp(px, rect.left + inset, rect.right - inset)
    else:
        x = rect.left / 2 if side == "left" else (rect.right + page.width) / 2
        y = _clamp(py, rect.top + inset, rect.bottom - inset)

    return MarginLabel(name, side, round(x, COORD_PRECISION), round(y, COORD_PRECISION))
