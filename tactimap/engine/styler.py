"""Tactile style table and style attachment.

Values follow ProBlind Standard v4 for embossed maps; all measurements are mm
in the page's viewBox units.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

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

logger = logging.getLogger(__name__)

STYLE_TABLE: dict[str, StyleRecord] = {
    "building": StyleRecord(
        category="building",
        stroke_width=0.8,
        stroke_color="#1a1a1a",
        fill_color="none",
        description="High-relief solid boundary",
    ),
    "path": StyleRecord(
        category="path",
        stroke_width=0.8,
        stroke_color="#256fba",
        fill_color="none",
        dash_array=(3.0, 3.0),
        description="Raised dashed path",
    ),
    "entrance": StyleRecord(
        category="entrance",
        stroke_width=0.5,
        stroke_color="#e05c5c",
        fill_color="#e05c5c",
        radius=1.0,  # 2mm diameter filled circle
        description="Raised circle POI",
    ),
    "majorStreet": StyleRecord(
        category="majorStreet",
        stroke_width=1.2,
        stroke_color="#555555",
        fill_color="none",
        description="Major street",
    ),
    "street": StyleRecord(
        category="street",
        stroke_width=0.3,
        stroke_color="#cccccc",
        fill_color="none",
        description="Minor street",
    ),
    "streetLabel": StyleRecord(
        category="streetLabel",
        fill_color="#444444",
        description="Street name",
    ),
}

LAYER_CATEGORIES: dict[str, str] = {
    BUILDINGS: "building",
    PATHS: "path",
    ENTRANCES: "entrance",
    MAJOR_STREETS: "majorStreet",
    STREETS: "street",
    STREET_LABELS: "streetLabel",
}


def get_style_table() -> dict[str, StyleRecord]:
    return dict(STYLE_TABLE)


def apply_styles(
    feature_set: Mapping[str, Sequence[Feature]],
    table: Mapping[str, StyleRecord] | None = None,
) -> dict[str, tuple[Feature, ...]]:
    """Attach each layer's style record to its features (new Feature Set)."""
    table = table if table is not None else STYLE_TABLE
    styled: dict[str, tuple[Feature, ...]] = {}

    for layer, features in feature_set.items():
        style = table.get(LAYER_CATEGORIES.get(layer, ""))
        if style is None:
            logger.warning("No tactile style for layer %r; left unstyled", layer)
            styled[layer] = tuple(features)
            continue
        styled[layer] = tuple(f.with_style(style) for f in features)

    return styled
