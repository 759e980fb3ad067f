"""Layer classification: split a flat feature list into named layer buckets."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from tactimap.geo.features import (
    ALL_LAYERS,
    BUILDINGS,
    ENTRANCES,
    MAJOR_STREETS,
    PATHS,
    STREET_LABELS,
    STREETS,
    Feature,
)
from tactimap.geo.geometry import Point

logger = logging.getLogger(__name__)

MAJOR_STREET_TYPES = frozenset({"major_street", "arterial", "primary", "secondary"})
MINOR_STREET_TYPES = frozenset({"street", "minor_street", "residential", "tertiary"})


def _embedded_entrances(building: Feature) -> list[Feature]:
    """Entrance points stored as an ``entrances`` coordinate array on a building."""
    props = building.properties
    coords_list = props.get("entrances")
    if not isinstance(coords_list, list):
        return []

    base_name = props.get("name") or "Building"
    parent = props.get("id") or props.get("name") or "unknown"
    out = []
    for idx, coords in enumerate(coords_list):
        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            continue
        try:
            point = Point((float(coords[0]), float(coords[1])))
        except (TypeError, ValueError):
            continue
        out.append(
            Feature(
                geometry=point,
                properties={
                    "name": f"{base_name} — Entrance {idx + 1}",
                    "layer": "entrances",
                    "parentBuilding": parent,
                },
            )
        )
    return out


def filter_layers(features: Iterable[Feature]) -> dict[str, tuple[Feature, ...]]:
    """Classify features by their ``layer``/``type``/``tag`` properties.

    Unrecognised features are dropped. Input order is kept within each layer.
    """
    buckets: dict[str, list[Feature]] = {name: [] for name in ALL_LAYERS}
    dropped = 0

    for f in features:
        p = f.properties
        layer = p.get("layer") or ""
        kind = p.get("type") or ""
        tag = p.get("tag") or ""
        is_point = isinstance(f.geometry, Point)

        if layer == "footprints" and tag == "campus_structure":
            buckets[BUILDINGS].append(f)
            buckets[ENTRANCES].extend(_embedded_entrances(f))
        elif layer == "entrances" and is_point:
            buckets[ENTRANCES].append(f)
        elif layer == "thoroughfares" and kind == "pedestrian_link":
            buckets[PATHS].append(f)
        elif layer == "thoroughfares" and kind in MAJOR_STREET_TYPES:
            buckets[MAJOR_STREETS].append(f)
        elif layer == "thoroughfares" and kind in MINOR_STREET_TYPES:
            buckets[STREETS].append(f)
        elif layer == "street_labels" and is_point:
            buckets[STREET_LABELS].append(f)
        else:
            dropped += 1

    if dropped:
        logger.debug("Layer filter dropped %d unclassified features", dropped)
    return {name: tuple(items) for name, items in buckets.items()}


def summarise_layers(feature_set: Mapping[str, Sequence[Feature]]) -> dict[str, int]:
    counts = {name: len(items) for name, items in feature_set.items()}
    counts["total"] = sum(counts.values())
    return counts
