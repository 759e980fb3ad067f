"""GeoJSON FeatureCollection loading and structural validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from tactimap.errors import InvalidFeatureCollectionError
from tactimap.geo.features import Feature
from tactimap.geo.visitor import count_vertices

logger = logging.getLogger(__name__)


def load_feature_collection(source: dict[str, Any] | str | Path) -> tuple[Feature, ...]:
    """Validate a FeatureCollection and parse it into features.

    ``source`` may be an already-decoded dict, a JSON string, or a path to a
    ``.geojson``/``.json`` file. Every structural problem is collected before
    raising, so the error lists all offending indices at once.
    """
    data = _decode(source)

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        got = data.get("type") if isinstance(data, dict) else type(data).__name__
        raise InvalidFeatureCollectionError(
            [f"Expected a GeoJSON FeatureCollection, got: {got}"]
        )

    raw_features = data.get("features")
    if not isinstance(raw_features, list):
        raise InvalidFeatureCollectionError(["FeatureCollection.features must be an array."])

    invalid: list[str] = []
    for i, f in enumerate(raw_features):
        if not isinstance(f, dict) or f.get("type") != "Feature":
            invalid.append(f"Index {i}: not a Feature")
        elif not isinstance(f.get("geometry"), dict) or not f["geometry"].get("type"):
            invalid.append(f"Index {i}: missing geometry")
        elif not isinstance(f.get("properties"), dict):
            invalid.append(f"Index {i}: missing properties")

    if invalid:
        raise InvalidFeatureCollectionError(invalid)

    features = tuple(Feature.from_geojson(f) for f in raw_features)
    logger.debug("Loaded %d features", len(features))
    return features


def _decode(source: dict[str, Any] | str | Path) -> Any:
    if isinstance(source, dict):
        return source
    try:
        if isinstance(source, Path):
            with open(source, "r", encoding="utf-8") as f:
                return json.load(f)
        return json.loads(source)
    except json.JSONDecodeError as e:
        raise InvalidFeatureCollectionError([f"Not valid JSON: {e}"]) from e


def summarise(features: tuple[Feature, ...]) -> dict[str, Any]:
    """Feature and vertex counts, overall and per source ``layer`` property."""
    by_layer: dict[str, dict[str, int]] = {}
    total_vertices = 0

    for f in features:
        layer = f.properties.get("layer") or "unknown"
        entry = by_layer.setdefault(layer, {"count": 0, "vertices": 0})
        verts = count_vertices(f.geometry)
        entry["count"] += 1
        entry["vertices"] += verts
        total_vertices += verts

    return {
        "total": len(features),
        "total_vertices": total_vertices,
        "by_layer": by_layer,
    }
