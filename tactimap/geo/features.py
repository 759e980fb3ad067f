"""Feature, StyleRecord and Feature Set types.

A Feature Set is a plain ``dict`` from layer name to a tuple of features.
Layer order and feature order are preserved end to end: they drive draw
order and label de-duplication.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from tactimap.geo.geometry import Geometry, geometry_from_geojson

# Layer names
BUILDINGS = "buildings"
PATHS = "paths"
MAJOR_STREETS = "majorStreets"
STREETS = "streets"
ENTRANCES = "entrances"
STREET_LABELS = "streetLabels"

ALL_LAYERS = (BUILDINGS, PATHS, MAJOR_STREETS, STREETS, ENTRANCES, STREET_LABELS)

# Property key carrying the attached style when exported back to GeoJSON
STYLE_PROPERTY = "_tactile_spec"


@dataclass(frozen=True)
class StyleRecord:
    """Presentation attributes for one feature category (mm units)."""

    category: str
    stroke_width: float | None = None
    stroke_color: str | None = None
    fill_color: str | None = None
    dash_array: tuple[float, ...] | None = None
    radius: float | None = None
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.category,
            "strokeWidth": self.stroke_width,
            "strokeColor": self.stroke_color,
            "fillColor": self.fill_color,
            "dashArray": list(self.dash_array) if self.dash_array else None,
            "radius": self.radius,
            "label": self.description,
        }


@dataclass(frozen=True)
class Feature:
    geometry: Geometry | None
    properties: Mapping[str, Any] = field(default_factory=dict)
    style: StyleRecord | None = None

    def __post_init__(self) -> None:
        # read-only copy; callers never share a properties dict with a feature
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def name(self) -> str | None:
        value = self.properties.get("name")
        return str(value) if value else None

    def with_geometry(self, geometry: Geometry | None) -> "Feature":
        return replace(self, geometry=geometry)

    def with_properties(self, **updates: Any) -> "Feature":
        return replace(self, properties={**self.properties, **updates})

    def with_style(self, style: StyleRecord | None) -> "Feature":
        return replace(self, style=style)

    @classmethod
    def from_geojson(cls, obj: Mapping[str, Any]) -> "Feature":
        return cls(
            geometry=geometry_from_geojson(obj.get("geometry")),
            properties=dict(obj.get("properties") or {}),
        )

    def to_geojson(self) -> dict[str, Any]:
        props = dict(self.properties)
        if self.style is not None:
            props[STYLE_PROPERTY] = self.style.to_dict()
        return {
            "type": "Feature",
            "properties": props,
            "geometry": self.geometry.to_geojson() if self.geometry is not None else None,
        }


FeatureSet = dict[str, tuple[Feature, ...]]


def feature_set_to_geojson(feature_set: Mapping[str, tuple[Feature, ...]]) -> dict[str, Any]:
    """Flatten a Feature Set into one FeatureCollection, tagging each feature's layer."""
    features = []
    for layer, items in feature_set.items():
        for f in items:
            out = f.to_geojson()
            out["properties"].setdefault("_layer", layer)
            features.append(out)
    return {"type": "FeatureCollection", "features": features}
