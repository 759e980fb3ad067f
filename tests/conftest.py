"""Shared test fixtures."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from tactimap.geo.features import Feature
from tactimap.geo.geometry import geometry_from_geojson

SAMPLE_PATH = Path(__file__).resolve().parent.parent / "samples" / "campus.geojson"


def make_feature(geometry: dict, **properties) -> Feature:
    return Feature(geometry=geometry_from_geojson(geometry), properties=properties)


def point(x: float, y: float) -> dict:
    return {"type": "Point", "coordinates": [x, y]}


def line(*coords) -> dict:
    return {"type": "LineString", "coordinates": [list(c) for c in coords]}


def polygon(*coords) -> dict:
    return {"type": "Polygon", "coordinates": [[list(c) for c in coords]]}


# A small campus: one building with an embedded entrance, one path,
# one major and one minor street, two margin labels and one stray feature.

BUILDING = {
    "type": "Feature",
    "properties": {
        "id": "b1",
        "name": "Hall",
        "layer": "footprints",
        "tag": "campus_structure",
        "entrances": [[0.5, 0.0]],
    },
    "geometry": polygon((0, 0), (1, 0), (1, 1), (0, 1), (0, 0)),
}

PATH = {
    "type": "Feature",
    "properties": {"name": "Tunnel", "layer": "thoroughfares", "type": "pedestrian_link"},
    "geometry": line((1, 1), (1.5, 1.5), (2, 1)),
}

MAJOR_STREET = {
    "type": "Feature",
    "properties": {"name": "Main St", "layer": "thoroughfares", "type": "major_street"},
    "geometry": line((0, 0), (1, 1)),
}

MINOR_STREET = {
    "type": "Feature",
    "properties": {"name": "Side St", "layer": "thoroughfares", "type": "street"},
    "geometry": line((0, 1), (2, 1)),
}

TOP_LABEL = {
    "type": "Feature",
    "properties": {"name": "Main St", "layer": "street_labels", "side": "top"},
    "geometry": point(0.5, 0.5),
}

LEFT_LABEL = {
    "type": "Feature",
    "properties": {"name": "Side St", "layer": "street_labels", "side": "Left"},
    "geometry": point(0.0, 0.5),
}

STRAY = {
    "type": "Feature",
    "properties": {"name": "Bench", "layer": "amenities"},
    "geometry": point(0.2, 0.2),
}

SAMPLE_COLLECTION = {
    "type": "FeatureCollection",
    "features": [BUILDING, PATH, MAJOR_STREET, MINOR_STREET, TOP_LABEL, LEFT_LABEL, STRAY],
}


@pytest.fixture
def sample_collection() -> dict:
    return copy.deepcopy(SAMPLE_COLLECTION)


@pytest.fixture
def campus_path() -> Path:
    return SAMPLE_PATH
