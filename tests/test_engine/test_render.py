"""Tests for the renderer: stacking, primitives, labels and legend."""

import pytest

from tests.conftest import SAMPLE_COLLECTION, line, make_feature, point, polygon

from tactimap.engine.config import LayoutPolicy, Margins, Page
from tactimap.engine.layers import filter_layers
from tactimap.engine.render import (
    build_legend,
    normalize_angle,
    render_drawing,
    render_line_labels,
)
from tactimap.engine.projection import BBox, build_projection
from tactimap.engine.styler import apply_styles
from tactimap.errors import NothingToRenderError
from tactimap.geo.loader import load_feature_collection
from tactimap.svg.primitives import Circle, Group, Path, PolygonShape


def _styled(collection=SAMPLE_COLLECTION):
    return apply_styles(filter_layers(load_feature_collection(collection)))


def test_layers_in_stacking_order():
    drawing = render_drawing(_styled())
    assert [lyr.id for lyr in drawing.layers] == [
        "background",
        "major-streets",
        "midground",
        "foreground",
        "poi",
        "street-labels",
    ]
    assert drawing.metadata == {"layout": "full"}
    assert drawing.clip_rect is None


def test_primitive_kinds_follow_geometry():
    drawing = render_drawing(_styled())
    building = drawing.layer("foreground").elements[0]
    entrance = drawing.layer("poi").elements[0]
    path = drawing.layer("midground").elements[0]

    assert isinstance(building, PolygonShape)
    assert building.name == "Hall"
    assert building.stroke_width == 0.8
    assert isinstance(entrance, Circle)
    assert entrance.r == 1.0
    assert isinstance(path, Path)
    assert path.dash_array == (3.0, 3.0)


def test_primitive_count():
    drawing = render_drawing(_styled())
    # polygon, entrance, path, major, minor, one line label
    assert drawing.primitive_count == 6


def test_unstyled_feature_uses_defaults():
    fs = {"buildings": (make_feature(polygon((0, 0), (1, 0), (1, 1), (0, 0))),)}
    shape = render_drawing(fs, legend=False).layer("foreground").elements[0]
    assert shape.stroke == "#1a1a1a"
    assert shape.stroke_width == 2.2
    assert shape.fill == "none"


def test_multi_geometry_renders_as_group():
    fs = {
        "streets": (
            make_feature(
                {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[1, 0], [0, 1]], [[5, 5]]]}
            ),
        )
    }
    group = render_drawing(fs).layer("background").elements[0]
    assert isinstance(group, Group)
    assert len(group.children) == 2


def test_degenerate_shapes_are_skipped():
    fs = {
        "buildings": (
            make_feature({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}),
            make_feature(polygon((0, 0), (1, 0), (1, 1), (0, 0))),
        ),
        "streets": (make_feature(line((0, 0))),),
    }
    drawing = render_drawing(fs)
    assert len(drawing.layer("foreground").elements) == 1
    assert drawing.layer("background").elements == ()


def test_empty_primary_layer_is_nothing_to_render():
    with pytest.raises(NothingToRenderError):
        render_drawing({"buildings": ()})


def test_only_unsupported_geometry_is_nothing_to_render():
    fs = {"buildings": (make_feature({"type": "Curve", "coordinates": []}),), "streets": ()}
    with pytest.raises(NothingToRenderError):
        render_drawing(fs)


def test_line_label_angle_and_dedup():
    proj = build_projection(BBox(0, 0, 1, 1), Page())
    features = [
        make_feature(line((0, 0), (1, 1)), name="Main St"),
        make_feature(line((1, 1), (0, 0)), name="Main St"),
        make_feature(line((1, 1), (0, 0)), name="Other St"),
        make_feature(point(0, 0), name="Dot"),
    ]
    labels = render_line_labels(features, proj)
    assert [t.text for t in labels] == ["Main St", "Other St"]
    assert labels[0].rotation == -45.0
    assert labels[1].rotation == -45.0
    assert (labels[0].x, labels[0].y) == (148.5, 105.0)


def test_normalize_angle_range():
    assert normalize_angle(135) == -45
    assert normalize_angle(-135) == 45
    assert normalize_angle(90) == 90
    assert normalize_angle(-90) == 90
    assert normalize_angle(180) == 0


def test_margin_layout_labels_and_clipping():
    page = Page(297, 210, Margins.uniform(30))
    drawing = render_drawing(_styled(), page=page, layout=LayoutPolicy.MARGIN_RESERVED)

    assert drawing.clip_rect == (30, 30, 237, 150)
    assert drawing.layer("foreground").clipped is False
    assert drawing.layer("background").clipped is True
    assert drawing.layer("street-labels").clipped is True

    margin = drawing.layer("margin-labels")
    assert margin.clipped is False
    by_text = {t.text: t for t in margin.elements}
    assert by_text["Main St"].y == 15.0
    assert by_text["Main St"].rotation == 0
    assert by_text["Side St"].x == 15.0
    assert by_text["Side St"].rotation == -90


def test_label_without_side_is_excluded():
    collection = {
        "type": "FeatureCollection",
        "features": SAMPLE_COLLECTION["features"]
        + [
            {
                "type": "Feature",
                "properties": {"name": "Nowhere Ave", "layer": "street_labels"},
                "geometry": point(0.3, 0.3),
            }
        ],
    }
    drawing = render_drawing(_styled(collection), layout=LayoutPolicy.MARGIN_RESERVED)
    texts = [t.text for t in drawing.layer("margin-labels").elements]
    assert sorted(texts) == ["Main St", "Side St"]


def test_legend_lists_drawn_layers():
    fs = _styled()
    drawing = render_drawing(fs)
    legend = drawing.legend
    labels = [item.label for item in legend.items]
    assert labels == [
        "Minor street",
        "Major street",
        "Raised dashed path",
        "High-relief solid boundary",
        "Raised circle POI",
    ]
    assert legend.items[-1].marker is True
    assert legend.height == 48
    assert legend.y == 210 - 10 - 48
    assert build_legend(fs, [], Page()) is None


def test_legend_can_be_disabled():
    assert render_drawing(_styled(), legend=False).legend is None
