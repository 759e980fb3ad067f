"""Tests for bounding-box projection and margin label placement."""

import pytest

from tests.conftest import line, make_feature, point

from tactimap.engine.config import LayoutPolicy, Margins, Page
from tactimap.engine.projection import (
    BBox,
    build_projection,
    compute_bbox,
    place_margin_label,
    projection_for,
)
from tactimap.errors import NoBoundingBoxError, NothingToRenderError


def test_scale_and_centring():
    proj = build_projection(BBox(0, 0, 2, 1), Page())
    assert proj.scale == pytest.approx(138.5)
    assert proj.offset_x == pytest.approx(10.0)
    assert proj.offset_y == pytest.approx(35.75)
    assert proj.project(0, 1) == (10.0, 35.75)
    assert proj.project(2, 0) == (287.0, 174.25)


def test_projected_points_stay_in_content_rect():
    page = Page(200, 100, Margins(5, 15, 25, 35))
    proj = build_projection(BBox(-73.58, 45.49, -73.57, 45.50), page)
    for x, y in [(-73.58, 45.49), (-73.57, 45.50), (-73.575, 45.495)]:
        px, py = proj.project(x, y)
        assert 35 - 1e-6 <= px <= 185 + 1e-6
        assert 5 - 1e-6 <= py <= 75 + 1e-6


def test_north_is_up():
    proj = build_projection(BBox(0, 0, 1, 1), Page())
    _, north = proj.project(0.5, 1)
    _, south = proj.project(0.5, 0)
    assert north < south


def test_coordinates_rounded_to_three_decimals():
    proj = build_projection(BBox(0, 0, 3, 7), Page())
    px, py = proj.project(1, 1)
    assert px == round(px, 3)
    assert py == round(py, 3)


def test_single_point_maps_to_page_centre():
    bbox = compute_bbox([make_feature(point(-73.578, 45.496))])
    proj = build_projection(bbox, Page())
    px, py = proj.project(-73.578, 45.496)
    assert px == pytest.approx(148.5)
    assert py == pytest.approx(105.0)


def test_degenerate_axis_is_padded():
    bbox = BBox(0, 5, 2, 5).padded()
    assert bbox.height == pytest.approx(0.001)
    assert bbox.min_y == pytest.approx(4.9995)
    assert bbox.width == 2


def test_no_coordinates_raises():
    fs = {"buildings": (make_feature({"type": "Nope"}),)}
    with pytest.raises(NoBoundingBoxError):
        projection_for(fs, Page(), LayoutPolicy.FULL_EXTENT, ("buildings",))
    assert issubclass(NoBoundingBoxError, NothingToRenderError)


def test_margin_layout_uses_primary_layer_only():
    fs = {
        "buildings": (make_feature(line((0, 0), (1, 1))),),
        "streets": (make_feature(line((-10, -10), (10, 10))),),
    }
    full = projection_for(fs, Page(), LayoutPolicy.FULL_EXTENT, ("buildings", "streets"))
    margin = projection_for(fs, Page(), LayoutPolicy.MARGIN_RESERVED, ("buildings", "streets"))
    assert margin.scale > full.scale
    assert margin.project(0, 1)[0] == pytest.approx(10 + (277 - 190) / 2)


def test_margin_layout_without_buildings_raises():
    fs = {"streets": (make_feature(line((0, 0), (1, 1))),)}
    with pytest.raises(NoBoundingBoxError):
        projection_for(fs, Page(), LayoutPolicy.MARGIN_RESERVED, ("streets",))


class TestMarginLabels:
    page = Page(297, 210, Margins.uniform(30))
    proj = build_projection(BBox(0, 0, 1, 1), page)

    def test_top_label_centred_in_strip_and_clamped(self):
        far_left = make_feature(point(-50, 0.5), name="West Rd", side="top")
        label = place_margin_label(far_left, self.proj, self.page)
        assert label.side == "top"
        assert label.y == 15.0
        assert label.x == 32.0

        far_right = make_feature(point(50, 0.5), name="East Rd", side="top")
        assert place_margin_label(far_right, self.proj, self.page).x == 265.0

    def test_bottom_label(self):
        f = make_feature(point(0.5, 0.5), name="South Rd", side="bottom")
        label = place_margin_label(f, self.proj, self.page)
        assert label.y == 195.0
        assert label.x == 148.5

    def test_left_and_right_labels(self):
        left = place_margin_label(
            make_feature(point(0.5, 0.5), name="A", side="LEFT"), self.proj, self.page
        )
        right = place_margin_label(
            make_feature(point(0.5, 50), name="B", side="right"), self.proj, self.page
        )
        assert (left.x, left.y) == (15.0, 105.0)
        assert right.x == 282.0
        assert right.y == 32.0

    def test_missing_name_or_side_is_skipped(self):
        assert place_margin_label(make_feature(point(0, 0), name="A"), self.proj, self.page) is None
        assert place_margin_label(make_feature(point(0, 0), side="top"), self.proj, self.page) is None
        assert (
            place_margin_label(make_feature(point(0, 0), name="A", side="middle"), self.proj, self.page)
            is None
        )
