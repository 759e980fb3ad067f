"""Tests for the render_map command line."""

import pytest

from render_map import build_parser, config_from_args, main
from tactimap.config import Settings
from tactimap.engine.config import LayoutPolicy


def test_defaults_come_from_settings():
    custom = Settings(default_tolerance_m=7.5, page_margin=12.0, page_width=420.0, page_height=297.0)
    args = build_parser(custom).parse_args(["campus.geojson"])

    assert args.tolerance == 7.5
    config = config_from_args(args, custom)
    assert config.tolerance_m == 7.5
    assert config.page.width == 420.0
    assert config.page.margins.left == 12.0
    assert config.metres_per_degree == custom.metres_per_degree


def test_flags_override_settings():
    custom = Settings(default_tolerance_m=7.5)
    args = build_parser(custom).parse_args(
        ["campus.geojson", "-t", "3", "--layout", "margin", "--margins", "20", "10", "20", "10", "--no-legend", "--no-accel"]
    )
    config = config_from_args(args, custom)

    assert config.tolerance_m == 3.0
    assert config.layout is LayoutPolicy.MARGIN_RESERVED
    assert config.page.margins.top == 20.0
    assert config.page.margins.right == 10.0
    assert config.legend is False
    assert config.accelerated is False


def test_oversized_margins_rejected():
    args = build_parser().parse_args(["campus.geojson", "--margins", "200"])
    with pytest.raises(ValueError):
        config_from_args(args)


def test_main_writes_svg(campus_path, tmp_path, capsys):
    main([str(campus_path), "-o", str(tmp_path)])

    written = list(tmp_path.glob("tactile-map-*.svg"))
    assert len(written) == 1
    out = capsys.readouterr().out
    assert "[render]" in out
    assert "Saved:" in out


def test_main_exits_on_failed_stage(tmp_path, capsys):
    empty = tmp_path / "empty.geojson"
    empty.write_text('{"type": "FeatureCollection", "features": []}', encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(empty), "-o", str(tmp_path)])

    assert exc.value.code == 2
    assert "ERROR in render" in capsys.readouterr().out
    assert not list(tmp_path.glob("*.svg"))
