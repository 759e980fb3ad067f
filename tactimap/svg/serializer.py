"""Write a Drawing as SVG markup with the ProBlind header comment."""

from __future__ import annotations

import datetime as dt
from xml.sax.saxutils import escape, quoteattr

from tactimap.svg.primitives import (
    Circle,
    Drawing,
    Element,
    Group,
    Legend,
    Path,
    PolygonShape,
    Text,
)

SVG_NS = "http://www.w3.org/2000/svg"
PROBLIND_VERSION = "ProBlind_Standard_v4"
PIPELINE_TAG = "tactimap"
FONT_FAMILY = "Arial, sans-serif"
CLIP_ID = "content-clip"


def fmt(value: float) -> str:
    """Number with at most 3 decimals and no trailing zeros."""
    s = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def _points(points) -> str:
    return " ".join(f"{fmt(x)},{fmt(y)}" for x, y in points)


def _path_d(points) -> str:
    return " ".join(
        f"{'M' if i == 0 else 'L'}{fmt(x)} {fmt(y)}" for i, (x, y) in enumerate(points)
    )


def _dash(dash) -> str:
    return " ".join(fmt(d) for d in dash)


def _tag(tag: str, attrs: dict[str, object], indent: int, body: str | None = None) -> str:
    pad = "  " * indent
    attr_str = " ".join(f"{k}={quoteattr(str(v))}" for k, v in attrs.items() if v is not None)
    if body is None:
        return f"{pad}<{tag} {attr_str} />"
    return f"{pad}<{tag} {attr_str}>{escape(body)}</{tag}>"


def problind_header(generated: str, width: float = 297.0, height: float = 210.0) -> str:
    return "\n".join([
        "<!--",
        "  ============================================================",
        f"  {PROBLIND_VERSION}",
        "  ============================================================",
        "  Map Type:     Building Footprints + Pedestrian Network",
        f"  Format:       {fmt(width)}mm x {fmt(height)}mm, 1:1 emboss scale",
        f"  Generated:    {generated}",
        f"  Pipeline:     {PIPELINE_TAG}",
        "  ============================================================",
        "  TACTILE STANDARD:",
        "  Layer             | Stroke   | Dash        | Treatment",
        "  ==================|==========|=============|==================",
        "  Building boundary | 0.8mm    | solid       | High-relief solid",
        "  Pedestrian path   | 0.8mm    | 3mm/3mm gap | Raised dashed line",
        "  Building entrance | 0.5mm    | solid       | 2mm filled circle",
        "  Street grid       | 0.3mm    | solid       | Low-relief thin",
        "  ============================================================",
        "  COORDINATE SYSTEM: WGS84 -> linear SVG projection",
        "  Print at 100% scale - do NOT scale to fit page.",
        "  ============================================================",
        "-->",
    ])


def _element(el: Element, indent: int) -> list[str]:
    if isinstance(el, Circle):
        return [_tag("circle", {
            "cx": fmt(el.cx),
            "cy": fmt(el.cy),
            "r": fmt(el.r),
            "fill": el.fill,
            "stroke": el.stroke,
            "stroke-width": fmt(el.stroke_width),
            "data-name": el.name,
        }, indent)]

    if isinstance(el, Path):
        return [_tag("path", {
            "d": _path_d(el.points),
            "fill": "none",
            "stroke": el.stroke,
            "stroke-width": fmt(el.stroke_width),
            "stroke-linecap": "round",
            "stroke-linejoin": "round",
            "stroke-dasharray": _dash(el.dash_array) if el.dash_array else None,
            "data-name": el.name,
        }, indent)]

    if isinstance(el, PolygonShape):
        return [_tag("polygon", {
            "points": _points(el.points),
            "fill": el.fill,
            "stroke": el.stroke,
            "stroke-width": fmt(el.stroke_width),
            "stroke-linejoin": "round",
            "data-name": el.name,
        }, indent)]

    if isinstance(el, Text):
        x, y = fmt(el.x), fmt(el.y)
        return [_tag("text", {
            "x": x,
            "y": y,
            "transform": f"rotate({fmt(el.rotation)},{x},{y})" if el.rotation else None,
            "text-anchor": el.anchor,
            "font-family": FONT_FAMILY,
            "font-size": fmt(el.font_size),
            "fill": el.fill,
            "dy": fmt(el.dy) if el.dy else None,
        }, indent, body=el.text)]

    if isinstance(el, Group):
        pad = "  " * indent
        attrs = f" data-name={quoteattr(el.name)}" if el.name else ""
        if not el.children:
            return [f"{pad}<g{attrs} />"]
        lines = [f"{pad}<g{attrs}>"]
        for child in el.children:
            lines.extend(_element(child, indent + 1))
        lines.append(f"{pad}</g>")
        return lines

    return []


def _legend(legend: Legend, indent: int) -> list[str]:
    pad = "  " * indent
    lines = [f'{pad}<g id="legend" transform="translate({fmt(legend.x)}, {fmt(legend.y)})">']
    inner = indent + 1
    lines.append(_tag("rect", {
        "x": "0", "y": "0",
        "width": fmt(legend.width), "height": fmt(legend.height),
        "fill": "#ffffff", "fill-opacity": "0.92",
        "stroke": "#cccccc", "stroke-width": "0.3", "rx": "1",
    }, inner))
    lines.append(_tag("text", {
        "x": "4", "y": "6",
        "font-family": FONT_FAMILY, "font-size": "2.5",
        "font-weight": "bold", "fill": "#222222",
    }, inner, body="Legend"))

    for i, item in enumerate(legend.items):
        y = 11 + i * 8
        if item.marker:
            lines.append(_tag("circle", {
                "cx": "10", "cy": fmt(y + 0.5), "r": "1.5", "fill": item.color,
            }, inner))
        else:
            lines.append(_tag("line", {
                "x1": "4", "y1": fmt(y + 0.5), "x2": "18", "y2": fmt(y + 0.5),
                "stroke": item.color, "stroke-width": fmt(item.width),
                "stroke-dasharray": _dash(item.dash_array) if item.dash_array else None,
                "stroke-linecap": "round",
            }, inner))
        lines.append(_tag("text", {
            "x": "22", "y": fmt(y + 1.5),
            "font-family": FONT_FAMILY, "font-size": "2.8", "fill": "#333333",
        }, inner, body=item.label))

    lines.append(f"{pad}</g>")
    return lines


def serialize_drawing(
    drawing: Drawing,
    generated: dt.date | None = None,
    header: bool = True,
) -> str:
    """Generate SVG markup for a Drawing, layers in stacking order."""
    w, h = fmt(drawing.width), fmt(drawing.height)
    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    if header:
        lines.append(problind_header((generated or dt.date.today()).isoformat(), drawing.width, drawing.height))
    lines.append(
        f'<svg xmlns="{SVG_NS}" viewBox="0 0 {w} {h}" width="{w}mm" height="{h}mm"'
        f' role="img" data-tactile-pipeline="{PIPELINE_TAG}">'
    )

    if drawing.clip_rect is not None:
        x, y, cw, ch = drawing.clip_rect
        lines.append("  <defs>")
        lines.append(f'    <clipPath id="{CLIP_ID}">')
        lines.append(_tag("rect", {
            "x": fmt(x), "y": fmt(y), "width": fmt(cw), "height": fmt(ch),
        }, 3))
        lines.append("    </clipPath>")
        lines.append("  </defs>")

    lines.append(f'  <rect width="{w}" height="{h}" fill="#ffffff" />')

    for layer in drawing.layers:
        clip = f' clip-path="url(#{CLIP_ID})"' if layer.clipped and drawing.clip_rect else ""
        open_tag = f"  <g id={quoteattr(layer.id)} aria-label={quoteattr(layer.label)}{clip}"
        if not layer.elements:
            lines.append(open_tag + " />")
            continue
        lines.append(open_tag + ">")
        for el in layer.elements:
            lines.extend(_element(el, 2))
        lines.append("  </g>")

    if drawing.legend is not None:
        lines.extend(_legend(drawing.legend, 1))

    lines.append("</svg>")
    return "\n".join(lines)
