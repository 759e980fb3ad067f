"""Persist a Drawing as a dated SVG file."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from pathlib import Path

from tactimap.svg.primitives import Drawing
from tactimap.svg.serializer import serialize_drawing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    filename: str
    path: Path
    size: int


def export_filename(today: dt.date) -> str:
    return f"tactile-map-{today.isoformat()}.svg"


def export_svg(drawing: Drawing, directory: Path, today: dt.date | None = None) -> ExportResult:
    """Serialize ``drawing`` into ``directory`` as tactile-map-YYYY-MM-DD.svg."""
    today = today or dt.date.today()
    svg = serialize_drawing(drawing, generated=today)

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(svg, encoding="utf-8")

    size = len(svg.encode("utf-8"))
    logger.info("Exported %s (%d bytes)", path.name, size)
    return ExportResult(filename=path.name, path=path, size=size)
