"""Pipeline configuration: page geometry, layout policy and simplification knobs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace

from tactimap.engine.spatial_constants import (
    DEFAULT_LABEL_INSET,
    DEFAULT_MARGIN,
    DEFAULT_PAGE_HEIGHT,
    DEFAULT_PAGE_WIDTH,
    DEFAULT_TOLERANCE_M,
    METRES_PER_DEGREE,
)


class LayoutPolicy(str, enum.Enum):
    # Every rendered layer drives the bounding box; margins are padding only.
    FULL_EXTENT = "full"
    # Only the primary layer drives the bounding box; margins hold labels.
    MARGIN_RESERVED = "margin"


@dataclass(frozen=True)
class Margins:
    top: float = DEFAULT_MARGIN
    right: float = DEFAULT_MARGIN
    bottom: float = DEFAULT_MARGIN
    left: float = DEFAULT_MARGIN

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)

    @classmethod
    def parse(cls, value: "float | list[float] | tuple[float, ...] | Margins") -> "Margins":
        """Accept a single number or a CSS-style [top, right, bottom, left] sequence."""
        if isinstance(value, Margins):
            return value
        if isinstance(value, (int, float)):
            return cls.uniform(float(value))
        values = [float(v) for v in value]
        if len(values) != 4:
            raise ValueError(f"Margins need 1 or 4 values, got {len(values)}")
        return cls(*values)


@dataclass(frozen=True)
class Page:
    """Physical page in mm. The content rectangle must keep a positive area."""

    width: float = DEFAULT_PAGE_WIDTH
    height: float = DEFAULT_PAGE_HEIGHT
    margins: Margins = field(default_factory=Margins)

    def __post_init__(self) -> None:
        if self.usable_width <= 0 or self.usable_height <= 0:
            raise ValueError(
                f"Margins {self.margins} leave no content area on a "
                f"{self.width}x{self.height} page"
            )

    @property
    def usable_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def usable_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom


@dataclass(frozen=True)
class PipelineConfig:
    """Knobs for one pipeline run."""

    # Douglas-Peucker tolerance in metres
    tolerance_m: float = DEFAULT_TOLERANCE_M
    metres_per_degree: float = METRES_PER_DEGREE
    # Try the GEOS simplifier first; the pure implementation is the fallback
    accelerated: bool = True

    page: Page = field(default_factory=Page)
    layout: LayoutPolicy = LayoutPolicy.FULL_EXTENT
    legend: bool = True
    label_inset: float = DEFAULT_LABEL_INSET

    @classmethod
    def from_settings(cls, settings, **overrides) -> "PipelineConfig":
        base = cls(
            tolerance_m=settings.default_tolerance_m,
            metres_per_degree=settings.metres_per_degree,
            page=Page(
                settings.page_width,
                settings.page_height,
                Margins.uniform(settings.page_margin),
            ),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(base, **overrides)
