"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tactimap.engine.config import LayoutPolicy


class SimplifyRequest(BaseModel):
    feature_collection: dict[str, Any] = Field(..., description="GeoJSON FeatureCollection")
    tolerance_m: float | None = Field(
        default=None, ge=0, description="Douglas-Peucker tolerance in metres"
    )


class RenderRequest(BaseModel):
    feature_collection: dict[str, Any] = Field(..., description="GeoJSON FeatureCollection")
    tolerance_m: float | None = Field(
        default=None, ge=0, description="Douglas-Peucker tolerance in metres"
    )
    layout: LayoutPolicy = Field(
        default=LayoutPolicy.FULL_EXTENT,
        description="'full' fits every layer; 'margin' fits buildings and labels the margins",
    )
    page_width: float | None = Field(default=None, gt=0, description="Page width in mm")
    page_height: float | None = Field(default=None, gt=0, description="Page height in mm")
    margins: float | list[float] | None = Field(
        default=None,
        description="Uniform margin, or [top, right, bottom, left] in mm",
    )
    legend: bool = Field(default=True, description="Draw the legend overlay")
