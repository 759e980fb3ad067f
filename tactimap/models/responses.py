"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages: int = 0


class LayerStatsModel(BaseModel):
    before: int = 0
    after: int = 0
    reduction: int = 0


class SimplifyStatsModel(BaseModel):
    before: int = 0
    after: int = 0
    total_reduction: int = 0
    by_layer: dict[str, LayerStatsModel] = Field(default_factory=dict)


class SimplifyResponse(BaseModel):
    feature_collection: dict[str, Any]
    stats: SimplifyStatsModel
    tolerance_m: float


class RenderResponse(BaseModel):
    svg: str
    stats: SimplifyStatsModel
    layer_counts: dict[str, int] = Field(default_factory=dict)
    primitives_rendered: int = 0
    processing_time_ms: float = 0.0
    stage_timings_ms: dict[str, float] = Field(default_factory=dict)


class StyleModel(BaseModel):
    type: str
    strokeWidth: float | None = None
    strokeColor: str | None = None
    fillColor: str | None = None
    dashArray: list[float] | None = None
    radius: float | None = None
    label: str = ""
