"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from tactimap.engine.pipeline import Stage
from tactimap.engine.styler import get_style_table
from tactimap.models.responses import HealthResponse, StyleModel

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version="0.1.0", stages=len(Stage))


@router.get("/styles", response_model=dict[str, StyleModel])
async def styles() -> dict[str, StyleModel]:
    return {k: StyleModel(**v.to_dict()) for k, v in get_style_table().items()}
