"""POST /api/render: full pipeline, FeatureCollection in, SVG out."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException

from tactimap.config import Settings
from tactimap.dependencies import get_settings
from tactimap.engine.config import Margins, Page, PipelineConfig
from tactimap.engine.layers import summarise_layers
from tactimap.engine.pipeline import Pipeline
from tactimap.models.requests import RenderRequest
from tactimap.models.responses import RenderResponse

router = APIRouter()


def _config(req: RenderRequest, settings: Settings) -> PipelineConfig:
    try:
        page = Page(
            req.page_width or settings.page_width,
            req.page_height or settings.page_height,
            Margins.parse(req.margins if req.margins is not None else settings.page_margin),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return PipelineConfig.from_settings(
        settings,
        tolerance_m=req.tolerance_m,
        page=page,
        layout=req.layout,
        legend=req.legend,
    )


@router.post("/render", response_model=RenderResponse)
async def render(req: RenderRequest, settings: Settings = Depends(get_settings)) -> RenderResponse:
    start = time.perf_counter()

    pipeline = Pipeline(_config(req, settings))
    result = pipeline.run(req.feature_collection)

    if not result.ok:
        detail = f"{result.failed_stage}: {result.errors.get(result.failed_stage, '')}"
        raise HTTPException(status_code=422, detail=detail)

    elapsed = (time.perf_counter() - start) * 1000

    return RenderResponse(
        svg=result.to_svg(),
        stats=result.simplified.stats.to_dict(),
        layer_counts=summarise_layers(result.styled),
        primitives_rendered=result.drawing.primitive_count,
        processing_time_ms=round(elapsed, 1),
        stage_timings_ms=result.timings_ms,
    )
