"""POST /api/simplify: load, classify and simplify a FeatureCollection."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from tactimap.config import Settings
from tactimap.dependencies import get_settings
from tactimap.engine.config import PipelineConfig
from tactimap.engine.pipeline import Pipeline
from tactimap.errors import TactiMapError
from tactimap.geo.features import feature_set_to_geojson
from tactimap.models.requests import SimplifyRequest
from tactimap.models.responses import SimplifyResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/simplify", response_model=SimplifyResponse)
async def simplify(
    req: SimplifyRequest, settings: Settings = Depends(get_settings)
) -> SimplifyResponse:
    config = PipelineConfig.from_settings(settings, tolerance_m=req.tolerance_m)
    pipeline = Pipeline(config)

    try:
        features = pipeline.load(req.feature_collection)
        result = pipeline.simplify(pipeline.filter(features))
    except TactiMapError as e:
        logger.info("Simplify rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    return SimplifyResponse(
        feature_collection=feature_set_to_geojson(result.features),
        stats=result.stats.to_dict(),
        tolerance_m=config.tolerance_m,
    )
