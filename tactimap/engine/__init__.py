"""TactiMap geometry pipeline: simplification, projection and rendering."""

from tactimap.engine.config import LayoutPolicy, Margins, Page, PipelineConfig
from tactimap.engine.pipeline import Pipeline, PipelineResult, Stage
from tactimap.engine.projection import Projection, build_projection, place_margin_label
from tactimap.engine.render import render_drawing
from tactimap.engine.simplify import douglas_peucker, simplify_feature_set

__all__ = [
    "LayoutPolicy",
    "Margins",
    "Page",
    "PipelineConfig",
    "Pipeline",
    "PipelineResult",
    "Stage",
    "Projection",
    "build_projection",
    "place_margin_label",
    "render_drawing",
    "douglas_peucker",
    "simplify_feature_set",
]
