"""Pipeline orchestrator. Runs the five stages in order with explicit data flow.

Each stage is a pure function of the previous stage's output. The orchestrator
only sequences them and keeps every stage's result as plain data in a
PipelineResult; nothing is shared between runs.
"""

from __future__ import annotations

import datetime as dt
import enum
import logging
import time
from collections.abc import Generator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from tactimap.engine.config import PipelineConfig
from tactimap.engine.layers import filter_layers
from tactimap.engine.render import render_drawing
from tactimap.engine.simplify import SimplificationResult, simplify_feature_set
from tactimap.engine.styler import apply_styles
from tactimap.geo.features import Feature
from tactimap.geo.loader import load_feature_collection
from tactimap.svg.primitives import Drawing
from tactimap.svg.serializer import serialize_drawing

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    LOAD = 1
    FILTER = 2
    SIMPLIFY = 3
    STYLE = 4
    RENDER = 5


@dataclass(frozen=True)
class PipelineResult:
    features: tuple[Feature, ...] | None = None
    filtered: dict[str, tuple[Feature, ...]] | None = None
    simplified: SimplificationResult | None = None
    styled: dict[str, tuple[Feature, ...]] | None = None
    drawing: Drawing | None = None
    timings_ms: dict[str, float] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors and self.drawing is not None

    @property
    def failed_stage(self) -> str | None:
        return next(iter(self.errors), None)

    def to_svg(self, generated: dt.date | None = None) -> str | None:
        if self.drawing is None:
            return None
        return serialize_drawing(self.drawing, generated=generated)


class Pipeline:
    """Load → filter → simplify → style → render."""

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()

    # -- stages ---------------------------------------------------------------

    def load(self, source: dict[str, Any] | str | Path) -> tuple[Feature, ...]:
        return load_feature_collection(source)

    def filter(self, features: Sequence[Feature]) -> dict[str, tuple[Feature, ...]]:
        return filter_layers(features)

    def simplify(self, feature_set: Mapping[str, Sequence[Feature]]) -> SimplificationResult:
        cfg = self.config
        return simplify_feature_set(
            feature_set,
            cfg.tolerance_m,
            metres_per_degree=cfg.metres_per_degree,
            accelerated=cfg.accelerated,
        )

    def style(self, feature_set: Mapping[str, Sequence[Feature]]) -> dict[str, tuple[Feature, ...]]:
        return apply_styles(feature_set)

    def render(self, feature_set: Mapping[str, Sequence[Feature]]) -> Drawing:
        cfg = self.config
        return render_drawing(
            feature_set,
            page=cfg.page,
            layout=cfg.layout,
            legend=cfg.legend,
            label_inset=cfg.label_inset,
        )

    # -- orchestration --------------------------------------------------------

    def run(self, source: dict[str, Any] | str | Path) -> PipelineResult:
        """Run every stage; a failing stage halts the rest and is recorded in ``errors``."""
        result = PipelineResult()
        for event in self.run_streaming(source):
            if event["status"] == "done":
                result = event["result"]
        return result

    def run_streaming(
        self, source: dict[str, Any] | str | Path
    ) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict before and after each stage.

        The final event has ``status == "done"`` and carries the PipelineResult.
        """
        start = time.perf_counter()
        steps = [
            (Stage.LOAD, "features", lambda _: self.load(source)),
            (Stage.FILTER, "filtered", self.filter),
            (Stage.SIMPLIFY, "simplified", self.simplify),
            (Stage.STYLE, "styled", lambda s: self.style(s.features)),
            (Stage.RENDER, "drawing", self.render),
        ]
        total = len(steps)
        outputs: dict[str, Any] = {}
        timings: dict[str, float] = {}
        errors: dict[str, str] = {}
        previous: Any = None

        for i, (stage, key, fn) in enumerate(steps):
            name = stage.name.lower()
            yield {
                "stage": name,
                "index": i,
                "total": total,
                "elapsed_ms": 0.0,
                "status": "running",
                "error": "",
            }

            t0 = time.perf_counter()
            status = "ok"
            error = ""
            try:
                previous = fn(previous)
                outputs[key] = previous
            except Exception as e:
                errors[name] = str(e)
                status = "error"
                error = str(e)
                logger.warning("Stage %s FAILED: %s", name, e)

            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
            timings[name] = elapsed_ms
            logger.debug("  %s completed in %.1fms", name, elapsed_ms)

            yield {
                "stage": name,
                "index": i,
                "total": total,
                "elapsed_ms": elapsed_ms,
                "status": status,
                "error": error,
            }
            if errors:
                break

        result = PipelineResult(timings_ms=timings, errors=errors, **outputs)
        logger.info(
            "Pipeline %s: %d/%d stages in %.0fms",
            "complete" if result.ok else "halted",
            len(outputs),
            total,
            (time.perf_counter() - start) * 1000,
        )
        yield {
            "stage": "done",
            "index": total,
            "total": total,
            "elapsed_ms": round((time.perf_counter() - start) * 1000, 1),
            "status": "done",
            "error": "",
            "result": result,
        }
