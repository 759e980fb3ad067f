"""Error taxonomy for the pipeline."""

from __future__ import annotations


class TactiMapError(ValueError):
    """Base for failures a caller is expected to surface, not crash on."""


class InvalidFeatureCollectionError(TactiMapError):
    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid features found:\n" + "\n".join(problems))


class NothingToRenderError(TactiMapError):
    """The feature set produced no drawable primitives."""


class NoBoundingBoxError(NothingToRenderError):
    """No coordinates to derive a projection from."""
