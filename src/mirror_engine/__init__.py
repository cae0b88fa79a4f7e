"""Public API for the mirror tile rules engine."""

from mirror_engine.challenges import Challenge, builtin_challenges
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    Aligned,
    AreaConfig,
    BoundingBox,
    Face,
    LayoutFailure,
    LayoutSuccess,
    NoAlignment,
    PackingArea,
    RelativePlacement,
    TilePlacement,
    TileType,
    Tolerances,
    ValidationVerdict,
)
from mirror_engine.engine import MirrorEngine
from mirror_engine.validator import validate

__all__ = [
    "Aligned",
    "AreaConfig",
    "BoundingBox",
    "Challenge",
    "DEFAULT_TOLERANCES",
    "Face",
    "LayoutFailure",
    "LayoutSuccess",
    "MirrorEngine",
    "NoAlignment",
    "PackingArea",
    "RelativePlacement",
    "TilePlacement",
    "TileType",
    "Tolerances",
    "ValidationVerdict",
    "builtin_challenges",
    "validate",
]
