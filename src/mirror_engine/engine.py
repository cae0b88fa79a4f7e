"""Engine facade binding an area and a tolerance table to every operation."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from mirror_engine import collision, connectivity, coordinates, packing, reflection, shapes, snapping, validator
from mirror_engine.challenges import Challenge
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    AreaConfig,
    BoundingBox,
    Edge,
    LayoutResult,
    PackingArea,
    RelativePlacement,
    SnapResult,
    SolutionReport,
    TilePlacement,
    TileType,
    Tolerances,
    ValidationIssue,
    ValidationTrace,
    ValidationVerdict,
)
from mirror_engine.distance import min_distance


class MirrorEngine:
    """Stateless rules engine for one play area.

    The area and tolerances are fixed at construction; every method is a
    pure function of its arguments, so one instance can be shared freely.
    """

    def __init__(self, area: Optional[AreaConfig] = None, tolerances: Optional[Tolerances] = None):
        self.area = area or AreaConfig()
        self.tolerances = tolerances or DEFAULT_TOLERANCES

    # -- shape --------------------------------------------------------------

    def vertices(self, tile: TilePlacement) -> np.ndarray:
        return shapes.vertices(tile, self.area)

    def edges(self, tile: TilePlacement) -> List[Edge]:
        return shapes.edges(tile, self.area)

    def bounding_box(self, tile: TilePlacement) -> BoundingBox:
        return shapes.bounding_box(tile, self.area)

    # -- pairwise -----------------------------------------------------------

    def overlap(self, a: TilePlacement, b: TilePlacement) -> bool:
        return collision.overlap(a, b, self.area, self.tolerances)

    def penetration_depth(self, a: TilePlacement, b: TilePlacement) -> float:
        return collision.penetration_depth(a, b, self.area)

    def touch(self, a: TilePlacement, b: TilePlacement) -> bool:
        return connectivity.touch(a, b, self.area, self.tolerances)

    def min_distance(self, a: TilePlacement, b: TilePlacement) -> float:
        return min_distance(a, b, self.area)

    # -- mirror -------------------------------------------------------------

    def reflect(self, tile: TilePlacement) -> TilePlacement:
        return reflection.reflect(tile, self.area)

    def touches_mirror(self, tile: TilePlacement) -> bool:
        return reflection.touches_mirror(tile, self.area, self.tolerances)

    def touching_mirror_x(self, y: float, rotation: float = 0.0, tile_type: TileType = TileType.A) -> float:
        return reflection.touching_mirror_x(y, rotation, tile_type, self.area)

    # -- arrangement --------------------------------------------------------

    def connected(self, tiles: Sequence[TilePlacement]) -> bool:
        return connectivity.connected(tiles, self.area, self.tolerances)

    def validate(self, tiles: Sequence[TilePlacement]) -> ValidationVerdict:
        return validator.validate(tiles, self.area, self.tolerances)

    def validate_with_trace(
        self, tiles: Sequence[TilePlacement]
    ) -> Tuple[ValidationVerdict, ValidationTrace]:
        return validator.validate_with_trace(tiles, self.area, self.tolerances)

    def validate_placement(
        self, tile: TilePlacement, others: Sequence[TilePlacement]
    ) -> List[ValidationIssue]:
        return validator.validate_placement(tile, others, self.area, self.tolerances)

    def check_solution(self, tiles: Sequence[TilePlacement], challenge: Challenge) -> SolutionReport:
        return validator.validate_solution(
            tiles, challenge.pieces, self.area, self.tolerances, pieces_needed=challenge.pieces_needed
        )

    # -- interaction --------------------------------------------------------

    def snap(
        self,
        moving: TilePlacement,
        others: Sequence[TilePlacement],
        radius: Optional[float] = None,
    ) -> SnapResult:
        return snapping.snap(moving, others, self.area, radius, self.tolerances)

    def layout(
        self,
        n: int,
        rect: PackingArea,
        types: Sequence[TileType],
        rng: Optional[np.random.Generator] = None,
        **budgets,
    ) -> LayoutResult:
        return packing.layout(n, rect, types, self.area, rng=rng, tol=self.tolerances, **budgets)

    # -- serialization boundary ---------------------------------------------

    def to_absolute(self, rel: RelativePlacement) -> TilePlacement:
        return coordinates.to_absolute(rel, self.area)

    def to_relative(self, tile: TilePlacement) -> RelativePlacement:
        return coordinates.to_relative(tile, self.area)

    def describe(self) -> Dict[str, object]:
        """Configuration snapshot, handy for logs and reports."""
        return {
            "area": {
                "width": self.area.width,
                "height": self.area.height,
                "mirror_line_x": self.area.mirror_line_x,
                "tile_size": self.area.tile_size,
            },
            "tolerances": self.tolerances.to_dict(),
        }
