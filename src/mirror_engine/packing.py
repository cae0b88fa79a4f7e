"""Initial layouts: place N tiles inside a rectangle without overlaps.

Strategies are tried in order until one succeeds:

1. incremental random placement, one tile at a time,
2. closed-form arrangements for one to four tiles,
3. full random retries of the whole layout.

Every strategy has a fixed attempt budget, so a call always terminates.
A layout is either complete or reported as a :class:`LayoutFailure`.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from mirror_engine.collision import overlap
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    AreaConfig,
    Face,
    LayoutFailure,
    LayoutResult,
    LayoutSuccess,
    PackingArea,
    TilePlacement,
    TileType,
    Tolerances,
)
from mirror_engine.shapes import bounding_box

logger = logging.getLogger(__name__)

SAMPLE_MARGIN = 50.0


class _Placer:
    """Shared state for one layout call."""

    def __init__(
        self,
        rect: PackingArea,
        types: List[TileType],
        area: AreaConfig,
        rng: np.random.Generator,
        tol: Tolerances,
    ):
        self.rect = rect
        self.types = types
        self.area = area
        self.rng = rng
        self.tol = tol

    def tile(self, index: int, x: float, y: float) -> TilePlacement:
        return TilePlacement(type=self.types[index], face=Face.FRONT, x=float(x), y=float(y))

    def fits(self, tile: TilePlacement, placed: Sequence[TilePlacement]) -> bool:
        if not self.rect.contains(bounding_box(tile, self.area)):
            return False
        return not any(overlap(tile, other, self.area, self.tol) for other in placed)

    def incremental(self, attempts: int) -> Union[List[TilePlacement], str]:
        placed: List[TilePlacement] = []
        n = len(self.types)
        span_x = self.rect.width - 2 * SAMPLE_MARGIN
        span_y = self.rect.height - 2 * SAMPLE_MARGIN
        for i in range(n):
            for _ in range(attempts):
                x = self.rect.x + SAMPLE_MARGIN + self.rng.random() * span_x
                y = self.rect.y + SAMPLE_MARGIN + self.rng.random() * span_y
                candidate = self.tile(i, x, y)
                if self.fits(candidate, placed):
                    placed.append(candidate)
                    break
            else:
                return f"Could not place tile {i + 1} of {n} after {attempts} attempts"
        return placed

    def random_retry(self, attempts: int, per_tile: int) -> Union[List[TilePlacement], str]:
        for _ in range(attempts):
            placed: List[TilePlacement] = []
            for i in range(len(self.types)):
                for _ in range(per_tile):
                    x = self.rect.x + self.rng.random() * self.rect.width
                    y = self.rect.y + self.rng.random() * self.rect.height
                    candidate = self.tile(i, x, y)
                    if self.fits(candidate, placed):
                        placed.append(candidate)
                        break
                else:
                    break
            if len(placed) == len(self.types):
                return placed
        return f"Failed to find valid random positioning after {attempts} attempts"

    # -- closed form -------------------------------------------------------

    def _footprint(self, index: int) -> Tuple[float, float, float, float]:
        """Offsets (dx, dy) from x/y to the box corner, and box (w, h)."""
        origin_tile = self.tile(index, 0.0, 0.0)
        box = bounding_box(origin_tile, self.area)
        return box.left, box.top, box.width, box.height

    def _at_box(self, index: int, left: float, top: float) -> TilePlacement:
        dx, dy, _, _ = self._footprint(index)
        return self.tile(index, left - dx, top - dy)

    def closed_form(self, spacing: float) -> Union[List[TilePlacement], str]:
        n = len(self.types)
        if n > 4:
            return "Closed-form layouts only cover 1 to 4 tiles"
        w = max(self._footprint(i)[2] for i in range(n))
        h = max(self._footprint(i)[3] for i in range(n))
        r = self.rect
        cx, cy = r.center
        boxes: List[Tuple[float, float]] = []

        if n == 1:
            boxes.append((cx - w / 2, cy - h / 2))
        elif n == 2:
            if r.width >= 2 * w + spacing:
                left = cx - (2 * w + spacing) / 2
                boxes += [(left, cy - h / 2), (left + w + spacing, cy - h / 2)]
            elif r.height >= 2 * h + spacing:
                top = cy - (2 * h + spacing) / 2
                boxes += [(cx - w / 2, top), (cx - w / 2, top + h + spacing)]
            else:
                return "Not enough space for 2 tiles"
        elif n == 3:
            if r.width >= 2 * w + spacing and r.height >= 2 * h + spacing:
                base = r.bottom - h
                boxes += [
                    (cx - w - spacing / 2, base),
                    (cx + spacing / 2, base),
                    (cx - w / 2, r.y),
                ]
            elif r.width >= 3 * w + 2 * spacing:
                left = cx - (3 * w + 2 * spacing) / 2
                boxes += [(left + k * (w + spacing), cy - h / 2) for k in range(3)]
            else:
                return "Not enough space for 3 tiles"
        else:
            if r.width < 2 * w + spacing or r.height < 2 * h + spacing:
                return "Not enough space for a 2x2 grid"
            left = cx - (2 * w + spacing) / 2
            top = cy - (2 * h + spacing) / 2
            for row in range(2):
                for col in range(2):
                    boxes.append((left + col * (w + spacing), top + row * (h + spacing)))

        placed = [self._at_box(i, left, top) for i, (left, top) in enumerate(boxes)]
        for i, tile in enumerate(placed):
            if not self.fits(tile, placed[:i]):
                return "Closed-form layout resulted in overlaps"
        return placed


def layout(
    n: int,
    rect: PackingArea,
    types: Sequence[Union[TileType, str]],
    area: AreaConfig,
    rng: Optional[np.random.Generator] = None,
    incremental_attempts: int = 200,
    retry_attempts: int = 1000,
    per_tile_attempts: int = 100,
    spacing: float = 20.0,
    tol: Optional[Tolerances] = None,
) -> LayoutResult:
    """Place *n* tiles of the given *types* inside *rect*.

    Args:
        n: Number of tiles.
        rect: Target rectangle in world coordinates.
        types: One tile type per tile.
        area: Geometry configuration (tile size).
        rng: Random generator; a fresh unseeded one when omitted.
        incremental_attempts: Samples per tile for the incremental strategy.
        retry_attempts: Whole-layout attempts for the random retry strategy.
        per_tile_attempts: Samples per tile within one random retry.
        spacing: Gap between boxes in closed-form layouts.

    Returns:
        :class:`LayoutSuccess` with one placement per tile, or
        :class:`LayoutFailure` with a reason. Never a partial layout.
    """
    if n <= 0:
        return LayoutFailure("Number of tiles must be greater than 0")
    if len(types) != n:
        return LayoutFailure("Tile types must match the number of tiles")
    if rect.width <= 0 or rect.height <= 0:
        return LayoutFailure(f"Invalid area: {rect.width:g}x{rect.height:g}")

    placer = _Placer(
        rect,
        [TileType(t) for t in types],
        area,
        rng if rng is not None else np.random.default_rng(),
        tol or DEFAULT_TOLERANCES,
    )

    outcome = placer.incremental(incremental_attempts)
    if isinstance(outcome, list):
        return LayoutSuccess(outcome, "incremental")
    logger.debug("Incremental layout failed: %s", outcome)

    if n <= 4:
        outcome = placer.closed_form(spacing)
        if isinstance(outcome, list):
            return LayoutSuccess(outcome, "closed_form")
        logger.debug("Closed-form layout failed: %s", outcome)

    outcome = placer.random_retry(retry_attempts, per_tile_attempts)
    if isinstance(outcome, list):
        return LayoutSuccess(outcome, "random_retry")
    logger.warning("Layout of %d tiles failed: %s", n, outcome)
    return LayoutFailure(outcome)
