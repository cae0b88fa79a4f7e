"""Conversion between world coordinates and mirror-relative coordinates.

Relative ``x`` is measured from the x at which the tile touches the
mirror for its own type and rotation, so ``x == 0`` always means
"touching" regardless of how the tile is rotated. Relative ``y`` is measured
from the vertical center of the play area.
"""

from __future__ import annotations

import math
from typing import List

from mirror_engine.contracts import AreaConfig, RelativePlacement, TilePlacement
from mirror_engine.reflection import touching_mirror_x


# ulp steps tried when correcting a rounded offset
_MAX_ULP_STEPS = 4


def _exact_offset(value: float, origin: float) -> float:
    """Offset ``r`` such that ``origin + r == value`` whenever a float ``r`` exists.

    The plain difference is exact when ``value`` and ``origin`` are within a
    factor of two of each other. Otherwise it is walked one ulp at a time;
    if no float offset reproduces ``value`` the plain difference is kept.
    """
    first = value - origin
    offset = first
    for _ in range(_MAX_ULP_STEPS):
        total = origin + offset
        if total == value:
            return offset
        offset = math.nextafter(offset, math.inf if total < value else -math.inf)
    return first


def to_absolute(rel: RelativePlacement, area: AreaConfig) -> TilePlacement:
    y = area.center_y + rel.y
    touch_x = touching_mirror_x(y, rel.rotation, rel.type, area, rel.face)
    x = touch_x if rel.x == 0 else touch_x + rel.x
    return TilePlacement(type=rel.type, face=rel.face, x=x, y=y, rotation=rel.rotation)


def to_relative(tile: TilePlacement, area: AreaConfig) -> RelativePlacement:
    """Inverse of :func:`to_absolute`; ``to_absolute(to_relative(p)) == p``."""
    touch_x = touching_mirror_x(tile.y, tile.rotation, tile.type, area, tile.face)
    return RelativePlacement(
        type=tile.type,
        face=tile.face,
        x=_exact_offset(tile.x, touch_x),
        y=_exact_offset(tile.y, area.center_y),
        rotation=tile.rotation,
    )


def validate_relative(rel: RelativePlacement, area: AreaConfig) -> List[str]:
    """One message per violated rule; empty when the placement is usable."""
    errors: List[str] = []
    if rel.x > 0:
        errors.append("Tile cannot be positioned in the mirror area (x > 0)")
    min_x = -(area.mirror_line_x - area.tile_size)
    if rel.x < min_x:
        errors.append(f"Tile too far left (x < {min_x:g})")
    if abs(rel.y) > area.center_y:
        errors.append(f"Tile y position out of bounds (|y| > {area.center_y:g})")
    return errors
