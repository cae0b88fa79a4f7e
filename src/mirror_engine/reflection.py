"""Mirror reflection and play-area boundary checks.

Reflection works on the tile's bounding box rather than on its nominal
``x``: the box is mirrored across ``mirror_line_x`` and the tile's offset
from its own box left edge is preserved. This keeps the reflected
silhouette exact for every rotation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from mirror_engine.collision import overlap
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    AreaConfig,
    BoundaryCollision,
    Face,
    TilePlacement,
    TileType,
    Tolerances,
)
from mirror_engine.shapes import bounding_box


def reflect(tile: TilePlacement, area: AreaConfig) -> TilePlacement:
    """Mirror image of *tile*; type, face, rotation and y are unchanged."""
    bbox = bounding_box(tile, area)
    m = area.mirror_line_x
    reflected_left = 2 * m - bbox.right
    return replace(tile, x=reflected_left + (tile.x - bbox.left))


def distance_to_mirror(tile: TilePlacement, area: AreaConfig) -> float:
    return abs(bounding_box(tile, area).right - area.mirror_line_x)


def touches_mirror(
    tile: TilePlacement, area: AreaConfig, tol: Optional[Tolerances] = None
) -> bool:
    tol = tol or DEFAULT_TOLERANCES
    return distance_to_mirror(tile, area) <= tol.mirror_touch


def enters_mirror(tile: TilePlacement, area: AreaConfig) -> bool:
    return bounding_box(tile, area).right > area.mirror_line_x


def reflection_self_overlap(
    tile: TilePlacement, area: AreaConfig, tol: Optional[Tolerances] = None
) -> bool:
    """True when a tile off the mirror overlaps its own reflection.

    A mirror-touching tile always meets its reflection at the seam, which
    is expected and never reported.
    """
    if touches_mirror(tile, area, tol):
        return False
    return overlap(tile, reflect(tile, area), area, tol)


def touching_mirror_x(
    y: float,
    rotation: float,
    tile_type: TileType,
    area: AreaConfig,
    face: Face = Face.FRONT,
) -> float:
    """The x at which the tile's bounding box right edge sits on the mirror."""
    reference = TilePlacement(
        type=tile_type,
        face=face,
        x=area.mirror_line_x - area.tile_size,
        y=y,
        rotation=rotation,
    )
    bbox = bounding_box(reference, area)
    return reference.x + (area.mirror_line_x - bbox.right)


def symmetric_pattern(tiles: Sequence[TilePlacement], area: AreaConfig) -> List[TilePlacement]:
    """The tiles followed by their reflections."""
    return list(tiles) + [reflect(tile, area) for tile in tiles]


# ---------------------------------------------------------------------------
# Play-area boundaries
# ---------------------------------------------------------------------------


def boundary_collision(tile: TilePlacement, area: AreaConfig) -> BoundaryCollision:
    bbox = bounding_box(tile, area)
    return BoundaryCollision(
        left=bbox.left < 0,
        right=bbox.right > area.mirror_line_x,
        top=bbox.top < 0,
        bottom=bbox.bottom > area.height,
    )


def in_play_area(tile: TilePlacement, area: AreaConfig) -> bool:
    """Bounding box inside ``[0, mirror_line_x] x [0, height]``."""
    return not boundary_collision(tile, area).any


def constrain_to_area(tile: TilePlacement, area: AreaConfig) -> TilePlacement:
    """Shift *tile* so its bounding box lies inside the play area."""
    bbox = bounding_box(tile, area)
    dx = 0.0
    dy = 0.0
    if bbox.left < 0:
        dx = -bbox.left
    elif bbox.right > area.mirror_line_x:
        dx = area.mirror_line_x - bbox.right
    if bbox.top < 0:
        dy = -bbox.top
    elif bbox.bottom > area.height:
        dy = area.height - bbox.bottom
    if dx == 0 and dy == 0:
        return tile
    return tile.moved(dx, dy)


def reflection_in_area(
    tile: TilePlacement, area: AreaConfig, tol: Optional[Tolerances] = None
) -> bool:
    """Whether the tile's reflection lands inside the mirror side of the board.

    Mirror-touching tiles must reflect into ``[m, 2m]`` within
    ``reflection_area``; other tiles may land anywhere in ``[0, 2m]``.
    """
    tol = tol or DEFAULT_TOLERANCES
    m = area.mirror_line_x
    rbox = bounding_box(reflect(tile, area), area)
    if touches_mirror(tile, area, tol):
        return rbox.left >= m - tol.reflection_area and rbox.right <= 2 * m + tol.reflection_area
    return rbox.left >= 0 and rbox.right <= 2 * m
