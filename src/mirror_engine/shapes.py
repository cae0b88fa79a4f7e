"""Tile outline model: world-space vertices, edges and bounding boxes.

Every placement shares one canonical 7-vertex outline given in unit
coordinates. World geometry is produced by scaling the outline, flipping it
horizontally for type B, rotating it around the tile's frame center and
translating by that center. Canvas Y grows downward, so the outline's "up"
maps to negative local Y.
"""

from __future__ import annotations

import math
from typing import List

import numpy as np
from shapely.geometry import Polygon

from mirror_engine.contracts import AreaConfig, BoundingBox, Edge, TilePlacement, TileType

OUTLINE_UNITS = np.array(
    [
        [0.0, 0.0],
        [1.0, 0.0],
        [2.0, 0.0],
        [2.5, 0.5],
        [2.0, 1.0],
        [1.5, 1.5],
        [1.0, 1.0],
    ]
)
UNIT_SCALE = 1.28


def tile_unit(tile_size: float) -> float:
    """World length of one outline unit."""
    return tile_size * UNIT_SCALE


def frame_center(tile: TilePlacement, area: AreaConfig) -> np.ndarray:
    half = area.tile_size / 2
    return np.array([tile.x + half, tile.y + half])


def local_vertices(tile: TilePlacement, area: AreaConfig) -> np.ndarray:
    """Rotated vertex offsets from the frame center, shape (7, 2)."""
    unit = tile_unit(area.tile_size)
    lx = OUTLINE_UNITS[:, 0] * unit
    ly = -OUTLINE_UNITS[:, 1] * unit
    if tile.type is TileType.B:
        lx = -lx

    rad = math.radians(tile.rotation)
    cos, sin = math.cos(rad), math.sin(rad)
    rx = lx * cos - ly * sin
    ry = lx * sin + ly * cos
    return np.column_stack([rx, ry])


def vertices(tile: TilePlacement, area: AreaConfig) -> np.ndarray:
    """World-space polygon vertices, shape (7, 2), in outline order."""
    return local_vertices(tile, area) + frame_center(tile, area)


def bounding_box(tile: TilePlacement, area: AreaConfig) -> BoundingBox:
    """Bounding box from the rotated local outline.

    The extremes are taken on the local offsets and then translated, so
    they match ``vertices(...).min/max`` exactly.
    """
    local = local_vertices(tile, area)
    cx, cy = frame_center(tile, area)
    return BoundingBox(
        left=float(cx + local[:, 0].min()),
        right=float(cx + local[:, 0].max()),
        top=float(cy + local[:, 1].min()),
        bottom=float(cy + local[:, 1].max()),
    )


def _edge_kind(dx: float, dy: float) -> str:
    angle = abs(math.atan2(dy, dx))
    eighth = math.pi / 8
    if angle < eighth or angle > 7 * eighth:
        return "straight"
    if 3 * eighth < angle < 5 * eighth:
        return "straight"
    return "diagonal"


def edges(tile: TilePlacement, area: AreaConfig) -> List[Edge]:
    """All polygon edges, the closing edge included."""
    pts = vertices(tile, area)
    result: List[Edge] = []
    n = len(pts)
    for i in range(n):
        start = pts[i]
        end = pts[(i + 1) % n]
        dx = float(end[0] - start[0])
        dy = float(end[1] - start[1])
        length = math.hypot(dx, dy)
        direction = (dx / length, dy / length) if length > 0 else (0.0, 0.0)
        result.append(
            Edge(
                start=(float(start[0]), float(start[1])),
                end=(float(end[0]), float(end[1])),
                direction=direction,
                length=length,
                kind=_edge_kind(dx, dy),
            )
        )
    return result


def tile_polygon(tile: TilePlacement, area: AreaConfig) -> Polygon:
    """Shapely polygon for area measurements."""
    poly = Polygon(vertices(tile, area).tolist())
    if not poly.is_valid:
        poly = poly.buffer(0)
    return poly
