"""Point, segment and polygon distance helpers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from mirror_engine.contracts import AreaConfig, BoundingBox, TilePlacement
from mirror_engine.shapes import vertices


def point_to_segment_distance(
    point: Sequence[float], seg_start: Sequence[float], seg_end: Sequence[float]
) -> float:
    """Euclidean distance from *point* to the closed segment."""
    px, py = float(point[0]), float(point[1])
    ax, ay = float(seg_start[0]), float(seg_start[1])
    bx, by = float(seg_end[0]), float(seg_end[1])
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def point_to_polygon_distance(point: Sequence[float], polygon: np.ndarray) -> float:
    """Distance from *point* to the nearest edge of a closed polygon."""
    n = len(polygon)
    return min(
        point_to_segment_distance(point, polygon[i], polygon[(i + 1) % n])
        for i in range(n)
    )


def polygon_min_distance(poly_a: np.ndarray, poly_b: np.ndarray) -> float:
    """Minimum vertex/vertex and vertex/edge distance between two outlines."""
    diffs = poly_a[:, None, :] - poly_b[None, :, :]
    best = float(np.sqrt((diffs ** 2).sum(axis=2)).min())
    for point in poly_a:
        best = min(best, point_to_polygon_distance(point, poly_b))
    for point in poly_b:
        best = min(best, point_to_polygon_distance(point, poly_a))
    return best


def min_distance(a: TilePlacement, b: TilePlacement, area: AreaConfig) -> float:
    """Minimum distance between two tiles' outlines."""
    return polygon_min_distance(vertices(a, area), vertices(b, area))


def boxes_overlap_vertically(a: BoundingBox, b: BoundingBox) -> bool:
    return not (a.bottom <= b.top or b.bottom <= a.top)


def boxes_overlap_horizontally(a: BoundingBox, b: BoundingBox) -> bool:
    return not (a.right <= b.left or b.right <= a.left)
