"""Separating-axis collision tests between placed tiles.

Two severity tiers are used. Penetration up to
``Tolerances.significant_overlap`` is *contact* and is accepted at seams;
anything deeper is a real overlap.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Tuple

import numpy as np

from mirror_engine.contracts import DEFAULT_TOLERANCES, AreaConfig, TilePlacement, Tolerances
from mirror_engine.shapes import tile_polygon, vertices


def edge_normals(polygon: np.ndarray) -> List[np.ndarray]:
    """Unit normals of every non-degenerate edge."""
    normals = []
    n = len(polygon)
    for i in range(n):
        ex, ey = polygon[(i + 1) % n] - polygon[i]
        length = math.hypot(ex, ey)
        if length == 0:
            continue
        normals.append(np.array([-ey / length, ex / length]))
    return normals


def project_polygon(polygon: np.ndarray, axis: np.ndarray) -> Tuple[float, float]:
    dots = polygon @ axis
    return float(dots.min()), float(dots.max())


def _axis_overlaps(poly_a: np.ndarray, poly_b: np.ndarray) -> Iterator[float]:
    """Yield the projection overlap on each candidate separating axis.

    Negative values are gaps.
    """
    for axis in edge_normals(poly_a) + edge_normals(poly_b):
        min_a, max_a = project_polygon(poly_a, axis)
        min_b, max_b = project_polygon(poly_b, axis)
        yield min(max_a, max_b) - max(min_a, min_b)


def polygons_overlap(poly_a: np.ndarray, poly_b: np.ndarray, gap_tolerance: float) -> bool:
    for amount in _axis_overlaps(poly_a, poly_b):
        if amount < -gap_tolerance:
            return False
    return True


def polygon_penetration(poly_a: np.ndarray, poly_b: np.ndarray) -> float:
    depth = math.inf
    for amount in _axis_overlaps(poly_a, poly_b):
        if amount <= 0:
            return 0.0
        depth = min(depth, amount)
    return 0.0 if math.isinf(depth) else float(depth)


def overlap(
    a: TilePlacement,
    b: TilePlacement,
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> bool:
    """True unless some axis separates the tiles by more than the gap tolerance."""
    tol = tol or DEFAULT_TOLERANCES
    return polygons_overlap(vertices(a, area), vertices(b, area), tol.overlap_gap)


def penetration_depth(a: TilePlacement, b: TilePlacement, area: AreaConfig) -> float:
    """Minimum positive projection overlap; 0 when any axis separates."""
    return polygon_penetration(vertices(a, area), vertices(b, area))


def significant_overlap(
    a: TilePlacement,
    b: TilePlacement,
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> bool:
    tol = tol or DEFAULT_TOLERANCES
    return penetration_depth(a, b, area) > tol.significant_overlap


def overlap_area(a: TilePlacement, b: TilePlacement, area: AreaConfig) -> float:
    """Intersection area of the two outlines (diagnostics only)."""
    return float(tile_polygon(a, area).intersection(tile_polygon(b, area)).area)
