"""Edge-based snapping for a tile being moved by the player.

The snap pipeline, in order:

0. close a small visible gap to the first nearby tile by moving most of
   the way between their closest vertices,
1. find the best pair of opposing edges between the moving tile and a
   nearby tile and translate so the edges coincide, leaving a one-unit
   contact along the seam,
2. if that leaves too much penetration, nudge the tile back along the
   axis of least box overlap,
3. without a qualifying edge pair, fall back to bounding-box side snapping,
4. snap onto the mirror when the box is within the radius,
5. clamp into the play area.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from mirror_engine.collision import penetration_depth
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    Aligned,
    AreaConfig,
    Edge,
    NoAlignment,
    SnapResult,
    TilePlacement,
    Tolerances,
)
from mirror_engine.distance import (
    boxes_overlap_horizontally,
    boxes_overlap_vertically,
    min_distance,
)
from mirror_engine.reflection import constrain_to_area
from mirror_engine.shapes import bounding_box, edges, vertices

logger = logging.getLogger(__name__)

OPPOSING_DOT = -0.8
MIN_ALIGNMENT = 0.5
MIN_CONTINUITY = 0.4
CONTINUITY_REACH = 15.0


@dataclass(frozen=True)
class EdgePair:
    """A moving-tile edge matched against a target-tile edge."""

    moving: Edge
    target: Edge
    alignment: float
    continuity: float

    @property
    def score(self) -> float:
        return self.alignment * self.continuity


def _dist(p: Tuple[float, float], q: Tuple[float, float]) -> float:
    return math.hypot(q[0] - p[0], q[1] - p[1])


def edge_alignment(moving: Edge, target: Edge) -> float:
    """1 when the midpoints are joined perpendicular to the moving edge."""
    m1, m2 = moving.midpoint, target.midpoint
    cx, cy = m2[0] - m1[0], m2[1] - m1[1]
    length = math.hypot(cx, cy)
    if length == 0:
        return 1.0
    cos = (cx * moving.direction[0] + cy * moving.direction[1]) / length
    return 1.0 - abs(cos)


def edge_continuity(moving: Edge, target: Edge) -> float:
    """Closeness of the nearest endpoints, blended with length similarity."""
    nearest = min(
        _dist(moving.start, target.start),
        _dist(moving.start, target.end),
        _dist(moving.end, target.start),
        _dist(moving.end, target.end),
    )
    if nearest <= 5:
        distance_score = 1.0
    elif nearest <= 10:
        distance_score = 0.9
    else:
        distance_score = max(0.0, 1.0 - nearest / CONTINUITY_REACH)
    longest = max(moving.length, target.length)
    length_ratio = min(moving.length, target.length) / longest if longest > 0 else 0.0
    return distance_score * 0.8 + length_ratio * 0.2


def compatible_edges(
    moving: TilePlacement, target: TilePlacement, area: AreaConfig
) -> List[EdgePair]:
    """Opposing edge pairs of the same kind, best score first."""
    pairs: List[EdgePair] = []
    target_edges = edges(target, area)
    for e1 in edges(moving, area):
        for e2 in target_edges:
            if e1.kind != e2.kind:
                continue
            dot = e1.direction[0] * e2.direction[0] + e1.direction[1] * e2.direction[1]
            if dot >= OPPOSING_DOT:
                continue
            alignment = edge_alignment(e1, e2)
            continuity = edge_continuity(e1, e2)
            if alignment > MIN_ALIGNMENT and continuity > MIN_CONTINUITY:
                pairs.append(EdgePair(e1, e2, alignment, continuity))
    pairs.sort(key=lambda p: p.score, reverse=True)
    return pairs


def _outward_normal(tile: TilePlacement, edge: Edge, area: AreaConfig) -> np.ndarray:
    normal = np.array([-edge.direction[1], edge.direction[0]])
    centroid = vertices(tile, area).mean(axis=0)
    if np.dot(np.asarray(edge.midpoint) - centroid, normal) < 0:
        normal = -normal
    return normal


def _align_edges(
    tile: TilePlacement, pair: EdgePair, area: AreaConfig, tol: Tolerances
) -> TilePlacement:
    """Bring the edge midpoints together, then push one more unit toward the target.

    The push runs along the moving edge's outward normal, so the pair ends in
    one unit of contact rather than with a hairline gap, and still counts as
    touching.
    """
    m1, m2 = pair.moving.midpoint, pair.target.midpoint
    outward = _outward_normal(tile, pair.moving, area)
    dx = m2[0] - m1[0] + outward[0] * tol.snap_separation
    dy = m2[1] - m1[1] + outward[1] * tol.snap_separation
    return tile.moved(float(dx), float(dy))


def _closest_vertices(
    tile: TilePlacement, target: TilePlacement, area: AreaConfig
) -> Tuple[np.ndarray, np.ndarray]:
    fixed = vertices(target, area)
    best = None
    best_dist = math.inf
    for p in vertices(tile, area):
        for q in fixed:
            d = float(np.linalg.norm(q - p))
            if d < best_dist:
                best_dist = d
                best = (p, q)
    return best


def _close_small_gap(
    tile: TilePlacement, target: TilePlacement, area: AreaConfig, tol: Tolerances
) -> TilePlacement:
    """Move most of the way from the closest moving vertex to the closest target vertex.

    A residual gap wider than ``tol.gap_epsilon`` is then shrunk along the
    dominant axis between the two box centers.
    """
    p, q = _closest_vertices(tile, target, area)
    step = (q - p) * tol.snap_gap_factor
    tile = tile.moved(float(step[0]), float(step[1]))

    residual = min_distance(tile, target, area)
    if residual > tol.gap_epsilon:
        logger.debug("Snap: residual gap %.3f after closing, adjusting", residual)
        cx, cy = bounding_box(tile, area).center
        tx, ty = bounding_box(target, area).center
        shift = residual * tol.snap_gap_residual
        if abs(tx - cx) > abs(ty - cy):
            tile = tile.moved(math.copysign(shift, tx - cx), 0.0)
        else:
            tile = tile.moved(0.0, math.copysign(shift, ty - cy))
    return tile


def _resolve_penetration(
    tile: TilePlacement, target: TilePlacement, area: AreaConfig, tol: Tolerances
) -> TilePlacement:
    """Back off along the smallest box overlap, leaving the target contact."""
    box = bounding_box(tile, area)
    other = bounding_box(target, area)
    candidates = [
        (box.right - other.left, -1.0, 0.0),
        (other.right - box.left, 1.0, 0.0),
        (box.bottom - other.top, 0.0, -1.0),
        (other.bottom - box.top, 0.0, 1.0),
    ]
    amount, sx, sy = min(candidates, key=lambda c: c[0])
    shift = amount - tol.snap_target_contact
    return tile.moved(sx * shift, sy * shift)


def _box_snap(
    tile: TilePlacement, target: TilePlacement, area: AreaConfig, radius: float
) -> Optional[TilePlacement]:
    """Align the closest pair of box sides that face each other."""
    box = bounding_box(tile, area)
    other = bounding_box(target, area)
    vertical = boxes_overlap_vertically(box, other)
    horizontal = boxes_overlap_horizontally(box, other)
    options = [
        (abs(box.left - other.right), vertical, other.right - box.left, 0.0),
        (abs(box.right - other.left), vertical, other.left - box.right, 0.0),
        (abs(box.top - other.bottom), horizontal, 0.0, other.bottom - box.top),
        (abs(box.bottom - other.top), horizontal, 0.0, other.top - box.bottom),
    ]
    valid = [o for o in options if o[0] <= radius and o[1]]
    if not valid:
        return None
    _, _, dx, dy = min(valid, key=lambda o: o[0])
    return tile.moved(dx, dy)


def snap(
    moving: TilePlacement,
    others: Sequence[TilePlacement],
    area: AreaConfig,
    radius: Optional[float] = None,
    tol: Optional[Tolerances] = None,
) -> SnapResult:
    """Snap *moving* against *others* and the mirror.

    Returns :class:`Aligned` when any alignment was applied, otherwise
    :class:`NoAlignment` carrying the tile clamped into the play area.
    """
    tol = tol or DEFAULT_TOLERANCES
    radius = tol.snap_radius if radius is None else radius
    tile = moving
    method: Optional[str] = None
    score = 0.0
    target_index: Optional[int] = None

    for index, other in enumerate(others):
        gap = min_distance(tile, other, area)
        if tol.contact_epsilon < gap <= tol.snap_gap_close:
            tile = _close_small_gap(tile, other, area, tol)
            method = "gap"
            target_index = index
            break

    best: Optional[Tuple[EdgePair, int]] = None
    for index, other in enumerate(others):
        if min_distance(tile, other, area) > radius * 1.5:
            continue
        for pair in compatible_edges(tile, other, area):
            if best is None or pair.score > best[0].score:
                best = (pair, index)

    if best is not None and best[0].score > tol.snap_min_score:
        pair, target_index = best
        tile = _align_edges(tile, pair, area, tol)
        method = "edge"
        score = pair.score
        target = others[target_index]
        depth = penetration_depth(tile, target, area)
        if depth > tol.snap_max_contact:
            logger.debug("Snap: penetration %.2f after edge alignment, nudging", depth)
            tile = _resolve_penetration(tile, target, area, tol)
    else:
        for index, other in enumerate(others):
            snapped = _box_snap(tile, other, area, radius)
            if snapped is not None:
                tile = snapped
                method = "bbox"
                target_index = index
                break

    box = bounding_box(tile, area)
    if abs(box.right - area.mirror_line_x) <= radius:
        tile = tile.moved(area.mirror_line_x - box.right, 0.0)
        if method is None:
            method = "mirror"

    tile = constrain_to_area(tile, area)
    if method is None:
        return NoAlignment(tile=tile, reason="no edge, box or mirror alignment within radius")
    logger.debug("Snap: %s alignment to (%.1f, %.1f)", method, tile.x, tile.y)
    return Aligned(tile=tile, method=method, score=score, target_index=target_index)
