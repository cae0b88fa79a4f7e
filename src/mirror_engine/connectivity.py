"""Touch relation between tiles and mirror-rooted connectivity."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from mirror_engine.collision import penetration_depth
from mirror_engine.contracts import DEFAULT_TOLERANCES, AreaConfig, TilePlacement, Tolerances
from mirror_engine.distance import min_distance
from mirror_engine.reflection import touches_mirror

logger = logging.getLogger(__name__)


def touch(
    a: TilePlacement,
    b: TilePlacement,
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> bool:
    """True when the tiles are in contact without a significant overlap.

    Shallow penetration counts as contact; otherwise the outlines must be
    within ``gap_epsilon`` of each other.
    """
    tol = tol or DEFAULT_TOLERANCES
    depth = penetration_depth(a, b, area)
    if depth > tol.significant_overlap:
        return False
    if depth >= tol.contact_epsilon:
        return True
    return min_distance(a, b, area) <= tol.gap_epsilon


def touch_graph(
    tiles: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> Dict[int, List[int]]:
    """Adjacency list of the touch relation over *tiles*."""
    graph: Dict[int, List[int]] = {i: [] for i in range(len(tiles))}
    for i in range(len(tiles)):
        for j in range(i + 1, len(tiles)):
            if touch(tiles[i], tiles[j], area, tol):
                graph[i].append(j)
                graph[j].append(i)
    return graph


def reachable_from_mirror(
    tiles: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> List[int]:
    """Indices visited by a depth-first walk from the first mirror-touching tile.

    Falls back to tile 0 when no tile touches the mirror.
    """
    if not tiles:
        return []
    graph = touch_graph(tiles, area, tol)
    start = next(
        (i for i, tile in enumerate(tiles) if touches_mirror(tile, area, tol)),
        0,
    )
    visited: List[int] = []
    seen = set()
    stack = [start]
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        visited.append(node)
        for neighbour in reversed(graph[node]):
            if neighbour not in seen:
                stack.append(neighbour)
    return visited


def connected(
    tiles: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> bool:
    """True when every tile is reachable through touches from the mirror side.

    An empty arrangement is trivially connected; a single tile must touch
    the mirror itself.
    """
    if not tiles:
        return True
    if len(tiles) == 1:
        return touches_mirror(tiles[0], area, tol)
    visited = reachable_from_mirror(tiles, area, tol)
    if len(visited) != len(tiles):
        logger.debug("Connectivity: reached %d of %d tiles", len(visited), len(tiles))
        return False
    return True
