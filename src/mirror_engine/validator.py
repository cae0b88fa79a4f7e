"""Challenge rules: validate a tile arrangement and a player's solution.

An arrangement is valid when:

1. no pair of tiles overlaps significantly,
2. no tile overlaps its own reflection,
3. at least one tile touches the mirror,
4. no tile crosses the mirror line,
5. every tile is connected to the mirror through touching tiles,
6. every tile and its reflection stay inside the board.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from mirror_engine.collision import overlap, overlap_area, penetration_depth
from mirror_engine.connectivity import connected, reachable_from_mirror, touch
from mirror_engine.contracts import (
    DEFAULT_TOLERANCES,
    AreaConfig,
    PairDiagnostic,
    SolutionReport,
    TileDiagnostic,
    TilePlacement,
    Tolerances,
    ValidationIssue,
    ValidationTrace,
    ValidationVerdict,
)
from mirror_engine.reflection import (
    boundary_collision,
    enters_mirror,
    in_play_area,
    reflection_in_area,
    reflection_self_overlap,
    touches_mirror,
)
from mirror_engine.shapes import bounding_box

logger = logging.getLogger(__name__)


def _combine(
    has_tile_overlaps: bool,
    has_reflection_overlaps: bool,
    touches: bool,
    enters: bool,
    tiles_connected: bool,
    tiles_in_area: bool,
) -> ValidationVerdict:
    return ValidationVerdict(
        is_valid=(
            not has_tile_overlaps
            and not has_reflection_overlaps
            and touches
            and not enters
            and tiles_connected
            and tiles_in_area
        ),
        touches_mirror=touches,
        enters_mirror=enters,
        has_tile_overlaps=has_tile_overlaps,
        has_reflection_overlaps=has_reflection_overlaps,
        tiles_connected=tiles_connected,
        tiles_in_area=tiles_in_area,
    )


def tile_in_area(
    tile: TilePlacement, area: AreaConfig, tol: Optional[Tolerances] = None
) -> bool:
    """The tile lies in the play area and its reflection on the mirror side."""
    return in_play_area(tile, area) and reflection_in_area(tile, area, tol)


def validate(
    tiles: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> ValidationVerdict:
    """Check an arrangement against every challenge rule."""
    tol = tol or DEFAULT_TOLERANCES
    tiles = list(tiles)

    has_tile_overlaps = False
    for i in range(len(tiles)):
        for j in range(i + 1, len(tiles)):
            if penetration_depth(tiles[i], tiles[j], area) > tol.significant_overlap:
                has_tile_overlaps = True
                break
        if has_tile_overlaps:
            break

    verdict = _combine(
        has_tile_overlaps=has_tile_overlaps,
        has_reflection_overlaps=any(reflection_self_overlap(t, area, tol) for t in tiles),
        touches=any(touches_mirror(t, area, tol) for t in tiles),
        enters=any(enters_mirror(t, area) for t in tiles),
        tiles_connected=connected(tiles, area, tol),
        tiles_in_area=all(tile_in_area(t, area, tol) for t in tiles),
    )
    logger.debug("Validated %d tiles: %s", len(tiles), verdict)
    return verdict


def validate_with_trace(
    tiles: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> Tuple[ValidationVerdict, ValidationTrace]:
    """Like :func:`validate`, also returning every measurement behind the verdict."""
    tol = tol or DEFAULT_TOLERANCES
    tiles = list(tiles)
    trace = ValidationTrace()

    for i in range(len(tiles)):
        for j in range(i + 1, len(tiles)):
            depth = penetration_depth(tiles[i], tiles[j], area)
            trace.pairs.append(
                PairDiagnostic(
                    first=i,
                    second=j,
                    penetration=depth,
                    overlaps=overlap(tiles[i], tiles[j], area, tol),
                    significant=depth > tol.significant_overlap,
                    touching=touch(tiles[i], tiles[j], area, tol),
                    intersection_area=overlap_area(tiles[i], tiles[j], area),
                )
            )

    for index, tile in enumerate(tiles):
        trace.tiles.append(
            TileDiagnostic(
                index=index,
                bbox=bounding_box(tile, area),
                touches_mirror=touches_mirror(tile, area, tol),
                enters_mirror=enters_mirror(tile, area),
                reflection_overlap=reflection_self_overlap(tile, area, tol),
                in_area=tile_in_area(tile, area, tol),
            )
        )

    trace.visited = reachable_from_mirror(tiles, area, tol)
    if len(tiles) == 1:
        tiles_connected = trace.tiles[0].touches_mirror
    else:
        tiles_connected = len(trace.visited) == len(tiles)

    verdict = _combine(
        has_tile_overlaps=any(p.significant for p in trace.pairs),
        has_reflection_overlaps=any(t.reflection_overlap for t in trace.tiles),
        touches=any(t.touches_mirror for t in trace.tiles),
        enters=any(t.enters_mirror for t in trace.tiles),
        tiles_connected=tiles_connected,
        tiles_in_area=all(t.in_area for t in trace.tiles),
    )
    for i, j in trace.significant_pairs():
        logger.debug("Tiles %d and %d overlap significantly", i, j)
    return verdict, trace


# ─── Interactive placement and solution checks ───────────────────────────────


def validate_placement(
    tile: TilePlacement,
    others: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
) -> List[ValidationIssue]:
    """Rule violations for dropping *tile* next to *others*.

    Returns an empty list when the position is acceptable.
    """
    tol = tol or DEFAULT_TOLERANCES
    issues: List[ValidationIssue] = []

    if boundary_collision(tile, area).any:
        issues.append(
            ValidationIssue(
                code="BOUNDARY_COLLISION",
                severity="error",
                message="Tile is outside the play area",
            )
        )

    for index, other in enumerate(others):
        if penetration_depth(tile, other, area) > tol.significant_overlap:
            issues.append(
                ValidationIssue(
                    code="PIECE_COLLISION",
                    severity="error",
                    message="Tile overlaps another tile",
                    tile_index=index,
                )
            )
            break

    if enters_mirror(tile, area):
        issues.append(
            ValidationIssue(
                code="MIRROR_COLLISION",
                severity="error",
                message="Tile cannot enter the mirror area",
            )
        )
    return issues


def validate_solution(
    tiles: Sequence[TilePlacement],
    required: Sequence[TilePlacement],
    area: AreaConfig,
    tol: Optional[Tolerances] = None,
    pieces_needed: Optional[int] = None,
) -> SolutionReport:
    """Check a player's tiles against a challenge's required tiles.

    Tiles below the play area (``y >= height``) are still in the player's
    tray and are ignored. The placed count is compared with ``pieces_needed``
    when given, otherwise with the number of required tiles.
    """
    placed = [t for t in tiles if t.y < area.height]
    if not placed:
        return SolutionReport(
            is_valid=False,
            issues=[
                ValidationIssue(
                    code="NO_PIECES_PLACED",
                    severity="error",
                    message="Place at least one tile in the play area",
                )
            ],
        )

    issues: List[ValidationIssue] = []
    expected = pieces_needed or len(required)
    if len(placed) != expected:
        issues.append(
            ValidationIssue(
                code="WRONG_PIECE_COUNT",
                severity="error",
                message=f"{expected} tiles are required, but {len(placed)} are placed",
            )
        )

    if Counter(t.type for t in placed) != Counter(t.type for t in required):
        issues.append(
            ValidationIssue(
                code="WRONG_PIECE_TYPES",
                severity="error",
                message="Tile types do not match the challenge",
            )
        )

    verdict = validate(placed, area, tol)
    checks: Dict[str, Tuple[bool, str]] = {
        "PIECES_NOT_CONNECTED": (not verdict.tiles_connected, "Tiles must be connected to each other"),
        "NO_MIRROR_TOUCH": (not verdict.touches_mirror, "At least one tile must touch the mirror"),
        "PIECE_OVERLAPS": (verdict.has_tile_overlaps, "Tiles cannot overlap"),
        "ENTERS_MIRROR": (verdict.enters_mirror, "Tiles cannot enter the mirror area"),
    }
    for code, (failed, message) in checks.items():
        if failed:
            issues.append(ValidationIssue(code=code, severity="error", message=message))

    report = SolutionReport(
        is_valid=not any(i.severity == "error" for i in issues),
        issues=issues,
        verdict=verdict,
    )
    logger.info("Solution check: %s (%d issues)", "valid" if report.is_valid else "invalid", len(issues))
    return report
