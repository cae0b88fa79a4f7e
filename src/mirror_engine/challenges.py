"""Challenge definitions and the challenge file formats.

Two JSON layouts are supported at the file boundary:

* the *relative* layout (``coordinate_system: "mirror_relative"``), where
  every piece is given against the mirror (see :mod:`mirror_engine.coordinates`),
* the *absolute* layout, a list of challenges whose
  ``objective.playerPieces`` hold world coordinates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from mirror_engine.contracts import (
    AreaConfig,
    Face,
    FileCheck,
    RelativePlacement,
    TilePlacement,
    TileType,
)
from mirror_engine.coordinates import to_absolute, to_relative, validate_relative
from mirror_engine.reflection import symmetric_pattern, touching_mirror_x
from mirror_engine.shapes import tile_unit
from mirror_engine.validator import validate

logger = logging.getLogger(__name__)

RELATIVE_SYSTEM = "mirror_relative"
RANDOM_ID_BASE = 100


@dataclass
class Challenge:
    """A puzzle: the tiles whose mirrored figure the player must rebuild."""

    id: int
    name: str
    description: str
    pieces: List[TilePlacement]
    difficulty: str = "Beginner"
    target_pattern: str = "custom"
    pieces_needed: int = 0

    def __post_init__(self) -> None:
        if not self.pieces_needed:
            self.pieces_needed = len(self.pieces)

    def to_dict(self, area: AreaConfig) -> Dict[str, object]:
        """Absolute layout, including the mirrored target figure."""
        pieces = [p.to_dict() for p in self.pieces]
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "piecesNeeded": self.pieces_needed,
            "difficulty": self.difficulty,
            "targetPattern": self.target_pattern,
            "objective": {
                "playerPieces": pieces,
                "symmetricPattern": [p.to_dict() for p in symmetric_pattern(self.pieces, area)],
            },
            "targetPieces": pieces,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Challenge":
        objective = data.get("objective") or {}
        raw = objective.get("playerPieces") or data.get("targetPieces") or []
        pieces = [TilePlacement.from_dict(p) for p in raw]
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            pieces=pieces,
            difficulty=str(data.get("difficulty", "Beginner")),
            target_pattern=str(data.get("targetPattern", "custom")),
            pieces_needed=int(data.get("piecesNeeded") or len(pieces)),
        )


# ---------------------------------------------------------------------------
# Relative file format
# ---------------------------------------------------------------------------


def coordinate_comment(x: float, y: float) -> str:
    """Human-readable description of a relative position."""
    if x == 0:
        horizontal = "Touching the mirror"
    elif x < 0:
        horizontal = f"{abs(x):g} units left of the mirror"
    else:
        horizontal = f"{x:g} units inside the mirror area (invalid!)"

    if y == 0:
        vertical = "vertical center"
    elif y < 0:
        vertical = f"{abs(y):g} units above center"
    else:
        vertical = f"{y:g} units below center"
    return f"{horizontal}, {vertical}"


def relative_file_to_challenges(payload: Dict[str, object], area: AreaConfig) -> List[Challenge]:
    """Convert a relative challenge file into challenges in world coordinates.

    Raises:
        ValueError: if the payload is not a mirror-relative file.
    """
    if payload.get("coordinate_system") != RELATIVE_SYSTEM:
        raise ValueError(f'Invalid coordinate system. Expected "{RELATIVE_SYSTEM}".')
    entries = payload.get("challenges")
    if not isinstance(entries, list):
        raise ValueError("Challenges must be an array")

    challenges = []
    for entry in entries:
        if not isinstance(entry.get("pieces"), list):
            raise ValueError(f"Challenge {entry.get('id')}: Pieces must be an array")
        pieces = [to_absolute(RelativePlacement.from_dict(p), area) for p in entry["pieces"]]
        challenges.append(
            Challenge(
                id=int(entry["id"]),
                name=str(entry["name"]),
                description=str(entry.get("description", "")),
                pieces=pieces,
                difficulty=str(entry.get("difficulty", "Beginner")),
                target_pattern=str(entry.get("targetPattern", "custom")),
                pieces_needed=int(entry.get("piecesNeeded") or len(pieces)),
            )
        )
    logger.info("Loaded %d relative challenges", len(challenges))
    return challenges


def challenges_to_relative_file(
    challenges: Sequence[Challenge], area: AreaConfig
) -> Dict[str, object]:
    """Export challenges to the relative file layout."""
    entries = []
    for challenge in challenges:
        pieces = []
        for tile in challenge.pieces:
            rel = to_relative(tile, area)
            piece = rel.to_dict()
            piece["comment"] = coordinate_comment(rel.x, rel.y)
            pieces.append(piece)
        entries.append(
            {
                "id": challenge.id,
                "name": challenge.name,
                "description": challenge.description,
                "piecesNeeded": challenge.pieces_needed,
                "difficulty": challenge.difficulty,
                "targetPattern": challenge.target_pattern,
                "pieces": pieces,
            }
        )

    return {
        "coordinate_system": RELATIVE_SYSTEM,
        "description": (
            "Challenges in mirror-relative coordinates. X=0 touches the mirror, "
            "negative X is to the left. Y=0 is the vertical center."
        ),
        "mirror_position": 0,
        "piece_size": area.tile_size,
        "challenges": entries,
        "coordinate_examples": {
            "touching_mirror": {"x": 0, "description": "Tile exactly touches the mirror"},
            "left_of_mirror": {"x": -50, "description": "Tile 50 units left of touching"},
            "vertical_center": {"y": 0, "description": "Vertical center of the play area"},
        },
        "validation_notes": [
            "Every tile must have x <= 0",
            "At least one tile must have x = 0",
            "Tiles must not overlap",
            "Tiles must form a connected figure",
        ],
    }


def validate_relative_file(payload: Dict[str, object], area: AreaConfig) -> FileCheck:
    """Collect format errors and non-fatal warnings in a relative file."""
    check = FileCheck()
    if payload.get("coordinate_system") != RELATIVE_SYSTEM:
        check.errors.append(f'Invalid coordinate_system. Must be "{RELATIVE_SYSTEM}"')

    entries = payload.get("challenges")
    if not isinstance(entries, list):
        check.errors.append("Challenges must be an array")
        return check

    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict) or not all(entry.get(k) for k in ("id", "name", "pieces")):
            check.errors.append(f"Challenge {index}: Missing required fields (id, name, pieces)")
            continue

        challenge_id = entry["id"]
        if not isinstance(entry["pieces"], list):
            check.errors.append(f"Challenge {challenge_id}: Pieces must be an array")
            continue
        for piece_index, raw in enumerate(entry["pieces"], start=1):
            try:
                rel = RelativePlacement.from_dict(raw)
            except (KeyError, TypeError, ValueError) as exc:
                check.errors.append(
                    f"Challenge {challenge_id}, piece {piece_index}: malformed piece ({exc})"
                )
                continue
            problems = validate_relative(rel, area)
            if problems:
                check.errors.append(
                    f"Challenge {challenge_id}, piece {piece_index}: {', '.join(problems)}"
                )

        if not any(p.get("x") == 0 for p in entry["pieces"] if isinstance(p, dict)):
            check.warnings.append(f"Challenge {challenge_id}: No piece touches the mirror (x=0)")
    return check


# ---------------------------------------------------------------------------
# Built-in and generated challenges
# ---------------------------------------------------------------------------


def _tile(tile_type: TileType, x: float, y: float, face: Face = Face.FRONT) -> TilePlacement:
    return TilePlacement(type=tile_type, face=face, x=x, y=y, rotation=0.0)


def builtin_challenges(area: AreaConfig) -> List[Challenge]:
    """Starter challenges, built from exact contact offsets for the area's tile size."""
    unit = tile_unit(area.tile_size)
    side = 2 * unit  # horizontal neighbour sharing the diagonal seam
    stack = 1.5 * unit  # vertical neighbour resting on the apex
    cy = area.center_y
    low = cy + area.tile_size
    touch = touching_mirror_x(cy, 0.0, TileType.A, area)

    return [
        Challenge(
            id=1,
            name="Simple heart",
            description="One A tile touching the mirror",
            pieces=[_tile(TileType.A, touch, cy)],
            difficulty="Beginner",
            target_pattern="heart_simple",
        ),
        Challenge(
            id=2,
            name="Horizontal block",
            description="Two A tiles side by side, the right one touching the mirror",
            pieces=[_tile(TileType.A, touch, cy), _tile(TileType.A, touch - side, cy, Face.BACK)],
            difficulty="Easy",
            target_pattern="horizontal_block",
        ),
        Challenge(
            id=3,
            name="Vertical tower",
            description="Two A tiles stacked against the mirror",
            pieces=[_tile(TileType.A, touch, low), _tile(TileType.A, touch, low - stack)],
            difficulty="Easy",
            target_pattern="vertical_tower",
        ),
        Challenge(
            id=4,
            name="L shape",
            description="Three A tiles forming an L",
            pieces=[
                _tile(TileType.A, touch, low),
                _tile(TileType.A, touch - side, low),
                _tile(TileType.A, touch - side, low - stack, Face.BACK),
            ],
            difficulty="Intermediate",
            target_pattern="l_shape",
        ),
    ]


def generate_random_challenge(
    pieces: int,
    area: AreaConfig,
    rng: Optional[np.random.Generator] = None,
    max_attempts: int = 100,
) -> Optional[Challenge]:
    """Grow a random connected figure from a mirror-touching seed.

    Each attempt picks one tile type, seeds a tile on the mirror and
    attaches the remaining tiles to random earlier ones at exact contact
    offsets. The first arrangement that validates is returned; ``None``
    after *max_attempts* failures.
    """
    pieces = max(1, min(4, pieces))
    rng = rng if rng is not None else np.random.default_rng()
    unit = tile_unit(area.tile_size)
    offsets = [(-2 * unit, 0.0), (0.0, -1.5 * unit), (0.0, 1.5 * unit)]
    faces = list(Face)

    for attempt in range(max_attempts):
        tile_type = TileType.A if rng.random() < 0.5 else TileType.B
        y = float(rng.integers(0, int(area.height - area.tile_size) + 1))
        seed = TilePlacement(
            type=tile_type,
            face=faces[int(rng.integers(len(faces)))],
            x=touching_mirror_x(y, 0.0, tile_type, area),
            y=y,
        )
        tiles = [seed]
        for _ in range(pieces * 10):
            if len(tiles) == pieces:
                break
            base = tiles[int(rng.integers(len(tiles)))]
            dx, dy = offsets[int(rng.integers(len(offsets)))]
            candidate = TilePlacement(
                type=tile_type,
                face=faces[int(rng.integers(len(faces)))],
                x=base.x + dx,
                y=base.y + dy,
            )
            if any(t.x == candidate.x and t.y == candidate.y for t in tiles):
                continue
            tiles.append(candidate)

        if len(tiles) == pieces and validate(tiles, area).is_valid:
            challenge_id = RANDOM_ID_BASE + attempt
            return Challenge(
                id=challenge_id,
                name=f"Random challenge #{challenge_id}",
                description=f"Random challenge with {pieces} tiles",
                pieces=tiles,
                difficulty="Easy" if pieces <= 2 else "Intermediate",
                target_pattern=f"random_{pieces}_pieces",
            )

    logger.warning(
        "Could not generate a valid random challenge with %d tiles after %d attempts",
        pieces,
        max_attempts,
    )
    return None
