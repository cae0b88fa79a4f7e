"""Value types shared by the mirror tile rules engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

Vec2 = Tuple[float, float]


class TileType(str, Enum):
    """Tile outline variant. B is the horizontal mirror image of A."""

    A = "A"
    B = "B"


class Face(str, Enum):
    """Visible side of a tile. Carries no geometric meaning."""

    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class TilePlacement:
    """A tile placed in world coordinates.

    ``(x, y)`` is the top-left corner of the tile's square frame before
    rotation; ``rotation`` is in degrees around the frame center.
    """

    type: TileType
    face: Face
    x: float
    y: float
    rotation: float = 0.0

    def moved(self, dx: float, dy: float) -> "TilePlacement":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def with_position(self, x: float, y: float) -> "TilePlacement":
        return replace(self, x=x, y=y)

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": self.type.value,
            "face": self.face.value,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "TilePlacement":
        return cls(
            type=TileType(data["type"]),
            face=Face(data.get("face", Face.FRONT.value)),
            x=float(data["x"]),
            y=float(data["y"]),
            rotation=float(data.get("rotation", 0.0)),
        )


@dataclass(frozen=True)
class RelativePlacement:
    """Placement expressed against the mirror.

    ``x`` is the signed distance from the X at which the tile touches the
    mirror (0 = touching, negative = left of it). ``y`` is the signed
    offset from the vertical center of the play area.
    """

    type: TileType
    face: Face
    x: float
    y: float
    rotation: float = 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": self.type.value,
            "face": self.face.value,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "RelativePlacement":
        return cls(
            type=TileType(data["type"]),
            face=Face(data.get("face", Face.FRONT.value)),
            x=float(data["x"]),
            y=float(data["y"]),
            rotation=float(data.get("rotation", 0.0)),
        )


@dataclass(frozen=True)
class AreaConfig:
    """Play area geometry. Read-only after construction."""

    width: float = 700.0
    height: float = 600.0
    mirror_line_x: float = 700.0
    tile_size: float = 100.0

    def __post_init__(self) -> None:
        for name in ("width", "height", "mirror_line_x", "tile_size"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"AreaConfig.{name} must be positive, got {value!r}")

    @property
    def center_y(self) -> float:
        return self.height / 2


@dataclass(frozen=True)
class Tolerances:
    """Numeric tolerances that decide pass/fail outcomes.

    The overlap and contact thresholds were tuned against the default
    100-unit tile; other tile sizes may need different values.
    """

    overlap_gap: float = 5.0
    significant_overlap: float = 15.0
    contact_epsilon: float = 0.05
    gap_epsilon: float = 0.5
    mirror_touch: float = 1.0
    reflection_area: float = 5.0
    snap_radius: float = 30.0
    snap_separation: float = 1.0
    snap_max_contact: float = 3.0
    snap_target_contact: float = 2.0
    snap_min_score: float = 0.3
    snap_gap_close: float = 15.0
    snap_gap_factor: float = 0.95
    snap_gap_residual: float = 0.7

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if value < 0:
                raise ValueError(f"Tolerances.{name} must be non-negative, got {value!r}")
        if self.contact_epsilon > self.significant_overlap:
            raise ValueError("contact_epsilon must not exceed significant_overlap")
        if self.snap_target_contact > self.snap_max_contact:
            raise ValueError("snap_target_contact must not exceed snap_max_contact")

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


DEFAULT_TOLERANCES = Tolerances()


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in world coordinates (Y grows downward)."""

    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Vec2:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Edge:
    """One polygon edge in world coordinates."""

    start: Vec2
    end: Vec2
    direction: Vec2
    length: float
    kind: str  # "straight" | "diagonal"

    @property
    def midpoint(self) -> Vec2:
        return ((self.start[0] + self.end[0]) / 2, (self.start[1] + self.end[1]) / 2)


@dataclass(frozen=True)
class BoundaryCollision:
    """Which sides of the play area a tile's bounding box crosses."""

    left: bool = False
    right: bool = False
    top: bool = False
    bottom: bool = False

    @property
    def any(self) -> bool:
        return self.left or self.right or self.top or self.bottom


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of validating a tile arrangement."""

    is_valid: bool
    touches_mirror: bool
    enters_mirror: bool
    has_tile_overlaps: bool
    has_reflection_overlaps: bool
    tiles_connected: bool
    tiles_in_area: bool

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


@dataclass(frozen=True)
class PairDiagnostic:
    """Collision measurements for one pair of tiles."""

    first: int
    second: int
    penetration: float
    overlaps: bool
    significant: bool
    touching: bool
    intersection_area: float


@dataclass(frozen=True)
class TileDiagnostic:
    """Per-tile measurements gathered during validation."""

    index: int
    bbox: BoundingBox
    touches_mirror: bool
    enters_mirror: bool
    reflection_overlap: bool
    in_area: bool


@dataclass
class ValidationTrace:
    """Structured record of every measurement behind a verdict."""

    pairs: List[PairDiagnostic] = field(default_factory=list)
    tiles: List[TileDiagnostic] = field(default_factory=list)
    visited: List[int] = field(default_factory=list)

    def significant_pairs(self) -> List[Tuple[int, int]]:
        return [(p.first, p.second) for p in self.pairs if p.significant]

    def to_dict(self) -> Dict[str, object]:
        return {
            "pairs": [asdict(p) for p in self.pairs],
            "tiles": [asdict(t) for t in self.tiles],
            "visited": list(self.visited),
        }


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule violation reported to the player."""

    code: str
    severity: str  # "error" or "warning"
    message: str
    tile_index: Optional[int] = None


@dataclass
class SolutionReport:
    """Result of checking a player's tiles against a challenge."""

    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    verdict: Optional[ValidationVerdict] = None

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def summary(self) -> str:
        if self.is_valid:
            return "Challenge solved."
        messages = [i.message for i in self.errors]
        return "\n".join(messages) if messages else "The solution has problems."


@dataclass(frozen=True)
class Aligned:
    """Snap outcome: the tile was moved into alignment."""

    tile: TilePlacement
    method: str  # "gap" | "edge" | "bbox" | "mirror"
    score: float = 0.0
    target_index: Optional[int] = None


@dataclass(frozen=True)
class NoAlignment:
    """Snap outcome: nothing qualified; ``tile`` is the clamped input."""

    tile: TilePlacement
    reason: str


SnapResult = Union[Aligned, NoAlignment]


@dataclass(frozen=True)
class PackingArea:
    """Target rectangle for automatic layout."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vec2:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, bbox: BoundingBox) -> bool:
        return (
            bbox.left >= self.x
            and bbox.right <= self.right
            and bbox.top >= self.y
            and bbox.bottom <= self.bottom
        )


@dataclass(frozen=True)
class LayoutSuccess:
    placements: List[TilePlacement]
    strategy: str  # "incremental" | "closed_form" | "random_retry"


@dataclass(frozen=True)
class LayoutFailure:
    reason: str


LayoutResult = Union[LayoutSuccess, LayoutFailure]


@dataclass
class FileCheck:
    """Errors and non-fatal warnings found in a challenge file."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
