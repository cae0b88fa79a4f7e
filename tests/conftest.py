"""
Shared test fixtures for the mirror tile rules engine.

Default board: 700 x 600 play area, mirror at x=700, 100-unit tiles
(one outline unit = 128). A rotation-0 type-A tile touches the mirror at
x=330 and its horizontal neighbour sits 256 to the left.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mirror_engine.contracts import AreaConfig, Face, TilePlacement, TileType
from mirror_engine.engine import MirrorEngine

TOUCH_X = 330.0
SIDE = 256.0
STACK = 192.0


def tile(x, y, tile_type="A", rotation=0.0, face="front"):
    return TilePlacement(
        type=TileType(tile_type), face=Face(face), x=float(x), y=float(y), rotation=float(rotation)
    )


@pytest.fixture
def area():
    """The default 700x600 board with the mirror on its right edge."""
    return AreaConfig(width=700, height=600, mirror_line_x=700, tile_size=100)


@pytest.fixture
def engine(area):
    return MirrorEngine(area)


@pytest.fixture
def touching_tile():
    """Type-A tile whose bounding box right edge sits on the mirror."""
    return tile(TOUCH_X, 300)


@pytest.fixture
def horizontal_pair():
    return [tile(TOUCH_X, 300), tile(TOUCH_X - SIDE, 300)]


@pytest.fixture
def l_shape():
    """One tile on the mirror, one to its left, and one resting on that."""
    return [
        tile(TOUCH_X, 400),
        tile(TOUCH_X - SIDE, 400),
        tile(TOUCH_X - SIDE, 400 - STACK),
    ]
