"""Tests for the tile outline model."""
import math

import numpy as np
import pytest

from mirror_engine.contracts import Face, TilePlacement, TileType
from mirror_engine.shapes import (
    bounding_box,
    edges,
    local_vertices,
    tile_polygon,
    tile_unit,
    vertices,
)


def _tile(x, y, tile_type="A", rotation=0.0, face="front"):
    return TilePlacement(TileType(tile_type), Face(face), float(x), float(y), float(rotation))


class TestVertices:
    """World-space vertex placement."""

    def test_unit_scale(self):
        assert tile_unit(100) == pytest.approx(128.0)

    def test_type_a_at_rotation_zero(self, area):
        pts = vertices(_tile(330, 300), area)
        expected = [
            (380, 350), (508, 350), (636, 350), (700, 286),
            (636, 222), (572, 158), (508, 222),
        ]
        assert pts.shape == (7, 2)
        np.testing.assert_allclose(pts, expected)

    def test_type_b_is_horizontal_flip(self, area):
        a = local_vertices(_tile(0, 0, "A"), area)
        b = local_vertices(_tile(0, 0, "B"), area)
        np.testing.assert_allclose(b[:, 0], -a[:, 0])
        np.testing.assert_allclose(b[:, 1], a[:, 1])

    def test_face_does_not_change_geometry(self, area):
        front = vertices(_tile(120, 80, rotation=135, face="front"), area)
        back = vertices(_tile(120, 80, rotation=135, face="back"), area)
        np.testing.assert_array_equal(front, back)

    def test_rotation_about_frame_center(self, area):
        """A 90-degree turn maps local (x, y) to (-y, x) around the center."""
        base = local_vertices(_tile(0, 0), area)
        turned = local_vertices(_tile(0, 0, rotation=90), area)
        np.testing.assert_allclose(turned[:, 0], -base[:, 1], atol=1e-9)
        np.testing.assert_allclose(turned[:, 1], base[:, 0], atol=1e-9)


class TestBoundingBox:
    """Bounding box agrees with the vertex extremes."""

    def test_type_a_touching_tile(self, area):
        box = bounding_box(_tile(330, 300), area)
        assert box.left == 380
        assert box.right == 700
        assert box.top == 158
        assert box.bottom == 350
        assert box.width == pytest.approx(320)
        assert box.height == pytest.approx(192)

    def test_type_b_extends_left_of_center(self, area):
        box = bounding_box(_tile(650, 300, "B"), area)
        assert box.left == 380
        assert box.right == 700

    @pytest.mark.parametrize("tile_type", ["A", "B"])
    @pytest.mark.parametrize("rotation", [0, 45, 90, 135, 180, 225, 270, 315])
    def test_extremes_match_vertices_exactly(self, area, tile_type, rotation):
        t = _tile(123.4, 210.7, tile_type, rotation)
        pts = vertices(t, area)
        box = bounding_box(t, area)
        assert box.left == pts[:, 0].min()
        assert box.right == pts[:, 0].max()
        assert box.top == pts[:, 1].min()
        assert box.bottom == pts[:, 1].max()
        assert box.left <= box.right
        assert box.top <= box.bottom


class TestEdges:
    """Edge list, including the closing edge."""

    def test_seven_edges_close_the_outline(self, area):
        es = edges(_tile(330, 300), area)
        assert len(es) == 7
        assert es[-1].end == es[0].start
        for prev, nxt in zip(es, es[1:]):
            assert prev.end == nxt.start

    def test_bottom_edge_is_straight(self, area):
        first = edges(_tile(330, 300), area)[0]
        assert first.kind == "straight"
        assert first.length == pytest.approx(128.0)
        assert first.direction == pytest.approx((1.0, 0.0))
        assert first.midpoint == pytest.approx((444.0, 350.0))

    def test_tab_edge_is_diagonal(self, area):
        tab = edges(_tile(330, 300), area)[2]
        assert tab.kind == "diagonal"
        assert tab.length == pytest.approx(64 * math.sqrt(2))
        assert tab.direction == pytest.approx((math.sqrt(0.5), -math.sqrt(0.5)))

    def test_directions_are_unit_length(self, area):
        for edge in edges(_tile(50, 60, "B", 225), area):
            assert math.hypot(*edge.direction) == pytest.approx(1.0)


class TestPolygon:
    def test_area_is_two_square_units(self, area):
        poly = tile_polygon(_tile(330, 300), area)
        assert poly.is_valid
        assert poly.area == pytest.approx(2 * 128.0 ** 2)
