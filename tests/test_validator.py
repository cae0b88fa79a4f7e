"""Tests for arrangement validation, placement checks and solution checks."""
import json

import pytest

from mirror_engine.contracts import Face, TilePlacement, TileType, ValidationVerdict
from mirror_engine.validator import (
    tile_in_area,
    validate,
    validate_placement,
    validate_solution,
    validate_with_trace,
)


def _tile(x, y, tile_type="A", rotation=0.0):
    return TilePlacement(TileType(tile_type), Face.FRONT, float(x), float(y), float(rotation))


class TestScenarios:
    """Reference arrangements on the default board."""

    def test_single_touching_tile_is_valid(self, area, touching_tile):
        verdict = validate([touching_tile], area)
        assert verdict == ValidationVerdict(
            is_valid=True,
            touches_mirror=True,
            enters_mirror=False,
            has_tile_overlaps=False,
            has_reflection_overlaps=False,
            tiles_connected=True,
            tiles_in_area=True,
        )

    def test_moving_off_the_mirror_invalidates(self, area, touching_tile):
        verdict = validate([touching_tile.moved(-200, 0)], area)
        assert not verdict.is_valid
        assert not verdict.touches_mirror
        # a lone tile is only connected through the mirror
        assert not verdict.tiles_connected
        assert not verdict.enters_mirror
        assert not verdict.has_tile_overlaps
        assert not verdict.has_reflection_overlaps
        assert verdict.tiles_in_area

    def test_horizontal_pair_is_valid(self, area, horizontal_pair):
        verdict = validate(horizontal_pair, area)
        assert verdict.is_valid
        assert verdict.tiles_connected

    def test_vertical_tower_is_valid(self, area):
        assert validate([_tile(330, 400), _tile(330, 208)], area).is_valid

    def test_l_shape_is_valid(self, area, l_shape):
        assert validate(l_shape, area).is_valid

    def test_shallow_contact_is_accepted(self, area):
        verdict = validate([_tile(330, 300), _tile(90, 300)], area)
        assert verdict.is_valid

    def test_significant_overlap_is_rejected(self, area):
        verdict = validate([_tile(330, 300), _tile(230, 300)], area)
        assert verdict.has_tile_overlaps
        assert not verdict.is_valid

    def test_crossing_the_mirror_is_rejected(self, area):
        verdict = validate([_tile(340, 300)], area)
        assert verdict.enters_mirror
        assert not verdict.touches_mirror
        assert not verdict.tiles_in_area
        assert not verdict.is_valid

    def test_tile_outside_board_is_rejected(self, area, touching_tile):
        verdict = validate([touching_tile, _tile(touching_tile.x, 580)], area)
        assert not verdict.tiles_in_area
        assert not verdict.is_valid

    def test_disconnected_tile_is_rejected(self, area, touching_tile):
        verdict = validate([touching_tile, _tile(0, 150)], area)
        assert verdict.touches_mirror
        assert not verdict.tiles_connected
        assert not verdict.is_valid

    def test_empty_arrangement(self, area):
        verdict = validate([], area)
        assert not verdict.is_valid
        assert not verdict.touches_mirror
        assert verdict.tiles_connected
        assert verdict.tiles_in_area

    def test_validation_is_idempotent(self, area, l_shape):
        assert validate(l_shape, area) == validate(l_shape, area)

    def test_tile_in_area_checks_reflection(self, area, touching_tile):
        assert tile_in_area(touching_tile, area)
        assert not tile_in_area(_tile(-100, 300), area)


class TestTrace:
    """Structured diagnostics returned next to the verdict."""

    @pytest.mark.parametrize(
        "tiles",
        [
            [],
            [_tile(330, 300)],
            [_tile(130, 300)],
            [_tile(330, 300), _tile(74, 300)],
            [_tile(330, 300), _tile(230, 300)],
            [_tile(330, 400), _tile(74, 400), _tile(74, 150)],
        ],
    )
    def test_trace_verdict_matches_validate(self, area, tiles):
        verdict, _ = validate_with_trace(tiles, area)
        assert verdict == validate(tiles, area)

    def test_one_entry_per_pair_and_tile(self, area, l_shape):
        _, trace = validate_with_trace(l_shape, area)
        assert [(p.first, p.second) for p in trace.pairs] == [(0, 1), (0, 2), (1, 2)]
        assert [t.index for t in trace.tiles] == [0, 1, 2]
        assert sorted(trace.visited) == [0, 1, 2]

    def test_pair_measurements(self, area):
        _, trace = validate_with_trace([_tile(330, 300), _tile(230, 300)], area)
        pair = trace.pairs[0]
        assert pair.significant
        assert pair.overlaps
        assert not pair.touching
        assert pair.penetration > 15
        assert pair.intersection_area > 0
        assert trace.significant_pairs() == [(0, 1)]

    def test_tile_measurements(self, area, touching_tile):
        _, trace = validate_with_trace([touching_tile], area)
        diag = trace.tiles[0]
        assert diag.touches_mirror
        assert not diag.enters_mirror
        assert diag.in_area
        assert diag.bbox.right == 700

    def test_trace_is_json_serialisable(self, area, horizontal_pair):
        _, trace = validate_with_trace(horizontal_pair, area)
        payload = json.loads(json.dumps(trace.to_dict()))
        assert len(payload["pairs"]) == 1
        assert payload["tiles"][0]["bbox"]["right"] == 700


class TestPlacement:
    """Single-tile drop checks."""

    def test_clean_drop(self, area, touching_tile):
        assert validate_placement(touching_tile, [], area) == []

    def test_drop_against_neighbour(self, area, horizontal_pair):
        assert validate_placement(horizontal_pair[1], [horizontal_pair[0]], area) == []

    def test_drop_into_mirror(self, area):
        codes = [i.code for i in validate_placement(_tile(340, 300), [], area)]
        assert codes == ["BOUNDARY_COLLISION", "MIRROR_COLLISION"]

    def test_drop_onto_other_tile(self, area, touching_tile):
        issues = validate_placement(_tile(230, 300), [touching_tile], area)
        assert [i.code for i in issues] == ["PIECE_COLLISION"]
        assert issues[0].tile_index == 0
        assert issues[0].severity == "error"


class TestSolution:
    """Checking player tiles against a challenge."""

    def test_matching_solution(self, area, horizontal_pair):
        report = validate_solution(horizontal_pair, horizontal_pair, area)
        assert report.is_valid
        assert report.issues == []
        assert report.verdict.is_valid
        assert report.summary() == "Challenge solved."

    def test_tray_tiles_are_ignored(self, area, touching_tile):
        tray = _tile(50, 650)
        report = validate_solution([touching_tile, tray], [touching_tile], area)
        assert report.is_valid

    def test_nothing_placed(self, area, touching_tile):
        report = validate_solution([_tile(50, 650)], [touching_tile], area)
        assert not report.is_valid
        assert report.codes() == ["NO_PIECES_PLACED"]
        assert report.verdict is None

    def test_wrong_count(self, area, touching_tile, horizontal_pair):
        report = validate_solution([touching_tile], horizontal_pair, area)
        assert report.codes() == ["WRONG_PIECE_COUNT", "WRONG_PIECE_TYPES"]

    def test_count_follows_pieces_needed(self, area, horizontal_pair):
        report = validate_solution(horizontal_pair, horizontal_pair, area, pieces_needed=3)
        assert report.codes() == ["WRONG_PIECE_COUNT"]
        assert report.issues[0].message == "3 tiles are required, but 2 are placed"

    def test_wrong_types(self, area, touching_tile):
        b_tile = _tile(650, 300, "B")
        report = validate_solution([b_tile], [touching_tile], area)
        assert report.codes() == ["WRONG_PIECE_TYPES"]

    def test_rule_failures_are_reported(self, area, touching_tile):
        report = validate_solution([_tile(130, 300)], [touching_tile], area)
        assert report.codes() == ["PIECES_NOT_CONNECTED", "NO_MIRROR_TOUCH"]
        assert report.summary().splitlines() == [
            "Tiles must be connected to each other",
            "At least one tile must touch the mirror",
        ]

    def test_overlap_and_mirror_failures(self, area, touching_tile):
        tiles = [_tile(340, 300), _tile(240, 300)]
        report = validate_solution(tiles, [touching_tile, touching_tile], area)
        assert "PIECE_OVERLAPS" in report.codes()
        assert "ENTERS_MIRROR" in report.codes()
