"""Tests for the MirrorEngine facade and configuration objects."""
import pytest

from mirror_engine import (
    Aligned,
    AreaConfig,
    LayoutSuccess,
    MirrorEngine,
    PackingArea,
    RelativePlacement,
    TileType,
    Tolerances,
    builtin_challenges,
)
from mirror_engine.challenges import Challenge
from mirror_engine.contracts import Face


class TestConfiguration:
    """Validated, read-only configuration."""

    def test_defaults(self):
        engine = MirrorEngine()
        assert engine.area == AreaConfig(700, 600, 700, 100)
        assert engine.tolerances == Tolerances()

    @pytest.mark.parametrize("field", ["width", "height", "mirror_line_x", "tile_size"])
    def test_area_rejects_non_positive(self, field):
        with pytest.raises(ValueError, match=field):
            AreaConfig(**{field: 0})

    def test_tolerances_reject_negative(self):
        with pytest.raises(ValueError):
            Tolerances(gap_epsilon=-1)

    def test_tolerance_tiers_must_be_ordered(self):
        with pytest.raises(ValueError):
            Tolerances(contact_epsilon=20, significant_overlap=15)
        with pytest.raises(ValueError):
            Tolerances(snap_target_contact=5, snap_max_contact=3)

    def test_area_is_frozen(self, area):
        with pytest.raises(AttributeError):
            area.width = 10

    def test_describe(self, engine):
        snapshot = engine.describe()
        assert snapshot["area"]["mirror_line_x"] == 700
        assert snapshot["tolerances"]["significant_overlap"] == 15


class TestFacade:
    """The engine forwards to the rule modules with its own area."""

    def test_geometry(self, engine, touching_tile):
        assert engine.vertices(touching_tile).shape == (7, 2)
        assert len(engine.edges(touching_tile)) == 7
        assert engine.bounding_box(touching_tile).right == 700
        assert engine.touches_mirror(touching_tile)
        assert engine.touching_mirror_x(300) == 330
        assert engine.reflect(touching_tile).x == 650

    def test_pairwise(self, engine, horizontal_pair):
        assert engine.touch(*horizontal_pair)
        assert engine.min_distance(*horizontal_pair) == pytest.approx(0.0, abs=1e-9)
        assert engine.penetration_depth(*horizontal_pair) == pytest.approx(0.0, abs=1e-9)
        assert engine.overlap(*horizontal_pair)

    def test_validation(self, engine, l_shape):
        assert engine.connected(l_shape)
        assert engine.validate(l_shape).is_valid
        verdict, trace = engine.validate_with_trace(l_shape)
        assert verdict.is_valid
        assert len(trace.pairs) == 3
        assert engine.validate_placement(l_shape[0], l_shape[1:]) == []

    def test_check_solution(self, engine, area):
        challenge = builtin_challenges(area)[2]
        report = engine.check_solution(list(challenge.pieces), challenge)
        assert report.is_valid

    def test_check_solution_counts_pieces_needed(self, engine, horizontal_pair):
        challenge = Challenge(9, "Pair", "", horizontal_pair, pieces_needed=3)
        report = engine.check_solution(horizontal_pair, challenge)
        assert report.codes() == ["WRONG_PIECE_COUNT"]

    def test_tolerances_flow_through(self, area):
        strict = MirrorEngine(area, Tolerances(significant_overlap=5))
        tiles = [
            strict.to_absolute(RelativePlacement(TileType.A, Face.FRONT, 0.0, 0.0)),
            strict.to_absolute(RelativePlacement(TileType.A, Face.FRONT, -240.0, 0.0)),
        ]
        assert MirrorEngine(area).validate(tiles).is_valid
        assert strict.validate(tiles).has_tile_overlaps

    def test_snap(self, engine):
        result = engine.snap(engine.to_absolute(RelativePlacement(TileType.A, Face.FRONT, -10.0, 0.0)), [])
        assert isinstance(result, Aligned)
        assert result.tile.x == 330

    def test_layout(self, engine):
        result = engine.layout(1, PackingArea(0, 0, 400, 300), [TileType.A], incremental_attempts=0)
        assert isinstance(result, LayoutSuccess)
        assert result.strategy == "closed_form"

    def test_relative_round_trip(self, engine, touching_tile):
        rel = engine.to_relative(touching_tile)
        assert (rel.x, rel.y) == (0, 0)
        assert engine.to_absolute(rel) == touching_tile
