"""Tests for the continuous collision module and its configuration."""

import logging

import pytest
from omegaconf.errors import ConfigKeyError, ValidationError

from ga.algebra import EPSILON
from ga.multivector import Multivector
from ga.validation import DomainError
from collision import (
    CollisionConfig, Segment, collide_radius_radius, collide_radius_segment,
    load_config, quadratic_roots, shortest_segment,
)


@pytest.fixture
def wall():
    return Segment([-10, 0], [10, 0])


# ── Quadratic solver ──────────────────────────────────────────────────

class TestQuadraticRoots:

    def test_constant(self):
        assert quadratic_roots(0, 0, 1) == []

    def test_linear(self):
        assert quadratic_roots(0, 2, -4) == [2]

    def test_double(self):
        assert quadratic_roots(1, -2, 1) == [1]

    def test_imaginary(self):
        assert quadratic_roots(1, 0, 1) == []

    def test_two_roots(self):
        assert sorted(quadratic_roots(1, 0, -4)) == [-2, 2]

    def test_tolerance_from_config(self):
        config = CollisionConfig(degenerate_tolerance=1e-3)
        assert quadratic_roots(1e-4, 2, -4, config) == [2]


# ── Round objects ─────────────────────────────────────────────────────

class TestRadiusRadius:

    def test_head_on(self):
        assert collide_radius_radius([-3, 0], [-1, 0], 1, [3, 0], [1, 0], 1) == pytest.approx(1.0)

    def test_moving_apart_from_contact(self):
        assert collide_radius_radius([0, 0], [0, 0], 1, [1.5, 0], [3, 0], 1) is None

    def test_approaching_while_overlapping(self):
        assert collide_radius_radius([0, 0], [0, 0], 1, [1.5, 0], [1, 0], 1) == 0

    def test_resting_overlap(self):
        assert collide_radius_radius([0, 0], [0, 0], 1, [1.5, 0], [1.5, 0], 1) is None

    def test_overlap_carried_together(self):
        assert collide_radius_radius([0, 0], [5, 0], 1, [1.5, 0], [6.5, 0], 1) is None

    def test_overlap_closing_past_center(self):
        # Ends farther apart than it started but was closing at the start
        assert collide_radius_radius([0, 0], [0, 0], 1, [0.5, 0], [-3, 0], 1) == 0

    def test_parallel_motion(self):
        assert collide_radius_radius([0, 0], [1, 0], 1, [0, 5], [1, 5], 1) is None

    def test_pass_through(self):
        t = collide_radius_radius([-5, 0], [5, 0], 1, [0, 0], [0, 0], 1)
        assert t == pytest.approx(0.3)

    def test_too_far(self):
        assert collide_radius_radius([0, 0], [1, 0], 1, [5, 0], [5, 0], 1) is None

    def test_miss(self):
        assert collide_radius_radius([-5, 3], [5, 3], 1, [0, 0], [0, 0], 1) is None

    def test_accepts_multivectors(self):
        t = collide_radius_radius(Multivector('-3o1'), Multivector('-o1'), 1,
                                  Multivector('3o1'), Multivector('o1'), 1)
        assert t == pytest.approx(1.0)

    def test_three_dimensions(self):
        t = collide_radius_radius([0, 0, -5], [0, 0, 5], 0.5, [0, 0, 0], [0, 0, 0], 0.5)
        assert t == pytest.approx(0.4)

    def test_ignored_contact_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="ripple")
        collide_radius_radius([0, 0], [0, 0], 1, [1.5, 0], [3, 0], 1)
        assert any("separating" in record.getMessage() for record in caplog.records)


# ── Segments ──────────────────────────────────────────────────────────

class TestSegment:

    def test_coerces_points(self):
        segment = Segment([0, 0], [3, 4], 2)
        assert isinstance(segment.start, Multivector)
        assert segment.end == Multivector([3, 4])
        assert segment.width == 2.0

    def test_length(self):
        segment = Segment([0, 0], [3, 4])
        assert segment.quadrance() == pytest.approx(25.0)
        assert segment.length() == pytest.approx(5.0)
        assert segment.direction == Multivector([3, 4])

    def test_coerce_mapping(self):
        assert Segment.coerce({'start': [0, 0], 'end': [1, 0]}) == Segment([0, 0], [1, 0])
        short = Segment.coerce({'s': [0, 0], 'e': [1, 0], 'width': 3})
        assert short.width == 3.0

    def test_coerce_rejects(self):
        with pytest.raises(TypeError):
            Segment.coerce(5)

    def test_immutable(self):
        segment = Segment([0, 0], [1, 0])
        with pytest.raises(AttributeError):
            segment.width = 1

    def test_shortest_segment(self, wall):
        assert shortest_segment([0, 5], wall) == Multivector([0, -5])
        assert shortest_segment([3, -2], wall) == Multivector([0, 2])

    def test_shortest_segment_beyond_end(self, wall):
        v = Multivector([30, 5])
        assert v + shortest_segment(v, wall) == Multivector([30, 0])

    def test_shortest_segment_zero_length(self):
        with pytest.raises(DomainError):
            shortest_segment([0, 5], Segment([1, 1], [1, 1]))


class TestRadiusSegment:

    def test_crossing(self, wall):
        assert collide_radius_segment([0, 5], [0, -5], 1, wall) == pytest.approx(0.4)

    def test_short_segment(self):
        segment = Segment([-1, 0], [1, 0])
        # Center reaches y = -1 at t = 0.4
        assert collide_radius_segment([0, -5], [0, 5], 1, segment) == pytest.approx(0.4)

    def test_mapping_segment(self):
        segment = {'start': [-10, 0], 'end': [10, 0]}
        assert collide_radius_segment([0, 5], [0, -5], 1, segment) == pytest.approx(0.4)

    def test_width(self):
        segment = Segment([-10, 0], [10, 0], width=2)
        # Combined radius 2, contact at distance 2 from the line
        assert collide_radius_segment([0, 5], [0, -5], 1, segment) == pytest.approx(0.3)

    def test_passes_beyond_end(self, wall):
        assert collide_radius_segment([30, 5], [30, -5], 1, wall) is None

    def test_parallel(self, wall):
        assert collide_radius_segment([-5, 3], [5, 3], 1, wall) is None

    def test_zero_length_segment(self):
        point = Segment([0, 0], [0, 0], width=2)
        assert collide_radius_segment([-5, 0], [5, 0], 1, point) == pytest.approx(0.3)

    def test_approaching_end(self, wall):
        assert collide_radius_segment([11.5, 0], [10.5, 0], 1, wall) == pytest.approx(0.5)

    def test_leaving_end(self, wall):
        assert collide_radius_segment([10.5, 0], [12, 0], 1, wall) is None

    def test_moving_away_from_line(self, wall):
        assert collide_radius_segment([0, 0.5], [0, 3], 1, wall) is None

    def test_pushing_into_line(self, wall):
        assert collide_radius_segment([0, 0.5], [0, -3], 1, wall) == 0

    def test_sliding_along_line(self, wall):
        assert collide_radius_segment([-5, 0.5], [5, 0.5], 1, wall) is None

    def test_resting_on_line(self, wall):
        assert collide_radius_segment([0, 0.5], [0, 0.5], 1, wall) is None


# ── Configuration ─────────────────────────────────────────────────────

class TestConfig:

    def test_defaults(self):
        config = load_config()
        assert config.snap_tolerance == pytest.approx(EPSILON)
        assert config.degenerate_tolerance == pytest.approx(EPSILON)

    def test_overrides(self):
        config = load_config(snap_tolerance=1e-6)
        assert config.snap_tolerance == 1e-6
        assert config.degenerate_tolerance == pytest.approx(EPSILON)

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "collision.yaml"
        path.write_text("snap_tolerance: 0.01\n")
        config = load_config(str(path))
        assert config.snap_tolerance == 0.01

    def test_missing_file_uses_schema(self, tmp_path):
        config = load_config(str(tmp_path / "absent.yaml"))
        assert config == CollisionConfig()

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            load_config(snap_tolerance="loose")

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "collision.yaml"
        path.write_text("bounce: 0.5\n")
        with pytest.raises(ConfigKeyError):
            load_config(str(path))

    def test_snap_tolerance_changes_result(self):
        # Passes through the circle, first touching just after the start
        args = ([0, 0], [0, 0], 1, [-1.01, 0], [10, 0], 0)
        assert collide_radius_radius(*args) == pytest.approx(0.01 / 11.01)
        config = CollisionConfig(snap_tolerance=0.01)
        assert collide_radius_radius(*args, config=config) is None
