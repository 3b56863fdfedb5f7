"""Tests for ground-plane geometry helpers."""

from __future__ import annotations

import math
import random

import pytest

from code_racer.errors import DegenerateGeometry
from code_racer.track.geometry import (
    center_for_next_curve,
    center_for_next_straight,
    cross_y,
    curve_end_state,
    curve_endpoints,
    direction_from_heading,
    heading_from_direction,
    left_of,
    normalize,
    normalize_heading,
    quantize,
    quantize_heading,
    right_of,
    segment_end_position,
    straight_endpoints,
    turn_delta,
)
from code_racer.track.models import CurvePiece, StraightPiece, Vector2D

NORTH = Vector2D(0.0, 1.0)


def _close(a: Vector2D, b: Vector2D, tol: float = 1e-6) -> bool:
    return math.hypot(a.x - b.x, a.z - b.z) <= tol


# ---------------------------------------------------------------------------
# Quantization
# ---------------------------------------------------------------------------


def test_quantize_rounds_to_two_decimals():
    assert quantize(1.23456) == 1.23
    assert quantize(-7.005001) == -7.01


def test_quantize_folds_negative_zero():
    value = quantize(-0.001)
    assert value == 0.0
    assert math.copysign(1.0, value) == 1.0


def test_quantize_is_idempotent():
    rng = random.Random(3)
    for _ in range(500):
        x = rng.uniform(-1000, 1000)
        assert quantize(quantize(x)) == quantize(x)
        assert quantize_heading(quantize_heading(x)) == quantize_heading(x)


def test_normalize_heading_wraps_into_range():
    assert normalize_heading(-math.pi / 2) == pytest.approx(3 * math.pi / 2)
    assert normalize_heading(5 * math.pi) == pytest.approx(math.pi)
    assert quantize_heading(2 * math.pi) == 0.0


# ---------------------------------------------------------------------------
# Vector primitives
# ---------------------------------------------------------------------------


def test_heading_zero_faces_positive_z():
    assert _close(direction_from_heading(0.0), NORTH)


def test_heading_from_direction_inverts_direction_from_heading():
    for heading in (0.0, 0.5, math.pi / 2, math.pi, 4.0, 3 * math.pi / 2):
        assert heading_from_direction(direction_from_heading(heading)) == pytest.approx(heading)


def test_right_turn_ends_on_right_hand_side():
    after = direction_from_heading(0.0 + turn_delta(True))
    assert _close(after, right_of(NORTH))
    assert _close(right_of(NORTH), Vector2D(-1.0, 0.0))


def test_left_turn_ends_on_left_hand_side():
    after = direction_from_heading(0.0 + turn_delta(False))
    assert _close(after, left_of(NORTH))


def test_cross_y_sign_matches_sides():
    assert cross_y(NORTH, right_of(NORTH)) < 0
    assert cross_y(NORTH, left_of(NORTH)) > 0
    assert cross_y(NORTH, Vector2D(0.0, -5.0)) == 0


def test_normalize_zero_vector_raises():
    with pytest.raises(DegenerateGeometry):
        normalize(Vector2D(0.0, 0.0))


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


def test_straight_placement():
    center = center_for_next_straight(Vector2D(0.0, 0.0), NORTH, 10)
    assert center == Vector2D(0.0, 5.0)
    assert segment_end_position(center, NORTH, 5) == Vector2D(0.0, 10.0)


def test_curve_center_sits_inside_the_turn():
    cursor = Vector2D(0.0, 10.0)
    assert center_for_next_curve(cursor, NORTH, 8, True) == Vector2D(-8.0, 10.0)
    assert center_for_next_curve(cursor, NORTH, 8, False) == Vector2D(8.0, 10.0)


def test_right_curve_exit():
    exit_state = curve_end_state(Vector2D(-8.0, 10.0), 0.0, 8, True)
    assert exit_state.position == Vector2D(-8.0, 18.0)
    assert exit_state.rotation_y == quantize_heading(3 * math.pi / 2)
    assert _close(exit_state.direction, Vector2D(-1.0, 0.0))


def test_left_curve_exit():
    exit_state = curve_end_state(Vector2D(8.0, 10.0), 0.0, 8, False)
    assert exit_state.position == Vector2D(8.0, 18.0)
    assert exit_state.rotation_y == quantize_heading(math.pi / 2)
    assert _close(exit_state.direction, Vector2D(1.0, 0.0))


def test_quarter_exit_is_center_plus_radius_along_entry_heading():
    rng = random.Random(11)
    for _ in range(100):
        heading = quantize_heading(rng.uniform(0, 2 * math.pi))
        center = Vector2D(quantize(rng.uniform(-50, 50)), quantize(rng.uniform(-50, 50)))
        exit_state = curve_end_state(center, heading, 6, rng.random() > 0.5)
        d = direction_from_heading(heading)
        expected = Vector2D(center.x + 6 * d.x, center.z + 6 * d.z)
        assert math.hypot(exit_state.position.x - expected.x,
                          exit_state.position.z - expected.z) < 0.01


def test_half_turn_exit():
    exit_state = curve_end_state(Vector2D(-8.0, 10.0), 0.0, 8, True, angle_deg=180)
    assert exit_state.position == Vector2D(-16.0, 10.0)
    assert exit_state.rotation_y == quantize_heading(math.pi)


# ---------------------------------------------------------------------------
# Endpoints from stored pieces
# ---------------------------------------------------------------------------


def test_straight_endpoints():
    piece = StraightPiece(Vector2D(0.0, 5.0), 0.0, 10.0, 5.0, "#3b36e2", "Start")
    start, end = straight_endpoints(piece)
    assert _close(start, Vector2D(0.0, 0.0))
    assert _close(end, Vector2D(0.0, 10.0))


def test_curve_endpoints():
    piece = CurvePiece(Vector2D(-8.0, 10.0), 0.0, 8.0, 5.0, "right", "#FFA500", "Curve 1")
    start, end = curve_endpoints(piece)
    assert _close(start, Vector2D(0.0, 10.0))
    assert _close(end, Vector2D(-8.0, 18.0))
