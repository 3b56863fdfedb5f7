"""Ground-plane geometry for laying pieces end to end.

Conventions:

* Positions are :class:`Vector2D` on the ``x``/``z`` plane; ``y`` is always 0.
* A heading ``rotation_y`` maps to the unit direction
  ``(sin(rotation_y), cos(rotation_y))``, so heading 0 faces ``+z``.
* A right turn subtracts π/2 from the heading and a left turn adds π/2.
  Seen from a driver facing ``d = (dx, dz)``, the right-hand side is
  ``(-dz, dx)`` and the left-hand side ``(dz, -dx)``.
* Every position handed back to the generator is quantized with
  :func:`quantize` so that long chains of pieces do not accumulate drift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from code_racer.errors import DegenerateGeometry
from code_racer.track.models import CurvePiece, Piece, StraightPiece, Vector2D

POSITION_DECIMALS = 2
"""Decimal places kept for positions and lengths."""

HEADING_DECIMALS = 6
"""Decimal places kept for headings (radians)."""

TWO_PI = 2.0 * math.pi
QUARTER_TURN_DEG = 90.0

_EPSILON = 1e-12

ORIGIN = Vector2D(0.0, 0.0)

# ---------------------------------------------------------------------------
# Quantization
# ---------------------------------------------------------------------------


def quantize(value: float, decimals: int = POSITION_DECIMALS) -> float:
    """Round *value* to a fixed number of decimals.

    Idempotent: ``quantize(quantize(x)) == quantize(x)``.  Negative zero is
    folded into ``0.0`` so serialized output is stable.
    """
    return round(value, decimals) + 0.0


def quantize_point(point: Vector2D) -> Vector2D:
    return Vector2D(quantize(point.x), quantize(point.z))


def normalize_heading(angle: float) -> float:
    """Wrap *angle* into ``[0, 2π)``."""
    wrapped = angle % TWO_PI
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def quantize_heading(angle: float) -> float:
    """Wrap *angle* into ``[0, 2π)`` and round it to :data:`HEADING_DECIMALS`."""
    heading = round(normalize_heading(angle), HEADING_DECIMALS) + 0.0
    if heading >= TWO_PI:
        heading = 0.0
    return heading


# ---------------------------------------------------------------------------
# Vector primitives
# ---------------------------------------------------------------------------


def offset(point: Vector2D, direction: Vector2D, amount: float) -> Vector2D:
    """Return ``point + direction * amount`` (not quantized)."""
    return Vector2D(point.x + direction.x * amount, point.z + direction.z * amount)


def length_of(vec: Vector2D) -> float:
    return math.hypot(vec.x, vec.z)


def distance(a: Vector2D, b: Vector2D) -> float:
    return math.hypot(b.x - a.x, b.z - a.z)


def normalize(vec: Vector2D) -> Vector2D:
    """Return the unit vector along *vec*.

    Raises:
        DegenerateGeometry: If *vec* has (near) zero length.
    """
    length = length_of(vec)
    if length < _EPSILON:
        raise DegenerateGeometry(f"Cannot normalize zero-length vector {vec}")
    return Vector2D(vec.x / length, vec.z / length)


def direction_from_heading(rotation_y: float) -> Vector2D:
    return Vector2D(math.sin(rotation_y), math.cos(rotation_y))


def heading_from_direction(direction: Vector2D) -> float:
    """Inverse of :func:`direction_from_heading`, wrapped into ``[0, 2π)``."""
    unit = normalize(direction)
    return normalize_heading(math.atan2(unit.x, unit.z))


def right_of(direction: Vector2D) -> Vector2D:
    return Vector2D(-direction.z, direction.x)


def left_of(direction: Vector2D) -> Vector2D:
    return Vector2D(direction.z, -direction.x)


def rotate(vec: Vector2D, delta: float) -> Vector2D:
    """Rotate *vec* so that its heading changes by *delta* radians."""
    cos_d = math.cos(delta)
    sin_d = math.sin(delta)
    return Vector2D(vec.x * cos_d + vec.z * sin_d, vec.z * cos_d - vec.x * sin_d)


def cross_y(direction: Vector2D, target: Vector2D) -> float:
    """``y`` component of ``direction × target`` (both lifted to 3D).

    Negative means *target* lies to the right of *direction*, positive to
    the left.
    """
    return direction.z * target.x - direction.x * target.z


def turn_delta(is_right_turn: bool, angle_deg: float = QUARTER_TURN_DEG) -> float:
    """Heading change for a turn: negative for right, positive for left."""
    delta = math.radians(angle_deg)
    return -delta if is_right_turn else delta


# ---------------------------------------------------------------------------
# Piece placement
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurveExit:
    """Cursor state after traversing a curve."""

    position: Vector2D
    rotation_y: float
    direction: Vector2D


def segment_end_position(start: Vector2D, direction: Vector2D, length: float) -> Vector2D:
    """Advance *length* units from *start* along *direction*.

    Also used with half a length to step from a straight's centre to its end.
    """
    return quantize_point(offset(start, normalize(direction), length))


def center_for_next_straight(cursor: Vector2D, direction: Vector2D, length: float) -> Vector2D:
    """Centre of a straight of *length* that starts at *cursor*."""
    return quantize_point(offset(cursor, normalize(direction), length / 2.0))


def center_for_next_curve(
    cursor: Vector2D,
    direction: Vector2D,
    radius: float,
    is_right_turn: bool,
) -> Vector2D:
    """Centre of the circle for a curve entered at *cursor* facing *direction*.

    The centre sits *radius* units to the inside of the turn.
    """
    unit = normalize(direction)
    perp = right_of(unit) if is_right_turn else left_of(unit)
    return quantize_point(offset(cursor, perp, radius))


def curve_end_state(
    center: Vector2D,
    entry_rotation_y: float,
    radius: float,
    is_right_turn: bool,
    angle_deg: float = QUARTER_TURN_DEG,
) -> CurveExit:
    """Exit position and heading of a curve around *center*.

    The entry point is recovered from *center* (``radius`` units to the
    outside of the turn), then rotated about *center* by the turn angle.  For
    a quarter turn the exit lands at ``center + radius * entry_direction``.
    """
    entry = curve_entry_point(center, entry_rotation_y, radius, is_right_turn)
    delta = turn_delta(is_right_turn, angle_deg)
    spoke = Vector2D(entry.x - center.x, entry.z - center.z)
    exit_spoke = rotate(spoke, delta)
    exit_heading = quantize_heading(entry_rotation_y + delta)
    return CurveExit(
        position=quantize_point(offset(center, exit_spoke, 1.0)),
        rotation_y=exit_heading,
        direction=direction_from_heading(exit_heading),
    )


def curve_entry_point(
    center: Vector2D,
    entry_rotation_y: float,
    radius: float,
    is_right_turn: bool,
) -> Vector2D:
    """Point on the arc where the curve begins (not quantized)."""
    direction = direction_from_heading(entry_rotation_y)
    perp = right_of(direction) if is_right_turn else left_of(direction)
    return offset(center, perp, -radius)


# ---------------------------------------------------------------------------
# Endpoints recomputed from stored pieces
# ---------------------------------------------------------------------------


def straight_endpoints(piece: StraightPiece) -> tuple[Vector2D, Vector2D]:
    """Return ``(start, end)`` of a straight from its own fields."""
    direction = direction_from_heading(piece.rotation_y)
    half = piece.length / 2.0
    return offset(piece.position, direction, -half), offset(piece.position, direction, half)


def curve_endpoints(piece: CurvePiece) -> tuple[Vector2D, Vector2D]:
    """Return ``(start, end)`` of a curve from its own fields."""
    start = curve_entry_point(piece.position, piece.rotation_y, piece.radius, piece.is_right)
    spoke = Vector2D(start.x - piece.position.x, start.z - piece.position.z)
    end = offset(piece.position, rotate(spoke, turn_delta(piece.is_right, piece.angle)), 1.0)
    return start, end


def piece_endpoints(piece: Piece) -> tuple[Vector2D, Vector2D]:
    if isinstance(piece, CurvePiece):
        return curve_endpoints(piece)
    return straight_endpoints(piece)
