"""Piece-by-piece track layout.

The walker keeps a :class:`~code_racer.track.models.TrackState` cursor and
lays pieces from it:

1. a starting straight of ``segment_length`` centred half a length ahead of
   the origin;
2. ``segment_count`` steps, each an optional curve (probability
   ``curve_frequency``) followed by a straight from
   :data:`~code_racer.track.parameters.STRAIGHT_LENGTH_OPTIONS`.

The walker never closes the loop; that is
:class:`~code_racer.track.closer.LoopCloser`'s job.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from code_racer.track.geometry import (
    center_for_next_curve,
    center_for_next_straight,
    curve_end_state,
    segment_end_position,
)
from code_racer.track.models import CurvePiece, Piece, StraightPiece, TrackState
from code_racer.track.parameters import (
    BLUE,
    GenerationParameters,
    curve_direction,
    segment_color,
    straight_length_option,
)
from code_racer.track.pieces import PieceFactory
from code_racer.track.randomness import RandomSource
from code_racer.track.tracing import TraceObserver, logging_observer

MAX_SAME_DIRECTION_CURVES = 2

# ---------------------------------------------------------------------------
# Laying single pieces
# ---------------------------------------------------------------------------


def lay_straight(
    factory: PieceFactory,
    state: TrackState,
    length: float,
    color: str = BLUE,
    name: str = "Segment",
) -> StraightPiece:
    """Build a straight starting at the cursor and advance the cursor to its end."""
    center = center_for_next_straight(state.position, state.direction, length)
    piece = factory.straight(center, state.rotation_y, length, color=color, name=name)
    state.position = segment_end_position(piece.position, state.direction, piece.length / 2.0)
    return piece


def lay_curve(
    factory: PieceFactory,
    state: TrackState,
    radius: float,
    is_right_turn: bool,
    name: str = "Curve",
) -> CurvePiece:
    """Build a quarter turn entered at the cursor and advance past its exit."""
    center = center_for_next_curve(state.position, state.direction, radius, is_right_turn)
    piece = factory.curve(center, state.rotation_y, radius, is_right_turn, name=name)
    exit_state = curve_end_state(piece.position, piece.rotation_y, piece.radius, is_right_turn)
    state.position = exit_state.position
    state.rotation_y = exit_state.rotation_y
    state.direction = exit_state.direction
    return piece


# ---------------------------------------------------------------------------
# Walker
# ---------------------------------------------------------------------------


class TrackWalker:
    """Lay the open (not yet closed) part of a track.

    Args:
        factory: Builds quantized pieces of the track's width.
        rng: Source for the curve coin flips, fallback turn directions and
            straight lengths.
        observer: Receives ``(event, fields)`` trace events.
    """

    def __init__(
        self,
        factory: PieceFactory,
        rng: RandomSource,
        observer: TraceObserver | None = None,
    ) -> None:
        self._factory = factory
        self._rng = rng
        self._observe = observer or logging_observer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(
        self,
        state: TrackState,
        params: GenerationParameters,
        contents: Sequence[Any] | None = None,
        languages: Mapping[str, float] | None = None,
    ) -> list[Piece]:
        """Lay the starting straight and every step; mutates *state*.

        Returns:
            Pieces in traversal order.  *state* is left at the end of the
            last piece, ready for loop closure.
        """
        pieces: list[Piece] = []
        straight_count = 0
        curve_count = 0

        start = lay_straight(
            self._factory, state, params.segment_length, color=BLUE, name="Start"
        )
        pieces.append(start)
        straight_count += 1
        self._observe("start", {"length": start.length, "cursor": state.position})

        for step in range(params.segment_count):
            if self._rng.next_float() < params.curve_frequency:
                is_right = self.apply_alternation(
                    state, curve_direction(step, contents, self._rng)
                )
                curve_count += 1
                curve = lay_curve(
                    self._factory,
                    state,
                    params.curve_radius,
                    is_right,
                    name=f"Curve {curve_count}",
                )
                pieces.append(curve)
                self._observe(
                    "curve",
                    {"step": step, "direction": curve.direction, "cursor": state.position},
                )

            length = straight_length_option(self._rng)
            straight = lay_straight(
                self._factory,
                state,
                length,
                color=segment_color(step, languages),
                name=f"Segment {straight_count}",
            )
            pieces.append(straight)
            straight_count += 1
            self._observe(
                "straight", {"step": step, "length": length, "cursor": state.position}
            )

        self._observe(
            "walk_complete",
            {"pieces": len(pieces), "cursor": state.position, "rotation_y": state.rotation_y},
        )
        return pieces

    def apply_alternation(self, state: TrackState, is_right: bool) -> bool:
        """Apply the turn alternation rule through this walker's observer."""
        return alternate_direction(state, is_right, self._observe)


def alternate_direction(
    state: TrackState,
    is_right: bool,
    observer: TraceObserver | None = None,
) -> bool:
    """Return the turn direction to use, flipping a third same-direction curve.

    Updates the streak bookkeeping on *state*.  Shared by the walker and the
    loop closer so the rule holds across every curve of a track.
    """
    if state.last_curve_direction is not None:
        if state.last_curve_direction == is_right:
            state.same_direction_count += 1
            if state.same_direction_count >= MAX_SAME_DIRECTION_CURVES:
                is_right = not is_right
                state.same_direction_count = 0
                (observer or logging_observer)(
                    "forced_direction_change", {"is_right": is_right}
                )
        else:
            state.same_direction_count = 0
    state.last_curve_direction = is_right
    return is_right
