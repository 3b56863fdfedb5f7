"""Loop closure: bring the walker's open path back to the origin.

Tiered heuristic, driven by the distance ``d`` from the cursor to the origin:

* ``d < 2 * width``: close enough, no closing curves.
* otherwise: one quarter turn toward the origin.  While the remaining
  distance still exceeds ``4 * width`` (bounded by ``max_passes``), a
  connector straight of ``min(0.7 * remaining, connector_cap)`` and another
  quarter turn toward the origin follow.

In every tier a finishing straight aimed straight at the origin absorbs
whatever gap is left, so the path ends at ``(0, 0)`` up to quantization.
The heuristic is approximate; the residual gap is always measured and
reported instead of assumed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from code_racer.errors import NonConvergentClosure
from code_racer.track.geometry import (
    ORIGIN,
    cross_y,
    direction_from_heading,
    distance,
    heading_from_direction,
    piece_endpoints,
    quantize,
    quantize_heading,
)
from code_racer.track.models import CurvePiece, Piece, TrackState, Vector2D
from code_racer.track.parameters import BLUE
from code_racer.track.pieces import PieceFactory
from code_racer.track.tracing import TraceObserver, logging_observer
from code_racer.track.walker import alternate_direction, lay_curve, lay_straight

_logger = logging.getLogger(__name__)

CONNECTION_TOLERANCE = 0.1
"""Largest gap (in track units) still considered connected."""


@dataclass
class ClosureResult:
    """Pieces spliced in by :class:`LoopCloser` and the gap they leave."""

    pieces: list[Piece] = field(default_factory=list)
    gap: float = 0.0
    """Distance from the computed end of the path to the origin."""

    closed: bool = True
    """``gap <= tolerance``."""

    passes: int = 0
    """Connector/curve passes used beyond the first closing curve."""


class LoopCloser:
    """Splice closing pieces onto an open path.

    Args:
        factory: Builds quantized pieces of the track's width.
        width: Road width; the distance tiers scale with it.
        radius: Radius for closing curves.
        tolerance: Largest residual gap that still counts as closed.
        max_passes: Upper bound on connector/curve passes.
        connector_cap: Longest connector straight.
        strict: Raise :class:`NonConvergentClosure` instead of flagging.
        observer: Receives ``(event, fields)`` trace events.
    """

    def __init__(
        self,
        factory: PieceFactory,
        width: float,
        radius: float,
        tolerance: float = CONNECTION_TOLERANCE,
        max_passes: int = 1,
        connector_cap: float = 20.0,
        strict: bool = False,
        observer: TraceObserver | None = None,
    ) -> None:
        if max_passes < 0:
            raise ValueError("max_passes must be >= 0")
        self._factory = factory
        self.width = width
        self.radius = radius
        self.tolerance = tolerance
        self.max_passes = max_passes
        self.connector_cap = connector_cap
        self.strict = strict
        self._observe = observer or logging_observer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def close(
        self,
        state: TrackState,
        curve_count: int = 0,
        straight_count: int = 0,
    ) -> ClosureResult:
        """Append closing pieces starting from *state*; mutates *state*.

        Args:
            state: Cursor at the end of the walked path.
            curve_count: Curves already laid (used to number new pieces).
            straight_count: Straights already laid.

        Raises:
            NonConvergentClosure: Only with ``strict=True``, when the final
                gap exceeds the tolerance.
        """
        result = ClosureResult()
        start_distance = quantize(distance(state.position, ORIGIN))
        self._observe("closure_start", {"distance": start_distance, "cursor": state.position})

        if start_distance >= 2 * self.width:
            curve_count += 1
            result.pieces.append(
                self._turn_toward_origin(state, f"Closing Curve {curve_count}")
            )

            remaining = quantize(distance(state.position, ORIGIN))
            while remaining > 4 * self.width and result.passes < self.max_passes:
                connector_length = min(quantize(0.7 * remaining), self.connector_cap)
                result.pieces.append(
                    lay_straight(
                        self._factory,
                        state,
                        connector_length,
                        color=BLUE,
                        name=f"Connector {straight_count}",
                    )
                )
                straight_count += 1
                curve_count += 1
                result.pieces.append(
                    self._turn_toward_origin(state, f"Final Curve {curve_count}")
                )
                result.passes += 1
                remaining = quantize(distance(state.position, ORIGIN))

        remaining = quantize(distance(state.position, ORIGIN))
        if remaining > self.tolerance:
            result.pieces.append(self._finish_line(state, remaining))

        if result.pieces:
            _, end = piece_endpoints(result.pieces[-1])
            result.gap = distance(end, ORIGIN)
        else:
            result.gap = distance(state.position, ORIGIN)
        result.closed = result.gap <= self.tolerance

        self._observe(
            "closure_complete",
            {"pieces": len(result.pieces), "gap": result.gap, "passes": result.passes},
        )
        if not result.closed:
            _logger.warning(
                "Loop closure left a %.3f unit gap (tolerance %.3f)", result.gap, self.tolerance
            )
            if self.strict:
                raise NonConvergentClosure(result.gap, self.tolerance)
        return result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _turn_toward_origin(self, state: TrackState, name: str) -> CurvePiece:
        """Quarter turn toward whichever side the origin lies on.

        The alternation rule still applies; a third same-direction curve turns
        away and the finish line absorbs the detour.
        """
        to_origin = Vector2D(ORIGIN.x - state.position.x, ORIGIN.z - state.position.z)
        is_right = alternate_direction(
            state, cross_y(state.direction, to_origin) < 0, self._observe
        )
        piece = lay_curve(self._factory, state, self.radius, is_right, name=name)
        self._observe("closing_curve", {"direction": piece.direction, "cursor": state.position})
        return piece

    def _finish_line(self, state: TrackState, length: float) -> Piece:
        """Straight from the cursor aimed exactly at the origin."""
        to_origin = Vector2D(ORIGIN.x - state.position.x, ORIGIN.z - state.position.z)
        state.rotation_y = quantize_heading(heading_from_direction(to_origin))
        state.direction = direction_from_heading(state.rotation_y)
        piece = lay_straight(self._factory, state, length, color=BLUE, name="Finish Line")
        self._observe("finish_line", {"length": length, "cursor": state.position})
        return piece
