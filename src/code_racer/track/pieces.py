"""Construction of normalized, quantized track pieces."""

from __future__ import annotations

import dataclasses

from code_racer.track.geometry import (
    QUARTER_TURN_DEG,
    quantize,
    quantize_heading,
    quantize_point,
)
from code_racer.track.models import CurvePiece, Piece, StraightPiece, Vector2D
from code_racer.track.parameters import BLUE, curve_color


class PieceFactory:
    """Build :class:`StraightPiece` and :class:`CurvePiece` records.

    All pieces from one factory share the same road *width*.  Positions,
    lengths and radii pass through :func:`~code_racer.track.geometry.quantize`
    and headings through
    :func:`~code_racer.track.geometry.quantize_heading`, so whatever raw
    geometry goes in, the stored record is on the fixed grid.

    Args:
        width: Road width applied to every piece.
    """

    def __init__(self, width: float) -> None:
        if width <= 0:
            raise ValueError("width must be > 0")
        self.width = quantize(width)

    def straight(
        self,
        position: Vector2D,
        rotation_y: float,
        length: float,
        color: str = BLUE,
        name: str = "Segment",
    ) -> StraightPiece:
        """Return a straight centred at *position*."""
        return StraightPiece(
            position=quantize_point(position),
            rotation_y=quantize_heading(rotation_y),
            length=quantize(max(length, 0.0)),
            width=self.width,
            color=color,
            name=name,
        )

    def curve(
        self,
        position: Vector2D,
        rotation_y: float,
        radius: float,
        is_right_turn: bool,
        name: str = "Curve",
        color: str | None = None,
    ) -> CurvePiece:
        """Return a quarter-circle curve whose circle is centred at *position*."""
        return CurvePiece(
            position=quantize_point(position),
            rotation_y=quantize_heading(rotation_y),
            radius=quantize(radius),
            width=self.width,
            direction="right" if is_right_turn else "left",
            color=color or curve_color(is_right_turn),
            name=name,
            angle=QUARTER_TURN_DEG,
        )


def requantize(piece: Piece) -> Piece:
    """Return *piece* with every numeric field snapped back onto the grid.

    A no-op for pieces built by :class:`PieceFactory`; used as a
    post-condition on assembled tracks.
    """
    changes: dict = {
        "position": quantize_point(piece.position),
        "rotation_y": quantize_heading(piece.rotation_y),
        "width": quantize(piece.width),
    }
    if isinstance(piece, CurvePiece):
        changes["radius"] = quantize(piece.radius)
    else:
        changes["length"] = quantize(piece.length)
    return dataclasses.replace(piece, **changes)
