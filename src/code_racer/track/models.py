"""Track data structures."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Vector2D:
    """A point or vector on the flat ground plane (``y`` is always 0)."""

    x: float
    z: float

    def to_dict(self) -> dict:
        return {"x": self.x, "z": self.z}


@dataclass(frozen=True)
class StraightPiece:
    """A rectangular road segment stored by its centre point.

    The segment extends ``length / 2`` on either side of :attr:`position`
    along the heading :attr:`rotation_y`.
    """

    position: Vector2D
    """Centre of the segment."""

    rotation_y: float
    """Heading in radians, ``[0, 2π)``; direction is ``(sin, cos)``."""

    length: float
    width: float
    color: str
    name: str

    kind = "straight"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "position": self.position.to_dict(),
            "rotationY": self.rotation_y,
            "length": self.length,
            "width": self.width,
            "color": self.color,
            "name": self.name,
        }


@dataclass(frozen=True)
class CurvePiece:
    """A quarter-circle arc stored by the centre of its circle.

    Phase layout:

    ::

        entry point ──(arc of ``radius`` around position)──▶ exit point

    The entry point lies ``radius`` from :attr:`position` on the side opposite
    the turn; the exit point lies ``radius`` from :attr:`position` along the
    entry heading.
    """

    position: Vector2D
    """Centre of the arc's circle."""

    rotation_y: float
    """Heading entering the curve, radians."""

    radius: float
    width: float
    direction: str
    """Turn direction: ``'left'`` or ``'right'``."""

    color: str
    name: str
    angle: float = 90.0
    """Swept angle in degrees; only quarter turns are generated."""

    kind = "curve"

    @property
    def is_right(self) -> bool:
        return self.direction == "right"

    @property
    def arc_length(self) -> float:
        return self.radius * math.radians(self.angle)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "position": self.position.to_dict(),
            "rotationY": self.rotation_y,
            "radius": self.radius,
            "angle": self.angle,
            "width": self.width,
            "direction": self.direction,
            "color": self.color,
            "name": self.name,
        }


Piece = Union[StraightPiece, CurvePiece]


@dataclass(frozen=True)
class TrackMetadata:
    """Summary figures attached to a generated :class:`Track`."""

    length: float
    """Straight lengths plus quarter-circle arc lengths."""

    complexity: str
    """Repository complexity label: ``'low'``, ``'medium'`` or ``'high'``."""

    turns: int
    width: float
    approximately_closed: bool = False
    """True when the path end could not be brought within tolerance of the origin."""

    closure_gap: float = 0.0
    """Distance between the computed end of the last piece and the origin."""

    def to_dict(self) -> dict:
        return {
            "length": self.length,
            "complexity": self.complexity,
            "turns": self.turns,
            "width": self.width,
            "approximatelyClosed": self.approximately_closed,
            "closureGap": self.closure_gap,
        }


@dataclass(frozen=True)
class Track:
    """A closed-loop track.

    :attr:`pieces` holds every piece in traversal order and is the
    authoritative sequence; :attr:`straights` and :attr:`curves` are views
    derived from it for renderers that want the two kinds split.
    """

    pieces: tuple[Piece, ...]
    metadata: TrackMetadata
    obstacles: tuple = field(default_factory=tuple)

    @property
    def straights(self) -> tuple[StraightPiece, ...]:
        return tuple(p for p in self.pieces if isinstance(p, StraightPiece))

    @property
    def curves(self) -> tuple[CurvePiece, ...]:
        return tuple(p for p in self.pieces if isinstance(p, CurvePiece))

    def to_dict(self) -> dict:
        """Return the JSON-compatible renderer contract."""
        return {
            "straights": [p.to_dict() for p in self.straights],
            "curves": [p.to_dict() for p in self.curves],
            "obstacles": list(self.obstacles),
            "pieces": [p.to_dict() for p in self.pieces],
            "metadata": self.metadata.to_dict(),
        }

    def to_json(self) -> str:
        """Serialize deterministically (sorted keys, no whitespace variance)."""
        return json.dumps(self.to_dict(), sort_keys=True)


@dataclass
class TrackState:
    """Mutable cursor owned by one generation call.

    Created fresh by the assembler, advanced by the walker and the loop
    closer, discarded once the :class:`Track` exists.
    """

    position: Vector2D = field(default_factory=lambda: Vector2D(0.0, 0.0))
    direction: Vector2D = field(default_factory=lambda: Vector2D(0.0, 1.0))
    rotation_y: float = 0.0
    same_direction_count: int = 0
    last_curve_direction: bool | None = None
    """``True`` for right, ``False`` for left, ``None`` before the first curve."""
