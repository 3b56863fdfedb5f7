"""Connectivity and closure checks on finished pieces.

The checks recompute every piece's start and end from the piece's own stored
fields via :mod:`code_racer.track.geometry`, independently of the cursor the
generator used, so they catch any disagreement between placement and storage.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from code_racer.track.closer import CONNECTION_TOLERANCE
from code_racer.track.geometry import ORIGIN, distance, piece_endpoints
from code_racer.track.models import Piece


@dataclass
class ValidationReport:
    """Result of :func:`validate_pieces`."""

    gaps: list[float] = field(default_factory=list)
    """``gaps[i]`` is the distance between the end of piece *i* and the start of piece *i + 1*."""

    start_gap: float = 0.0
    """Distance from the origin to the start of the first piece."""

    closure_gap: float = 0.0
    """Distance from the end of the last piece to the origin."""

    tolerance: float = CONNECTION_TOLERANCE

    @property
    def max_gap(self) -> float:
        return max(self.gaps, default=0.0)

    @property
    def connected(self) -> bool:
        return self.max_gap <= self.tolerance and self.start_gap <= self.tolerance

    @property
    def closed(self) -> bool:
        return self.closure_gap <= self.tolerance

    @property
    def ok(self) -> bool:
        return self.connected and self.closed


def validate_pieces(
    pieces: Sequence[Piece],
    tolerance: float = CONNECTION_TOLERANCE,
) -> ValidationReport:
    """Measure every joint of *pieces* (in traversal order).

    An empty sequence validates trivially.
    """
    report = ValidationReport(tolerance=tolerance)
    if not pieces:
        return report

    endpoints = [piece_endpoints(p) for p in pieces]
    report.start_gap = distance(ORIGIN, endpoints[0][0])
    for (_, end), (next_start, _) in zip(endpoints, endpoints[1:]):
        report.gaps.append(distance(end, next_start))
    report.closure_gap = distance(endpoints[-1][1], ORIGIN)
    return report
