"""Exceptions raised by track generation.

The assembler treats all of these as recoverable: it clamps, defaults or
flags the track instead of letting them reach its caller.  They surface only
from the strict entry points (``RepositoryMetrics.from_dict(strict=True)``,
``LoopCloser(strict=True)``) and from direct misuse of the geometry helpers.
"""

from __future__ import annotations


class TrackGenerationError(Exception):
    """Base class for track generation failures."""


class InvalidMetrics(TrackGenerationError, ValueError):
    """Raised when a metrics record is missing fields or holds non-numeric values."""


class DegenerateGeometry(TrackGenerationError):
    """Raised when a geometric quantity cannot be computed (e.g. a zero-length vector)."""


class NonConvergentClosure(TrackGenerationError):
    """Raised when the loop closer cannot bring the path back within tolerance.

    Attributes:
        gap: Remaining distance between the path end and the origin.
    """

    def __init__(self, gap: float, tolerance: float) -> None:
        super().__init__(
            f"Track end is {gap:.3f} units from the origin (tolerance {tolerance})"
        )
        self.gap = gap
        self.tolerance = tolerance
