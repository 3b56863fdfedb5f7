"""Procedural track generation and loop closure."""

from code_racer.track.assembler import (
    GeneratorConfig,
    TrackGenerator,
    generate_track,
    verify_track,
)
from code_racer.track.closer import ClosureResult, LoopCloser
from code_racer.track.models import (
    CurvePiece,
    StraightPiece,
    Track,
    TrackMetadata,
    TrackState,
    Vector2D,
)
from code_racer.track.pieces import PieceFactory
from code_racer.track.randomness import RandomSource, SeededRandom, SequenceRandom
from code_racer.track.validation import ValidationReport, validate_pieces
from code_racer.track.walker import TrackWalker

__all__ = [
    "ClosureResult",
    "CurvePiece",
    "GeneratorConfig",
    "LoopCloser",
    "PieceFactory",
    "RandomSource",
    "SeededRandom",
    "SequenceRandom",
    "StraightPiece",
    "Track",
    "TrackGenerator",
    "TrackMetadata",
    "TrackState",
    "TrackWalker",
    "ValidationReport",
    "Vector2D",
    "generate_track",
    "validate_pieces",
    "verify_track",
]
