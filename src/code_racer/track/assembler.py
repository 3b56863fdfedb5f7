"""Track assembly: the entry point from repository metrics to a closed track.

Pipeline:
1. Coerce the metrics (lenient: bad fields become defaults, never errors).
2. Derive global parameters once.
3. Walk the open path.
4. Close the loop.
5. Re-quantize every piece and measure connectivity.
6. Compute metadata and freeze the result.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from code_racer.metrics.models import RepositoryMetrics
from code_racer.track.closer import CONNECTION_TOLERANCE, LoopCloser
from code_racer.track.geometry import quantize
from code_racer.track.models import (
    CurvePiece,
    Piece,
    StraightPiece,
    Track,
    TrackMetadata,
    TrackState,
)
from code_racer.track.parameters import GenerationParameters, derive_parameters
from code_racer.track.pieces import PieceFactory, requantize
from code_racer.track.randomness import RandomSource, SeededRandom
from code_racer.track.tracing import TraceObserver, logging_observer
from code_racer.track.validation import validate_pieces
from code_racer.track.walker import TrackWalker

_logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Tunables for :class:`TrackGenerator`."""

    tolerance: float = CONNECTION_TOLERANCE
    """Largest joint or closure gap still treated as connected."""

    max_closure_passes: int = 1
    """Connector/curve passes the loop closer may add after its first curve."""

    connector_cap: float = 20.0
    """Longest connector straight the loop closer lays."""

    strict_closure: bool = False
    """Raise :class:`~code_racer.errors.NonConvergentClosure` instead of flagging."""


def coerce_metrics(metrics: RepositoryMetrics | dict) -> RepositoryMetrics:
    """Accept a :class:`RepositoryMetrics` or a raw mapping (parsed leniently)."""
    if isinstance(metrics, RepositoryMetrics):
        return metrics
    return RepositoryMetrics.from_dict(metrics, strict=False)


def track_length(pieces: Sequence[Piece]) -> float:
    """Straight lengths plus the arc length of every curve."""
    total = 0.0
    for piece in pieces:
        if isinstance(piece, CurvePiece):
            total += piece.arc_length
        else:
            total += piece.length
    return quantize(total)


def generate_obstacles(metrics: RepositoryMetrics, pieces: Sequence[Piece]) -> tuple:
    """Obstacle placement hook; no obstacles are generated."""
    return ()


def verify_track(track: Track) -> Track:
    """Return *track* with every stored coordinate re-quantized.

    Pieces built by :class:`~code_racer.track.pieces.PieceFactory` are
    already on the grid, so this is a no-op for generated tracks.
    """
    return dataclasses.replace(track, pieces=tuple(requantize(p) for p in track.pieces))


class TrackGenerator:
    """Generate closed tracks from repository metrics.

    Holds configuration only; every :meth:`generate` call builds its own
    cursor, walker and closer, so one instance can be shared freely.

    Args:
        config: Generator tunables.
        observer: Receives ``(event, fields)`` trace events from every stage.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        observer: TraceObserver | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self._observe = observer or logging_observer

    def parameters_for(self, metrics: RepositoryMetrics | dict) -> GenerationParameters:
        m = coerce_metrics(metrics)
        return derive_parameters(m.file_count, m.complexity.score, m.languages)

    def generate(
        self,
        metrics: RepositoryMetrics | dict,
        rng: RandomSource | None = None,
        seed: int | None = None,
    ) -> Track:
        """Build a closed :class:`Track` for *metrics*.

        Args:
            metrics: Repository metrics, or a raw mapping parsed leniently.
            rng: Random source; takes precedence over *seed*.
            seed: Seed for a fresh :class:`SeededRandom` when *rng* is None.

        Returns:
            A frozen :class:`Track`.  Never raises for bad metrics; with the
            default config it never raises at all.
        """
        m = coerce_metrics(metrics)
        if rng is None:
            rng = SeededRandom(seed)
        params = derive_parameters(m.file_count, m.complexity.score, m.languages)
        self._observe("parameters", dataclasses.asdict(params))

        factory = PieceFactory(params.track_width)
        state = TrackState()

        walker = TrackWalker(factory, rng, observer=self._observe)
        pieces = walker.walk(state, params, m.contents, m.languages)

        closer = LoopCloser(
            factory,
            width=params.track_width,
            radius=params.curve_radius,
            tolerance=self.config.tolerance,
            max_passes=self.config.max_closure_passes,
            connector_cap=self.config.connector_cap,
            strict=self.config.strict_closure,
            observer=self._observe,
        )
        closure = closer.close(
            state,
            curve_count=sum(1 for p in pieces if isinstance(p, CurvePiece)),
            straight_count=sum(1 for p in pieces if isinstance(p, StraightPiece)),
        )
        pieces.extend(closure.pieces)

        report = validate_pieces(pieces, tolerance=self.config.tolerance)
        turns = sum(1 for p in pieces if isinstance(p, CurvePiece))
        metadata = TrackMetadata(
            length=track_length(pieces),
            complexity=m.complexity.complexity,
            turns=turns,
            width=params.track_width,
            approximately_closed=not report.ok,
            closure_gap=quantize(report.closure_gap, 4),
        )
        track = verify_track(
            Track(
                pieces=tuple(pieces),
                metadata=metadata,
                obstacles=generate_obstacles(m, pieces),
            )
        )

        _logger.info(
            "Generated track%s: %d pieces, %d turns, length %.1f, closure gap %.4f",
            f" for {m.name}" if m.name else "",
            len(track.pieces),
            turns,
            metadata.length,
            report.closure_gap,
        )
        if not report.ok:
            _logger.warning(
                "Track is only approximately closed (max joint gap %.3f, closure gap %.3f)",
                report.max_gap,
                report.closure_gap,
            )
        return track


def generate_track(
    metrics: RepositoryMetrics | dict,
    *,
    rng: RandomSource | None = None,
    seed: int | None = None,
    config: GeneratorConfig | None = None,
    observer: TraceObserver | None = None,
) -> Track:
    """Convenience wrapper: ``TrackGenerator(config, observer).generate(...)``."""
    return TrackGenerator(config=config, observer=observer).generate(metrics, rng=rng, seed=seed)
