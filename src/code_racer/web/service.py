"""TrackService: wraps track generation and persistence for the Web API."""

from __future__ import annotations

from code_racer.metrics.demos import get_demo_metrics
from code_racer.metrics.models import RepositoryMetrics
from code_racer.storage.sqlite import TrackStorage
from code_racer.track.assembler import TrackGenerator
from code_racer.track.models import Track
from code_racer.track.randomness import new_seed
from code_racer.web.schemas import TrackRequest


class TrackService:
    """Generate tracks for API requests and optionally store them.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.
    generator:
        Optional generator for testing injection.  Defaults to a
        :class:`TrackGenerator` with the standard configuration.
    """

    def __init__(
        self,
        db_path: str,
        generator: TrackGenerator | None = None,
    ) -> None:
        self._db_path = db_path
        self._generator = generator or TrackGenerator()

    def generate(self, req: TrackRequest) -> tuple[int | None, int, Track]:
        """Generate a track for *req* and persist it when ``req.save`` is set.

        Returns
        -------
        tuple[int | None, int, Track]
            ``(track_id, seed, track)``; ``track_id`` is None when not saved.

        Raises
        ------
        ValueError
            If the metrics are rejected by strict validation.
        """
        metrics = RepositoryMetrics.from_dict(req.metrics.model_dump(by_alias=True))
        seed = req.seed if req.seed is not None else new_seed()
        track = self._generator.generate(metrics, seed=seed)

        track_id = None
        if req.save:
            storage = TrackStorage(self._db_path)
            try:
                track_id = storage.save_track(track, repo=req.repo or metrics.name, seed=seed)
            finally:
                storage.close()
        return track_id, seed, track

    def demo_track(self, repo: str, seed: int | None = None) -> tuple[int, Track] | None:
        """Return ``(seed, track)`` for a demo repository, or None if unknown."""
        metrics = get_demo_metrics(repo)
        if metrics is None:
            return None
        if seed is None:
            seed = new_seed()
        return seed, self._generator.generate(metrics, seed=seed)
