"""FastAPI Web application."""

from __future__ import annotations

import json
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from code_racer.metrics.demos import demo_ids
from code_racer.storage.sqlite import TrackStorage
from code_racer.web.schemas import (
    DemosResponse,
    HealthResponse,
    StoredTrackResponse,
    TrackRecord,
    TrackRequest,
    TrackResponse,
    TracksResponse,
)
from code_racer.web.service import TrackService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

app = FastAPI(title="Code Racer", version=VERSION)

_DEFAULT_DB = os.environ.get("CODE_RACER_DB", "tracks.db")


def _storage(db_path: str | None = None) -> TrackStorage:
    return TrackStorage(db_path or _DEFAULT_DB)


def _record(row: dict) -> TrackRecord:
    return TrackRecord(**{k: row[k] for k in TrackRecord.model_fields})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/tracks", response_model=TrackResponse)
def create_track(req: TrackRequest, db: str | None = None) -> TrackResponse:
    """Generate a track from repository metrics, storing it when ``save`` is set."""
    svc = TrackService(db or _DEFAULT_DB)
    try:
        track_id, seed, track = svc.generate(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        _logger.exception("Track generation failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return TrackResponse(
        track=track.to_dict(),
        seed=seed,
        repo=req.repo or req.metrics.name,
        track_id=track_id,
    )


@app.get("/api/tracks", response_model=TracksResponse)
def list_tracks(repo: str = "", db: str | None = None) -> TracksResponse:
    """Return stored track summaries, optionally filtered by repository."""
    storage = _storage(db)
    try:
        rows = storage.list_tracks(repo)
    finally:
        storage.close()
    return TracksResponse(repo=repo, tracks=[_record(r) for r in rows])


@app.get("/api/tracks/{track_id}", response_model=StoredTrackResponse)
def get_track(track_id: int, db: str | None = None) -> StoredTrackResponse:
    storage = _storage(db)
    try:
        row = storage.get_track(track_id)
    finally:
        storage.close()
    if row is None:
        raise HTTPException(status_code=404, detail="Track not found")
    return StoredTrackResponse(
        **_record(row).model_dump(),
        track=json.loads(row["track_json"]),
    )


@app.get("/api/demos", response_model=DemosResponse)
def list_demos() -> DemosResponse:
    return DemosResponse(demos=demo_ids())


@app.get("/api/demos/{owner}/{repo}/track", response_model=TrackResponse)
def demo_track(owner: str, repo: str, seed: int | None = None) -> TrackResponse:
    """Generate a track for one of the bundled demo repositories."""
    repo_id = f"{owner}/{repo}"
    result = TrackService(_DEFAULT_DB).demo_track(repo_id, seed)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Unknown demo repository {repo_id!r}")
    used_seed, track = result
    return TrackResponse(track=track.to_dict(), seed=used_seed, repo=repo_id)
