"""POST /api/tracks and the stored-track endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from code_racer.metrics.models import RepositoryMetrics
from code_racer.track.assembler import generate_track


def _row(track_id: int = 1, repo: str = "acme/a") -> dict:
    return {
        "id": track_id,
        "repo": repo,
        "seed": 4,
        "complexity": "medium",
        "length": 321.5,
        "turns": 6,
        "width": 4.0,
        "approximately_closed": False,
        "created_at": "2026-10-19T10:00:00Z",
    }


def _patch_storage(mock_store):
    return patch("code_racer.web.app.TrackStorage", return_value=mock_store)


# ---------------------------------------------------------------------------
# POST /api/tracks
# ---------------------------------------------------------------------------


def test_create_track_matches_library_output(client, metrics_payload):
    resp = client.post("/api/tracks", json={"metrics": metrics_payload, "seed": 42})
    assert resp.status_code == 200
    data = resp.json()
    assert data["seed"] == 42
    assert data["repo"] == "donpui/winden"
    assert data["track_id"] is None

    expected = generate_track(RepositoryMetrics.from_dict(metrics_payload), seed=42)
    assert data["track"] == expected.to_dict()


def test_create_track_picks_a_seed(client, metrics_payload):
    data = client.post("/api/tracks", json={"metrics": metrics_payload}).json()
    assert isinstance(data["seed"], int)
    replay = client.post(
        "/api/tracks", json={"metrics": metrics_payload, "seed": data["seed"]}
    ).json()
    assert replay["track"] == data["track"]


def test_create_and_fetch_saved_track(client, metrics_payload, db_path):
    created = client.post(
        "/api/tracks",
        params={"db": db_path},
        json={"metrics": metrics_payload, "seed": 3, "repo": "acme/a", "save": True},
    ).json()
    assert created["track_id"] == 1

    stored = client.get("/api/tracks/1", params={"db": db_path}).json()
    assert stored["repo"] == "acme/a"
    assert stored["seed"] == 3
    assert stored["track"] == created["track"]

    listing = client.get("/api/tracks", params={"repo": "acme/a", "db": db_path}).json()
    assert [t["id"] for t in listing["tracks"]] == [1]


def test_missing_file_count_is_422(client, metrics_payload):
    del metrics_payload["fileCount"]
    resp = client.post("/api/tracks", json={"metrics": metrics_payload})
    assert resp.status_code == 422


def test_negative_language_share_is_422(client, metrics_payload):
    metrics_payload["languages"]["Rust"] = -4.6
    resp = client.post("/api/tracks", json={"metrics": metrics_payload})
    assert resp.status_code == 422
    assert "Rust" in resp.json()["detail"]


def test_unexpected_error_is_500(client, metrics_payload):
    svc = MagicMock()
    svc.generate.side_effect = RuntimeError("disk on fire")
    with patch("code_racer.web.app.TrackService", return_value=svc):
        resp = client.post("/api/tracks", json={"metrics": metrics_payload})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "disk on fire"


# ---------------------------------------------------------------------------
# GET /api/tracks, /api/tracks/{id}
# ---------------------------------------------------------------------------


def test_list_tracks_with_rows(client):
    store = MagicMock()
    store.list_tracks.return_value = [_row(2), _row(1)]
    with _patch_storage(store):
        data = client.get("/api/tracks", params={"repo": "acme/a"}).json()
    store.list_tracks.assert_called_once_with("acme/a")
    store.close.assert_called_once()
    assert data["repo"] == "acme/a"
    assert [t["id"] for t in data["tracks"]] == [2, 1]
    assert data["tracks"][0]["turns"] == 6


def test_list_tracks_empty(client):
    store = MagicMock()
    store.list_tracks.return_value = []
    with _patch_storage(store):
        data = client.get("/api/tracks").json()
    assert data == {"repo": "", "tracks": []}


def test_get_unknown_track_is_404(client, db_path):
    resp = client.get("/api/tracks/999", params={"db": db_path})
    assert resp.status_code == 404
