"""Demo repository endpoints."""

from __future__ import annotations

from code_racer.metrics.demos import get_demo_metrics
from code_racer.track.assembler import generate_track


def test_list_demos(client):
    resp = client.get("/api/demos")
    assert resp.status_code == 200
    assert resp.json() == {"demos": ["donpui/winden"]}


def test_demo_track(client):
    resp = client.get("/api/demos/donpui/winden/track", params={"seed": 3})
    assert resp.status_code == 200
    data = resp.json()
    assert data["seed"] == 3
    assert data["repo"] == "donpui/winden"
    assert data["track"] == generate_track(get_demo_metrics("donpui/winden"), seed=3).to_dict()


def test_unknown_demo_is_404(client):
    resp = client.get("/api/demos/someone/else/track")
    assert resp.status_code == 404
