"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from code_racer.web.app import app


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "web_tracks.db")


@pytest.fixture
def metrics_payload() -> dict:
    return {
        "name": "donpui/winden",
        "fileCount": 150,
        "languages": {
            "TypeScript": 88.7,
            "Rust": 4.6,
            "HTML": 3.6,
            "JavaScript": 2.4,
            "Other": 0.7,
        },
        "complexity": {"score": 7.5, "complexity": "high"},
        "contributorCount": 12,
        "dependencies": 87,
        "contents": [{"name": "client", "type": "dir", "size": 42500}],
    }
