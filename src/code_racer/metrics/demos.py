"""Pre-analysed demo repositories, usable without any GitHub access."""

from __future__ import annotations

from code_racer.metrics.models import RepositoryMetrics

DEMO_REPOSITORIES: dict[str, dict] = {
    "donpui/winden": {
        "name": "donpui/winden",
        "fileCount": 156,
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
        "contents": [
            {"name": ".github", "type": "dir", "size": 1240},
            {"name": ".husky", "type": "dir", "size": 870},
            {"name": "client", "type": "dir", "size": 42500},
            {"name": "client-e2e", "type": "dir", "size": 3450},
            {"name": "doc", "type": "dir", "size": 5750},
            {"name": "feedback-api", "type": "dir", "size": 12780},
        ],
    },
}


def _demo_id(repo: str) -> str:
    """Reduce a GitHub URL or ``owner/repo`` string to the ``owner/repo`` key."""
    repo_id = repo.strip()
    if "github.com/" in repo_id:
        repo_id = repo_id.split("github.com/", 1)[1]
    repo_id = repo_id.rstrip("/")
    if repo_id.endswith(".git"):
        repo_id = repo_id[: -len(".git")]
    return repo_id


def demo_ids() -> list[str]:
    return sorted(DEMO_REPOSITORIES)


def get_demo_metrics(repo: str) -> RepositoryMetrics | None:
    """Return metrics for a demo repository, or None if *repo* is not a demo.

    *repo* may be ``"owner/repo"`` or a full GitHub URL.
    """
    raw = DEMO_REPOSITORIES.get(_demo_id(repo))
    if raw is None:
        return None
    return RepositoryMetrics.from_dict(raw)
