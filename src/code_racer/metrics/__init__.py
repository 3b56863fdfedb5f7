"""Repository metrics: validation, GitHub payload reduction and demo data."""

from code_racer.metrics.demos import DEMO_REPOSITORIES, demo_ids, get_demo_metrics
from code_racer.metrics.github import build_metrics, parse_github_url
from code_racer.metrics.models import (
    Complexity,
    ContentEntry,
    RepositoryMetrics,
    complexity_label,
)

__all__ = [
    "DEMO_REPOSITORIES",
    "Complexity",
    "ContentEntry",
    "RepositoryMetrics",
    "build_metrics",
    "complexity_label",
    "demo_ids",
    "get_demo_metrics",
    "parse_github_url",
]
