"""Reduce GitHub REST payloads to :class:`RepositoryMetrics`.

Fetching is somebody else's job: every function here takes the decoded JSON
bodies of ``/repos/{owner}/{repo}``, ``/languages``, ``/contributors`` and
``/contents`` as plain Python objects.
"""

from __future__ import annotations

import re

from code_racer.metrics.models import (
    Complexity,
    ContentEntry,
    RepositoryMetrics,
    complexity_label,
)

_GITHUB_URL = re.compile(r"github\.com/([^/]+)/([^/]+)")

FILES_PER_DIRECTORY = 10
"""Rough file count assumed for every root-level directory."""

KB_PER_FILE = 50
KB_PER_DEPENDENCY = 100


def parse_github_url(url: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` from a GitHub repository URL.

    Raises:
        ValueError: If *url* does not look like a GitHub repository URL.
    """
    match = _GITHUB_URL.search(url or "")
    if match is None:
        raise ValueError(f"Invalid GitHub URL format: {url!r}")
    repo = match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return match.group(1), repo


def process_languages(language_bytes: dict[str, int]) -> dict[str, float]:
    """Convert ``language → bytes`` into ``language → whole-number percentage``."""
    total = sum(language_bytes.values())
    if total <= 0:
        return {}
    return {
        lang: float(int(byte_count / total * 100 + 0.5))
        for lang, byte_count in language_bytes.items()
    }


def estimate_file_count(contents: list[dict], size_kb: int) -> int:
    """Estimate the total file count from the root listing and repo size."""
    files = sum(1 for item in contents if item.get("type") == "file")
    dirs = sum(1 for item in contents if item.get("type") == "dir")
    return files + dirs * FILES_PER_DIRECTORY + int(size_kb) // KB_PER_FILE


def estimate_complexity(
    repo_info: dict,
    language_bytes: dict[str, int],
    contributors: list[dict],
) -> Complexity:
    """Average three 0-10 sub-scores: size, language diversity and contributors."""
    size_score = min(repo_info.get("size", 0) / 10000.0, 10.0)
    lang_score = min(len(language_bytes) * 2.0, 10.0)
    contrib_score = min(len(contributors) / 5.0, 10.0)
    total = (size_score + lang_score + contrib_score) / 3.0
    return Complexity(
        score=total,
        complexity=complexity_label(total),
        metrics={
            "size": size_score,
            "languages": lang_score,
            "contributors": contrib_score,
        },
    )


def process_contents(contents: list[dict]) -> list[ContentEntry]:
    return [
        ContentEntry(
            name=item["name"],
            type=item.get("type", "file"),
            size=int(item.get("size") or 0),
            path=item.get("path", item["name"]),
        )
        for item in contents
    ]


def build_metrics(
    repo_info: dict,
    language_bytes: dict[str, int],
    contributors: list[dict],
    contents: list[dict],
) -> RepositoryMetrics:
    """Assemble :class:`RepositoryMetrics` from the four GitHub payloads."""
    size_kb = int(repo_info.get("size", 0))
    return RepositoryMetrics(
        file_count=estimate_file_count(contents, size_kb),
        languages=process_languages(language_bytes),
        complexity=estimate_complexity(repo_info, language_bytes, contributors),
        contributor_count=len(contributors),
        dependencies=size_kb // KB_PER_DEPENDENCY,
        contents=process_contents(contents),
        name=repo_info.get("full_name", ""),
    )
