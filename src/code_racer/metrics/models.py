"""Repository metrics consumed by the track generator."""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from code_racer.errors import InvalidMetrics

_logger = logging.getLogger(__name__)

_COMPLEXITY_LABELS = frozenset({"low", "medium", "high"})
_CONTENT_TYPE_ALIASES = {"dir": "dir", "directory": "dir", "file": "file"}


def complexity_label(score: float) -> str:
    """Bucket a ``[0, 10]`` complexity score into ``low`` / ``medium`` / ``high``."""
    if score < 3:
        return "low"
    if score < 7:
        return "medium"
    return "high"


@dataclass
class ContentEntry:
    """One entry of the repository's root listing."""

    name: str
    type: str
    """``'file'`` or ``'dir'``."""

    size: int = 0
    path: str = ""


@dataclass
class Complexity:
    """Complexity estimate for a repository."""

    score: float
    """Score in ``[0, 10]``; higher means more curves and shorter straights."""

    complexity: str
    """Label: ``'low'``, ``'medium'`` or ``'high'``."""

    metrics: dict[str, float] = field(default_factory=dict)
    """Optional breakdown of the score (size / languages / contributors)."""


@dataclass
class RepositoryMetrics:
    """Everything the generator needs to know about a repository.

    Build from an untrusted mapping with :meth:`from_dict`; both the
    camelCase keys of the analysis collaborator (``fileCount``) and
    snake_case keys (``file_count``) are accepted.
    """

    file_count: int
    languages: dict[str, float]
    """Language name → percentage share (values sum to ~100)."""

    complexity: Complexity
    contributor_count: int
    dependencies: int
    contents: list[ContentEntry] = field(default_factory=list)
    name: str = ""
    """Optional ``owner/repo`` identifier."""

    @classmethod
    def from_dict(cls, d: dict, strict: bool = True) -> RepositoryMetrics:
        """Create a :class:`RepositoryMetrics` from a raw metrics mapping.

        Args:
            d: Raw mapping.
            strict: When True, any missing or invalid field raises
                :class:`~code_racer.errors.InvalidMetrics`.  When False,
                each bad field is replaced by a safe default and a warning is
                logged.

        Raises:
            InvalidMetrics: In strict mode only.
        """
        if not isinstance(d, dict):
            if strict:
                raise InvalidMetrics(f"Metrics must be a mapping, got {type(d).__name__}")
            _logger.warning("Metrics record is not a mapping; using defaults")
            d = {}

        coercer = _Coercer(strict)
        file_count = coercer.count(_pick(d, "fileCount", "file_count"), "fileCount")
        contributor_count = coercer.count(
            _pick(d, "contributorCount", "contributor_count"), "contributorCount"
        )
        dependencies = coercer.count(d.get("dependencies"), "dependencies")
        languages = coercer.languages(d.get("languages"))
        complexity = coercer.complexity(d.get("complexity"))
        contents = coercer.contents(d.get("contents"))
        name = _pick(d, "name", "repoFullName") or ""

        return cls(
            file_count=file_count,
            languages=languages,
            complexity=complexity,
            contributor_count=contributor_count,
            dependencies=dependencies,
            contents=contents,
            name=str(name),
        )

    def to_dict(self) -> dict:
        """Return the camelCase mapping accepted by :meth:`from_dict`."""
        return {
            "name": self.name,
            "fileCount": self.file_count,
            "languages": dict(self.languages),
            "complexity": dataclasses.asdict(self.complexity),
            "contributorCount": self.contributor_count,
            "dependencies": self.dependencies,
            "contents": [dataclasses.asdict(c) for c in self.contents],
        }


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _pick(d: dict, *keys: str) -> Any:
    for key in keys:
        if key in d:
            return d[key]
    return None


def _as_number(value: Any) -> float | None:
    """Return *value* as a finite float, or None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class _Coercer:
    """Field-by-field validation shared by strict and lenient parsing."""

    def __init__(self, strict: bool) -> None:
        self.strict = strict

    def _reject(self, message: str, default: Any) -> Any:
        if self.strict:
            raise InvalidMetrics(message)
        _logger.warning("%s; using %r", message, default)
        return default

    def count(self, value: Any, field_name: str) -> int:
        number = _as_number(value)
        if number is None:
            return self._reject(f"{field_name} must be a number, got {value!r}", 0)
        if number < 0:
            return self._reject(f"{field_name} must be >= 0, got {value!r}", 0)
        return int(number)

    def languages(self, value: Any) -> dict[str, float]:
        if not isinstance(value, dict):
            return self._reject(f"languages must be a mapping, got {value!r}", {})
        result: dict[str, float] = {}
        for lang, share in value.items():
            number = _as_number(share)
            if number is None or number < 0:
                if self.strict:
                    raise InvalidMetrics(f"languages[{lang!r}] must be a non-negative number")
                _logger.warning("Dropping language %r with invalid share %r", lang, share)
                continue
            result[str(lang)] = number
        return result

    def complexity(self, value: Any) -> Complexity:
        if isinstance(value, dict):
            score = _as_number(value.get("score"))
            label = value.get("complexity")
            breakdown = value.get("metrics") or {}
        else:
            score = _as_number(value)
            label = None
            breakdown = {}

        if score is None:
            score = self._reject(f"complexity.score must be a number, got {value!r}", 0.0)
        elif score < 0:
            score = self._reject(f"complexity.score must be >= 0, got {score!r}", 0.0)

        if label not in _COMPLEXITY_LABELS:
            label = complexity_label(score)

        metrics: dict[str, float] = {}
        if isinstance(breakdown, dict):
            for key, raw in breakdown.items():
                number = _as_number(raw)
                if number is not None:
                    metrics[str(key)] = number
        return Complexity(score=score, complexity=label, metrics=metrics)

    def contents(self, value: Any) -> list[ContentEntry]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return self._reject(f"contents must be a list, got {value!r}", [])

        entries: list[ContentEntry] = []
        for item in value:
            if isinstance(item, ContentEntry):
                entries.append(item)
                continue
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                if self.strict:
                    raise InvalidMetrics(f"contents entry needs a string name: {item!r}")
                _logger.warning("Skipping invalid contents entry %r", item)
                continue
            kind = _CONTENT_TYPE_ALIASES.get(str(item.get("type", "file")), "file")
            size = _as_number(item.get("size")) or 0.0
            entries.append(
                ContentEntry(
                    name=item["name"],
                    type=kind,
                    size=int(max(size, 0.0)),
                    path=str(item.get("path") or item["name"]),
                )
            )
        return entries
