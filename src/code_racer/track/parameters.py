"""Mapping from repository metrics to track generation parameters.

Every function here is pure apart from :func:`curve_direction`, which falls
back to the injected :class:`~code_racer.track.randomness.RandomSource`.
Degenerate inputs (negative, NaN or infinite counts and scores) are clamped
before use so nothing downstream sees NaN.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from code_racer.track.randomness import RandomSource

BLUE = "#3b36e2"
PURPLE = "#7c3aed"
TEAL = "#2dd4bf"
ORANGE = "#f97316"
RED = "#ef4444"

SEGMENT_PALETTE: tuple[str, ...] = (BLUE, PURPLE, TEAL, ORANGE, RED)

RIGHT_CURVE_COLOR = "#FFA500"
LEFT_CURVE_COLOR = "#FFCC00"

MAX_COMPLEXITY_SCORE = 10.0
MIN_SEGMENT_LENGTH = 10
MIN_TRACK_WIDTH = 3
MIN_SEGMENT_COUNT = 10
MAX_SEGMENT_COUNT = 25

STRAIGHT_LENGTH_OPTIONS: tuple[int, ...] = (10, 12, 14, 16, 18, 20)
"""Discrete lengths for straights laid after each step."""

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ``.5`` rounding up.

    :func:`round` uses banker's rounding, which would turn a width-3 radius of
    4.5 into 4 instead of 5.
    """
    return int(math.floor(value + 0.5))


def _finite_non_negative(value: float) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def clamp_score(score: float) -> float:
    """Clamp a complexity score into ``[0, 10]``."""
    return min(_finite_non_negative(score), MAX_COMPLEXITY_SCORE)


# ---------------------------------------------------------------------------
# Global parameters
# ---------------------------------------------------------------------------


def curve_frequency(complexity_score: float) -> float:
    """Probability of inserting a curve at each step, roughly ``[0.3, 0.63]``."""
    return 0.3 + clamp_score(complexity_score) / 30.0


def segment_length(file_count: float, complexity_score: float) -> int:
    """Length of the starting straight.

    Scales up to 3x with file count (saturating at 300 files) and shrinks as
    complexity grows.  Never below :data:`MIN_SEGMENT_LENGTH`.
    """
    files = _finite_non_negative(file_count)
    length_factor = max(1.0, min(files / 100.0, 3.0))
    calculated = 10.0 * length_factor * (1.0 - clamp_score(complexity_score) / 30.0)
    return max(MIN_SEGMENT_LENGTH, round_half_up(calculated))


def track_width(languages: Mapping[str, float]) -> int:
    """Road width: 3 plus up to 2 more as the number of languages grows."""
    language_count = len(languages or {})
    return max(MIN_TRACK_WIDTH, round_half_up(3 + min(language_count / 3.0, 2.0)))


def segment_count(file_count: float) -> int:
    """Number of walker iterations: one per five files, within ``[10, 25]``."""
    files = _finite_non_negative(file_count)
    return min(max(round_half_up(files / 5.0), MIN_SEGMENT_COUNT), MAX_SEGMENT_COUNT)


def curve_radius(width: float) -> int:
    """Radius of every quarter-circle curve for a track of *width*."""
    return round_half_up(width * 1.5)


@dataclass(frozen=True)
class GenerationParameters:
    """Global parameters derived once per generation call."""

    segment_count: int
    curve_frequency: float
    segment_length: int
    track_width: int
    curve_radius: int


def derive_parameters(
    file_count: float,
    complexity_score: float,
    languages: Mapping[str, float] | None,
) -> GenerationParameters:
    width = track_width(languages or {})
    return GenerationParameters(
        segment_count=segment_count(file_count),
        curve_frequency=curve_frequency(complexity_score),
        segment_length=segment_length(file_count, complexity_score),
        track_width=width,
        curve_radius=curve_radius(width),
    )


# ---------------------------------------------------------------------------
# Per-step decisions
# ---------------------------------------------------------------------------


def curve_direction(
    step_index: int,
    contents: Sequence[Any] | None,
    rng: RandomSource,
) -> bool:
    """Return ``True`` for a right turn at *step_index*.

    When *contents* is non-empty the entry ``contents[step_index % len]``
    decides: an even-length name turns right, a directory turns left.
    Anything else (or no contents at all) falls back to a coin flip on *rng*.
    """
    if contents:
        item = contents[step_index % len(contents)]
        if len(item.name) % 2 == 0:
            return True
        if item.type == "dir":
            return False
    return rng.next_float() > 0.5


def segment_color(step_index: int, languages: Mapping[str, float] | None) -> str:
    """Colour for the straight laid at *step_index*.

    The language at ``step_index % len(languages)`` picks its own palette
    colour when it holds more than 60 % of the repository; otherwise the
    colour alternates blue/purple with the step parity.
    """
    if languages:
        names = list(languages)
        lang_index = step_index % len(names)
        dominance = _finite_non_negative(languages[names[lang_index]]) / 100.0
        if dominance > 0.6:
            return SEGMENT_PALETTE[lang_index % len(SEGMENT_PALETTE)]
    return BLUE if step_index % 2 == 0 else PURPLE


def curve_color(is_right_turn: bool) -> str:
    return RIGHT_CURVE_COLOR if is_right_turn else LEFT_CURVE_COLOR


def straight_length_option(rng: RandomSource) -> int:
    """Pick one of :data:`STRAIGHT_LENGTH_OPTIONS` uniformly."""
    index = int(rng.next_float() * len(STRAIGHT_LENGTH_OPTIONS))
    return STRAIGHT_LENGTH_OPTIONS[min(index, len(STRAIGHT_LENGTH_OPTIONS) - 1)]
