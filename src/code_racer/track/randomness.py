"""Injectable random source for track generation."""

from __future__ import annotations

import random
import secrets
from typing import Protocol


class RandomSource(Protocol):
    """Anything that yields floats uniformly distributed in ``[0.0, 1.0)``."""

    def next_float(self) -> float: ...


class SeededRandom:
    """:class:`RandomSource` backed by :class:`random.Random`.

    Args:
        seed: Seed for the underlying generator.  ``None`` seeds from the OS,
            which makes generation non-reproducible.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_float(self) -> float:
        return self._rng.random()


class SequenceRandom:
    """Replays a fixed list of floats, cycling when exhausted.

    Handy in tests to force specific coin flips.
    """

    def __init__(self, values: list[float]) -> None:
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        self._values = list(values)
        self._index = 0

    def next_float(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


MAX_SEED = 2**31


def new_seed() -> int:
    """Pick a seed for callers that did not supply one, so every track is reproducible."""
    return secrets.randbelow(MAX_SEED)
