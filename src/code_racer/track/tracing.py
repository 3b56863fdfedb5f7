"""Trace events emitted while a track is generated.

The generator never logs directly; it reports named events with a dict of
fields to an observer.  The default observer forwards them to ``DEBUG``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)

TraceObserver = Callable[[str, dict], None]


def logging_observer(event: str, fields: dict) -> None:
    """Default observer: one ``DEBUG`` record per event."""
    _logger.debug("%s %s", event, fields)


class RecordingObserver:
    """Keeps every event in memory; useful for tests and diagnostics."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def __call__(self, event: str, fields: dict) -> None:
        self.events.append((event, fields))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
