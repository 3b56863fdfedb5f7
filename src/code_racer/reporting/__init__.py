"""Human-readable track reports."""

from code_racer.reporting.formatter import TrackSummaryFormatter

__all__ = ["TrackSummaryFormatter"]
