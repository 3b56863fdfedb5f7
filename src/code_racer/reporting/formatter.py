"""Markdown track summary formatter."""

from __future__ import annotations

from pathlib import Path

from code_racer.track.models import CurvePiece, Piece, Track

_DIRECTION_LABEL: dict[str, str] = {
    "left": "Left",
    "right": "Right",
}


def _format_piece(index: int, piece: Piece) -> str:
    pos = piece.position
    if isinstance(piece, CurvePiece):
        label = _DIRECTION_LABEL.get(piece.direction, piece.direction)
        detail = f"{label} {piece.angle:.0f}°, r={piece.radius:g}"
    else:
        detail = f"{piece.length:g} m"
    return (
        f"| {index} | {piece.name} | {piece.kind} | {detail} "
        f"| ({pos.x:.2f}, {pos.z:.2f}) | {piece.color} |"
    )


class TrackSummaryFormatter:
    """Format a :class:`~code_racer.track.models.Track` as Markdown."""

    def __init__(self, title: str = "Track summary") -> None:
        self.title = title

    def format(self, track: Track, repo: str = "") -> str:
        """Return the full Markdown summary as a string."""
        meta = track.metadata
        lines: list[str] = [f"# {self.title}", ""]

        if repo:
            lines.append(f"**Repository**: {repo}  ")
        lines += [
            f"**Complexity**: {meta.complexity}  ",
            f"**Length**: {meta.length:.1f}  ",
            f"**Width**: {meta.width:g}  ",
            f"**Turns**: {meta.turns} "
            f"({sum(1 for c in track.curves if c.is_right)} right, "
            f"{sum(1 for c in track.curves if not c.is_right)} left)  ",
            f"**Closure gap**: {meta.closure_gap:.4f}",
            "",
        ]

        if meta.approximately_closed:
            lines += ["> **Warning**: the loop is only approximately closed.", ""]

        lines += [
            "## Pieces",
            "",
            "| # | Name | Kind | Shape | Position | Color |",
            "|---|------|------|-------|----------|-------|",
        ]
        lines += [_format_piece(i, p) for i, p in enumerate(track.pieces, 1)]
        lines.append("")

        return "\n".join(lines)

    def write(self, track: Track, path: str, repo: str = "") -> None:
        """Write the formatted summary to *path* (UTF-8)."""
        Path(path).write_text(self.format(track, repo=repo), encoding="utf-8")
