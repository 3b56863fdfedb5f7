"""Generate a race track from repository metrics.

Usage:
  uv run python scripts/generate_track.py --demo donpui/winden --seed 42 \\
      --output track.json --summary track.md

  uv run python scripts/generate_track.py --metrics metrics.json --db tracks.db

``--metrics`` reads a JSON file in the camelCase format served by the
repository analysis front end (``fileCount``, ``languages``, ``complexity``...).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from code_racer.errors import InvalidMetrics, NonConvergentClosure
from code_racer.metrics.demos import demo_ids, get_demo_metrics
from code_racer.metrics.models import RepositoryMetrics
from code_racer.reporting.formatter import TrackSummaryFormatter
from code_racer.storage.sqlite import TrackStorage
from code_racer.track.assembler import GeneratorConfig, generate_track
from code_racer.track.randomness import new_seed


def _load_metrics(args: argparse.Namespace) -> RepositoryMetrics:
    if args.demo:
        metrics = get_demo_metrics(args.demo)
        if metrics is None:
            print(
                f"  [!] Unknown demo {args.demo!r}; available: {', '.join(demo_ids())}",
                file=sys.stderr,
            )
            sys.exit(1)
        return metrics

    try:
        raw = json.loads(Path(args.metrics).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"  [!] Cannot read metrics from {args.metrics}: {exc}", file=sys.stderr)
        sys.exit(1)
    try:
        return RepositoryMetrics.from_dict(raw)
    except InvalidMetrics as exc:
        print(f"  [!] Invalid metrics in {args.metrics}: {exc}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Generate a closed race track from repository metrics")
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--demo", help="Demo repository id, e.g. donpui/winden")
    source.add_argument("--metrics", help="Path to a metrics JSON file")
    ap.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (omit to draw one; it is printed and stored)",
    )
    ap.add_argument("--output", default="track.json", help="Output track JSON path")
    ap.add_argument("--summary", default=None, help="Optional Markdown summary path")
    ap.add_argument("--db", default=None, help="Also store the track in this SQLite database")
    ap.add_argument("--strict", action="store_true", help="Fail if the loop cannot be closed")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log generation trace events")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    metrics = _load_metrics(args)
    repo = args.demo or metrics.name

    seed = args.seed if args.seed is not None else new_seed()

    try:
        track = generate_track(
            metrics,
            seed=seed,
            config=GeneratorConfig(strict_closure=args.strict),
        )
    except NonConvergentClosure as exc:
        print(f"  [!] Could not close the loop: {exc}", file=sys.stderr)
        sys.exit(1)
    meta = track.metadata

    Path(args.output).write_text(
        json.dumps(track.to_dict(), indent=2, sort_keys=True), encoding="utf-8"
    )
    print(f"Track     : {args.output}")
    print(f"Seed      : {seed}")
    print(f"Pieces    : {len(track.pieces)}  (turns: {meta.turns})")
    print(f"Length    : {meta.length:.1f}   width: {meta.width:g}")
    print(f"Closure   : {meta.closure_gap:.4f}{'  [approximate]' if meta.approximately_closed else ''}")

    if args.summary:
        TrackSummaryFormatter().write(track, args.summary, repo=repo)
        print(f"Summary   : {args.summary}")

    if args.db:
        storage = TrackStorage(args.db)
        try:
            track_id = storage.save_track(track, repo=repo, seed=seed)
        finally:
            storage.close()
        print(f"Stored    : {args.db} (id {track_id})")


if __name__ == "__main__":
    main()
