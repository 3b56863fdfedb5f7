"""End-to-end tests for TrackGenerator."""

from __future__ import annotations

import logging
import math

import pytest

from code_racer.metrics.models import RepositoryMetrics
from code_racer.track.assembler import (
    GeneratorConfig,
    TrackGenerator,
    generate_track,
    track_length,
)
from code_racer.track.geometry import quantize
from code_racer.track.models import CurvePiece, StraightPiece, Vector2D
from code_racer.track.parameters import BLUE, segment_color
from code_racer.track.pieces import requantize
from code_racer.track.randomness import SequenceRandom
from code_racer.track.tracing import RecordingObserver
from code_racer.track.validation import validate_pieces

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

GOLDEN_LANGUAGES = {
    "TypeScript": 88.7,
    "Rust": 4.6,
    "HTML": 3.6,
    "JavaScript": 2.4,
    "Other": 0.7,
}


def golden_metrics(**overrides) -> dict:
    metrics = {
        "fileCount": 150,
        "languages": dict(GOLDEN_LANGUAGES),
        "complexity": {"score": 7.5, "complexity": "high"},
        "contributorCount": 12,
        "dependencies": 87,
        "contents": [],
    }
    metrics.update(overrides)
    return metrics


VARIANTS = [
    golden_metrics(),
    golden_metrics(fileCount=0, languages={}, complexity={"score": 0}),
    golden_metrics(fileCount=40, complexity={"score": 10}),
    golden_metrics(
        fileCount=999,
        languages={"Python": 100.0},
        contents=[
            {"name": "src", "type": "dir"},
            {"name": "docs", "type": "dir"},
            {"name": "setup.py", "type": "file"},
            {"name": "LICENSE", "type": "file"},
        ],
    ),
]


def _max_run(directions: list[str]) -> int:
    best = run = 0
    previous = None
    for d in directions:
        run = run + 1 if d == previous else 1
        previous = d
        best = max(best, run)
    return best


# ---------------------------------------------------------------------------
# Golden scenario
# ---------------------------------------------------------------------------


def test_golden_parameters():
    params = TrackGenerator().parameters_for(golden_metrics())
    assert params.segment_count == 25
    assert params.curve_frequency == pytest.approx(0.3 + 7.5 / 30)
    assert params.segment_length == max(10, math.floor(10 * 1.5 * (1 - 7.5 / 30) + 0.5))
    assert params.track_width == 5
    assert params.curve_radius == 8


def test_golden_track():
    track = generate_track(golden_metrics(), seed=42)
    start = track.pieces[0]
    assert isinstance(start, StraightPiece)
    assert start.name == "Start"
    assert start.length == 11
    assert start.position == Vector2D(0.0, 5.5)
    assert start.rotation_y == 0.0
    assert track.pieces[-1].name == "Finish Line"

    meta = track.metadata
    assert meta.width == 5
    assert meta.complexity == "high"
    assert meta.turns == len(track.curves)
    assert not meta.approximately_closed
    assert meta.closure_gap <= 0.1
    assert all(p.width == 5 for p in track.pieces)
    assert all(c.radius == 8 for c in track.curves)
    assert track.obstacles == ()


def test_golden_segment_colors_follow_languages():
    track = generate_track(golden_metrics(), seed=42)
    segments = [p for p in track.straights if p.name.startswith("Segment ")]
    assert len(segments) == 25
    for step, segment in enumerate(segments):
        assert segment.color == segment_color(step, GOLDEN_LANGUAGES)
    # TypeScript dominates: blue even on odd steps that are multiples of five
    assert segments[5].color == BLUE
    assert segments[15].color == BLUE


def test_contents_steer_walker_curves():
    metrics = golden_metrics(contents=[{"name": "ab", "type": "file"}])
    for seed in range(10):
        track = generate_track(metrics, seed=seed)
        directions = [c.direction for c in track.curves if c.name.startswith("Curve ")]
        expected = ["left" if i % 3 == 2 else "right" for i in range(len(directions))]
        assert directions == expected, seed


# ---------------------------------------------------------------------------
# Properties over many seeds
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("metrics", VARIANTS)
def test_tracks_are_connected_and_closed(metrics):
    for seed in range(30):
        track = generate_track(metrics, seed=seed)
        report = validate_pieces(track.pieces)
        assert report.connected, (seed, report.max_gap)
        assert report.closed, (seed, report.closure_gap)
        assert not track.metadata.approximately_closed


@pytest.mark.parametrize("metrics", VARIANTS)
def test_no_three_consecutive_curves_turn_the_same_way(metrics):
    for seed in range(30):
        track = generate_track(metrics, seed=seed)
        directions = [c.direction for c in track.curves]
        assert _max_run(directions) <= 2, seed


def test_pieces_are_quantized():
    for seed in range(10):
        track = generate_track(golden_metrics(), seed=seed)
        for piece in track.pieces:
            assert requantize(piece) == piece


def test_metadata_length_sums_straights_and_arcs():
    track = generate_track(golden_metrics(), seed=5)
    expected = sum(s.length for s in track.straights) + sum(
        c.radius * math.pi / 2 for c in track.curves
    )
    assert track.metadata.length == pytest.approx(quantize(expected), abs=0.01)
    assert track_length(track.pieces) == track.metadata.length


def test_same_seed_same_track():
    first = generate_track(golden_metrics(), seed=7).to_json()
    second = generate_track(golden_metrics(), seed=7).to_json()
    assert first == second


def test_different_seeds_differ():
    tracks = {generate_track(golden_metrics(), seed=s).to_json() for s in range(5)}
    assert len(tracks) > 1


# ---------------------------------------------------------------------------
# Inputs and configuration
# ---------------------------------------------------------------------------


def test_rng_takes_precedence_over_seed():
    track = generate_track(golden_metrics(), rng=SequenceRandom([0.99]), seed=1)
    # 0.99 never curves and always picks the longest straight
    assert len(track.pieces) == 30
    assert [p.name for p in track.pieces[-4:]] == [
        "Closing Curve 1",
        "Connector 26",
        "Final Curve 2",
        "Finish Line",
    ]
    assert track.metadata.turns == 2


def test_accepts_repository_metrics_instance():
    metrics = RepositoryMetrics.from_dict(golden_metrics())
    assert generate_track(metrics, seed=3).to_json() == generate_track(
        golden_metrics(), seed=3
    ).to_json()


def test_bad_metrics_fall_back_to_defaults(caplog):
    with caplog.at_level(logging.WARNING):
        track = generate_track({"fileCount": "many", "languages": None}, seed=1)
    assert track.metadata.width == 3
    assert track.metadata.complexity == "low"
    assert validate_pieces(track.pieces).ok
    assert "fileCount" in caplog.text


def test_generation_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="code_racer.track.assembler"):
        generate_track(golden_metrics(name="donpui/winden"), seed=1)
    assert "Generated track for donpui/winden" in caplog.text


def test_observer_sees_every_stage():
    observer = RecordingObserver()
    generate_track(golden_metrics(), seed=2, observer=observer)
    names = observer.names()
    assert names[0] == "parameters"
    assert "start" in names
    assert "walk_complete" in names
    assert names[-1] == "closure_complete"


def test_generator_config_is_passed_to_closer():
    config = GeneratorConfig(max_closure_passes=0)
    track = TrackGenerator(config=config).generate(
        golden_metrics(), rng=SequenceRandom([0.99])
    )
    assert not any(p.name.startswith("Connector") for p in track.pieces)
    assert validate_pieces(track.pieces).ok


def test_curve_count_matches_turns():
    track = generate_track(golden_metrics(), seed=11)
    assert track.metadata.turns == sum(isinstance(p, CurvePiece) for p in track.pieces)
