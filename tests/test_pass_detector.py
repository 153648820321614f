"""Tests for pass detection and event-log allocation."""
import pytest

from gps_match_analyzer.config import Settings
from gps_match_analyzer.models.schemas import TeamSide
from gps_match_analyzer.services.pass_detector import PassDetector
from gps_match_analyzer.services.possession_tracker import PossessionTracker
from gps_match_analyzer.services.track_store import TrackStore
from gps_match_analyzer.utils.geometry import haversine_distance

from builders import at, make_store, pass_scenario, stationary


def run_passes(store, config=None):
    timeline = PossessionTracker(config).track(store)
    detector = PassDetector(config)
    log = detector.analyze(store, timeline)
    return detector, log


def handover_store(separation: float, frames: int = 20):
    """Player 0 stands at the origin and hands the ball to teammate 1 standing `separation` meters east."""
    half = frames // 2
    ball = stationary(0, 0, half) + stationary(separation, 0, frames - half)
    return make_store(ball, {0: stationary(0, 0, frames), 1: stationary(separation, 0, frames)})


class TestPassDetection:

    def test_single_pass_between_teammates(self):
        store = TrackStore.from_mapping(pass_scenario())
        detector, log = run_passes(store)

        assert len(detector.passes) == 1
        record = detector.passes[0]
        assert (record.from_player, record.to_player) == (0, 1)
        assert record.distance == pytest.approx(25.0, abs=0.05)

        assert log.total_passes == 1
        assert log.total_passing_distance == pytest.approx(25.0, abs=0.05)
        assert log.players[0].passes_to[1].count == 1
        assert log.players[1].passes_from[0].count == 1
        assert log.passes == detector.passes

    def test_possession_frames_credited(self):
        store = TrackStore.from_mapping(pass_scenario())
        _, log = run_passes(store)

        assert log.players[0].possession_frames[0] == 1
        assert len(log.players[0].possession_frames) + len(log.players[1].possession_frames) == 20
        assert log.teams[TeamSide.HOME].possession_frames == 20
        assert log.teams[TeamSide.AWAY].possession_frames == 0

    def test_cross_team_change_is_not_a_pass(self):
        ball = stationary(0, 0, 10) + stationary(10, 0, 10)
        store = make_store(ball, {0: stationary(0, 0, 20), 3: stationary(10, 0, 20)})
        detector, log = run_passes(store)

        assert detector.passes == []
        assert log.total_passes == 0

    def test_pass_beyond_max_distance_rejected(self):
        ball = stationary(0, 0, 10) + stationary(35, 0, 10)
        store = make_store(ball, {0: stationary(0, 0, 20), 1: stationary(35, 0, 20)})
        detector, _ = run_passes(store)

        assert detector.passes == []

    def test_pass_below_min_distance_rejected(self):
        detector, log = run_passes(handover_store(1.5))

        assert detector.passes == []
        assert log.total_passes == 0

    def test_pass_at_exact_min_distance_accepted(self):
        distance = haversine_distance(at(0, 0), at(2, 0))
        detector, _ = run_passes(handover_store(2), Settings(PASS_MIN_DISTANCE_M=distance))

        assert [(p.from_player, p.to_player) for p in detector.passes] == [(0, 1)]
        assert detector.passes[0].distance == distance

    def test_pass_at_exact_max_distance_accepted(self):
        distance = haversine_distance(at(0, 0), at(30, 0))
        detector, _ = run_passes(handover_store(30), Settings(PASS_MAX_DISTANCE_M=distance))

        assert [(p.from_player, p.to_player) for p in detector.passes] == [(0, 1)]
        assert detector.passes[0].distance == distance

    def test_cooldown_blocks_quick_return_pass(self):
        ball = stationary(0, 0, 5) + stationary(10, 0, 2) + stationary(0, 0, 6)
        store = make_store(ball, {0: stationary(0, 0, 13), 1: stationary(10, 0, 13)})
        detector, _ = run_passes(store)

        assert [(p.from_player, p.to_player, p.frame) for p in detector.passes] == [(0, 1, 6)]

    def test_empty_recording(self):
        store = make_store([])
        detector, log = run_passes(store)

        assert detector.passes == []
        assert len(log.players) == 6


class TestPassStats:

    def test_totals_per_team(self):
        store = TrackStore.from_mapping(pass_scenario())
        detector, _ = run_passes(store)
        stats = detector.get_pass_stats(store)

        assert stats["total_passes"] == 1
        assert stats["home"]["total_passes"] == 1
        assert stats["home"]["avg_pass_distance_m"] == pytest.approx(25.0, abs=0.1)
        assert stats["away"] == {"total_passes": 0, "total_distance_m": 0.0, "avg_pass_distance_m": 0.0}
