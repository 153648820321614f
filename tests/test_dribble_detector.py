"""Tests for dribble detection and dribble summaries."""
import pytest

from gps_match_analyzer.models.events import DribbleRecord
from gps_match_analyzer.services.dribble_detector import DribbleDetector, summarize_dribbles

from builders import at, make_store, stationary

FRAMES = 30
STEP_M = 0.2  # 2 m/s at 10 Hz


def carry(frames: int = FRAMES, lead: float = 0.5):
    """Player 0 runs east at 2 m/s with the ball just ahead."""
    player = [(STEP_M * t, 0) for t in range(frames)]
    ball = [(x + lead, y) for x, y in player]
    return player, ball


def carry_then_stop(stop_frame: int, frames: int = FRAMES):
    """Player 0 carries the ball east at 2 m/s until stop_frame, then stands still."""
    player = [(STEP_M * min(t, stop_frame), 0) for t in range(frames)]
    ball = [(x + 0.5, y) for x, y in player]
    return player, ball


def make_record(distance, peak, control, consistency, dispossessed=False):
    return DribbleRecord(
        player_id=0,
        start_frame=0,
        end_frame=10,
        path=(at(0, 0), at(distance, 0)),
        peak_speed=peak,
        average_speed=peak / 2,
        distance=distance,
        ended_by_dispossession=dispossessed,
        ball_control_score=control,
        speed_consistency=consistency,
    )


class TestPlayerSpeed:

    def test_speed_over_two_frames(self):
        player, ball = carry()
        store = make_store(ball, {0: player})
        detector = DribbleDetector()

        assert detector.player_speed(store, 0, 0) == 0.0
        assert detector.player_speed(store, 0, 1) == 0.0
        assert detector.player_speed(store, 0, 5) == pytest.approx(2.0, abs=0.01)


class TestDribbleDetection:

    def test_controlled_run_to_end_of_recording(self):
        player, ball = carry()
        store = make_store(ball, {0: player, 3: stationary(0, 20, FRAMES)})
        dribbles = DribbleDetector().detect(store)

        assert len(dribbles) == 1
        dribble = dribbles[0]
        assert dribble.player_id == 0
        assert (dribble.start_frame, dribble.end_frame) == (2, FRAMES - 1)
        assert dribble.distance == pytest.approx(STEP_M * (FRAMES - 3), abs=0.01)
        assert dribble.peak_speed == pytest.approx(2.0, abs=0.01)
        assert dribble.is_successful
        assert not dribble.under_pressure
        # proximity 1 - 0.5/2.5 = 0.8, perfectly steady speed
        assert dribble.ball_control_score == pytest.approx(0.6 * 0.8 + 0.4 * 1.0, abs=0.01)
        assert dribble.speed_consistency == pytest.approx(1.0, abs=0.01)
        assert len(dribble.path) == FRAMES - 2

    def test_ball_lost_ends_with_dispossession(self):
        player, ball = carry()
        ball = ball[:20] + [(x + 5, y) for x, y in player[20:]]
        store = make_store(ball, {0: player})
        dribbles = DribbleDetector().detect(store)

        assert len(dribbles) == 1
        assert dribbles[0].ended_by_dispossession
        assert not dribbles[0].is_successful
        assert dribbles[0].end_frame == 20

    def test_short_run_is_discarded(self):
        player = [(STEP_M * min(t, 5), 0) for t in range(FRAMES)]
        ball = [(x + 0.5, y) for x, y in player]
        store = make_store(ball, {0: player})

        assert DribbleDetector().detect(store) == []

    def test_run_lasting_exactly_min_duration_is_discarded(self):
        # Run spans frames 2..8: six frames elapsed, the minimum must be exceeded
        player, ball = carry_then_stop(7)
        store = make_store(ball, {0: player})

        assert DribbleDetector().detect(store) == []

    def test_run_one_frame_past_min_duration_is_kept(self):
        player, ball = carry_then_stop(8)
        store = make_store(ball, {0: player})
        dribbles = DribbleDetector().detect(store)

        assert len(dribbles) == 1
        assert (dribbles[0].start_frame, dribbles[0].end_frame) == (2, 9)

    def test_sprint_without_ball_control(self):
        player = [(2.0 * t, 0) for t in range(FRAMES)]
        ball = [(x + 0.5, y) for x, y in player]
        store = make_store(ball, {0: player})

        assert DribbleDetector().detect(store) == []

    def test_opponent_alongside_marks_pressure(self):
        player, ball = carry()
        marker = [(x, 2.5) for x, _ in player]
        store = make_store(ball, {0: player, 3: marker})
        dribbles = DribbleDetector().detect(store)

        assert [d.player_id for d in dribbles] == [0]
        assert dribbles[0].under_pressure

    def test_missing_ball_track(self):
        player, _ = carry()
        store = make_store([], {0: player})
        assert DribbleDetector().detect(store) == []


class TestSummarizeDribbles:

    def test_empty(self):
        summary = summarize_dribbles([])
        assert summary.total_dribbles == 0
        assert summary.success_rate == 0.0
        assert summary.average_distance == 0.0

    def test_aggregates(self):
        long_slow = make_record(distance=5.0, peak=2.0, control=0.8, consistency=1.0)
        short_fast = make_record(distance=3.0, peak=4.0, control=0.6, consistency=0.5, dispossessed=True)
        summary = summarize_dribbles([long_slow, short_fast])

        assert summary.total_dribbles == 2
        assert summary.successful_dribbles == 1
        assert summary.success_rate == pytest.approx(50.0)
        assert summary.total_distance == pytest.approx(8.0)
        assert summary.average_distance == pytest.approx(4.0)
        assert summary.max_speed == pytest.approx(4.0)
        assert summary.ball_control_quality == pytest.approx(0.7)
        assert summary.speed_control_quality == pytest.approx(0.75)
        assert summary.overall_quality == pytest.approx(0.72)
        assert summary.longest[0] is long_slow
        assert summary.fastest[0] is short_fast
        assert summary.to_dict()["success_rate"] == 50.0
