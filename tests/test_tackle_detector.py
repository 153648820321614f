"""Tests for tackle detection."""
from gps_match_analyzer.config import settings
from gps_match_analyzer.models.schemas import TeamSide
from gps_match_analyzer.services.event_log import MatchEventLog
from gps_match_analyzer.services.tackle_detector import TackleDetector

from builders import make_store, stationary

CONTACT_FRAME = 10
FRAMES = 20


def challenge_store(challenger: int, won: bool):
    """
    Player 0 holds the ball at the origin; the challenger arrives from 10m
    away on the contact frame. When the challenge is won, the challenger
    carries the ball off on the next frame.
    """
    ball = stationary(0, 0, CONTACT_FRAME + 1)
    challenger_path = stationary(10, 0, CONTACT_FRAME) + [(0.5, 0)]
    if won:
        ball += stationary(3, 0, FRAMES - CONTACT_FRAME - 1)
        challenger_path += stationary(2.5, 0, FRAMES - CONTACT_FRAME - 1)
    else:
        ball += stationary(0, 0, FRAMES - CONTACT_FRAME - 1)
        challenger_path += stationary(6, 0, FRAMES - CONTACT_FRAME - 1)

    return make_store(ball, {
        0: stationary(0, 1, FRAMES),
        challenger: challenger_path,
    })


def repeated_challenge_store(contact_frames, frames):
    """
    Player 0 keeps the ball at the origin while opponent 3 lunges in on each
    of the contact frames and falls straight back to 10m away.
    """
    challenger_path = [(0.5, 0) if f in contact_frames else (10, 0) for f in range(frames)]
    return make_store(stationary(0, 0, frames), {
        0: stationary(0, 1, frames),
        3: challenger_path,
    })


def run_tackles(store):
    log = MatchEventLog.for_store(store)
    tackles = TackleDetector().detect(store, log)
    return tackles, log


class TestRawPossession:

    def test_nearest_player_within_radius(self):
        store = make_store([(0, 0), (0, 0)], {0: [(0, 1.5), (0, 2.5)]})
        assert TackleDetector().track_raw_possession(store) == [0, None]


class TestTackleDetection:

    def test_successful_tackle(self):
        tackles, log = run_tackles(challenge_store(challenger=3, won=True))

        assert len(tackles) == 1
        tackle = tackles[0]
        assert tackle.tackling_player == 3
        assert tackle.tackled_player == 0
        assert tackle.frame == CONTACT_FRAME
        assert tackle.is_successful

        assert log.players[3].tackles_made == [tackle]
        assert log.players[0].tackles_received == [tackle]
        assert len(log.teams[TeamSide.AWAY].tackles_made) == 1
        assert len(log.teams[TeamSide.HOME].tackles_received) == 1
        assert log.tackles == [tackle]

    def test_unsuccessful_tackle(self):
        tackles, log = run_tackles(challenge_store(challenger=3, won=False))

        assert len(tackles) == 1
        assert (tackles[0].tackling_player, tackles[0].tackled_player) == (3, 0)
        assert not tackles[0].is_successful
        assert log.players[3].tackles_made == tackles

    def test_teammates_do_not_tackle(self):
        tackles, log = run_tackles(challenge_store(challenger=1, won=True))

        assert tackles == []
        assert log.tackles == []

    def test_rerun_does_not_duplicate_records(self):
        store = challenge_store(challenger=3, won=True)
        log = MatchEventLog.for_store(store)
        detector = TackleDetector()
        detector.detect(store, log)
        detector.detect(store, log)

        assert len(log.tackles) == 1
        assert len(log.players[3].tackles_made) == 1
        assert len(log.teams[TeamSide.HOME].tackles_received) == 1

    def test_empty_recording(self):
        tackles, _ = run_tackles(make_store([]))
        assert tackles == []


class TestTackleCooldown:

    def test_challenges_inside_cooldown_are_not_recorded(self):
        gap = settings.TACKLE_MIN_FRAMES_BETWEEN
        tackles, log = run_tackles(repeated_challenge_store({10, 100, 10 + gap}, 10 + gap + 20))

        assert [t.frame for t in tackles] == [10, 10 + gap]
        assert all((t.tackling_player, t.tackled_player) == (3, 0) for t in tackles)
        assert not any(t.is_successful for t in tackles)
        assert log.tackles == tackles

    def test_challenge_one_frame_short_of_cooldown_is_skipped(self):
        gap = settings.TACKLE_MIN_FRAMES_BETWEEN
        tackles, _ = run_tackles(repeated_challenge_store({10, 10 + gap - 1}, 10 + gap + 20))

        assert [t.frame for t in tackles] == [10]

    def test_consecutive_tackles_are_spaced_by_cooldown(self):
        contacts = set(range(10, 400, 40))
        tackles, _ = run_tackles(repeated_challenge_store(contacts, 420))

        frames = [t.frame for t in tackles]
        assert frames == [10, 170, 330]
        assert all(b - a >= settings.TACKLE_MIN_FRAMES_BETWEEN for a, b in zip(frames, frames[1:]))
