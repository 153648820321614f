"""
Interception Detection Service

Scans the smoothed possession timeline for cross-team possession changes
that follow a real pass, crediting every nearby defender.
"""
from typing import Dict, List, Optional

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import InterceptionRecord
from gps_match_analyzer.services.possession_tracker import PossessionTimeline
from gps_match_analyzer.services.track_store import TrackStore
from gps_match_analyzer.utils.geometry import haversine_distance


class InterceptionDetector:
    """
    Detects interceptions from possession changes between teams.

    An interception candidate at frame f:
    1. Possessor changes from P (at f-1) to Q (at f), both resolved
    2. P and Q belong to opposite teams
    3. The ball travelled at least min_pass_distance over the lookback window
    4. The candidate plays for the team opposite P and is within radius of the ball
    5. The candidate has no interception in the previous min_frames_between frames

    Several defenders can be credited for the same transition.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

        # Detection thresholds
        self.radius = self.config.INTERCEPTION_RADIUS_M
        self.min_frames_between = self.config.INTERCEPTION_MIN_FRAMES_BETWEEN
        self.min_pass_distance = self.config.INTERCEPTION_MIN_PASS_DISTANCE_M
        self.lookback_frames = self.config.INTERCEPTION_PASS_LOOKBACK_FRAMES
        self.edge_margin = self.config.INTERCEPTION_EDGE_MARGIN_FRAMES
        self.clean_frames = self.config.INTERCEPTION_CLEAN_FRAMES

        # Quality modifiers
        self.long_pass_distance = self.config.INTERCEPTION_LONG_PASS_M
        self.clean_bonus = self.config.INTERCEPTION_CLEAN_BONUS
        self.unclean_penalty = self.config.INTERCEPTION_UNCLEAN_PENALTY
        self.long_pass_bonus = self.config.INTERCEPTION_LONG_PASS_BONUS

        self.last_interception_frame: Dict[int, int] = {}
        self.interceptions: List[InterceptionRecord] = []

    def reset(self):
        """Reset detector state for new analysis."""
        self.last_interception_frame = {}
        self.interceptions = []

    def calculate_quality(self, interception_distance: float, pass_distance: float, was_clean: bool) -> float:
        """
        Score an interception in [0, 1].

        Closer interceptions score higher; clean possession afterwards and
        cutting out a long pass raise the score.
        """
        proximity = max(0.0, 1.0 - interception_distance / self.radius)
        clean_factor = self.clean_bonus if was_clean else self.unclean_penalty
        length_factor = self.long_pass_bonus if pass_distance > self.long_pass_distance else 1.0
        return min(1.0, proximity * clean_factor * length_factor)

    def detect(self, store: TrackStore, timeline: PossessionTimeline) -> List[InterceptionRecord]:
        """
        Detect interceptions over the recording.

        Returns:
            Interception records in frame order; records within one frame
            are ordered nearest interceptor first
        """
        self.reset()
        possessors = timeline.possessors

        for frame in range(self.edge_margin, len(possessors) - self.edge_margin):
            previous = possessors[frame - 1]
            current = possessors[frame]
            if previous is None or current is None or previous == current:
                continue
            if store.same_team(previous, current):
                continue

            ball_pos = store.ball_position(frame)
            pass_start = store.ball_position(frame - self.lookback_frames)
            if ball_pos is None or pass_start is None:
                continue

            pass_distance = haversine_distance(pass_start, ball_pos)
            if pass_distance < self.min_pass_distance:
                continue

            for player_id, distance in store.players_near_ball(frame, self.radius):
                if store.same_team(player_id, previous):
                    continue

                last_frame = self.last_interception_frame.get(player_id)
                if last_frame is not None and frame - last_frame < self.min_frames_between:
                    continue

                was_clean = self._kept_possession(timeline, player_id, frame)
                interception = InterceptionRecord(
                    intercepting_player=player_id,
                    passing_player=previous,
                    frame=frame,
                    position=ball_pos,
                    interception_distance=distance,
                    pass_distance=pass_distance,
                    quality_score=self.calculate_quality(distance, pass_distance, was_clean),
                    was_clean=was_clean
                )

                self.interceptions.append(interception)
                self.last_interception_frame[player_id] = frame

                if self.config.VERBOSE and (interception.quality_score > 0.8 or
                                            pass_distance > self.long_pass_distance):
                    print(f"[INTERCEPTION] Player {player_id} intercepted player {previous} "
                          f"at frame {frame} (quality {interception.quality_score:.2f}, "
                          f"pass {pass_distance:.1f}m)")

        print(f"[INTERCEPTION] Detected {len(self.interceptions)} interceptions")
        return self.interceptions

    def _kept_possession(self, timeline: PossessionTimeline, player_id: int, frame: int) -> bool:
        """True if the player holds the ball within clean_frames after the interception."""
        return any(
            timeline.possessor_at(frame + offset) == player_id
            for offset in range(1, self.clean_frames + 1)
        )
