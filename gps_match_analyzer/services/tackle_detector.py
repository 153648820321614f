"""
Tackle Detection Service

Detects contested balls between opposing players.

Uses its own unsmoothed possession sequence (nearest player within a
short radius of the ball) so that a change of possession is visible on
the exact frame of contact.
"""
from typing import List, Optional

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import TackleRecord
from gps_match_analyzer.services.event_log import MatchEventLog
from gps_match_analyzer.services.track_store import TrackStore


class TackleDetector:
    """
    Detects tackles from ball/player proximity and raw possession.

    A tackle is recorded at frame i when:
    1. At least two players are within proximity of the ball
    2. The two closest belong to opposite teams
    3. The raw possessor at i-1 is one of them
    4. No tackle was recorded in the previous min_frames_between frames

    The challenger is the member of the pair who did not hold the ball;
    the tackle succeeds if the challenger holds the ball at i+1.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

        # Detection thresholds
        self.max_ball_distance = self.config.TACKLE_MAX_BALL_DISTANCE_M
        self.proximity = self.config.TACKLE_PROXIMITY_M
        self.min_frames_between = self.config.TACKLE_MIN_FRAMES_BETWEEN

        self.raw_possession: List[Optional[int]] = []
        self.tackles: List[TackleRecord] = []

    def reset(self):
        """Reset detector state for new analysis."""
        self.raw_possession = []
        self.tackles = []

    def track_raw_possession(self, store: TrackStore) -> List[Optional[int]]:
        """Nearest player within max_ball_distance on every frame, without smoothing."""
        sequence: List[Optional[int]] = []
        for frame, ball_pos in enumerate(store.ball):
            distances = store.player_distances(frame, ball_pos)
            if distances and distances[0][1] < self.max_ball_distance:
                sequence.append(distances[0][0])
            else:
                sequence.append(None)
        return sequence

    def detect(self, store: TrackStore, log: MatchEventLog) -> List[TackleRecord]:
        """
        Detect tackles and record them into the event log.

        Any tackles already in the log are discarded first.
        """
        self.reset()
        log.reset_tackles()
        self.raw_possession = self.track_raw_possession(store)
        last_tackle_frame = -self.min_frames_between

        for i in range(1, len(store.ball) - 1):
            if i - last_tackle_frame < self.min_frames_between:
                continue

            close_players = [
                (pid, dist) for pid, dist in store.player_distances(i, store.ball[i])
                if dist < self.proximity
            ]
            if len(close_players) < 2:
                continue

            closest = close_players[0][0]
            second_closest = close_players[1][0]
            if store.same_team(closest, second_closest):
                continue

            prev_possessor = self.raw_possession[i - 1]
            next_possessor = self.raw_possession[i + 1]
            if prev_possessor not in (closest, second_closest):
                continue

            challenger = second_closest if prev_possessor == closest else closest

            tackle = TackleRecord(
                tackling_player=challenger,
                tackled_player=prev_possessor,
                frame=i,
                position=store.ball[i],
                is_successful=next_possessor == challenger
            )

            self.tackles.append(tackle)
            log.record_tackle(tackle)
            last_tackle_frame = i

        successful = sum(1 for t in self.tackles if t.is_successful)
        print(f"[TACKLE_DETECTOR] Detected {len(self.tackles)} tackles ({successful} successful)")
        return self.tackles
