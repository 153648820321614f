"""
Pass Detection Service

Detects passes from the smoothed possession timeline.
A pass is a direct possession change between two teammates whose
separation at that frame is a plausible passing distance.
"""
from typing import Dict, List, Optional

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import PassRecord
from gps_match_analyzer.models.schemas import TeamSide
from gps_match_analyzer.services.event_log import MatchEventLog
from gps_match_analyzer.services.possession_tracker import PossessionTimeline
from gps_match_analyzer.services.track_store import TrackStore
from gps_match_analyzer.utils.geometry import haversine_distance


class PassDetector:
    """
    Detects passes and allocates the per-player event log.

    Pass detection algorithm:
    1. Walk the possession timeline frame by frame
    2. Possession moves from player P directly to player Q (both resolved)
    3. P and Q are on the same team
    4. At least min_frames_between frames since the last recorded pass
    5. Distance between P and Q at that frame is within [min, max]
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

        # Detection parameters
        self.min_frames_between = self.config.PASS_MIN_FRAMES_BETWEEN
        self.min_pass_distance = self.config.PASS_MIN_DISTANCE_M
        self.max_pass_distance = self.config.PASS_MAX_DISTANCE_M

        self.passes: List[PassRecord] = []

    def reset(self):
        """Reset detector state for new analysis."""
        self.passes = []

    def analyze(self, store: TrackStore, timeline: PossessionTimeline) -> MatchEventLog:
        """
        Detect passes and credit possession frames.

        Args:
            store: Track store for the recording
            timeline: Output of the possession tracker

        Returns:
            A freshly allocated MatchEventLog holding possession and pass data
        """
        self.reset()
        log = MatchEventLog.for_store(store)

        current_possessor: Optional[int] = None
        last_event_frame = -self.min_frames_between

        for frame, possessor in enumerate(timeline.possessors):
            if possessor is not None:
                log.record_possession(possessor, frame)

            if (frame - last_event_frame >= self.min_frames_between and
                    possessor is not None and current_possessor is not None and
                    possessor != current_possessor and
                    store.same_team(current_possessor, possessor)):
                record = self._create_pass(store, current_possessor, possessor, frame)
                if record is not None:
                    log.record_pass(record)
                    self.passes.append(record)
                    last_event_frame = frame

            current_possessor = possessor

        print(f"[PASS_DETECTOR] Detected {len(self.passes)} passes")
        return log

    def _create_pass(
        self,
        store: TrackStore,
        from_player: int,
        to_player: int,
        frame: int
    ) -> Optional[PassRecord]:
        """Create a PassRecord if both players are present and the distance is plausible."""
        from_pos = store.player_position(from_player, frame)
        to_pos = store.player_position(to_player, frame)
        if from_pos is None or to_pos is None:
            return None

        distance = haversine_distance(from_pos, to_pos)
        if not self.min_pass_distance <= distance <= self.max_pass_distance:
            return None

        return PassRecord(
            from_player=from_player,
            to_player=to_player,
            distance=distance,
            frame=frame
        )

    def get_pass_stats(self, store: TrackStore) -> Dict:
        """Get pass totals per team."""
        stats = {}
        for side in TeamSide:
            team_passes = [p for p in self.passes if store.team_of(p.from_player) == side]
            total_distance = sum(p.distance for p in team_passes)
            stats[side.value] = {
                "total_passes": len(team_passes),
                "total_distance_m": round(total_distance, 1),
                "avg_pass_distance_m": round(total_distance / len(team_passes), 1) if team_passes else 0.0,
            }
        stats["total_passes"] = len(self.passes)
        return stats
