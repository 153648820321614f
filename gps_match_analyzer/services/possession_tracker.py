"""
Possession Tracker

Assigns the ball to a player (or to no one) on every frame.

Per frame the closest and second-closest players to the ball are found;
the closest player is pushed into a short sliding window and the frame's
possessor is the majority of that window, accepted only when it fills at
least POSSESSION_MIN_RATIO of the window.
"""
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.services.track_store import TrackStore


@dataclass
class PossessionTimeline:
    """Per-frame possession output, aligned to the ball track."""
    possessors: List[Optional[int]] = field(default_factory=list)
    closest_players: List[Optional[int]] = field(default_factory=list)
    closest_distances: List[Optional[float]] = field(default_factory=list)
    second_closest_players: List[Optional[int]] = field(default_factory=list)
    second_closest_distances: List[Optional[float]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.possessors)

    def possessor_at(self, frame: int) -> Optional[int]:
        """Smoothed possessor, None for no possessor or out-of-range frames."""
        if 0 <= frame < len(self.possessors):
            return self.possessors[frame]
        return None

    def possession_frames(self, player_id: int) -> List[int]:
        return [i for i, p in enumerate(self.possessors) if p == player_id]


class PossessionTracker:
    """Majority-vote possession smoothing over nearest-player samples."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.window_size = self.config.POSSESSION_WINDOW_SIZE
        self.min_ratio = self.config.POSSESSION_MIN_RATIO

    def determine_possessor(self, window: List[Optional[int]]) -> Optional[int]:
        """
        Majority possessor of a window.

        The "no one" entries never win; the most frequent player wins only
        if it occupies at least min_ratio of the window.
        """
        if not window:
            return None

        counts = Counter(p for p in window if p is not None)
        if not counts:
            return None

        player, count = counts.most_common(1)[0]
        if count >= len(window) * self.min_ratio:
            return player
        return None

    def track(self, store: TrackStore) -> PossessionTimeline:
        """Run the tracker over the whole recording."""
        timeline = PossessionTimeline()
        recent: Deque[Optional[int]] = deque([None] * self.window_size, maxlen=self.window_size)

        for frame, ball_pos in enumerate(store.ball):
            distances = store.player_distances(frame, ball_pos)
            closest, closest_dist = distances[0] if distances else (None, None)
            second, second_dist = distances[1] if len(distances) > 1 else (None, None)

            recent.append(closest)
            timeline.possessors.append(self.determine_possessor(list(recent)))
            timeline.closest_players.append(closest)
            timeline.closest_distances.append(closest_dist)
            timeline.second_closest_players.append(second)
            timeline.second_closest_distances.append(second_dist)

        resolved = sum(1 for p in timeline.possessors if p is not None)
        print(f"[POSSESSION] {resolved}/{len(timeline)} frames with a possessor")
        return timeline
