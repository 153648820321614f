"""
Dribble Detection Service

Tracks sustained individual ball control per player.

A run starts when a player is close to the ball and moving within the
dribbling speed band. It becomes a dribble once it has covered the
minimum distance over the minimum number of frames. A run ends when the
player leaves the speed band, loses track data, or the ball gets further
away than the dispossession distance (flagged as dispossessed).
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import DribbleRecord
from gps_match_analyzer.services.track_store import TrackStore
from gps_match_analyzer.utils.geometry import GeoPoint, haversine_distance, standard_deviation


@dataclass
class DribbleSummary:
    """Aggregated dribble statistics for one player."""
    total_dribbles: int = 0
    successful_dribbles: int = 0
    total_distance: float = 0.0
    max_speed: float = 0.0
    average_speed: float = 0.0
    ball_control_quality: float = 0.0
    speed_control_quality: float = 0.0
    overall_quality: float = 0.0
    longest: List[DribbleRecord] = field(default_factory=list)
    fastest: List[DribbleRecord] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        if self.total_dribbles == 0:
            return 0.0
        return (self.successful_dribbles / self.total_dribbles) * 100

    @property
    def average_distance(self) -> float:
        if self.total_dribbles == 0:
            return 0.0
        return self.total_distance / self.total_dribbles

    def to_dict(self) -> Dict:
        return {
            "total_dribbles": self.total_dribbles,
            "successful_dribbles": self.successful_dribbles,
            "success_rate": round(self.success_rate, 1),
            "total_distance_m": round(self.total_distance, 1),
            "average_distance_m": round(self.average_distance, 1),
            "max_speed_ms": round(self.max_speed, 2),
            "average_speed_ms": round(self.average_speed, 2),
            "ball_control_quality": round(self.ball_control_quality, 3),
            "speed_control_quality": round(self.speed_control_quality, 3),
            "overall_quality": round(self.overall_quality, 3),
            "longest": [d.to_dict() for d in self.longest],
            "fastest": [d.to_dict() for d in self.fastest],
        }


def summarize_dribbles(
    dribbles: List[DribbleRecord],
    top_n: int = 3,
    ball_control_weight: float = 0.6,
    speed_control_weight: float = 0.4
) -> DribbleSummary:
    """Fold one player's dribbles into a DribbleSummary."""
    if not dribbles:
        return DribbleSummary()

    ball_quality = float(np.mean([d.ball_control_score for d in dribbles]))
    speed_quality = float(np.mean([d.speed_consistency for d in dribbles]))

    return DribbleSummary(
        total_dribbles=len(dribbles),
        successful_dribbles=sum(1 for d in dribbles if d.is_successful),
        total_distance=sum(d.distance for d in dribbles),
        max_speed=max(d.peak_speed for d in dribbles),
        average_speed=float(np.mean([d.average_speed for d in dribbles])),
        ball_control_quality=ball_quality,
        speed_control_quality=speed_quality,
        overall_quality=ball_control_weight * ball_quality + speed_control_weight * speed_quality,
        longest=sorted(dribbles, key=lambda d: d.distance, reverse=True)[:top_n],
        fastest=sorted(dribbles, key=lambda d: d.peak_speed, reverse=True)[:top_n],
    )


class DribbleDetector:
    """
    Per-player dribble state machine over the whole recording.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

        # Speed band (m/s); above max is a run without the ball
        self.min_speed = self.config.DRIBBLE_MIN_SPEED_MS
        self.max_speed = self.config.DRIBBLE_MAX_SPEED_MS
        self.min_distance = self.config.DRIBBLE_MIN_DISTANCE_M
        self.min_duration = self.config.DRIBBLE_MIN_DURATION_FRAMES
        self.min_frames_between = self.config.DRIBBLE_MIN_FRAMES_BETWEEN
        self.max_ball_distance = self.config.DRIBBLE_MAX_BALL_DISTANCE_M
        self.dispossession_distance = self.config.DISPOSSESSION_DISTANCE_M
        self.close_player_distance = self.config.CLOSE_PLAYER_DISTANCE_M
        self.ball_control_weight = self.config.BALL_CONTROL_WEIGHT
        self.speed_control_weight = self.config.SPEED_CONTROL_WEIGHT

        interval_frames = round(self.config.SPEED_CALCULATION_INTERVAL_S / self.config.FRAME_INTERVAL_S)
        self.speed_interval_frames = max(1, interval_frames)

        self.active_dribbles: Dict[int, Dict] = {}
        self.next_allowed_frame: Dict[int, int] = {}
        self.dribbles: List[DribbleRecord] = []

    def reset(self):
        """Reset detector state for new analysis."""
        self.active_dribbles = {}
        self.next_allowed_frame = {}
        self.dribbles = []

    def player_speed(self, store: TrackStore, player_id: int, frame: int) -> float:
        """Displacement over the speed interval, in m/s. 0 when history is missing."""
        current = store.player_position(player_id, frame)
        previous = store.player_position(player_id, frame - self.speed_interval_frames)
        if current is None or previous is None or frame < self.speed_interval_frames:
            return 0.0
        elapsed_s = self.speed_interval_frames * self.config.FRAME_INTERVAL_S
        return haversine_distance(previous, current) / elapsed_s

    def detect(self, store: TrackStore) -> List[DribbleRecord]:
        """
        Detect dribbles for every player.

        Returns:
            Dribble records ordered by end frame, then player
        """
        self.reset()

        for frame in range(store.frame_count):
            ball_pos = store.ball_position(frame)
            for player_id in store.player_ids:
                self._process_player(store, player_id, frame, ball_pos)

        # Recording ended mid-run
        for player_id in list(self.active_dribbles):
            self._end_dribble(player_id, dispossessed=False)

        self.dribbles.sort(key=lambda d: (d.end_frame, d.player_id))
        dispossessed = sum(1 for d in self.dribbles if d.ended_by_dispossession)
        print(f"[DRIBBLE_DETECTOR] Detected {len(self.dribbles)} dribbles ({dispossessed} dispossessed)")
        return self.dribbles

    def _process_player(
        self,
        store: TrackStore,
        player_id: int,
        frame: int,
        ball_pos: Optional[GeoPoint]
    ):
        pos = store.player_position(player_id, frame)
        if pos is None or ball_pos is None:
            if player_id in self.active_dribbles:
                self._end_dribble(player_id, dispossessed=False)
            return

        speed = self.player_speed(store, player_id, frame)
        ball_distance = haversine_distance(pos, ball_pos)
        in_speed_band = self.min_speed < speed < self.max_speed

        if player_id in self.active_dribbles:
            if ball_distance > self.dispossession_distance:
                self._end_dribble(player_id, dispossessed=True, frame=frame)
            elif not in_speed_band:
                self._end_dribble(player_id, dispossessed=False)
            else:
                self._extend_dribble(store, player_id, frame, pos, speed, ball_distance)
            return

        if frame < self.next_allowed_frame.get(player_id, 0):
            return

        if in_speed_band and ball_distance <= self.max_ball_distance:
            self.active_dribbles[player_id] = {
                "start_frame": frame,
                "last_frame": frame,
                "positions": [pos],
                "speeds": [speed],
                "control_scores": [self._control_score(ball_distance, speed, [speed])],
                "distance": 0.0,
                "confirmed": False,
                "under_pressure": self._opponent_close(store, player_id, frame, pos),
            }

    def _extend_dribble(
        self,
        store: TrackStore,
        player_id: int,
        frame: int,
        pos: GeoPoint,
        speed: float,
        ball_distance: float
    ):
        dribble = self.active_dribbles[player_id]
        dribble["distance"] += haversine_distance(dribble["positions"][-1], pos)
        dribble["positions"].append(pos)
        dribble["speeds"].append(speed)
        dribble["control_scores"].append(self._control_score(ball_distance, speed, dribble["speeds"]))
        dribble["last_frame"] = frame
        if self._opponent_close(store, player_id, frame, pos):
            dribble["under_pressure"] = True

        if (not dribble["confirmed"] and
                dribble["distance"] > self.min_distance and
                frame - dribble["start_frame"] > self.min_duration):
            dribble["confirmed"] = True

    def _control_score(self, ball_distance: float, speed: float, speeds: List[float]) -> float:
        """Rolling ball-control score: ball proximity blended with speed stability."""
        proximity = float(np.clip(1.0 - ball_distance / self.dispossession_distance, 0.0, 1.0))
        mean_speed = float(np.mean(speeds))
        if mean_speed > 0:
            stability = float(np.clip(1.0 - abs(speed - mean_speed) / mean_speed, 0.0, 1.0))
        else:
            stability = 0.0
        return self.ball_control_weight * proximity + self.speed_control_weight * stability

    def _opponent_close(self, store: TrackStore, player_id: int, frame: int, pos: GeoPoint) -> bool:
        for other, distance in store.player_distances(frame, pos):
            if distance > self.close_player_distance:
                break
            if other != player_id and not store.same_team(player_id, other):
                return True
        return False

    def _end_dribble(self, player_id: int, dispossessed: bool, frame: Optional[int] = None):
        """Close a run; confirmed runs become records and start the cooldown."""
        dribble = self.active_dribbles.pop(player_id)
        if not dribble["confirmed"]:
            return

        speeds = dribble["speeds"]
        mean_speed = float(np.mean(speeds))
        speed_consistency = 0.0
        if mean_speed > 0:
            speed_consistency = float(np.clip(1.0 - standard_deviation(speeds) / mean_speed, 0.0, 1.0))

        end_frame = frame if frame is not None else dribble["last_frame"]
        record = DribbleRecord(
            player_id=player_id,
            start_frame=dribble["start_frame"],
            end_frame=end_frame,
            path=tuple(dribble["positions"]),
            peak_speed=max(speeds),
            average_speed=mean_speed,
            distance=dribble["distance"],
            ended_by_dispossession=dispossessed,
            ball_control_score=float(np.mean(dribble["control_scores"])),
            speed_consistency=speed_consistency,
            under_pressure=dribble["under_pressure"],
        )
        self.dribbles.append(record)
        self.next_allowed_frame[player_id] = end_frame + self.min_frames_between
