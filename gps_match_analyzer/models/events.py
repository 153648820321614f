"""
Match event records.

Records are frozen once a detector emits them; derived values are
properties computed on read.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from gps_match_analyzer.utils.geometry import GeoPoint


def _point_dict(point: GeoPoint) -> Dict[str, float]:
    return {"lat": point.lat, "lon": point.lon}


@dataclass(frozen=True)
class PassRecord:
    """A completed pass between two teammates."""
    from_player: int
    to_player: int
    distance: float  # meters between passer and receiver
    frame: int

    def to_dict(self) -> Dict:
        return {
            "from_player": self.from_player,
            "to_player": self.to_player,
            "distance_m": round(self.distance, 2),
            "frame": self.frame,
        }


@dataclass(frozen=True)
class ShotRecord:
    """A goal-directed ball trajectory attributed to the nearest player."""
    player_id: int
    frame: int
    start_frame: int
    end_frame: int
    start_position: GeoPoint
    end_position: GeoPoint
    speed_kmh: float
    distance_to_goal: float
    shot_angle: float  # radians between ball movement and ball->goal
    is_on_target: bool
    target_goal: GeoPoint
    is_goal: bool
    trajectory: Tuple[GeoPoint, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "player_id": self.player_id,
            "frame": self.frame,
            "start_frame": self.start_frame,
            "end_frame": self.end_frame,
            "start_position": _point_dict(self.start_position),
            "end_position": _point_dict(self.end_position),
            "speed_kmh": round(self.speed_kmh, 1),
            "distance_to_goal_m": round(self.distance_to_goal, 2),
            "shot_angle_rad": round(self.shot_angle, 4),
            "is_on_target": self.is_on_target,
            "target_goal": _point_dict(self.target_goal),
            "is_goal": self.is_goal,
            "trajectory": [_point_dict(p) for p in self.trajectory],
        }


@dataclass(frozen=True)
class TackleRecord:
    """A contested ball between two opposing players."""
    tackling_player: int
    tackled_player: int
    frame: int
    position: GeoPoint
    is_successful: bool

    def to_dict(self) -> Dict:
        return {
            "tackling_player": self.tackling_player,
            "tackled_player": self.tackled_player,
            "frame": self.frame,
            "position": _point_dict(self.position),
            "is_successful": self.is_successful,
        }


@dataclass(frozen=True)
class DribbleRecord:
    """A sustained run with the ball by one player."""
    player_id: int
    start_frame: int
    end_frame: int
    path: Tuple[GeoPoint, ...]
    peak_speed: float  # m/s
    average_speed: float  # m/s
    distance: float  # meters
    ended_by_dispossession: bool
    ball_control_score: float = 0.0
    speed_consistency: float = 0.0
    under_pressure: bool = False

    @property
    def is_successful(self) -> bool:
        return not self.ended_by_dispossession

    @property
    def duration_frames(self) -> int:
        return self.end_frame - self.start_frame

    def to_dict(self) -> Dict:
        return {
            "player_id": self.player_id,
            "start_frame": self.start_frame,
            "end_frame": self.end_frame,
            "path": [_point_dict(p) for p in self.path],
            "peak_speed_ms": round(self.peak_speed, 2),
            "average_speed_ms": round(self.average_speed, 2),
            "distance_m": round(self.distance, 2),
            "ended_by_dispossession": self.ended_by_dispossession,
            "is_successful": self.is_successful,
            "ball_control_score": round(self.ball_control_score, 3),
            "speed_consistency": round(self.speed_consistency, 3),
            "under_pressure": self.under_pressure,
        }


@dataclass(frozen=True)
class InterceptionRecord:
    """A defensive play cutting out an opposing pass."""
    intercepting_player: int
    passing_player: int
    frame: int
    position: GeoPoint
    interception_distance: float  # interceptor to ball, meters
    pass_distance: float  # ball travel over the lookback window, meters
    quality_score: float  # 0..1
    was_clean: bool = False

    def to_dict(self) -> Dict:
        return {
            "intercepting_player": self.intercepting_player,
            "passing_player": self.passing_player,
            "frame": self.frame,
            "position": _point_dict(self.position),
            "interception_distance_m": round(self.interception_distance, 2),
            "pass_distance_m": round(self.pass_distance, 2),
            "quality_score": round(self.quality_score, 3),
            "was_clean": self.was_clean,
        }
