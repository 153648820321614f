"""
Shot Detection Service

Scans the ball track for goal-directed trajectories.

A frame is a shot candidate when the ball is near a goal mouth and is
closer to a goal mouth than it was two frames earlier. The striker is
the nearest player within the detection radius. Shot angle is measured
between the ball's movement and the line from the ball to the target
goal; shots below the angle threshold are on target.
"""
import math
from typing import Dict, List, Optional, Sequence, Tuple

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import ShotRecord
from gps_match_analyzer.models.schemas import PlayerRole
from gps_match_analyzer.services.event_log import MatchEventLog
from gps_match_analyzer.services.track_store import TrackStore
from gps_match_analyzer.utils.geometry import (
    GeoPoint,
    angle_between,
    haversine_distance,
    meters_to_geo,
    movement_vector,
)

GoalPositions = Tuple[GeoPoint, GeoPoint]


def default_goal_positions(config: Optional[Settings] = None) -> GoalPositions:
    """Goal mouths at both ends of the configured field, on its centre line."""
    config = config or default_settings
    center = GeoPoint(config.BASE_LAT, config.BASE_LON)
    half_length = config.FIELD_LENGTH_M / 2
    return (
        meters_to_geo(-half_length, 0.0, center),
        meters_to_geo(half_length, 0.0, center),
    )


class ShotDetector:
    """
    Detects shots from the ball track alone.

    Goal outcome is deterministic: the n-th recorded shot of the recording
    is a goal when n is listed in GOAL_SHOT_NUMBERS and the shot is on
    target.
    """

    LOOKAROUND_FRAMES = 2  # Frames before/after the candidate frame

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

        # Detection thresholds
        self.detection_radius = self.config.SHOT_DETECTION_RADIUS_M
        self.angle_threshold = math.radians(self.config.SHOT_ANGLE_THRESHOLD_DEG)
        self.goal_zone_radius = self.config.GOAL_POST_WIDTH_M * 3
        self.min_frames_between = self.config.SHOT_MIN_FRAMES_BETWEEN
        self.goal_shot_numbers = set(self.config.GOAL_SHOT_NUMBERS)

        self.speed_factors: Dict[PlayerRole, float] = {
            PlayerRole.DEFENDER: self.config.DEFENDER_SHOT_SPEED_FACTOR,
            PlayerRole.MIDFIELDER: self.config.MIDFIELDER_SHOT_SPEED_FACTOR,
            PlayerRole.FORWARD: self.config.FORWARD_SHOT_SPEED_FACTOR,
        }

        self.shots: List[ShotRecord] = []

    def reset(self):
        """Reset detector state for new analysis."""
        self.shots = []

    def calculate_shot_speed(self, distance_m: float, frames: int, role: PlayerRole) -> float:
        """
        Ball speed over a frame window, scaled by the striker's role.

        Returns:
            Speed in km/h
        """
        elapsed_s = frames * self.config.FRAME_INTERVAL_S
        if elapsed_s <= 0:
            return 0.0
        return distance_m / elapsed_s * 3.6 * self.speed_factors[role]

    def detect(
        self,
        store: TrackStore,
        log: MatchEventLog,
        goals: Optional[Sequence[GeoPoint]] = None
    ) -> List[ShotRecord]:
        """
        Detect shots and record them into the event log.

        Args:
            store: Track store for the recording
            log: Event log allocated by the pass stage
            goals: The two goal-mouth positions

        Returns:
            List of detected shots in frame order
        """
        self.reset()
        goal1, goal2 = goals if goals is not None else default_goal_positions(self.config)
        ball = store.ball
        offset = self.LOOKAROUND_FRAMES
        last_shot_frame = -self.min_frames_between

        for i in range(offset, len(ball) - offset):
            if i - last_shot_frame < self.min_frames_between:
                continue

            prev_pos = ball[i - offset]
            ball_pos = ball[i]
            next_pos = ball[i + offset]

            dist_goal1 = haversine_distance(ball_pos, goal1)
            dist_goal2 = haversine_distance(ball_pos, goal2)
            moving_toward_goal1 = dist_goal1 < haversine_distance(prev_pos, goal1)
            moving_toward_goal2 = dist_goal2 < haversine_distance(prev_pos, goal2)

            near_goal = dist_goal1 < self.goal_zone_radius or dist_goal2 < self.goal_zone_radius
            if not near_goal or not (moving_toward_goal1 or moving_toward_goal2):
                continue

            nearby = store.player_distances(i, ball_pos)
            if not nearby or nearby[0][1] > self.detection_radius:
                continue
            striker = nearby[0][0]

            target_goal = goal1 if dist_goal1 < dist_goal2 else goal2
            shot_angle = angle_between(
                movement_vector(prev_pos, ball_pos),
                movement_vector(ball_pos, target_goal)
            )
            is_on_target = shot_angle < self.angle_threshold

            shot_number = len(self.shots) + 1
            is_goal = is_on_target and shot_number in self.goal_shot_numbers

            shot = ShotRecord(
                player_id=striker,
                frame=i,
                start_frame=i - offset,
                end_frame=i + offset,
                start_position=prev_pos,
                end_position=next_pos,
                speed_kmh=self.calculate_shot_speed(
                    haversine_distance(prev_pos, next_pos), 2 * offset, store.role_of(striker)
                ),
                distance_to_goal=min(dist_goal1, dist_goal2),
                shot_angle=shot_angle,
                is_on_target=is_on_target,
                target_goal=target_goal,
                is_goal=is_goal,
                trajectory=(prev_pos, ball_pos, next_pos)
            )

            self.shots.append(shot)
            log.record_shot(shot)
            last_shot_frame = i

            if is_goal and self.config.VERBOSE:
                print(f"[SHOT_DETECTOR] Goal by player {striker} at frame {i} "
                      f"({shot.speed_kmh:.1f} km/h, {shot.distance_to_goal:.1f}m)")

        print(f"[SHOT_DETECTOR] Detected {len(self.shots)} shots, "
              f"{sum(1 for s in self.shots if s.is_goal)} goals")
        return self.shots
