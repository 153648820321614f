"""
Track Store

Holds the ball track and one track per player, indexed by frame number,
along with the fixed team/role roster derived from player indices.
Lookups past the end of a track return None instead of raising.
"""
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.schemas import PlayerRole, TeamSide
from gps_match_analyzer.utils.geometry import GeoPoint, haversine_distance

BALL = "ball"

EntityId = Union[str, int]

ROLE_BY_SLOT = {
    0: PlayerRole.DEFENDER,
    1: PlayerRole.MIDFIELDER,
    2: PlayerRole.FORWARD,
}


def parse_sample(sample: object) -> Optional[GeoPoint]:
    """Coerce a raw (lat, lon) sample, returning None when it is malformed."""
    if isinstance(sample, (str, bytes)):
        return None
    try:
        lat, lon = sample[0], sample[1]  # type: ignore[index]
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError, IndexError, KeyError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return GeoPoint(lat, lon)


def clean_track(samples: Iterable[object]) -> Tuple[List[GeoPoint], int]:
    """Drop malformed samples. Returns (track, number_skipped)."""
    track: List[GeoPoint] = []
    skipped = 0
    for sample in samples:
        point = parse_sample(sample)
        if point is None:
            skipped += 1
            continue
        track.append(point)
    return track, skipped


def _entity_key(entity: EntityId) -> Optional[EntityId]:
    """Normalize an entity id: "ball" stays a string, player ids become ints."""
    if isinstance(entity, str):
        key = entity.strip().lower()
        if key == BALL:
            return BALL
        if key.lstrip("-").isdigit():
            return int(key)
        return None
    if isinstance(entity, int):
        return entity
    return None


class TrackStore:
    """
    Per-entity position sequences for one recording.

    Team assignment is a fixed partition of player indices: the first half
    of the roster is HOME, the second half AWAY. Roles are resolved once
    per player from its index (index mod 3).
    """

    def __init__(
        self,
        ball_track: Sequence[GeoPoint],
        player_tracks: Mapping[int, Sequence[GeoPoint]],
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.player_count = self.config.TOTAL_PLAYERS
        self.ball: List[GeoPoint] = list(ball_track)
        self.players: Dict[int, List[GeoPoint]] = {
            pid: list(player_tracks.get(pid, [])) for pid in range(self.player_count)
        }

        half = self.player_count // 2
        self.teams: Dict[int, TeamSide] = {
            pid: TeamSide.HOME if pid < half else TeamSide.AWAY
            for pid in range(self.player_count)
        }
        self.roles: Dict[int, PlayerRole] = {
            pid: ROLE_BY_SLOT[pid % 3] for pid in range(self.player_count)
        }

    @classmethod
    def from_mapping(
        cls,
        tracks: Mapping[EntityId, Iterable[object]],
        config: Optional[Settings] = None,
    ) -> "TrackStore":
        """
        Build a store from the loader's entity -> samples mapping.

        Malformed samples and unknown entity ids are skipped, never fatal.
        """
        config = config or default_settings
        ball_track: List[GeoPoint] = []
        player_tracks: Dict[int, List[GeoPoint]] = {}
        skipped_total = 0

        for entity, samples in tracks.items():
            key = _entity_key(entity)
            if key is None or (key != BALL and not 0 <= key < config.TOTAL_PLAYERS):
                print(f"[TRACK_STORE] Ignoring unknown entity: {entity!r}")
                continue
            try:
                track, skipped = clean_track(samples)
            except TypeError:
                print(f"[TRACK_STORE] Ignoring non-sequence track for entity: {entity!r}")
                continue
            skipped_total += skipped
            if key == BALL:
                ball_track = track
            else:
                player_tracks[key] = track

        if skipped_total:
            print(f"[TRACK_STORE] Skipped {skipped_total} malformed samples")

        return cls(ball_track, player_tracks, config)

    # ============== Lookups ==============

    @property
    def frame_count(self) -> int:
        """Length of the ball track; the common time axis of the analysis."""
        return len(self.ball)

    @property
    def player_ids(self) -> List[int]:
        return list(range(self.player_count))

    def ball_position(self, frame: int) -> Optional[GeoPoint]:
        if 0 <= frame < len(self.ball):
            return self.ball[frame]
        return None

    def player_position(self, player_id: int, frame: int) -> Optional[GeoPoint]:
        track = self.players.get(player_id)
        if track is None or not 0 <= frame < len(track):
            return None
        return track[frame]

    def position(self, entity: EntityId, frame: int) -> Optional[GeoPoint]:
        """Position of any entity at a frame, or None when absent."""
        if entity == BALL:
            return self.ball_position(frame)
        return self.player_position(int(entity), frame)

    def team_of(self, player_id: int) -> TeamSide:
        return self.teams[player_id]

    def role_of(self, player_id: int) -> PlayerRole:
        return self.roles[player_id]

    def same_team(self, player_a: int, player_b: int) -> bool:
        return self.teams[player_a] == self.teams[player_b]

    def players_on(self, team: TeamSide) -> List[int]:
        return [pid for pid, side in self.teams.items() if side == team]

    def player_distances(self, frame: int, point: GeoPoint) -> List[Tuple[int, float]]:
        """
        Distance from a point to every player present at a frame.

        Returns:
            List of (player_id, meters), nearest first; ties keep index order
        """
        distances = []
        for pid in self.player_ids:
            pos = self.player_position(pid, frame)
            if pos is None:
                continue
            distances.append((pid, haversine_distance(point, pos)))
        distances.sort(key=lambda item: item[1])
        return distances

    def players_near_ball(self, frame: int, radius: float) -> List[Tuple[int, float]]:
        """Players within radius meters of the ball at a frame, nearest first."""
        ball_pos = self.ball_position(frame)
        if ball_pos is None:
            return []
        return [(pid, d) for pid, d in self.player_distances(frame, ball_pos) if d <= radius]
