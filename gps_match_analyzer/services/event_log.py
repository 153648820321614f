"""
Match Event Log

Per-player and per-team containers shared by the detector stages of one
analysis run. The pass stage allocates a fresh log; the shot and tackle
stages write into it; the statistics aggregator only reads it.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from gps_match_analyzer.models.events import PassRecord, ShotRecord, TackleRecord
from gps_match_analyzer.models.schemas import PlayerRole, TeamSide
from gps_match_analyzer.services.track_store import TrackStore


@dataclass
class PassInfo:
    """Passes along one directed player pair."""
    count: int = 0
    total_distance: float = 0.0

    @property
    def average_distance(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_distance / self.count

    def add(self, distance: float):
        self.count += 1
        self.total_distance += distance

    def to_dict(self) -> Dict:
        return {
            "count": self.count,
            "total_distance_m": round(self.total_distance, 2),
            "average_distance_m": round(self.average_distance, 2),
        }


@dataclass
class PlayerEventLog:
    """Events credited to a single player."""
    player_id: int
    team: TeamSide
    role: PlayerRole
    possession_frames: List[int] = field(default_factory=list)
    passes_to: Dict[int, PassInfo] = field(default_factory=dict)
    passes_from: Dict[int, PassInfo] = field(default_factory=dict)
    shots: List[ShotRecord] = field(default_factory=list)
    goals: int = 0
    tackles_made: List[TackleRecord] = field(default_factory=list)
    tackles_received: List[TackleRecord] = field(default_factory=list)


@dataclass
class TeamEventLog:
    """Events aggregated over a team's player indices."""
    team: TeamSide
    player_ids: List[int] = field(default_factory=list)
    possession_frames: int = 0
    goals: int = 0
    tackles_made: List[TackleRecord] = field(default_factory=list)
    tackles_received: List[TackleRecord] = field(default_factory=list)


@dataclass
class MatchEventLog:
    """Mutable accumulator for one analysis run."""
    players: List[PlayerEventLog]
    teams: Dict[TeamSide, TeamEventLog]
    passes: List[PassRecord] = field(default_factory=list)
    shots: List[ShotRecord] = field(default_factory=list)
    tackles: List[TackleRecord] = field(default_factory=list)
    total_passes: int = 0
    total_passing_distance: float = 0.0
    total_goals: int = 0

    @classmethod
    def for_store(cls, store: TrackStore) -> "MatchEventLog":
        """Allocate empty containers sized to the store's roster."""
        players = [
            PlayerEventLog(player_id=pid, team=store.team_of(pid), role=store.role_of(pid))
            for pid in store.player_ids
        ]
        teams = {
            side: TeamEventLog(team=side, player_ids=store.players_on(side))
            for side in TeamSide
        }
        return cls(players=players, teams=teams)

    def team_log(self, player_id: int) -> TeamEventLog:
        return self.teams[self.players[player_id].team]

    def record_possession(self, player_id: int, frame: int):
        self.players[player_id].possession_frames.append(frame)
        self.team_log(player_id).possession_frames += 1

    def record_pass(self, record: PassRecord):
        passer = self.players[record.from_player]
        receiver = self.players[record.to_player]
        passer.passes_to.setdefault(record.to_player, PassInfo()).add(record.distance)
        receiver.passes_from.setdefault(record.from_player, PassInfo()).add(record.distance)

        self.passes.append(record)
        self.total_passes += 1
        self.total_passing_distance += record.distance

    def record_shot(self, record: ShotRecord):
        self.players[record.player_id].shots.append(record)
        self.shots.append(record)
        if record.is_goal:
            self.players[record.player_id].goals += 1
            self.team_log(record.player_id).goals += 1
            self.total_goals += 1

    def reset_tackles(self):
        """Discard tackle records so the tackle stage can be re-run."""
        self.tackles = []
        for player in self.players:
            player.tackles_made = []
            player.tackles_received = []
        for team in self.teams.values():
            team.tackles_made = []
            team.tackles_received = []

    def record_tackle(self, record: TackleRecord):
        self.players[record.tackling_player].tackles_made.append(record)
        self.players[record.tackled_player].tackles_received.append(record)
        self.team_log(record.tackling_player).tackles_made.append(record)
        self.team_log(record.tackled_player).tackles_received.append(record)
        self.tackles.append(record)
