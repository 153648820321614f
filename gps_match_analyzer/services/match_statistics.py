"""
Match Statistics Service

Read-only fold of every detector's output into per-player, per-team and
match-wide statistics. Rates are derived on read and are 0 whenever their
denominator is 0.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import (
    DribbleRecord,
    InterceptionRecord,
    ShotRecord,
    TackleRecord,
)
from gps_match_analyzer.models.schemas import PlayerRole, TeamSide
from gps_match_analyzer.services.dribble_detector import DribbleSummary, summarize_dribbles
from gps_match_analyzer.services.event_log import MatchEventLog, PassInfo, PlayerEventLog


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return (part / whole) * 100


@dataclass
class PlayerStatistics:
    """Individual player statistics."""
    player_id: int
    team: TeamSide
    role: PlayerRole
    possession_sequence: List[int] = field(default_factory=list)
    passes_to: Dict[int, PassInfo] = field(default_factory=dict)
    passes_from: Dict[int, PassInfo] = field(default_factory=dict)
    shots: List[ShotRecord] = field(default_factory=list)
    goals: int = 0
    tackles_made: List[TackleRecord] = field(default_factory=list)
    tackles_received: List[TackleRecord] = field(default_factory=list)
    dribbles: List[DribbleRecord] = field(default_factory=list)
    dribble_summary: DribbleSummary = field(default_factory=DribbleSummary)
    interceptions: List[InterceptionRecord] = field(default_factory=list)
    top_n: int = 3

    @property
    def possession_frames(self) -> int:
        return len(self.possession_sequence)

    @property
    def passes_made(self) -> int:
        return sum(info.count for info in self.passes_to.values())

    @property
    def passes_received(self) -> int:
        return sum(info.count for info in self.passes_from.values())

    @property
    def average_pass_distance(self) -> float:
        if self.passes_made == 0:
            return 0.0
        total = sum(info.total_distance for info in self.passes_to.values())
        return total / self.passes_made

    @property
    def shots_on_target(self) -> int:
        return sum(1 for s in self.shots if s.is_on_target)

    @property
    def shot_accuracy(self) -> float:
        return _percentage(self.shots_on_target, len(self.shots))

    @property
    def conversion_rate(self) -> float:
        return _percentage(self.goals, len(self.shots))

    @property
    def successful_tackles(self) -> int:
        return sum(1 for t in self.tackles_made if t.is_successful)

    @property
    def tackle_success_rate(self) -> float:
        return _percentage(self.successful_tackles, len(self.tackles_made))

    @property
    def average_interception_distance(self) -> float:
        if not self.interceptions:
            return 0.0
        return float(np.mean([i.interception_distance for i in self.interceptions]))

    @property
    def average_interception_quality(self) -> float:
        if not self.interceptions:
            return 0.0
        return float(np.mean([i.quality_score for i in self.interceptions]))

    @property
    def top_interceptions(self) -> List[InterceptionRecord]:
        """Best interceptions by quality; earlier frames win ties."""
        return sorted(self.interceptions, key=lambda i: (-i.quality_score, i.frame))[:self.top_n]

    def to_dict(self) -> Dict:
        return {
            "player_id": self.player_id,
            "team": self.team.value,
            "role": self.role.value,
            "possession_frames": self.possession_frames,
            "passes": {
                "made": self.passes_made,
                "received": self.passes_received,
                "average_distance_m": round(self.average_pass_distance, 2),
                "to": {str(pid): info.to_dict() for pid, info in sorted(self.passes_to.items())},
                "from": {str(pid): info.to_dict() for pid, info in sorted(self.passes_from.items())},
            },
            "shots": {
                "total": len(self.shots),
                "on_target": self.shots_on_target,
                "goals": self.goals,
                "accuracy": round(self.shot_accuracy, 1),
                "conversion_rate": round(self.conversion_rate, 1),
            },
            "tackles": {
                "made": len(self.tackles_made),
                "successful": self.successful_tackles,
                "received": len(self.tackles_received),
                "success_rate": round(self.tackle_success_rate, 1),
            },
            "dribbles": self.dribble_summary.to_dict(),
            "interceptions": {
                "total": len(self.interceptions),
                "average_distance_m": round(self.average_interception_distance, 2),
                "average_quality": round(self.average_interception_quality, 3),
                "top": [i.to_dict() for i in self.top_interceptions],
            },
        }


@dataclass
class TeamStatistics:
    """Aggregated statistics for a team."""
    team: TeamSide
    player_ids: List[int] = field(default_factory=list)
    possession_frames: int = 0
    total_frames: int = 0
    passes: int = 0
    shots: int = 0
    goals: int = 0
    tackles_made: List[TackleRecord] = field(default_factory=list)
    tackles_received: List[TackleRecord] = field(default_factory=list)
    dribbles: int = 0
    interceptions: int = 0

    @property
    def possession_pct(self) -> float:
        return _percentage(self.possession_frames, self.total_frames)

    @property
    def successful_tackles(self) -> int:
        return sum(1 for t in self.tackles_made if t.is_successful)

    @property
    def tackle_success_rate(self) -> float:
        return _percentage(self.successful_tackles, len(self.tackles_made))

    def to_dict(self) -> Dict:
        return {
            "team": self.team.value,
            "player_ids": list(self.player_ids),
            "possession_frames": self.possession_frames,
            "possession_pct": round(self.possession_pct, 1),
            "passes": self.passes,
            "shots": self.shots,
            "goals": self.goals,
            "tackles_made": len(self.tackles_made),
            "tackles_received": len(self.tackles_received),
            "successful_tackles": self.successful_tackles,
            "tackle_success_rate": round(self.tackle_success_rate, 1),
            "dribbles": self.dribbles,
            "interceptions": self.interceptions,
        }


@dataclass
class MatchSummary:
    """Match-wide totals."""
    total_passes: int = 0
    total_passing_distance: float = 0.0
    total_shots: int = 0
    shots_on_target: int = 0
    goals: int = 0
    average_shot_speed: float = 0.0  # km/h
    total_tackles: int = 0
    successful_tackles: int = 0
    total_dribbles: int = 0
    total_interceptions: int = 0

    @property
    def average_passing_distance(self) -> float:
        if self.total_passes == 0:
            return 0.0
        return self.total_passing_distance / self.total_passes

    @property
    def shot_accuracy(self) -> float:
        return _percentage(self.shots_on_target, self.total_shots)

    @property
    def conversion_rate(self) -> float:
        return _percentage(self.goals, self.total_shots)

    @property
    def tackle_success_rate(self) -> float:
        return _percentage(self.successful_tackles, self.total_tackles)

    def to_dict(self) -> Dict:
        return {
            "total_passes": self.total_passes,
            "total_passing_distance_m": round(self.total_passing_distance, 1),
            "average_passing_distance_m": round(self.average_passing_distance, 2),
            "total_shots": self.total_shots,
            "shots_on_target": self.shots_on_target,
            "goals": self.goals,
            "average_shot_speed_kmh": round(self.average_shot_speed, 1),
            "shot_accuracy": round(self.shot_accuracy, 1),
            "conversion_rate": round(self.conversion_rate, 1),
            "total_tackles": self.total_tackles,
            "successful_tackles": self.successful_tackles,
            "tackle_success_rate": round(self.tackle_success_rate, 1),
            "total_dribbles": self.total_dribbles,
            "total_interceptions": self.total_interceptions,
        }


@dataclass
class MatchStatistics:
    """Everything the aggregator produces for one run."""
    players: List[PlayerStatistics]
    teams: Dict[TeamSide, TeamStatistics]
    summary: MatchSummary

    def to_dict(self) -> Dict:
        return {
            "players": [p.to_dict() for p in self.players],
            "teams": {side.value: t.to_dict() for side, t in self.teams.items()},
            "summary": self.summary.to_dict(),
        }


class MatchStatisticsAggregator:
    """
    Folds the event log and the dribble/interception lists into statistics.

    Inputs are never modified; running aggregate twice on the same inputs
    gives equal results.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def aggregate(
        self,
        log: MatchEventLog,
        dribbles: List[DribbleRecord],
        interceptions: List[InterceptionRecord],
        total_frames: int = 0
    ) -> MatchStatistics:
        players = [
            self._player_statistics(entry, dribbles, interceptions)
            for entry in log.players
        ]

        teams: Dict[TeamSide, TeamStatistics] = {}
        for side, team_log in log.teams.items():
            members = [p for p in players if p.team == side]
            teams[side] = TeamStatistics(
                team=side,
                player_ids=list(team_log.player_ids),
                possession_frames=team_log.possession_frames,
                total_frames=total_frames,
                passes=sum(p.passes_made for p in members),
                shots=sum(len(p.shots) for p in members),
                goals=team_log.goals,
                tackles_made=list(team_log.tackles_made),
                tackles_received=list(team_log.tackles_received),
                dribbles=sum(len(p.dribbles) for p in members),
                interceptions=sum(len(p.interceptions) for p in members),
            )

        summary = MatchSummary(
            total_passes=log.total_passes,
            total_passing_distance=log.total_passing_distance,
            total_shots=len(log.shots),
            shots_on_target=sum(1 for s in log.shots if s.is_on_target),
            goals=log.total_goals,
            average_shot_speed=float(np.mean([s.speed_kmh for s in log.shots])) if log.shots else 0.0,
            total_tackles=len(log.tackles),
            successful_tackles=sum(1 for t in log.tackles if t.is_successful),
            total_dribbles=len(dribbles),
            total_interceptions=len(interceptions),
        )

        return MatchStatistics(players=players, teams=teams, summary=summary)

    def _player_statistics(
        self,
        entry: PlayerEventLog,
        dribbles: List[DribbleRecord],
        interceptions: List[InterceptionRecord]
    ) -> PlayerStatistics:
        own_dribbles = [d for d in dribbles if d.player_id == entry.player_id]
        return PlayerStatistics(
            player_id=entry.player_id,
            team=entry.team,
            role=entry.role,
            possession_sequence=list(entry.possession_frames),
            passes_to=dict(entry.passes_to),
            passes_from=dict(entry.passes_from),
            shots=list(entry.shots),
            goals=entry.goals,
            tackles_made=list(entry.tackles_made),
            tackles_received=list(entry.tackles_received),
            dribbles=own_dribbles,
            dribble_summary=summarize_dribbles(
                own_dribbles,
                top_n=self.config.DRIBBLE_TOP_N,
                ball_control_weight=self.config.BALL_CONTROL_WEIGHT,
                speed_control_weight=self.config.SPEED_CONTROL_WEIGHT,
            ),
            interceptions=[i for i in interceptions if i.intercepting_player == entry.player_id],
            top_n=self.config.INTERCEPTION_TOP_N,
        )
