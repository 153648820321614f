"""
Analysis Pipeline

Runs every stage in order over one recording:
Possession -> Pass -> Shot -> Tackle -> Dribble -> Interception -> Aggregate.

Each call builds fresh detectors and a fresh event log, so no state from
a previous run can leak into the next.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.models.events import (
    DribbleRecord,
    InterceptionRecord,
    PassRecord,
    ShotRecord,
    TackleRecord,
)
from gps_match_analyzer.services.dribble_detector import DribbleDetector
from gps_match_analyzer.services.interception_detector import InterceptionDetector
from gps_match_analyzer.services.match_statistics import MatchStatistics, MatchStatisticsAggregator
from gps_match_analyzer.services.pass_detector import PassDetector
from gps_match_analyzer.services.possession_tracker import PossessionTimeline, PossessionTracker
from gps_match_analyzer.services.shot_detector import ShotDetector, default_goal_positions
from gps_match_analyzer.services.tackle_detector import TackleDetector
from gps_match_analyzer.services.track_store import EntityId, TrackStore, parse_sample
from gps_match_analyzer.utils.geometry import GeoPoint


@dataclass
class AnalysisResult:
    """Output of one analysis run."""
    frame_count: int
    goal_positions: Sequence[GeoPoint]
    possession: PossessionTimeline
    passes: List[PassRecord] = field(default_factory=list)
    shots: List[ShotRecord] = field(default_factory=list)
    tackles: List[TackleRecord] = field(default_factory=list)
    dribbles: List[DribbleRecord] = field(default_factory=list)
    interceptions: List[InterceptionRecord] = field(default_factory=list)
    statistics: Optional[MatchStatistics] = None

    def to_dict(self) -> Dict:
        return {
            "frame_count": self.frame_count,
            "goal_positions": [{"lat": g.lat, "lon": g.lon} for g in self.goal_positions],
            "possession": list(self.possession.possessors),
            "passes": [p.to_dict() for p in self.passes],
            "shots": [s.to_dict() for s in self.shots],
            "tackles": [t.to_dict() for t in self.tackles],
            "dribbles": [d.to_dict() for d in self.dribbles],
            "interceptions": [i.to_dict() for i in self.interceptions],
            "statistics": self.statistics.to_dict() if self.statistics else None,
        }


def _resolve_goals(goal_positions: Optional[Iterable[object]], config: Settings) -> Sequence[GeoPoint]:
    if goal_positions is None:
        return default_goal_positions(config)

    goals = []
    for goal in goal_positions:
        point = parse_sample(goal)
        if point is None:
            raise ValueError(f"Invalid goal position: {goal!r}")
        goals.append(point)
    if len(goals) != 2:
        raise ValueError(f"Expected 2 goal positions, got {len(goals)}")
    return tuple(goals)


def run_analysis(
    tracks: Mapping[EntityId, Iterable[object]],
    goal_positions: Optional[Iterable[object]] = None,
    config: Optional[Settings] = None
) -> AnalysisResult:
    """
    Analyze a full recording.

    Args:
        tracks: Entity id ("ball" or player index) -> ordered (lat, lon) samples
        goal_positions: The two goal-mouth positions; defaults to the configured field
        config: Settings override

    Returns:
        AnalysisResult with the possession timeline, every record list and
        the aggregated statistics

    Raises:
        ValueError: If goal_positions is given but is not two valid positions
    """
    config = config or default_settings
    goals = _resolve_goals(goal_positions, config)

    store = TrackStore.from_mapping(tracks, config)
    print(f"[PIPELINE] Analyzing {store.frame_count} frames for {store.player_count} players")

    timeline = PossessionTracker(config).track(store)

    pass_detector = PassDetector(config)
    log = pass_detector.analyze(store, timeline)

    shots = ShotDetector(config).detect(store, log, goals)
    tackles = TackleDetector(config).detect(store, log)
    dribbles = DribbleDetector(config).detect(store)
    interceptions = InterceptionDetector(config).detect(store, timeline)

    statistics = MatchStatisticsAggregator(config).aggregate(
        log, dribbles, interceptions, total_frames=store.frame_count
    )

    print(f"[PIPELINE] Done: {len(pass_detector.passes)} passes, {len(shots)} shots, "
          f"{len(tackles)} tackles, {len(dribbles)} dribbles, {len(interceptions)} interceptions")

    return AnalysisResult(
        frame_count=store.frame_count,
        goal_positions=goals,
        possession=timeline,
        passes=list(pass_detector.passes),
        shots=list(shots),
        tackles=list(tackles),
        dribbles=list(dribbles),
        interceptions=list(interceptions),
        statistics=statistics,
    )
