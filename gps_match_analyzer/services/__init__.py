"""Services package."""
from .track_store import TrackStore
from .track_loader import TrackLoadError, load_match_directory
from .possession_tracker import PossessionTimeline, PossessionTracker
from .pass_detector import PassDetector
from .shot_detector import ShotDetector, default_goal_positions
from .tackle_detector import TackleDetector
from .dribble_detector import DribbleDetector, summarize_dribbles
from .interception_detector import InterceptionDetector
from .match_statistics import MatchStatistics, MatchStatisticsAggregator
from .analysis_pipeline import AnalysisResult, run_analysis
