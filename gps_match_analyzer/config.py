"""
Configuration settings for the GPS Match Analyzer.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analysis settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "GPS Match Analyzer"
    VERSION: str = "1.0.0"
    VERBOSE: bool = False

    # Recording
    FRAME_INTERVAL_S: float = 0.1  # 10 Hz GPS units
    TOTAL_PLAYERS: int = 6  # 3v3

    # Field geometry (small-sided pitch, meters)
    FIELD_LENGTH_M: float = 40.0
    FIELD_WIDTH_M: float = 20.0
    BASE_LAT: float = 51.4975
    BASE_LON: float = -0.1357

    # Possession smoothing
    POSSESSION_WINDOW_SIZE: int = 3
    POSSESSION_MIN_RATIO: float = 0.6  # Fraction of window needed to credit possession

    # Passes
    PASS_MIN_FRAMES_BETWEEN: int = 5
    PASS_MIN_DISTANCE_M: float = 2.0
    PASS_MAX_DISTANCE_M: float = 30.0

    # Shots
    SHOT_DETECTION_RADIUS_M: float = 15.0
    SHOT_ANGLE_THRESHOLD_DEG: float = 30.0
    GOAL_POST_WIDTH_M: float = 3.0
    SHOT_MIN_FRAMES_BETWEEN: int = 30
    GOAL_SHOT_NUMBERS: List[int] = [8, 12, 17]
    DEFENDER_SHOT_SPEED_FACTOR: float = 0.9
    MIDFIELDER_SHOT_SPEED_FACTOR: float = 1.1
    FORWARD_SHOT_SPEED_FACTOR: float = 1.2

    # Tackles
    TACKLE_MAX_BALL_DISTANCE_M: float = 2.0  # Raw (unsmoothed) possession radius
    TACKLE_PROXIMITY_M: float = 5.0
    TACKLE_MIN_FRAMES_BETWEEN: int = 150

    # Dribbles
    DRIBBLE_MIN_SPEED_MS: float = 0.3
    DRIBBLE_MAX_SPEED_MS: float = 15.0
    DRIBBLE_MIN_DISTANCE_M: float = 0.8
    DRIBBLE_MIN_DURATION_FRAMES: int = 6
    DRIBBLE_MIN_FRAMES_BETWEEN: int = 15
    DRIBBLE_MAX_BALL_DISTANCE_M: float = 2.0
    DISPOSSESSION_DISTANCE_M: float = 2.5
    SPEED_CALCULATION_INTERVAL_S: float = 0.2
    CLOSE_PLAYER_DISTANCE_M: float = 3.0
    BALL_CONTROL_WEIGHT: float = 0.6
    SPEED_CONTROL_WEIGHT: float = 0.4
    DRIBBLE_TOP_N: int = 3

    # Interceptions
    INTERCEPTION_RADIUS_M: float = 5.0
    INTERCEPTION_MIN_FRAMES_BETWEEN: int = 20
    INTERCEPTION_MIN_PASS_DISTANCE_M: float = 3.0
    INTERCEPTION_PASS_LOOKBACK_FRAMES: int = 5
    INTERCEPTION_EDGE_MARGIN_FRAMES: int = 10
    INTERCEPTION_CLEAN_FRAMES: int = 2
    INTERCEPTION_LONG_PASS_M: float = 10.0
    INTERCEPTION_CLEAN_BONUS: float = 1.2
    INTERCEPTION_UNCLEAN_PENALTY: float = 0.8
    INTERCEPTION_LONG_PASS_BONUS: float = 1.2
    INTERCEPTION_TOP_N: int = 3


settings = Settings()
