"""
Track Loader

Reads the GPS recorder's text exports into the entity -> samples mapping
consumed by the analysis pipeline.

Sample lines start with two spaces and carry latitude and longitude as the
first two whitespace-separated tokens; everything else is header text.
"""
from pathlib import Path
from typing import Dict, List, Optional, Union

from gps_match_analyzer.config import Settings, settings as default_settings
from gps_match_analyzer.services.track_store import BALL, EntityId
from gps_match_analyzer.utils.geometry import GeoPoint

BALL_FILE_NAME = "coordinatesball.txt"
PLAYER_FILE_TEMPLATE = "coordinates{number}.txt"


class TrackLoadError(ValueError):
    """Raised when a recording directory cannot be read at all."""


def parse_track_lines(lines: List[str]) -> List[GeoPoint]:
    """
    Parse sample lines, skipping headers and unparsable samples.

    Args:
        lines: Raw file lines

    Returns:
        Ordered list of GeoPoint samples
    """
    samples: List[GeoPoint] = []
    for line in lines:
        if len(line) <= 2 or not line.startswith("  "):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            samples.append(GeoPoint(float(parts[0]), float(parts[1])))
        except ValueError:
            continue
    return samples


def load_track_file(path: Path) -> List[GeoPoint]:
    """Load one entity's track. A missing file yields an empty track."""
    if not path.exists():
        print(f"[TRACK_LOADER] Missing track file: {path}")
        return []

    with path.open("r", encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()

    samples = parse_track_lines(lines)
    skipped = sum(1 for line in lines if len(line) > 2 and line.startswith("  ")) - len(samples)
    print(f"[TRACK_LOADER] Loaded {len(samples)} samples from {path.name} ({skipped} skipped)")
    return samples


def load_match_directory(
    directory: Union[str, Path],
    config: Optional[Settings] = None,
) -> Dict[EntityId, List[GeoPoint]]:
    """
    Load a recording directory (coordinates1..N.txt + coordinatesball.txt).

    Entities whose file is missing or empty are left out of the mapping.

    Raises:
        TrackLoadError: If the directory does not exist
    """
    config = config or default_settings
    directory = Path(directory)
    if not directory.is_dir():
        raise TrackLoadError(f"Recording directory not found: {directory}")

    tracks: Dict[EntityId, List[GeoPoint]] = {}
    for player_id in range(config.TOTAL_PLAYERS):
        samples = load_track_file(directory / PLAYER_FILE_TEMPLATE.format(number=player_id + 1))
        if samples:
            tracks[player_id] = samples

    ball_samples = load_track_file(directory / BALL_FILE_NAME)
    if ball_samples:
        tracks[BALL] = ball_samples

    return tracks
