"""Data models."""
from .schemas import AnalysisRequest, PlayerRole, Position, ServiceStatus, TeamSide
