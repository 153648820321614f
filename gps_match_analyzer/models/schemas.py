"""
Pydantic models for API request/response schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from enum import Enum


# ============== Enums ==============

class TeamSide(str, Enum):
    HOME = "home"  # First half of the roster
    AWAY = "away"  # Second half of the roster


class PlayerRole(str, Enum):
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    FORWARD = "forward"


# ============== Base Models ==============

class Position(BaseModel):
    """GPS position in decimal degrees."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")


# ============== API Request/Response Models ==============

class AnalysisRequest(BaseModel):
    """Full recording submitted for analysis."""
    tracks: Dict[str, Any] = Field(
        ...,
        description='Entity id ("ball", "0".."5") -> ordered [lat, lon] samples; malformed entries are dropped'
    )
    goals: Optional[List[Position]] = Field(
        None, min_length=2, max_length=2,
        description="Two goal-mouth positions; defaults to the configured field"
    )


class ServiceStatus(BaseModel):
    """Service health response."""
    name: str
    version: str
    status: str = "ok"
