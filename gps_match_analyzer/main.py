"""
GPS Match Analyzer - Main FastAPI Application

Exposes the event-reconstruction pipeline over HTTP: submit the ball and
player tracks of a recording, get back every detected event and the
aggregated statistics.
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from gps_match_analyzer.config import settings
from gps_match_analyzer.models.schemas import AnalysisRequest, ServiceStatus
from gps_match_analyzer.services.analysis_pipeline import run_analysis

# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Match event reconstruction from GPS tracks",
    version=settings.VERSION
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.VERSION
    }


@app.get("/api/status", response_model=ServiceStatus)
async def get_status():
    """Get service name and version."""
    return ServiceStatus(name=settings.APP_NAME, version=settings.VERSION)


@app.post("/api/analysis")
def analyze_match(request: AnalysisRequest):
    """
    Run the full analysis on a submitted recording.

    Malformed samples inside a track are dropped; unknown entity ids are
    ignored.
    """
    goals = None
    if request.goals is not None:
        goals = [(g.lat, g.lon) for g in request.goals]

    try:
        result = run_analysis(request.tracks, goals, settings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
