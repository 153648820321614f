"""Tests for the HTTP surface."""
import pytest
from fastapi.testclient import TestClient

from gps_match_analyzer.config import settings
from gps_match_analyzer.main import app

from builders import pass_scenario


@pytest.fixture
def client():
    return TestClient(app)


def request_tracks():
    return {str(key): [list(p) for p in track] for key, track in pass_scenario().items()}


class TestStatus:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_status(self, client):
        response = client.get("/api/status")
        assert response.status_code == 200
        assert response.json() == {"name": settings.APP_NAME, "version": settings.VERSION, "status": "ok"}


class TestAnalysis:

    def test_analysis(self, client):
        response = client.post("/api/analysis", json={"tracks": request_tracks()})

        assert response.status_code == 200
        data = response.json()
        assert data["frame_count"] == 21
        assert [[p["from_player"], p["to_player"]] for p in data["passes"]] == [[0, 1]]
        assert data["statistics"]["summary"]["total_passes"] == 1

    def test_malformed_samples_dropped(self, client):
        tracks = request_tracks()
        tracks["3"].append(["bad", "sample"])
        tracks["4"].append([51.5])
        tracks["referee"] = [[51.5, -0.1]]

        response = client.post("/api/analysis", json={"tracks": tracks})

        assert response.status_code == 200
        assert len(response.json()["passes"]) == 1

    def test_null_sample_dropped(self, client):
        tracks = request_tracks()
        tracks["3"][0] = None

        response = client.post("/api/analysis", json={"tracks": tracks})

        assert response.status_code == 200
        assert [[p["from_player"], p["to_player"]] for p in response.json()["passes"]] == [[0, 1]]

    def test_null_track_ignored(self, client):
        tracks = request_tracks()
        tracks["5"] = None
        tracks["4"] = "51.4975 -0.1357"

        response = client.post("/api/analysis", json={"tracks": tracks})

        assert response.status_code == 200
        assert len(response.json()["passes"]) == 1

    def test_custom_goals(self, client):
        goals = [{"lat": 51.4975, "lon": -0.136}, {"lat": 51.4975, "lon": -0.135}]
        response = client.post("/api/analysis", json={"tracks": request_tracks(), "goals": goals})

        assert response.status_code == 200
        assert response.json()["goal_positions"] == goals

    def test_wrong_goal_count_rejected(self, client):
        goals = [{"lat": 51.4975, "lon": -0.136}]
        response = client.post("/api/analysis", json={"tracks": request_tracks(), "goals": goals})
        assert response.status_code == 422

    def test_out_of_range_goal_rejected(self, client):
        goals = [{"lat": 200.0, "lon": 0.0}, {"lat": 51.4975, "lon": -0.135}]
        response = client.post("/api/analysis", json={"tracks": request_tracks(), "goals": goals})
        assert response.status_code == 422

    def test_missing_tracks_rejected(self, client):
        response = client.post("/api/analysis", json={})
        assert response.status_code == 422
