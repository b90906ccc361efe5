"""
Tests for the level generation API.
"""

import pytest
from fastapi.testclient import TestClient

from py_wicw.api.main import create_app
from py_wicw.bootstrap import build_services
from py_wicw.config.config import Settings
from py_wicw.config.level_config import LevelConfig


@pytest.fixture
def services():
    config = LevelConfig(
        floors_per_world=2,
        rooms_per_floor=5,
        total_worlds=3,
        grid_size=32,
        validation_budget_seconds=30.0,
    )
    with build_services(Settings(worker_count=1), config=config) as services:
        yield services


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


class TestAPIEndpoints:
    """Test the API surface over an in-process orchestrator."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["cached_levels"] == 0

    def test_get_level(self, client, services):
        response = client.get("/levels/7")
        assert response.status_code == 200

        data = response.json()
        assert data["level_index"] == 7
        assert data["world_number"] == 1
        assert data["floor_number"] == 2
        assert data["room_number"] == 2
        assert len(data["hazards"]) == data["hazard_count"]
        assert 1 <= data["elegant_paths"] <= 3
        assert data == services.orchestrator.generate(7).to_dict()

    def test_level_is_cached(self, client, services):
        client.get("/levels/3")
        client.get("/levels/3")
        assert services.orchestrator.generation_count == 1
        assert client.get("/health").json()["cached_levels"] == 1

    def test_invalid_level(self, client):
        assert client.get("/levels/0").status_code == 400
        assert client.get("/levels/abc").status_code == 422

    def test_world_theme(self, client):
        response = client.get("/worlds/2/theme")
        assert response.status_code == 200
        data = response.json()
        assert data["theme_name"] == "Downtown Towers"
        assert data["start_level"] == 11
        assert data["end_level"] == 20
        assert len(data["ambient_color"]) == 3

    def test_unknown_world_theme(self, client):
        assert client.get("/worlds/42/theme").status_code == 404

    def test_clear_cache(self, client):
        client.get("/levels/1")
        client.get("/levels/2")
        response = client.delete("/cache")
        assert response.status_code == 200
        assert response.json() == {"cleared": 2}


class TestPreGenerationJobs:
    """Test background world pre-generation."""

    def test_pre_generate_world(self, client, services):
        response = client.post("/worlds/1/pregenerate")
        assert response.status_code == 200
        job = response.json()
        assert job["world_number"] == 1
        assert job["total"] == 10

        # TestClient runs background tasks before returning
        status = client.get(f"/jobs/{job['job_id']}").json()
        assert status["status"] == "completed"
        assert status["processed"] == 10
        assert status["progress_percent"] == 100
        assert services.orchestrator.cache_size == 10

    def test_pre_generate_invalid_world(self, client):
        assert client.post("/worlds/9/pregenerate").status_code == 404

    def test_unknown_job(self, client):
        assert client.get("/jobs/does-not-exist").status_code == 404
        assert client.post("/jobs/does-not-exist/cancel").status_code == 404

    def test_cancel_finished_job(self, client):
        job_id = client.post("/worlds/2/pregenerate").json()["job_id"]
        response = client.post(f"/jobs/{job_id}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
