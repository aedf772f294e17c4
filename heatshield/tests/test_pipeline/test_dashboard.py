"""Tests for the dashboard API."""

from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from heatshield import dashboard


@pytest.fixture
def client(tmp_path: Path, config_yaml_path: Path, monkeypatch) -> TestClient:
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    monkeypatch.setattr(dashboard, "DB_PATH", tmp_path / "dash.db")
    monkeypatch.setattr(dashboard, "CONFIG_PATH", config_yaml_path)
    return TestClient(dashboard.app)


class TestWeatherEndpoints:
    def test_weather_fallback(self, client: TestClient):
        resp = client.get("/api/weather")
        assert resp.status_code == 200
        data = resp.json()
        assert data["location"] == "Centro"
        assert data["source"] == "fallback"
        assert data["temperature"] == 34
        assert data["advice"]["actions"]

    def test_forecast(self, client: TestClient):
        data = client.get("/api/forecast", params={"lat": 25.7, "lon": -100.3}).json()
        assert data["source"] == "fallback"
        assert len(data["days"]) == 5

    def test_latest_empty_404(self, client: TestClient):
        assert client.get("/api/weather/latest").status_code == 404

    def test_latest_reads_stored_snapshot(self, client: TestClient):
        client.get("/api/weather")
        client.get("/api/forecast")
        data = client.get("/api/weather/latest").json()
        assert data["temperature"] == 34
        assert data["source"] == "fallback"
        assert data["latitude"] == 25.67
        assert data["fetched_at"]
        assert len(data["forecast"]) == 5
        assert data["forecast"][0]["max_temp"] == 36

    def test_half_coordinate_422(self, client: TestClient):
        assert client.get("/api/weather", params={"lat": 25.7}).status_code == 422

    def test_location_disabled_403(self, client: TestClient):
        client.post("/api/settings", json={"location_enabled": False})
        resp = client.get("/api/weather")
        assert resp.status_code == 403
        assert "location_enabled=true" in resp.json()["detail"]


class TestZoneEndpoints:
    def test_zones_sorted(self, client: TestClient):
        zones = client.get("/api/zones").json()
        assert len(zones) == 5
        distances = [z["distance_m"] for z in zones]
        assert distances == sorted(distances)

    def test_zone_type_filter(self, client: TestClient):
        zones = client.get("/api/zones", params={"zone_type": "park"}).json()
        assert zones
        assert all(z["zone_type"] == "park" for z in zones)

    def test_nearest(self, client: TestClient):
        data = client.get(
            "/api/zones/nearest", params={"lat": 25.6866, "lon": -100.3161}
        ).json()
        assert data["name"] == "Biblioteca Central"

    def test_heatmap(self, client: TestClient):
        data = client.get("/api/heatmap").json()
        assert data["size"] == 50
        assert len(data["intensities"]) == 50
        assert sum(data["legend"].values()) == 2500
        assert data["north_west_cell"]["latitude"] > data["south_east_cell"]["latitude"]
        assert data["north_west_cell"]["longitude"] < data["south_east_cell"]["longitude"]


class TestQuizEndpoints:
    def test_questions(self, client: TestClient):
        assert len(client.get("/api/quiz").json()) == 8

    def test_submit_and_history(self, client: TestClient):
        resp = client.post("/api/quiz", json={"answers": [1] * 8})
        assert resp.status_code == 200
        assert resp.json()["score"] == 8
        history = client.get("/api/quiz/history").json()
        assert history[0]["answers"] == [1] * 8

    def test_submit_invalid(self, client: TestClient):
        assert client.post("/api/quiz", json={"answers": [3] * 8}).status_code == 422

    def test_submit_booleans_rejected(self, client: TestClient):
        resp = client.post("/api/quiz", json={"answers": [True] * 8})
        assert resp.status_code == 422
        assert client.get("/api/quiz/history").json() == []


class TestSettingsEndpoints:
    def test_defaults(self, client: TestClient):
        data = client.get("/api/settings").json()
        assert data["temperature_threshold"] == 35.0
        assert data["appearance_mode"] == "system"

    def test_update(self, client: TestClient):
        resp = client.post(
            "/api/settings", json={"temperature_unit": "fahrenheit", "sound_enabled": False}
        )
        assert resp.status_code == 200
        data = client.get("/api/settings").json()
        assert data["temperature_unit"] == "fahrenheit"
        assert data["sound_enabled"] is False

    def test_unknown_key(self, client: TestClient):
        assert client.post("/api/settings", json={"volume": 3}).status_code == 422

    def test_invalid_value(self, client: TestClient):
        resp = client.post("/api/settings", json={"temperature_threshold": 60})
        assert resp.status_code == 422

    def test_update_syncs_reminders(self, client: TestClient):
        client.post("/api/settings", json={"reminders_enabled": True})
        pending = client.get("/api/notifications", params={"pending": True}).json()
        assert {n["kind"] for n in pending} == {"hydration", "sunscreen", "shade_break"}


class TestOpsEndpoints:
    def test_tips(self, client: TestClient):
        assert len(client.get("/api/tips").json()) == 8

    def test_dispatch_nothing_due(self, client: TestClient):
        assert client.post("/api/notifications/dispatch").json() == {"sent": 0, "failed": 0}

    def test_health_empty(self, client: TestClient):
        data = client.get("/api/health").json()
        assert data["db_ok"] is True
        assert data["last_refresh_at"] is None
        assert data["pending_notifications"] == 0

    def test_runs_empty(self, client: TestClient):
        assert client.get("/api/runs").json() == []

    def test_run_not_found(self, client: TestClient):
        assert client.get("/api/runs/missing").status_code == 404

    def test_notification_by_id(self, client: TestClient):
        client.post("/api/settings", json={"reminders_enabled": True})
        first = client.get("/api/notifications", params={"pending": True}).json()[0]
        resp = client.get(f"/api/notifications/{first['id']}")
        assert resp.status_code == 200
        assert resp.json() == first
        assert client.get("/api/notifications/9999").status_code == 404


class TestConfigEndpoints:
    def test_get(self, client: TestClient):
        assert client.get("/api/config").json()["location"]["name"] == "Centro"

    def test_update(self, client: TestClient, config_yaml_path: Path):
        resp = client.post("/api/config", json={"zones": {"search_radius_m": 3000}})
        assert resp.json()["status"] == "updated"
        assert yaml.safe_load(config_yaml_path.read_text())["zones"]["search_radius_m"] == 3000
        assert config_yaml_path.with_suffix(".yaml.bak").exists()

    def test_no_change(self, client: TestClient):
        resp = client.post("/api/config", json={"zones": {"search_radius_m": 1500}})
        assert resp.json()["status"] == "no_change"

    def test_invalid(self, client: TestClient, config_yaml_path: Path):
        before = config_yaml_path.read_text()
        resp = client.post("/api/config", json={"zones": {"search_radius_m": 5}})
        assert resp.status_code == 422
        assert config_yaml_path.read_text() == before
