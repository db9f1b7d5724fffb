"""Tests for the demo service."""

import time

import pytest
from fastapi.testclient import TestClient

from crashless import RequestMeta, ServiceSettings, create_error
from crashless_demo import app as demo_app
from crashless_demo import db


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(db, "LATENCY_SECONDS", 0)
    monkeypatch.setattr(db, "EXTERNAL_LATENCY_SECONDS", 0)
    app = demo_app.create_app(ServiceSettings(service_name="demo-test"))
    with TestClient(app) as test_client:
        yield test_client


class TestRoutes:
    def test_ping(self, client):
        resp = client.get("/ping")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Server alive"}

    def test_read_user_fails(self, client):
        resp = client.get("/user/7")
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["code"] == "ERR_500"
        assert body["message"] == "Database read failed for user ID: 7"
        assert "stack" in body

    def test_create_user_fails(self, client):
        resp = client.post("/user", json={"name": "Ada"})
        assert resp.status_code == 500
        assert resp.json()["message"] == "Database write failed, user not created."

    def test_create_user_without_body(self, client):
        assert client.post("/user").status_code == 500

    def test_delete_user_fails(self, client):
        resp = client.delete("/user/3")
        assert resp.status_code == 500
        assert resp.json()["message"] == "Database delete failed for user ID: 3"

    def test_manual_crash(self, client):
        resp = client.get("/crash")
        assert resp.status_code == 500
        assert resp.json()["code"] == "ORGANIC_CRASH"
        assert resp.json()["message"] == "Manual crash triggered!"

    def test_external_success(self, client, monkeypatch):
        monkeypatch.setattr(db.random, "random", lambda: 0.9)
        resp = client.get("/external")
        assert resp.status_code == 200
        assert resp.json()["source"] == "mock-api"

    def test_external_timeout(self, client, monkeypatch):
        monkeypatch.setattr(db.random, "random", lambda: 0.1)
        resp = client.get("/external")
        assert resp.status_code == 500
        assert resp.json()["message"] == "External API timeout, simulated failure."

    def test_production_masks_messages(self, client, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        body = client.get("/user/7").json()
        assert body["message"] == "Internal server error"
        assert body["code"] == "ERR_500"
        assert "stack" not in body


class TestTelemetry:
    def test_summary_line(self, log_spy, monkeypatch):
        monkeypatch.setattr(demo_app, "logger", log_spy)
        demo_app.log_telemetry(create_error("x", 404, "NOT_FOUND"), RequestMeta("GET", "/user/1", 404))
        assert log_spy.events("telemetry") == [{"summary": "GET /user/1 -> 404 (NOT_FOUND)"}]

    def test_missing_code(self, log_spy, monkeypatch):
        monkeypatch.setattr(demo_app, "logger", log_spy)
        demo_app.log_telemetry(create_error("x", 500, ""), RequestMeta("GET", "/", 500))
        assert log_spy.events("telemetry")[0]["summary"] == "GET / -> 500 (NO_CODE)"

    def test_called_for_request_failures(self, client, log_spy, monkeypatch):
        monkeypatch.setattr(demo_app, "logger", log_spy)
        client.get("/crash")
        deadline = time.monotonic() + 2
        while not log_spy.events("telemetry") and time.monotonic() < deadline:
            time.sleep(0.01)
        assert log_spy.events("telemetry") == [{"summary": "GET /crash -> 500 (ORGANIC_CRASH)"}]
