import pytest
from fastapi.testclient import TestClient

from courtbot import main
from courtbot.handler import ReservationHandler
from courtbot.logging import NDJSONLogger
from courtbot.models import Slot
from courtbot.rate_limiter import RateLimiter


@pytest.fixture
def api(cfg, fake_client, monkeypatch):
    fake = fake_client([Slot(1, "19:00", "Cancha de Tenis 2", 0)])
    audit = NDJSONLogger(cfg.audit_file)
    monkeypatch.setattr(main, "audit", audit)
    monkeypatch.setattr(main, "handler", ReservationHandler(cfg, limiter=RateLimiter(), client_factory=fake, audit=audit))
    with TestClient(main.app) as client:
        yield client, fake


def test_preflight(api):
    client, _ = api
    r = client.options("/api/reserve")
    assert r.status_code == 200
    assert r.content == b""
    assert r.headers["access-control-allow-origin"] == "*"
    assert "X-API-Key" in r.headers["access-control-allow-headers"]


def test_get_uses_query_params(api, cfg):
    client, fake = api
    r = client.get("/api/reserve", params={"action": "CHECK_SLOTS", "dayOfWeek": "6"}, headers={"X-API-Key": cfg.api_key})
    assert r.status_code == 200
    assert r.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
    assert r.json()["availableSlots"] == 1
    assert ("list_slots", 6) in fake.calls


def test_post_uses_json_body(api, cfg):
    client, fake = api
    r = client.post("/api/reserve", json={"preferredTimes": "19:00"}, headers={"X-API-Key": cfg.api_key})
    body = r.json()
    assert r.status_code == 200
    assert body["success"] is True
    assert body["slot"] == {"time": "19:00", "location": "Cancha de Tenis 2"}
    assert isinstance(body["logs"], list) and body["timestamp"].endswith("Z")


def test_post_with_bad_json(api, cfg):
    client, fake = api
    r = client.post(
        "/api/reserve",
        content=b"{not json",
        headers={"X-API-Key": cfg.api_key, "Content-Type": "application/json"},
    )
    assert r.status_code == 500
    assert r.json()["error"] == "Invalid JSON body"
    assert fake.calls == []


def test_unauthorized_has_cors(api):
    client, _ = api
    r = client.get("/api/reserve")
    assert r.status_code == 401
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.json()["success"] is False


def test_metrics_summary_and_reset(api, cfg):
    client, _ = api
    client.get("/api/reserve", params={"action": "CHECK_SLOTS"}, headers={"X-API-Key": cfg.api_key})
    client.get("/api/reserve")

    summary = client.get("/metrics").json()
    assert summary["requests"] == 2
    assert summary["metrics"]["by_status"] == {"200": 1, "401": 1}

    assert client.delete("/metrics").status_code == 200
    assert client.get("/metrics").json()["requests"] == 0


def test_health(api):
    client, _ = api
    assert client.get("/health").json() == {"ok": True}
