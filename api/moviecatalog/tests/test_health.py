from __future__ import annotations

import pytest

from moviecatalog.core.config import settings


@pytest.mark.asyncio
async def test_health_reports_ok_without_telemetry(client, monkeypatch):
    called = False

    async def _snapshot_stub() -> dict[str, object]:
        nonlocal called
        called = True
        return {}

    monkeypatch.setattr("moviecatalog.main.provider_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", [])

    response = await client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload == {"status": "ok"}
    assert called is False


@pytest.mark.asyncio
async def test_health_allows_allowlisted_clients(client, monkeypatch):
    async def _snapshot_stub() -> dict[str, object]:
        return {}

    monkeypatch.setattr("moviecatalog.main.provider_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", ["testserver"])

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["providers"] == {"sources": {}, "issues": []}


@pytest.mark.asyncio
async def test_health_degrades_on_provider_errors(client, monkeypatch):
    async def _snapshot_stub() -> dict[str, object]:
        return {
            "tmdb": {
                "operations": {
                    "fetch": {
                        "started": 2,
                        "succeeded": 1,
                        "failed": 1,
                        "degraded": 0,
                        "last_latency_ms": 220.13,
                        "last_error": "ProviderError: tmdb returned status 429",
                    },
                    "poster": {
                        "started": 0,
                        "succeeded": 0,
                        "failed": 0,
                        "degraded": 2,
                        "last_latency_ms": None,
                        "last_error": None,
                    },
                }
            }
        }

    monkeypatch.setattr("moviecatalog.main.provider_monitor.snapshot", _snapshot_stub)
    monkeypatch.setattr(settings, "health_allowlist", ["127.0.0.0/8"])

    response = await client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "degraded"
    telemetry = payload["providers"]
    assert telemetry["sources"]["tmdb"]["state"] == "degraded"
    assert telemetry["sources"]["tmdb"]["failure_total"] == 1
    assert telemetry["sources"]["tmdb"]["degraded_total"] == 2
    assert telemetry["issues"][0]["operation"] == "fetch"
    assert telemetry["issues"][0]["reason"] == "last_error"
