"""
API tests for POST /simulations/.

These use the test HTTP client from conftest.py, which talks to the FastAPI
app in-process with a pinned seed. No server, no network.
"""

import pytest

CONFIG = {
    "maxActiveLeases": 1,
    "jobTimeoutDuration": "8h",
    "leaseWaitTimeout": "30m",
    "simulationDuration": "24h",
    "jobs": [
        {"name": "first", "duration": "1h", "triggerType": "cron", "cronSchedule": "0 0 * * *"},
        {"name": "second", "duration": "1h", "triggerType": "cron", "cronSchedule": "0 0 * * *"},
        {"name": "upgrade", "version": "4.18", "duration": "2h",
         "triggerType": "release-controller"},
    ],
}


@pytest.mark.asyncio
async def test_run_simulation(client):
    response = await client.post("/simulations/", json={
        "config": CONFIG,
        "seed": 7,
        "start": "2024-01-01T00:00:00",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["window_start"] == "2024-01-01T00:00:00"
    assert data["window_end"] == "2024-01-02T00:00:00"
    assert len(data["samples"]) == 49
    assert data["diagnostics"] == []

    first = data["events"][0]
    assert first["kind"] == "lease-acquired"
    assert first["job_name"] == "first"
    assert first["active_count_after"] == 1

    assert data["warnings"] == [e for e in data["events"] if e["is_warning"]]
    assert data["summary"]["peak_active"] == 1
    assert sum(data["summary"]["final_states"].values()) == data["summary"]["total_instances"]


@pytest.mark.asyncio
async def test_same_seed_same_events(client):
    body = {"config": CONFIG, "seed": 11, "start": "2024-01-01T00:00:00"}

    first = await client.post("/simulations/", json=body)
    second = await client.post("/simulations/", json=body)

    assert first.json()["events"] == second.json()["events"]


@pytest.mark.asyncio
async def test_invalid_config_returns_422(client):
    bad = dict(CONFIG, maxActiveLeases=0)

    response = await client.post("/simulations/", json={"config": bad})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_bad_cron_is_a_diagnostic_not_an_error(client):
    config = dict(CONFIG, jobs=[
        {"name": "broken", "duration": "1h", "triggerType": "cron", "cronSchedule": "nope"},
    ])

    response = await client.post("/simulations/", json={
        "config": config, "start": "2024-01-01T00:00:00",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["events"] == []
    assert len(data["diagnostics"]) == 1
