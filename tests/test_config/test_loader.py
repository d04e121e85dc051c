"""
Tests for the YAML config loader.

Any failure (missing file, bad YAML, failed validation) must surface as
ConfigError with a message pointing at the problem.
"""

from datetime import timedelta

import pytest

from config.loader import ConfigError, load_config, parse_config
from models.enums import TriggerType

VALID_YAML = """
maxActiveLeases: 10
jobTimeoutDuration: 8h
leaseWaitTimeout: 30m
simulationDuration: 168h
jobs:
  - name: e2e-nightly
    version: "4.18"
    scenario: e2e
    payloadType: nightly
    duration: 1h30m
    triggerType: cron
    cronSchedule: "0 */12 * * *"
  - name: upgrade
    version: "4.18"
    duration: 3h
    triggerType: release-controller
"""


def _valid() -> dict:
    return {
        "maxActiveLeases": 2,
        "jobTimeoutDuration": "8h",
        "leaseWaitTimeout": "30m",
        "simulationDuration": "24h",
        "jobs": [
            {"name": "a", "duration": "1h", "triggerType": "cron", "cronSchedule": "0 * * * *"},
        ],
    }


def test_load_valid_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_YAML)

    config = load_config(path)

    assert config.max_active_leases == 10
    assert config.reserved_leases == 0
    assert config.job_timeout_duration == timedelta(hours=8)
    assert config.lease_wait_timeout == timedelta(minutes=30)
    assert config.simulation_duration == timedelta(days=7)

    nightly, upgrade = config.jobs
    assert nightly.duration == timedelta(hours=1, minutes=30)
    assert nightly.payload_type == "nightly"
    assert nightly.trigger_type == TriggerType.CRON
    assert not nightly.is_release_triggered
    assert upgrade.is_release_triggered
    assert upgrade.cron_schedule is None


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="failed to read"):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("jobs: [unclosed\n")

    with pytest.raises(ConfigError, match="failed to parse"):
        load_config(path)


def test_top_level_must_be_a_mapping():
    with pytest.raises(ConfigError, match="mapping"):
        parse_config(["not", "a", "mapping"])


def test_max_active_leases_must_be_positive():
    raw = _valid()
    raw["maxActiveLeases"] = 0

    with pytest.raises(ConfigError, match="maxActiveLeases"):
        parse_config(raw)


def test_reserved_leases_cannot_be_negative():
    raw = _valid()
    raw["reservedLeases"] = -1

    with pytest.raises(ConfigError, match="reservedLeases"):
        parse_config(raw)


@pytest.mark.parametrize("field", ["jobTimeoutDuration", "leaseWaitTimeout", "simulationDuration"])
def test_durations_must_be_positive(field):
    raw = _valid()
    raw[field] = "0"

    with pytest.raises(ConfigError, match=field):
        parse_config(raw)


def test_nanosecond_durations_are_accepted():
    raw = _valid()
    raw["jobs"][0]["duration"] = "1500000000ns"

    config = parse_config(raw)

    assert config.jobs[0].duration == timedelta(seconds=1.5)


def test_at_least_one_job():
    raw = _valid()
    raw["jobs"] = []

    with pytest.raises(ConfigError, match="jobs"):
        parse_config(raw)


def test_cron_job_requires_schedule():
    raw = _valid()
    del raw["jobs"][0]["cronSchedule"]

    with pytest.raises(ConfigError, match="cronSchedule is required"):
        parse_config(raw)


def test_unknown_trigger_type():
    raw = _valid()
    raw["jobs"][0]["triggerType"] = "webhook"

    with pytest.raises(ConfigError, match="triggerType"):
        parse_config(raw)


def test_job_name_required():
    raw = _valid()
    raw["jobs"][0]["name"] = ""

    with pytest.raises(ConfigError, match="name"):
        parse_config(raw)


def test_unparseable_job_duration():
    raw = _valid()
    raw["jobs"][0]["duration"] = "five minutes"

    with pytest.raises(ConfigError, match="invalid duration"):
        parse_config(raw)


def test_malformed_cron_is_not_a_config_error():
    """Bad cron syntax is the generator's problem: skipped with a diagnostic, not fatal."""
    raw = _valid()
    raw["jobs"][0]["cronSchedule"] = "whenever"

    config = parse_config(raw)

    assert config.jobs[0].cron_schedule == "whenever"


def test_snake_case_names_are_accepted():
    raw = {
        "max_active_leases": 3,
        "job_timeout_duration": 3600,
        "lease_wait_timeout": "15m",
        "simulation_duration": "1h",
        "jobs": [{"name": "r", "duration": "10m", "trigger_type": "release-controller"}],
    }

    config = parse_config(raw)

    assert config.max_active_leases == 3
    assert config.job_timeout_duration == timedelta(hours=1)
