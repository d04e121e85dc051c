"""
Config file loader: YAML on disk to a validated SimulationConfig.

Example file:

    maxActiveLeases: 10
    jobTimeoutDuration: 8h
    leaseWaitTimeout: 30m
    simulationDuration: 168h
    jobs:
      - name: e2e-aws-nightly
        duration: 2h
        triggerType: cron
        cronSchedule: "0 */12 * * *"
      - name: e2e-aws-upgrade
        version: "4.18"
        duration: 3h
        triggerType: release-controller

All the actual rules (positive durations, cron jobs need a schedule, ...)
live on the pydantic models in models/job.py. This module only reads the
file and turns every failure into one exception type, ConfigError, with a
message a human can act on.
"""

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from models.job import SimulationConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The config file is missing, unreadable, or invalid."""


def load_config(path: Union[str, Path]) -> SimulationConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    config = parse_config(raw)
    logger.info(f"Loaded {len(config.jobs)} jobs from {path}")
    return config


def parse_config(raw) -> SimulationConfig:
    """Validate an already-decoded mapping (from YAML, JSON, or a test)."""
    if not isinstance(raw, dict):
        raise ConfigError("invalid configuration: expected a mapping at the top level")
    try:
        return SimulationConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {_describe(e)}") from e


def _describe(error: ValidationError) -> str:
    """Flatten pydantic's error list into 'jobs.0.duration: must be greater than 0; ...'."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
