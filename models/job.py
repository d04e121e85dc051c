"""
Job definitions and the simulation scenario: the validated shape of the YAML config.

These are pydantic models rather than dataclasses because they sit on the
boundary with the outside world (config files, HTTP request bodies) and
validation must happen before anything is simulated:
- durations accept "1h30m"-style strings (see models/durations.py)
- every duration must be positive, maxActiveLeases must be > 0
- a cron job without a cronSchedule is rejected here, but a schedule that
  merely fails to PARSE is not. The generator skips it with a diagnostic

Field aliases match the camelCase keys used in config files
(maxActiveLeases, cronSchedule, ...). populate_by_name lets Python code and
tests use the snake_case names as well.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.durations import parse_duration
from models.enums import TriggerType


def _positive_duration(value) -> timedelta:
    duration = parse_duration(value)
    if duration <= timedelta(0):
        raise ValueError("must be greater than 0")
    return duration


class JobDefinition(BaseModel):
    """One CI job as declared in the config. Never mutated after loading."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    version: str = ""
    scenario: str = ""
    payload_type: str = Field(default="", alias="payloadType")
    duration: timedelta
    trigger_type: TriggerType = Field(..., alias="triggerType")
    cron_schedule: Optional[str] = Field(default=None, alias="cronSchedule")

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        return _positive_duration(value)

    @model_validator(mode="after")
    def _check_trigger(self) -> "JobDefinition":
        if self.trigger_type == TriggerType.CRON and not self.cron_schedule:
            raise ValueError(f"job {self.name}: cronSchedule is required for cron-type jobs")
        return self

    @property
    def is_release_triggered(self) -> bool:
        return self.trigger_type == TriggerType.RELEASE_CONTROLLER


class SimulationConfig(BaseModel):
    """Scalar parameters of a run plus the job list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_active_leases: int = Field(..., gt=0, alias="maxActiveLeases")
    # Extra leases only release-triggered jobs may draw on (0 = single shared FIFO pool)
    reserved_leases: int = Field(default=0, ge=0, alias="reservedLeases")
    job_timeout_duration: timedelta = Field(..., alias="jobTimeoutDuration")
    lease_wait_timeout: timedelta = Field(..., alias="leaseWaitTimeout")
    simulation_duration: timedelta = Field(..., alias="simulationDuration")
    jobs: list[JobDefinition] = Field(..., min_length=1)

    @field_validator(
        "job_timeout_duration", "lease_wait_timeout", "simulation_duration", mode="before"
    )
    @classmethod
    def _parse_durations(cls, value):
        return _positive_duration(value)
