"""
Pydantic schemas for the /simulations endpoint.

SimulationRequest: the scenario to simulate, plus an optional seed and
window start so a client can reproduce a run exactly.
SimulationResponse: the full output: event log, samples, warnings,
generator diagnostics and the summary.

The request embeds SimulationConfig directly, so the HTTP API and the YAML
config accept exactly the same fields and validation rules.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.job import SimulationConfig
from models.simulation import Event, SimulationResult, TimeSample


class SimulationRequest(BaseModel):
    """Request body for POST /simulations/."""

    config: SimulationConfig
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the release-event generator (omit for a random train)",
    )
    start: Optional[datetime] = Field(
        default=None,
        description="Window start; defaults to the most recent Monday 00:00",
    )


class EventOut(BaseModel):
    timestamp: datetime
    kind: str
    instance_index: int
    job_name: str
    active_count_after: int
    message: str
    is_warning: bool

    @classmethod
    def from_event(cls, event: Event) -> "EventOut":
        return cls(**event.to_dict())


class SampleOut(BaseModel):
    timestamp: datetime
    active_count: int
    waiting_count: int
    timeout_count: int

    @classmethod
    def from_sample(cls, sample: TimeSample) -> "SampleOut":
        return cls(
            timestamp=sample.timestamp,
            active_count=sample.active_count,
            waiting_count=sample.waiting_count,
            timeout_count=sample.timeout_count,
        )


class SummaryOut(BaseModel):
    total_instances: int
    event_counts: dict[str, int]
    final_states: dict[str, int]
    peak_active: int
    peak_waiting: int


class SimulationResponse(BaseModel):
    """Response body for POST /simulations/."""

    window_start: datetime
    window_end: datetime
    events: list[EventOut]
    samples: list[SampleOut]
    warnings: list[EventOut]
    diagnostics: list[str]
    summary: SummaryOut

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResponse":
        return cls(
            window_start=result.window_start,
            window_end=result.window_end,
            events=[EventOut.from_event(e) for e in result.events],
            samples=[SampleOut.from_sample(s) for s in result.samples],
            warnings=[EventOut.from_event(e) for e in result.warnings],
            diagnostics=result.diagnostics,
            summary=SummaryOut(
                total_instances=result.summary.total_instances,
                event_counts=result.summary.event_counts,
                final_states=result.summary.final_states,
                peak_active=result.summary.peak_active,
                peak_waiting=result.summary.peak_waiting,
            ),
        )
