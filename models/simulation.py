"""
Runtime records of a simulation: instances, events, samples, results.

These are plain dataclasses, not pydantic models. They never come from
untrusted input, they are created in tight loops, and the engine copies
JobInstance once per tick (see SimulationState.copy in scheduler/engine.py).

Ownership:
- JobInstance: created by the generator, owned and mutated ONLY by the engine
  (and only on the engine's private copy of the state)
- Event / TimeSample: frozen, append-only output
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from models.enums import EventKind, InstanceState
from models.job import JobDefinition


@dataclass
class JobInstance:
    """One concrete, scheduled occurrence of a JobDefinition."""
    job: JobDefinition
    start_time: datetime            # scheduled start, never changes
    end_time: datetime              # re-timed on promotion from the wait queue
    state: InstanceState = InstanceState.PENDING
    wait_accumulated: timedelta = timedelta(0)
    run_started_at: Optional[datetime] = None  # anchor of the execution timeout
    execution_timed_out: bool = False

    @property
    def name(self) -> str:
        return self.job.name


@dataclass(frozen=True)
class Event:
    """A single state transition, stamped with the tick it happened on."""
    timestamp: datetime
    kind: EventKind
    instance_index: int             # position in the engine's instance arena
    job_name: str
    active_count_after: int
    message: str
    is_warning: bool = False

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind.value,
            "instance_index": self.instance_index,
            "job_name": self.job_name,
            "active_count_after": self.active_count_after,
            "message": self.message,
            "is_warning": self.is_warning,
        }


@dataclass(frozen=True)
class TimeSample:
    timestamp: datetime
    active_count: int
    waiting_count: int
    timeout_count: int = 0          # timeouts since the previous sample


@dataclass
class SimulationSummary:
    """Aggregate view of one run, used by reports and the API."""
    total_instances: int = 0
    event_counts: dict[str, int] = field(default_factory=dict)
    final_states: dict[str, int] = field(default_factory=dict)
    peak_active: int = 0
    peak_waiting: int = 0


@dataclass
class SimulationResult:
    window_start: datetime
    window_end: datetime
    events: list[Event]
    samples: list[TimeSample]
    diagnostics: list[str]
    summary: SimulationSummary

    @property
    def warnings(self) -> list[Event]:
        return [event for event in self.events if event.is_warning]
