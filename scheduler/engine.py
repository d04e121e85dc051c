"""
Lease Allocation Engine, the core of the simulator.

Given a sorted list of job instances, the engine steps a virtual clock
forward in fixed ticks (5 minutes by default) and decides, at every tick,
who holds a lease, who waits, and who times out. Every decision becomes an
Event in an append-only log.

Each tick runs four phases, in this exact order, all stamped with the same
timestamp:

    1. Admission          instances whose start time has come get a lease,
                          or join the FIFO wait queue if the pool is full
    2. Completion         instances past their end time release the lease;
                          each release immediately promotes the head of the
                          wait queue (its duration restarts at promotion)
    3. Wait timeout       every waiter ages by one tick; waiters that reach
                          leaseWaitTimeout leave the queue for good
    4. Execution timeout  active instances running longer than
                          jobTimeoutDuration are flagged, once. The lease
                          is NOT freed; it is released by phase 2 as usual,
                          like a job that overruns and then tears down

State handling:

    SimulationState  ──step()──>  (new SimulationState, [events])

step() never mutates its input. It copies the state (cheaply: the instance
arena is copied on write, only touched instances are duplicated) and
returns the advanced copy. That makes any single tick reproducible and
testable in isolation, without replaying the whole run.

Instances live once, in an index-addressed arena (state.instances). The
active list and the wait queue hold indices into it.

Reserved capacity: with reserved_leases > 0, release-controller instances
may go above max_active_leases (up to max + reserved); every admission that
ends above the max emits a CapacityExceeded warning. With the default of 0
there is one shared FIFO pool and CapacityExceeded never fires.

The engine uses no randomness: same input, same event log, every time.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

from config.settings import Settings
from models.durations import format_duration
from models.enums import EventKind, InstanceState
from models.job import SimulationConfig
from models.simulation import Event, JobInstance
from scheduler.errors import SimulationInvariantError
from scheduler.wait_queue import FIFOWaitQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineParams:
    max_active_leases: int
    job_timeout: timedelta
    lease_wait_timeout: timedelta
    tick: timedelta = timedelta(minutes=5)
    reserved_leases: int = 0
    retime_on_promotion: bool = True

    @classmethod
    def from_config(cls, config: SimulationConfig, settings: Settings) -> "EngineParams":
        return cls(
            max_active_leases=config.max_active_leases,
            job_timeout=config.job_timeout_duration,
            lease_wait_timeout=config.lease_wait_timeout,
            tick=settings.tick,
            reserved_leases=config.reserved_leases,
            retime_on_promotion=settings.RETIME_ON_PROMOTION,
        )


@dataclass
class SimulationState:
    """Everything the engine knows at one instant of virtual time."""
    clock: datetime
    instances: list[JobInstance]
    next_pending: int = 0           # arena index of the first not-yet-started instance
    active: list[int] = field(default_factory=list)
    waiting: FIFOWaitQueue = field(default_factory=FIFOWaitQueue)
    active_count: int = 0
    # indices already copied during the current step (copy-on-write)
    _owned: set[int] = field(default_factory=set, repr=False, compare=False)

    @classmethod
    def initial(cls, instances: list[JobInstance], start: datetime) -> "SimulationState":
        for earlier, later in zip(instances, instances[1:]):
            if later.start_time < earlier.start_time:
                raise ValueError("Instances must be sorted by start_time")
        return cls(clock=start, instances=[replace(instance) for instance in instances])

    def copy(self) -> "SimulationState":
        return SimulationState(
            clock=self.clock,
            instances=list(self.instances),
            next_pending=self.next_pending,
            active=list(self.active),
            waiting=self.waiting.copy(),
            active_count=self.active_count,
        )

    def for_update(self, index: int) -> JobInstance:
        """Return a private copy of an instance that may be mutated freely."""
        if index not in self._owned:
            self.instances[index] = replace(self.instances[index])
            self._owned.add(index)
        return self.instances[index]

    @property
    def finished(self) -> bool:
        """True once every instance has reached a terminal state."""
        return (
            self.next_pending >= len(self.instances)
            and not self.active
            and len(self.waiting) == 0
        )


class LeaseEngine:
    """
    Stateless apart from its parameters; all run state travels in
    SimulationState, so one engine can step many states.
    """

    def __init__(self, params: EngineParams):
        if params.tick <= timedelta(0):
            raise ValueError("Tick length must be positive")
        self._params = params

    @property
    def params(self) -> EngineParams:
        return self._params

    def run(
        self, instances: list[JobInstance], start: datetime
    ) -> tuple[list[Event], SimulationState]:
        """Step from `start` until every instance is terminal."""
        state = SimulationState.initial(instances, start)
        events: list[Event] = []
        while not state.finished:
            state, tick_events = self.step(state)
            events.extend(tick_events)
        return events, state

    def step(self, state: SimulationState) -> tuple[SimulationState, list[Event]]:
        """Apply one tick to a copy of `state` and return it with the tick's events."""
        current = state.copy()
        events: list[Event] = []

        self._admit(current, events)
        self._complete(current, events)
        self._expire_waiters(current, events)
        self._flag_overruns(current, events)
        self._check_invariants(current)

        if events:
            logger.debug(f"{current.clock.isoformat()}: {len(events)} events")

        current.clock += self._params.tick
        return current, events

    # ── phases ──────────────────────────────────────────────────

    def _admit(self, state: SimulationState, events: list[Event]) -> None:
        while state.next_pending < len(state.instances):
            index = state.next_pending
            if state.instances[index].start_time > state.clock:
                break
            state.next_pending += 1
            instance = state.for_update(index)

            if state.active_count < self._limit(instance):
                instance.state = InstanceState.ACTIVE
                instance.run_started_at = instance.start_time
                state.active_count += 1
                state.active.append(index)
                self._emit(state, events, EventKind.LEASE_ACQUIRED, index,
                           f"Job '{instance.name}' acquired lease")
                self._check_capacity(state, events, index)
            else:
                instance.state = InstanceState.WAITING
                instance.wait_accumulated = timedelta(0)
                state.waiting.enqueue(index)
                self._emit(state, events, EventKind.WAITING, index,
                           f"Job '{instance.name}' waiting for lease", warning=True)

    def _complete(self, state: SimulationState, events: list[Event]) -> None:
        still_active: list[int] = []
        for index in state.active:
            if state.instances[index].end_time > state.clock:
                still_active.append(index)
                continue

            instance = state.for_update(index)
            state.active_count -= 1
            if instance.execution_timed_out:
                instance.state = InstanceState.TIMED_OUT_EXECUTION
                message = f"Job '{instance.name}' released lease after exceeding execution timeout"
            else:
                instance.state = InstanceState.COMPLETED
                message = f"Job '{instance.name}' completed and released lease"
            self._emit(state, events, EventKind.LEASE_RELEASED, index, message)

            promoted = self._promote(state, events)
            if promoted is not None:
                still_active.append(promoted)
        state.active = still_active

    def _promote(self, state: SimulationState, events: list[Event]) -> Optional[int]:
        """Hand a just-released lease to the head of the wait queue, if it fits."""
        head = state.waiting.peek()
        if head is None or state.active_count >= self._limit(state.instances[head]):
            return None

        state.waiting.dequeue()
        instance = state.for_update(head)
        if self._params.retime_on_promotion:
            instance.end_time = state.clock + instance.job.duration
            instance.run_started_at = state.clock
        else:
            instance.run_started_at = instance.start_time
        instance.state = InstanceState.ACTIVE
        state.active_count += 1
        self._emit(
            state, events, EventKind.LEASE_ACQUIRED, head,
            f"Job '{instance.name}' acquired lease after waiting "
            f"{format_duration(instance.wait_accumulated)}",
        )
        self._check_capacity(state, events, head)
        return head

    def _expire_waiters(self, state: SimulationState, events: list[Event]) -> None:
        for index in state.waiting:
            instance = state.for_update(index)
            instance.wait_accumulated += self._params.tick
            if instance.wait_accumulated < self._params.lease_wait_timeout:
                continue
            state.waiting.remove(index)
            instance.state = InstanceState.TIMED_OUT_WAIT
            self._emit(
                state, events, EventKind.WAIT_TIMEOUT, index,
                f"Job '{instance.name}' timed out waiting for lease "
                f"(waited {format_duration(instance.wait_accumulated)})",
                warning=True,
            )

    def _flag_overruns(self, state: SimulationState, events: list[Event]) -> None:
        for index in state.active:
            instance = state.instances[index]
            if instance.execution_timed_out:
                continue
            if state.clock - instance.run_started_at < self._params.job_timeout:
                continue
            instance = state.for_update(index)
            instance.execution_timed_out = True
            self._emit(
                state, events, EventKind.EXECUTION_TIMEOUT, index,
                f"Job '{instance.name}' exceeded execution timeout "
                f"({format_duration(self._params.job_timeout)})",
                warning=True,
            )

    # ── helpers ─────────────────────────────────────────────────

    def _limit(self, instance: JobInstance) -> int:
        if instance.job.is_release_triggered:
            return self._params.max_active_leases + self._params.reserved_leases
        return self._params.max_active_leases

    def _check_capacity(self, state: SimulationState, events: list[Event], index: int) -> None:
        if state.active_count > self._params.max_active_leases:
            self._emit(
                state, events, EventKind.CAPACITY_EXCEEDED, index,
                f"Max active leases exceeded: {state.active_count}/{self._params.max_active_leases}",
                warning=True,
            )

    @staticmethod
    def _emit(
        state: SimulationState,
        events: list[Event],
        kind: EventKind,
        index: int,
        message: str,
        warning: bool = False,
    ) -> None:
        events.append(Event(
            timestamp=state.clock,
            kind=kind,
            instance_index=index,
            job_name=state.instances[index].name,
            active_count_after=state.active_count,
            message=message,
            is_warning=warning,
        ))

    def _check_invariants(self, state: SimulationState) -> None:
        ceiling = self._params.max_active_leases + self._params.reserved_leases
        if not 0 <= state.active_count <= ceiling:
            raise SimulationInvariantError(
                f"active_count={state.active_count} outside [0, {ceiling}] "
                f"at {state.clock.isoformat()}"
            )
        if state.active_count != len(state.active):
            raise SimulationInvariantError(
                f"active_count={state.active_count} but {len(state.active)} "
                f"instances are active at {state.clock.isoformat()}"
            )
        for index in state.active:
            if state.instances[index].state != InstanceState.ACTIVE:
                raise SimulationInvariantError(
                    f"instance {index} is in the active list with state "
                    f"{state.instances[index].state.value}"
                )
        for index in state.waiting:
            if state.instances[index].state != InstanceState.WAITING:
                raise SimulationInvariantError(
                    f"instance {index} is in the wait queue with state "
                    f"{state.instances[index].state.value}"
                )
