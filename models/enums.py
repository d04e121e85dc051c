"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("cron", not "TriggerType.CRON")
- They validate YAML/JSON input through pydantic for free
- Typos become immediate errors instead of silent bugs
"""

import enum


class TriggerType(str, enum.Enum):
    CRON = "cron"                              # fires on a cron schedule
    RELEASE_CONTROLLER = "release-controller"  # fires on irregular release events


class InstanceState(str, enum.Enum):
    PENDING = "PENDING"                          # generated, start time not reached yet
    ACTIVE = "ACTIVE"                            # holding a lease
    WAITING = "WAITING"                          # in the FIFO wait queue
    COMPLETED = "COMPLETED"                      # released its lease normally
    TIMED_OUT_WAIT = "TIMED_OUT_WAIT"            # gave up waiting for a lease
    TIMED_OUT_EXECUTION = "TIMED_OUT_EXECUTION"  # overran, then released its lease

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({
    InstanceState.COMPLETED,
    InstanceState.TIMED_OUT_WAIT,
    InstanceState.TIMED_OUT_EXECUTION,
})


class EventKind(str, enum.Enum):
    LEASE_ACQUIRED = "lease-acquired"
    LEASE_RELEASED = "lease-released"
    WAITING = "job-waiting"
    WAIT_TIMEOUT = "wait-timeout"
    EXECUTION_TIMEOUT = "execution-timeout"
    CAPACITY_EXCEEDED = "max-exceeded"
