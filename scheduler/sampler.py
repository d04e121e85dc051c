"""
Time-Series Sampler: replays the event log into evenly spaced snapshots.

The chart needs one data point every 30 minutes, not one per event, so the
sampler walks the (already complete) event log once, keeping running
counters, and emits a TimeSample at every sampling boundary from window
start through window end inclusive.

Bookkeeping:
- active_count follows each event's active_count_after, so it is exact
- waiting_count is an approximation: +1 on Waiting, -1 on LeaseAcquired
  while positive. It doesn't know WHICH waiter was promoted, and a waiter
  that times out stays counted. Fine for a chart, not for per-instance claims
- timeout_count counts timeout events since the previous sample
"""

from datetime import datetime, timedelta

from models.enums import EventKind
from models.simulation import Event, TimeSample

_TIMEOUT_KINDS = frozenset({EventKind.WAIT_TIMEOUT, EventKind.EXECUTION_TIMEOUT})


def sample_timeline(
    events: list[Event],
    window_start: datetime,
    window_end: datetime,
    interval: timedelta = timedelta(minutes=30),
) -> list[TimeSample]:
    if interval <= timedelta(0):
        raise ValueError("Sampling interval must be positive")

    samples: list[TimeSample] = []
    running_active = 0
    running_waiting = 0
    event_index = 0
    current = window_start

    while current <= window_end:
        timeouts = 0
        while event_index < len(events) and events[event_index].timestamp <= current:
            event = events[event_index]
            running_active = event.active_count_after

            if event.kind == EventKind.WAITING:
                running_waiting += 1
            elif event.kind == EventKind.LEASE_ACQUIRED:
                if running_waiting > 0:
                    running_waiting -= 1
            if event.kind in _TIMEOUT_KINDS:
                timeouts += 1

            event_index += 1

        samples.append(TimeSample(
            timestamp=current,
            active_count=running_active,
            waiting_count=running_waiting,
            timeout_count=timeouts,
        ))
        current += interval

    return samples
