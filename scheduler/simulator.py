"""
Simulator: runs one complete simulation, top to bottom.

    SimulationConfig
          │
          ▼
    InstanceGenerator ──> sorted instances
          │
          ▼
    LeaseEngine ──────> event log       (runs to completion first)
          │
          ▼
    sample_timeline ──> samples         (only then reads the log)
          │
          ▼
    SimulationResult (events, samples, warnings, diagnostics, summary)

The window starts at the most recent Monday 00:00 unless a start is given,
so a one-week simulation lines up with a calendar week.
"""

import logging
import random
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from config.settings import Settings, settings as default_settings
from models.job import SimulationConfig
from models.simulation import Event, SimulationResult, SimulationSummary, TimeSample
from scheduler.engine import EngineParams, LeaseEngine, SimulationState
from scheduler.generator import InstanceGenerator
from scheduler.sampler import sample_timeline

logger = logging.getLogger(__name__)


def last_monday(now: Optional[datetime] = None) -> datetime:
    """Midnight of the most recent Monday (today, if today is Monday)."""
    now = now or datetime.now()
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


class Simulator:

    def __init__(
        self,
        config: SimulationConfig,
        settings: Optional[Settings] = None,
        start: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ):
        self._config = config
        self._settings = settings or default_settings
        self.window_start = start or last_monday()
        self.window_end = self.window_start + config.simulation_duration
        self._rng = rng or random.Random(self._settings.RANDOM_SEED)

    def run(self) -> SimulationResult:
        logger.info(
            f"Simulating {self.window_start.isoformat()} → {self.window_end.isoformat()} "
            f"with {self._config.max_active_leases} leases"
        )

        generator = InstanceGenerator(
            self._config.jobs,
            self.window_start,
            self.window_end,
            rng=self._rng,
            release_interval_hours=(
                self._settings.RELEASE_INTERVAL_MIN_HOURS,
                self._settings.RELEASE_INTERVAL_MAX_HOURS,
            ),
        )
        instances = generator.generate()

        engine = LeaseEngine(EngineParams.from_config(self._config, self._settings))
        events, final_state = engine.run(instances, self.window_start)

        samples = sample_timeline(
            events, self.window_start, self.window_end, self._settings.sample_interval
        )
        summary = summarize(events, samples, final_state)

        logger.info(
            f"Simulation finished: {len(instances)} instances, {len(events)} events, "
            f"{sum(1 for e in events if e.is_warning)} warnings"
        )
        return SimulationResult(
            window_start=self.window_start,
            window_end=self.window_end,
            events=events,
            samples=samples,
            diagnostics=list(generator.diagnostics),
            summary=summary,
        )


def summarize(
    events: list[Event], samples: list[TimeSample], final_state: SimulationState
) -> SimulationSummary:
    kinds = Counter(event.kind.value for event in events)
    states = Counter(instance.state.value for instance in final_state.instances)
    return SimulationSummary(
        total_instances=len(final_state.instances),
        event_counts=dict(kinds),
        final_states=dict(states),
        peak_active=max((event.active_count_after for event in events), default=0),
        peak_waiting=max((sample.waiting_count for sample in samples), default=0),
    )
