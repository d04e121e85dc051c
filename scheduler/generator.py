"""
Job Instance Generator: turns job definitions into concrete, timed instances.

Two kinds of jobs, two expansion rules:

    cron jobs                          release-controller jobs
    ─────────                          ───────────────────────
    ask the cron oracle for the        group by version; each version gets
    next occurrence, again and again,  its own train of release events
    until the window is exhausted      4–8h apart (random), and EVERY job of
                                       that version fires on every release

The release rule models a shared upstream event: when 4.18 gets a new
payload, all 4.18 jobs start at the same moment. That burst is exactly what
stresses the lease pool, so it matters that they share timestamps.

Randomness is injected (a random.Random) rather than taken from the global
module, so a test or a CLI --seed reproduces the exact same release train.

The output is sorted by start time with a STABLE sort: same-instant
instances keep generation order (cron first, then release jobs in config
order), which keeps the engine's event log deterministic.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Iterable, Optional

from models.job import JobDefinition
from models.simulation import JobInstance
from scheduler.cron import next_occurrence
from scheduler.errors import CronScheduleError

logger = logging.getLogger(__name__)


class InstanceGenerator:

    def __init__(
        self,
        jobs: Iterable[JobDefinition],
        window_start: datetime,
        window_end: datetime,
        rng: Optional[random.Random] = None,
        release_interval_hours: tuple[int, int] = (4, 8),
    ):
        low, high = release_interval_hours
        if low <= 0 or high < low:
            raise ValueError(f"Invalid release interval bounds: {release_interval_hours}")
        self._jobs = list(jobs)
        self._window_start = window_start
        self._window_end = window_end
        self._rng = rng if rng is not None else random.Random()
        self._release_interval_hours = (low, high)
        self.diagnostics: list[str] = []

    def generate(self) -> list[JobInstance]:
        """Expand every job and return all instances sorted by start time."""
        instances: list[JobInstance] = []
        release_jobs: list[JobDefinition] = []

        for job in self._jobs:
            if job.is_release_triggered:
                release_jobs.append(job)
            else:
                instances.extend(self._cron_instances(job))

        if release_jobs:
            instances.extend(self._release_instances(release_jobs))

        # list.sort is stable, ties keep generation order
        instances.sort(key=lambda instance: instance.start_time)
        logger.info(
            f"Generated {len(instances)} instances from {len(self._jobs)} jobs"
        )
        return instances

    # ── cron ────────────────────────────────────────────────────

    def _cron_instances(self, job: JobDefinition) -> list[JobInstance]:
        instances: list[JobInstance] = []
        cursor = self._window_start

        try:
            while cursor < self._window_end:
                occurrence = next_occurrence(job.cron_schedule, cursor)
                if occurrence >= self._window_end:
                    break
                instances.append(self._instance(job, occurrence))
                # one minute past the match, so the same slot isn't found again
                cursor = occurrence + timedelta(minutes=1)
        except CronScheduleError as e:
            message = f"Skipping job '{job.name}': failed to parse cron schedule: {e}"
            logger.warning(message)
            self.diagnostics.append(message)
            return []

        return instances

    # ── release controller ──────────────────────────────────────

    def release_events(self) -> list[datetime]:
        """One train of release timestamps across the window."""
        low, high = self._release_interval_hours
        events: list[datetime] = []
        current = self._window_start
        while current < self._window_end:
            events.append(current)
            current += timedelta(hours=self._rng.randint(low, high))
        return events

    def _release_instances(self, jobs: list[JobDefinition]) -> list[JobInstance]:
        by_version: dict[str, list[JobDefinition]] = {}
        for job in jobs:
            by_version.setdefault(job.version, []).append(job)

        instances: list[JobInstance] = []
        for version, version_jobs in by_version.items():
            releases = self.release_events()
            logger.debug(f"Version '{version}': {len(releases)} release events")
            for release_time in releases:
                for job in version_jobs:
                    instances.append(self._instance(job, release_time))
        return instances

    @staticmethod
    def _instance(job: JobDefinition, start: datetime) -> JobInstance:
        return JobInstance(job=job, start_time=start, end_time=start + job.duration)
