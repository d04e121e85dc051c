"""
Exceptions raised by the simulation layer.

Only two things can go wrong inside a simulation:
- a cron expression the oracle can't parse → recoverable, the generator
  skips that job and records a diagnostic
- the engine reaching an impossible state → NOT recoverable; it means the
  engine itself is broken, so the run aborts instead of producing a
  silently wrong event log

Wait and execution timeouts are not errors at all. They are ordinary
warning events.
"""


class CronScheduleError(ValueError):
    """A cron expression could not be parsed or evaluated."""


class SimulationInvariantError(RuntimeError):
    """The engine state violated one of its invariants."""
