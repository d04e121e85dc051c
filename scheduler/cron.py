"""
Cron oracle: "when is the next occurrence at or after T?"

Thin wrapper around croniter. The rest of the simulator treats this as a
black box: it only ever asks for the next matching minute.

Only classic 5-field expressions (minute hour day-of-month month day-of-week)
are accepted. croniter would also take a 6th "seconds" field, which CI
schedulers don't support, so that is rejected up front.
"""

from datetime import datetime, timedelta

from croniter import croniter

from scheduler.errors import CronScheduleError


def validate_schedule(expression: str) -> None:
    """Raise CronScheduleError if the expression isn't a valid 5-field schedule."""
    fields = expression.split()
    if len(fields) != 5:
        raise CronScheduleError(
            f"expected 5 fields, got {len(fields)} in {expression!r}"
        )
    if not croniter.is_valid(expression):
        raise CronScheduleError(f"invalid cron expression {expression!r}")


def next_occurrence(expression: str, at_or_after: datetime) -> datetime:
    """
    Return the first minute matching `expression` that is >= `at_or_after`.

    croniter.get_next() is strictly "after", so the search starts one second
    before the whole second containing `at_or_after`. With a fractional
    start that can land on an earlier minute, which is skipped.
    """
    validate_schedule(expression)
    try:
        iterator = croniter(expression, at_or_after.replace(microsecond=0) - timedelta(seconds=1))
        occurrence = iterator.get_next(datetime)
        while occurrence < at_or_after:
            occurrence = iterator.get_next(datetime)
        return occurrence
    except (ValueError, KeyError) as e:
        raise CronScheduleError(f"cannot evaluate {expression!r}: {e}") from e
