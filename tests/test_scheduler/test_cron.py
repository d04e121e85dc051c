"""Tests for the cron oracle (next occurrence at or after an instant)."""

from datetime import datetime

import pytest

from scheduler.cron import next_occurrence, validate_schedule
from scheduler.errors import CronScheduleError


def test_occurrence_on_the_instant_itself_is_returned():
    at = datetime(2024, 1, 1, 12, 0)
    assert next_occurrence("0 */12 * * *", at) == at


def test_next_occurrence_after_the_instant():
    at = datetime(2024, 1, 1, 12, 1)
    assert next_occurrence("0 */12 * * *", at) == datetime(2024, 1, 2, 0, 0)


def test_seconds_are_rounded_up_to_the_next_minute():
    at = datetime(2024, 1, 1, 0, 0, 30)
    assert next_occurrence("* * * * *", at) == datetime(2024, 1, 1, 0, 1)


def test_day_of_week_schedule():
    # 2024-01-01 is a Monday; next Saturday 03:00 is 2024-01-06
    assert next_occurrence("0 3 * * 6", datetime(2024, 1, 1)) == datetime(2024, 1, 6, 3, 0)


@pytest.mark.parametrize("expression", ["", "every hour", "61 * * * *", "0 0 * * * *"])
def test_invalid_expressions_raise(expression):
    with pytest.raises(CronScheduleError):
        validate_schedule(expression)
    with pytest.raises(CronScheduleError):
        next_occurrence(expression, datetime(2024, 1, 1))


def test_fractional_start_skips_the_minute_it_falls_in():
    at = datetime(2024, 1, 1, 0, 0, 0, 500000)
    assert next_occurrence("0 0 * * *", at) == datetime(2024, 1, 2, 0, 0)


def test_fractional_start_before_an_occurrence():
    at = datetime(2024, 1, 1, 11, 59, 59, 500000)
    assert next_occurrence("0 */12 * * *", at) == datetime(2024, 1, 1, 12, 0)
