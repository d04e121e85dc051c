"""Tests for duration parsing ("1h30m") and formatting."""

from datetime import timedelta

import pytest

from models.durations import format_duration, parse_duration


@pytest.mark.parametrize("text, expected", [
    ("45s", timedelta(seconds=45)),
    ("30m", timedelta(minutes=30)),
    ("1h30m", timedelta(hours=1, minutes=30)),
    ("168h", timedelta(days=7)),
    ("1.5h", timedelta(hours=1, minutes=30)),
    ("2h0m10s", timedelta(hours=2, seconds=10)),
    ("500ms", timedelta(milliseconds=500)),
    ("1500000000ns", timedelta(seconds=1.5)),
    ("250us", timedelta(microseconds=250)),
    ("250\u00b5s", timedelta(microseconds=250)),
    ("250\u03bcs", timedelta(microseconds=250)),
    ("1h0.5ms", timedelta(hours=1, microseconds=500)),
    ("0", timedelta(0)),
])
def test_parse_go_style_durations(text, expected):
    assert parse_duration(text) == expected


def test_numbers_are_seconds():
    assert parse_duration(90) == timedelta(minutes=1, seconds=30)
    assert parse_duration(1.5) == timedelta(seconds=1.5)


def test_timedelta_passes_through():
    assert parse_duration(timedelta(hours=2)) == timedelta(hours=2)


@pytest.mark.parametrize("text", ["", "5", "5 minutes", "h", "1d", "-1h", "1h 30m"])
def test_invalid_durations(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_bool_is_not_a_duration():
    with pytest.raises(ValueError):
        parse_duration(True)


@pytest.mark.parametrize("value, expected", [
    (timedelta(seconds=45), "45s"),
    (timedelta(minutes=30), "30m"),
    (timedelta(hours=1), "1h0m"),
    (timedelta(hours=8, minutes=5), "8h5m"),
    (timedelta(days=7), "168h0m"),
])
def test_format_duration(value, expected):
    assert format_duration(value) == expected


def test_nanoseconds_below_a_microsecond_are_truncated():
    assert parse_duration("1999ns") == timedelta(microseconds=1)
    assert parse_duration("999ns") == timedelta(0)
