"""
Duration parsing and formatting.

Config files write durations the way CI tooling usually does: "90m", "1h30m",
"168h", "45s". Pydantic only understands ISO 8601 ("PT1H30M") or plain
seconds for timedelta fields, so config models run values through
parse_duration() first.
"""

import re
from datetime import timedelta
from decimal import Decimal
from typing import Union

# nanoseconds per unit; µ (micro sign) and μ (Greek mu) are both accepted
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Convert "1h30m"-style strings (or seconds) into a timedelta.

    Raises ValueError for anything that isn't a well-formed duration,
    so pydantic reports it as a normal validation error.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    text = value.strip()
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError("invalid duration: empty string")

    total_ns = Decimal(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        number, unit = match.groups()
        total_ns += Decimal(number) * _UNITS[unit]
        pos = match.end()
    # sub-microsecond remainders are truncated
    return timedelta(microseconds=int(total_ns) // 1_000)


def format_duration(value: timedelta) -> str:
    """Short human form: 45s, 30m, 2h5m."""
    seconds = int(value.total_seconds())
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h{(seconds % 3600) // 60}m"
