"""Time conversion helpers.

InfluxDB returns the ``time`` column as RFC3339 strings. Some server versions
emit more fractional digits than nanosecond resolution allows, so parsing
falls back to dropping trailing digits a few times before giving up.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union
import logging
import re

import pandas as pd
from pandas.api.types import is_integer

from .exceptions import TimestampParseError

logger = logging.getLogger(__name__)

MAX_TRUNCATIONS = 3
_FRACTION_RE = re.compile(r"\.(\d+)")

TimeLike = Union[int, datetime, date, pd.Timestamp, str]


def _parse_strict(text: str) -> int:
    ts = pd.Timestamp(text)
    if ts is pd.NaT:
        raise ValueError(f"Invalid time: {text!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize(timezone.utc)
    return int(ts.value)


def _drop_fraction_digit(text: str) -> str | None:
    match = _FRACTION_RE.search(text)
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) <= 1:
        return None
    return text[: match.start(1)] + digits[:-1] + text[match.end(1):]


def parse_time(text: str) -> int:
    """Parse an RFC3339 time string into nanoseconds since the epoch.

    Times without an offset are taken as UTC.
    """
    try:
        return _parse_strict(text)
    except ValueError as exc:
        original = exc

    candidate = text
    for _ in range(MAX_TRUNCATIONS):
        candidate = _drop_fraction_digit(candidate)
        if candidate is None:
            break
        try:
            value = _parse_strict(candidate)
        except ValueError:
            continue
        logger.warning("Truncated over-precise time %r to %r", text, candidate)
        return value
    raise TimestampParseError(str(original)) from original


def to_nanoseconds(value: TimeLike) -> int:
    """Convert a timestamp-like value into nanoseconds since the epoch.

    Integers are taken as nanoseconds already, naive datetimes as UTC.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a timestamp")
    if is_integer(value):
        return int(value)
    if isinstance(value, str):
        return parse_time(value)
    if isinstance(value, (datetime, date)):
        ts = pd.Timestamp(value)
        if ts.tzinfo is None:
            ts = ts.tz_localize(timezone.utc)
        return int(ts.value)
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def to_timestamp(nanoseconds: int) -> pd.Timestamp:
    return pd.Timestamp(nanoseconds, unit="ns", tz="UTC")
