"""Schedule arithmetic: delay counters and SLA aging.

Pure functions -- deterministic, no side effects. All datetimes are expected
to be timezone-aware.
"""
import math
from datetime import UTC, datetime, time, timedelta, tzinfo

SECONDS_PER_DAY = 24 * 60 * 60
NOON = time(12, 0)


def _noon(dt: datetime, tz: tzinfo) -> datetime:
    """Pin ``dt`` to 12:00 wall-clock on its calendar day in ``tz``."""
    return datetime.combine(dt.astimezone(tz).date(), NOON)


def delay_days(
    target: datetime,
    actual: datetime | None,
    now: datetime,
    tz: tzinfo = UTC,
) -> int:
    """Whole days the finish (actual, or now while open) is past the target.

    Both ends are normalized to noon on their calendar day in ``tz`` before
    differencing, so hour offsets and DST shifts never tip the count by one.

    Returns:
        Non-negative day count.
    """
    end = actual if actual is not None else now
    diff = (_noon(end, tz) - _noon(target, tz)) // timedelta(days=1)
    return max(0, diff)


def rolling_delay_days(now: datetime, original_target: datetime) -> int:
    """Coarse rolling lateness against the original baseline.

    Ceiling division on the raw difference; may be zero or negative before
    the baseline has passed.
    """
    return math.ceil((now - original_target).total_seconds() / SECONDS_PER_DAY)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def shifted_target(original_target: datetime, delay_days: int, client_delay_days: int = 0) -> datetime:
    """Working finish date: original + system (SLA) delay + client delay."""
    return original_target + timedelta(days=delay_days + client_delay_days)
