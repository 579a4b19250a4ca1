"""Calendar units and unit boundaries.

Boundaries are computed in the timestamp's own timezone: the start of
"day" for a Europe/Paris timestamp is Paris midnight, not UTC midnight.
Calendar units (year .. day) step with wall-clock arithmetic via
``relativedelta``; fixed-length units (hour and below) step in absolute
time so DST transitions never stretch or shrink them.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import StrEnum

from dateutil.relativedelta import relativedelta


class Unit(StrEnum):
    """Granularity used for rounding and precision comparisons."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    ISO_WEEK = "isoWeek"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"

    @classmethod
    def parse(cls, value: str | Unit) -> Unit:
        """Resolve a unit name, plural or short alias.

        Short aliases are case-sensitive (``M`` is month, ``m`` is minute).

        Raises:
            ValueError: If *value* names no known unit.
        """
        if isinstance(value, Unit):
            return value
        if not isinstance(value, str):
            msg = f"unit must be a string, got {type(value).__name__}"
            raise ValueError(msg)
        unit = _SHORT_ALIASES.get(value) or _LONG_ALIASES.get(value.lower())
        if unit is None:
            msg = f"unknown unit {value!r}"
            raise ValueError(msg)
        return unit


_SHORT_ALIASES: dict[str, Unit] = {
    "y": Unit.YEAR,
    "Q": Unit.QUARTER,
    "M": Unit.MONTH,
    "w": Unit.WEEK,
    "W": Unit.ISO_WEEK,
    "d": Unit.DAY,
    "D": Unit.DAY,
    "h": Unit.HOUR,
    "m": Unit.MINUTE,
    "s": Unit.SECOND,
    "ms": Unit.MILLISECOND,
}

_LONG_ALIASES: dict[str, Unit] = {
    **{u.value.lower(): u for u in Unit},
    **{f"{u.value.lower()}s": u for u in Unit},
    "date": Unit.DAY,
    "dates": Unit.DAY,
}

_MILLISECOND = timedelta(milliseconds=1)

_CALENDAR_STEPS: dict[Unit, relativedelta] = {
    Unit.YEAR: relativedelta(years=1),
    Unit.QUARTER: relativedelta(months=3),
    Unit.MONTH: relativedelta(months=1),
    Unit.WEEK: relativedelta(days=7),
    Unit.ISO_WEEK: relativedelta(days=7),
    Unit.DAY: relativedelta(days=1),
}

_FIXED_STEPS: dict[Unit, timedelta] = {
    Unit.HOUR: timedelta(hours=1),
    Unit.MINUTE: timedelta(minutes=1),
    Unit.SECOND: timedelta(seconds=1),
    Unit.MILLISECOND: _MILLISECOND,
}


def _settle(dt: datetime) -> datetime:
    """Re-derive the UTC offset for a wall time produced by ``replace``."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).astimezone(dt.tzinfo)


def start_of(dt: datetime, unit: Unit) -> datetime:
    """Truncate *dt* down to the first instant of its containing *unit*."""
    if unit is Unit.MILLISECOND:
        return dt.replace(microsecond=dt.microsecond - dt.microsecond % 1000)
    if unit is Unit.SECOND:
        return dt.replace(microsecond=0)
    if unit is Unit.MINUTE:
        return dt.replace(second=0, microsecond=0)
    if unit is Unit.HOUR:
        return dt.replace(minute=0, second=0, microsecond=0)

    midnight = dt.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit is Unit.DAY:
        result = midnight
    elif unit is Unit.WEEK:
        # Sunday-first weeks; Python's weekday() is Monday == 0
        result = midnight - relativedelta(days=(dt.weekday() + 1) % 7)
    elif unit is Unit.ISO_WEEK:
        result = midnight - relativedelta(days=dt.weekday())
    elif unit is Unit.MONTH:
        result = midnight.replace(day=1)
    elif unit is Unit.QUARTER:
        result = midnight.replace(month=(dt.month - 1) // 3 * 3 + 1, day=1)
    elif unit is Unit.YEAR:
        result = midnight.replace(month=1, day=1)
    else:  # pragma: no cover - exhaustive over Unit
        msg = f"unsupported unit {unit!r}"
        raise ValueError(msg)
    return _settle(result)


def next_start(dt: datetime, unit: Unit) -> datetime:
    """First instant of the *unit* following the one containing *dt*."""
    start = start_of(dt, unit)
    if unit in _FIXED_STEPS:
        if start.tzinfo is None:
            return start + _FIXED_STEPS[unit]
        return (start.astimezone(UTC) + _FIXED_STEPS[unit]).astimezone(start.tzinfo)
    return _settle(start + _CALENDAR_STEPS[unit])


def end_of(dt: datetime, unit: Unit) -> datetime:
    """Round *dt* up to the last millisecond of its containing *unit*.

    For ``millisecond`` itself this is the last microsecond.
    """
    tick = timedelta(microseconds=1) if unit is Unit.MILLISECOND else _MILLISECOND
    following = next_start(dt, unit)
    if following.tzinfo is None:
        return following - tick
    return (following.astimezone(UTC) - tick).astimezone(following.tzinfo)
