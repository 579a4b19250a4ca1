"""Timestamp parsing and precision-truncated comparisons.

A timestamp is a timezone-aware :class:`~datetime.datetime`.  Parsing never
raises: unparseable input becomes an :class:`InvalidDate` so the invalidity
can be reported later as a ``date.iso`` error.

Comparisons truncate to a precision unit: the subject's unit boundaries are
computed in the subject's timezone and the other instant is compared
against them, so "before at day precision" means "on an earlier day".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.parser import isoparse

from momentval.domain.units import Unit, next_start, start_of


@dataclass(frozen=True)
class InvalidDate:
    """Input that could not be interpreted as a calendar-aware timestamp."""

    raw: Any

    is_valid = False

    def __str__(self) -> str:
        return f"Invalid date ({self.raw!r})"


def get_zone(name: str) -> ZoneInfo:
    """Look up an IANA timezone.

    Raises:
        ValueError: If *name* is not a known timezone identifier.
    """
    if not isinstance(name, str) or not name:
        msg = f"timezone must be a non-empty string, got {name!r}"
        raise ValueError(msg)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"unknown timezone {name!r}"
        raise ValueError(msg) from exc


def is_absent(value: Any) -> bool:
    """True for values that mean "nothing to validate"."""
    return value is None or (isinstance(value, str) and value == "")


def is_timestamp(value: Any) -> bool:
    """True for timezone-aware datetimes."""
    return isinstance(value, datetime) and value.tzinfo is not None


def _localize(dt: datetime, default_tz: tzinfo | None) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=default_tz or UTC)
    return dt


def parse(value: Any, default_tz: tzinfo | None = None) -> datetime | InvalidDate | None:
    """Interpret *value* as a timestamp.

    Args:
        value: None, an ISO-8601 string, a ``datetime`` or a ``date``.
        default_tz: Zone for inputs without an offset (UTC when omitted).

    Returns:
        ``None`` for absent input, an aware ``datetime`` on success,
        otherwise an :class:`InvalidDate` wrapping the input.
    """
    if is_absent(value):
        return None
    if isinstance(value, datetime):
        return _checked(_localize(value, default_tz), value)
    if isinstance(value, date):
        return _checked(datetime.combine(value, time(), tzinfo=default_tz or UTC), value)
    if not isinstance(value, str):
        return InvalidDate(value)
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError):
        return InvalidDate(value)
    offset = parsed.utcoffset()
    if offset is not None:
        # dateutil's tzutc/tzoffset become plain stdlib fixed offsets
        return _checked(parsed.replace(tzinfo=timezone(offset)), value)
    return _checked(_localize(parsed, default_tz), value)


def _checked(dt: datetime, raw: Any) -> datetime | InvalidDate:
    # an instant whose UTC projection leaves datetime's range cannot be compared
    try:
        dt.astimezone(UTC)
    except OverflowError:
        return InvalidDate(raw)
    return dt


def _ends_by(subject: datetime, other: datetime, precision: Unit) -> bool:
    """True when the unit containing *subject* is over by *other*."""
    try:
        following = next_start(subject, precision)
    except (OverflowError, ValueError):
        # the unit runs past datetime.max, so nothing lies after it
        return False
    return following <= other


def is_before(subject: datetime, other: datetime, precision: Unit = Unit.MILLISECOND) -> bool:
    """*subject* lies entirely before *other* at the given precision."""
    return _ends_by(subject, other, precision)


def is_after(subject: datetime, other: datetime, precision: Unit = Unit.MILLISECOND) -> bool:
    """*subject* lies entirely after *other* at the given precision."""
    return other < start_of(subject, precision)


def is_same(subject: datetime, other: datetime, precision: Unit = Unit.MILLISECOND) -> bool:
    """*other* falls inside the *precision* unit containing *subject*."""
    return start_of(subject, precision) <= other and not _ends_by(subject, other, precision)


def is_same_or_before(
    subject: datetime, other: datetime, precision: Unit = Unit.MILLISECOND
) -> bool:
    return is_same(subject, other, precision) or is_before(subject, other, precision)


def is_same_or_after(
    subject: datetime, other: datetime, precision: Unit = Unit.MILLISECOND
) -> bool:
    return is_same(subject, other, precision) or is_after(subject, other, precision)
