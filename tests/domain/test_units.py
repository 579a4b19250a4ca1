"""Tests for units and start/end-of-unit boundaries."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from momentval.domain.units import Unit, end_of, start_of

SAMPLE = datetime(2024, 8, 23, 14, 35, 12, 345678, tzinfo=UTC)  # a Friday


class TestUnitParse:
    @pytest.mark.parametrize(
        ("alias", "expected"),
        [
            ("day", Unit.DAY),
            ("days", Unit.DAY),
            ("date", Unit.DAY),
            ("d", Unit.DAY),
            ("Year", Unit.YEAR),
            ("y", Unit.YEAR),
            ("Q", Unit.QUARTER),
            ("quarters", Unit.QUARTER),
            ("M", Unit.MONTH),
            ("m", Unit.MINUTE),
            ("isoWeek", Unit.ISO_WEEK),
            ("W", Unit.ISO_WEEK),
            ("ms", Unit.MILLISECOND),
            ("milliseconds", Unit.MILLISECOND),
        ],
    )
    def test_aliases(self, alias: str, expected: Unit) -> None:
        assert Unit.parse(alias) is expected

    def test_unit_passthrough(self) -> None:
        assert Unit.parse(Unit.HOUR) is Unit.HOUR

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown unit"):
            Unit.parse("fortnight")

    def test_non_string(self) -> None:
        with pytest.raises(ValueError, match="must be a string"):
            Unit.parse(5)  # type: ignore[arg-type]


class TestStartOf:
    @pytest.mark.parametrize(
        ("unit", "expected"),
        [
            (Unit.YEAR, datetime(2024, 1, 1, tzinfo=UTC)),
            (Unit.QUARTER, datetime(2024, 7, 1, tzinfo=UTC)),
            (Unit.MONTH, datetime(2024, 8, 1, tzinfo=UTC)),
            (Unit.WEEK, datetime(2024, 8, 18, tzinfo=UTC)),
            (Unit.ISO_WEEK, datetime(2024, 8, 19, tzinfo=UTC)),
            (Unit.DAY, datetime(2024, 8, 23, tzinfo=UTC)),
            (Unit.HOUR, datetime(2024, 8, 23, 14, tzinfo=UTC)),
            (Unit.MINUTE, datetime(2024, 8, 23, 14, 35, tzinfo=UTC)),
            (Unit.SECOND, datetime(2024, 8, 23, 14, 35, 12, tzinfo=UTC)),
            (Unit.MILLISECOND, datetime(2024, 8, 23, 14, 35, 12, 345000, tzinfo=UTC)),
        ],
    )
    def test_truncates(self, unit: Unit, expected: datetime) -> None:
        assert start_of(SAMPLE, unit) == expected

    @pytest.mark.parametrize("unit", list(Unit))
    def test_idempotent(self, unit: Unit) -> None:
        once = start_of(SAMPLE, unit)
        assert start_of(once, unit) == once

    def test_week_starting_on_sunday_is_unchanged(self) -> None:
        sunday = datetime(2024, 8, 18, 9, tzinfo=UTC)
        assert start_of(sunday, Unit.WEEK) == datetime(2024, 8, 18, tzinfo=UTC)
        assert start_of(sunday, Unit.ISO_WEEK) == datetime(2024, 8, 12, tzinfo=UTC)

    def test_uses_own_timezone(self) -> None:
        tokyo = SAMPLE.astimezone(ZoneInfo("Asia/Tokyo"))  # 23:35 local
        result = start_of(tokyo, Unit.DAY)
        assert result == datetime(2024, 8, 23, tzinfo=ZoneInfo("Asia/Tokyo"))
        assert result.utcoffset() == timedelta(hours=9)


class TestEndOf:
    @pytest.mark.parametrize(
        ("unit", "expected"),
        [
            (Unit.YEAR, datetime(2024, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.QUARTER, datetime(2024, 9, 30, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.MONTH, datetime(2024, 8, 31, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.WEEK, datetime(2024, 8, 24, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.ISO_WEEK, datetime(2024, 8, 25, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.DAY, datetime(2024, 8, 23, 23, 59, 59, 999000, tzinfo=UTC)),
            (Unit.HOUR, datetime(2024, 8, 23, 14, 59, 59, 999000, tzinfo=UTC)),
            (Unit.MINUTE, datetime(2024, 8, 23, 14, 35, 59, 999000, tzinfo=UTC)),
            (Unit.SECOND, datetime(2024, 8, 23, 14, 35, 12, 999000, tzinfo=UTC)),
            (Unit.MILLISECOND, datetime(2024, 8, 23, 14, 35, 12, 345999, tzinfo=UTC)),
        ],
    )
    def test_rounds_up(self, unit: Unit, expected: datetime) -> None:
        assert end_of(SAMPLE, unit) == expected

    def test_leap_february(self) -> None:
        feb = datetime(2024, 2, 10, tzinfo=UTC)
        assert end_of(feb, Unit.MONTH) == datetime(2024, 2, 29, 23, 59, 59, 999000, tzinfo=UTC)

    def test_day_across_dst_change(self) -> None:
        paris = ZoneInfo("Europe/Paris")
        spring_forward = datetime(2024, 3, 31, 12, tzinfo=paris)
        start = start_of(spring_forward, Unit.DAY)
        end = end_of(spring_forward, Unit.DAY)
        assert start.utcoffset() == timedelta(hours=1)
        assert end.utcoffset() == timedelta(hours=2)
        assert (end.hour, end.minute, end.second, end.microsecond) == (23, 59, 59, 999000)
