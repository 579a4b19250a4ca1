"""Immutable constraint configuration for a moment-typed field.

:class:`MomentConfig` is a frozen pydantic model.  Every builder method
returns a new, re-validated instance and never touches the receiver, so a
config can be shared between fields and derived from freely::

    base = MomentConfig().timezone("Europe/Paris").start_of("day")
    due = base.is_after(ref("start"), "day").max_date("2030-01-01")

Configs also load from plain mappings (``MomentConfig.model_validate``),
which is how ``[presets.<name>]`` tables in ``momentval.toml`` are read.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, field_validator

from momentval.domain.timestamps import get_zone
from momentval.domain.units import Unit


class Ref(BaseModel):
    """Deferred pointer to another value, resolved at evaluation time.

    ``path`` addresses a sibling value (dotted for nested values); a
    leading ``$`` addresses a context variable instead.
    """

    model_config = {"frozen": True}

    path: str

    @field_validator("path")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip("$."):
            msg = "reference path must not be empty"
            raise ValueError(msg)
        return v

    @property
    def is_context(self) -> bool:
        return self.path.startswith("$")

    @property
    def keys(self) -> list[str]:
        return self.path.lstrip("$").split(".")

    def __str__(self) -> str:
        return f"ref:{self.path}"


def ref(path: str) -> Ref:
    """Shorthand for ``Ref(path=path)``."""
    return Ref(path=path)


DateArg = str | datetime | date | Ref


class RuleKind(StrEnum):
    """Comparison assertions, named after their error kinds."""

    IS_BEFORE = "isBefore"
    IS_AFTER = "isAfter"
    IS_SAME_OR_BEFORE = "isSameOrBefore"
    IS_SAME_OR_AFTER = "isSameOrAfter"


def _parse_unit(v: Any) -> Unit | None:
    if v is None:
        return None
    return Unit.parse(v)


def _check_date_arg(v: Any) -> Any:
    # dicts are references declared in TOML: {path = "start"}
    if v is None or isinstance(v, str | date | Ref | dict):
        return v
    msg = "must be a date string, date, datetime or reference"
    raise ValueError(msg)


class ComparisonRule(BaseModel):
    """One ordered comparison against a reference date."""

    model_config = {"frozen": True}

    kind: RuleKind
    date: DateArg | None = None
    precision: Unit | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_arg(cls, v: Any) -> Any:
        return _check_date_arg(v)

    @field_validator("precision", mode="before")
    @classmethod
    def _precision(cls, v: Any) -> Unit | None:
        return _parse_unit(v)

    @property
    def effective_precision(self) -> Unit:
        return self.precision or Unit.MILLISECOND


class MomentConfig(BaseModel):
    """Per-field configuration: timezone, rounding, clamping and rules.

    Attributes:
        tz: IANA timezone the value is projected into.
        start_unit: Round down to the start of this unit.
        end_unit: Round up to the end of this unit (applied after start).
        min_bound: Values before this are replaced by it.
        max_bound: Values after this are replaced by it (applied after min).
        rules: Comparison rules, evaluated in order.
    """

    model_config = {"frozen": True}

    tz: str | None = None
    start_unit: Unit | None = None
    end_unit: Unit | None = None
    min_bound: DateArg | None = None
    max_bound: DateArg | None = None
    rules: tuple[ComparisonRule, ...] = ()

    @field_validator("tz")
    @classmethod
    def _known_zone(cls, v: str | None) -> str | None:
        if v is not None:
            get_zone(v)
        return v

    @field_validator("start_unit", "end_unit", mode="before")
    @classmethod
    def _unit(cls, v: Any) -> Unit | None:
        return _parse_unit(v)

    @field_validator("min_bound", "max_bound", mode="before")
    @classmethod
    def _bound(cls, v: Any) -> Any:
        return _check_date_arg(v)

    def _replace(self, **changes: Any) -> Self:
        return self.model_validate({**dict(self), **changes})

    def _add_rule(self, kind: RuleKind, value: DateArg | None, precision: str | None) -> Self:
        rule = ComparisonRule(kind=kind, date=value, precision=precision)
        return self._replace(rules=(*self.rules, rule))

    # --- transformations ---

    def timezone(self, tz: str) -> Self:
        """Project values into the IANA timezone *tz*."""
        return self._replace(tz=tz)

    def start_of(self, unit: str | Unit) -> Self:
        return self._replace(start_unit=unit)

    def end_of(self, unit: str | Unit) -> Self:
        return self._replace(end_unit=unit)

    def min_date(self, value: DateArg | None) -> Self:
        """Clamp values earlier than *value* up to it."""
        return self._replace(min_bound=value)

    def max_date(self, value: DateArg | None) -> Self:
        """Clamp values later than *value* down to it."""
        return self._replace(max_bound=value)

    # --- rules ---

    def is_before(self, value: DateArg | None, precision: str | None = None) -> Self:
        return self._add_rule(RuleKind.IS_BEFORE, value, precision)

    def is_after(self, value: DateArg | None, precision: str | None = None) -> Self:
        return self._add_rule(RuleKind.IS_AFTER, value, precision)

    def is_same_or_before(self, value: DateArg | None, precision: str | None = None) -> Self:
        return self._add_rule(RuleKind.IS_SAME_OR_BEFORE, value, precision)

    def is_same_or_after(self, value: DateArg | None, precision: str | None = None) -> Self:
        return self._add_rule(RuleKind.IS_SAME_OR_AFTER, value, precision)
