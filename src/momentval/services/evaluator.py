"""DateConstraintEvaluator — the coercion and validation pipeline.

Four stages run per value:

1. parse      — input to timestamp, ``None`` (absent) or InvalidDate
2. normalize  — timezone projection, then start-of / end-of rounding
3. clamp      — min bound, then max bound
4. assert     — ordered comparison rules, stopping at the first failure

``coerce()`` runs stages 1-3, ``validate()`` reports invalid input, and
``evaluate()`` chains coerce, validate and the rules the way a host
framework calls them.  Nothing here raises for bad input: every failure
comes back as ``EvaluationResult.error``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from momentval.domain.constraints import ComparisonRule, MomentConfig, Ref, RuleKind
from momentval.domain.timestamps import (
    InvalidDate,
    get_zone,
    is_after,
    is_before,
    is_same_or_after,
    is_same_or_before,
    is_timestamp,
    parse,
)
from momentval.domain.units import Unit, end_of, start_of
from momentval.services.context import EvaluationContext
from momentval.services.result import ErrorDescriptor, ErrorKind, EvaluationResult

logger = logging.getLogger(__name__)

_COMPARATORS: dict[RuleKind, Callable[[datetime, datetime, Unit], bool]] = {
    RuleKind.IS_BEFORE: is_before,
    RuleKind.IS_AFTER: is_after,
    RuleKind.IS_SAME_OR_BEFORE: is_same_or_before,
    RuleKind.IS_SAME_OR_AFTER: is_same_or_after,
}

_ERROR_KINDS: dict[RuleKind, ErrorKind] = {
    RuleKind.IS_BEFORE: ErrorKind.IS_BEFORE,
    RuleKind.IS_AFTER: ErrorKind.IS_AFTER,
    RuleKind.IS_SAME_OR_BEFORE: ErrorKind.IS_SAME_OR_BEFORE,
    RuleKind.IS_SAME_OR_AFTER: ErrorKind.IS_SAME_OR_AFTER,
}

_EMPTY_CONTEXT = EvaluationContext()


class DateConstraintEvaluator:
    """Applies one :class:`MomentConfig` to individual values.

    The evaluator holds no per-value state and can be shared freely.

    Usage::

        evaluator = DateConstraintEvaluator(MomentConfig().start_of("day"))
        result = evaluator.evaluate("2024-03-15T10:00:00Z")
        if result.ok:
            ...
    """

    def __init__(self, config: MomentConfig | None = None) -> None:
        self.config = config or MomentConfig()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def parse(
        self, value: Any, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> datetime | InvalidDate | None:
        return parse(value, context.zone)

    def normalize(
        self, ts: datetime | InvalidDate | None, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> datetime | InvalidDate | None:
        """Project *ts* into the configured timezone and round it.

        An explicit ``tz`` wins over the context default.  When both
        ``start_unit`` and ``end_unit`` are set the end boundary wins.
        """
        if not is_timestamp(ts):
            return ts
        assert isinstance(ts, datetime)

        tz_name = self.config.tz or context.default_timezone
        if tz_name:
            ts = ts.astimezone(get_zone(tz_name))
        if self.config.start_unit is not None:
            ts = start_of(ts, self.config.start_unit)
        if self.config.end_unit is not None:
            ts = end_of(ts, self.config.end_unit)
        return ts

    def clamp(
        self, ts: datetime | InvalidDate | None, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> datetime | InvalidDate | None:
        """Replace *ts* with the nearest bound when it falls outside them.

        The max bound is applied last, so it wins when the bounds are
        inverted.
        """
        if not is_timestamp(ts):
            return ts
        assert isinstance(ts, datetime)

        lower = self._resolve_bound(self.config.min_bound, "min", context)
        upper = self._resolve_bound(self.config.max_bound, "max", context)
        if lower is not None and upper is not None and lower > upper:
            logger.warning(
                "Inverted date bounds: min %s is after max %s; max wins",
                lower.isoformat(),
                upper.isoformat(),
            )

        if lower is not None and ts < lower:
            logger.debug("Clamping %s up to %s", ts.isoformat(), lower.isoformat())
            ts = lower.astimezone(ts.tzinfo)
        if upper is not None and ts > upper:
            logger.debug("Clamping %s down to %s", ts.isoformat(), upper.isoformat())
            ts = upper.astimezone(ts.tzinfo)
        return ts

    def assert_rule(
        self, value: Any, rule: ComparisonRule, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> ErrorDescriptor | None:
        """Check one comparison rule. Returns an error or ``None``."""
        raw = context.resolve(rule.date)
        if raw is None or raw == "":
            return None
        if not is_timestamp(value):
            return None

        if isinstance(rule.date, Ref) and not isinstance(raw, str | date):
            return ErrorDescriptor(
                kind=ErrorKind.REF,
                data={
                    "ref": rule.date.path,
                    "arg": "date",
                    "reason": "must be a date string or datetime",
                },
            )

        other = parse(raw, context.zone)
        precision = rule.effective_precision
        if isinstance(other, datetime) and self._compare(rule.kind, value, other, precision):
            return None
        logger.debug("Rule %s failed for %s against %s", rule.kind, value, other)
        return ErrorDescriptor(
            kind=_ERROR_KINDS[rule.kind],
            data={"date": other, "precision": precision},
        )

    def assert_rules(
        self, value: Any, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> ErrorDescriptor | None:
        """Check every rule in order, stopping at the first failure."""
        for rule in self.config.rules:
            error = self.assert_rule(value, rule, context)
            if error is not None:
                return error
        return None

    def validate(self, ts: datetime | InvalidDate | None) -> ErrorDescriptor | None:
        """Report an invalid timestamp as ``date.iso``; absent values pass."""
        if isinstance(ts, InvalidDate):
            return ErrorDescriptor(kind=ErrorKind.DATE_ISO)
        return None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def coerce(self, value: Any, context: EvaluationContext = _EMPTY_CONTEXT) -> EvaluationResult:
        """Parse, normalize and clamp *value*.

        Never fails: unparseable input, and input whose rounding or
        projection leaves the supported date range, comes back as an
        InvalidDate value for ``validate()`` to report.
        """
        ts = self.parse(value, context)
        try:
            ts = self.clamp(self.normalize(ts, context), context)
        except (OverflowError, ValueError):
            # rounding or projection left the representable date range
            logger.debug("Date %r falls outside the supported range", value)
            ts = InvalidDate(value)
        return EvaluationResult(value=ts)

    def evaluate(
        self, value: Any, context: EvaluationContext = _EMPTY_CONTEXT
    ) -> EvaluationResult:
        """Run the full pipeline: coerce, validate, then the rules."""
        result = self.coerce(value, context)
        error = self.validate(result.value)
        if error is not None:
            logger.debug("Invalid date input %r", value)
            return EvaluationResult(value=value, error=error)
        error = self.assert_rules(result.value, context)
        if error is not None:
            return EvaluationResult(value=result.value, error=error)
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _compare(kind: RuleKind, value: datetime, other: datetime, precision: Unit) -> bool:
        try:
            return _COMPARATORS[kind](value, other, precision)
        except (OverflowError, ValueError):
            logger.debug("Cannot compare %s at %s precision", value.isoformat(), precision)
            return False

    def _resolve_bound(
        self, bound: Any, name: str, context: EvaluationContext
    ) -> datetime | None:
        raw = context.resolve(bound)
        ts = parse(raw, context.zone)
        if isinstance(ts, InvalidDate):
            logger.warning("Ignoring unparseable %s bound %r", name, raw)
            return None
        return ts
