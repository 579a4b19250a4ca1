"""EvaluationResult and ErrorDescriptor — the evaluation contract.

INVARIANT: The evaluator returns EvaluationResult for every input.
The schema adapter, the CLI, and any other host consume this type.
Message templates here are defaults only; hosts may pass their own.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(StrEnum):
    """Error kinds surfaced by evaluation."""

    DATE_ISO = "date.iso"
    IS_BEFORE = "moment.isBefore"
    IS_AFTER = "moment.isAfter"
    IS_SAME_OR_BEFORE = "moment.isSameOrBefore"
    IS_SAME_OR_AFTER = "moment.isSameOrAfter"
    REF = "any.ref"


DEFAULT_MESSAGES: dict[str, str] = {
    ErrorKind.DATE_ISO: "must be in ISO 8601 date format",
    ErrorKind.IS_BEFORE: 'must be before {date}, with precision "{precision}"',
    ErrorKind.IS_AFTER: 'must be after {date}, with precision "{precision}"',
    ErrorKind.IS_SAME_OR_BEFORE: 'must be same as or before {date}, with precision "{precision}"',
    ErrorKind.IS_SAME_OR_AFTER: 'must be same as or after {date}, with precision "{precision}"',
    ErrorKind.REF: '"{ref}" references {reason}',
}


def _interpolate(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    return str(value)


class ErrorDescriptor(BaseModel):
    """Error kind plus the data needed to render its message.

    Attributes:
        kind: One of :class:`ErrorKind` (hosts may define more).
        data: Interpolation values, e.g. ``{"date": ..., "precision": ...}``.
    """

    model_config = {"frozen": True}

    kind: str
    data: dict[str, Any] = Field(default_factory=dict)

    def template(self, messages: dict[str, str] | None = None) -> str:
        """Return the message template for this kind."""
        if messages and self.kind in messages:
            return messages[self.kind]
        return DEFAULT_MESSAGES.get(self.kind, self.kind)

    def interpolation(self) -> dict[str, str]:
        """Return ``data`` with every value rendered as text."""
        return {key: _interpolate(value) for key, value in self.data.items()}

    def render(self, messages: dict[str, str] | None = None) -> str:
        """Render a human-readable message.

        Unknown placeholders are left as-is rather than raising, since
        override templates come from user configuration.
        """
        template = self.template(messages)
        try:
            return template.format(**self.interpolation())
        except (KeyError, IndexError, ValueError):
            return template


class EvaluationResult(BaseModel):
    """Outcome of evaluating one value.

    Attributes:
        value: The coerced timestamp, ``None`` for absent input, or the
            original input when it could not be parsed.
        error: Set when evaluation failed.
    """

    model_config = {"frozen": True}

    value: Any = None
    error: ErrorDescriptor | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
