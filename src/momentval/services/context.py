"""Ambient evaluation context and reference resolution.

The host supplies a default timezone and the values a reference may point
at: sibling values of the field being validated and free-form context
variables (addressed with a ``$`` prefix).  Resolution is pluggable through
``EvaluationContext.resolver``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any

from momentval.domain.constraints import Ref
from momentval.domain.timestamps import get_zone

_MISSING = object()

Resolver = Callable[[Ref, "EvaluationContext"], Any]


def _lookup(container: Any, key: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(key, _MISSING)
    return getattr(container, key, _MISSING)


def resolve_reference(reference: Ref, context: EvaluationContext) -> Any:
    """Default resolver: walk the reference path through the context.

    Returns ``None`` when any segment of the path is missing.
    """
    current: Any = context.variables if reference.is_context else context.siblings
    for key in reference.keys:
        current = _lookup(current, key)
        if current is _MISSING or current is None:
            return None
    return current


@dataclass(frozen=True)
class EvaluationContext:
    """Per-evaluation ambient state supplied by the host.

    Attributes:
        default_timezone: Fallback zone when a config sets none; also the
            zone for inputs that carry no offset.
        siblings: Values of the other fields in the validation scope.
        variables: Context variables, addressed as ``$name`` references.
        resolver: Maps a reference to a concrete value (or ``None``).
    """

    default_timezone: str | None = None
    siblings: Mapping[str, Any] = field(default_factory=dict)
    variables: Mapping[str, Any] = field(default_factory=dict)
    resolver: Resolver = resolve_reference

    def __post_init__(self) -> None:
        if self.default_timezone is not None:
            get_zone(self.default_timezone)

    @property
    def zone(self) -> tzinfo | None:
        if self.default_timezone is None:
            return None
        return get_zone(self.default_timezone)

    def resolve(self, value: Any) -> Any:
        """Resolve *value* if it is a :class:`Ref`, else return it unchanged."""
        if isinstance(value, Ref):
            return self.resolver(value, self)
        return value
