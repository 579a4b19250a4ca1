"""Command: evaluate one value against moment constraints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from momentval.commands._base import MomentvalCommand
from momentval.domain.constraints import MomentConfig, Ref, RuleKind
from momentval.domain.units import Unit

if TYPE_CHECKING:
    from momentval.commands._context import AppContext

REF_PREFIX = "ref:"

_RULE_ALIASES: dict[str, RuleKind] = {
    **{kind.value.lower(): kind for kind in RuleKind},
    "before": RuleKind.IS_BEFORE,
    "after": RuleKind.IS_AFTER,
    "same-or-before": RuleKind.IS_SAME_OR_BEFORE,
    "same-or-after": RuleKind.IS_SAME_OR_AFTER,
}


def _date_arg(text: str) -> str | Ref:
    """``ref:PATH`` becomes a reference, anything else stays a literal."""
    if text.startswith(REF_PREFIX):
        return Ref(path=text[len(REF_PREFIX) :])
    return text


def _unit_callback(_ctx: click.Context, _param: click.Parameter, value: str | None) -> Unit | None:
    if value is None:
        return None
    try:
        return Unit.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _bound_callback(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> str | Ref | None:
    if value is None:
        return None
    try:
        return _date_arg(value)
    except ValidationError as exc:
        raise click.BadParameter(f"invalid reference {value!r}") from exc


def _rules_callback(
    _ctx: click.Context, _param: click.Parameter, value: tuple[str, ...]
) -> list[tuple[RuleKind, str | Ref, str | None]]:
    """Parse ``KIND=DATE[@UNIT]`` rule specs, keeping their order."""
    rules: list[tuple[RuleKind, str | Ref, str | None]] = []
    for spec in value:
        name, sep, target = spec.partition("=")
        kind = _RULE_ALIASES.get(name.strip().lower())
        if not sep or kind is None or not target:
            formatted = ", ".join(sorted(_RULE_ALIASES))
            msg = f"{spec!r} is not KIND=DATE[@UNIT] with KIND one of {formatted}"
            raise click.BadParameter(msg)
        date_text, at, precision = target.rpartition("@")
        if not at:
            date_text, precision = target, ""
        try:
            rules.append((kind, _date_arg(date_text), precision or None))
        except ValidationError as exc:
            raise click.BadParameter(f"invalid reference in {spec!r}") from exc
    return rules


def _assignments_callback(
    _ctx: click.Context, _param: click.Parameter, value: tuple[str, ...]
) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in value:
        key, sep, val = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"{item!r} is not KEY=VALUE")
        values[key] = val
    return values


def build_config(
    base: MomentConfig,
    *,
    tz: str | None = None,
    start_of: Unit | None = None,
    end_of: Unit | None = None,
    min_date: str | Ref | None = None,
    max_date: str | Ref | None = None,
    rules: list[tuple[RuleKind, str | Ref, str | None]] | None = None,
) -> MomentConfig:
    """Layer command-line constraints over *base* (a preset or empty config)."""
    config = base
    if tz is not None:
        config = config.timezone(tz)
    if start_of is not None:
        config = config.start_of(start_of)
    if end_of is not None:
        config = config.end_of(end_of)
    if min_date is not None:
        config = config.min_date(min_date)
    if max_date is not None:
        config = config.max_date(max_date)
    builders = {
        RuleKind.IS_BEFORE: MomentConfig.is_before,
        RuleKind.IS_AFTER: MomentConfig.is_after,
        RuleKind.IS_SAME_OR_BEFORE: MomentConfig.is_same_or_before,
        RuleKind.IS_SAME_OR_AFTER: MomentConfig.is_same_or_after,
    }
    for kind, target, precision in rules or []:
        config = builders[kind](config, target, precision)
    return config


@click.command(
    cls=MomentvalCommand,
    examples="""\
  momentval check 2024-03-15T10:00:00Z --tz UTC --start-of day
  momentval check 2024-07-01 --min 2024-01-01 --max 2024-06-01
  momentval check 2024-01-01 --rule isAfter=2024-06-01@day
  momentval check 2024-05-02 --rule same-or-after=ref:start@day --set start=2024-05-01
  momentval check 2024-05-02 --preset due_date
  momentval --json check not-a-date""",
)
@click.argument("value")
@click.option("--preset", default=None, help="Start from a [presets.<name>] config.")
@click.option("--tz", default=None, help="IANA timezone to project the value into.")
@click.option("--start-of", callback=_unit_callback, default=None, help="Round down to unit.")
@click.option("--end-of", callback=_unit_callback, default=None, help="Round up to unit.")
@click.option("--min", "min_date", callback=_bound_callback, default=None, help="Minimum date.")
@click.option("--max", "max_date", callback=_bound_callback, default=None, help="Maximum date.")
@click.option(
    "--rule",
    "rules",
    multiple=True,
    callback=_rules_callback,
    help="Comparison rule KIND=DATE[@UNIT], e.g. isBefore=2024-06-01@day (repeatable).",
)
@click.option(
    "--set",
    "siblings",
    multiple=True,
    callback=_assignments_callback,
    help="Sibling value KEY=VALUE for ref:KEY references (repeatable).",
)
@click.option(
    "--var",
    "variables",
    multiple=True,
    callback=_assignments_callback,
    help="Context variable KEY=VALUE for ref:$KEY references (repeatable).",
)
@click.option("--default-tz", default=None, help="Default timezone for this evaluation.")
@click.pass_obj
def check(
    app: AppContext,
    value: str,
    preset: str | None,
    tz: str | None,
    start_of: Unit | None,
    end_of: Unit | None,
    min_date: str | Ref | None,
    max_date: str | Ref | None,
    rules: list[tuple[RuleKind, str | Ref, str | None]],
    siblings: dict[str, str],
    variables: dict[str, Any],
    default_tz: str | None,
) -> None:
    """Coerce and validate VALUE, printing the normalized date or the error."""
    from momentval.services.context import EvaluationContext
    from momentval.services.evaluator import DateConstraintEvaluator

    try:
        base = app.settings.preset(preset) if preset else MomentConfig()
        config = build_config(
            base,
            tz=tz,
            start_of=start_of,
            end_of=end_of,
            min_date=min_date,
            max_date=max_date,
            rules=rules,
        )
        context = EvaluationContext(
            default_timezone=default_tz or app.settings.evaluation.default_timezone,
            siblings=siblings,
            variables=variables,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    result = DateConstraintEvaluator(config).evaluate(value, context)
    app.emit(result, op="check")
