"""Rich/JSON output helpers.

The CLI renders EvaluationResult for humans (Rich output, colors) or
machines (--json).  The formatter layer adapts EvaluationResult to the
requested output mode.
"""

from __future__ import annotations

import json as _json
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field
from rich.markup import escape

from momentval.output.console import create_console, get_output

if TYPE_CHECKING:
    from momentval.services.result import EvaluationResult


class OutputSettings(BaseModel):
    """Rendering switches derived from the global CLI flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    messages: dict[str, str] = Field(default_factory=dict)


def _text(value: Any) -> str:
    if value is None:
        return "(none)"
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    return str(value)


def _format_json(result: EvaluationResult, op: str, settings: OutputSettings) -> str:
    payload: dict[str, Any] = {
        "ok": result.ok,
        "op": op,
        "value": result.value.isoformat() if isinstance(result.value, datetime) else result.value,
        "error": None,
    }
    if result.error is not None:
        payload["error"] = {
            "kind": result.error.kind,
            "message": result.error.render(settings.messages),
            "data": result.error.interpolation(),
        }
    return _json.dumps(payload, indent=2, default=str)


def format_result(
    result: EvaluationResult,
    *,
    op: str = "check",
    settings: OutputSettings | None = None,
) -> str:
    """Format an EvaluationResult for display.

    Args:
        result: The evaluation result to format.
        op: Name of the operation shown in the header line.
        settings: Output mode; human-readable text when omitted.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return _format_json(result, op, settings)

    if settings.quiet:
        if result.error is not None:
            return result.error.render(settings.messages)
        return _text(result.value)

    console = create_console()
    if result.error is None:
        console.print(f"[mv.ok]OK[/]: [mv.op]{op}[/]")
        console.print(f"  [mv.key]value[/]: [mv.value]{escape(_text(result.value))}[/]")
    else:
        message = result.error.render(settings.messages)
        console.print(f"[mv.error]ERROR[/]: [mv.op]{op}[/] — {escape(message)}")
        if settings.verbose:
            console.print(f"  [mv.key]kind[/]: [mv.kind]{escape(result.error.kind)}[/]")
            for key, value in result.error.interpolation().items():
                console.print(f"  [mv.key]{escape(key)}[/]: {escape(value)}")
            console.print(f"  [mv.key]input[/]: {escape(_text(result.value))}")
    return get_output(console).rstrip("\n")
