"""Pydantic integration — the "moment" type as ``Annotated`` metadata.

Attach a :class:`MomentValidator` to a field to run the evaluator as that
field's validator::

    class Booking(BaseModel):
        start: Annotated[datetime | None, MomentValidator(moment().start_of("day"))] = None
        end: Annotated[
            datetime | None,
            MomentValidator(moment().end_of("day").is_same_or_after(ref("start"), "day")),
        ] = None

References resolve against fields validated *before* the current one
(``ValidationInfo.data``), so referenced fields must be declared first.
The validation context supplies the default timezone (key ``timezone``)
and the variables that ``$``-prefixed references address::

    Booking.model_validate(payload, context={"timezone": "Europe/Paris"})

Failures surface as ``PydanticCustomError`` whose ``type`` is the error
kind (``date.iso``, ``moment.isBefore`` ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler, ValidationInfo
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import PydanticCustomError, core_schema

from momentval.domain.constraints import MomentConfig
from momentval.services.context import EvaluationContext
from momentval.services.evaluator import DateConstraintEvaluator

TIMEZONE_CONTEXT_KEY = "timezone"


def moment() -> MomentConfig:
    """Start a new, empty moment configuration."""
    return MomentConfig()


def _serialize(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


@dataclass(frozen=True)
class MomentValidator:
    """``Annotated`` marker that validates a field with a :class:`MomentConfig`.

    Attributes:
        config: Constraints applied to the field.
        messages: Message template overrides keyed by error kind.
    """

    config: MomentConfig = field(default_factory=MomentConfig)
    messages: dict[str, str] | None = field(default=None, compare=False, hash=False)

    @property
    def evaluator(self) -> DateConstraintEvaluator:
        return DateConstraintEvaluator(self.config)

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        evaluator = self.evaluator

        def validate(value: Any, info: ValidationInfo) -> datetime | None:
            result = evaluator.evaluate(value, self._context(info))
            if result.error is not None:
                error = result.error
                raise PydanticCustomError(
                    str(error.kind), error.template(self.messages), error.interpolation()
                )
            return result.value

        return core_schema.with_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize, when_used="json-unless-none"
            ),
        )

    def __get_pydantic_json_schema__(
        self, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # absent input validates to None whatever the annotated type
        return {"anyOf": [{"type": "string", "format": "date-time"}, {"type": "null"}]}

    @staticmethod
    def _context(info: ValidationInfo) -> EvaluationContext:
        variables = info.context if isinstance(info.context, dict) else {}
        siblings = info.data if isinstance(info.data, dict) else {}
        return EvaluationContext(
            default_timezone=variables.get(TIMEZONE_CONTEXT_KEY),
            siblings=siblings,
            variables=variables,
        )
