"""momentval — a "moment" date type for pydantic.

Timezone normalization, start/end-of-unit rounding, min/max clamping and
precision-aware comparison rules for date fields.
"""

from momentval.domain.constraints import ComparisonRule, MomentConfig, Ref, RuleKind, ref
from momentval.domain.timestamps import InvalidDate
from momentval.domain.units import Unit
from momentval.schema import MomentValidator, moment
from momentval.services.context import EvaluationContext
from momentval.services.evaluator import DateConstraintEvaluator
from momentval.services.result import ErrorDescriptor, ErrorKind, EvaluationResult

__version__ = "0.1.0"

__all__ = [
    "ComparisonRule",
    "DateConstraintEvaluator",
    "ErrorDescriptor",
    "ErrorKind",
    "EvaluationContext",
    "EvaluationResult",
    "InvalidDate",
    "MomentConfig",
    "MomentValidator",
    "Ref",
    "RuleKind",
    "Unit",
    "moment",
    "ref",
]
