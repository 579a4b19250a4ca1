"""Service layer — evaluation context, results, and the evaluator pipeline.

INVARIANT: Evaluation failures are returned as EvaluationResult.error,
never raised.
"""

from momentval.services.context import EvaluationContext, resolve_reference
from momentval.services.evaluator import DateConstraintEvaluator
from momentval.services.result import ErrorDescriptor, ErrorKind, EvaluationResult

__all__ = [
    "DateConstraintEvaluator",
    "ErrorDescriptor",
    "ErrorKind",
    "EvaluationContext",
    "EvaluationResult",
    "resolve_reference",
]
