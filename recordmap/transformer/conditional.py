"""Conditional and sandboxed custom transforms."""
from typing import Any

from recordmap.builder.path_accessor import MISSING
from recordmap.exceptions import TransformError
from recordmap.transformer.config import ConditionalOptions, CustomOptions
from recordmap.transformer.context import TransformContext
from recordmap.transformer.expression import evaluate_condition


def apply_conditional(value: Any, options: ConditionalOptions, context: TransformContext) -> Any:
    """Pick `then` or `else` by evaluating the condition; a missing branch keeps the value."""
    if evaluate_condition(options.condition, value, context.record):
        branch = options.then
    else:
        branch = options.otherwise

    return value if branch is MISSING else branch


def apply_custom(value: Any, options: CustomOptions, context: TransformContext) -> Any:
    """Delegate the expression to the external sandbox evaluator."""
    if context.evaluator is None:
        raise TransformError("Custom transforms require a sandbox evaluator")

    record = dict(context.record)
    record["value"] = value
    return context.evaluator.evaluate(options.expression, record)
