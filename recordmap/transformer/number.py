"""Numeric transforms."""
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from recordmap.exceptions import TransformError
from recordmap.transformer.config import MathOperation, MathOptions
from recordmap.transformer.context import TransformContext
from recordmap.transformer.conversion import parse_number

# Operations that need an operand
BINARY_OPERATIONS = {
    MathOperation.ADD,
    MathOperation.SUBTRACT,
    MathOperation.MULTIPLY,
    MathOperation.DIVIDE,
}


def round_to(number: float, precision: int) -> Union[int, float]:
    """Round half up to a fixed number of decimals."""
    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(str(number)).quantize(quantum, rounding=ROUND_HALF_UP)
    if precision <= 0:
        return int(rounded)
    return float(rounded)


def apply_math(value: Any, options: MathOptions, context: TransformContext) -> Any:
    """Apply an arithmetic operation and round to the configured precision."""
    number = parse_number(value)
    operation = options.operation

    if operation in BINARY_OPERATIONS:
        if options.operand is None:
            raise TransformError(f"Math operation '{operation.value}' requires an operand")
        operand = parse_number(options.operand)

        if operation == MathOperation.ADD:
            result = number + operand
        elif operation == MathOperation.SUBTRACT:
            result = number - operand
        elif operation == MathOperation.MULTIPLY:
            result = number * operand
        else:
            if operand == 0:
                raise TransformError("Division by zero")
            result = number / operand
        return round_to(result, options.precision)

    if operation == MathOperation.ROUND:
        return round_to(number, options.precision)
    if operation == MathOperation.FLOOR:
        return math.floor(number)
    if operation == MathOperation.CEIL:
        return math.ceil(number)
    if operation == MathOperation.ABS:
        return abs(number)

    return value
