"""
Condition Evaluator - safe evaluation of conditional transform expressions

No eval(); conditions are matched against a small grammar:
- value                        (truthiness)
- not value
- value == 'x', value != null, value > 10, value <= 2.5
- record.status == 'active'    (any record path)
- len(value) > 3
- 'abc' in value
- value.startswith('x'), value.endswith('x')
- clauses joined with `and` / `or` (`and` binds tighter)
"""

import logging
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

from recordmap.builder.path_accessor import MISSING, get_value

logger = logging.getLogger(__name__)

COMPARISON_PATTERN = re.compile(
    r"^(value|len\(value\)|record\.[\w.\[\]]+)\s*(==|!=|>=|<=|>|<)\s*(.+)$"
)
CONTAINS_PATTERN = re.compile(r"^(['\"])(.*)\1\s+in\s+value$")
STARTS_WITH_PATTERN = re.compile(r"^value\.startswith\((['\"])(.*)\1\)$")
ENDS_WITH_PATTERN = re.compile(r"^value\.endswith\((['\"])(.*)\1\)$")
NUMERIC_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def parse_literal(text: str) -> Any:
    """Convert the right-hand side of a comparison to a typed value."""
    text = text.strip()
    if text in ("null", "None"):
        return None
    if text in ("true", "True"):
        return True
    if text in ("false", "False"):
        return False
    if NUMERIC_PATTERN.match(text):
        return float(text) if "." in text else int(text)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def split_clauses(expression: str, keyword: str) -> List[str]:
    """Split on a boolean keyword, ignoring occurrences inside quotes."""
    separator = f" {keyword} "
    clauses = []
    quote: Optional[str] = None
    start = 0
    index = 0

    while index < len(expression):
        char = expression[index]
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif expression.startswith(separator, index):
            clauses.append(expression[start:index])
            index += len(separator)
            start = index
            continue
        index += 1

    clauses.append(expression[start:])
    return [clause.strip() for clause in clauses]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _compare(left: Any, operator: str, right: Any) -> bool:
    if left is MISSING:
        left = None

    if operator == "==":
        return left == right and isinstance(left, bool) == isinstance(right, bool)
    if operator == "!=":
        return not _compare(left, "==", right)

    if not (_is_number(left) and _is_number(right)):
        return False
    if operator == ">":
        return left > right
    if operator == ">=":
        return left >= right
    if operator == "<":
        return left < right
    if operator == "<=":
        return left <= right
    return False


def _resolve_operand(operand: str, value: Any, record: Optional[Dict[str, Any]]) -> Any:
    if operand == "value":
        return value
    if operand == "len(value)":
        return len(value) if isinstance(value, (str, list, tuple, dict)) else MISSING
    if record is None:
        return MISSING
    return get_value(record, operand[len("record."):])


def _evaluate_clause(clause: str, value: Any, record: Optional[Dict[str, Any]]) -> bool:
    if clause == "value":
        return bool(value)
    if clause == "not value":
        return not value

    match = COMPARISON_PATTERN.match(clause)
    if match:
        operand, operator, literal = match.groups()
        return _compare(_resolve_operand(operand, value, record), operator, parse_literal(literal))

    match = CONTAINS_PATTERN.match(clause)
    if match:
        return isinstance(value, (str, list, tuple)) and match.group(2) in value

    match = STARTS_WITH_PATTERN.match(clause)
    if match:
        return isinstance(value, str) and value.startswith(match.group(2))

    match = ENDS_WITH_PATTERN.match(clause)
    if match:
        return isinstance(value, str) and value.endswith(match.group(2))

    logger.debug(f"Unrecognized condition '{clause}', using truthiness of value")
    return bool(value)


def evaluate_condition(condition: str, value: Any, record: Optional[Dict[str, Any]] = None) -> bool:
    """
    Evaluate a condition against the current value and its record

    Returns:
        Result of the condition; False when evaluation fails
    """
    try:
        return any(
            all(_evaluate_clause(clause, value, record) for clause in split_clauses(branch, "and"))
            for branch in split_clauses(condition.strip(), "or")
        )
    except Exception as e:
        logger.debug(f"Condition evaluation failed for '{condition}': {e}")
        return False
