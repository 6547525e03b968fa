"""Type conversion transforms and the value coercion helpers they share."""
import json
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union

from recordmap.exceptions import TransformError
from recordmap.transformer.config import ConvertOptions, ValueKind
from recordmap.transformer.context import TransformContext
from recordmap.transformer.date import format_date, parse_date

TRUTHY_TOKENS = frozenset({"true", "1", "yes", "y", "on"})

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_NUMERIC_PREFIX = re.compile(r"-?(\d+\.?\d*|\.\d+)")


def stringify(value: Any) -> str:
    """Render a value as text for joins, templates and dictionary keys."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def parse_number(value: Any) -> Union[int, float]:
    """
    Parse a number out of a loosely formatted value

    Everything except digits, '.' and '-' is stripped ("$1,250.50" -> 1250.5)
    and the longest numeric prefix is used.

    Raises:
        TransformError: If no number can be read
    """
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        raise TransformError(f"Cannot convert {value!r} to number")

    text = match.group(0)
    if "." in text:
        return float(text)
    return int(text)


def parse_boolean(value: Any) -> bool:
    """Interpret a value as a boolean using the truthy token set."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_TOKENS
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    return bool(value)


def apply_convert(value: Any, options: ConvertOptions, context: TransformContext) -> Any:
    """Coerce the value to the configured kind"""
    target = options.to_kind

    if target == ValueKind.STRING:
        if isinstance(value, (datetime, date)) and options.format:
            return format_date(value, options.format)
        return stringify(value)

    if target == ValueKind.NUMBER:
        return parse_number(value)

    if target == ValueKind.BOOLEAN:
        return parse_boolean(value)

    if target == ValueKind.DATE:
        # Invalid dates become None instead of failing the chain
        return parse_date(value, options.format)

    if target == ValueKind.JSON:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise TransformError(f"Invalid JSON: {e.msg}")
        return value

    return value
