"""Date parsing and formatting transforms."""
import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from recordmap.exceptions import TransformError
from recordmap.transformer.config import DateOptions
from recordmap.transformer.context import TransformContext

# Output tokens, longest first so "MM" is not eaten by "mm"
FORMAT_TOKENS = {
    "YYYY": "%Y",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}

_TOKEN_PATTERN = re.compile("|".join(FORMAT_TOKENS))

FALLBACK_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%Y%m%d",
]


def to_strftime(pattern: str) -> str:
    """Translate a YYYY-MM-DD style pattern into a strftime pattern."""
    escaped = pattern.replace("%", "%%")
    return _TOKEN_PATTERN.sub(lambda m: FORMAT_TOKENS[m.group(0)], escaped)


def parse_date(value: Any, input_format: Optional[str] = None) -> Optional[datetime]:
    """
    Parse a value into a datetime

    Accepts datetime/date objects, epoch milliseconds and strings (ISO 8601,
    a few common layouts, or the explicit input_format).

    Returns:
        datetime, or None when the value is not a valid date
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if input_format:
        try:
            return datetime.strptime(text, to_strftime(input_format))
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def format_date(moment: datetime, pattern: str) -> str:
    """Render a datetime using YYYY, MM, DD, HH, mm and ss tokens."""
    return _TOKEN_PATTERN.sub(lambda m: moment.strftime(FORMAT_TOKENS[m.group(0)]), pattern)


def apply_date(value: Any, options: DateOptions, context: TransformContext) -> Any:
    """Parse the value, then format it when an output format is configured."""
    parsed = parse_date(value, options.input_format)
    if parsed is None:
        raise TransformError(f"Invalid date: {value!r}")
    if options.format:
        return format_date(parsed, options.format)
    return parsed
