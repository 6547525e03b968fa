"""String transforms."""
import re
from typing import Any

from recordmap.builder.path_accessor import MISSING, get_value, is_empty
from recordmap.builder.template_engine import TemplateEngine
from recordmap.exceptions import TransformError
from recordmap.transformer.config import (
    ConcatOptions,
    ExtractOptions,
    JoinOptions,
    ReplaceOptions,
    SplitOptions,
    TemplateOptions,
)
from recordmap.transformer.context import TransformContext
from recordmap.transformer.conversion import stringify


def apply_trim(value: Any, options: None, context: TransformContext) -> Any:
    return value.strip() if isinstance(value, str) else value


def apply_lowercase(value: Any, options: None, context: TransformContext) -> Any:
    return value.lower() if isinstance(value, str) else value


def apply_uppercase(value: Any, options: None, context: TransformContext) -> Any:
    return value.upper() if isinstance(value, str) else value


def apply_template(value: Any, options: TemplateOptions, context: TransformContext) -> Any:
    """Render the template with ${value} and ${record.path} placeholders."""
    return TemplateEngine(context.record).evaluate(options.template, value)


def apply_split(value: Any, options: SplitOptions, context: TransformContext) -> Any:
    """Split a string; return one part when an index is configured."""
    if not isinstance(value, str) or not options.delimiter:
        return value

    parts = value.split(options.delimiter)
    if options.trim:
        parts = [part.strip() for part in parts]

    if options.index is not None:
        if -len(parts) <= options.index < len(parts):
            return parts[options.index]
        return None

    return parts


def _joinable(items) -> list:
    return [stringify(item) for item in items if not is_empty(item)]


def apply_join(value: Any, options: JoinOptions, context: TransformContext) -> Any:
    """
    Join values into one string

    A list value is joined item by item. With `fields`, the value is joined
    together with the listed record fields; empty values are skipped.
    """
    if options.fields:
        items = [value] + [get_value(context.record, path) for path in options.fields]
        return options.separator.join(_joinable(items))

    if isinstance(value, (list, tuple)):
        return options.separator.join(_joinable(value))

    return value


def apply_concat(value: Any, options: ConcatOptions, context: TransformContext) -> Any:
    """Append the listed record fields to the value."""
    if not options.fields:
        return value

    items = [value] + [get_value(context.record, path) for path in options.fields]
    return options.separator.join(_joinable(items))


def _compile(pattern: str) -> "re.Pattern":
    try:
        return re.compile(pattern)
    except re.error as e:
        raise TransformError(f"Invalid pattern {pattern!r}: {e}")


def apply_replace(value: Any, options: ReplaceOptions, context: TransformContext) -> Any:
    if not isinstance(value, str) or not options.search:
        return value

    count = 0 if options.all else 1
    if options.regex:
        return _compile(options.search).sub(options.replace, value, count=count)

    if options.all:
        return value.replace(options.search, options.replace)
    return value.replace(options.search, options.replace, 1)


def apply_extract(value: Any, options: ExtractOptions, context: TransformContext) -> Any:
    """Return the configured capture group of the first match, or None."""
    if value is MISSING or value is None:
        return None

    match = _compile(options.pattern).search(stringify(value))
    if not match:
        return None

    try:
        return match.group(options.group)
    except IndexError:
        raise TransformError(f"Pattern {options.pattern!r} has no group {options.group}")
