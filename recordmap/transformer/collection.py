"""Dictionary, lookup-table and default-value transforms."""
from typing import Any

from recordmap.builder.path_accessor import MISSING, is_empty
from recordmap.transformer.config import DefaultOptions, LookupOptions, MapOptions
from recordmap.transformer.context import TransformContext
from recordmap.transformer.conversion import stringify


def _fallback(default: Any, value: Any) -> Any:
    # A configured default of None still counts as "no default"
    if default is MISSING or default is None:
        return value
    return default


def apply_map(value: Any, options: MapOptions, context: TransformContext) -> Any:
    """Translate the value through a dictionary keyed by its text form."""
    key = stringify(value)
    if key in options.values:
        return options.values[key]

    if not options.case_sensitive:
        folded = key.lower()
        for candidate, mapped in options.values.items():
            if candidate.lower() == folded:
                return mapped

    return _fallback(options.default, value)


def apply_lookup(value: Any, options: LookupOptions, context: TransformContext) -> Any:
    """Project `to_field` from the first lookup row whose `from_field` equals the value."""
    table = context.lookup(options.table)
    if table is None:
        context.warn(f'Lookup table "{options.table}" is not registered')
        return _fallback(options.default, value)

    for row in table.data:
        if options.from_field in row and row[options.from_field] == value:
            return row.get(options.to_field)

    return _fallback(options.default, value)


def apply_default(value: Any, options: DefaultOptions, context: TransformContext) -> Any:
    if not options.only_if_empty or is_empty(value):
        return options.value
    return value
