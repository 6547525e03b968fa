"""
Path Accessor - reads and writes values in nested records

Path syntax:
- Dot separated segments: "customer.address.city"
- Bracket indexes: "items[0].name" is the same as "items.0.name"

Segments named __proto__, constructor or prototype are rejected.
"""

import logging
import re
from typing import Any, List

from recordmap.exceptions import UnsafePathError

logger = logging.getLogger(__name__)

RESERVED_SEGMENTS = frozenset({"__proto__", "constructor", "prototype"})

_BRACKET_INDEX = re.compile(r"\[([0-9]+)\]")
_INDEX = re.compile(r"[0-9]+")


class _Missing:
    """Marker for a value that is not present at all (as opposed to None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def is_empty(value: Any) -> bool:
    """Return True for missing values, None and the empty string."""
    return value is MISSING or value is None or (isinstance(value, str) and value == "")


def split_path(path: str) -> List[str]:
    """
    Split a path into its segments

    Raises:
        UnsafePathError: If any segment is reserved
    """
    parts = _BRACKET_INDEX.sub(r".\1", path).split(".")
    for part in parts:
        if part in RESERVED_SEGMENTS:
            raise UnsafePathError(f"Reserved path segment '{part}' in '{path}'")
    return parts


def _is_index(segment: str) -> bool:
    return _INDEX.fullmatch(segment) is not None


def get_value(record: Any, path: str) -> Any:
    """
    Read the value at path

    Args:
        record: Source record (dict/list structure)
        path: Dotted path, bracket indexes allowed

    Returns:
        The value, or MISSING when any step of the path does not exist
    """
    if not path or record is None:
        return MISSING

    current = record
    for part in split_path(path):
        if current is None or current is MISSING:
            return MISSING

        if isinstance(current, dict):
            current = current.get(part, MISSING)
        elif isinstance(current, list):
            if not _is_index(part):
                return MISSING
            index = int(part)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING

    return current


def _ensure_slot(container: List[Any], index: int) -> None:
    if index >= len(container):
        container.extend([None] * (index + 1 - len(container)))


def set_value(record: Any, path: str, value: Any) -> None:
    """
    Write value at path, creating intermediate containers on demand

    A list is created when the following segment is numeric, a dict otherwise.
    Writing MISSING is a no-op. When an existing intermediate value is not a
    container the write is skipped.
    """
    if not path or value is MISSING:
        return

    parts = split_path(path)
    current = record

    for position, part in enumerate(parts[:-1]):
        next_is_index = _is_index(parts[position + 1])

        if isinstance(current, dict):
            child = current.get(part, MISSING)
            if child is MISSING or child is None:
                child = [] if next_is_index else {}
                current[part] = child
        elif isinstance(current, list) and _is_index(part):
            index = int(part)
            _ensure_slot(current, index)
            child = current[index]
            if child is None:
                child = [] if next_is_index else {}
                current[index] = child
        else:
            logger.debug(f"Cannot descend into '{part}' while writing '{path}'")
            return

        if not isinstance(child, (dict, list)):
            logger.debug(f"Path '{path}' blocked by scalar value at '{part}'")
            return
        current = child

    last = parts[-1]
    if isinstance(current, dict):
        current[last] = value
    elif isinstance(current, list) and _is_index(last):
        index = int(last)
        _ensure_slot(current, index)
        current[index] = value
    else:
        logger.debug(f"Cannot write '{last}' while writing '{path}'")
