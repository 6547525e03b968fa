"""
Value detection and similarity scoring helpers for the auto mapper
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from recordmap.schema.models import EntityField, SourceFieldAnalysis
from recordmap.transformer.config import (
    ConvertOptions,
    MapOptions,
    TransformConfig,
    TransformType,
    TemplateOptions,
    ValueKind,
)
from recordmap.transformer.date import parse_date

# Source type -> target types it can be loaded into
TYPE_COMPATIBILITY: Dict[str, List[str]] = {
    "string": ["string", "localized-string", "id", "enum"],
    "number": ["number", "money"],
    "boolean": ["boolean"],
    "date": ["date", "string"],
    "array": ["relation", "asset"],
    "object": ["json", "relation"],
}

NEUTRAL_SCORE = 50
COMPATIBLE_SCORE = 100
INCOMPATIBLE_SCORE = 20

BOOLEAN_TOKENS = {
    "yes": True,
    "no": False,
    "true": True,
    "false": False,
    "1": True,
    "0": False,
    "active": True,
    "inactive": False,
    "enabled": True,
    "disabled": False,
}
# Sample values that mark a string column as boolean-like
BOOLEAN_HINTS = {"yes", "no", "true", "false", "1", "0", "active", "inactive"}

_SEPARATORS = re.compile(r"[-_\s]+")
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_NUMERIC_STRING = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_WORD_SPLIT = re.compile(r"\W+")


def round_half_up(number: float) -> int:
    """Round .5 away from zero for positive scores (2.5 -> 3)."""
    return int(math.floor(number + 0.5))


def normalize_field_name(name: str) -> str:
    """Lowercase and strip separators: "Product_Name" -> "productname"."""
    return _SEPARATORS.sub("", name.lower())


def detect_value_type(value: Any) -> str:
    """
    Classify a raw value

    Returns:
        One of string, number, boolean, date, array, object, null
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, Decimal)):
        return "number"
    if isinstance(value, float):
        return "string" if math.isnan(value) else "number"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (datetime, date)):
        return "date"

    if isinstance(value, str):
        if _ISO_DATE_PREFIX.match(value) and parse_date(value) is not None:
            return "date"
        if _NUMERIC_STRING.match(value.strip()):
            return "number"

    return "string"


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single character edits turning a into b."""
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current

    return previous[-1]


def calculate_similarity(a: str, b: str) -> float:
    """Levenshtein similarity in [0, 1]: 1 - distance / longest length."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1 - levenshtein_distance(a, b) / max(len(a), len(b))


def _word_set(text: str) -> Set[str]:
    return {word for word in _WORD_SPLIT.split(text.lower()) if word}


def jaccard_similarity(a: Set[str], b: Set[str]) -> float:
    """Intersection over union of two sets."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def is_type_compatible(source_type: str, target_type: str) -> bool:
    if source_type in ("mixed", "null"):
        return True
    return target_type in TYPE_COMPATIBILITY.get(source_type, [])


def calculate_type_score(source_type: str, target_type: str) -> int:
    """100 when compatible, 20 when not, 50 for mixed/null sources."""
    if source_type in ("mixed", "null"):
        return NEUTRAL_SCORE
    return COMPATIBLE_SCORE if is_type_compatible(source_type, target_type) else INCOMPATIBLE_SCORE


def calculate_description_score(
    source_description: Optional[str],
    target_description: Optional[str],
) -> int:
    """Jaccard similarity of the description word sets as 0-100; 50 when either is absent."""
    if not source_description or not target_description:
        return NEUTRAL_SCORE

    source_words = _word_set(source_description)
    target_words = _word_set(target_description)
    if not source_words or not target_words:
        return NEUTRAL_SCORE

    return round_half_up(jaccard_similarity(source_words, target_words) * 100)


def suggest_transforms(source: SourceFieldAnalysis, target: EntityField) -> List[TransformConfig]:
    """Propose a transform chain for loading a source field into a target field."""
    transforms: List[TransformConfig] = []
    if source.detected_type != "string":
        return transforms

    if target.type in ("number", "money"):
        transforms.append(
            TransformConfig(TransformType.CONVERT, ConvertOptions(ValueKind.STRING, ValueKind.NUMBER))
        )

    elif target.type == "boolean":
        samples = {str(v).lower() for v in source.sample_values}
        if samples & BOOLEAN_HINTS:
            transforms.append(
                TransformConfig(
                    TransformType.MAP,
                    MapOptions(values=dict(BOOLEAN_TOKENS), default=False, case_sensitive=False),
                )
            )
        else:
            transforms.append(
                TransformConfig(TransformType.CONVERT, ConvertOptions(ValueKind.STRING, ValueKind.BOOLEAN))
            )

    elif target.type == "date":
        transforms.append(
            TransformConfig(TransformType.CONVERT, ConvertOptions(ValueKind.STRING, ValueKind.DATE))
        )

    elif target.type == "string":
        transforms.append(TransformConfig(TransformType.TRIM))

    elif target.type == "localized-string":
        transforms.append(TransformConfig(TransformType.TEMPLATE, TemplateOptions("${value}")))

    return transforms
