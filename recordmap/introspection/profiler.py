"""
Source Field Profiler - Builds per-field statistics from sample records

For every field seen in any record:
- Type histogram (via detect_value_type) -> detected type or "mixed"
- Up to 5 sample values
- Null ratio and unique ratio (unique set capped at 1000 values)
- Average length of string values, min/max of numeric values
"""

import json
import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Hashable, List, Set

from recordmap.builder.path_accessor import is_empty
from recordmap.mapper.similarity import detect_value_type
from recordmap.schema.models import SourceFieldAnalysis

logger = logging.getLogger(__name__)

SAMPLE_VALUES_LIMIT = 5
MAX_UNIQUE_VALUES = 1000


@dataclass
class _FieldStats:
    types: Counter = field(default_factory=Counter)
    samples: List[Any] = field(default_factory=list)
    null_count: int = 0
    unique_values: Set[Hashable] = field(default_factory=set)
    total_length: int = 0
    length_count: int = 0
    numeric_values: List[float] = field(default_factory=list)


def _unique_key(value: Any, value_type: str) -> Hashable:
    if isinstance(value, (dict, list, tuple)):
        return value_type, json.dumps(value, sort_keys=True, default=str)
    return value_type, value


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return not math.isnan(value)
    return isinstance(value, (int, Decimal))


class SourceFieldProfiler:
    """Analyzes sample records to describe their fields"""

    def __init__(self, sample_limit: int = SAMPLE_VALUES_LIMIT, max_unique_values: int = MAX_UNIQUE_VALUES):
        self.sample_limit = sample_limit
        self.max_unique_values = max_unique_values

    def analyze(self, records: List[Dict[str, Any]]) -> List[SourceFieldAnalysis]:
        """
        Profile every top-level field across all records

        Args:
            records: Sample records

        Returns:
            One SourceFieldAnalysis per field, in first-seen order
        """
        if not records:
            return []

        stats: Dict[str, _FieldStats] = {}
        for record in records:
            if isinstance(record, dict):
                for key in record:
                    if key not in stats:
                        stats[key] = _FieldStats()

        for record in records:
            source = record if isinstance(record, dict) else {}
            for name, field_stats in stats.items():
                self._observe(field_stats, source.get(name))

        total = len(records)
        results = [self._summarize(name, field_stats, total) for name, field_stats in stats.items()]

        logger.debug(f"Profiled {len(results)} fields over {total} records")
        return results

    def _observe(self, stats: _FieldStats, value: Any) -> None:
        if is_empty(value):
            stats.null_count += 1
            return

        value_type = detect_value_type(value)
        stats.types[value_type] += 1

        if len(stats.samples) < self.sample_limit:
            stats.samples.append(value)

        # Once full the set stops growing, so unique_ratio can undercount
        if len(stats.unique_values) < self.max_unique_values:
            stats.unique_values.add(_unique_key(value, value_type))

        if isinstance(value, str):
            stats.total_length += len(value)
            stats.length_count += 1

        if _is_numeric(value):
            stats.numeric_values.append(value)

    @staticmethod
    def _summarize(name: str, stats: _FieldStats, total: int) -> SourceFieldAnalysis:
        if not stats.types:
            detected_type = "null"
        elif len(stats.types) == 1:
            detected_type = next(iter(stats.types))
        else:
            detected_type = "mixed"

        analysis = SourceFieldAnalysis(
            name=name,
            detected_type=detected_type,
            sample_values=list(stats.samples),
            null_ratio=stats.null_count / total,
            unique_ratio=len(stats.unique_values) / max(1, total - stats.null_count),
        )

        if stats.length_count:
            analysis.avg_length = stats.total_length / stats.length_count

        if stats.numeric_values:
            analysis.min_value = min(stats.numeric_values)
            analysis.max_value = max(stats.numeric_values)

        return analysis


def analyze_source_fields(records: List[Dict[str, Any]]) -> List[SourceFieldAnalysis]:
    """Profile records with the default limits."""
    return SourceFieldProfiler().analyze(records)
