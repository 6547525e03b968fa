"""
Source Introspection Module

Profiles sample records field by field:
- Detected type (or mixed / null)
- Sample values, null and unique ratios
- String length and numeric range statistics
"""

from .profiler import SourceFieldProfiler, analyze_source_fields

__all__ = [
    "SourceFieldProfiler",
    "analyze_source_fields",
]
