"""
Record Readers Module

Reads source files into records:
- CSV / TSV with delimiter detection
- JSON documents and JSON lines
- Excel worksheets (openpyxl)
- SQL dumps (INSERT statements, sqlparse)
"""

from .reader_factory import RecordReaderFactory

__all__ = ["RecordReaderFactory"]
