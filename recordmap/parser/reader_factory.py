"""Factory for creating the record reader matching a file type."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from recordmap.exceptions import RecordParseError
from recordmap.parser.base import RecordReader
from recordmap.parser.csv_reader import CsvReader
from recordmap.parser.excel_reader import ExcelReader
from recordmap.parser.json_reader import JsonReader
from recordmap.parser.sql_reader import SqlInsertReader

logger = logging.getLogger(__name__)


class RecordReaderFactory:
    """Factory for creating record readers."""

    # Map extensions to reader types
    READERS = {
        "csv": "csv",
        "tsv": "csv",
        "txt": "csv",
        "json": "json",
        "jsonl": "json",
        "ndjson": "json",
        "xlsx": "excel",
        "sql": "sql",
        "dump": "sql",
    }

    @staticmethod
    def create_reader(file_path: Union[str, Path]) -> RecordReader:
        """
        Create reader based on file extension.

        Args:
            file_path: Path to source file

        Returns:
            RecordReader: Appropriate reader instance

        Raises:
            ValueError: If file format is not supported
        """
        ext = RecordReader.detect_format(str(file_path))
        reader_type = RecordReaderFactory.READERS.get(ext)

        if reader_type == "csv":
            return CsvReader(delimiter="\t" if ext == "tsv" else None)
        elif reader_type == "json":
            return JsonReader()
        elif reader_type == "excel":
            return ExcelReader()
        elif reader_type == "sql":
            return SqlInsertReader()

        raise ValueError(f"Unsupported source format: {ext or file_path}")

    @staticmethod
    def read_file(file_path: Union[str, Path], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Convenience method to read a source file in one call.

        Args:
            file_path: Path to source file
            limit: Keep only the first N records

        Returns:
            List of records
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        reader = RecordReaderFactory.create_reader(file_path)

        if reader.binary:
            content = file_path.read_bytes()
        else:
            try:
                content = file_path.read_text(encoding="utf-8-sig")
            except UnicodeDecodeError as e:
                raise RecordParseError(f"{file_path} is not UTF-8 text: {e}")

        records = reader.read(content)
        if limit is not None:
            records = records[:limit]

        logger.info(f"Read {len(records)} records from {file_path.name}")
        return records
