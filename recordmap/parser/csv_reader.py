"""CSV record reader with auto-delimiter detection."""
import csv
import logging
from io import StringIO
from typing import Any, Dict, List, Optional

from recordmap.exceptions import RecordParseError
from recordmap.parser.base import RecordReader

logger = logging.getLogger(__name__)


class CsvReader(RecordReader):
    """Read CSV content into records keyed by the header row."""

    # Common delimiters
    DELIMITERS = [",", ";", "|", "\t"]

    def __init__(self, delimiter: Optional[str] = None):
        """
        Initialize CsvReader

        Args:
            delimiter: Field delimiter; detected from the content when omitted
        """
        self.delimiter = delimiter

    def read(self, content: str) -> List[Dict[str, Any]]:
        """
        Parse CSV content. Values stay strings; blank lines are skipped.

        Raises:
            RecordParseError: If the content is not valid CSV
        """
        if content.startswith("\ufeff"):
            content = content[1:]

        delimiter = self.delimiter or self._detect_delimiter(content)

        try:
            rows = [row for row in csv.reader(StringIO(content), delimiter=delimiter, strict=True)]
        except csv.Error as e:
            raise RecordParseError(f"Invalid CSV: {e}")

        rows = [row for row in rows if any(cell.strip() for cell in row)]
        if not rows:
            return []

        headers = [header.strip() or f"column_{index}" for index, header in enumerate(rows[0])]
        records = []

        for row in rows[1:]:
            record = {}
            for index, header in enumerate(headers):
                record[header] = row[index] if index < len(row) else ""
            records.append(record)

        logger.debug(f"Read {len(records)} CSV records (delimiter {delimiter!r})")
        return records

    def _detect_delimiter(self, content: str) -> str:
        """
        Auto-detect CSV delimiter from the header line.

        Returns:
            str: Most likely delimiter
        """
        # Sample the first line only, data rows may contain any punctuation
        sample = content[:1000].split("\n", 1)[0]

        counts = {delimiter: sample.count(delimiter) for delimiter in self.DELIMITERS}
        best_delimiter = max(counts, key=counts.get)

        # Fallback to comma if no clear winner
        if counts[best_delimiter] == 0:
            return ","

        return best_delimiter
