"""Excel record reader."""
import logging
from io import BytesIO
from typing import Any, Dict, List, Optional

from openpyxl import load_workbook

from recordmap.exceptions import RecordParseError
from recordmap.parser.base import RecordReader

logger = logging.getLogger(__name__)


class ExcelReader(RecordReader):
    """Read one worksheet (header row + data rows) into records."""

    binary = True

    def __init__(self, sheet_name: Optional[str] = None):
        """
        Initialize ExcelReader

        Args:
            sheet_name: Worksheet to read; the first sheet when omitted
        """
        self.sheet_name = sheet_name

    def read(self, content: bytes) -> List[Dict[str, Any]]:
        """
        Parse Excel content and return records

        Raises:
            RecordParseError: If the workbook or sheet cannot be read
        """
        try:
            wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise RecordParseError(f"Failed to parse Excel file: {e}")

        try:
            if self.sheet_name:
                if self.sheet_name not in wb.sheetnames:
                    raise RecordParseError(f"Sheet not found: {self.sheet_name}")
                ws = wb[self.sheet_name]
            else:
                ws = wb[wb.sheetnames[0]]

            rows = ws.iter_rows(values_only=True)
            header_row = next(rows, None)
            if header_row is None:
                return []

            # Extract headers from first row
            headers = [
                str(value).strip() if value is not None else f"Column_{index}"
                for index, value in enumerate(header_row)
            ]

            records = []
            for row in rows:
                # Skip fully empty rows
                if all(value is None or value == "" for value in row):
                    continue
                records.append({header: row[index] if index < len(row) else None for index, header in enumerate(headers)})
        finally:
            wb.close()

        logger.debug(f"Read {len(records)} records from sheet {ws.title}")
        return records
