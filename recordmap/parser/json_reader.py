"""JSON and JSON-lines record reader."""
import json
import logging
from typing import Any, Dict, List

from recordmap.exceptions import RecordParseError
from recordmap.parser.base import RecordReader

logger = logging.getLogger(__name__)


class JsonReader(RecordReader):
    """
    Read JSON content into records

    Accepts:
    - An array of objects
    - An object wrapping the array under records / data / items / rows
    - A single object (one record)
    - JSON lines (one object per line)
    """

    WRAPPER_KEYS = ("records", "data", "items", "rows")

    def read(self, content: str) -> List[Dict[str, Any]]:
        text = content.strip()
        if not text:
            return []

        try:
            document = json.loads(text)
        except json.JSONDecodeError:
            return self._read_lines(text)

        return self._records_from(document)

    def _records_from(self, document: Any) -> List[Dict[str, Any]]:
        if isinstance(document, list):
            return self._check_objects(document)

        if isinstance(document, dict):
            for key in self.WRAPPER_KEYS:
                if isinstance(document.get(key), list):
                    return self._check_objects(document[key])
            return [document]

        raise RecordParseError(f"JSON document of type {type(document).__name__} holds no records")

    def _read_lines(self, text: str) -> List[Dict[str, Any]]:
        records = []
        for line_number, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise RecordParseError(f"Invalid JSON on line {line_number}: {e.msg}")

        logger.debug(f"Read {len(records)} JSON lines records")
        return self._check_objects(records)

    @staticmethod
    def _check_objects(items: List[Any]) -> List[Dict[str, Any]]:
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise RecordParseError(f"Record {index} is a {type(item).__name__}, expected an object")
        return items
