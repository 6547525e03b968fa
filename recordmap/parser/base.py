"""Abstract base class for record readers."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Union


class RecordReader(ABC):
    """Reads source content into a list of flat or nested records."""

    # Readers of binary formats receive bytes instead of text
    binary = False

    @abstractmethod
    def read(self, content: Union[str, bytes]) -> List[Dict[str, Any]]:
        """
        Read content and return records.

        Args:
            content: Raw file content

        Returns:
            List of records (dicts)

        Raises:
            RecordParseError: If the content is malformed
        """

    @staticmethod
    def detect_format(file_path: str) -> str:
        """Detect file format from extension."""
        return file_path.lower().rsplit(".", 1)[-1] if "." in file_path else ""
