"""JSON exporter for mapping documents, lookup tables and mapping results."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from recordmap.mapper.mapping import BatchResult, FieldMapping, MappingSuggestion
from recordmap.transformer.registry import LookupTable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class JsonExporter:
    """Read and write mapping artifacts as JSON."""

    def export_mappings(
        self,
        output_file: PathLike,
        entity: str,
        mappings: List[FieldMapping],
        suggestions: Optional[List[MappingSuggestion]] = None,
    ) -> None:
        """Export a mapping document to a JSON file."""
        data: Dict[str, Any] = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "entity": entity,
                "total_mappings": len(mappings),
            },
            "entity": entity,
            "mappings": [m.to_dict() for m in mappings],
        }
        if suggestions is not None:
            data["suggestions"] = [s.to_dict() for s in suggestions]

        self._write(output_file, data)
        logger.info(f"Exported {len(mappings)} mappings for {entity} to {output_file}")

    def load_mappings(self, input_file: PathLike) -> Tuple[Optional[str], List[FieldMapping]]:
        """
        Load a mapping document

        Accepts the exported document or a bare list of mappings.

        Returns:
            Tuple of (entity or None, mappings)
        """
        with open(input_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            return None, [FieldMapping.from_dict(m) for m in data]

        return data.get("entity"), [FieldMapping.from_dict(m) for m in data.get("mappings", [])]

    def export_results(self, output_file: PathLike, batch: BatchResult) -> None:
        """Export mapped records with their errors and the batch summary."""
        data = {
            "metadata": {"created_at": datetime.now().isoformat()},
            **batch.to_dict(),
        }
        self._write(output_file, data)
        logger.info(f"Exported {batch.summary.total} mapping results to {output_file}")

    def load_lookup_table(self, input_file: PathLike, name: str, key_field: str = "id") -> LookupTable:
        """Load a JSON array of rows (or {"data": [...]}) as a lookup table."""
        with open(input_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        rows = data.get("data", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise ValueError(f"Lookup table file {input_file} holds no rows")

        return LookupTable(name=name, data=rows, key_field=key_field)

    @staticmethod
    def _write(output_file: PathLike, data: Any) -> None:
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
