"""Transformer and lookup table registries."""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from recordmap.exceptions import RegistryCapacityError
from recordmap.transformer.collection import apply_default, apply_lookup, apply_map
from recordmap.transformer.conditional import apply_conditional, apply_custom
from recordmap.transformer.config import TransformConfig, TransformType
from recordmap.transformer.context import TransformContext
from recordmap.transformer.conversion import apply_convert
from recordmap.transformer.date import apply_date
from recordmap.transformer.number import apply_math
from recordmap.transformer.string import (
    apply_concat,
    apply_extract,
    apply_join,
    apply_lowercase,
    apply_replace,
    apply_split,
    apply_template,
    apply_trim,
    apply_uppercase,
)

logger = logging.getLogger(__name__)

Transformer = Callable[[Any, Any, TransformContext], Any]

DEFAULT_MAX_LOOKUP_TABLES = 200


class TransformerRegistry:
    """Registry of available transformers."""

    def __init__(self):
        """Initialize registry."""
        self.transformers: Dict[TransformType, Transformer] = {
            TransformType.TEMPLATE: apply_template,
            TransformType.LOOKUP: apply_lookup,
            TransformType.CONVERT: apply_convert,
            TransformType.SPLIT: apply_split,
            TransformType.JOIN: apply_join,
            TransformType.MAP: apply_map,
            TransformType.DATE: apply_date,
            TransformType.TRIM: apply_trim,
            TransformType.LOWERCASE: apply_lowercase,
            TransformType.UPPERCASE: apply_uppercase,
            TransformType.REPLACE: apply_replace,
            TransformType.EXTRACT: apply_extract,
            TransformType.DEFAULT: apply_default,
            TransformType.CONCAT: apply_concat,
            TransformType.MATH: apply_math,
            TransformType.CONDITIONAL: apply_conditional,
            TransformType.CUSTOM: apply_custom,
        }

        missing = set(TransformType) - set(self.transformers)
        if missing:
            raise RuntimeError(f"No transformer registered for: {sorted(m.value for m in missing)}")

    def get(self, kind: TransformType) -> Transformer:
        """Get transformer by kind."""
        return self.transformers[TransformType(kind)]

    def transform(self, value: Any, config: TransformConfig, context: TransformContext) -> Any:
        """Apply one transform step."""
        return self.get(config.type)(value, config.options, context)


@dataclass
class LookupTable:
    """Named reference table used by the lookup transform"""

    name: str
    data: List[Dict[str, Any]] = field(default_factory=list)
    key_field: str = "id"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LookupTable":
        return cls(
            name=data["name"],
            data=list(data.get("data", [])),
            key_field=data.get("keyField", "id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "data": list(self.data), "keyField": self.key_field}


class LookupTableRegistry:
    """
    Bounded registry of lookup tables

    Registering an existing name replaces the table. A new name beyond
    `max_tables` is rejected.
    """

    def __init__(self, max_tables: int = DEFAULT_MAX_LOOKUP_TABLES):
        self.max_tables = max_tables
        self._tables: "OrderedDict[str, LookupTable]" = OrderedDict()

    def register(self, table: LookupTable) -> None:
        if table.name not in self._tables and len(self._tables) >= self.max_tables:
            raise RegistryCapacityError(
                f"Cannot register lookup table '{table.name}': limit of {self.max_tables} reached"
            )
        self._tables[table.name] = table
        logger.debug(f"Registered lookup table '{table.name}' ({len(table.data)} rows)")

    def get(self, name: str) -> Optional[LookupTable]:
        return self._tables.get(name)

    def clear(self) -> None:
        self._tables.clear()

    def names(self) -> List[str]:
        return list(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: str) -> bool:
        return name in self._tables
