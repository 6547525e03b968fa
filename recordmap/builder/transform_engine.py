"""
Transform Engine - Applies field mappings to source records

For every mapping of a record:
- Read the source path (defaultValue substituted for empty values)
- Report required fields that are still empty
- Run the transform chain, isolating errors per transform step
- Write the result to the target path

One failing field never aborts the rest of the record or the batch.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from recordmap.builder.path_accessor import MISSING, get_value, is_empty, set_value
from recordmap.mapper.mapping import BatchResult, BatchSummary, FieldError, FieldMapping, MappingResult
from recordmap.transformer.config import OPTIONS_TYPES, TransformConfig
from recordmap.transformer.context import ExpressionEvaluator, TransformContext
from recordmap.transformer.registry import (
    DEFAULT_MAX_LOOKUP_TABLES,
    LookupTable,
    LookupTableRegistry,
    TransformerRegistry,
)

logger = logging.getLogger(__name__)


class TransformEngine:
    """Maps source records onto target records"""

    def __init__(
        self,
        evaluator: Optional[ExpressionEvaluator] = None,
        max_lookup_tables: int = DEFAULT_MAX_LOOKUP_TABLES,
    ):
        """
        Initialize TransformEngine

        Args:
            evaluator: Sandbox used by `custom` transforms (evaluate(expression, record))
            max_lookup_tables: Capacity of the lookup table registry
        """
        self.evaluator = evaluator
        self.lookup_tables = LookupTableRegistry(max_lookup_tables)
        self.transformers = TransformerRegistry()

    def register_lookup_table(self, table: LookupTable) -> None:
        """
        Register (or replace) a lookup table

        Raises:
            RegistryCapacityError: If the registry is full and the name is new
        """
        self.lookup_tables.register(table)

    def clear_lookup_tables(self) -> None:
        self.lookup_tables.clear()

    def map_record(self, source: Dict[str, Any], mappings: List[FieldMapping]) -> MappingResult:
        """
        Map a single record

        Args:
            source: Source record
            mappings: Field mappings, applied in order

        Returns:
            MappingResult with the built record, per-field errors and warnings
        """
        result = MappingResult()
        context = TransformContext(
            record=source,
            lookup=self.lookup_tables.get,
            evaluator=self.evaluator,
            warnings=result.warnings,
        )

        for mapping in mappings:
            try:
                self._map_field(source, mapping, context, result)
            except Exception as e:
                logger.debug(f"Mapping {mapping.source} -> {mapping.target} failed: {e}")
                result.errors.append(FieldError(field=mapping.source, message=str(e)))

        return result

    def map_records(self, sources: List[Dict[str, Any]], mappings: List[FieldMapping]) -> BatchResult:
        """Map many records; every input record gets a result"""
        results = [self.map_record(source, mappings) for source in sources]
        success = sum(1 for r in results if r.success)
        summary = BatchSummary(total=len(sources), success=success, failed=len(sources) - success)

        logger.info(
            f"Mapped {summary.total} records: {summary.success} succeeded, {summary.failed} failed"
        )
        return BatchResult(results=results, summary=summary)

    def _map_field(
        self,
        source: Dict[str, Any],
        mapping: FieldMapping,
        context: TransformContext,
        result: MappingResult,
    ) -> None:
        value = get_value(source, mapping.source)

        if is_empty(value) and mapping.default_value is not MISSING:
            value = mapping.default_value

        if mapping.required and is_empty(value):
            logger.debug(f"Required field '{mapping.source}' is empty")
            result.errors.append(
                FieldError(field=mapping.source, message=f'Required field "{mapping.source}" is empty')
            )
            return

        if mapping.transforms and not is_empty(value):
            for transform in mapping.transforms:
                try:
                    value = self._apply_transform(value, transform, context)
                except Exception as e:
                    logger.debug(f"Transform '{transform.type.value}' failed on {mapping.source}: {e}")
                    result.errors.append(
                        FieldError(
                            field=mapping.source,
                            message=f"Transform error: {e}",
                            value=None if value is MISSING else value,
                        )
                    )

        if not is_empty(value) or not mapping.required:
            if isinstance(value, (dict, list)):
                value = copy.deepcopy(value)
            set_value(result.data, mapping.target, value)

    def _apply_transform(self, value: Any, config: TransformConfig, context: TransformContext) -> Any:
        # A kind that needs options but was loaded without them is the identity
        if config.options is None and OPTIONS_TYPES[config.type] is not None:
            return value
        return self.transformers.transform(value, config, context)
