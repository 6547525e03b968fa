"""Mapping validation against a target entity schema."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from recordmap.mapper.mapping import FieldMapping
from recordmap.schema.provider import SchemaProvider

logger = logging.getLogger(__name__)

CUSTOM_FIELDS_ROOT = "customFields"


@dataclass
class ValidationReport:
    """Result of validating a mapping set."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


class MappingValidator:
    """Validates field mappings against a schema."""

    def __init__(self, schema_provider: SchemaProvider):
        self.schema_provider = schema_provider

    def validate(self, mappings: List[FieldMapping], target_entity: str) -> ValidationReport:
        """Validate mappings."""
        schema = self.schema_provider.get_field_schema(target_entity)
        if schema is None:
            return ValidationReport(valid=False, errors=[f"Unknown entity: {target_entity}"])

        errors: List[str] = []
        warnings: List[str] = []
        mapped_targets: Set[str] = set()
        fields = {f.key: f for f in schema.fields}

        for mapping in mappings:
            # Check for duplicate targets
            if mapping.target in mapped_targets:
                errors.append(f"Duplicate mapping to target: {mapping.target}")
            mapped_targets.add(mapping.target)

            root = mapping.target.split(".")[0]
            if root != CUSTOM_FIELDS_ROOT and root not in fields:
                errors.append(f"Unknown target field: {mapping.target}")

            target_field = fields.get(root)
            if target_field is not None and target_field.readonly:
                errors.append(f"Cannot map to readonly field: {mapping.target}")

        # Check for required fields nobody maps to
        for entity_field in schema.fields:
            if entity_field.required and entity_field.key not in mapped_targets:
                warnings.append(f"Required field not mapped: {entity_field.key}")

        if errors:
            logger.debug(f"Mappings for {target_entity} have {len(errors)} errors")

        return ValidationReport(valid=not errors, errors=errors, warnings=warnings)
