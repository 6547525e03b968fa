"""Models describing source field profiles and target entity schemas."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# detectedType values of a profiled source field
SOURCE_FIELD_TYPES = ("string", "number", "boolean", "date", "array", "object", "null", "mixed")


@dataclass
class SourceFieldAnalysis:
    """Statistical profile of one source field across a batch of records."""

    name: str
    detected_type: str = "null"
    sample_values: List[Any] = field(default_factory=list)  # At most 5 non-empty samples
    null_ratio: float = 0.0
    unique_ratio: float = 0.0
    avg_length: Optional[float] = None  # Over string values only
    min_value: Optional[float] = None  # Over numeric values only
    max_value: Optional[float] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceFieldAnalysis":
        return cls(
            name=data["name"],
            detected_type=data.get("detectedType", "null"),
            sample_values=list(data.get("sampleValues", [])),
            null_ratio=data.get("nullRatio", 0.0),
            unique_ratio=data.get("uniqueRatio", 0.0),
            avg_length=data.get("avgLength"),
            min_value=data.get("minValue"),
            max_value=data.get("maxValue"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {
            "name": self.name,
            "detectedType": self.detected_type,
            "sampleValues": self.sample_values,
            "nullRatio": self.null_ratio,
            "uniqueRatio": self.unique_ratio,
        }
        if self.avg_length is not None:
            result["avgLength"] = self.avg_length
        if self.min_value is not None:
            result["minValue"] = self.min_value
            result["maxValue"] = self.max_value
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class EntityField:
    """One field of a target entity."""

    key: str
    type: str  # string, localized-string, number, money, boolean, date, id, enum, relation, asset, json
    required: bool = False
    readonly: bool = False
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityField":
        return cls(
            key=data["key"],
            type=data.get("type", "string"),
            required=bool(data.get("required", False)),
            readonly=bool(data.get("readonly", False)),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"key": self.key, "type": self.type}
        if self.required:
            result["required"] = True
        if self.readonly:
            result["readonly"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class EntityFieldSchema:
    """Ordered field list of a target entity."""

    entity: str
    fields: List[EntityField] = field(default_factory=list)

    def get_field(self, key: str) -> Optional[EntityField]:
        """Return field by key."""
        for entity_field in self.fields:
            if entity_field.key == key:
                return entity_field
        return None

    def has_field(self, key: str) -> bool:
        return self.get_field(key) is not None

    @property
    def required_fields(self) -> List[EntityField]:
        return [f for f in self.fields if f.required]

    @classmethod
    def from_dict(cls, entity: str, data: Dict[str, Any]) -> "EntityFieldSchema":
        return cls(entity=entity, fields=[EntityField.from_dict(f) for f in data.get("fields", [])])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"entity": self.entity, "fields": [f.to_dict() for f in self.fields]}
