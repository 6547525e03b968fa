"""Field mapping, suggestion and mapping result models."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from recordmap.builder.path_accessor import MISSING
from recordmap.transformer.config import TransformConfig

HIGH_CONFIDENCE_SCORE = 70
MEDIUM_CONFIDENCE_SCORE = 40


def score_to_confidence(score: int) -> str:
    """Bucket a 0-100 score into low / medium / high."""
    if score >= HIGH_CONFIDENCE_SCORE:
        return "high"
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return "medium"
    return "low"


def min_score_for(confidence: Optional[str]) -> int:
    """Lowest score that still reaches the given confidence level."""
    if confidence == "high":
        return HIGH_CONFIDENCE_SCORE
    if confidence == "medium":
        return MEDIUM_CONFIDENCE_SCORE
    return 0


@dataclass
class FieldMapping:
    """Maps a source path to a target path through an ordered transform chain"""

    source: str  # Source path (e.g., "customer.email", "items[0].sku")
    target: str  # Target path in the entity
    transforms: List[TransformConfig] = field(default_factory=list)
    required: bool = False
    default_value: Any = MISSING  # Substituted when the source value is empty
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldMapping":
        return cls(
            source=data["source"],
            target=data["target"],
            transforms=[TransformConfig.from_dict(t) for t in data.get("transforms") or []],
            required=bool(data.get("required", False)),
            default_value=data["defaultValue"] if "defaultValue" in data else MISSING,
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result: Dict[str, Any] = {"source": self.source, "target": self.target}
        if self.transforms:
            result["transforms"] = [t.to_dict() for t in self.transforms]
        if self.required:
            result["required"] = True
        if self.default_value is not MISSING:
            result["defaultValue"] = self.default_value
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class MappingSuggestion:
    """Ranked source -> target proposal produced by the auto mapper"""

    source: str
    target: str
    score: int
    confidence: str
    reason: str
    suggested_transforms: Optional[List[TransformConfig]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result: Dict[str, Any] = {
            "source": self.source,
            "target": self.target,
            "score": self.score,
            "confidence": self.confidence,
            "reason": self.reason,
        }
        if self.suggested_transforms:
            result["suggestedTransforms"] = [t.to_dict() for t in self.suggested_transforms]
        return result


@dataclass
class FieldError:
    """Failure while mapping one field of one record"""

    field: str
    message: str
    value: Any = MISSING

    def to_dict(self) -> Dict[str, Any]:
        result = {"field": self.field, "message": self.message}
        if self.value is not MISSING:
            result["value"] = self.value
        return result


@dataclass
class MappingResult:
    """Outcome of mapping a single record"""

    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "data": self.data,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


@dataclass
class BatchSummary:
    total: int = 0
    success: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "success": self.success, "failed": self.failed}


@dataclass
class BatchResult:
    """Results of mapping many records, one MappingResult per input record"""

    results: List[MappingResult] = field(default_factory=list)
    summary: BatchSummary = field(default_factory=BatchSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }
