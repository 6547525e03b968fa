"""
AutoMapper configuration

Configuration is a plain value: `merge` returns a new config with
weights and custom aliases merged per key and exclude_fields replaced.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from recordmap.mapper.strategies import MAX_CUSTOM_ALIASES

WEIGHT_SUM_TOLERANCE = 0.01


@dataclass(frozen=True)
class MatchWeights:
    """Weights of the name / type / description scores"""

    name_similarity: float = 0.6
    type_compatibility: float = 0.35
    description_match: float = 0.05

    @property
    def total(self) -> float:
        return self.name_similarity + self.type_compatibility + self.description_match

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["MatchWeights"] = None) -> "MatchWeights":
        base = base or cls()
        return cls(
            name_similarity=data.get("nameSimilarity", base.name_similarity),
            type_compatibility=data.get("typeCompatibility", base.type_compatibility),
            description_match=data.get("descriptionMatch", base.description_match),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "nameSimilarity": self.name_similarity,
            "typeCompatibility": self.type_compatibility,
            "descriptionMatch": self.description_match,
        }


@dataclass(frozen=True)
class AutoMapperConfig:
    """Settings of the auto mapper scoring engine"""

    confidence_threshold: float = 0.5
    enable_fuzzy_matching: bool = True
    enable_type_inference: bool = True
    case_sensitive: bool = False
    custom_aliases: Dict[str, List[str]] = field(default_factory=dict)
    exclude_fields: List[str] = field(default_factory=list)
    weights: MatchWeights = field(default_factory=MatchWeights)
    enable_part_matching: bool = False

    def merge(self, override: Dict[str, Any]) -> "AutoMapperConfig":
        """
        Return a copy updated from a camelCase override document

        Weights and customAliases are merged key by key; excludeFields
        replaces the current list.
        """
        changes: Dict[str, Any] = {}

        if "confidenceThreshold" in override:
            changes["confidence_threshold"] = override["confidenceThreshold"]
        if "enableFuzzyMatching" in override:
            changes["enable_fuzzy_matching"] = bool(override["enableFuzzyMatching"])
        if "enableTypeInference" in override:
            changes["enable_type_inference"] = bool(override["enableTypeInference"])
        if "caseSensitive" in override:
            changes["case_sensitive"] = bool(override["caseSensitive"])
        if "enablePartMatching" in override:
            changes["enable_part_matching"] = bool(override["enablePartMatching"])
        if override.get("weights"):
            changes["weights"] = MatchWeights.from_dict(override["weights"], self.weights)
        if override.get("customAliases"):
            aliases = {k: list(v) for k, v in self.custom_aliases.items()}
            aliases.update({k: list(v) for k, v in override["customAliases"].items()})
            changes["custom_aliases"] = aliases
        if override.get("excludeFields") is not None:
            changes["exclude_fields"] = list(override["excludeFields"])

        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AutoMapperConfig":
        return DEFAULT_AUTO_MAPPER_CONFIG.merge(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "confidenceThreshold": self.confidence_threshold,
            "enableFuzzyMatching": self.enable_fuzzy_matching,
            "enableTypeInference": self.enable_type_inference,
            "caseSensitive": self.case_sensitive,
            "customAliases": {k: list(v) for k, v in self.custom_aliases.items()},
            "excludeFields": list(self.exclude_fields),
            "weights": self.weights.to_dict(),
            "enablePartMatching": self.enable_part_matching,
        }


DEFAULT_AUTO_MAPPER_CONFIG = AutoMapperConfig()


@dataclass
class ConfigValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_auto_mapper_config(
    config: Dict[str, Any], base_weights: Optional[MatchWeights] = None
) -> ConfigValidation:
    """
    Check a camelCase config document without raising

    Partial weight updates are summed on top of base_weights (defaults when omitted).

    Returns:
        ConfigValidation with errors (invalid values) and warnings (weights not summing to 1.0)
    """
    errors: List[str] = []
    warnings: List[str] = []

    if "confidenceThreshold" in config:
        threshold = config["confidenceThreshold"]
        if not _is_number(threshold) or not 0 <= threshold <= 1:
            errors.append("confidenceThreshold must be a number between 0 and 1")

    weights = config.get("weights")
    if weights is not None:
        if not isinstance(weights, dict):
            errors.append("weights must be an object")
        else:
            invalid = [
                key
                for key in ("nameSimilarity", "typeCompatibility", "descriptionMatch")
                if key in weights and (not _is_number(weights[key]) or not 0 <= weights[key] <= 1)
            ]
            errors.extend(f"weights.{key} must be a number between 0 and 1" for key in invalid)

            if not invalid:
                total = MatchWeights.from_dict(weights, base_weights).total
                if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
                    warnings.append(f"Weights sum to {total:.2f}, expected 1.0")

    aliases = config.get("customAliases")
    if aliases is not None:
        if not isinstance(aliases, dict):
            errors.append("customAliases must be an object mapping field names to alias lists")
        else:
            count = 0
            for canonical, values in aliases.items():
                if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                    errors.append(f"customAliases.{canonical} must be a list of strings")
                    continue
                count += len(values)
            if count > MAX_CUSTOM_ALIASES:
                errors.append(f"customAliases has {count} entries, limit is {MAX_CUSTOM_ALIASES}")

    exclude = config.get("excludeFields")
    if exclude is not None and not isinstance(exclude, list):
        errors.append("excludeFields must be a list")

    return ConfigValidation(valid=not errors, errors=errors, warnings=warnings)
