"""
AutoMapper - Suggests source -> target field mappings

Scoring per (source field, target field) pair:
- name score from the strategy chain (exact, normalized, alias, partial, fuzzy)
- type compatibility score (detected source type vs target type)
- description score (word set Jaccard similarity)

Source fields are matched longest name first and each target field is
claimed at most once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from recordmap.introspection.profiler import SourceFieldProfiler
from recordmap.mapper.config import (
    DEFAULT_AUTO_MAPPER_CONFIG,
    AutoMapperConfig,
    ConfigValidation,
    validate_auto_mapper_config,
)
from recordmap.mapper.mapping import FieldMapping, MappingSuggestion, min_score_for, score_to_confidence
from recordmap.mapper.similarity import (
    calculate_description_score,
    calculate_type_score,
    normalize_field_name,
    round_half_up,
    suggest_transforms,
)
from recordmap.mapper.strategies import MatchStrategy, NamePair, build_strategy_chain, score_name
from recordmap.schema.models import EntityFieldSchema, SourceFieldAnalysis
from recordmap.schema.provider import SchemaProvider
from recordmap.validator.mapping_validator import MappingValidator, ValidationReport

logger = logging.getLogger(__name__)

CUSTOM_FIELDS_KEY = "customFields"
CUSTOM_FIELD_FALLBACK_SCORE = 20

ConfigOverride = Union[AutoMapperConfig, Dict[str, Any]]


@dataclass
class SuggestOptions:
    min_confidence: Optional[str] = None  # "low", "medium" or "high"
    include_custom_fields: bool = True


def _chain_for(config: AutoMapperConfig) -> List[MatchStrategy]:
    return build_strategy_chain(
        custom_aliases=config.custom_aliases,
        case_sensitive=config.case_sensitive,
        enable_fuzzy_matching=config.enable_fuzzy_matching,
        enable_part_matching=config.enable_part_matching,
    )


class AutoMapper:
    """Auto-map source fields to target entity fields using weighted heuristics."""

    def __init__(self, schema_provider: SchemaProvider, config: Optional[AutoMapperConfig] = None):
        """
        Initialize AutoMapper

        Args:
            schema_provider: Resolves target entity names to field schemas
            config: Initial configuration (defaults when omitted)
        """
        self.schema_provider = schema_provider
        self.profiler = SourceFieldProfiler()
        self.validator = MappingValidator(schema_provider)
        self._config = config or DEFAULT_AUTO_MAPPER_CONFIG
        self._strategies = _chain_for(self._config)

    def get_config(self) -> AutoMapperConfig:
        return self._config

    def set_config(self, update: Dict[str, Any]) -> ConfigValidation:
        """
        Merge a camelCase config update into the current configuration

        An invalid update is rejected and the current configuration kept.

        Returns:
            Validation result of the update
        """
        validation = validate_auto_mapper_config(update, self._config.weights)
        for warning in validation.warnings:
            logger.warning(f"AutoMapper config: {warning}")

        if not validation.valid:
            for error in validation.errors:
                logger.error(f"AutoMapper config rejected: {error}")
            return validation

        self._config = self._config.merge(update)
        self._strategies = _chain_for(self._config)
        return validation

    def reset_config(self) -> None:
        self._config = DEFAULT_AUTO_MAPPER_CONFIG
        self._strategies = _chain_for(self._config)

    def analyze_source_fields(self, records: List[Dict[str, Any]]) -> List[SourceFieldAnalysis]:
        """Profile sample records (see SourceFieldProfiler)."""
        return self.profiler.analyze(records)

    def suggest_mappings(
        self,
        source_fields: List[SourceFieldAnalysis],
        target_entity: str,
        options: Optional[SuggestOptions] = None,
        config_override: Optional[ConfigOverride] = None,
    ) -> List[MappingSuggestion]:
        """
        Generate mapping suggestions for source fields

        Args:
            source_fields: Profiled source fields
            target_entity: Target entity name
            options: Minimum confidence and custom field fallback switch
            config_override: Config (or camelCase update) used for this call only

        Returns:
            Accepted suggestions, highest score first; [] for an unknown entity
        """
        options = options or SuggestOptions()
        schema = self.schema_provider.get_field_schema(target_entity)
        if schema is None:
            logger.info(f"No schema for entity {target_entity}, no suggestions")
            return []

        config, strategies = self._effective(config_override)

        min_score = max(round_half_up(config.confidence_threshold * 100), min_score_for(options.min_confidence))

        fold = (lambda name: name) if config.case_sensitive else (lambda name: name.lower())
        excluded = {fold(name) for name in config.exclude_fields}
        sources = [f for f in source_fields if fold(f.name) not in excluded]

        # Longer, more specific names pick their targets first
        sources.sort(key=lambda f: len(f.name), reverse=True)

        suggestions: List[MappingSuggestion] = []
        used_targets = set()

        for source in sources:
            candidates = self._find_matches(source, schema, options.include_custom_fields, config, strategies)
            for candidate in candidates:
                if candidate.score >= min_score and candidate.target not in used_targets:
                    suggestions.append(candidate)
                    used_targets.add(candidate.target)
                    break

        suggestions.sort(key=lambda s: s.score, reverse=True)
        logger.debug(
            f"Suggested {len(suggestions)} mappings for {target_entity} "
            f"from {len(source_fields)} source fields (min score {min_score})"
        )
        return suggestions

    def suggestions_to_mappings(self, suggestions: List[MappingSuggestion]) -> List[FieldMapping]:
        """Turn accepted suggestions into editable field mappings."""
        return [
            FieldMapping(
                source=s.source,
                target=s.target,
                transforms=list(s.suggested_transforms or []),
                required=False,
            )
            for s in suggestions
        ]

    def validate_mappings(self, mappings: List[FieldMapping], target_entity: str) -> ValidationReport:
        return self.validator.validate(mappings, target_entity)

    def _effective(self, override: Optional[ConfigOverride]):
        if override is None:
            return self._config, self._strategies
        if isinstance(override, AutoMapperConfig):
            config = override
        else:
            validation = validate_auto_mapper_config(override, self._config.weights)
            for warning in validation.warnings:
                logger.warning(f"AutoMapper override: {warning}")
            if not validation.valid:
                for error in validation.errors:
                    logger.error(f"AutoMapper override ignored: {error}")
                return self._config, self._strategies
            config = self._config.merge(override)
        return config, _chain_for(config)

    def _find_matches(
        self,
        source: SourceFieldAnalysis,
        schema: EntityFieldSchema,
        include_custom_fields: bool,
        config: AutoMapperConfig,
        strategies: List[MatchStrategy],
    ) -> List[MappingSuggestion]:
        """Score every writable target field for one source field."""
        matches: List[MappingSuggestion] = []

        source_cmp = source.name if config.case_sensitive else source.name.lower()
        source_norm = normalize_field_name(source.name)
        weights = config.weights

        for target in schema.fields:
            if target.readonly:
                continue

            pair = NamePair(
                source_name=source.name,
                source_cmp=source_cmp,
                source_norm=source_norm,
                target_key=target.key,
                target_cmp=target.key if config.case_sensitive else target.key.lower(),
                target_norm=normalize_field_name(target.key),
            )
            name_score = score_name(strategies, pair)

            if config.enable_type_inference:
                type_score = calculate_type_score(source.detected_type, target.type)
            else:
                type_score = 50

            description_score = calculate_description_score(source.description, target.description)

            weighted = round_half_up(
                name_score.score * weights.name_similarity
                + type_score * weights.type_compatibility
                + description_score * weights.description_match
            )

            if weighted <= 0 and name_score.score <= 0:
                continue

            score = min(100, max(0, weighted))
            reasons = []
            if name_score.reason:
                reasons.append(name_score.reason)
            if config.enable_type_inference:
                if type_score >= 80:
                    reasons.append("type compatible")
                elif type_score <= 30:
                    reasons.append("type mismatch")
            if description_score > 60:
                reasons.append("description match")

            suggestion = MappingSuggestion(
                source=source.name,
                target=target.key,
                score=score,
                confidence=score_to_confidence(score),
                reason=", ".join(reasons) or "No strong match",
            )

            if config.enable_type_inference:
                transforms = suggest_transforms(source, target)
                if transforms:
                    suggestion.suggested_transforms = transforms

            matches.append(suggestion)

        if include_custom_fields and schema.has_field(CUSTOM_FIELDS_KEY):
            matches.append(
                MappingSuggestion(
                    source=source.name,
                    target=f"{CUSTOM_FIELDS_KEY}.{source.name}",
                    score=CUSTOM_FIELD_FALLBACK_SCORE,
                    confidence=score_to_confidence(CUSTOM_FIELD_FALLBACK_SCORE),
                    reason="Custom field fallback",
                )
            )

        matches.sort(key=lambda m: m.score, reverse=True)
        return matches
