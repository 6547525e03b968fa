"""
Unit tests for AutoMapper configuration values

Tests:
- MatchWeights / AutoMapperConfig merge and serialization
- validate_auto_mapper_config errors and warnings
- Mapping model serialization
"""

import pytest

from recordmap.builder.path_accessor import MISSING
from recordmap.mapper.config import (
    DEFAULT_AUTO_MAPPER_CONFIG,
    AutoMapperConfig,
    MatchWeights,
    validate_auto_mapper_config,
)
from recordmap.mapper.mapping import FieldError, FieldMapping, min_score_for, score_to_confidence


# ============================================================================
# TEST: AutoMapperConfig
# ============================================================================


class TestAutoMapperConfigValue:
    """Tests for AutoMapperConfig"""

    def test_defaults(self):
        """Test default values"""
        config = AutoMapperConfig()
        assert config.confidence_threshold == 0.5
        assert config.enable_type_inference is True
        assert config.case_sensitive is False
        assert config.enable_part_matching is False
        assert config.weights == MatchWeights(0.6, 0.35, 0.05)

    def test_merge_weights_per_key(self):
        """Test weights merge key by key"""
        merged = DEFAULT_AUTO_MAPPER_CONFIG.merge({"weights": {"descriptionMatch": 0.1}})
        assert merged.weights == MatchWeights(0.6, 0.35, 0.1)

    def test_merge_aliases_per_key(self):
        """Test custom aliases merge per canonical key"""
        config = AutoMapperConfig(custom_aliases={"sku": ["artnr"], "name": ["bezeichnung"]})
        merged = config.merge({"customAliases": {"sku": ["ref"]}})
        assert merged.custom_aliases == {"sku": ["ref"], "name": ["bezeichnung"]}

    def test_merge_replaces_exclude_fields(self):
        """Test excludeFields replaces the list"""
        config = AutoMapperConfig(exclude_fields=["a"])
        assert config.merge({"excludeFields": ["b"]}).exclude_fields == ["b"]

    def test_merge_returns_new_value(self):
        """Test merge leaves the original unchanged"""
        merged = DEFAULT_AUTO_MAPPER_CONFIG.merge({"confidenceThreshold": 0.8})
        assert merged.confidence_threshold == 0.8
        assert DEFAULT_AUTO_MAPPER_CONFIG.confidence_threshold == 0.5

    def test_round_trip(self):
        """Test to_dict / from_dict"""
        config = AutoMapperConfig(
            confidence_threshold=0.3,
            case_sensitive=True,
            custom_aliases={"sku": ["artnr"]},
            exclude_fields=["notes"],
            weights=MatchWeights(0.5, 0.4, 0.1),
        )
        assert AutoMapperConfig.from_dict(config.to_dict()) == config


# ============================================================================
# TEST: validate_auto_mapper_config
# ============================================================================


class TestValidateConfig:
    """Tests for config validation"""

    def test_valid(self):
        """Test a valid document"""
        validation = validate_auto_mapper_config(DEFAULT_AUTO_MAPPER_CONFIG.to_dict())
        assert validation.valid
        assert validation.errors == []
        assert validation.warnings == []

    @pytest.mark.parametrize("threshold", [-0.1, 1.1, "high", True])
    def test_invalid_threshold(self, threshold):
        """Test thresholds outside [0, 1]"""
        validation = validate_auto_mapper_config({"confidenceThreshold": threshold})
        assert validation.valid is False
        assert "confidenceThreshold" in validation.errors[0]

    def test_invalid_weight(self):
        """Test weights outside [0, 1]"""
        validation = validate_auto_mapper_config({"weights": {"nameSimilarity": 2}})
        assert validation.valid is False
        assert validation.warnings == []

    def test_weight_sum_warning(self):
        """Test weights not summing to 1 only warn"""
        validation = validate_auto_mapper_config(
            {"weights": {"nameSimilarity": 0.5, "typeCompatibility": 0.2, "descriptionMatch": 0.1}}
        )
        assert validation.valid
        assert validation.warnings == ["Weights sum to 0.80, expected 1.0"]

    def test_weight_sum_tolerance(self):
        """Test small rounding differences are tolerated"""
        validation = validate_auto_mapper_config(
            {"weights": {"nameSimilarity": 0.6, "typeCompatibility": 0.345, "descriptionMatch": 0.05}}
        )
        assert validation.warnings == []

    def test_warning_alongside_other_errors(self):
        """Test the weight warning does not depend on unrelated errors"""
        validation = validate_auto_mapper_config(
            {"confidenceThreshold": 5, "weights": {"nameSimilarity": 0.1}}
        )
        assert validation.valid is False
        assert validation.warnings

    def test_malformed_aliases(self):
        """Test alias structure checks"""
        assert not validate_auto_mapper_config({"customAliases": ["sku"]}).valid
        assert not validate_auto_mapper_config({"customAliases": {"sku": "artnr"}}).valid
        assert not validate_auto_mapper_config({"customAliases": {"sku": [1, 2]}}).valid

    def test_alias_limit(self):
        """Test more than 1000 custom aliases is an error"""
        aliases = {"sku": [f"a{i}" for i in range(600)], "name": [f"b{i}" for i in range(401)]}
        validation = validate_auto_mapper_config({"customAliases": aliases})
        assert validation.valid is False
        assert "1001" in validation.errors[0]

    def test_exclude_fields_type(self):
        """Test excludeFields must be a list"""
        assert not validate_auto_mapper_config({"excludeFields": "notes"}).valid


# ============================================================================
# TEST: Mapping models
# ============================================================================


class TestMappingModels:
    """Tests for mapping models"""

    @pytest.mark.parametrize("score,expected", [(100, "high"), (70, "high"), (69, "medium"), (40, "medium"), (39, "low"), (0, "low")])
    def test_score_to_confidence(self, score, expected):
        """Test confidence buckets"""
        assert score_to_confidence(score) == expected

    def test_min_score_for(self):
        """Test minimum score per confidence"""
        assert min_score_for("high") == 70
        assert min_score_for("medium") == 40
        assert min_score_for(None) == 0

    def test_field_mapping_round_trip(self):
        """Test FieldMapping from_dict / to_dict"""
        data = {
            "source": "price_str",
            "target": "price",
            "transforms": [{"type": "convert", "convert": {"from": "string", "to": "number"}}],
            "required": True,
            "defaultValue": "0",
        }
        assert FieldMapping.from_dict(data).to_dict() == data

    def test_null_default_value_kept(self):
        """Test an explicit null default is distinct from no default"""
        assert FieldMapping.from_dict({"source": "a", "target": "b", "defaultValue": None}).default_value is None
        assert FieldMapping.from_dict({"source": "a", "target": "b"}).default_value is MISSING

    def test_field_error_value(self):
        """Test FieldError omits an absent value"""
        assert FieldError("sku", "missing").to_dict() == {"field": "sku", "message": "missing"}
        assert FieldError("qty", "bad", None).to_dict()["value"] is None
