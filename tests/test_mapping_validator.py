"""
Unit tests for MappingValidator

Tests:
- Unknown entity, unknown / readonly / duplicate targets
- Missing required field warnings
- customFields targets
"""

import pytest

from recordmap.mapper.mapping import FieldMapping
from recordmap.validator.mapping_validator import MappingValidator


@pytest.fixture
def validator(contact_provider):
    """Validator over the Contact schema"""
    return MappingValidator(contact_provider)


class TestMappingValidator:
    """Tests for MappingValidator"""

    def test_required_field_not_mapped(self, validator):
        """Test an unmapped required field is a warning, not an error"""
        report = validator.validate([FieldMapping("full_name", "name")], "Contact")

        assert report.valid is True
        assert report.errors == []
        assert any("email" in warning for warning in report.warnings)

    def test_all_required_mapped(self, validator):
        """Test no warnings when required fields are mapped"""
        report = validator.validate([FieldMapping("mail", "email")], "Contact")
        assert report.valid
        assert report.warnings == []

    def test_unknown_entity(self, validator):
        """Test an unknown entity is a single error"""
        report = validator.validate([], "Spaceship")
        assert report.valid is False
        assert report.errors == ["Unknown entity: Spaceship"]

    def test_entity_lookup_is_case_insensitive(self, validator):
        """Test entity names match regardless of case"""
        assert validator.validate([FieldMapping("mail", "email")], "contact").valid

    def test_unknown_target(self, validator):
        """Test targets outside the schema"""
        report = validator.validate([FieldMapping("mail", "email"), FieldMapping("x", "shoeSize")], "Contact")
        assert report.valid is False
        assert report.errors == ["Unknown target field: shoeSize"]

    def test_readonly_target(self, validator):
        """Test readonly targets"""
        report = validator.validate([FieldMapping("mail", "email"), FieldMapping("uid", "id")], "Contact")
        assert report.errors == ["Cannot map to readonly field: id"]

    def test_duplicate_target(self, validator):
        """Test two mappings to the same target"""
        report = validator.validate([FieldMapping("mail", "email"), FieldMapping("email2", "email")], "Contact")
        assert report.errors == ["Duplicate mapping to target: email"]

    def test_custom_fields_target(self, validator):
        """Test customFields.<name> targets are accepted"""
        report = validator.validate(
            [FieldMapping("mail", "email"), FieldMapping("shoe", "customFields.shoeSize")], "Contact"
        )
        assert report.valid

    def test_nested_target_root_checked(self, validator):
        """Test nested targets are checked by their root field"""
        report = validator.validate([FieldMapping("mail", "email"), FieldMapping("city", "name.city")], "Contact")
        assert report.valid

    def test_to_dict(self, validator):
        """Test serialization"""
        data = validator.validate([], "Contact").to_dict()
        assert data == {"valid": True, "errors": [], "warnings": ["Required field not mapped: email"]}
