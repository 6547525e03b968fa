"""
Unit tests for the transform kinds

Tests:
- TransformConfig: tagged union parsing and serialization
- String, conversion, date, collection, numeric and conditional transforms
- TransformerRegistry dispatch
"""

from datetime import datetime
from unittest.mock import Mock

import pytest

from recordmap.builder.path_accessor import MISSING
from recordmap.exceptions import TransformError
from recordmap.transformer.collection import apply_default, apply_lookup, apply_map
from recordmap.transformer.conditional import apply_conditional, apply_custom
from recordmap.transformer.config import (
    ConcatOptions,
    ConditionalOptions,
    ConvertOptions,
    CustomOptions,
    DateOptions,
    DefaultOptions,
    ExtractOptions,
    JoinOptions,
    LookupOptions,
    MapOptions,
    MathOperation,
    MathOptions,
    ReplaceOptions,
    SplitOptions,
    TemplateOptions,
    TransformConfig,
    TransformType,
    ValueKind,
)
from recordmap.transformer.context import TransformContext
from recordmap.transformer.conversion import apply_convert, parse_number, stringify
from recordmap.transformer.date import apply_date, format_date, parse_date
from recordmap.transformer.number import apply_math
from recordmap.transformer.registry import LookupTable, TransformerRegistry
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


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def context():
    """Context over a customer record"""
    return TransformContext(
        record={"first_name": "Ada", "last_name": "Lovelace", "city": "", "status": "active", "qty": 3}
    )


def convert(to_kind, value, fmt=None):
    return apply_convert(value, ConvertOptions(ValueKind.STRING, to_kind, fmt), TransformContext(record={}))


# ============================================================================
# TEST: TransformConfig
# ============================================================================


class TestTransformConfig:
    """Tests for the transform config tagged union"""

    def test_from_dict_picks_payload_by_type(self):
        """Test options are read from the key named after the type"""
        config = TransformConfig.from_dict({"type": "convert", "convert": {"from": "string", "to": "number"}})
        assert config.type == TransformType.CONVERT
        assert config.options == ConvertOptions(ValueKind.STRING, ValueKind.NUMBER)

    def test_template_payload_is_a_string(self):
        """Test template payload is a bare string"""
        config = TransformConfig.from_dict({"type": "template", "template": "${value}!"})
        assert config.options.template == "${value}!"
        assert config.to_dict() == {"type": "template", "template": "${value}!"}

    def test_kind_without_payload(self):
        """Test kinds without options"""
        config = TransformConfig.from_dict({"type": "trim"})
        assert config.options is None
        assert config.to_dict() == {"type": "trim"}

    def test_missing_payload_is_allowed(self):
        """Test a kind loaded without its payload has no options"""
        config = TransformConfig.from_dict({"type": "math"})
        assert config.type == TransformType.MATH
        assert config.options is None

    def test_mismatched_options_rejected(self):
        """Test options of the wrong class raise TypeError"""
        with pytest.raises(TypeError):
            TransformConfig(TransformType.SPLIT, JoinOptions())

    def test_unknown_type_rejected(self):
        """Test unknown kinds raise ValueError"""
        with pytest.raises(ValueError):
            TransformConfig.from_dict({"type": "explode"})

    def test_conditional_else_key(self):
        """Test the else branch uses the 'else' key"""
        data = {"type": "conditional", "conditional": {"condition": "value > 1", "then": "big", "else": "small"}}
        config = TransformConfig.from_dict(data)
        assert config.options.otherwise == "small"
        assert config.to_dict() == data

    def test_lookup_round_trip(self):
        """Test lookup options keep camelCase keys"""
        data = {"type": "lookup", "lookup": {"table": "brands", "fromField": "code", "toField": "id"}}
        assert TransformConfig.from_dict(data).to_dict() == data


# ============================================================================
# TEST: String transforms
# ============================================================================


class TestStringTransforms:
    """Tests for string transforms"""

    def test_trim_lower_upper(self, context):
        """Test case and whitespace transforms"""
        assert apply_trim("  Widget ", None, context) == "Widget"
        assert apply_lowercase("WiDgEt", None, context) == "widget"
        assert apply_uppercase("widget", None, context) == "WIDGET"

    def test_case_transforms_ignore_non_strings(self, context):
        """Test non-string values pass through"""
        assert apply_trim(12, None, context) == 12
        assert apply_uppercase(None, None, context) is None

    def test_template(self, context):
        """Test template with value and record paths"""
        options = TemplateOptions("${first_name} ${last_name} (${value})")
        assert apply_template("admin", options, context) == "Ada Lovelace (admin)"

    def test_split_all_parts(self, context):
        """Test split returns every part"""
        assert apply_split("a, b ,c", SplitOptions(",", trim=True), context) == ["a", "b", "c"]

    def test_split_index(self, context):
        """Test split with index returns one part"""
        assert apply_split("red|green|blue", SplitOptions("|", index=1), context) == "green"
        assert apply_split("red|green", SplitOptions("|", index=-1), context) == "green"
        assert apply_split("red|green", SplitOptions("|", index=5), context) is None

    def test_join_list(self, context):
        """Test join of a list value skips empty items"""
        assert apply_join(["a", None, "b", ""], JoinOptions(separator="-"), context) == "a-b"

    def test_join_with_fields(self, context):
        """Test join with record fields"""
        options = JoinOptions(separator=" ", fields=["last_name", "city", "missing"])
        assert apply_join("Ada", options, context) == "Ada Lovelace"

    def test_concat(self, context):
        """Test concat appends record fields"""
        assert apply_concat("Ada", ConcatOptions(["last_name"], ", "), context) == "Ada, Lovelace"

    def test_replace_literal(self, context):
        """Test literal replace, all or first occurrence"""
        assert apply_replace("a-b-c", ReplaceOptions("-", "_"), context) == "a_b_c"
        assert apply_replace("a-b-c", ReplaceOptions("-", "_", all=False), context) == "a_b-c"

    def test_replace_regex(self, context):
        """Test regex replace"""
        assert apply_replace("SKU  001", ReplaceOptions(r"\s+", " ", regex=True), context) == "SKU 001"

    def test_replace_invalid_regex(self, context):
        """Test invalid pattern raises TransformError"""
        with pytest.raises(TransformError):
            apply_replace("x", ReplaceOptions("(", "", regex=True), context)

    def test_extract(self, context):
        """Test extract returns the capture group"""
        options = ExtractOptions(r"(\d+)\s*mm")
        assert apply_extract("Width 120 mm", options, context) == "120"
        assert apply_extract("no digits", options, context) is None

    def test_extract_group_zero(self, context):
        """Test group 0 returns the whole match"""
        assert apply_extract("abc-123", ExtractOptions(r"[a-z]+-\d+", group=0), context) == "abc-123"


# ============================================================================
# TEST: Conversion
# ============================================================================


class TestConvert:
    """Tests for the convert transform"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("$12.50", 12.5),
            ("1,250", 1250),
            ("-3.5 kg", -3.5),
            ("42", 42),
            (7, 7),
        ],
    )
    def test_to_number(self, raw, expected):
        """Test numeric parse strips non numeric characters"""
        assert convert(ValueKind.NUMBER, raw) == expected

    def test_to_number_without_digits(self):
        """Test text without digits cannot become a number"""
        with pytest.raises(TransformError):
            convert(ValueKind.NUMBER, "n/a")

    @pytest.mark.parametrize("raw", ["true", "YES", "1", "on", " y "])
    def test_truthy_tokens(self, raw):
        """Test truthy tokens are matched case-insensitively"""
        assert convert(ValueKind.BOOLEAN, raw) is True

    @pytest.mark.parametrize("raw", ["false", "no", "0", "maybe"])
    def test_other_tokens_are_false(self, raw):
        """Test every other token is False"""
        assert convert(ValueKind.BOOLEAN, raw) is False

    def test_to_date(self):
        """Test date conversion"""
        assert convert(ValueKind.DATE, "2024-03-05") == datetime(2024, 3, 5)

    def test_invalid_date_becomes_none(self):
        """Test invalid dates yield None rather than raising"""
        assert convert(ValueKind.DATE, "2024-13-45") is None
        assert convert(ValueKind.DATE, "soon") is None

    def test_to_string(self):
        """Test string rendering"""
        assert convert(ValueKind.STRING, 12.0) == "12"
        assert convert(ValueKind.STRING, True) == "true"
        assert convert(ValueKind.STRING, datetime(2024, 3, 5), "DD/MM/YYYY") == "05/03/2024"

    def test_to_json(self):
        """Test JSON parse"""
        assert convert(ValueKind.JSON, '{"a": [1, 2]}') == {"a": [1, 2]}
        with pytest.raises(TransformError):
            convert(ValueKind.JSON, "{broken")

    def test_stringify(self):
        """Test value rendering"""
        assert stringify(None) == "null"
        assert stringify([1, "a"]) == '[1, "a"]'

    def test_parse_number_bool(self):
        """Test booleans parse as 1 / 0"""
        assert parse_number(True) == 1


# ============================================================================
# TEST: Dates
# ============================================================================


class TestDateTransform:
    """Tests for date parsing and formatting"""

    def test_format_tokens(self):
        """Test YYYY/MM/DD/HH/mm/ss tokens"""
        moment = datetime(2024, 1, 15, 9, 5, 7)
        assert format_date(moment, "YYYY-MM-DD HH:mm:ss") == "2024-01-15 09:05:07"

    def test_input_format(self):
        """Test explicit input format"""
        assert parse_date("15/01/2024", "DD/MM/YYYY") == datetime(2024, 1, 15)

    def test_fallback_formats(self):
        """Test common layouts are recognised"""
        assert parse_date("01/15/2024") == datetime(2024, 1, 15)
        assert parse_date("20240115") == datetime(2024, 1, 15)

    def test_epoch_milliseconds(self):
        """Test numbers are epoch milliseconds"""
        assert parse_date(0).year == 1970

    def test_apply_date_reformats(self, context):
        """Test the date transform parses then formats"""
        assert apply_date("2024-01-15", DateOptions(format="DD.MM.YYYY"), context) == "15.01.2024"

    def test_apply_date_invalid(self, context):
        """Test the date transform raises on invalid input"""
        with pytest.raises(TransformError):
            apply_date("not a date", DateOptions(), context)


# ============================================================================
# TEST: Collection transforms
# ============================================================================


class TestCollectionTransforms:
    """Tests for map, lookup and default"""

    def test_map_exact(self, context):
        """Test dictionary translation"""
        options = MapOptions(values={"A": "active", "I": "inactive"})
        assert apply_map("A", options, context) == "active"

    def test_map_case_insensitive(self, context):
        """Test case-insensitive match"""
        options = MapOptions(values={"Yes": True}, case_sensitive=False)
        assert apply_map("YES", options, context) is True

    def test_map_default_and_passthrough(self, context):
        """Test unmatched values use the default or pass through"""
        assert apply_map("X", MapOptions(values={}, default="other"), context) == "other"
        assert apply_map("X", MapOptions(values={}), context) == "X"

    def test_map_keys_by_text_form(self, context):
        """Test non-string values are matched by their text"""
        assert apply_map(1, MapOptions(values={"1": "one"}), context) == "one"

    def test_lookup_found(self):
        """Test lookup projects the target field"""
        table = LookupTable("brands", [{"code": "MI", "id": 2}, {"code": "GY", "id": 3}], key_field="code")
        context = TransformContext(record={}, lookup={"brands": table}.get)
        assert apply_lookup("GY", LookupOptions("brands", "code", "id"), context) == 3

    def test_lookup_no_row(self):
        """Test missing rows fall back to default or the value"""
        table = LookupTable("brands", [{"code": "MI", "id": 2}])
        context = TransformContext(record={}, lookup={"brands": table}.get)
        assert apply_lookup("ZZ", LookupOptions("brands", "code", "id", default=0), context) == 0
        assert apply_lookup("ZZ", LookupOptions("brands", "code", "id"), context) == "ZZ"

    def test_lookup_unknown_table_warns(self, context):
        """Test an unregistered table adds a warning and keeps the value"""
        assert apply_lookup("GY", LookupOptions("brands", "code", "id"), context) == "GY"
        assert context.warnings == ['Lookup table "brands" is not registered']

    def test_default_only_if_empty(self, context):
        """Test default replaces empty values only"""
        options = DefaultOptions("n/a")
        assert apply_default("", options, context) == "n/a"
        assert apply_default(None, options, context) == "n/a"
        assert apply_default("set", options, context) == "set"

    def test_default_always(self, context):
        """Test onlyIfEmpty false always replaces"""
        assert apply_default("set", DefaultOptions("n/a", only_if_empty=False), context) == "n/a"


# ============================================================================
# TEST: Math
# ============================================================================


class TestMathTransform:
    """Tests for the math transform"""

    @pytest.mark.parametrize(
        "operation,operand,value,expected",
        [
            (MathOperation.ADD, 1.5, 2, 3.5),
            (MathOperation.SUBTRACT, 1, "10", 9),
            (MathOperation.MULTIPLY, 100, 19.99, 1999),
            (MathOperation.DIVIDE, 3, 10, 3.33),
            (MathOperation.ROUND, None, 2.345, 2.35),
            (MathOperation.FLOOR, None, 2.7, 2),
            (MathOperation.CEIL, None, 2.1, 3),
            (MathOperation.ABS, None, -4, 4),
        ],
    )
    def test_operations(self, context, operation, operand, value, expected):
        """Test each operation"""
        assert apply_math(value, MathOptions(operation, operand), context) == expected

    def test_precision(self, context):
        """Test rounding precision"""
        assert apply_math(2.5, MathOptions(MathOperation.ROUND, precision=0), context) == 3

    def test_divide_by_zero(self, context):
        """Test division by zero raises"""
        with pytest.raises(TransformError):
            apply_math(1, MathOptions(MathOperation.DIVIDE, 0), context)

    def test_missing_operand(self, context):
        """Test binary operations need an operand"""
        with pytest.raises(TransformError):
            apply_math(1, MathOptions(MathOperation.ADD), context)


# ============================================================================
# TEST: Conditional / custom
# ============================================================================


class TestConditionalTransforms:
    """Tests for conditional and custom transforms"""

    def test_then_branch(self, context):
        """Test the then branch is chosen when the condition holds"""
        options = ConditionalOptions("value > 10", then="bulk", otherwise="single")
        assert apply_conditional(25, options, context) == "bulk"
        assert apply_conditional(5, options, context) == "single"

    def test_missing_branch_keeps_value(self, context):
        """Test an absent branch keeps the value"""
        options = ConditionalOptions("value == 'x'", then="matched")
        assert apply_conditional("y", options, context) == "y"

    def test_record_condition(self, context):
        """Test conditions over record fields"""
        options = ConditionalOptions("record.status == 'active'", then=True, otherwise=False)
        assert apply_conditional("anything", options, context) is True

    def test_custom_requires_evaluator(self, context):
        """Test custom transforms fail without a sandbox"""
        with pytest.raises(TransformError):
            apply_custom(1, CustomOptions("value * 2"), context)

    def test_custom_delegates_to_evaluator(self):
        """Test custom transforms pass the record and value to the sandbox"""
        evaluator = Mock()
        evaluator.evaluate.return_value = 6
        context = TransformContext(record={"qty": 3}, evaluator=evaluator)

        assert apply_custom(3, CustomOptions("value * 2"), context) == 6
        evaluator.evaluate.assert_called_once_with("value * 2", {"qty": 3, "value": 3})


# ============================================================================
# TEST: TransformerRegistry
# ============================================================================


class TestTransformerRegistry:
    """Tests for TransformerRegistry"""

    def test_every_kind_registered(self):
        """Test every transform kind has a handler"""
        registry = TransformerRegistry()
        for kind in TransformType:
            assert callable(registry.get(kind))

    def test_dispatch(self, context):
        """Test dispatch by config type"""
        registry = TransformerRegistry()
        assert registry.transform(" x ", TransformConfig(TransformType.TRIM), context) == "x"
        assert registry.transform("x", TransformConfig("uppercase"), context) == "X"

    def test_missing_value_is_not_extracted(self, context):
        """Test extract on MISSING yields None"""
        assert apply_extract(MISSING, ExtractOptions("(.)"), context) is None
