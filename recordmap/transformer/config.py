"""
Transform configurations

A TransformConfig is a tagged union: the `type` tag selects exactly one options
class. JSON documents carry the options under a key named after the type, e.g.

    {"type": "convert", "convert": {"from": "string", "to": "number"}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from recordmap.builder.path_accessor import MISSING


class TransformType(str, Enum):
    """Supported transform kinds"""
    TEMPLATE = "template"
    LOOKUP = "lookup"
    CONVERT = "convert"
    SPLIT = "split"
    JOIN = "join"
    MAP = "map"
    DATE = "date"
    TRIM = "trim"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    REPLACE = "replace"
    EXTRACT = "extract"
    DEFAULT = "default"
    CONCAT = "concat"
    MATH = "math"
    CONDITIONAL = "conditional"
    CUSTOM = "custom"


class ValueKind(str, Enum):
    """Value kinds understood by the convert transform"""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    JSON = "json"


class MathOperation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"
    ABS = "abs"


def _optional(data: Dict[str, Any], key: str) -> Any:
    return data[key] if key in data else MISSING


def _put_optional(result: Dict[str, Any], key: str, value: Any) -> None:
    if value is not MISSING:
        result[key] = value


@dataclass(frozen=True)
class TemplateOptions:
    template: str

    @classmethod
    def from_dict(cls, data: Any) -> "TemplateOptions":
        # The template payload is a bare string in mapping documents
        if isinstance(data, dict):
            return cls(template=data.get("template", ""))
        return cls(template=str(data))

    def to_dict(self) -> Any:
        return self.template


@dataclass(frozen=True)
class LookupOptions:
    table: str
    from_field: str
    to_field: str
    default: Any = MISSING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LookupOptions":
        return cls(
            table=data["table"],
            from_field=data["fromField"],
            to_field=data["toField"],
            default=_optional(data, "default"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"table": self.table, "fromField": self.from_field, "toField": self.to_field}
        _put_optional(result, "default", self.default)
        return result


@dataclass(frozen=True)
class ConvertOptions:
    from_kind: ValueKind
    to_kind: ValueKind
    format: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConvertOptions":
        return cls(
            from_kind=ValueKind(data.get("from", "string")),
            to_kind=ValueKind(data["to"]),
            format=data.get("format"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"from": self.from_kind.value, "to": self.to_kind.value}
        if self.format:
            result["format"] = self.format
        return result


@dataclass(frozen=True)
class SplitOptions:
    delimiter: str
    index: Optional[int] = None
    trim: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SplitOptions":
        return cls(
            delimiter=data["delimiter"],
            index=data.get("index"),
            trim=bool(data.get("trim", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"delimiter": self.delimiter}
        if self.index is not None:
            result["index"] = self.index
        if self.trim:
            result["trim"] = True
        return result


@dataclass(frozen=True)
class JoinOptions:
    separator: str = ","
    fields: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JoinOptions":
        return cls(separator=data.get("separator", ","), fields=list(data.get("fields", [])))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"separator": self.separator}
        if self.fields:
            result["fields"] = list(self.fields)
        return result


@dataclass(frozen=True)
class MapOptions:
    values: Dict[str, Any]
    default: Any = MISSING
    case_sensitive: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapOptions":
        return cls(
            values=dict(data.get("values", {})),
            default=_optional(data, "default"),
            case_sensitive=bool(data.get("caseSensitive", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"values": dict(self.values), "caseSensitive": self.case_sensitive}
        _put_optional(result, "default", self.default)
        return result


@dataclass(frozen=True)
class DateOptions:
    input_format: Optional[str] = None
    format: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DateOptions":
        return cls(input_format=data.get("inputFormat"), format=data.get("format"))

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        if self.input_format:
            result["inputFormat"] = self.input_format
        if self.format:
            result["format"] = self.format
        return result


@dataclass(frozen=True)
class ReplaceOptions:
    search: str
    replace: str = ""
    regex: bool = False
    all: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReplaceOptions":
        return cls(
            search=data["search"],
            replace=data.get("replace", ""),
            regex=bool(data.get("regex", False)),
            all=bool(data.get("all", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"search": self.search, "replace": self.replace, "regex": self.regex, "all": self.all}


@dataclass(frozen=True)
class ExtractOptions:
    pattern: str
    group: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractOptions":
        return cls(pattern=data["pattern"], group=int(data.get("group", 1)))

    def to_dict(self) -> Dict[str, Any]:
        return {"pattern": self.pattern, "group": self.group}


@dataclass(frozen=True)
class DefaultOptions:
    value: Any
    only_if_empty: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefaultOptions":
        return cls(value=data.get("value"), only_if_empty=bool(data.get("onlyIfEmpty", True)))

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "onlyIfEmpty": self.only_if_empty}


@dataclass(frozen=True)
class ConcatOptions:
    fields: List[str]
    separator: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConcatOptions":
        return cls(fields=list(data.get("fields", [])), separator=data.get("separator", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"fields": list(self.fields), "separator": self.separator}


@dataclass(frozen=True)
class MathOptions:
    operation: MathOperation
    operand: Optional[float] = None
    precision: int = 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MathOptions":
        return cls(
            operation=MathOperation(data["operation"]),
            operand=data.get("operand"),
            precision=int(data.get("precision", 2)),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"operation": self.operation.value, "precision": self.precision}
        if self.operand is not None:
            result["operand"] = self.operand
        return result


@dataclass(frozen=True)
class ConditionalOptions:
    condition: str
    then: Any = MISSING
    otherwise: Any = MISSING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConditionalOptions":
        return cls(
            condition=data["condition"],
            then=_optional(data, "then"),
            otherwise=_optional(data, "else"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"condition": self.condition}
        _put_optional(result, "then", self.then)
        _put_optional(result, "else", self.otherwise)
        return result


@dataclass(frozen=True)
class CustomOptions:
    expression: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomOptions":
        if isinstance(data, str):
            return cls(expression=data)
        return cls(expression=data["expression"])

    def to_dict(self) -> Dict[str, Any]:
        return {"expression": self.expression}


# Options class per kind; None means the kind takes no payload
OPTIONS_TYPES: Dict[TransformType, Optional[Type]] = {
    TransformType.TEMPLATE: TemplateOptions,
    TransformType.LOOKUP: LookupOptions,
    TransformType.CONVERT: ConvertOptions,
    TransformType.SPLIT: SplitOptions,
    TransformType.JOIN: JoinOptions,
    TransformType.MAP: MapOptions,
    TransformType.DATE: DateOptions,
    TransformType.TRIM: None,
    TransformType.LOWERCASE: None,
    TransformType.UPPERCASE: None,
    TransformType.REPLACE: ReplaceOptions,
    TransformType.EXTRACT: ExtractOptions,
    TransformType.DEFAULT: DefaultOptions,
    TransformType.CONCAT: ConcatOptions,
    TransformType.MATH: MathOptions,
    TransformType.CONDITIONAL: ConditionalOptions,
    TransformType.CUSTOM: CustomOptions,
}


@dataclass(frozen=True)
class TransformConfig:
    """One step of a transform chain"""

    type: TransformType
    options: Any = None

    def __post_init__(self):
        kind = TransformType(self.type)
        object.__setattr__(self, "type", kind)
        expected = OPTIONS_TYPES[kind]
        if self.options is None:
            return
        if expected is None or not isinstance(self.options, expected):
            raise TypeError(
                f"Transform '{kind.value}' expects {expected.__name__ if expected else 'no options'}, "
                f"got {type(self.options).__name__}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformConfig":
        """Build from the JSON shape {"type": kind, kind: payload}"""
        kind = TransformType(data["type"])
        options_type = OPTIONS_TYPES[kind]
        payload = data.get(kind.value)
        if options_type is None or payload is None:
            return cls(kind)
        return cls(kind, options_type.from_dict(payload))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result: Dict[str, Any] = {"type": self.type.value}
        if self.options is not None:
            result[self.type.value] = self.options.to_dict()
        return result
