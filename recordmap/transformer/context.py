"""Per-record state shared by the transforms of one mapping run."""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol


class ExpressionEvaluator(Protocol):
    """External sandbox used by the custom transform."""

    def evaluate(self, expression: str, record: Dict[str, Any]) -> Any:
        ...


@dataclass
class TransformContext:
    """Record being mapped plus the collaborators transforms may consult."""

    record: Dict[str, Any]
    lookup: Callable[[str], Optional[Any]] = lambda name: None
    evaluator: Optional[ExpressionEvaluator] = None
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)
