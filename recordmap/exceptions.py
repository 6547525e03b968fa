"""Exceptions raised by the record mapping toolkit."""


class RegistryCapacityError(RuntimeError):
    """Raised when a bounded registry refuses a new entry."""


class UnsafePathError(ValueError):
    """Raised when a field path contains a reserved segment."""


class TransformError(ValueError):
    """Raised by a transform that cannot process its input value."""


class SandboxEvaluationError(RuntimeError):
    """Raised when the external expression sandbox fails to evaluate."""


class RecordParseError(ValueError):
    """Raised when a source file cannot be read into records."""
