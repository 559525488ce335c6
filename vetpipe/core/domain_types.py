"""Domain Types — enums shared by every pipeline stage.

Invariants:
    - FailureKind is CLOSED: exactly 7 members, no stage invents its own kind
    - DiagnosticLevel carries only the 4 levels the diagnostic channel accepts
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: values serialize straight into log records and JSON lines
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class FailureKind(str, Enum):
    """Closed failure taxonomy. Every Failure carries exactly one of these."""
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_VALUE = "invalid_value"
    DEPENDENCY_UNAVAILABLE = "dependency_unavailable"
    OPERATION_FAILED = "operation_failed"

    @property
    def retryable(self) -> bool:
        """Only transient collaborator failures are worth retrying unchanged."""
        return self is FailureKind.DEPENDENCY_UNAVAILABLE


class Stage(str, Enum):
    """Pipeline stages, in execution order."""
    LOAD = "load"
    VALIDATE = "validate"
    EXECUTE = "execute"
    REPORT = "report"


class DiagnosticLevel(str, Enum):
    """Levels accepted by the diagnostic channel."""
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FieldType(str, Enum):
    """Value types a FieldRule can require."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    MAPPING = "mapping"
    LIST = "list"
    ANY = "any"


class Locale(str, Enum):
    """Locales with user-facing message tables."""
    EN = "en"
    PT_BR = "pt-BR"
