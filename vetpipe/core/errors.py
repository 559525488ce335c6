"""Error Hierarchy — typed, classified exceptions for every pipeline failure mode.

Invariants:
    - Every error has a code (str), kind (FailureKind), severity (ErrorSeverity)
    - Exactly one subclass per FailureKind — the taxonomy is closed
    - Input errors (missing/type/invalid) are WARNING; source and operation errors are ERROR;
      collaborator outages are CRITICAL
    - to_failure() produces the Outcome variant; details never carry raw input values
    - to_record() yields only classification fields, safe to log before redaction

Design Decisions:
    - Single hierarchy with PipelineError base: the pipeline catches one type per stage
    - Exceptions inside a stage, Failure values across the caller boundary
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from vetpipe.core.domain_types import DiagnosticLevel, FailureKind, Stage
from vetpipe.core.outcome import Failure


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def level(self) -> DiagnosticLevel:
        return DiagnosticLevel[self.name]


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stage: Stage | None = None
    source_id: str | None = None


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: FailureKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def to_failure(self, message: str | None = None) -> Failure:
        """Convert to the Failure outcome. `message` overrides (e.g. redacted text)."""
        return Failure(
            kind=self.kind,
            message=self.message if message is None else message,
            cause=self,
            details=dict(self.details),
        )

    def to_record(self) -> dict[str, Any]:
        """Flat fields for a log record's `extra`. Never carries the message or details."""
        return {
            "error_code": self.code,
            "failure_kind": self.kind.value,
            "stage": self.context.stage.value if self.context.stage else None,
            "source_id": self.context.source_id,
        }


# ─── Source Errors ──────────────────────────────────────────────

class NotFoundError(PipelineError):
    """Source does not exist or cannot be opened for reading."""
    def __init__(self, source_id: str, reason: str = "source not found",
                 context: ErrorContext | None = None):
        super().__init__(
            f"Source '{source_id}': {reason}",
            "SOURCE_NOT_FOUND", FailureKind.NOT_FOUND,
            ErrorSeverity.ERROR, context, {"source_id": source_id},
        )
        self.source_id = source_id


class MalformedError(PipelineError):
    """Source content failed structural parsing."""
    def __init__(self, source_id: str, reason: str,
                 context: ErrorContext | None = None):
        super().__init__(
            f"Source '{source_id}' is malformed: {reason}",
            "SOURCE_MALFORMED", FailureKind.MALFORMED,
            ErrorSeverity.ERROR, context,
            {"source_id": source_id, "reason": reason},
        )
        self.source_id = source_id
        self.reason = reason


# ─── Input Errors ───────────────────────────────────────────────

class MissingFieldError(PipelineError):
    """Required key absent from the config."""
    def __init__(self, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Missing required field '{key}'",
            "MISSING_FIELD", FailureKind.MISSING_FIELD,
            ErrorSeverity.WARNING, context, {"field": key},
        )
        self.key = key


class TypeMismatchError(PipelineError):
    """Value present but of the wrong type. Only type NAMES are recorded."""
    def __init__(self, key: str, expected: str, actual: str,
                 context: ErrorContext | None = None):
        super().__init__(
            f"Field '{key}' must be {expected}, got {actual}",
            "TYPE_MISMATCH", FailureKind.TYPE_MISMATCH,
            ErrorSeverity.WARNING, context,
            {"field": key, "expected": expected, "actual": actual},
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class InvalidValueError(PipelineError):
    """Value has the right type but violates a domain constraint."""
    def __init__(self, key: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Field '{key}' is invalid: {reason}",
            "INVALID_VALUE", FailureKind.INVALID_VALUE,
            ErrorSeverity.WARNING, context, {"field": key, "reason": reason},
        )
        self.key = key
        self.reason = reason


# ─── Execution Errors ───────────────────────────────────────────

class DependencyUnavailableError(PipelineError):
    """External collaborator could not be reached. Transient."""
    def __init__(self, dependency: str, message: str = "unavailable",
                 context: ErrorContext | None = None):
        super().__init__(
            f"Dependency '{dependency}' {message}",
            "DEPENDENCY_UNAVAILABLE", FailureKind.DEPENDENCY_UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, {"dependency": dependency},
        )
        self.dependency = dependency


class OperationFailedError(PipelineError):
    """Operation logic raised. Not retryable unless the caller knows better."""
    def __init__(self, operation: str, message: str,
                 context: ErrorContext | None = None):
        super().__init__(
            f"Operation '{operation}' failed: {message}",
            "OPERATION_FAILED", FailureKind.OPERATION_FAILED,
            ErrorSeverity.ERROR, context, {"operation": operation},
        )
        self.operation = operation


_SEVERITY_BY_KIND: dict[FailureKind, ErrorSeverity] = {
    FailureKind.NOT_FOUND: ErrorSeverity.ERROR,
    FailureKind.MALFORMED: ErrorSeverity.ERROR,
    FailureKind.MISSING_FIELD: ErrorSeverity.WARNING,
    FailureKind.TYPE_MISMATCH: ErrorSeverity.WARNING,
    FailureKind.INVALID_VALUE: ErrorSeverity.WARNING,
    FailureKind.DEPENDENCY_UNAVAILABLE: ErrorSeverity.CRITICAL,
    FailureKind.OPERATION_FAILED: ErrorSeverity.ERROR,
}


def severity_for(kind: FailureKind) -> ErrorSeverity:
    """Severity of a kind, usable on a Failure whose exception is gone."""
    return _SEVERITY_BY_KIND[kind]
