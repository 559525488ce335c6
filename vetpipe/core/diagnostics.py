"""Diagnostic Records — the structured side channel every stage reports into.

Invariants:
    - DiagnosticRecord is frozen: {timestamp, stage, level, message, failure_kind}
    - failure_kind is set only on records that report a Failure
    - Sinks are append-only — nothing reads back and changes control flow
    - MemorySink keeps records in emission order
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from vetpipe.core.domain_types import DiagnosticLevel, FailureKind, Stage


@dataclass(frozen=True)
class DiagnosticRecord:
    stage: Stage
    level: DiagnosticLevel
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    failure_kind: FailureKind | None = None

    def to_dict(self) -> dict:
        data = {
            "timestamp": self.timestamp.isoformat(),
            "stage": self.stage.value,
            "level": self.level.value,
            "message": self.message,
        }
        if self.failure_kind is not None:
            data["failure_kind"] = self.failure_kind.value
        return data


class MemorySink:
    """In-process sink. Used for isolated tests and for hosts that batch records."""

    def __init__(self):
        self._records: list[DiagnosticRecord] = []

    def emit(self, record: DiagnosticRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> tuple[DiagnosticRecord, ...]:
        return tuple(self._records)

    def for_stage(self, stage: Stage) -> list[DiagnosticRecord]:
        return [r for r in self._records if r.stage is stage]
