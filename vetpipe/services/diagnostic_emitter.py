"""Diagnostic Emitter — builds a record and hands it to the injected sink.

Invariants:
    - A failing sink never changes pipeline control flow (logged as warning, then ignored)
"""

import logging

from vetpipe.core.boundary_protocols import DiagnosticSink
from vetpipe.core.diagnostics import DiagnosticRecord
from vetpipe.core.domain_types import DiagnosticLevel, FailureKind, Stage

logger = logging.getLogger(__name__)


def emit_record(
    sink: DiagnosticSink,
    stage: Stage,
    level: DiagnosticLevel,
    message: str,
    failure_kind: FailureKind | None = None,
) -> DiagnosticRecord:
    record = DiagnosticRecord(
        stage=stage, level=level, message=message, failure_kind=failure_kind,
    )
    try:
        sink.emit(record)
    except Exception as e:
        logger.warning(
            f"Diagnostic sink rejected {stage.value} record: {type(e).__name__}",
            extra={"stage": stage.value},
        )
    return record
