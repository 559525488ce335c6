"""Structured Logging — JSON formatter, setup, and the logging-backed diagnostic sink.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (stage, failure_kind, error_code, source_id) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging is idempotent: calling it twice never duplicates handlers

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency for structured lines
    - LoggingSink forwards diagnostic records into the logging tree, so the
      injected sink and process-wide handlers stay decoupled
"""

import json
import logging
from datetime import datetime, timezone

from vetpipe.core.diagnostics import DiagnosticRecord

DIAGNOSTICS_LOGGER = "vetpipe.diagnostics"

_EXTRA_FIELDS = (
    "stage", "failure_kind", "error_code", "source_id", "record_timestamp",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure the root logger once for the process."""
    global _handler
    if _handler is not None:
        logging.root.removeHandler(_handler)
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler
    return handler


def shutdown_logging() -> None:
    """Flush and detach the handler installed by setup_logging."""
    global _handler
    if _handler is None:
        return
    _handler.flush()
    logging.root.removeHandler(_handler)
    _handler.close()
    _handler = None


class LoggingSink:
    """DiagnosticSink that writes each record to a logger at the record's level."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(DIAGNOSTICS_LOGGER)

    def emit(self, record: DiagnosticRecord) -> None:
        self._logger.log(
            getattr(logging, record.level.value),
            record.message,
            extra={
                "stage": record.stage.value,
                "failure_kind": record.failure_kind.value if record.failure_kind else None,
                "record_timestamp": record.timestamp.isoformat(),
            },
        )
