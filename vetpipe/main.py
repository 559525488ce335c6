"""Runtime — builds a pipeline from settings and owns process-wide logging.

Invariants:
    - setup_logging runs once on entering runtime(); the handler is flushed on exit,
      including exit by exception
    - build_pipeline wires settings into every stage; nothing reads settings later

Design Decisions:
    - Context manager lifecycle (startup → yield → shutdown) for logging setup/teardown
    - Credential store optional: pipelines that never authenticate don't need one
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from vetpipe.config import Settings, get_settings
from vetpipe.core.boundary_protocols import ByteSource, DiagnosticSink
from vetpipe.infrastructure.file_source import FileByteSource
from vetpipe.infrastructure.observability import (
    LoggingSink,
    setup_logging,
    shutdown_logging,
)
from vetpipe.services.config_loader import ConfigLoader
from vetpipe.services.pipeline import Pipeline
from vetpipe.services.reporter import Reporter

logger = logging.getLogger(__name__)


def build_pipeline(
    settings: Settings | None = None,
    sink: DiagnosticSink | None = None,
    source: ByteSource | None = None,
    base_dir: str | Path | None = None,
) -> Pipeline:
    """Wire loader, reporter and sink from settings."""
    settings = settings or get_settings()
    sink = sink or LoggingSink()
    loader = ConfigLoader(
        source or FileByteSource(base_dir),
        sink,
        encoding=settings.source_encoding,
        max_bytes=settings.max_source_bytes,
    )
    reporter = Reporter(
        sink,
        locale=settings.locale,
        sensitive_keys=settings.sensitive_key_patterns,
        mask=settings.redaction_mask,
    )
    return Pipeline(loader, reporter)


@contextmanager
def runtime(settings: Settings | None = None) -> Iterator[Settings]:
    """Startup/shutdown lifecycle for a process embedding the pipeline."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("vetpipe runtime started")
    try:
        yield settings
    finally:
        logger.info("vetpipe runtime shutting down")
        shutdown_logging()
