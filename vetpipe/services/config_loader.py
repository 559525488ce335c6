"""Config Loader — resolves a source identifier into a StructuredConfig.

Invariants:
    - Exactly one read of the source per load; the handle is released on every path
    - Missing or unreadable source → NotFoundError, with nothing read
    - Undecodable, unparseable, oversized or non-object content → MalformedError
    - Exactly one INFO record (stage load) per call, success or failure
    - Only NotFoundError / MalformedError leave this stage

Design Decisions:
    - ByteSource injected: the loader is tested against tmp_path files and fakes alike
    - Reads max_bytes + 1 to detect oversize without reading the whole source
"""

import logging

from vetpipe.core.boundary_protocols import ByteSource, DiagnosticSink
from vetpipe.core.domain_types import DiagnosticLevel, Stage
from vetpipe.core.errors import MalformedError, NotFoundError, PipelineError
from vetpipe.core.structured_config import (
    RawInput,
    StructuredConfig,
    parse_structured_config,
)
from vetpipe.services.diagnostic_emitter import emit_record

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 1_048_576


class ConfigLoader:
    """Load stage: ByteSource → RawInput → StructuredConfig."""

    def __init__(
        self,
        source: ByteSource,
        sink: DiagnosticSink,
        encoding: str = "utf-8",
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self._source = source
        self._sink = sink
        self._encoding = encoding
        self._max_bytes = max_bytes

    def load(self, source_id: str) -> StructuredConfig:
        """Load and parse source_id. Raises NotFoundError or MalformedError."""
        try:
            config = parse_structured_config(self._read(source_id), self._encoding)
        except PipelineError as e:
            e.context.stage = Stage.LOAD
            e.context.source_id = source_id
            self._record(source_id, e.kind.value)
            raise
        self._record(source_id, "loaded")
        return config

    def _read(self, source_id: str) -> RawInput:
        try:
            with self._source.open(source_id) as handle:
                payload = handle.read(self._max_bytes + 1)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(source_id) from e
        except IsADirectoryError as e:
            raise NotFoundError(source_id, "source is a directory") from e
        except OSError as e:
            raise NotFoundError(source_id, "source is not readable") from e
        except Exception as e:
            raise NotFoundError(source_id, "source could not be read") from e

        if isinstance(payload, str):
            payload = payload.encode(self._encoding)
        if len(payload) > self._max_bytes:
            raise MalformedError(
                source_id, f"source exceeds {self._max_bytes} bytes",
            )
        return RawInput(source_id=source_id, payload=payload)

    def _record(self, source_id: str, result: str) -> None:
        logger.debug(
            f"Loaded source '{source_id}': {result}",
            extra={"stage": Stage.LOAD.value, "source_id": source_id},
        )
        emit_record(
            self._sink, Stage.LOAD, DiagnosticLevel.INFO,
            f"source '{source_id}': {result}",
        )
