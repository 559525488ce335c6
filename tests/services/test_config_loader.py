"""Config Loader — tests for the load stage against real files and fake sources.

Tests cover:
    - Well-formed source → StructuredConfig with exactly the source's top-level keys
    - Missing source → NotFoundError, nothing opened
    - Directory / unreadable source → NotFoundError
    - Malformed and oversized content → MalformedError, including nesting too deep to parse
    - Exactly one INFO record per load, success or failure
    - Handle released on parse failure
    - A failing sink never changes the result
"""

import io
from contextlib import contextmanager

import pytest

from vetpipe.core.diagnostics import MemorySink
from vetpipe.core.domain_types import DiagnosticLevel, FailureKind, Stage
from vetpipe.core.errors import MalformedError, NotFoundError
from vetpipe.infrastructure.file_source import FileByteSource
from vetpipe.services.config_loader import ConfigLoader


class _TrackingSource:
    """Fake ByteSource recording opens and closes."""

    def __init__(self, payload: bytes = b"{}", error: BaseException | None = None):
        self.payload = payload
        self.error = error
        self.opened = 0
        self.closed = 0

    @contextmanager
    def open(self, source_id):
        if self.error is not None:
            raise self.error
        self.opened += 1
        try:
            yield io.BytesIO(self.payload)
        finally:
            self.closed += 1


class _BrokenSink:
    def emit(self, record):
        raise RuntimeError("sink offline")


# ─── success ─────────────────────────────────────────────────────

def test_load_returns_exact_top_level_keys(loader, write_source):
    path = write_source("app.json", {"host": "db", "port": 5432, "debug": False})
    config = loader.load(path)
    assert set(config) == {"host", "port", "debug"}
    assert config.source_id == path


def test_load_emits_single_info_record(loader, sink, write_source):
    path = write_source("app.json", {"a": 1})
    loader.load(path)
    assert len(sink.records) == 1
    record = sink.records[0]
    assert record.stage is Stage.LOAD
    assert record.level is DiagnosticLevel.INFO
    assert path in record.message
    assert "loaded" in record.message


def test_load_reads_relative_ids_from_base_dir(tmp_path, sink):
    (tmp_path / "rel.json").write_text('{"k": "v"}', encoding="utf-8")
    loader = ConfigLoader(FileByteSource(base_dir=tmp_path), sink)
    assert loader.load("rel.json")["k"] == "v"


# ─── not found ───────────────────────────────────────────────────

def test_missing_source_is_not_found(loader, tmp_path):
    with pytest.raises(NotFoundError) as exc:
        loader.load(str(tmp_path / "absent.json"))
    assert exc.value.kind is FailureKind.NOT_FOUND
    assert exc.value.context.stage is Stage.LOAD


def test_missing_source_performs_no_read(sink):
    source = _TrackingSource(error=FileNotFoundError("absent"))
    loader = ConfigLoader(source, sink)
    with pytest.raises(NotFoundError):
        loader.load("absent.json")
    assert source.opened == 0


def test_missing_source_still_emits_one_record(loader, sink, tmp_path):
    with pytest.raises(NotFoundError):
        loader.load(str(tmp_path / "absent.json"))
    assert len(sink.records) == 1
    assert "not_found" in sink.records[0].message
    assert sink.records[0].level is DiagnosticLevel.INFO


def test_directory_is_not_found(loader, tmp_path):
    with pytest.raises(NotFoundError):
        loader.load(str(tmp_path))


def test_permission_error_is_not_found(sink):
    loader = ConfigLoader(_TrackingSource(error=PermissionError("denied")), sink)
    with pytest.raises(NotFoundError) as exc:
        loader.load("locked.json")
    assert "not readable" in exc.value.message


def test_unexpected_source_fault_is_not_found(sink):
    loader = ConfigLoader(_TrackingSource(error=RuntimeError("driver bug")), sink)
    with pytest.raises(NotFoundError):
        loader.load("weird.json")


# ─── malformed ───────────────────────────────────────────────────

def test_invalid_json_is_malformed(loader, write_source):
    path = write_source("bad.json", '{"a": ')
    with pytest.raises(MalformedError) as exc:
        loader.load(path)
    assert exc.value.context.source_id == path


def test_deeply_nested_source_is_malformed_with_one_record(loader, sink, write_source):
    depth = 200_000
    path = write_source("deep.json", '{"a": ' + "[" * depth + "]" * depth + "}")
    with pytest.raises(MalformedError) as exc:
        loader.load(path)
    assert exc.value.reason == "nesting too deep"
    assert len(sink.records) == 1
    assert "malformed" in sink.records[0].message


def test_handle_released_on_parse_failure(sink):
    source = _TrackingSource(payload=b"not json")
    with pytest.raises(MalformedError):
        ConfigLoader(source, sink).load("x")
    assert source.opened == source.closed == 1


def test_handle_released_on_success(sink):
    source = _TrackingSource(payload=b'{"a": 1}')
    ConfigLoader(source, sink).load("x")
    assert source.opened == source.closed == 1


def test_oversized_source_is_malformed(sink):
    source = _TrackingSource(payload=b'{"a": "' + b"x" * 100 + b'"}')
    with pytest.raises(MalformedError) as exc:
        ConfigLoader(source, sink, max_bytes=50).load("big.json")
    assert "exceeds 50 bytes" in exc.value.reason


def test_configured_encoding_used(sink):
    source = _TrackingSource(payload='{"name": "café"}'.encode("latin-1"))
    config = ConfigLoader(source, sink, encoding="latin-1").load("x")
    assert config["name"] == "café"


# ─── sink failures ───────────────────────────────────────────────

def test_broken_sink_does_not_change_result(write_source):
    path = write_source("app.json", {"a": 1})
    loader = ConfigLoader(FileByteSource(), _BrokenSink())
    assert loader.load(path)["a"] == 1


def test_each_load_emits_its_own_record(write_source):
    sink = MemorySink()
    loader = ConfigLoader(FileByteSource(), sink)
    path = write_source("app.json", {"a": 1})
    loader.load(path)
    loader.load(path)
    assert len(sink.for_stage(Stage.LOAD)) == 2
