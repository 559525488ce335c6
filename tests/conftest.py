"""Root conftest — shared test configuration.

Invariants:
    - No VETPIPE_* variable from the developer's shell leaks into a test
    - get_settings() cache cleared around every test
"""

import json
import os

import pytest

from vetpipe.config import get_settings
from vetpipe.core.diagnostics import MemorySink
from vetpipe.infrastructure.file_source import FileByteSource
from vetpipe.services.config_loader import ConfigLoader
from vetpipe.services.pipeline import Pipeline
from vetpipe.services.reporter import Reporter

for _key in [k for k in os.environ if k.upper().startswith("VETPIPE_")]:
    del os.environ[_key]


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def write_source(tmp_path):
    """Write a source file under tmp_path. Dicts are JSON-encoded, str/bytes written raw."""
    def _write(name: str, content) -> str:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        elif isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def loader(sink) -> ConfigLoader:
    return ConfigLoader(FileByteSource(), sink)


@pytest.fixture
def reporter(sink) -> Reporter:
    return Reporter(sink)


@pytest.fixture
def pipeline(loader, reporter) -> Pipeline:
    return Pipeline(loader, reporter)
