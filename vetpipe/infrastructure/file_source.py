"""File Byte Source — filesystem implementation of the ByteSource protocol.

Invariants:
    - A missing path raises FileNotFoundError before any handle is opened
    - The handle is closed on every exit path (context manager)
    - Relative source ids resolve against base_dir when one is given
"""

from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator


class FileByteSource:
    """Reads sources from the local filesystem."""

    def __init__(self, base_dir: str | Path | None = None):
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def resolve(self, source_id: str) -> Path:
        path = Path(source_id)
        if self._base_dir is not None and not path.is_absolute():
            path = self._base_dir / path
        return path

    @contextmanager
    def open(self, source_id: str) -> Iterator[BinaryIO]:
        path = self.resolve(source_id)
        if not path.exists():
            raise FileNotFoundError(f"No such source: {source_id}")
        with path.open("rb") as handle:
            yield handle
