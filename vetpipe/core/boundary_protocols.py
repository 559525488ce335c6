"""Boundary Protocols — contracts between the pipeline core and its collaborators.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - All IO accessed through Protocol types, implementations injected by the caller
    - Collaborators raise their own exceptions; the calling stage maps them to the taxonomy

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - ByteSource.open is a context manager: release is guaranteed on every exit path
    - CredentialStore.lookup is async: the one suspension point of an invocation
"""

from contextlib import AbstractContextManager
from typing import BinaryIO, Protocol

from vetpipe.core.diagnostics import DiagnosticRecord


class ByteSource(Protocol):
    """Supplies the raw bytes behind a source identifier.

    open() raises FileNotFoundError (or another OSError) when the source is
    missing or unreadable; nothing is read in that case.
    """
    def open(self, source_id: str) -> AbstractContextManager[BinaryIO]: ...


class CredentialStore(Protocol):
    """Contract for credential lookup — returns None for an unknown user.

    Transport failures surface as CredentialStoreUnavailable, ConnectionError,
    TimeoutError or OSError.
    """
    async def lookup(self, username: str) -> str | None: ...


class DiagnosticSink(Protocol):
    """Append-only receiver of diagnostic records."""
    def emit(self, record: DiagnosticRecord) -> None: ...


class CredentialStoreUnavailable(Exception):
    """Raised by a CredentialStore whose backend cannot be reached."""
