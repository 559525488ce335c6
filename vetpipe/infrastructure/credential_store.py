"""In-Memory Credential Store — CredentialStore implementation backed by a dict.

Invariants:
    - lookup() returns None for unknown users (absence is not an error)
    - An unavailable store raises CredentialStoreUnavailable on every lookup
    - The store copies its initial mapping: callers cannot mutate it behind its back
"""

from typing import Mapping

from vetpipe.core.boundary_protocols import CredentialStoreUnavailable


class InMemoryCredentialStore:
    """Username → stored credential (plaintext or pbkdf2_sha256 hash)."""

    def __init__(self, credentials: Mapping[str, str] | None = None):
        self._credentials = dict(credentials or {})
        self.available = True

    async def lookup(self, username: str) -> str | None:
        if not self.available:
            raise CredentialStoreUnavailable("credential store is offline")
        return self._credentials.get(username)
