"""Credential Verification — constant-time comparison of candidate vs stored credential.

Invariants:
    - Comparison is constant-time in the candidate (hmac.compare_digest)
    - Stored value is either plaintext or "pbkdf2_sha256$<iterations>$<salt>$<hexdigest>"
    - A stored hash with an unparseable header, or iterations outside
      1..MAX_ITERATIONS, never verifies (returns False, never raises)
    - Any str candidate is comparable: lone surrogates are encoded, not rejected
"""

import hashlib
import hmac
import secrets

HASH_SCHEME = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 260_000
MAX_ITERATIONS = 5_000_000


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogatepass")


def hash_credential(
    credential: str, salt: str | None = None, iterations: int = DEFAULT_ITERATIONS,
) -> str:
    """Produce a storable pbkdf2_sha256 hash string."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", _encode(credential), _encode(salt), iterations)
    return f"{HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def _iterations(header: str) -> int | None:
    if not (header.isascii() and header.isdigit()):
        return None
    iterations = int(header)
    if not 1 <= iterations <= MAX_ITERATIONS:
        return None
    return iterations


def verify_credential(candidate: str, stored: str) -> bool:
    """True when candidate matches the stored plaintext or hash."""
    if stored.startswith(HASH_SCHEME + "$"):
        parts = stored.split("$")
        if len(parts) != 4:
            return False
        iterations = _iterations(parts[1])
        if iterations is None:
            return False
        expected = hash_credential(candidate, salt=parts[2], iterations=iterations)
        return hmac.compare_digest(_encode(expected), _encode(stored))
    return hmac.compare_digest(_encode(candidate), _encode(stored))
