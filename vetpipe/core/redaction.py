"""Redaction — masks secrets out of text before it reaches a log or a user.

Invariants:
    - redact() is PURE: no IO, no shared state
    - Explicit secret values are masked wherever they occur as substrings
    - key=value / key: value pairs with a sensitive-looking key are masked
    - sensitive_values() walks nested mappings iteratively, so depth never raises

Design Decisions:
    - Longest secrets replaced first: a secret that contains another is never half-masked
    - Empty and whitespace-only secrets are ignored (masking "" would mask everything)
"""

import re
from typing import Any, Iterable, Mapping

DEFAULT_MASK = "***"
DEFAULT_SENSITIVE_KEYS: tuple[str, ...] = (
    "password", "passwd", "secret", "token", "credential", "api_key", "apikey",
)


def _pair_pattern(keys: Iterable[str]) -> re.Pattern | None:
    alternatives = "|".join(re.escape(k) for k in keys if k)
    if not alternatives:
        return None
    # key, optional quote, separator, optional quote, value up to delimiter
    return re.compile(
        rf"(?i)(\b\w*(?:{alternatives})\w*['\"]?\s*[=:]\s*['\"]?)([^\s'\",;}}]+)",
    )


def redact(
    text: str,
    secrets: Iterable[str] = (),
    sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS,
    mask: str = DEFAULT_MASK,
) -> str:
    """Return text with secret values and sensitive key/value pairs masked."""
    for secret in sorted({s for s in secrets if s and s.strip()}, key=len, reverse=True):
        text = text.replace(secret, mask)
    pattern = _pair_pattern(sensitive_keys)
    if pattern is not None:
        text = pattern.sub(lambda m: m.group(1) + mask, text)
    return text


def is_sensitive_key(key: str, sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS) -> bool:
    """True when key contains any sensitive key pattern, case-insensitively."""
    lowered = key.lower()
    return any(k and k.lower() in lowered for k in sensitive_keys)


def sensitive_values(
    data: Mapping[str, Any], sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS,
) -> list[str]:
    """String values stored under sensitive keys, at any mapping depth."""
    keys = tuple(sensitive_keys)
    found: list[str] = []
    pending: list[Mapping[str, Any]] = [data]
    while pending:
        mapping = pending.pop()
        for key, value in mapping.items():
            if isinstance(value, Mapping):
                pending.append(value)
            elif isinstance(value, str) and is_sensitive_key(str(key), keys):
                found.append(value)
    return found
