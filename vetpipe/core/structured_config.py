"""Structured Config — raw source payloads and their parsed, read-only form.

Invariants:
    - RawInput is frozen: payload and source_id never change after the read
    - parse_structured_config is ATOMIC: full StructuredConfig or MalformedError, nothing in between
    - Keys are unique within every mapping — a duplicate key is Malformed, not last-wins
    - Nested mappings are read-only views; arrays become tuples
    - Nesting deeper than the interpreter can recurse is Malformed, never a raw RecursionError
    - Pure: no IO, the payload is already in memory

Design Decisions:
    - JSON (stdlib) as the source format: the payload shape every caller already produces
    - object_pairs_hook to see duplicates before dict() collapses them
"""

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from vetpipe.core.errors import MalformedError


@dataclass(frozen=True)
class RawInput:
    """Opaque payload plus the identifier it was read from."""
    source_id: str
    payload: bytes


class StructuredConfig(Mapping[str, Any]):
    """Read-only mapping of top-level keys to parsed values."""

    __slots__ = ("_data", "source_id")

    def __init__(self, data: Mapping[str, Any], source_id: str = "<direct>"):
        self._data = MappingProxyType({k: freeze_value(v) for k, v in data.items()})
        self.source_id = source_id

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"StructuredConfig(source_id={self.source_id!r}, keys={list(self._data)!r})"


def freeze_value(value: Any) -> Any:
    """Recursively turn dicts into read-only views and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(v) for v in value)
    return value


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(key)
        result[key] = value
    return result


class _DuplicateKey(ValueError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key


def _reject_constant(name: str) -> float:
    # NaN / Infinity are accepted by json.loads but are not JSON
    raise ValueError(f"non-standard numeric constant {name}")


def parse_structured_config(
    raw: RawInput, encoding: str = "utf-8",
) -> StructuredConfig:
    """Parse a RawInput into a StructuredConfig. Raises MalformedError."""
    try:
        text = raw.payload.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise MalformedError(raw.source_id, f"cannot decode as {encoding}") from e

    try:
        data = json.loads(
            text,
            object_pairs_hook=_reject_duplicates,
            parse_constant=_reject_constant,
        )
    except _DuplicateKey as e:
        raise MalformedError(raw.source_id, f"duplicate key '{e.key}'") from e
    except json.JSONDecodeError as e:
        raise MalformedError(
            raw.source_id, f"invalid JSON at line {e.lineno} column {e.colno}",
        ) from e
    except ValueError as e:
        raise MalformedError(raw.source_id, str(e)) from e
    except RecursionError as e:
        raise MalformedError(raw.source_id, "nesting too deep") from e

    if not isinstance(data, dict):
        raise MalformedError(
            raw.source_id, f"top-level value must be an object, got {type(data).__name__}",
        )
    try:
        return StructuredConfig(data, source_id=raw.source_id)
    except RecursionError as e:
        raise MalformedError(raw.source_id, "nesting too deep") from e
