"""Outcome — tagged result of one pipeline invocation.

Invariants:
    - Exactly one variant: Success(value) or Failure(kind, message, cause)
    - Both variants are frozen — an Outcome is created once and never mutated
    - Failure.details holds names and type names only, never raw input values
    - Failure.cause is excluded from repr/eq: internal chains stay out of logs and comparisons

Design Decisions:
    - Two frozen dataclasses + Union alias over a single class with optional fields:
      isinstance() narrows the type, impossible states are unrepresentable
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from vetpipe.core.domain_types import FailureKind


@dataclass(frozen=True)
class Success:
    """Successful invocation carrying the operation's return value."""
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Classified failure. `kind` is always a FailureKind member."""
    kind: FailureKind
    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)
    details: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.kind, FailureKind):
            raise TypeError(f"Failure.kind must be a FailureKind, got {self.kind!r}")
        if not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @property
    def ok(self) -> bool:
        return False

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


Outcome = Union[Success, Failure]
