"""Operation Input — arguments that already passed every rule of their RuleSet.

Invariants:
    - Only enforce_rules.check() can construct one — direct construction raises TypeError
    - Arguments are a read-only view; downstream code never re-validates

Design Decisions:
    - Module-private token over a "validated" flag: an unvalidated instance cannot exist
"""

from types import MappingProxyType
from typing import Any, Iterator, Mapping

_ISSUE_TOKEN = object()


class OperationInput(Mapping[str, Any]):
    """Validated, typed operation arguments."""

    __slots__ = ("_arguments", "sensitive_fields")

    def __init__(
        self,
        arguments: Mapping[str, Any],
        sensitive_fields: frozenset[str] = frozenset(),
        *,
        _token: object = None,
    ):
        if _token is not _ISSUE_TOKEN:
            raise TypeError(
                "OperationInput can only be created by the validator",
            )
        self._arguments = MappingProxyType(dict(arguments))
        self.sensitive_fields = frozenset(sensitive_fields)

    def __getitem__(self, key: str) -> Any:
        return self._arguments[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._arguments)

    def __len__(self) -> int:
        return len(self._arguments)

    def __repr__(self) -> str:
        shown = {
            k: ("***" if k in self.sensitive_fields else v)
            for k, v in self._arguments.items()
        }
        return f"OperationInput({shown!r})"


def issue_operation_input(
    arguments: Mapping[str, Any], sensitive_fields: frozenset[str],
) -> OperationInput:
    """Construct an OperationInput. Callers outside enforce_rules must not use this."""
    return OperationInput(arguments, sensitive_fields, _token=_ISSUE_TOKEN)
