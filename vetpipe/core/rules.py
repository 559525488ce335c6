"""Validation Rules — declarative descriptors interpreted by the fixed check loop.

Invariants:
    - RuleSet preserves declaration order — the order rules are checked in
    - Field names are unique within a RuleSet
    - Constraint names are resolved when the descriptor is parsed, never at check time
    - Constraint reasons never interpolate the checked value

Design Decisions:
    - Pydantic models for the external descriptor shape, frozen dataclasses internally:
      the descriptor is validated once, the check loop only sees resolved rules
    - Parameterized names ("min_length:3") over nested dicts: descriptors stay one-liners
    - Extra constraints passed per RuleSet, no module-level registry to mutate
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sized

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

from vetpipe.core.domain_types import FieldType


@dataclass(frozen=True)
class Constraint:
    """Named domain predicate. `predicate(value)` returns True when satisfied."""
    name: str
    predicate: Callable[[Any], bool]
    reason: str


@dataclass(frozen=True)
class FieldRule:
    """One field's requirements: presence, type, then constraints in order."""
    name: str
    type: FieldType = FieldType.ANY
    required: bool = True
    sensitive: bool = False
    constraints: tuple[Constraint, ...] = ()


@dataclass(frozen=True)
class RuleSet:
    """Ordered collection of FieldRules.

    passthrough=True keeps undeclared config keys in the OperationInput;
    otherwise only declared fields survive validation.
    """
    rules: tuple[FieldRule, ...] = field(default_factory=tuple)
    passthrough: bool = False

    def __post_init__(self):
        names = [r.name for r in self.rules]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field rules: {duplicates}")

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def field_names(self) -> list[str]:
        return [r.name for r in self.rules]

    @property
    def sensitive_fields(self) -> frozenset[str]:
        return frozenset(r.name for r in self.rules if r.sensitive)

    @classmethod
    def of(cls, *rules: FieldRule, passthrough: bool = False) -> "RuleSet":
        return cls(tuple(rules), passthrough=passthrough)

    @classmethod
    def from_descriptor(
        cls,
        descriptor: Mapping[str, Mapping[str, Any]],
        extra_constraints: Mapping[str, Constraint] | None = None,
        passthrough: bool = False,
    ) -> "RuleSet":
        """Build from {field: {"type", "constraints", "required", "sensitive"}}.

        Raises pydantic.ValidationError on an unknown type or constraint name.
        """
        extra = dict(extra_constraints or {})
        rules = []
        for name, spec in descriptor.items():
            parsed = FieldRuleSpec.model_validate(
                dict(spec), context={"extra_constraints": extra},
            )
            rules.append(FieldRule(
                name=name,
                type=parsed.type,
                required=parsed.required,
                sensitive=parsed.sensitive,
                constraints=tuple(
                    resolve_constraint(c, extra) for c in parsed.constraints
                ),
            ))
        return cls(tuple(rules), passthrough=passthrough)


# ─── Built-in constraints ──────────────────────────────────────

def _non_empty(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, Sized):
        return len(value) > 0
    return value is not None


_SIMPLE_CONSTRAINTS: dict[str, Constraint] = {
    "non_zero": Constraint("non_zero", lambda v: v != 0, "must not be zero"),
    "non_empty": Constraint("non_empty", _non_empty, "must not be empty"),
    "positive": Constraint("positive", lambda v: v > 0, "must be greater than zero"),
    "non_negative": Constraint(
        "non_negative", lambda v: v >= 0, "must not be negative",
    ),
}


def _min_length(arg: str) -> Constraint:
    n = int(arg)
    return Constraint(f"min_length:{n}", lambda v: len(v) >= n, f"must have at least {n} characters")


def _max_length(arg: str) -> Constraint:
    n = int(arg)
    return Constraint(f"max_length:{n}", lambda v: len(v) <= n, f"must have at most {n} characters")


def _one_of(arg: str) -> Constraint:
    options = tuple(o for o in arg.split("|") if o)
    if not options:
        raise ValueError("one_of needs at least one option")
    return Constraint(
        f"one_of:{arg}", lambda v: str(v) in options,
        f"must be one of: {', '.join(options)}",
    )


def _pattern(arg: str) -> Constraint:
    compiled = re.compile(arg)
    return Constraint(
        f"pattern:{arg}", lambda v: compiled.fullmatch(str(v)) is not None,
        "does not match the required format",
    )


_PARAMETERIZED_CONSTRAINTS: dict[str, Callable[[str], Constraint]] = {
    "min_length": _min_length,
    "max_length": _max_length,
    "one_of": _one_of,
    "pattern": _pattern,
}


def resolve_constraint(
    name: str, extra: Mapping[str, Constraint] | None = None,
) -> Constraint:
    """Resolve a constraint name (optionally "name:arg"). Raises ValueError if unknown."""
    if extra and name in extra:
        return extra[name]
    if name in _SIMPLE_CONSTRAINTS:
        return _SIMPLE_CONSTRAINTS[name]
    base, sep, arg = name.partition(":")
    if sep and base in _PARAMETERIZED_CONSTRAINTS:
        try:
            return _PARAMETERIZED_CONSTRAINTS[base](arg)
        except (ValueError, re.error) as e:
            raise ValueError(f"Invalid argument for constraint '{base}': {e}") from e
    raise ValueError(f"Unknown constraint '{name}'")


def builtin(name: str) -> Constraint:
    """Shorthand for building FieldRules in code: builtin("non_zero")."""
    return resolve_constraint(name)


# ─── Descriptor schema ─────────────────────────────────────────

class FieldRuleSpec(BaseModel):
    """External descriptor for one field — validated before any check runs."""
    model_config = ConfigDict(extra="forbid")

    type: FieldType = FieldType.ANY
    required: bool = True
    sensitive: bool = False
    constraints: list[str] = []
    constraint: str | None = None

    @model_validator(mode="after")
    def merge_single_constraint(self) -> "FieldRuleSpec":
        if self.constraint:
            self.constraints = [self.constraint, *self.constraints]
            self.constraint = None
        return self

    @field_validator("constraints", "constraint")
    @classmethod
    def constraint_names_known(cls, v, info: ValidationInfo):
        extra = (info.context or {}).get("extra_constraints")
        for name in ([v] if isinstance(v, str) else v or []):
            resolve_constraint(name, extra)
        return v
