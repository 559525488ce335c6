"""Rule Enforcement — the fixed validation loop over a declarative RuleSet.

Invariants:
    - check_* functions are PURE: no IO, no async, no side effects
    - check_* return a PipelineError on violation, None on success
    - Evaluation order: rules in declaration order; per rule presence → type → constraints
    - First violation wins — the same config and RuleSet always yield the same error
    - check() returns an OperationInput (declared fields only, unless passthrough), or raises

Design Decisions:
    - Return errors (not raise) from the per-rule checks: chained with `or`,
      first error wins; only check() raises
    - bool is rejected as number/integer: JSON true must not pass as 1
"""

from typing import Any, Mapping

from vetpipe.core.domain_types import FieldType
from vetpipe.core.errors import (
    InvalidValueError,
    MissingFieldError,
    PipelineError,
    TypeMismatchError,
)
from vetpipe.core.operation_input import OperationInput, issue_operation_input
from vetpipe.core.rules import FieldRule, RuleSet


def type_name(value: Any) -> str:
    """FieldType-style name of a value's type. Never includes the value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return FieldType.BOOLEAN.value
    if isinstance(value, int):
        return FieldType.INTEGER.value
    if isinstance(value, float):
        return FieldType.NUMBER.value
    if isinstance(value, str):
        return FieldType.STRING.value
    if isinstance(value, Mapping):
        return FieldType.MAPPING.value
    if isinstance(value, (list, tuple)):
        return FieldType.LIST.value
    return type(value).__name__


def matches_type(value: Any, expected: FieldType) -> bool:
    if expected is FieldType.ANY:
        return True
    if expected is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if expected is FieldType.NUMBER:
        return isinstance(value, (int, float))
    if expected is FieldType.INTEGER:
        return isinstance(value, int)
    if expected is FieldType.STRING:
        return isinstance(value, str)
    if expected is FieldType.MAPPING:
        return isinstance(value, Mapping)
    if expected is FieldType.LIST:
        return isinstance(value, (list, tuple))
    return False


def check_presence(config: Mapping[str, Any], rule: FieldRule) -> PipelineError | None:
    """Required fields must be present."""
    if rule.required and rule.name not in config:
        return MissingFieldError(rule.name)
    return None


def check_type(config: Mapping[str, Any], rule: FieldRule) -> PipelineError | None:
    """Present fields must match the declared FieldType."""
    value = config[rule.name]
    if not matches_type(value, rule.type):
        return TypeMismatchError(rule.name, rule.type.value, type_name(value))
    return None


def check_constraints(config: Mapping[str, Any], rule: FieldRule) -> PipelineError | None:
    """Constraints in declared order; first unsatisfied one wins."""
    value = config[rule.name]
    for constraint in rule.constraints:
        try:
            satisfied = constraint.predicate(value)
        except Exception:
            return InvalidValueError(
                rule.name,
                f"constraint '{constraint.name}' does not apply to {type_name(value)}",
            )
        if not satisfied:
            return InvalidValueError(rule.name, constraint.reason)
    return None


def check_field(config: Mapping[str, Any], rule: FieldRule) -> PipelineError | None:
    """Chain the checks for one rule. Absent optional fields pass."""
    if rule.name not in config:
        return check_presence(config, rule)
    return check_type(config, rule) or check_constraints(config, rule)


def first_violation(config: Mapping[str, Any], rules: RuleSet) -> PipelineError | None:
    """First violated rule in declaration order, or None."""
    for rule in rules:
        error = check_field(config, rule)
        if error is not None:
            return error
    return None


def check(config: Mapping[str, Any], rules: RuleSet) -> OperationInput:
    """Validate config against rules. Raises the first violation as PipelineError."""
    error = first_violation(config, rules)
    if error is not None:
        raise error
    if rules.passthrough:
        arguments = dict(config)
    else:
        arguments = {r.name: config[r.name] for r in rules if r.name in config}
    return issue_operation_input(arguments, rules.sensitive_fields)
