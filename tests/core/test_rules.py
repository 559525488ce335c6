"""Validation Rules — tests for rule declarations and descriptor parsing.

Tests cover:
    - RuleSet keeps declaration order and rejects duplicate field names
    - Descriptors parse into FieldRules (type, required, sensitive, constraints)
    - "constraint" shorthand, parameterized constraints, extra constraints
    - Unknown types / constraints / keys rejected at parse time
"""

import pytest
from pydantic import ValidationError

from vetpipe.core.domain_types import FieldType
from vetpipe.core.rules import (
    Constraint,
    FieldRule,
    RuleSet,
    builtin,
    resolve_constraint,
)


# ─── RuleSet ─────────────────────────────────────────────────────

def test_ruleset_preserves_declaration_order():
    rules = RuleSet.of(FieldRule("z"), FieldRule("a"), FieldRule("m"))
    assert rules.field_names == ["z", "a", "m"]


def test_ruleset_rejects_duplicate_field_names():
    with pytest.raises(ValueError, match="Duplicate"):
        RuleSet.of(FieldRule("a"), FieldRule("a"))


def test_ruleset_reports_sensitive_fields():
    rules = RuleSet.of(FieldRule("user"), FieldRule("pw", sensitive=True))
    assert rules.sensitive_fields == frozenset({"pw"})


# ─── from_descriptor ─────────────────────────────────────────────

def test_descriptor_builds_rules_in_order():
    rules = RuleSet.from_descriptor({
        "numerator": {"type": "number"},
        "denominator": {"type": "number", "constraint": "non_zero"},
    })
    assert rules.field_names == ["numerator", "denominator"]
    denominator = rules.rules[1]
    assert denominator.type is FieldType.NUMBER
    assert [c.name for c in denominator.constraints] == ["non_zero"]


def test_descriptor_defaults():
    rule = RuleSet.from_descriptor({"x": {}}).rules[0]
    assert rule.type is FieldType.ANY
    assert rule.required is True
    assert rule.sensitive is False
    assert rule.constraints == ()


def test_descriptor_shorthand_precedes_constraint_list():
    rule = RuleSet.from_descriptor({
        "name": {
            "type": "string",
            "constraint": "non_empty",
            "constraints": ["max_length:5"],
        },
    }).rules[0]
    assert [c.name for c in rule.constraints] == ["non_empty", "max_length:5"]


def test_descriptor_accepts_extra_constraints():
    even = Constraint("even", lambda v: v % 2 == 0, "must be even")
    rule = RuleSet.from_descriptor(
        {"n": {"type": "integer", "constraints": ["even"]}},
        extra_constraints={"even": even},
    ).rules[0]
    assert rule.constraints == (even,)


def test_descriptor_rejects_unknown_type():
    with pytest.raises(ValidationError):
        RuleSet.from_descriptor({"x": {"type": "decimal"}})


def test_descriptor_rejects_unknown_constraint():
    with pytest.raises(ValidationError):
        RuleSet.from_descriptor({"x": {"constraints": ["prime"]}})


def test_descriptor_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        RuleSet.from_descriptor({"x": {"tpye": "string"}})


def test_descriptor_passthrough_flag():
    assert RuleSet.from_descriptor({}, passthrough=True).passthrough is True


# ─── constraints ─────────────────────────────────────────────────

def test_parameterized_constraints():
    assert builtin("min_length:2").predicate("ab")
    assert not builtin("min_length:2").predicate("a")
    assert builtin("max_length:2").predicate("ab")
    assert not builtin("max_length:2").predicate("abc")
    assert builtin("one_of:red|green").predicate("green")
    assert not builtin("one_of:red|green").predicate("blue")
    assert builtin("pattern:[a-z]+").predicate("abc")
    assert not builtin("pattern:[a-z]+").predicate("abc1")


def test_non_empty_on_collections():
    non_empty = builtin("non_empty")
    assert non_empty.predicate({"k": 1})
    assert not non_empty.predicate(())


@pytest.mark.parametrize("name", ["min_length:x", "pattern:(", "one_of:", "nope"])
def test_bad_constraint_names_raise(name):
    with pytest.raises(ValueError):
        resolve_constraint(name)


def test_constraint_reasons_do_not_interpolate_values():
    reason = builtin("pattern:secret-[0-9]+").reason
    assert "secret" not in reason
