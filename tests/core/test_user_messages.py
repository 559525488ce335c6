"""User Messages — tests for stable, non-leaking outcome text.

Tests cover:
    - Every FailureKind has a message in every Locale
    - Messages never contain the internal message or details
    - Same outcome → same string (idempotent rendering)
    - Success(False) renders a rejection, not a completion message
"""

from vetpipe.core.domain_types import FailureKind, Locale
from vetpipe.core.outcome import Failure, Success
from vetpipe.core.user_messages import get_failure_message, to_user_message


def test_every_kind_covered_in_every_locale():
    for locale in Locale:
        messages = {get_failure_message(locale, kind) for kind in FailureKind}
        assert len(messages) == len(FailureKind)
        assert all(m for m in messages)


def test_failure_message_does_not_leak_internals():
    failure = Failure(
        FailureKind.MALFORMED,
        "Source '/etc/app/secret.json' is malformed: invalid JSON at line 3",
        cause=ValueError("boom"),
        details={"source_id": "/etc/app/secret.json"},
    )
    text = to_user_message(failure)
    assert "/etc/app" not in text
    assert "line 3" not in text
    assert "boom" not in text


def test_rendering_is_idempotent():
    failure = Failure(FailureKind.DEPENDENCY_UNAVAILABLE, "store down")
    assert to_user_message(failure) == to_user_message(failure)
    success = Success(5.0)
    assert to_user_message(success) == to_user_message(success)


def test_success_message_does_not_include_value():
    assert "5.0" not in to_user_message(Success(5.0))


def test_locale_selects_table():
    failure = Failure(FailureKind.NOT_FOUND, "x")
    assert to_user_message(failure, Locale.EN) != to_user_message(failure, Locale.PT_BR)


def test_negative_success_renders_rejection():
    rejected = to_user_message(Success(False))
    assert rejected != to_user_message(Success(True))
    assert "not accepted" in rejected
    assert to_user_message(Success(False), Locale.PT_BR) != rejected


def test_falsy_non_boolean_success_is_a_completion():
    assert to_user_message(Success(0)) == to_user_message(Success(5.0))
