"""Reporter — final stage: emits a diagnostic record for every outcome and renders it for users.

Invariants:
    - report() returns the outcome it was given, unchanged
    - Every Failure emits one record at its kind's level with "<kind>: <message>"
      and the kind itself on the record
    - Every Success emits one INFO record naming the value's type, never the value
    - Emitted text is redacted: explicit secrets and sensitive key/value pairs are masked
    - Not deduplicated: two report() calls emit two records
    - to_user_message() never includes the internal message, details or cause

Design Decisions:
    - Sink injected per Reporter: no ambient global logging state in the contract
    - Severity derived from the kind (severity_for), so a Failure built anywhere reports the same way
"""

from typing import Iterable

from vetpipe.core.boundary_protocols import DiagnosticSink
from vetpipe.core.domain_types import DiagnosticLevel, Locale, Stage
from vetpipe.core.errors import severity_for
from vetpipe.core.outcome import Failure, Outcome
from vetpipe.core.redaction import DEFAULT_MASK, DEFAULT_SENSITIVE_KEYS, redact
from vetpipe.core.user_messages import to_user_message
from vetpipe.services.diagnostic_emitter import emit_record


class Reporter:
    """Translates outcomes into diagnostic records and user-facing strings."""

    def __init__(
        self,
        sink: DiagnosticSink,
        locale: Locale = Locale.EN,
        sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS,
        mask: str = DEFAULT_MASK,
    ):
        self._sink = sink
        self._locale = locale
        self._sensitive_keys = tuple(sensitive_keys)
        self._mask = mask

    @property
    def sensitive_keys(self) -> tuple[str, ...]:
        return self._sensitive_keys

    def redact(self, text: str, secrets: Iterable[str] = ()) -> str:
        return redact(text, secrets, self._sensitive_keys, self._mask)

    def report(self, outcome: Outcome, secrets: Iterable[str] = ()) -> Outcome:
        """Emit the outcome's diagnostic record and hand the outcome back."""
        if isinstance(outcome, Failure):
            level = severity_for(outcome.kind).level
            kind = outcome.kind
            message = self.redact(f"{outcome.kind.value}: {outcome.message}", secrets)
        else:
            level = DiagnosticLevel.INFO
            kind = None
            message = f"success: {type(outcome.value).__name__}"
        emit_record(self._sink, Stage.REPORT, level, message, failure_kind=kind)
        return outcome

    def to_user_message(self, outcome: Outcome) -> str:
        return to_user_message(outcome, self._locale)
