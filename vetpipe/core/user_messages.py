"""User Messages — stable, non-leaking text for each outcome, per locale.

Invariants:
    - All strings are pure data (no IO, no computation beyond lookup)
    - Every FailureKind has an entry in every Locale
    - Messages never interpolate Failure.message, details or cause
    - Same outcome + locale → same string, every call
    - Success(False), a negative answer such as a rejected login, has its own string

Design Decisions:
    - Fixed table per kind over formatting the internal message: the internal
      message may name fields or sources, the user string never does
"""

from vetpipe.core.domain_types import FailureKind, Locale
from vetpipe.core.outcome import Failure, Outcome


_SUCCESS_MESSAGE: dict[Locale, str] = {
    Locale.EN: "The operation completed successfully.",
    Locale.PT_BR: "A operacao foi concluida com sucesso.",
}

_REJECTED_MESSAGE: dict[Locale, str] = {
    Locale.EN: "The request was not accepted. Check your username and password.",
    Locale.PT_BR: "A solicitacao nao foi aceita. Verifique seu usuario e senha.",
}


_FAILURE_MESSAGES: dict[Locale, dict[FailureKind, str]] = {
    Locale.EN: {
        FailureKind.NOT_FOUND: (
            "The requested configuration could not be found."
        ),
        FailureKind.MALFORMED: (
            "The configuration could not be read because it is not valid."
        ),
        FailureKind.MISSING_FIELD: (
            "Some required information is missing. Please check your input."
        ),
        FailureKind.TYPE_MISMATCH: (
            "Some information has the wrong format. Please check your input."
        ),
        FailureKind.INVALID_VALUE: (
            "Some information is not allowed. Please check your input."
        ),
        FailureKind.DEPENDENCY_UNAVAILABLE: (
            "A required service is temporarily unavailable. Please try again later."
        ),
        FailureKind.OPERATION_FAILED: (
            "The operation could not be completed."
        ),
    },
    Locale.PT_BR: {
        FailureKind.NOT_FOUND: (
            "A configuracao solicitada nao foi encontrada."
        ),
        FailureKind.MALFORMED: (
            "A configuracao nao pode ser lida porque nao e valida."
        ),
        FailureKind.MISSING_FIELD: (
            "Faltam informacoes obrigatorias. Verifique os dados informados."
        ),
        FailureKind.TYPE_MISMATCH: (
            "Algumas informacoes estao em formato incorreto. Verifique os dados informados."
        ),
        FailureKind.INVALID_VALUE: (
            "Algumas informacoes nao sao permitidas. Verifique os dados informados."
        ),
        FailureKind.DEPENDENCY_UNAVAILABLE: (
            "Um servico necessario esta temporariamente indisponivel. Tente novamente mais tarde."
        ),
        FailureKind.OPERATION_FAILED: (
            "Nao foi possivel concluir a operacao."
        ),
    },
}


def get_failure_message(locale: Locale, kind: FailureKind) -> str:
    return _FAILURE_MESSAGES[locale][kind]


def to_user_message(outcome: Outcome, locale: Locale = Locale.EN) -> str:
    """Render an outcome for end users. Never exposes internal detail."""
    if isinstance(outcome, Failure):
        return get_failure_message(locale, outcome.kind)
    if outcome.value is False:
        return _REJECTED_MESSAGE[locale]
    return _SUCCESS_MESSAGE[locale]
