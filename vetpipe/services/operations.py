"""Operations — the business computations run on a validated OperationInput.

Invariants:
    - Every operation declares the RuleSet its input must satisfy (operation.rules)
    - execute() receives only OperationInput — never raw config — and re-checks nothing
    - Divide never sees b == 0: the non_zero rule rejects it during validation
    - Authenticate: match → True, mismatch or unknown user → False,
      store transport failure → DependencyUnavailableError
    - ProcessGeneric: any exception from the transform → OperationFailedError
    - Operations own no persistent state; collaborators are injected

Design Decisions:
    - Uniform async execute(): the credential lookup is the one suspension point,
      the other operations are async only to share the dispatch shape
    - Divide does not catch ZeroDivisionError: reaching it is a validator bug, not an outcome
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Protocol, Union

from vetpipe.core.boundary_protocols import CredentialStore, CredentialStoreUnavailable
from vetpipe.core.credentials import verify_credential
from vetpipe.core.domain_types import FieldType
from vetpipe.core.errors import DependencyUnavailableError, OperationFailedError
from vetpipe.core.operation_input import OperationInput
from vetpipe.core.rules import FieldRule, RuleSet, builtin

logger = logging.getLogger(__name__)

Transform = Callable[[OperationInput], Union[Any, Awaitable[Any]]]


class Operation(Protocol):
    """Structural contract for anything the pipeline can execute."""
    name: str
    rules: RuleSet

    async def execute(self, op_input: OperationInput) -> Any: ...


class Divide:
    """a / b with a non-zero denominator guaranteed upstream."""

    name = "divide"
    rules = RuleSet.of(
        FieldRule("a", FieldType.NUMBER),
        FieldRule("b", FieldType.NUMBER, constraints=(builtin("non_zero"),)),
    )

    async def execute(self, op_input: OperationInput) -> float:
        return op_input["a"] / op_input["b"]


class Authenticate:
    """Check a username/credential pair against an injected CredentialStore."""

    name = "authenticate"
    rules = RuleSet.of(
        FieldRule("username", FieldType.STRING, constraints=(builtin("non_empty"),)),
        FieldRule(
            "credential", FieldType.STRING, sensitive=True,
            constraints=(builtin("non_empty"),),
        ),
    )

    # Transport-level failures of a store backend
    UNAVAILABLE_ERRORS = (CredentialStoreUnavailable, ConnectionError, TimeoutError, OSError)

    def __init__(self, store: CredentialStore):
        self._store = store

    async def execute(self, op_input: OperationInput) -> bool:
        username = op_input["username"]
        try:
            stored = await self._store.lookup(username)
        except self.UNAVAILABLE_ERRORS as e:
            raise DependencyUnavailableError(
                "credential_store", f"unavailable ({type(e).__name__})",
            ) from e

        if stored is None:
            logger.info(f"Authentication failed: user '{username}' not found")
            return False
        return verify_credential(op_input["credential"], stored)


class ProcessGeneric:
    """Run a caller-defined transform on validated data.

    The transform may be sync or async. Whatever it raises becomes an
    OperationFailedError; it never escapes this stage as-is.
    """

    def __init__(
        self,
        transform: Transform,
        rules: RuleSet | None = None,
        name: str = "process",
    ):
        self._transform = transform
        self.rules = rules if rules is not None else RuleSet(passthrough=True)
        self.name = name

    async def execute(self, op_input: OperationInput) -> Any:
        try:
            result = self._transform(op_input)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise OperationFailedError(self.name, f"{type(e).__name__}: {e}") from e
        return result
