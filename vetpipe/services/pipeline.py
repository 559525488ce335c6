"""Pipeline — load → validate → execute → report, one Outcome per invocation.

Invariants:
    - Every invocation ends in exactly one Reporter.report() call
    - A failing stage short-circuits the rest; its error becomes a Failure before reporting
    - No raw exception crosses the pipeline boundary: unexpected faults in execute
      become OperationFailed with a generic message (full traceback goes to the log only)
    - Failure messages are redacted against the invocation's sensitive values:
      fields the rules mark sensitive and values under sensitive-looking keys
    - No state shared between invocations — concurrent runs need no coordination

Design Decisions:
    - run_direct() still validates: direct arguments pass through the same RuleSet,
      so Divide(b=0) never reaches execute()
    - Stage tagged on the error context by the pipeline, not by the stages themselves
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping

from vetpipe.core.domain_types import Stage
from vetpipe.core.enforce_rules import check
from vetpipe.core.errors import OperationFailedError, PipelineError
from vetpipe.core.outcome import Outcome, Success
from vetpipe.core.redaction import sensitive_values
from vetpipe.core.structured_config import StructuredConfig
from vetpipe.services.config_loader import ConfigLoader
from vetpipe.services.operations import Operation
from vetpipe.services.reporter import Reporter

logger = logging.getLogger(__name__)


def _secret_values(
    config: Mapping[str, Any], operation: Operation, sensitive_keys: Iterable[str],
) -> list[str]:
    """Config values marked sensitive by the rules or stored under a sensitive-looking key."""
    marked = [
        str(config[name]) for name in operation.rules.sensitive_fields
        if name in config and config[name] is not None
    ]
    return marked + sensitive_values(config, sensitive_keys)


class Pipeline:
    """Orchestrates the stages for one operation at a time."""

    def __init__(self, loader: ConfigLoader, reporter: Reporter):
        self._loader = loader
        self._reporter = reporter

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    async def run(self, source_id: str, operation: Operation) -> Outcome:
        """Load source_id, validate it for the operation, execute, report."""
        try:
            config = self._loader.load(source_id)
        except PipelineError as e:
            return self._fail(e, Stage.LOAD)
        return await self._validate_and_execute(config, operation)

    async def run_direct(self, operation: Operation, /, **arguments: Any) -> Outcome:
        """Skip the loader: validate and execute caller-supplied arguments."""
        config = StructuredConfig(arguments)
        return await self._validate_and_execute(config, operation)

    def run_sync(self, source_id: str, operation: Operation) -> Outcome:
        """Blocking run() for hosts without a running event loop."""
        return asyncio.run(self.run(source_id, operation))

    async def _validate_and_execute(
        self, config: StructuredConfig, operation: Operation,
    ) -> Outcome:
        secrets = _secret_values(config, operation, self._reporter.sensitive_keys)

        try:
            op_input = check(config, operation.rules)
        except PipelineError as e:
            return self._fail(e, Stage.VALIDATE, secrets)
        logger.debug(
            f"Validated input for '{operation.name}'",
            extra={"stage": Stage.VALIDATE.value},
        )

        try:
            value = await operation.execute(op_input)
        except PipelineError as e:
            return self._fail(e, Stage.EXECUTE, secrets)
        except Exception as e:
            logger.error(
                f"Unexpected fault in operation '{operation.name}': {type(e).__name__}",
                extra={"stage": Stage.EXECUTE.value},
                exc_info=True,
            )
            error = OperationFailedError(operation.name, "unexpected internal error")
            error.__cause__ = e
            return self._fail(error, Stage.EXECUTE, secrets)
        logger.debug(
            f"Executed '{operation.name}'", extra={"stage": Stage.EXECUTE.value},
        )
        return self._reporter.report(Success(value))

    def _fail(
        self, error: PipelineError, stage: Stage, secrets: Iterable[str] = (),
    ) -> Outcome:
        secrets = list(secrets)
        error.context.stage = stage
        logger.debug(f"{stage.value} stage failed: {error.code}", extra=error.to_record())
        failure = error.to_failure(self._reporter.redact(error.message, secrets))
        return self._reporter.report(failure, secrets)
