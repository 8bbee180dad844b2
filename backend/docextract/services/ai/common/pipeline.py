"""Flow orchestrator: lookup, prompt, invoke (with retry), normalize, validate."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from docextract.core.config import get_settings

from . import router as ai_router
from .audit import log_ai_run
from .contracts import InputContract, OutputContract
from .errors import (
    STAGE_INPUT,
    STAGE_INVOCATION,
    STAGE_NORMALIZATION,
    STAGE_VALIDATION,
    ExtractionError,
    InvalidInput,
    InvalidResponse,
    NormalizationError,
    PipelineError,
    ProviderError,
    RetriesExhausted,
    SchemaViolation,
    UnknownOperation,
)
from .invoker import ModelInvoker
from .json_tools import normalize
from .prompting import Prompt, build_prompt
from .providers.base import ProviderResult
from .registry import Operation, OperationRegistry
from .retry import RetryController, RetryPolicy
from .validation import validate_output

logger = logging.getLogger(__name__)

InvokerFactory = Callable[[Operation], ModelInvoker]


@dataclass(frozen=True)
class ExtractionRun:
    """Successful pipeline result including metadata."""

    operation: str
    output: OutputContract
    provider_result: ProviderResult
    attempts: int
    total_latency_ms: float


def default_invoker_factory(operation: Operation) -> ModelInvoker:
    config = ai_router.resolve(
        operation.name,
        default_model=operation.model,
        temperature=operation.temperature,
    )
    return ModelInvoker(config)


def default_retry_controller() -> RetryController:
    settings = get_settings()
    return RetryController(
        RetryPolicy(
            max_attempts=settings.ai_retry_max_attempts,
            delay_seconds=settings.ai_retry_delay_seconds,
        )
    )


class ExtractionPipeline:
    """Runs registered operations end to end.

    Every failure is raised as one ``ExtractionError`` tagged with the stage
    it happened in.  Only transient invocation failures are retried (by the
    injected ``RetryController``); malformed or invalid answers are not.
    """

    def __init__(
        self,
        registry: OperationRegistry,
        *,
        retry: RetryController | None = None,
        invoker_factory: InvokerFactory = default_invoker_factory,
    ) -> None:
        self.registry = registry
        self.retry = retry or default_retry_controller()
        self._invoker_factory = invoker_factory

    def _retry_for(self, operation: Operation) -> RetryController:
        if operation.retry_policy is not None:
            return self.retry.with_policy(operation.retry_policy)
        return self.retry

    async def execute(
        self,
        operation_name: str,
        payload: Mapping[str, Any] | InputContract,
    ) -> ExtractionRun:
        t0 = time.monotonic()

        # --- input ---
        try:
            operation = self.registry.lookup(operation_name)
            prompt = build_prompt(operation, payload)
        except (UnknownOperation, InvalidInput) as exc:
            logger.warning("%s: rejected input: %s", operation_name, exc)
            raise ExtractionError(STAGE_INPUT, exc) from exc

        # --- invocation ---
        invoker = self._invoker_factory(operation)
        try:
            outcome = await self._retry_for(operation).run(
                lambda: invoker.invoke(prompt, temperature=operation.temperature)
            )
        except (ProviderError, InvalidResponse, RetriesExhausted) as exc:
            self._fail(operation, prompt, None, STAGE_INVOCATION, exc)
            raise ExtractionError(STAGE_INVOCATION, exc) from exc

        result = outcome.value

        # --- normalization ---
        try:
            candidate = normalize(result, operation)
        except (NormalizationError, InvalidResponse) as exc:
            self._fail(operation, prompt, result, STAGE_NORMALIZATION, exc, attempts=outcome.attempts)
            raise ExtractionError(STAGE_NORMALIZATION, exc) from exc

        # --- validation ---
        try:
            output = validate_output(candidate, operation.output_model)
        except SchemaViolation as exc:
            self._fail(operation, prompt, result, STAGE_VALIDATION, exc, attempts=outcome.attempts)
            raise ExtractionError(STAGE_VALIDATION, exc) from exc

        total_ms = round((time.monotonic() - t0) * 1000, 2)
        log_ai_run(
            scope=operation.name,
            prompt_text=prompt.text,
            provider_result=result,
            parsed_output=output.to_wire(),
            extra_meta={
                "attempts": outcome.attempts,
                "artifact_count": len(prompt.artifacts),
                "total_latency_ms": total_ms,
            },
        )

        return ExtractionRun(
            operation=operation.name,
            output=output,
            provider_result=result,
            attempts=outcome.attempts,
            total_latency_ms=total_ms,
        )

    def _fail(
        self,
        operation: Operation,
        prompt: Prompt,
        result: ProviderResult | None,
        stage: str,
        exc: PipelineError,
        *,
        attempts: int | None = None,
    ) -> None:
        if attempts is None:
            attempts = exc.attempts if isinstance(exc, RetriesExhausted) else 1
        logger.warning("%s failed at %s stage: %s", operation.name, stage, exc)
        log_ai_run(
            scope=operation.name,
            prompt_text=prompt.text,
            provider_result=result,
            parsed_output=None,
            extra_meta={
                "attempts": attempts,
                "failed_stage": stage,
                "error": type(exc).__name__,
            },
        )
