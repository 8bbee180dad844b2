"""Error taxonomy for the extraction pipeline.

Every stage raises a subclass of :class:`PipelineError`.  The orchestrator
wraps whatever escaped a stage into a single :class:`ExtractionError` tagged
with the stage name, which is what callers (and the HTTP layer) see.
"""

from __future__ import annotations

from typing import Any

STAGE_INPUT = "input"
STAGE_INVOCATION = "invocation"
STAGE_NORMALIZATION = "normalization"
STAGE_VALIDATION = "validation"

STAGES = frozenset({STAGE_INPUT, STAGE_INVOCATION, STAGE_NORMALIZATION, STAGE_VALIDATION})

UNUSABLE_OUTPUT_MESSAGE = "The AI model did not return usable output"


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidInput(PipelineError):
    """Caller-supplied input does not satisfy the operation's input schema."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class UnknownOperation(PipelineError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation {name!r}", {"operation": name})
        self.name = name


# --- Invocation ---


class ProviderError(PipelineError):
    """Remote model call failed in a way that retrying will not fix."""

    def __init__(self, message: str, *, provider: str = "", status_code: int | None = None) -> None:
        details: dict[str, Any] = {"provider": provider}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.provider = provider
        self.status_code = status_code


class Unavailable(ProviderError):
    """Transient server-side failure (e.g. HTTP 503); retryable."""


class InvalidResponse(PipelineError):
    """The model answered but returned no usable content."""


class RetriesExhausted(PipelineError):
    def __init__(self, attempts: int, last_error: Exception) -> None:
        super().__init__(
            f"Model unavailable after {attempts} attempts: {last_error}",
            {"attempts": attempts},
        )
        self.attempts = attempts
        self.last_error = last_error


# --- Normalization ---


class NormalizationError(PipelineError):
    pass


class NoJsonFound(NormalizationError):
    def __init__(self) -> None:
        super().__init__("No JSON object found in model response")


class MalformedJson(NormalizationError):
    pass


# --- Validation ---


class SchemaViolation(PipelineError):
    def __init__(self, field_path: str, reason: str = "") -> None:
        message = f"Field {field_path!r} does not match the output schema"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"field": field_path})
        self.field_path = field_path
        self.reason = reason


class ExtractionError(Exception):
    """Single classified failure returned to callers of the pipeline."""

    def __init__(self, stage: str, cause: PipelineError) -> None:
        if stage not in STAGES:
            msg = f"Unknown stage {stage!r}"
            raise ValueError(msg)
        super().__init__(f"[{stage}] {cause}")
        self.stage = stage
        self.cause = cause

    @property
    def status_code(self) -> int:
        if isinstance(self.cause, InvalidInput):
            return 400
        return 500

    @property
    def public_message(self) -> str:
        """Message safe to show to the caller.

        Model output never leaks: unusable-output errors collapse into one
        message and schema violations only name the offending field.
        """
        cause = self.cause
        if isinstance(cause, (InvalidResponse, NormalizationError)):
            return UNUSABLE_OUTPUT_MESSAGE
        if isinstance(cause, SchemaViolation):
            return f"The AI model returned data that failed validation at field {cause.field_path!r}"
        if isinstance(cause, RetriesExhausted):
            return "The AI model is temporarily unavailable, please try again later"
        if isinstance(cause, ProviderError):
            return "The AI model request failed"
        return cause.message
