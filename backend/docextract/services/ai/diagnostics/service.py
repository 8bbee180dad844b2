"""Connectivity check: asks the configured model to answer with a fixed word."""

from __future__ import annotations

import logging

from ..common import router as ai_router
from ..common.errors import InvalidResponse, ProviderError, Unavailable
from ..common.prompting import Prompt
from .contracts import DiagnosticResult

logger = logging.getLogger(__name__)

DIAGNOSTIC_PROMPT = 'Reply with only the word: "OK"'


def _describe_provider_error(exc: ProviderError) -> str:
    if isinstance(exc, Unavailable):
        return f"The AI service is temporarily unavailable (HTTP {exc.status_code}). Try again later."
    if exc.status_code in (400, 401):
        return "The configured API key was rejected. Check the provider API key setting."
    if exc.status_code == 403:
        return "API permission denied. Ensure the model API is enabled for this project."
    if exc.status_code == 404:
        return "The model was not found. Check the configured model name."
    return f"The AI model returned an error: {exc}"


async def run_diagnostic_check(
    *,
    override_provider: str | None = None,
    override_model: str | None = None,
) -> DiagnosticResult:
    """Probe the configured provider. Never raises for provider failures."""
    config = ai_router.resolve(
        "diagnostics",
        temperature=0.0,
        override_provider=override_provider,
        override_model=override_model,
    )
    provider_name = config.provider.name

    try:
        result = await config.provider.generate(
            Prompt.from_text(DIAGNOSTIC_PROMPT),
            model=config.model,
            temperature=0.0,
            max_tokens=16,
            timeout_seconds=config.timeout_seconds,
        )
    except ProviderError as exc:
        logger.warning("Diagnostic check failed: %s", exc)
        return DiagnosticResult(
            ok=False,
            message=_describe_provider_error(exc),
            provider=provider_name,
            model=config.model,
        )
    except InvalidResponse as exc:
        logger.warning("Diagnostic check got no usable answer: %s", exc)
        return DiagnosticResult(
            ok=False,
            message=f"The AI model returned no usable answer: {exc}",
            provider=provider_name,
            model=config.model,
        )

    text = result.raw_text.strip().strip('"').strip(".")
    if text.upper() == "OK":
        return DiagnosticResult(
            ok=True,
            message=f"Successfully received a valid response from {result.provider}:{result.model}.",
            provider=result.provider,
            model=result.model,
            latency_ms=result.latency_ms,
        )
    return DiagnosticResult(
        ok=False,
        message=f"Received an unexpected response: {result.raw_text.strip()[:80]!r}",
        provider=result.provider,
        model=result.model,
        latency_ms=result.latency_ms,
    )
