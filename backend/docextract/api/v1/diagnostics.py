"""Diagnostics endpoint: model connectivity probe."""

from __future__ import annotations

from fastapi import APIRouter

from docextract.services.ai.diagnostics.contracts import DiagnosticResult

router = APIRouter()


@router.post(
    "/run-diagnostic-check",
    response_model=DiagnosticResult,
    summary="Check connectivity to the configured AI model",
)
async def run_diagnostic_check_endpoint(
    override_provider: str | None = None,
    override_model: str | None = None,
) -> DiagnosticResult:
    from docextract.services.ai.diagnostics.service import run_diagnostic_check

    return await run_diagnostic_check(
        override_provider=override_provider,
        override_model=override_model,
    )
