"""AI audit: one structured log record per pipeline run."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from docextract.core.config import get_settings

from .providers.base import ProviderResult

logger = logging.getLogger("docextract.audit")

# Operation-dependent audit actions. Falls back to "AI_RUN" for unknown scopes.
SCOPE_ACTIONS: dict[str, str] = {
    "extract_billing": "AI_BILLING_EXTRACTED",
    "scan_id": "AI_IDENTITY_EXTRACTED",
    "scan_payment": "AI_PAYMENT_SCANNED",
    "extract_payment_details": "AI_PAYMENT_SCANNED",
    "extract_transaction_id": "AI_PAYMENT_SCANNED",
    "create_lead_story": "AI_STORY_CREATED",
    "create_education_story": "AI_STORY_CREATED",
}


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


def build_audit_record(
    *,
    scope: str,
    prompt_text: str,
    provider_result: ProviderResult | None,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the audit metadata for a run.

    PII: prompt and response are always hashed; raw text is only included
    when ``AI_DEBUG_STORE_RAW=true``.  Output values are never included,
    only the names of the populated fields.
    """
    settings = get_settings()

    record: dict[str, Any] = {
        "action": SCOPE_ACTIONS.get(scope, "AI_RUN"),
        "scope": scope,
        "prompt_hash": _sha256(prompt_text),
        "output_fields": sorted(parsed_output) if parsed_output else [],
    }

    if provider_result is not None:
        record.update(
            {
                "provider": provider_result.provider,
                "model": provider_result.model,
                "prompt_tokens": provider_result.prompt_tokens,
                "completion_tokens": provider_result.completion_tokens,
                "latency_ms": provider_result.latency_ms,
                "response_hash": _sha256(provider_result.raw_text),
            }
        )

    if settings.ai_debug_store_raw:
        record["prompt_raw"] = prompt_text
        if provider_result is not None:
            record["response_raw"] = provider_result.raw_text

    if extra_meta:
        record.update(extra_meta)

    return record


def log_ai_run(
    *,
    scope: str,
    prompt_text: str,
    provider_result: ProviderResult | None,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    record = build_audit_record(
        scope=scope,
        prompt_text=prompt_text,
        provider_result=provider_result,
        parsed_output=parsed_output,
        extra_meta=extra_meta,
    )
    logger.info("%s %s", record["action"], scope, extra={"audit": record})
    return record
