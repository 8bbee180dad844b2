"""Extraction endpoints: one POST route per registered operation."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from docextract.core.dependencies import get_pipeline
from docextract.services.ai.common.errors import STAGE_INPUT, ExtractionError, InvalidInput
from docextract.services.ai.common.pipeline import ExtractionPipeline
from docextract.services.ai.operations import get_registry

logger = logging.getLogger(__name__)

router = APIRouter()

# Maps URL path to operation name. ``/extract-text`` has its own handler below.
OPERATION_ROUTES: dict[str, str] = {
    "/extract-billing": "extract_billing",
    "/scan-id": "scan_id",
    "/scan-payment": "scan_payment",
    "/extract-payment-details": "extract_payment_details",
    "/extract-transaction-id": "extract_transaction_id",
    "/extract-dynamic-form": "extract_dynamic_form",
    "/extract-medical": "extract_medical",
    "/extract-education": "extract_education",
    "/create-lead-story": "create_lead_story",
    "/create-education-story": "create_education_story",
}


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parse the request body; anything but a JSON object is an input-stage error."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ExtractionError(STAGE_INPUT, InvalidInput("Request body must be valid JSON")) from exc
    if not isinstance(body, dict):
        raise ExtractionError(STAGE_INPUT, InvalidInput("Request body must be a JSON object"))
    return body


def _make_endpoint(operation_name: str):
    async def endpoint(
        request: Request,
        pipeline: ExtractionPipeline = Depends(get_pipeline),
    ) -> JSONResponse:
        body = await read_json_body(request)
        run = await pipeline.execute(operation_name, body)
        logger.info(
            "%s ok via %s:%s in %d attempt(s), %.0f ms",
            operation_name,
            run.provider_result.provider,
            run.provider_result.model,
            run.attempts,
            run.total_latency_ms,
        )
        return JSONResponse(run.output.to_wire())

    endpoint.__name__ = f"{operation_name}_endpoint"
    return endpoint


for _path, _operation_name in OPERATION_ROUTES.items():
    router.add_api_route(
        _path,
        _make_endpoint(_operation_name),
        methods=["POST"],
        summary=get_registry().lookup(_operation_name).description,
        name=_operation_name,
    )


@router.post("/extract-text", summary="Read the plain text of a document")
async def extract_text_endpoint(
    request: Request,
    pipeline: ExtractionPipeline = Depends(get_pipeline),
) -> JSONResponse:
    from docextract.services.ai.text_extract.service import extract_and_correct_text

    body = await read_json_body(request)
    result = await extract_and_correct_text(body, pipeline)
    return JSONResponse(result.to_wire())


class OperationInfo(BaseModel):
    name: str
    description: str
    output_schema: dict[str, Any]


@router.get("/operations", response_model=list[OperationInfo])
def list_operations() -> list[OperationInfo]:
    registry = get_registry()
    return [
        OperationInfo(
            name=name,
            description=registry.lookup(name).description,
            output_schema=registry.lookup(name).output_model.model_json_schema(by_alias=True),
        )
        for name in registry.names()
    ]
