"""Text extraction service: a user correction replaces the model's reading."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..common.errors import STAGE_INPUT, ExtractionError, InvalidInput
from ..common.pipeline import ExtractionPipeline
from ..common.prompting import validate_input
from .contracts import EXTRACT_TEXT, ExtractedText, ExtractTextInput

logger = logging.getLogger(__name__)


async def extract_and_correct_text(
    payload: Mapping[str, Any] | ExtractTextInput,
    pipeline: ExtractionPipeline,
) -> ExtractedText:
    """Return the document text, or the caller's correction without calling the model."""
    try:
        request = validate_input(EXTRACT_TEXT, payload)
    except InvalidInput as exc:
        raise ExtractionError(STAGE_INPUT, exc) from exc

    if request.user_correction and request.user_correction.strip():
        logger.info("extract_text: using user correction (%d chars)", len(request.user_correction))
        return ExtractedText(extracted_text=request.user_correction)

    run = await pipeline.execute(EXTRACT_TEXT.name, request)
    return run.output
