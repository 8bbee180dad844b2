"""Text extraction scope contracts: plain OCR of a document, with optional user correction."""

from __future__ import annotations

from pydantic import Field

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, OutputContract
from ..common.registry import Operation


class ExtractTextInput(InputContract):
    photo_data_uri: DataUri = Field(description="Photo of a document or image.")
    user_correction: str | None = Field(default=None, description="User-corrected text, if any.")


class ExtractedText(OutputContract):
    extracted_text: str = Field(min_length=1, description="The text extracted from the document.")


EXTRACT_TEXT_PROMPT = """You are an OCR (Optical Character Recognition) expert.

Extract all text from the following image, preserving line breaks. Answer with the text only.

Image: {photo_data_uri}"""


EXTRACT_TEXT = Operation(
    name="extract_text",
    input_model=ExtractTextInput,
    output_model=ExtractedText,
    template=EXTRACT_TEXT_PROMPT,
    temperature=0.0,
    text_field="extracted_text",
    description="Read the plain text of a document.",
)
