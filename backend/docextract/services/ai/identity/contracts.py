"""Identity scope contracts: key fields from an identity card (e.g. Aadhaar)."""

from __future__ import annotations

from pydantic import Field, model_validator

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, InputText, OutputContract
from ..common.registry import Operation


class ScanIdInput(InputContract):
    photo_data_uri: DataUri | None = Field(default=None, description="Photo of the identity card.")
    text: InputText | None = Field(default=None, description="Raw text read from the identity card.")

    @model_validator(mode="after")
    def _require_document(self):
        if self.photo_data_uri is None and self.text is None:
            raise ValueError("Missing photoDataUri or text")
        return self


class IdentityData(OutputContract):
    name: str = Field(description="The full name of the person as it appears on the card.")
    address: str = Field(description="The full residential address, including pin code.")
    id_number: str = Field(description="The identity number, e.g. the 12-digit Aadhaar number.")
    dob: str | None = Field(default=None, description="Date of birth as printed on the card.")
    gender: str | None = Field(default=None, description="Gender as printed on the card, e.g. MALE or FEMALE.")


SCAN_ID_PROMPT = """You are an expert in extracting information from Indian identity documents.

Read the identity card below and extract the person's full name, residential address and \
identity number. Also extract the date of birth and gender when they are printed on the card.

Card:
---
{photo_data_uri}{text}
---"""


SCAN_ID = Operation(
    name="scan_id",
    input_model=ScanIdInput,
    output_model=IdentityData,
    template=SCAN_ID_PROMPT,
    temperature=0.0,
    description="Extract name, address and identity number from an identity card.",
)
