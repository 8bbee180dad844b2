"""Billing scope contracts: vendor, dates, amounts and purchased line-items from a bill."""

from __future__ import annotations

from pydantic import Field, model_validator

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, InputText, Number, OutputContract
from ..common.registry import Operation


class ExtractBillingInput(InputContract):
    photo_data_uri: DataUri | None = Field(default=None, description="Photo or scan of a bill or invoice.")
    text: InputText | None = Field(default=None, description="Raw text of a bill or invoice.")

    @model_validator(mode="after")
    def _require_document(self):
        if self.photo_data_uri is None and self.text is None:
            raise ValueError("Missing photoDataUri or text")
        return self


class PurchasedItem(OutputContract):
    item: str = Field(description="The name or description of the purchased item.")
    quantity: Number | None = Field(default=None, description="The quantity of the item.")
    unit_price: Number | None = Field(default=None, description="The price per unit of the item.")
    total_price: Number = Field(description="The total price for the line item.")


class BillingData(OutputContract):
    vendor_information: str = Field(description="The name and contact information of the vendor.")
    dates: str = Field(description="The billing date and due date, if available.")
    amounts: str = Field(description="The total amount due and any other relevant amounts.")
    purchased_items: list[PurchasedItem] = Field(
        description="The items or services purchased, in the order they appear on the bill."
    )


EXTRACT_BILLING_PROMPT = """You are an expert in extracting data from bills and invoices.

Extract the vendor information, the billing and due dates, the amounts and every purchased \
line-item from the document below. Numbers must be plain numbers without currency symbols.

Document:
---
{photo_data_uri}{text}
---"""


EXTRACT_BILLING = Operation(
    name="extract_billing",
    input_model=ExtractBillingInput,
    output_model=BillingData,
    template=EXTRACT_BILLING_PROMPT,
    model="gemini-2.5-pro",
    temperature=0.1,
    description="Extract vendor, dates, amounts and line-items from a bill.",
)
