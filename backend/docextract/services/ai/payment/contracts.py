"""Payment scope contracts: payment confirmation screenshots (Google Pay, Paytm, UPI)."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import Field, field_validator, model_validator

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, InputText, Number, OutputContract
from ..common.registry import Operation

# Formats seen on payment apps; the first match wins.
DATE_FORMATS = (
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%d %b, %Y",
    "%d %B, %Y",
)

# Trailing clock time, e.g. " 10:42", " 10:42:05 PM", "T10:42:05".
_TIME_SUFFIX_RE = re.compile(r"(?:,?\s+(?:at\s+)?|T)\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp]\.?[Mm]\.?)?$")


def normalize_date(value: str) -> str:
    """Normalize a payment date to ``YYYY-MM-DD``; ``ValueError`` if unrecognized."""
    text = " ".join(value.split())
    # Drop a trailing time part such as "31 Jan 2026, 10:42 am" or "31/01/2026 10:42".
    candidates = (text, _TIME_SUFFIX_RE.sub("", text), text.split(" at ")[0], text.rsplit(",", 1)[0])
    for candidate in candidates:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(candidate.strip(), fmt).date().isoformat()
            except ValueError:
                continue
    msg = f"Unrecognized date {value!r}; expected YYYY-MM-DD"
    raise ValueError(msg)


class ScanPaymentInput(InputContract):
    photo_data_uri: DataUri = Field(description="Screenshot of a payment confirmation.")


class PaymentDetailsInput(InputContract):
    photo_data_uri: DataUri | None = Field(default=None, description="Screenshot of a payment confirmation.")
    text: InputText | None = Field(default=None, description="Raw text of a payment confirmation.")

    @model_validator(mode="after")
    def _require_document(self):
        if self.photo_data_uri is None and self.text is None:
            raise ValueError("Missing photoDataUri or text")
        return self


class PaymentDetails(OutputContract):
    receiver_name: str | None = Field(default=None, description="Name of the person or entity who received the payment.")
    amount: Number | None = Field(default=None, description="The transaction amount as a number without currency symbols.")
    transaction_id: str | None = Field(
        default=None,
        description="The Transaction ID, UPI Transaction ID, UTR or other unique reference number.",
    )
    date: str | None = Field(default=None, description="The date of the transaction in YYYY-MM-DD format.")

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return normalize_date(v)


class TransactionIdInput(InputContract):
    photo_data_uri: DataUri = Field(description="Screenshot of a payment confirmation.")


class TransactionId(OutputContract):
    transaction_id: str = Field(
        min_length=1,
        description="The Transaction ID, UPI Transaction ID, or any other unique reference number.",
    )


PAYMENT_FIELDS_GUIDE = """1. receiverName: who received the payment. Look for labels like "Paid to" or "To:".
2. amount: the main transaction amount as a number. For '₹200' the value is 200.
3. transactionId: the unique identifier. Look for "UPI Transaction ID", "Transaction ID", "UTR" or "Ref No.".
4. date: the transaction date. Dates such as "Jan 31, 2026" or "31-01-2026" MUST be written as YYYY-MM-DD.

If a field is not clearly visible, omit it."""

SCAN_PAYMENT_PROMPT = (
    "You are an expert OCR agent specializing in financial transaction screenshots from "
    "Indian payment apps like Google Pay and Paytm. Extract the following details precisely.\n\n"
    + PAYMENT_FIELDS_GUIDE
    + "\n\nEXTRACT FROM THIS IMAGE:\n{photo_data_uri}"
)

PAYMENT_DETAILS_PROMPT = (
    "You are an expert OCR agent specializing in financial transaction confirmations from "
    "Indian payment apps like Google Pay and Paytm. Extract the following details precisely.\n\n"
    + PAYMENT_FIELDS_GUIDE
    + "\n\nEXTRACT FROM THIS DOCUMENT:\n---\n{photo_data_uri}{text}\n---"
)

TRANSACTION_ID_PROMPT = """You are an expert OCR agent specializing in financial transaction screenshots.

Find the unique transaction identifier in the image. Look for labels like "Transaction ID", \
"UPI Transaction ID", "Ref No." or a similar unique identifier, and extract only the ID itself.

Image: {photo_data_uri}"""


SCAN_PAYMENT = Operation(
    name="scan_payment",
    input_model=ScanPaymentInput,
    output_model=PaymentDetails,
    template=SCAN_PAYMENT_PROMPT,
    temperature=0.0,
    description="Extract receiver, amount, transaction ID and date from a payment screenshot.",
)

EXTRACT_PAYMENT_DETAILS = Operation(
    name="extract_payment_details",
    input_model=PaymentDetailsInput,
    output_model=PaymentDetails,
    template=PAYMENT_DETAILS_PROMPT,
    temperature=0.0,
    description="Extract payment details from a screenshot or pasted confirmation text.",
)

EXTRACT_TRANSACTION_ID = Operation(
    name="extract_transaction_id",
    input_model=TransactionIdInput,
    output_model=TransactionId,
    template=TRANSACTION_ID_PROMPT,
    temperature=0.0,
    description="Extract the transaction ID from a payment screenshot.",
)
