"""Process-wide operation registry and pipeline, built once at startup."""

from __future__ import annotations

from functools import lru_cache

from .billing.contracts import EXTRACT_BILLING
from .common.pipeline import ExtractionPipeline
from .common.registry import Operation, OperationRegistry
from .dynamic_form.contracts import EXTRACT_DYNAMIC_FORM
from .education.contracts import CREATE_EDUCATION_STORY, EXTRACT_EDUCATION
from .identity.contracts import SCAN_ID
from .medical.contracts import CREATE_LEAD_STORY, EXTRACT_MEDICAL
from .payment.contracts import EXTRACT_PAYMENT_DETAILS, EXTRACT_TRANSACTION_ID, SCAN_PAYMENT
from .text_extract.contracts import EXTRACT_TEXT

ALL_OPERATIONS: tuple[Operation, ...] = (
    EXTRACT_BILLING,
    SCAN_ID,
    SCAN_PAYMENT,
    EXTRACT_PAYMENT_DETAILS,
    EXTRACT_TRANSACTION_ID,
    EXTRACT_DYNAMIC_FORM,
    EXTRACT_MEDICAL,
    EXTRACT_EDUCATION,
    CREATE_LEAD_STORY,
    CREATE_EDUCATION_STORY,
    EXTRACT_TEXT,
)


def build_registry() -> OperationRegistry:
    registry = OperationRegistry()
    for operation in ALL_OPERATIONS:
        registry.register(operation)
    registry.freeze()
    return registry


@lru_cache
def get_registry() -> OperationRegistry:
    return build_registry()


@lru_cache
def get_pipeline() -> ExtractionPipeline:
    return ExtractionPipeline(get_registry())
