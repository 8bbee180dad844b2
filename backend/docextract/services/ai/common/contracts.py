"""Base models shared by every operation's input and output contracts."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, StrictBool
from pydantic.alias_generators import to_camel

from docextract.core.config import get_settings


def _check_input_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Text must not be empty")
    limit = get_settings().ai_max_input_text_chars
    if len(v) > limit:
        msg = f"Text is {len(v)} characters; the limit is {limit}"
        raise ValueError(msg)
    return v


InputText = Annotated[str, AfterValidator(_check_input_text)]


def _reject_bool(v):
    if isinstance(v, bool):
        raise ValueError("Expected a number, got a boolean")
    return v


# Numeric strings such as "200" are still accepted; booleans are not.
Number = Annotated[float, BeforeValidator(_reject_bool)]

Flag = StrictBool


class InputContract(BaseModel):
    """Request payload for an operation. Wire names are camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
        frozen=True,
    )


class OutputContract(BaseModel):
    """Validated model answer for an operation.

    Numbers are accepted for text fields (a model will happily answer
    ``"amounts": 100``). Numeric fields reject booleans and non-finite
    values, and flags accept only JSON booleans.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        allow_inf_nan=False,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
