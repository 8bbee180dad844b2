"""Dynamic form scope contracts: arbitrary key/value pairs and tables from any form."""

from __future__ import annotations

from pydantic import Field

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, OutputContract
from ..common.registry import Operation


class DynamicFormInput(InputContract):
    photo_data_uri: DataUri = Field(description="Photo of a form or document.")


class KeyValuePair(OutputContract):
    key: str = Field(description="The label or key for a piece of information found in the document.")
    value: str = Field(description="The value associated with the key.")


class FormTable(OutputContract):
    name: str = Field(description="A descriptive name for the table, like 'Purchased Items'.")
    headers: list[str] = Field(description="The column headers of the table.")
    rows: list[list[str]] = Field(description="The rows of the table; each inner list is one row.")


class DynamicForm(OutputContract):
    fields: list[KeyValuePair] = Field(description="Key/value pairs extracted from the document, in reading order.")
    tables: list[FormTable] | None = Field(default=None, description="Tables extracted from the document.")


DYNAMIC_FORM_PROMPT = """You are an expert in document analysis and data extraction.

Analyze the document below and extract every relevant key/value pair and every table.

- For simple fields, identify the label (key) and its value, e.g. {{"key": "First Name", "value": "John"}}.
- For tabular data, identify the table's name, its column headers and all of its rows.

Document: {photo_data_uri}"""


EXTRACT_DYNAMIC_FORM = Operation(
    name="extract_dynamic_form",
    input_model=DynamicFormInput,
    output_model=DynamicForm,
    template=DYNAMIC_FORM_PROMPT,
    description="Extract key/value pairs and tables from an arbitrary form.",
)
