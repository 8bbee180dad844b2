"""Medical scope contracts: report findings and the lead story built from several reports."""

from __future__ import annotations

from pydantic import Field, model_validator

from ..common.artifacts import DataUri
from ..common.contracts import Flag, InputContract, InputText, OutputContract
from ..common.registry import Operation


class ExtractMedicalInput(InputContract):
    report_data_uri: DataUri | None = Field(default=None, description="Image or PDF of a medical report.")
    text: InputText | None = Field(default=None, description="Raw text of a medical report.")

    @model_validator(mode="after")
    def _require_document(self):
        if self.report_data_uri is None and self.text is None:
            raise ValueError("Missing reportDataUri or text")
        return self


class Finding(OutputContract):
    finding: str = Field(description="A specific observation or finding from the report.")
    details: str = Field(description="Relevant details, measurements or notes about the finding.")


class MedicalFindings(OutputContract):
    diagnosis: str = Field(description="The main diagnosis or impression from the report.")
    findings: list[Finding] = Field(description="The key findings from the report.")


class StoryInput(InputContract):
    report_data_uris: list[DataUri] = Field(
        min_length=1,
        description="Documents to synthesize, in the order they should be read.",
    )


class Story(OutputContract):
    story: str = Field(min_length=1, description="The synthesized narrative.")
    is_correct_type: Flag = Field(description="Whether the documents are of the expected kind.")


EXTRACT_MEDICAL_PROMPT = """You are an expert medical analyst tasked with extracting key information from medical reports.

Analyze the report below and extract the main diagnosis and the key findings. Ensure the \
diagnosis and findings are accurate and comprehensive.

Report:
---
{report_data_uri}{text}
---"""

LEAD_STORY_PROMPT = """You are an expert analyst. Your goal is to create a lead story abstract for a disease \
diagnostic by synthesizing findings from medical reports. First, determine whether the documents are \
medical reports and set isCorrectType accordingly.

If the documents are not medical reports, write a concise summary or coherent narrative of the \
information they contain instead. Do not state that you cannot perform the medical analysis.

The documents are given in chronological order; keep that order in the story.

Documents:
{report_data_uris}"""


EXTRACT_MEDICAL = Operation(
    name="extract_medical",
    input_model=ExtractMedicalInput,
    output_model=MedicalFindings,
    template=EXTRACT_MEDICAL_PROMPT,
    temperature=0.1,
    description="Extract diagnosis and findings from a medical report.",
)

CREATE_LEAD_STORY = Operation(
    name="create_lead_story",
    input_model=StoryInput,
    output_model=Story,
    template=LEAD_STORY_PROMPT,
    temperature=0.4,
    description="Synthesize a diagnostic lead story from several medical reports.",
)
