"""Education scope contracts: academic records and the academic journey story."""

from __future__ import annotations

from pydantic import Field

from ..common.artifacts import DataUri
from ..common.contracts import InputContract, OutputContract
from ..common.registry import Operation
from ..medical.contracts import Story, StoryInput


class ExtractEducationInput(InputContract):
    report_data_uri: DataUri = Field(description="Image of a transcript, mark sheet or certificate.")


class Achievement(OutputContract):
    achievement: str = Field(description="A specific achievement, grade or score from the document.")
    details: str = Field(description="Relevant details, dates or notes about the achievement.")


class EducationFindings(OutputContract):
    institution: str = Field(description="The name of the educational institution.")
    degree: str = Field(description="The degree, course or examination name.")
    achievements: list[Achievement] = Field(description="Key achievements, scores or grades.")


EXTRACT_EDUCATION_PROMPT = """You are an expert academic registrar tasked with extracting key information \
from educational documents.

Analyze the document below and extract the institution name, the degree or examination, and the \
key achievements or grades as a structured list.

Educational document: {report_data_uri}"""

EDUCATION_STORY_PROMPT = """You are an expert academic advisor. Your goal is to write a concise summary of \
a student's academic journey. First, determine whether the documents are educational (transcripts, \
mark sheets, certificates and similar) and set isCorrectType accordingly.

If the documents are not educational, write a general summary of their content instead. Otherwise \
highlight key achievements, academic progression and areas of focus, following the documents in the \
order given.

Documents:
{report_data_uris}"""


EXTRACT_EDUCATION = Operation(
    name="extract_education",
    input_model=ExtractEducationInput,
    output_model=EducationFindings,
    template=EXTRACT_EDUCATION_PROMPT,
    temperature=0.1,
    description="Extract institution, degree and achievements from an educational document.",
)

CREATE_EDUCATION_STORY = Operation(
    name="create_education_story",
    input_model=StoryInput,
    output_model=Story,
    template=EDUCATION_STORY_PROMPT,
    temperature=0.4,
    description="Summarize a student's academic journey from several documents.",
)
