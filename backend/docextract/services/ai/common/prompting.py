"""Prompt construction: validated input + operation template into ordered text/media segments."""

from __future__ import annotations

import json
import logging
import string
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .artifacts import Artifact
from .errors import InvalidInput

if TYPE_CHECKING:
    from .contracts import InputContract
    from .registry import Operation

logger = logging.getLogger(__name__)

Segment = str | Artifact

JSON_INSTRUCTIONS = (
    "Return ONLY a single, valid JSON object with the extracted information. "
    "Do not include any text, markdown, or formatting before or after the JSON object. "
    "Omit optional fields you cannot determine. The object must match this JSON schema:\n"
)


@dataclass(frozen=True)
class Prompt:
    """Everything sent to the model for one invocation, in order."""

    segments: tuple[Segment, ...]
    system: str = ""
    response_schema: dict[str, Any] | None = field(default=None, compare=False)

    @classmethod
    def from_text(cls, text: str, *, system: str = "") -> Prompt:
        return cls(segments=(text,), system=system)

    @property
    def artifacts(self) -> tuple[Artifact, ...]:
        return tuple(s for s in self.segments if isinstance(s, Artifact))

    @property
    def text(self) -> str:
        """Prompt text with media replaced by ``[media:<type>]`` markers."""
        return "".join(
            f"[media:{s.media_type}]" if isinstance(s, Artifact) else s for s in self.segments
        )


def _first_error(exc: ValidationError) -> tuple[str, str, str]:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = err.get("msg", "invalid value").removeprefix("Value error, ")
    return loc, msg, err.get("type", "")


def validate_input(operation: Operation, payload: Mapping[str, Any] | InputContract) -> InputContract:
    if isinstance(payload, operation.input_model):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidInput("Request body must be a JSON object")
    try:
        return operation.input_model.model_validate(dict(payload))
    except ValidationError as exc:
        loc, msg, err_type = _first_error(exc)
        if not loc:
            raise InvalidInput(msg) from exc
        if err_type == "missing":
            raise InvalidInput(f"Missing {loc}", field=loc) from exc
        raise InvalidInput(f"Invalid {loc}: {msg}", field=loc) from exc


def _render_value(value: Any) -> list[Segment]:
    if value is None:
        return []
    if isinstance(value, Artifact):
        return [value]
    if isinstance(value, (list, tuple)):
        segments: list[Segment] = []
        for index, item in enumerate(value, start=1):
            if isinstance(item, Artifact):
                segments.extend([f"Document {index}: ", item, "\n"])
            else:
                segments.append(f"{item}\n")
        return segments
    return [str(value)]


def _merge_text(segments: list[Segment]) -> tuple[Segment, ...]:
    merged: list[Segment] = []
    for segment in segments:
        if isinstance(segment, str) and merged and isinstance(merged[-1], str):
            merged[-1] += segment
        elif segment != "":
            merged.append(segment)
    return tuple(merged)


def build_prompt(operation: Operation, payload: Mapping[str, Any] | InputContract) -> Prompt:
    """Validate *payload* against the operation's input schema and render its template.

    Placeholders are ``{attribute}`` names of the input model.  Artifact
    fields become media segments at the placeholder's position; list fields
    are expanded in input order.
    """
    request = validate_input(operation, payload)

    segments: list[Segment] = []
    for literal, field_name, _spec, _conversion in string.Formatter().parse(operation.template):
        if literal:
            segments.append(literal)
        if field_name is None:
            continue
        if field_name not in type(request).model_fields:
            msg = f"Template of {operation.name!r} references unknown field {field_name!r}"
            raise KeyError(msg)
        segments.extend(_render_value(getattr(request, field_name)))

    response_schema = None
    if operation.expects_json:
        response_schema = operation.output_model.model_json_schema(by_alias=True)
        segments.append("\n\n" + JSON_INSTRUCTIONS + json.dumps(response_schema, indent=2))

    return Prompt(
        segments=_merge_text(segments),
        system=operation.system_prompt,
        response_schema=response_schema,
    )
