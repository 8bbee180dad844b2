"""Document artifacts passed as ``data:<media-type>;base64,<payload>`` strings."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from docextract.core.config import get_settings

from .errors import InvalidInput

_DATA_URI_RE = re.compile(
    r"^data:(?P<media_type>[A-Za-z0-9!#$&^_.+-]+/[A-Za-z0-9!#$&^_.+-]+)"
    r"(?P<params>(?:;[A-Za-z0-9_.-]+=[^;,]*)*)"
    r";base64,(?P<payload>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class Artifact:
    """Decoded document payload. Lives only for one invocation."""

    media_type: str
    data: bytes

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.base64}"

    def __repr__(self) -> str:
        return f"Artifact(media_type={self.media_type!r}, size={len(self.data)})"


def parse_data_uri(value: str, *, max_bytes: int | None = None) -> Artifact:
    """Decode a base64 data URI into an :class:`Artifact`.

    Raises ``InvalidInput`` for anything that is not a well-formed,
    non-empty base64 payload within *max_bytes*.
    """
    if not isinstance(value, str):
        raise InvalidInput("Artifact must be a data URI string")

    match = _DATA_URI_RE.match(value.strip())
    if match is None:
        raise InvalidInput("Artifact must be a data URI of the form data:<media-type>;base64,<data>")

    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        raise InvalidInput("Artifact data URI has an empty payload")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInput(f"Artifact payload is not valid base64: {exc}") from exc

    if max_bytes is not None and len(data) > max_bytes:
        raise InvalidInput(f"Artifact is {len(data)} bytes; the limit is {max_bytes}")

    return Artifact(media_type=match.group("media_type").lower(), data=data)


def _coerce_artifact(value: Any) -> Artifact:
    if isinstance(value, Artifact):
        return value
    try:
        return parse_data_uri(value, max_bytes=get_settings().ai_max_artifact_bytes)
    except InvalidInput as exc:
        raise ValueError(exc.message) from exc


DataUri = Annotated[
    Artifact,
    BeforeValidator(_coerce_artifact),
    PlainSerializer(lambda a: a.to_data_uri(), return_type=str),
]
