"""Strict validation of candidate values against an operation's output contract."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from .contracts import OutputContract
from .errors import SchemaViolation

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=OutputContract)


def format_field_path(loc: tuple[Any, ...]) -> str:
    """``("purchasedItems", 0, "totalPrice")`` → ``"purchasedItems[0].totalPrice"``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "$"


def _known_keys(model: type[OutputContract]) -> set[str]:
    keys: set[str] = set()
    for name, info in model.model_fields.items():
        keys.add(name)
        if info.alias:
            keys.add(info.alias)
    return keys


def validate_output(candidate: Any, output_model: type[OutputT]) -> OutputT:
    """Validate *candidate* and return the typed output.

    Fails closed: the first offending field is reported as a
    ``SchemaViolation``; required values are never invented.
    """
    if not isinstance(candidate, dict):
        raise SchemaViolation("$", "expected a JSON object")

    extra = sorted(set(candidate) - _known_keys(output_model))
    if extra:
        logger.info("%s: ignoring unknown fields %s", output_model.__name__, extra)

    try:
        return output_model.model_validate(candidate)
    except ValidationError as exc:
        first = exc.errors()[0]
        field_path = format_field_path(tuple(first.get("loc", ())))
        reason = first.get("msg", "").removeprefix("Value error, ")
        logger.warning(
            "%s failed validation at %s (%d error(s))",
            output_model.__name__,
            field_path,
            exc.error_count(),
        )
        raise SchemaViolation(field_path, reason) from exc
