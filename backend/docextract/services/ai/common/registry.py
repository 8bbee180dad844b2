"""Operation definitions and the process-wide registry they are looked up in."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .contracts import InputContract, OutputContract
from .errors import UnknownOperation
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """A named extraction or synthesis capability.

    ``template`` is instruction text with ``{field}`` placeholders naming
    attributes of ``input_model``.  Operations with ``text_field`` expect a
    plain-text answer that is wrapped as ``{text_field: answer}``.
    """

    name: str
    input_model: type[InputContract]
    output_model: type[OutputContract]
    template: str
    system_prompt: str = ""
    model: str = ""
    temperature: float | None = None
    retry_policy: RetryPolicy | None = None
    text_field: str | None = None
    description: str = ""

    @property
    def expects_json(self) -> bool:
        return self.text_field is None


class OperationRegistry:
    """Operation map keyed by name; populated once at startup, read-only after ``freeze``."""

    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}
        self._frozen = False

    def register(self, operation: Operation) -> Operation:
        if self._frozen:
            msg = f"Registry is frozen; cannot register {operation.name!r}"
            raise RuntimeError(msg)
        if operation.name in self._operations:
            msg = f"Operation {operation.name!r} is already registered"
            raise ValueError(msg)
        if operation.text_field is not None and operation.text_field not in operation.output_model.model_fields:
            msg = f"text_field {operation.text_field!r} is not a field of {operation.output_model.__name__}"
            raise ValueError(msg)
        self._operations[operation.name] = operation
        logger.debug("Registered operation %s", operation.name)
        return operation

    def lookup(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise UnknownOperation(name) from None

    def freeze(self) -> None:
        self._frozen = True

    def names(self) -> list[str]:
        return sorted(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)
