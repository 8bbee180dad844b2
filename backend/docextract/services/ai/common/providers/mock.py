"""Mock provider: deterministic, optionally scripted responses for tests and fallback."""

from __future__ import annotations

import json
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .base import BaseProvider, ProviderResult

if TYPE_CHECKING:
    from ..prompting import Prompt


class MockProvider(BaseProvider):
    """Replays *responses* in order, then repeats *default_text*.

    A scripted item may be answer text, an already-structured ``dict``
    (returned as JSON-mode output) or an exception instance to raise.
    """

    name = "mock"

    def __init__(
        self,
        responses: Iterable[str | dict[str, Any] | BaseException] | None = None,
        *,
        default_text: str = "{}",
    ) -> None:
        self._script = list(responses or [])
        self._default_text = default_text
        self.calls: list[Prompt] = []

    async def generate(
        self,
        prompt: Prompt,
        *,
        model: str = "",
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout_seconds: float = 60.0,
        json_mode: bool = False,
    ) -> ProviderResult:
        t0 = time.monotonic()
        self.calls.append(prompt)

        item = self._script.pop(0) if self._script else self._default_text
        if isinstance(item, BaseException):
            raise item

        structured = item if isinstance(item, dict) else None
        text = json.dumps(item) if structured is not None else item
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            structured=structured,
            prompt_tokens=len(prompt.text.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
