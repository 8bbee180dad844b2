"""Anthropic / Claude provider."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from ..artifacts import Artifact
from ..errors import InvalidResponse, ProviderError
from .base import BaseProvider, ProviderResult, post_json

if TYPE_CHECKING:
    from ..prompting import Prompt

logger = logging.getLogger(__name__)


def _content_block(segment: str | Artifact) -> dict[str, Any]:
    if not isinstance(segment, Artifact):
        return {"type": "text", "text": segment}
    source = {"type": "base64", "media_type": segment.media_type, "data": segment.base64}
    if segment.media_type.startswith("image/"):
        return {"type": "image", "source": source}
    if segment.media_type == "application/pdf":
        return {"type": "document", "source": source}
    raise ProviderError(f"claude cannot read media type {segment.media_type!r}", provider="claude")


class ClaudeProvider(BaseProvider):
    name = "claude"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

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
        # No native JSON mode; the normalizer extracts the object from text.
        model = model or "claude-3-5-haiku-20241022"
        t0 = time.monotonic()

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": "user", "content": [_content_block(s) for s in prompt.segments if s]},
            ],
        }
        if prompt.system:
            payload["system"] = prompt.system

        data = await post_json(
            self.name,
            "https://api.anthropic.com/v1/messages",
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": "2023-06-01",
                "content-type": "application/json",
            },
            payload=payload,
            timeout_seconds=timeout_seconds,
        )

        blocks = data.get("content") or []
        if not blocks:
            raise InvalidResponse("Claude returned no content")
        text = "".join(block.get("text", "") for block in blocks if block.get("type") == "text")

        elapsed = (time.monotonic() - t0) * 1000
        usage = data.get("usage", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
