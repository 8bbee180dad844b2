"""OpenAI provider (chat completions with image/file content parts)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from ..artifacts import Artifact
from ..errors import InvalidResponse
from .base import BaseProvider, ProviderResult, decode_structured, post_json

if TYPE_CHECKING:
    from ..prompting import Prompt

logger = logging.getLogger(__name__)


def _content_part(segment: str | Artifact) -> dict[str, Any]:
    if not isinstance(segment, Artifact):
        return {"type": "text", "text": segment}
    if segment.media_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": segment.to_data_uri()}}
    return {
        "type": "file",
        "file": {"filename": "document", "file_data": segment.to_data_uri()},
    }


class OpenAIProvider(BaseProvider):
    name = "openai"

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
        model = model or "gpt-4o-mini"
        t0 = time.monotonic()

        messages: list[dict[str, Any]] = []
        if prompt.system:
            messages.append({"role": "system", "content": prompt.system})
        messages.append(
            {
                "role": "user",
                "content": [_content_part(s) for s in prompt.segments if s],
            }
        )

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = await post_json(
            self.name,
            "https://api.openai.com/v1/chat/completions",
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            payload=payload,
            timeout_seconds=timeout_seconds,
        )

        choices = data.get("choices") or []
        if not choices:
            raise InvalidResponse("OpenAI returned no choices")
        text = (choices[0].get("message") or {}).get("content") or ""

        elapsed = (time.monotonic() - t0) * 1000
        usage = data.get("usage", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            structured=decode_structured(text) if json_mode else None,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
