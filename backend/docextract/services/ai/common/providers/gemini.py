"""Google Gemini provider (Generative Language REST API)."""

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

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
BLOCKED_FINISH_REASONS = frozenset({"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"})


class GeminiProvider(BaseProvider):
    name = "gemini"

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
        model = model or "gemini-2.0-flash"
        t0 = time.monotonic()

        parts: list[dict[str, Any]] = []
        for segment in prompt.segments:
            if isinstance(segment, Artifact):
                parts.append({"inlineData": {"mimeType": segment.media_type, "data": segment.base64}})
            elif segment:
                parts.append({"text": segment})

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }
        if prompt.system:
            payload["systemInstruction"] = {"parts": [{"text": prompt.system}]}

        data = await post_json(
            self.name,
            f"{API_BASE}/models/{model}:generateContent",
            headers={"x-goog-api-key": self._api_key, "Content-Type": "application/json"},
            payload=payload,
            timeout_seconds=timeout_seconds,
        )

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise InvalidResponse(f"Gemini returned no candidates ({block_reason})")

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason", "")
        if finish_reason in BLOCKED_FINISH_REASONS:
            raise InvalidResponse(f"Gemini blocked the answer ({finish_reason})")

        content_parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in content_parts)

        elapsed = (time.monotonic() - t0) * 1000
        usage = data.get("usageMetadata", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            structured=decode_structured(text) if json_mode else None,
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=round(elapsed, 2),
        )
