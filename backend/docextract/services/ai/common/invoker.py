"""Model Invoker: the boundary between the pipeline and a remote provider."""

from __future__ import annotations

import logging

from docextract.core.config import get_settings

from .errors import InvalidResponse
from .prompting import Prompt
from .providers.base import BaseProvider, ProviderResult
from .router import ResolvedConfig

logger = logging.getLogger(__name__)


class ModelInvoker:
    """Sends one prompt to the resolved provider.

    Holds no per-request state, so one instance may serve concurrent
    invocations.  ``Unavailable`` / ``ProviderError`` raised by the provider
    propagate untouched for the retry controller to classify.
    """

    def __init__(self, config: ResolvedConfig) -> None:
        self.config = config

    @classmethod
    def with_provider(cls, provider: BaseProvider, *, model: str = "") -> ModelInvoker:
        settings = get_settings()
        return cls(
            ResolvedConfig(
                provider=provider,
                model=model,
                temperature=settings.ai_temperature,
                max_tokens=settings.ai_max_tokens,
                timeout_seconds=settings.ai_timeout_seconds,
                json_mode=settings.ai_json_mode,
            )
        )

    @property
    def provider_name(self) -> str:
        return self.config.provider.name

    async def invoke(self, prompt: Prompt, *, temperature: float | None = None) -> ProviderResult:
        config = self.config
        result = await config.provider.generate(
            prompt,
            model=config.model,
            temperature=config.temperature if temperature is None else temperature,
            max_tokens=config.max_tokens,
            timeout_seconds=config.timeout_seconds,
            json_mode=config.json_mode and prompt.response_schema is not None,
        )

        if result.structured is None and not result.raw_text.strip():
            raise InvalidResponse(f"{result.provider} returned an empty answer")
        return result
