"""Provider factory for the document extraction models."""

from __future__ import annotations

import logging

from docextract.core.config import Settings, get_settings

from .base import BaseProvider, ProviderResult
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = ["get_provider", "BaseProvider", "ProviderResult", "MockProvider"]

# Provider name -> (Settings attribute holding its key, env var named in logs).
_API_KEYS: dict[str, tuple[str, str]] = {
    "gemini": ("gemini_api_key", "GEMINI_API_KEY"),
    "openai": ("openai_api_key", "OPENAI_API_KEY"),
    "claude": ("anthropic_api_key", "ANTHROPIC_API_KEY"),
}


def _remote_provider(name: str, api_key: str) -> BaseProvider:
    if name == "gemini":
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=api_key)
    if name == "openai":
        from .openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key)
    from .claude import ClaudeProvider

    return ClaudeProvider(api_key=api_key)


def get_provider(provider_name: str, settings: Settings | None = None) -> BaseProvider:
    """Return the multimodal provider registered as *provider_name*.

    Extraction keeps working without credentials: a provider outside
    ``AI_ALLOWED_PROVIDERS``, an unknown name, or a missing API key all
    yield the scripted ``MockProvider``, with a warning.
    """
    settings = settings or get_settings()
    name = provider_name.lower().strip()

    if name == "mock":
        return MockProvider()

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in AI_ALLOWED_PROVIDERS, using mock", name)
        return MockProvider()

    if name not in _API_KEYS:
        logger.warning("Unknown provider %r, using mock", name)
        return MockProvider()

    key_attr, env_name = _API_KEYS[name]
    api_key = getattr(settings, key_attr)
    if not api_key:
        logger.warning("%s not set, %s extraction falls back to mock", env_name, name)
        return MockProvider()

    return _remote_provider(name, api_key)
