"""Picks the provider and model each extraction operation is sent to."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docextract.core.config import Settings, get_settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Provider instance and call parameters for one operation."""

    provider: BaseProvider
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float
    json_mode: bool


def _provider_name(settings: Settings, override: str | None) -> str:
    if settings.enable_ai_overrides and override and override.strip():
        return override.lower().strip()
    return settings.ai_provider or "mock"


def _model_name(settings: Settings, provider_name: str, override: str | None, default_model: str) -> str:
    model = ""
    if settings.enable_ai_overrides and override:
        model = override.strip()
    model = model or settings.ai_model
    if not model and provider_name == "gemini":
        model = default_model

    allowed = settings.ai_allowed_models.get(provider_name, [])
    if not allowed:
        return model
    if model and model not in allowed:
        logger.warning("Model %r not allowed for %s, using %r", model, provider_name, allowed[0])
    return model if model in allowed else allowed[0]


def resolve(
    scope: str,
    *,
    default_model: str = "",
    temperature: float | None = None,
    override_provider: str | None = None,
    override_model: str | None = None,
) -> ResolvedConfig:
    """Build the call configuration for the operation named *scope*.

    The provider is the request override (only with ``ENABLE_AI_OVERRIDES``)
    or ``AI_PROVIDER``. The model is the request override, then ``AI_MODEL``,
    then the operation's preferred Gemini model when the provider is Gemini.
    A model outside the provider's ``AI_ALLOWED_MODELS_*`` list is replaced by
    the first allowed one; an empty model lets the provider pick its default.
    """
    settings = get_settings()
    provider_name = _provider_name(settings, override_provider)
    model = _model_name(settings, provider_name, override_model, default_model)
    provider = get_provider(provider_name, settings)
    logger.debug("Resolved %s -> %s:%s", scope, provider.name, model or "<default>")

    return ResolvedConfig(
        provider=provider,
        model=model,
        temperature=settings.ai_temperature if temperature is None else temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=settings.ai_timeout_seconds,
        json_mode=settings.ai_json_mode,
    )
