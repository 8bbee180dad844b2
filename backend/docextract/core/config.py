from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_PROVIDERS = "gemini,openai,claude,mock"


def _parse_csv(value: str) -> list[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="forbid",
        validate_by_name=True,
        populate_by_name=True,
    )

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = Field(
        default=False,
        validation_alias=AliasChoices("EXPOSE_ERROR_DETAILS"),
    )

    cors_allow_origins: list[str] = Field(default_factory=list)
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["Authorization", "Content-Type", "Accept"])

    # --- AI provider selection ---
    ai_provider: str = Field(default="gemini", validation_alias=AliasChoices("AI_PROVIDER"))
    ai_model: str = Field(default="", validation_alias=AliasChoices("AI_MODEL"))
    enable_ai_overrides: bool = Field(default=False, validation_alias=AliasChoices("ENABLE_AI_OVERRIDES"))
    ai_allowed_providers_raw: str = Field(
        default=DEFAULT_ALLOWED_PROVIDERS,
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_gemini_raw: str = Field(default="", validation_alias=AliasChoices("AI_ALLOWED_MODELS_GEMINI"))
    ai_allowed_models_openai_raw: str = Field(default="", validation_alias=AliasChoices("AI_ALLOWED_MODELS_OPENAI"))
    ai_allowed_models_claude_raw: str = Field(default="", validation_alias=AliasChoices("AI_ALLOWED_MODELS_CLAUDE"))

    gemini_api_key: str = Field(default="", validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
    openai_api_key: str = Field(default="", validation_alias=AliasChoices("OPENAI_API_KEY"))
    anthropic_api_key: str = Field(default="", validation_alias=AliasChoices("ANTHROPIC_API_KEY"))

    # --- AI call parameters ---
    ai_temperature: float = Field(default=0.2, validation_alias=AliasChoices("AI_TEMPERATURE"))
    ai_max_tokens: int = Field(default=2048, validation_alias=AliasChoices("AI_MAX_TOKENS"))
    ai_timeout_seconds: float = Field(default=60.0, validation_alias=AliasChoices("AI_TIMEOUT_SECONDS"))
    ai_json_mode: bool = Field(default=True, validation_alias=AliasChoices("AI_JSON_MODE"))

    # --- Retry ---
    ai_retry_max_attempts: int = Field(default=3, validation_alias=AliasChoices("AI_RETRY_MAX_ATTEMPTS"))
    ai_retry_delay_seconds: float = Field(default=1.0, validation_alias=AliasChoices("AI_RETRY_DELAY_SECONDS"))

    # --- Input limits ---
    ai_max_artifact_bytes: int = Field(
        default=20 * 1024 * 1024,
        validation_alias=AliasChoices("AI_MAX_ARTIFACT_BYTES"),
    )
    ai_max_input_text_chars: int = Field(default=20000, validation_alias=AliasChoices("AI_MAX_INPUT_TEXT_CHARS"))

    ai_debug_store_raw: bool = Field(default=False, validation_alias=AliasChoices("AI_DEBUG_STORE_RAW"))

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("ai_retry_max_attempts")
    @classmethod
    def _at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            msg = f"AI_RETRY_MAX_ATTEMPTS must be >= 1, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("ai_retry_delay_seconds", "ai_timeout_seconds")
    @classmethod
    def _non_negative_seconds(cls, v: float) -> float:
        if v < 0:
            msg = f"Duration must be >= 0, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("ai_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def ai_allowed_providers(self) -> list[str]:
        providers = _parse_csv(self.ai_allowed_providers_raw)
        if "mock" not in providers:
            providers.append("mock")
        return providers

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        def _models(raw: str) -> list[str]:
            return [item.strip() for item in raw.split(",") if item.strip()]

        return {
            "gemini": _models(self.ai_allowed_models_gemini_raw),
            "openai": _models(self.ai_allowed_models_openai_raw),
            "claude": _models(self.ai_allowed_models_claude_raw),
            "mock": [],
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
