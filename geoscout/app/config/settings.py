from __future__ import annotations

import functools
import json
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEFAULT_BASE_URLS = {
    "groq": "https://api.groq.com/openai/v1/chat/completions",
    "openai": "https://api.openai.com/v1/chat/completions",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    debug_errors: int = Field(0, alias="DEBUG_ERRORS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    request_id_header: str = Field("x-request-id", alias="REQUEST_ID_HEADER")
    cors_origins: List[str] = Field(default_factory=list, alias="CORS_ORIGINS")

    # Remote decision engine
    model_calls_enabled: int = Field(1, alias="MODEL_CALLS_ENABLED")
    model_provider: str = Field("groq", alias="MODEL_PROVIDER")
    model_name: str = Field("llama-3.3-70b-versatile", alias="MODEL_NAME")
    model_base_url: Optional[str] = Field(None, alias="MODEL_BASE_URL")
    model_api_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("MODEL_API_KEY", "GROQ_API_KEY", "model_api_key")
    )
    model_temperature: float = Field(0.1, alias="MODEL_TEMPERATURE")
    model_max_output_tokens: int = Field(1024, alias="MODEL_MAX_OUTPUT_TOKENS")
    model_timeout_seconds: int = Field(30, alias="MODEL_TIMEOUT_SECONDS")
    model_connect_timeout_seconds: int = Field(10, alias="MODEL_CONNECT_TIMEOUT_SECONDS")

    # Sessions
    session_max_count: int = Field(1000, alias="SESSION_MAX_COUNT")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        if isinstance(v, str):
            text = v.strip()
            if not text:
                return []
            if text == "*":
                return ["*"]
            try:
                parsed = json.loads(text)
                if isinstance(parsed, list):
                    return [str(item).strip() for item in parsed if str(item).strip()]
            except json.JSONDecodeError:
                pass
            return [item.strip() for item in text.split(",") if item.strip()]
        return []

    @field_validator(
        "model_calls_enabled",
        "debug_errors",
        "model_max_output_tokens",
        "model_timeout_seconds",
        "model_connect_timeout_seconds",
        "session_max_count",
    )
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(0, v)

    @field_validator("app_env", "model_provider")
    @classmethod
    def normalize_lower(cls, v: str) -> str:
        return (v or "").strip().lower()

    @property
    def provider_base_url(self) -> Optional[str]:
        return self.model_base_url or _DEFAULT_BASE_URLS.get(self.model_provider)

    def remote_configured(self) -> bool:
        if self.model_calls_enabled == 0 or self.model_provider == "none":
            return False
        return bool(self.model_api_key and self.provider_base_url)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def validate_for_env(settings: Settings) -> Dict[str, Any]:
    issues: list[str] = []
    if settings.model_provider not in ("groq", "openai", "openai_compat", "none"):
        issues.append(f"MODEL_PROVIDER {settings.model_provider!r} is not supported")
    if settings.model_provider == "openai_compat" and not settings.model_base_url:
        issues.append("MODEL_BASE_URL required for openai_compat provider")
    if settings.model_calls_enabled and settings.model_provider != "none" and not settings.model_api_key:
        issues.append("MODEL_API_KEY missing; sessions will run on the local engine")
    if settings.app_env == "prod" and settings.debug_errors != 0:
        issues.append("DEBUG_ERRORS must be 0 in prod")
    summary = settings_public_summary(settings)
    summary["issues"] = issues
    return summary


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "model_provider": s.model_provider,
        "model_name": s.model_name,
        "model_calls_enabled": bool(s.model_calls_enabled),
        "model_key_present": bool(s.model_api_key),
        "model_timeout_seconds": s.model_timeout_seconds,
        "model_connect_timeout_seconds": s.model_connect_timeout_seconds,
        "session_max_count": s.session_max_count,
    }


__all__ = ["Settings", "get_settings", "settings_public_summary", "validate_for_env"]
