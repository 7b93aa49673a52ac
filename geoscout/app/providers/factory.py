"""LLM provider factory driven by Settings."""

from __future__ import annotations

from typing import Optional

import httpx

from geoscout.app.config import Settings, get_settings

from .base import LLMProvider
from .openai_provider import OpenAIProvider

SUPPORTED_PROVIDERS = ("groq", "openai", "openai_compat")


def create_provider(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[LLMProvider]:
    """
    Build the configured provider.

    Returns None when remote calls are disabled, the provider is "none",
    or the key / base URL is missing. Callers treat None as an
    unavailable remote engine.

    Raises:
        ValueError: If MODEL_PROVIDER names an unknown provider
    """
    s = settings or get_settings()
    if not s.remote_configured():
        return None
    if s.model_provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unknown MODEL_PROVIDER: {s.model_provider}. Must be one of {SUPPORTED_PROVIDERS}")

    return OpenAIProvider(
        api_key=s.model_api_key or "",
        base_url=s.provider_base_url or "",
        timeout_seconds=float(s.model_timeout_seconds),
        connect_timeout_seconds=float(s.model_connect_timeout_seconds),
        name=s.model_provider,
        transport=transport,
    )


__all__ = ["SUPPORTED_PROVIDERS", "create_provider"]
