"""LLM provider abstraction for the remote decision engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LLMRequest:
    """Unified request format for all LLM providers."""
    messages: list[Dict[str, str]]
    model: str
    temperature: float = 0.1
    max_tokens: Optional[int] = None
    json_mode: bool = True
    extra_params: Optional[Dict[str, Any]] = None


@dataclass
class LLMResponse:
    """Unified response format from LLM providers."""
    text: str
    usage: Optional[Dict[str, int]] = None
    raw: Optional[Dict[str, Any]] = None
    finish_reason: Optional[str] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "abstract"

    @abstractmethod
    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        """
        Execute a chat completion request.

        Args:
            request: Unified LLM request

        Returns:
            LLMResponse with text and metadata

        Raises:
            LLMProviderError: On transport, status or body failures
        """


class LLMProviderError(Exception):
    """Base exception for LLM provider errors.

    ``status_code`` and ``code`` are kept so callers can tell a quota
    rejection apart from any other upstream failure.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.code = code
        self.original_error = original_error

    @property
    def is_rate_limit(self) -> bool:
        return self.status_code == 429 or self.code == "rate_limit_exceeded"


__all__ = ["LLMProvider", "LLMRequest", "LLMResponse", "LLMProviderError"]
