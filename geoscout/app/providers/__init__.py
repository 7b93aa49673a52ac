from .base import LLMProvider, LLMProviderError, LLMRequest, LLMResponse
from .errors import (
    MalformedDecisionError,
    RateLimitedError,
    ServiceError,
    ServiceErrorKind,
    ServiceUnavailableError,
)
from .factory import create_provider
from .openai_provider import OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMProviderError",
    "LLMRequest",
    "LLMResponse",
    "OpenAIProvider",
    "create_provider",
    "ServiceError",
    "ServiceErrorKind",
    "RateLimitedError",
    "ServiceUnavailableError",
    "MalformedDecisionError",
]
