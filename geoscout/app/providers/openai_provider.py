"""OpenAI-compatible chat completions provider (OpenAI, Groq, vLLM, ...)."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from .base import LLMProvider, LLMProviderError, LLMRequest, LLMResponse


def _error_code(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("code"), str):
            return error["code"]
    return None


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation.

    ``transport`` is handed to ``httpx.AsyncClient``; tests pass an
    ``httpx.MockTransport`` there.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1/chat/completions",
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        *,
        name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.transport = transport
        if name:
            self.name = name

    def _payload(self, request: LLMRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
        }
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        if request.extra_params:
            payload.update(request.extra_params)
        return payload

    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        """Execute one chat completion. No retries at this layer."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        timeout = httpx.Timeout(
            self.timeout_seconds,
            connect=self.connect_timeout_seconds,
        )

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=timeout) as client:
                resp = await client.post(self.base_url, headers=headers, json=self._payload(request))
                if resp.is_error:
                    raise LLMProviderError(
                        f"{self.name} HTTP {resp.status_code}",
                        provider=self.name,
                        status_code=resp.status_code,
                        code=_error_code(resp),
                    )
                data = resp.json()
        except httpx.TimeoutException as exc:
            raise LLMProviderError(
                f"{self.name} request timeout",
                provider=self.name,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise LLMProviderError(
                f"{self.name} HTTP error: {exc}",
                provider=self.name,
                original_error=exc,
            ) from exc
        except json.JSONDecodeError as exc:
            raise LLMProviderError(
                f"{self.name} returned invalid JSON",
                provider=self.name,
                original_error=exc,
            ) from exc

        try:
            choice = data["choices"][0]
            text = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMProviderError(
                f"{self.name} response missing expected fields: {exc}",
                provider=self.name,
                original_error=exc,
            ) from exc

        return LLMResponse(
            text=text if isinstance(text, str) else "",
            usage=data.get("usage"),
            raw=data,
            finish_reason=choice.get("finish_reason"),
        )


__all__ = ["OpenAIProvider"]
