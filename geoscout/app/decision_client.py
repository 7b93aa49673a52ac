"""Client for the prompt-driven remote decision engine."""

from __future__ import annotations

import logging
import time
from typing import Mapping, Optional, Sequence

from geoscout.app.config import Settings, get_settings, safe_error_detail
from geoscout.app.contract import Decision, HistoryTurn, Observation
from geoscout.app.decision_schema import DecisionSchemaError, decision_from_text
from geoscout.app.observability import counter
from geoscout.app.prompts import build_messages
from geoscout.app.providers import (
    LLMProvider,
    LLMProviderError,
    LLMRequest,
    MalformedDecisionError,
    RateLimitedError,
    ServiceError,
    ServiceUnavailableError,
    create_provider,
)

logger = logging.getLogger(__name__)


class RemoteDecisionClient:
    """Prompt-driven decision engine behind an LLM provider.

    Exactly one provider call per ``ask``. Every failure surfaces as a
    ``ServiceError`` subclass; retry and failover belong to the caller.
    """

    def __init__(self, provider: Optional[LLMProvider] = None, *, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.provider = provider if provider is not None else create_provider(self.settings)

    @property
    def available(self) -> bool:
        return self.provider is not None

    async def ask(self, history: Sequence[HistoryTurn], observations: Mapping[str, Observation]) -> Decision:
        if self.provider is None:
            raise ServiceUnavailableError("remote decision engine not configured")

        request = LLMRequest(
            messages=build_messages(history, observations),
            model=self.settings.model_name,
            temperature=self.settings.model_temperature,
            max_tokens=self.settings.model_max_output_tokens or None,
        )
        start_ts = time.monotonic()
        try:
            response = await self.provider.chat_completion(request)
        except LLMProviderError as exc:
            error: ServiceError
            if exc.is_rate_limit:
                error = RateLimitedError(safe_error_detail(exc), status_code=exc.status_code)
            else:
                error = ServiceUnavailableError(safe_error_detail(exc), status_code=exc.status_code)
            self._record("failure", error, start_ts)
            raise error from exc

        try:
            decision = decision_from_text(response.text)
        except DecisionSchemaError as exc:
            error = MalformedDecisionError(safe_error_detail(exc))
            self._record("failure", error, start_ts)
            raise error from exc

        self._record("success", None, start_ts)
        return decision

    def _record(self, outcome: str, error: Optional[ServiceError], start_ts: float) -> None:
        kind = error.kind.value if error else None
        counter("remote_consult", labels={"outcome": outcome, "kind": kind or "none"})
        logger.info(
            "[REMOTE] consult",
            extra={
                "outcome": outcome,
                "kind": kind,
                "status_code": error.status_code if error else None,
                "provider": getattr(self.provider, "name", None),
                "latency_ms": int((time.monotonic() - start_ts) * 1000),
            },
        )


__all__ = ["RemoteDecisionClient"]
