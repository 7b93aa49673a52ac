import json
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure geoscout package is importable for tests
PACKAGE_ROOT = Path(__file__).resolve().parents[1]
REPO_ROOT = PACKAGE_ROOT.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from geoscout.app.config import Settings
from geoscout.app.decision_client import RemoteDecisionClient
from geoscout.app.orchestrator import SessionOrchestrator
from geoscout.app.providers import LLMProvider, LLMProviderError, LLMRequest, LLMResponse
from geoscout.app.session import Session


def decision_json(**overrides) -> str:
    payload = {
        "display_message": "Observe the luster.",
        "ui_directive": "physical_test",
        "progress": 30,
        "confidence": 0.2,
        "options": ["Glassy", "Metallic", "Unsure"],
        "identified_mineral": None,
        "completed_categories": ["Color"],
    }
    payload.update(overrides)
    return json.dumps(payload)


class ScriptedProvider(LLMProvider):
    """Replays queued texts or raises queued exceptions, one per call."""

    name = "scripted"

    def __init__(self, *items, default: Optional[str] = None) -> None:
        self.items = list(items)
        self.default = default
        self.requests: List[LLMRequest] = []

    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        item = self.items.pop(0) if self.items else self.default
        if item is None:
            raise LLMProviderError("no scripted response", provider=self.name, status_code=500)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(text=item)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture(autouse=True)
def _no_forced_breaker(monkeypatch):
    monkeypatch.delenv("FORCE_BREAKER_OPEN", raising=False)


@pytest.fixture
def settings():
    return Settings(MODEL_PROVIDER="groq", MODEL_API_KEY="gsk_testkeyvalue1234", MODEL_CALLS_ENABLED=1)


@pytest.fixture
def offline_settings():
    return Settings(MODEL_PROVIDER="none", MODEL_API_KEY=None)


@pytest.fixture
def make_orchestrator(settings):
    def _make(provider: Optional[LLMProvider]):
        client = RemoteDecisionClient(provider, settings=settings)
        return SessionOrchestrator(client)

    return _make


@pytest.fixture
def offline_orchestrator(offline_settings):
    return SessionOrchestrator(RemoteDecisionClient(settings=offline_settings))


@pytest.fixture
def session():
    return Session()
