"""Session state and the in-memory session store."""

from __future__ import annotations

import uuid
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from geoscout.app.contract import HISTORY_LIMIT, INITIAL_DECISION, Decision, HistoryTurn, Observation
from geoscout.app.reliability import SessionCircuit


class SessionError(Exception):
    """Base class for rejected session actions."""


class SessionBusyError(SessionError):
    """A consult is already in flight for this session."""


class SessionConcludedError(SessionError):
    """The session reached a conclusion; only reset is accepted."""


class SessionNotFoundError(SessionError):
    """No session with the given id."""


class UnknownObservationError(SessionError):
    """Retract named a trait that is not in the observation set."""


def find_key(observations: Dict[str, Observation], key: str) -> Optional[str]:
    folded = key.strip().casefold()
    for existing in observations:
        if existing.strip().casefold() == folded:
            return existing
    return None


def with_observation(observations: Dict[str, Observation], key: str, source: str) -> Dict[str, Observation]:
    updated = dict(observations)
    existing = find_key(updated, key)
    if existing is not None:
        del updated[existing]
    updated[key.strip()] = Observation(source=source, value=True)
    return updated


def without_observation(observations: Dict[str, Observation], key: str) -> Dict[str, Observation]:
    existing = find_key(observations, key)
    if existing is None:
        raise UnknownObservationError(key)
    updated = dict(observations)
    del updated[existing]
    return updated


@dataclass
class Session:
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    observations: Dict[str, Observation] = field(default_factory=dict)
    history: Deque[HistoryTurn] = field(default_factory=lambda: deque(maxlen=HISTORY_LIMIT))
    circuit: SessionCircuit = field(default_factory=SessionCircuit)
    current_decision: Decision = field(default_factory=lambda: INITIAL_DECISION)
    notice: Optional[str] = None
    busy: bool = False

    @property
    def offline(self) -> bool:
        return self.circuit.evaluate()

    @property
    def concluded(self) -> bool:
        return self.current_decision.is_terminal

    def restart(self) -> None:
        self.observations = {}
        self.history.clear()
        self.circuit.reset()
        self.current_decision = INITIAL_DECISION
        self.notice = None


class SessionStore:
    """In-memory sessions, least recently used evicted past ``max_sessions``."""

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> Session:
        session = Session()
        self._sessions[session.session_id] = session
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)
        return session

    def get(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._sessions.move_to_end(session_id)
        return session


__all__ = [
    "SessionError",
    "SessionBusyError",
    "SessionConcludedError",
    "SessionNotFoundError",
    "UnknownObservationError",
    "find_key",
    "with_observation",
    "without_observation",
    "Session",
    "SessionStore",
]
