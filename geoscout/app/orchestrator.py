"""Session state machine.

start -> {observation, physical_test, chemical_test}* -> conclusion.
A conclusion only exits through ``reset``. State is advanced only after a
consult has produced an adopted Decision, so the observation set a user
sees is always the one that was evaluated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from geoscout.app.config import safe_error_detail
from geoscout.app.contract import (
    HISTORY_LIMIT,
    ActionType,
    Decision,
    HistoryTurn,
    Observation,
    ObservedTrait,
    SessionView,
    UIDirective,
)
from geoscout.app.decision_client import RemoteDecisionClient
from geoscout.app.inference import synthesize_local_decision
from geoscout.app.observability import counter, event
from geoscout.app.providers import ServiceError, ServiceUnavailableError
from geoscout.app.session import (
    Session,
    SessionBusyError,
    SessionConcludedError,
    with_observation,
    without_observation,
)

logger = logging.getLogger(__name__)

START_ACTION_LABEL = "Start Session"
LOADING_MESSAGE = "Processing..."
UNSTABLE_SIGNAL_CEILING = 0.4


@dataclass(frozen=True)
class ConsultOutcome:
    decision: Decision
    source: str
    assistant_turn: Optional[HistoryTurn] = None


def _user_turn(action: ActionType, label: str) -> HistoryTurn:
    return HistoryTurn(role="user", content=f"User {action.value}: {label}")


class SessionOrchestrator:
    def __init__(self, client: RemoteDecisionClient) -> None:
        self.client = client

    async def select(self, session: Session, option: str) -> Decision:
        self._ensure_actionable(session)
        if session.current_decision.ui_directive == UIDirective.START:
            return await self._advance(session, {}, ActionType.SELECTED, START_ACTION_LABEL)
        source = session.current_decision.ui_directive.value
        observations = with_observation(session.observations, option, source)
        return await self._advance(session, observations, ActionType.SELECTED, option)

    async def retract(self, session: Session, key: str) -> Decision:
        self._ensure_actionable(session)
        observations = without_observation(session.observations, key)
        return await self._advance(session, observations, ActionType.REMOVED, key)

    def reset(self, session: Session) -> Decision:
        self._ensure_idle(session)
        session.restart()
        event("session.reset", {"session_id": session.session_id})
        return session.current_decision

    def view(self, session: Session) -> SessionView:
        decision = session.current_decision
        return SessionView(
            session_id=session.session_id,
            message=LOADING_MESSAGE if session.busy else decision.display_message,
            confidence=decision.confidence,
            progress=decision.progress,
            options=list(decision.options),
            loading=session.busy,
            offline=session.offline,
            ui_directive=decision.ui_directive,
            identified_mineral=decision.identified_mineral,
            observations=[ObservedTrait(key=key, source=obs.source) for key, obs in session.observations.items()],
            notice=session.notice,
            signal_unstable=0 < decision.confidence < UNSTABLE_SIGNAL_CEILING,
            completed_categories=decision.completed_categories,
        )

    @staticmethod
    def _ensure_idle(session: Session) -> None:
        if session.busy:
            raise SessionBusyError(session.session_id)

    def _ensure_actionable(self, session: Session) -> None:
        self._ensure_idle(session)
        if session.concluded:
            raise SessionConcludedError(session.session_id)

    async def _advance(
        self,
        session: Session,
        observations: Dict[str, Observation],
        action: ActionType,
        label: str,
    ) -> Decision:
        session.busy = True
        try:
            pending: List[HistoryTurn] = [*session.history, _user_turn(action, label)][-HISTORY_LIMIT:]
            outcome = await self._consult(session, pending, observations)

            session.observations = observations
            session.history.clear()
            session.history.extend(pending)
            if outcome.assistant_turn is not None:
                session.history.append(outcome.assistant_turn)
            session.current_decision = outcome.decision
        finally:
            session.busy = False

        event(
            "session.decision",
            {
                "session_id": session.session_id,
                "action": action.value,
                "source": outcome.source,
                "ui_directive": outcome.decision.ui_directive.value,
                "evidence_count": len(observations),
                "offline": session.offline,
            },
        )
        return outcome.decision

    async def _consult(
        self,
        session: Session,
        history: List[HistoryTurn],
        observations: Dict[str, Observation],
    ) -> ConsultOutcome:
        if session.circuit.evaluate():
            return self._consult_local(observations)

        try:
            decision = await self.client.ask(tuple(history), dict(observations))
        except ServiceError as exc:
            self._trip(session, exc)
            return self._consult_local(observations)
        except Exception as exc:  # noqa: BLE001
            self._trip(session, ServiceUnavailableError(safe_error_detail(exc)))
            return self._consult_local(observations)

        decision = decision.guarded()
        return ConsultOutcome(
            decision=decision,
            source="remote",
            assistant_turn=HistoryTurn(role="assistant", content=decision.model_dump_json()),
        )

    @staticmethod
    def _consult_local(observations: Dict[str, Observation]) -> ConsultOutcome:
        local = synthesize_local_decision(observations)
        return ConsultOutcome(decision=local.decision.guarded(), source=f"local:{local.source.value}")

    @staticmethod
    def _trip(session: Session, exc: ServiceError) -> None:
        session.notice = exc.notice
        if session.circuit.trip(exc.kind):
            counter("circuit_trip", labels={"kind": exc.kind.value})
            logger.warning(
                "[ORCH] remote engine failed; switching session to local engine",
                extra={
                    "session_id": session.session_id,
                    "kind": exc.kind.value,
                    "status_code": exc.status_code,
                    "detail": safe_error_detail(exc),
                },
            )


__all__ = ["SessionOrchestrator", "ConsultOutcome", "LOADING_MESSAGE", "START_ACTION_LABEL"]
