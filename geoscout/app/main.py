from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from geoscout.app.config import Settings, get_settings, safe_error_detail, validate_for_env
from geoscout.app.contract import (
    Decision,
    IdentifyRequest,
    RetractRequest,
    SelectRequest,
    SessionView,
    UIDirective,
)
from geoscout.app.decision_client import RemoteDecisionClient
from geoscout.app.observability import event, get_request_id
from geoscout.app.orchestrator import SessionOrchestrator
from geoscout.app.providers import ServiceError
from geoscout.app.session import (
    SessionBusyError,
    SessionConcludedError,
    SessionError,
    SessionNotFoundError,
    SessionStore,
    UnknownObservationError,
)
from geoscout.app.ux import build_ux_headers, decide_ux_state

APP_VERSION = "0.1.0"
RETRY_OPTION = "Retry"


def _logging_config(level: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }


logger = logging.getLogger(__name__)


def degraded_decision(exc: ServiceError) -> Decision:
    return Decision(
        display_message=exc.notice,
        ui_directive=UIDirective.PHYSICAL_TEST,
        progress=0,
        confidence=0.0,
        options=[RETRY_OPTION],
        identified_mineral=None,
    )


def _session_response(orchestrator: SessionOrchestrator, session, status_code: int = 200) -> JSONResponse:
    view: SessionView = orchestrator.view(session)
    headers = build_ux_headers(decide_ux_state(view), offline=view.offline)
    return JSONResponse(status_code=status_code, content=view.model_dump(mode="json"), headers=headers)


def create_app(
    settings: Optional[Settings] = None,
    *,
    client: Optional[RemoteDecisionClient] = None,
) -> FastAPI:
    s = settings or get_settings()
    dictConfig(_logging_config(s.log_level))
    summary = validate_for_env(s)
    logger.info("[CFG] loaded", extra=summary)

    app = FastAPI(title="GeoScout Identification Service", version=APP_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    remote = client or RemoteDecisionClient(settings=s)
    app.state.settings = s
    app.state.client = remote
    app.state.orchestrator = SessionOrchestrator(remote)
    app.state.store = SessionStore(max_sessions=s.session_max_count)
    app.state.started_at = time.monotonic()

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        rid = get_request_id(request, s.request_id_header)
        request.state.request_id = rid
        response = await call_next(request)
        response.headers.setdefault("X-Request-Id", rid)
        return response

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "version": APP_VERSION,
            "uptime_seconds": int(time.monotonic() - app.state.started_at),
        }

    @app.get("/ready")
    async def ready() -> Dict[str, Any]:
        # The local engine always answers, so the service is ready without a remote key.
        return {
            "status": "ok",
            "remote_available": app.state.client.available,
            "config": validate_for_env(s),
        }

    @app.post("/api/identify", response_model=Decision)
    async def identify(payload: IdentifyRequest, request: Request) -> JSONResponse:
        try:
            decision = await app.state.client.ask(payload.history, payload.current_state)
        except ServiceError as exc:
            logger.warning(
                "[API] identify degraded",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "kind": exc.kind.value,
                    "detail": safe_error_detail(exc),
                },
            )
            return JSONResponse(
                status_code=exc.http_status,
                content=degraded_decision(exc).model_dump(mode="json"),
            )
        return JSONResponse(status_code=200, content=decision.guarded().model_dump(mode="json"))

    @app.post("/api/sessions")
    async def create_session() -> JSONResponse:
        session = app.state.store.create()
        event("session.created", {"session_id": session.session_id})
        return _session_response(app.state.orchestrator, session, status_code=201)

    @app.get("/api/sessions/{session_id}")
    async def get_session(session_id: str) -> JSONResponse:
        session = app.state.store.get(session_id)
        return _session_response(app.state.orchestrator, session)

    @app.post("/api/sessions/{session_id}/select")
    async def select_option(session_id: str, payload: SelectRequest) -> JSONResponse:
        session = app.state.store.get(session_id)
        await app.state.orchestrator.select(session, payload.option)
        return _session_response(app.state.orchestrator, session)

    @app.post("/api/sessions/{session_id}/retract")
    async def retract_observation(session_id: str, payload: RetractRequest) -> JSONResponse:
        session = app.state.store.get(session_id)
        await app.state.orchestrator.retract(session, payload.key)
        return _session_response(app.state.orchestrator, session)

    @app.post("/api/sessions/{session_id}/reset")
    async def reset_session(session_id: str) -> JSONResponse:
        session = app.state.store.get(session_id)
        app.state.orchestrator.reset(session)
        return _session_response(app.state.orchestrator, session)

    @app.exception_handler(SessionError)
    async def handle_session_error(request: Request, exc: SessionError) -> JSONResponse:
        if isinstance(exc, (SessionNotFoundError, UnknownObservationError)):
            status_code = 404
        elif isinstance(exc, (SessionBusyError, SessionConcludedError)):
            status_code = 409
        else:
            status_code = 400
        return JSONResponse(
            status_code=status_code,
            content={"ok": False, "error_code": type(exc).__name__, "detail": safe_error_detail(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error in request")
        content = {"ok": False, "error_code": "internal_error", "message": "Internal server error"}
        if s.debug_errors == 1:
            content["detail"] = safe_error_detail(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()


__all__ = ["app", "create_app", "degraded_decision"]
