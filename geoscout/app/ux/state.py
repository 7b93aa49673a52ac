from __future__ import annotations

from enum import Enum

from geoscout.app.contract import SessionView, UIDirective


class UXState(str, Enum):
    READY = "READY"
    BUSY = "BUSY"
    OFFLINE = "OFFLINE"
    CONCLUDED = "CONCLUDED"


def decide_ux_state(view: SessionView) -> UXState:
    if view.loading:
        return UXState.BUSY
    if view.ui_directive == UIDirective.CONCLUSION:
        return UXState.CONCLUDED
    if view.offline:
        return UXState.OFFLINE
    return UXState.READY


def build_ux_headers(ux_state: UXState, *, offline: bool) -> dict[str, str]:
    return {
        "X-UX-State": ux_state.value,
        "X-Engine": "local" if offline else "remote",
    }


__all__ = ["UXState", "decide_ux_state", "build_ux_headers"]
