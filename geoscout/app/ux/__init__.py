from geoscout.app.ux.state import UXState, build_ux_headers, decide_ux_state

__all__ = [
    "UXState",
    "decide_ux_state",
    "build_ux_headers",
]
