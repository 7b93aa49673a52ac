from __future__ import annotations

import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

_REDACTED_KEYS = ("messages", "prompt", "history", "current_state", "raw_payload", "body")


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    # Shallow redact payload-bearing keys
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in _REDACTED_KEYS:
        redacted.pop(key, None)
    return redacted


def structured_log(event: Dict[str, Any]) -> None:
    try:
        safe_event = safe_redact(event)
        logger.info(json.dumps(safe_event, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        # logging must never break the request path
        return


__all__ = ["structured_log", "safe_redact"]
