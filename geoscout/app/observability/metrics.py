from __future__ import annotations

from typing import Any, Dict

from geoscout.app.observability.logging import safe_redact, structured_log


def counter(name: str, value: int = 1, labels: dict[str, str] | None = None) -> None:
    payload = {"type": "metric", "metric_type": "counter", "name": name, "value": int(value), "labels": labels or {}}
    structured_log(payload)


def event(name: str, fields: Dict[str, Any]) -> None:
    structured_log({"type": "event", "name": name, "fields": safe_redact(fields)})


__all__ = ["counter", "event"]
