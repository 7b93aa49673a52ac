from __future__ import annotations

import re

_API_KEY_PATTERN = re.compile(r"\b((?:sk|gsk)[-_][A-Za-z0-9]{8,})")
_BEARER_PATTERN = re.compile(r"(Authorization:\s*Bearer\s+)[^\s]+", re.IGNORECASE)


def redact_secrets(s: str) -> str:
    if not s:
        return s
    redacted = _API_KEY_PATTERN.sub("[redacted]", s)
    return _BEARER_PATTERN.sub(r"\1[redacted]", redacted)


def safe_error_detail(exc: BaseException) -> str:
    return redact_secrets(str(exc))[:200]


__all__ = ["redact_secrets", "safe_error_detail"]
