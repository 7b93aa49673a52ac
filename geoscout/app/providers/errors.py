from __future__ import annotations

from enum import Enum
from typing import Optional

RATE_LIMIT_NOTICE = "Daily quota exceeded. Switching to local engine..."
UNAVAILABLE_NOTICE = "Connection unstable. Retrying..."


class ServiceErrorKind(str, Enum):
    RATE_LIMITED = "RATE_LIMITED"
    UNAVAILABLE = "UNAVAILABLE"
    MALFORMED = "MALFORMED"


class ServiceError(Exception):
    """Raised by the remote decision client for any failed consult."""

    kind: ServiceErrorKind = ServiceErrorKind.UNAVAILABLE
    notice: str = UNAVAILABLE_NOTICE
    http_status: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(ServiceError):
    """Remote quota exhausted."""

    kind = ServiceErrorKind.RATE_LIMITED
    notice = RATE_LIMIT_NOTICE
    http_status = 503


class ServiceUnavailableError(ServiceError):
    """Network failure, non-success status, or remote engine not configured."""


class MalformedDecisionError(ServiceError):
    """Remote body could not be coerced into a Decision."""

    kind = ServiceErrorKind.MALFORMED


__all__ = [
    "RATE_LIMIT_NOTICE",
    "UNAVAILABLE_NOTICE",
    "ServiceErrorKind",
    "ServiceError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "MalformedDecisionError",
]
