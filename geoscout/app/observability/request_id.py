from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Request


def get_request_id(request: Optional[Request], header: str = "x-request-id") -> str:
    if request is None:
        return str(uuid.uuid4())
    rid = request.headers.get(header)
    if rid and rid.strip():
        return rid.strip()[:128]
    return str(uuid.uuid4())


__all__ = ["get_request_id"]
