from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from geoscout.app.providers.errors import ServiceErrorKind


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip() == "1"


def force_breaker_open() -> bool:
    return _flag("FORCE_BREAKER_OPEN")


@dataclass
class SessionCircuit:
    """Sticky per-session breaker.

    One failure opens it and nothing but ``reset()`` closes it again.
    """

    open: bool = False
    tripped_by: Optional[ServiceErrorKind] = None

    def evaluate(self) -> bool:
        """Deterministic breaker evaluation; honors the forced chaos flag."""
        return self.open or force_breaker_open()

    def trip(self, kind: ServiceErrorKind) -> bool:
        """Open the circuit. Returns True only for the first trip."""
        if self.open:
            return False
        self.open = True
        self.tripped_by = kind
        return True

    def reset(self) -> None:
        self.open = False
        self.tripped_by = None


__all__ = ["SessionCircuit", "force_breaker_open"]
