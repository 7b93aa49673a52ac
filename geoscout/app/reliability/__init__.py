from geoscout.app.reliability.breaker import SessionCircuit, force_breaker_open

__all__ = ["SessionCircuit", "force_breaker_open"]
