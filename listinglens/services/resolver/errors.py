"""Error taxonomy for listing resolution.

Normalization and identifier failures are deterministic and abort the
pipeline at once. Strategy failures are collected by the pipeline and only
surface, all together, as ``AllStrategiesFailed``.
"""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for every failure the resolver reports."""

    code = "RESOLUTION_ERROR"

    def __init__(self, message: str, phase: str | None = None):
        self.message = message
        self.phase = phase
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "phase": self.phase}


class UnsupportedDomain(ResolutionError):
    code = "UNSUPPORTED_DOMAIN"

    def __init__(self, url: str, expected_domain: str):
        self.url = url
        self.expected_domain = expected_domain
        super().__init__(f"Only {expected_domain} listings are supported: {url!r}")


class RedirectResolutionFailed(ResolutionError):
    code = "REDIRECT_RESOLUTION_FAILED"

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not expand short link {url}: {reason}")


class IdentifierNotFound(ResolutionError):
    code = "IDENTIFIER_NOT_FOUND"

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No item identifier found in {url}")


class NetworkTimeout(ResolutionError):
    code = "NETWORK_TIMEOUT"

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s fetching {url}")


class StrategyFailed(ResolutionError):
    """One strategy gave up.

    ``cause`` is either a short reason or the ResolutionError (usually
    NetworkTimeout) that made the strategy give up.
    """

    code = "STRATEGY_FAILED"

    def __init__(self, strategy: str, cause: str | ResolutionError):
        self.strategy = strategy
        self.cause = cause
        super().__init__(f"{strategy}: {cause}")

    def to_dict(self) -> dict:
        data = {"strategy": self.strategy, "cause": str(self.cause)}
        if isinstance(self.cause, ResolutionError):
            data["code"] = self.cause.code
        return data


class AllStrategiesFailed(ResolutionError):
    code = "ALL_STRATEGIES_FAILED"

    def __init__(self, attempts: list[StrategyFailed], phase: str | None = None):
        self.attempts = list(attempts)
        summary = "; ".join(str(a) for a in self.attempts) or "no strategies configured"
        super().__init__(f"All metadata strategies failed ({summary})", phase=phase)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["attempts"] = [a.to_dict() for a in self.attempts]
        return data
