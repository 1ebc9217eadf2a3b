from __future__ import annotations
from dataclasses import dataclass
from typing import Any

# Failure kinds
CONFIGURATION_ERROR = "ConfigurationError"
MISSING_CREDENTIAL = "MissingCredential"
INVALID_CREDENTIAL = "InvalidCredential"
RATE_LIMIT_EXCEEDED = "RateLimitExceeded"
UPSTREAM_AUTH_ERROR = "UpstreamAuthError"
UPSTREAM_ERROR = "UpstreamError"
NETWORK_ERROR = "NetworkError"
INVALID_ACTION = "InvalidAction"
MISSING_PARAMETER = "MissingParameter"
INVALID_PARAMETER = "InvalidParameter"
INTERNAL_ERROR = "InternalError"

STATUS_BY_KIND = {
    MISSING_CREDENTIAL: 401,
    INVALID_CREDENTIAL: 401,
    RATE_LIMIT_EXCEEDED: 429,
}


@dataclass(frozen=True)
class Failure:
    """Tagged failure: kind + human-readable message."""
    kind: str
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND.get(self.kind, 500)


class ReservationError(Exception):
    """Base for errors that short-circuit a request; carries its Failure."""
    kind = INTERNAL_ERROR

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def failure(self) -> Failure:
        return Failure(self.kind, str(self))


class UpstreamAuthError(ReservationError):
    kind = UPSTREAM_AUTH_ERROR


class UpstreamError(ReservationError):
    kind = UPSTREAM_ERROR

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {_render_body(body)}")


class NetworkError(ReservationError):
    kind = NETWORK_ERROR

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Network error: Unable to connect to {target}")


def _render_body(body: Any) -> str:
    if isinstance(body, str):
        return body
    import orjson
    try:
        return orjson.dumps(body).decode("utf-8")
    except TypeError:
        return repr(body)
