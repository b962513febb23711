"""Structured errors raised by the Sendblue client.

Every failure the request pipeline reports is a ``SendblueError``
carrying one ``SendblueErrorKind`` and a ``RequestFailureCause``
describing the outbound request and the inbound response.
"""

from __future__ import annotations

import enum

import pydantic


class SendblueErrorKind(enum.Enum):
    """Closed set of failures reported by the request pipeline."""

    API_REQUEST_FAILURE = "API request failed"
    MALFORMED_RESPONSE = "Malformed response body"


class RequestFailureCause(pydantic.BaseModel):
    """Snapshot of the request/response pair behind a failure.

    Attributes:
        request: The JSON-serialized outbound payload, or ``None``
            when the request carried no body.
        code: The HTTP status code returned by Sendblue.
        message: The server-reported ``message`` field, if any.
        retry_after: Seconds from a ``Retry-After`` response header, if any.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    request: str | None = None
    code: int
    message: str | None = None
    retry_after: int | None = None


class SendblueError(Exception):
    """Error raised when a call to the Sendblue API fails.

    Attributes:
        kind: Which failure occurred.
        message: Human-readable description naming the failing route.
        cause: Request/response details for the failure.
    """

    def __init__(self, kind: SendblueErrorKind, message: str, cause: RequestFailureCause) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    @property
    def status_code(self) -> int:
        """HTTP status of the failing response."""
        return self.cause.code

    def __repr__(self) -> str:
        return f"SendblueError(kind={self.kind.name}, message={self.message!r}, cause={self.cause!r})"
