"""Exception hierarchy shared by the API layer, the views and the CLI."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Why a request produced no usable response."""

    HTTP = "http"  # server answered with a non-2xx status
    NETWORK = "network"  # no response at all
    REQUEST = "request"  # the request could not be built


class ReviewdeskError(Exception):
    """Base class for every error raised by reviewdesk."""


class ApiError(ReviewdeskError):
    def __init__(self, kind: ErrorKind, message: str, status: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status


class AuthExpiredError(ReviewdeskError):
    """The backend rejected the bearer token (HTTP 401)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownStatusError(ReviewdeskError, ValueError):
    """A status string outside the closed set the client knows how to present."""

    def __init__(self, kind: str, value: str):
        super().__init__(f"Unknown {kind} status: {value!r}")
        self.kind = kind
        self.value = value


class ValidationError(ReviewdeskError, ValueError):
    """Input rejected locally, before any request was sent."""
