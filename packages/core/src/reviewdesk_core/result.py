"""Explicit outcome of one API call.

The transport never raises for HTTP or network failures and never decides
what a 401 means for the user. It returns one of:

    Ok(data)                       2xx, JSON body already decoded
    AuthExpired(message)           HTTP 401
    Failure(kind, message, status) anything else

API modules use map() to turn Ok payloads into typed models, and the caller
hands the result to ResultHandler (reviewdesk_core.effects), which owns
notifications, session clearing and navigation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from reviewdesk_core.exceptions import ApiError, AuthExpiredError, ErrorKind

T = TypeVar("T")
U = TypeVar("U")

SESSION_EXPIRED_MESSAGE = "Session expired, please login again"
GENERIC_ERROR_MESSAGE = "An error occurred"
NETWORK_ERROR_MESSAGE = "Network error, please check your connection"
REQUEST_FAILED_MESSAGE = "Request failed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.data))

    def unwrap(self) -> T:
        return self.data


@dataclass(frozen=True)
class AuthExpired:
    message: str = SESSION_EXPIRED_MESSAGE

    @property
    def ok(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> AuthExpired:
        return self

    def unwrap(self) -> Any:
        raise AuthExpiredError(self.message)


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    status: int | None = None

    @property
    def ok(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> Failure:
        return self

    def unwrap(self) -> Any:
        raise ApiError(self.kind, self.message, self.status)


Result = Union[Ok[T], AuthExpired, Failure]
