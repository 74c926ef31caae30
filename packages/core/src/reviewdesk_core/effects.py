"""Caller-level effect handler for API results.

ResultHandler is where transport outcomes turn into side effects:

  Ok           return the payload
  AuthExpired  off the login route: clear the session, tell the user, and
               navigate to login (once; after that the router is on login)
               on the login route: show the message inline, touch nothing
  Failure      show the backend's message

Every non-Ok result is re-raised as an exception after its effects run, so
the caller can still add local handling on top.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from reviewdesk_core.exceptions import ApiError, AuthExpiredError
from reviewdesk_core.notify import Notifier
from reviewdesk_core.result import SESSION_EXPIRED_MESSAGE, AuthExpired, Failure, Ok, Result
from reviewdesk_core.routes import Router, Routes

logger = logging.getLogger(__name__)


class SessionLike(Protocol):
    def clear_auth(self) -> None: ...


class ResultHandler:
    def __init__(self, session: SessionLike, router: Router, notifier: Notifier):
        self.session = session
        self.router = router
        self.notifier = notifier

    def handle(self, result: Result) -> Any:
        if isinstance(result, Ok):
            return result.data

        if isinstance(result, AuthExpired):
            if self.router.current == Routes.LOGIN:
                self.notifier.error(result.message)
            else:
                logger.info("Token rejected on %s; clearing session", self.router.current)
                self.session.clear_auth()
                self.notifier.error(SESSION_EXPIRED_MESSAGE)
                self.router.navigate(Routes.LOGIN, replace=True)
            raise AuthExpiredError(result.message)

        if isinstance(result, Failure):
            self.notifier.error(result.message)
            raise ApiError(result.kind, result.message, result.status)

        raise TypeError(f"Not an API result: {result!r}")
