"""Route table, router and route guard.

The CLI has no URL bar, but commands still map onto the same screens the
backend's operators know (dashboard, repositories, reviews, settings), and
the 401 policy depends on where the user is: off the login route a 401 means
"session expired, go to login"; on the login route it just means "wrong
credentials". Router keeps that current location explicit.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Routes:
    HOME = "/"
    LOGIN = "/login"
    SETTINGS = "/settings"
    REPOSITORIES = "/repositories"
    REVIEWS = "/reviews"
    REVIEW_DETAIL = "/reviews/{id}"


PUBLIC_ROUTES = frozenset({Routes.LOGIN})


class SessionLike(Protocol):
    def is_authenticated(self) -> bool: ...


NavigateListener = Callable[[str, str, bool], None]


class Router:
    def __init__(self, current: str = Routes.HOME):
        self.current = current
        self.history: list[str] = [current]
        self._listeners: list[NavigateListener] = []

    def on_navigate(self, listener: NavigateListener) -> None:
        """Register listener(previous, target, replaced), called after each navigation.

        Redirects (guard, expired session) navigate with replace=True.
        """
        self._listeners.append(listener)

    def navigate(self, path: str, replace: bool = False) -> None:
        previous = self.current
        if replace and self.history:
            self.history[-1] = path
        else:
            self.history.append(path)
        self.current = path
        logger.debug("navigate %s -> %s", previous, path)
        for listener in self._listeners:
            listener(previous, path, replace)

    def is_public(self, path: str) -> bool:
        return path in PUBLIC_ROUTES


def guard(session: SessionLike, router: Router, path: str) -> bool:
    """Enter path if allowed. Unauthenticated users are redirected to login instead.

    Returns True when the route was entered.
    """
    if not router.is_public(path) and not session.is_authenticated():
        router.navigate(Routes.LOGIN, replace=True)
        return False
    router.navigate(path)
    return True
