"""Auth endpoints, plus login/logout flows that keep the session in step.

login() and logout() take any object with set_auth()/clear_auth() (a
reviewdesk_store Session in practice) so the core stays independent of the
store package.
"""

from __future__ import annotations

import logging
from typing import Protocol

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import LoginResponse, Message, User
from reviewdesk_core.result import Ok, Result

logger = logging.getLogger(__name__)


class SessionLike(Protocol):
    def set_auth(self, token: str, user: dict | None) -> None: ...

    def clear_auth(self) -> None: ...


async def post_login(client: ApiClient, username: str, password: str) -> Result:
    result = await client.post("/auth/login", json={"username": username, "password": password})
    return result.map(LoginResponse.from_dict)


async def post_logout(client: ApiClient) -> Result:
    result = await client.post("/auth/logout")
    return result.map(Message.from_dict)


async def get_current_user(client: ApiClient) -> Result:
    result = await client.get("/auth/user")
    return result.map(User.from_dict)


async def login(client: ApiClient, session: SessionLike, username: str, password: str) -> Result:
    """Authenticate and, on success, persist the token/user pair into the session."""
    result = await post_login(client, username, password)
    if isinstance(result, Ok):
        session.set_auth(result.data.token, result.data.user.to_dict())
    return result


async def logout(client: ApiClient, session: SessionLike) -> Result:
    """Tell the backend, then clear the session whatever it answered."""
    result = await post_logout(client)
    if not result.ok:
        logger.warning("Logout request failed (%s); clearing local session anyway", result)
    session.clear_auth()
    return result
