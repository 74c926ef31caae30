"""Single configured HTTP client for the review backend.

Every API module goes through ApiClient.request(), which:

  - attaches `Authorization: Bearer <token>` when the injected token
    provider returns a token (request event hook, so it also covers calls
    made directly on the underlying httpx client);
  - turns every outcome into a Result instead of raising, extracting the
    backend's conventional {"error": "..."} message for non-2xx answers.

The client knows nothing about sessions or navigation. Whoever builds it
passes a zero-argument callable returning the current token, and whoever
consumes the Result decides what a 401 means (see ResultHandler).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from reviewdesk_core.config import DEFAULT_API_BASE_URL
from reviewdesk_core.exceptions import ErrorKind
from reviewdesk_core.result import (
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    REQUEST_FAILED_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    AuthExpired,
    Failure,
    Ok,
    Result,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

TokenProvider = Callable[[], "str | None"]


def _no_token() -> str | None:
    return None


def _error_message(response: httpx.Response) -> str | None:
    """Pull the {"error": "..."} message out of a failed response, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset query parameters so `?status=` is never sent for an empty filter."""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token_provider = token_provider or _no_token
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url + "/",
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks={"request": [self._attach_token]},
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self._token_provider()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Result:
        """Send one request and describe the outcome. Never raises for HTTP or network errors."""
        try:
            response = await self._http.request(method, path, params=_clean_params(params), json=json)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as e:
            logger.debug("%s %s could not be built: %s", method, path, e)
            return Failure(ErrorKind.REQUEST, REQUEST_FAILED_MESSAGE)
        except httpx.RequestError as e:
            logger.debug("%s %s got no response (%s): %s", method, path, type(e).__name__, e)
            return Failure(ErrorKind.NETWORK, NETWORK_ERROR_MESSAGE)

        logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.status_code == 401:
            return AuthExpired(_error_message(response) or SESSION_EXPIRED_MESSAGE)

        if response.is_error:
            return Failure(
                ErrorKind.HTTP,
                _error_message(response) or GENERIC_ERROR_MESSAGE,
                response.status_code,
            )

        if not response.content:
            return Ok(None)
        try:
            return Ok(response.json())
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, path)
            return Failure(ErrorKind.HTTP, "Invalid response from server", response.status_code)

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Result:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> Result:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, *, json: Any = None) -> Result:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Result:
        return await self.request("DELETE", path)
