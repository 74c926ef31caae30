"""Shared fixtures: a signed-in session over memory, a router and a captured notifier."""

from __future__ import annotations

import io

import httpx
import pytest
from rich.console import Console

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.notify import Notifier
from reviewdesk_core.routes import Router, Routes
from reviewdesk_store.memory import MemoryBackend
from reviewdesk_store.session import Session

BASE_URL = "http://backend.test/api"


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def notifier(output):
    return Notifier(Console(file=output, width=200, color_system=None))


@pytest.fixture
def session():
    s = Session(MemoryBackend())
    s.set_auth("tok", {"id": 1, "username": "admin"})
    return s


@pytest.fixture
def router():
    return Router(Routes.HOME)


@pytest.fixture
def handler(session, router, notifier):
    return ResultHandler(session, router, notifier)


@pytest.fixture
def make_client():
    """Build an ApiClient over a MockTransport keyed by (method, path).

    A route maps to an httpx.Response, a callable taking the request, or a JSON
    body served with status 200.
    """

    def factory(routes: dict, calls: list | None = None) -> ApiClient:
        def dispatch(request: httpx.Request) -> httpx.Response:
            key = (request.method, request.url.path.removeprefix("/api"))
            if calls is not None:
                calls.append(request)
            if key not in routes:
                return httpx.Response(404, json={"error": f"no route {key}"})
            answer = routes[key]
            if isinstance(answer, httpx.Response):
                return answer
            if callable(answer):
                return answer(request)
            return httpx.Response(200, json=answer)

        return ApiClient(base_url=BASE_URL, token_provider=lambda: "tok", transport=httpx.MockTransport(dispatch))

    return factory
