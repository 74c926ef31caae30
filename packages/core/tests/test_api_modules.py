"""Tests for the endpoint modules: paths, bodies and payload mapping."""

from __future__ import annotations

import json

import httpx
import pytest

from reviewdesk_core.api import auth, dashboard, health, llm, platform, repository, review, system
from reviewdesk_core.models import GitPlatformConfig, LLMProvider, SystemWebhookConfig
from reviewdesk_core.result import AuthExpired, Failure, Ok

LOGIN_BODY = {
    "token": "jwt-token",
    "user": {"id": 1, "username": "admin", "email": "admin@example.com", "is_active": True},
}


def _body(request: httpx.Request):
    return json.loads(request.content) if request.content else None


class TestAuth:
    @pytest.mark.asyncio
    async def test_login_stores_session(self, make_client, session):
        session.clear_auth()
        calls: list[httpx.Request] = []
        async with make_client({("POST", "/auth/login"): LOGIN_BODY}, calls) as client:
            result = await auth.login(client, session, "admin", "secret")

        assert isinstance(result, Ok)
        assert result.data.user.username == "admin"
        assert _body(calls[0]) == {"username": "admin", "password": "secret"}
        assert session.token == "jwt-token"
        assert session.user["email"] == "admin@example.com"

    @pytest.mark.asyncio
    async def test_failed_login_leaves_session_alone(self, make_client, session):
        session.clear_auth()
        routes = {("POST", "/auth/login"): httpx.Response(401, json={"error": "invalid credentials"})}
        async with make_client(routes) as client:
            result = await auth.login(client, session, "admin", "wrong")

        assert result == AuthExpired("invalid credentials")
        assert session.is_authenticated() is False

    @pytest.mark.asyncio
    async def test_logout_clears_session_even_when_call_fails(self, make_client, session):
        routes = {("POST", "/auth/logout"): httpx.Response(500, json={"error": "boom"})}
        async with make_client(routes) as client:
            result = await auth.logout(client, session)

        assert isinstance(result, Failure)
        assert session.token is None
        assert session.user is None

    @pytest.mark.asyncio
    async def test_current_user(self, make_client):
        async with make_client({("GET", "/auth/user"): LOGIN_BODY["user"]}) as client:
            user = (await auth.get_current_user(client)).unwrap()
        assert user.id == 1
        assert user.is_active is True


class TestLLM:
    @pytest.mark.asyncio
    async def test_create_omits_blank_key(self, make_client):
        calls: list[httpx.Request] = []
        routes = {("POST", "/llm/providers"): {"id": 4, "name": "openai", "base_url": "https://x/v1", "model": "gpt-4o"}}
        async with make_client(routes, calls) as client:
            created = (await llm.create_provider(client, LLMProvider(name="openai", base_url="https://x/v1", model="gpt-4o"))).unwrap()

        assert created.id == 4
        assert "api_key" not in _body(calls[0])

    @pytest.mark.asyncio
    async def test_update_sends_only_changed_fields(self, make_client):
        calls: list[httpx.Request] = []
        routes = {("PUT", "/llm/providers/4"): {"id": 4, "name": "renamed"}}
        async with make_client(routes, calls) as client:
            await llm.update_provider(client, 4, {"name": "renamed", "api_key": "", "model": None, "is_active": False})

        assert _body(calls[0]) == {"name": "renamed", "is_active": False}

    @pytest.mark.asyncio
    async def test_fetch_models(self, make_client):
        calls: list[httpx.Request] = []
        routes = {("POST", "/llm/providers/models"): {"models": ["gpt-4o", "gpt-4o-mini"]}}
        async with make_client(routes, calls) as client:
            models = (await llm.fetch_models(client, "https://x/v1", "sk-1")).unwrap()

        assert models == ["gpt-4o", "gpt-4o-mini"]
        assert _body(calls[0]) == {"base_url": "https://x/v1", "api_key": "sk-1"}

    @pytest.mark.asyncio
    async def test_fetch_provider_models_without_list(self, make_client):
        async with make_client({("GET", "/llm/providers/4/models"): {}}) as client:
            assert (await llm.fetch_provider_models(client, 4)).unwrap() == []

    @pytest.mark.asyncio
    async def test_test_model(self, make_client):
        routes = {("POST", "/llm/providers/test-model"): {"success": True, "message": "model works"}}
        async with make_client(routes) as client:
            outcome = (await llm.test_model(client, "https://x/v1", "sk", "gpt-4o")).unwrap()
        assert outcome.success is True
        assert outcome.message == "model works"


class TestPlatform:
    @pytest.mark.asyncio
    async def test_unconfigured_platform_maps_to_none(self, make_client):
        routes = {("GET", "/platform/config"): {"exists": False, "message": "No platform configured"}}
        async with make_client(routes) as client:
            assert (await platform.get_config(client)).unwrap() is None

    @pytest.mark.asyncio
    async def test_update_returns_saved_config(self, make_client):
        calls: list[httpx.Request] = []
        saved = {"id": 1, "platform_type": "gitlab", "base_url": "https://gitlab.example.com", "is_active": True}
        routes = {("PUT", "/platform/config"): {"message": "saved", "config": saved}}
        config = GitPlatformConfig(platform_type="gitlab", base_url="https://gitlab.example.com")
        async with make_client(routes, calls) as client:
            result = (await platform.update_config(client, config)).unwrap()

        assert result.id == 1
        assert "access_token" not in _body(calls[0])


class TestRepository:
    @pytest.mark.asyncio
    async def test_remote_total_derived_from_pages(self, make_client):
        calls: list[httpx.Request] = []
        routes = {("GET", "/repositories/gitlab"): {"repositories": [], "page": 2, "per_page": 10, "total_pages": 4}}
        async with make_client(routes, calls) as client:
            page = (await repository.list_remote(client, page=2, per_page=10, search="api")).unwrap()

        assert page.total == 40
        assert page.total_pages == 4
        assert dict(calls[0].url.params) == {"page": "2", "per_page": "10", "search": "api"}

    @pytest.mark.asyncio
    async def test_repository_without_webhook(self, make_client):
        routes = {("GET", "/repositories/3"): {"id": 3, "name": "api", "full_path": "g/api", "webhook_id": 0}}
        async with make_client(routes) as client:
            repo = (await repository.get_repository(client, 3)).unwrap()
        assert repo.webhook_id is None

    @pytest.mark.asyncio
    async def test_webhook_test_status_shape(self, make_client):
        routes = {("POST", "/repositories/3/webhook/test"): {"status": "success", "message": "delivered"}}
        async with make_client(routes) as client:
            outcome = (await repository.test_webhook(client, 3)).unwrap()
        assert outcome.success is True


class TestOtherEndpoints:
    @pytest.mark.asyncio
    async def test_review_detail(self, make_client):
        body = {
            "id": 9,
            "status": "completed",
            "repository": {"id": 1, "name": "api"},
            "fix_suggestions": [{"file_path": "a.go", "line_start": 3, "line_end": 7, "severity": "high", "description": "x"}],
        }
        async with make_client({("GET", "/reviews/9"): body}) as client:
            detail = (await review.get_review(client, 9)).unwrap()
        assert detail.repository.name == "api"
        assert detail.fix_suggestions[0].line_range == "3-7"

    @pytest.mark.asyncio
    async def test_webhook_config_roundtrip(self, make_client):
        calls: list[httpx.Request] = []
        routes = {
            ("PUT", "/system/webhook"): {"webhook_callback_url": "https://hook"},
        }
        async with make_client(routes, calls) as client:
            await system.update_webhook_config(client, SystemWebhookConfig(webhook_callback_url="https://hook"))
        assert _body(calls[0]) == {"webhook_callback_url": "https://hook"}

    @pytest.mark.asyncio
    async def test_token_usage_defaults(self, make_client):
        async with make_client({("GET", "/dashboard/token-usage"): {}}) as client:
            usage = (await dashboard.get_token_usage(client)).unwrap()
        assert usage.summary.total_tokens == 0
        assert usage.top_repositories == []

    @pytest.mark.asyncio
    async def test_health(self, make_client):
        async with make_client({("GET", "/health"): {"status": "ok", "database": "ok"}}) as client:
            status = (await health.check(client)).unwrap()
        assert status.status == "ok"


class TestEmptyBodies:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "route, call",
        [
            (("GET", "/auth/user"), lambda c: auth.get_current_user(c)),
            (("GET", "/reviews/9"), lambda c: review.get_review(c, 9)),
            (("GET", "/repositories/3"), lambda c: repository.get_repository(c, 3)),
            (("POST", "/repositories/3/webhook/test"), lambda c: repository.test_webhook(c, 3)),
            (("GET", "/llm/providers/2"), lambda c: llm.get_provider(c, 2)),
            (("POST", "/llm/providers/2/test"), lambda c: llm.test_provider(c, 2)),
            (("GET", "/system/webhook"), lambda c: system.get_webhook_config(c)),
            (("GET", "/dashboard/recent"), lambda c: dashboard.get_recent(c)),
        ],
    )
    async def test_empty_success_body_still_maps(self, make_client, route, call):
        async with make_client({route: httpx.Response(200)}) as client:
            result = await call(client)

        assert isinstance(result, Ok)
        assert result.data is not None

    @pytest.mark.asyncio
    async def test_empty_user_body(self, make_client):
        async with make_client({("GET", "/auth/user"): httpx.Response(200)}) as client:
            user = (await auth.get_current_user(client)).unwrap()
        assert user.username == ""
