"""Tests for the view controllers behind the dashboard, repository, import and review commands."""

from __future__ import annotations

import json

import httpx
import pytest

from reviewdesk_core.exceptions import ApiError, AuthExpiredError
from reviewdesk_core.models import FixSuggestion, Repository, Review
from reviewdesk_core.routes import Routes
from reviewdesk_core.views.dashboard import DashboardView
from reviewdesk_core.views.importer import ImportView
from reviewdesk_core.views.repositories import RepositoryListView
from reviewdesk_core.views.reviews import ReviewListView, ReviewTab, filter_suggestions

STATS = {
    "total_reviews": 10,
    "completed_reviews": 8,
    "failed_reviews": 2,
    "average_score": 77.5,
    "critical_issues": 1,
    "high_issues": 2,
    "medium_issues": 0,
    "low_issues": 0,
    "security_issues": 0,
    "performance_issues": 0,
    "quality_issues": 0,
}


def _dashboard_routes(overrides=None):
    routes = {
        ("GET", "/dashboard/statistics"): STATS,
        ("GET", "/dashboard/recent"): [{"id": 1, "status": "completed", "score": 90}],
        ("GET", "/dashboard/trends"): [],
        ("GET", "/dashboard/token-usage"): {"summary": {"total_tokens": 1500}, "top_repositories": [], "daily_trend": []},
    }
    routes.update(overrides or {})
    return routes


def _repo(id_, name, path=None, **extra):
    return {"id": id_, "name": name, "full_path": path or f"group/{name}", **extra}


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class TestDashboardView:
    @pytest.mark.asyncio
    async def test_load_fills_every_section(self, make_client, handler):
        async with make_client(_dashboard_routes()) as client:
            view = DashboardView(client, handler)
            await view.load()

        assert view.stats.total_reviews == 10
        assert [r.id for r in view.recent] == [1]
        assert view.trends == []
        assert view.token_usage.summary.total_tokens == 1500

    @pytest.mark.asyncio
    async def test_requests_are_sent_with_limits(self, make_client, handler):
        calls: list[httpx.Request] = []
        async with make_client(_dashboard_routes(), calls) as client:
            await DashboardView(client, handler).load()

        params = {r.url.path: dict(r.url.params) for r in calls}
        assert params["/api/dashboard/recent"] == {"limit": "10"}
        assert params["/api/dashboard/trends"] == {"days": "30"}
        assert params["/api/dashboard/token-usage"] == {"days": "30"}

    @pytest.mark.asyncio
    async def test_chart_decisions(self, make_client, handler):
        async with make_client(_dashboard_routes()) as client:
            view = DashboardView(client, handler)
            await view.load()

        assert view.has_issue_distribution is True  # 1 critical + 2 high
        assert view.has_category_distribution is False  # all categories zero
        assert view.has_trends is False
        assert view.has_token_trend is False
        assert view.has_top_repositories is False

    @pytest.mark.asyncio
    async def test_one_failure_fails_the_whole_load(self, make_client, handler, output):
        routes = _dashboard_routes({("GET", "/dashboard/trends"): httpx.Response(500, json={"error": "db down"})})
        async with make_client(routes) as client:
            view = DashboardView(client, handler)
            with pytest.raises(ApiError):
                await view.load()

        assert view.stats is None
        assert "Failed to load dashboard data" in output.getvalue()

    @pytest.mark.asyncio
    async def test_expired_session_redirects(self, make_client, handler, session, router, output):
        routes = _dashboard_routes({("GET", "/dashboard/statistics"): httpx.Response(401)})
        async with make_client(routes) as client:
            with pytest.raises(AuthExpiredError):
                await DashboardView(client, handler).load()

        assert session.is_authenticated() is False
        assert router.current == Routes.LOGIN
        assert "Failed to load dashboard data" not in output.getvalue()


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


def _repository_listing(*repos):
    return {"repositories": list(repos), "total": len(repos), "page": 1, "page_size": 20}


class TestRepositoryListView:
    @pytest.mark.asyncio
    async def test_load(self, make_client, handler):
        routes = {("GET", "/repositories"): _repository_listing(_repo(1, "api"), _repo(2, "web"))}
        async with make_client(routes) as client:
            view = RepositoryListView(client, handler)
            await view.load()

        assert [r.name for r in view.repositories] == ["api", "web"]
        assert view.total == 2

    def test_filter_matches_name_or_path_case_insensitively(self, handler):
        view = RepositoryListView(client=None, handler=handler)
        view.repositories = [
            Repository.from_dict(r)
            for r in (_repo(1, "Payments", "team/payments"), _repo(2, "web", "frontend/WEB-app"))
        ]
        view.search_text = "PAY"
        assert [r.id for r in view.filtered] == [1]
        view.search_text = "frontend"
        assert [r.id for r in view.filtered] == [2]
        view.search_text = "  "
        assert len(view.filtered) == 2

    @pytest.mark.asyncio
    async def test_delete_removes_row_after_success(self, make_client, handler, output):
        routes = {
            ("GET", "/repositories"): _repository_listing(_repo(1, "api"), _repo(2, "web")),
            ("DELETE", "/repositories/1"): {"message": "Repository deleted successfully"},
        }
        async with make_client(routes) as client:
            view = RepositoryListView(client, handler)
            await view.load()
            assert await view.delete(1) is True

        assert [r.id for r in view.repositories] == [2]
        assert view.total == 1
        assert "Repository deleted" in output.getvalue()

    @pytest.mark.asyncio
    async def test_failed_delete_leaves_state_untouched(self, make_client, handler, output):
        routes = {
            ("GET", "/repositories"): _repository_listing(_repo(1, "api"), _repo(2, "web")),
            ("DELETE", "/repositories/1"): httpx.Response(500, json={"error": "webhook removal failed"}),
        }
        async with make_client(routes) as client:
            view = RepositoryListView(client, handler)
            await view.load()
            assert await view.delete(1) is False

        assert [r.id for r in view.repositories] == [1, 2]
        assert view.total == 2
        assert "webhook removal failed" in output.getvalue()
        assert "Repository deleted" not in output.getvalue()

    @pytest.mark.asyncio
    async def test_webhook_test_reports_and_reloads(self, make_client, handler, output):
        calls: list[httpx.Request] = []
        routes = {
            ("GET", "/repositories"): _repository_listing(_repo(1, "api", webhook_id=9)),
            ("POST", "/repositories/1/webhook/test"): {"status": "failed", "message": "connection refused"},
        }
        async with make_client(routes, calls) as client:
            view = RepositoryListView(client, handler)
            outcome = await view.test_webhook(1)

        assert outcome.success is False
        assert "Webhook test failed: connection refused" in output.getvalue()
        assert [r.method for r in calls] == ["POST", "GET"]

    @pytest.mark.asyncio
    async def test_recreate_webhook(self, make_client, handler, output):
        routes = {
            ("GET", "/repositories"): _repository_listing(_repo(1, "api", webhook_id=10)),
            ("PUT", "/repositories/1/webhook"): {"message": "Webhook recreated successfully"},
        }
        async with make_client(routes) as client:
            view = RepositoryListView(client, handler)
            assert await view.recreate_webhook(1) is True

        assert view.repositories[0].webhook_id == 10
        assert "Webhook recreated" in output.getvalue()

    @pytest.mark.asyncio
    async def test_clear_llm_provider_sends_null(self, make_client, handler):
        calls: list[httpx.Request] = []
        routes = {("PUT", "/repositories/3/llm"): {"message": "ok"}}
        async with make_client(routes, calls) as client:
            assert await RepositoryListView(client, handler).set_llm_provider(3, None) is True

        assert json.loads(calls[0].content) == {"llm_provider_id": None}


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _remote_listing(*repos, total_pages=1):
    return {"repositories": list(repos), "page": 1, "per_page": 20, "total_pages": total_pages}


class TestImportView:
    @pytest.mark.asyncio
    async def test_open_loads_webhook_url_and_first_page(self, make_client, handler):
        routes = {
            ("GET", "/system/webhook"): {"webhook_callback_url": "https://review.example.com/api/webhook"},
            ("GET", "/repositories/gitlab"): _remote_listing(_repo(101, "api"), total_pages=3),
        }
        async with make_client(routes) as client:
            view = ImportView(client, handler)
            await view.open()

        assert view.webhook_url == "https://review.example.com/api/webhook"
        assert [r.id for r in view.repositories] == [101]
        assert view.total_pages == 3

    @pytest.mark.asyncio
    async def test_import_requires_a_selection(self, make_client, handler, output):
        calls: list[httpx.Request] = []
        async with make_client({}, calls) as client:
            view = ImportView(client, handler)
            view.webhook_url = "https://hook"
            assert await view.import_selected() is False

        assert calls == []
        assert "Select at least one repository" in output.getvalue()

    @pytest.mark.asyncio
    async def test_import_requires_webhook_url(self, make_client, handler, output):
        calls: list[httpx.Request] = []
        async with make_client({}, calls) as client:
            view = ImportView(client, handler)
            view.toggle(101)
            assert await view.import_selected() is False

        assert calls == []
        assert "webhook URL is not configured" in output.getvalue()

    @pytest.mark.asyncio
    async def test_import_sends_sorted_ids_and_empty_callback(self, make_client, handler, output):
        calls: list[httpx.Request] = []
        routes = {("POST", "/repositories/batch"): {"message": "ok", "count": 2}}
        async with make_client(routes, calls) as client:
            view = ImportView(client, handler)
            view.webhook_url = "https://hook"
            view.toggle(202)
            view.toggle(101)
            assert await view.import_selected() is True

        assert json.loads(calls[0].content) == {"repository_ids": [101, 202], "webhook_callback_url": ""}
        assert view.selected == set()
        assert "Imported 2 repositories" in output.getvalue()

    def test_toggle(self, handler):
        view = ImportView(client=None, handler=handler)
        view.toggle(1)
        view.toggle(2)
        view.toggle(1)
        assert view.selected == {2}

    @pytest.mark.asyncio
    async def test_remote_failure_is_reported(self, make_client, handler, output):
        routes = {("GET", "/repositories/gitlab"): httpx.Response(502, json={"error": "gitlab unreachable"})}
        async with make_client(routes) as client:
            assert await ImportView(client, handler).load(1, "") is False

        assert "Failed to load repositories from the Git platform" in output.getvalue()


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class TestReviewListView:
    @pytest.mark.parametrize(
        "tab, expected",
        [
            (ReviewTab.ALL, {}),
            (ReviewTab.FAILED, {"status": "failed"}),
            (ReviewTab.CRITICAL, {"has_critical": "true"}),
            (ReviewTab.HIGH_SCORE, {"min_score": 80}),
        ],
    )
    def test_tab_filters(self, handler, tab, expected):
        params = ReviewListView(client=None, handler=handler, tab=tab).params()
        assert {k: v for k, v in params.items() if v} == expected

    def test_tab_overrides_status_filter(self, handler):
        view = ReviewListView(client=None, handler=handler, tab=ReviewTab.FAILED, status="completed", author="alice")
        assert view.params() == {"status": "failed", "author": "alice"}

    @pytest.mark.asyncio
    async def test_load_sends_filters_and_pagination(self, make_client, handler):
        calls: list[httpx.Request] = []
        routes = {
            ("GET", "/reviews"): {
                "data": [{"id": 5, "status": "completed", "score": 88}],
                "pagination": {"page": 2, "page_size": 20, "total": 21},
            }
        }
        async with make_client(routes, calls) as client:
            view = ReviewListView(client, handler, page=2, tab=ReviewTab.HIGH_SCORE)
            await view.load()

        assert dict(calls[0].url.params) == {"page": "2", "page_size": "20", "min_score": "80"}
        assert view.total == 21
        assert view.reviews[0].score == 88


class TestFilterSuggestions:
    def _review(self):
        return Review(
            id=1,
            status="completed",
            fix_suggestions=[
                FixSuggestion(file_path="a.py", severity="critical", description="sql injection"),
                FixSuggestion(file_path="b.py", severity="low", description="naming"),
                FixSuggestion(file_path="c.py", severity="critical", description="secret in code"),
            ],
        )

    def test_all(self):
        assert len(filter_suggestions(self._review())) == 3

    def test_by_severity(self):
        assert [s.file_path for s in filter_suggestions(self._review(), "critical")] == ["a.py", "c.py"]

    def test_no_match(self):
        assert filter_suggestions(self._review(), "medium") == []

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValueError):
            filter_suggestions(self._review(), "blocker")
