"""Dashboard state: four independent fetches joined before rendering."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from reviewdesk_core.api import dashboard as dashboard_api
from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.exceptions import ApiError
from reviewdesk_core.models import DashboardStats, Review, TokenUsage, TrendPoint

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
TREND_DAYS = 30


@dataclass
class DashboardView:
    client: ApiClient
    handler: ResultHandler
    stats: DashboardStats | None = None
    recent: list[Review] = field(default_factory=list)
    trends: list[TrendPoint] = field(default_factory=list)
    token_usage: TokenUsage | None = None

    async def load(self) -> None:
        """Fetch everything concurrently; if any fetch fails the whole load fails.

        State is only replaced once all four results are in and Ok.
        """
        results = await asyncio.gather(
            dashboard_api.get_statistics(self.client),
            dashboard_api.get_recent(self.client, limit=RECENT_LIMIT),
            dashboard_api.get_trends(self.client, days=TREND_DAYS),
            dashboard_api.get_token_usage(self.client, days=TREND_DAYS),
        )
        try:
            stats, recent, trends, token_usage = (self.handler.handle(r) for r in results)
        except ApiError:
            logger.warning("Dashboard load failed")
            self.handler.notifier.error("Failed to load dashboard data")
            raise

        self.stats = stats
        self.recent = recent
        self.trends = trends
        self.token_usage = token_usage

    @property
    def has_issue_distribution(self) -> bool:
        return self.stats is not None and self.stats.severity_total > 0

    @property
    def has_category_distribution(self) -> bool:
        return self.stats is not None and self.stats.category_total > 0

    @property
    def has_trends(self) -> bool:
        return len(self.trends) > 0

    @property
    def has_token_trend(self) -> bool:
        return self.token_usage is not None and len(self.token_usage.daily_trend) > 0

    @property
    def has_top_repositories(self) -> bool:
        return self.token_usage is not None and len(self.token_usage.top_repositories) > 0
