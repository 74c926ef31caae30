from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import DashboardStats, Review, TokenUsage, TrendPoint
from reviewdesk_core.result import Result


def _rows(data) -> list:
    return data if isinstance(data, list) else []


async def get_statistics(client: ApiClient) -> Result:
    result = await client.get("/dashboard/statistics")
    return result.map(DashboardStats.from_dict)


async def get_recent(client: ApiClient, limit: int = 10) -> Result:
    result = await client.get("/dashboard/recent", params={"limit": limit})
    return result.map(lambda data: [Review.from_dict(r) for r in _rows(data)])


async def get_trends(client: ApiClient, days: int = 30) -> Result:
    result = await client.get("/dashboard/trends", params={"days": days})
    return result.map(lambda data: [TrendPoint.from_dict(t) for t in _rows(data)])


async def get_token_usage(client: ApiClient, days: int = 30) -> Result:
    result = await client.get("/dashboard/token-usage", params={"days": days})
    return result.map(TokenUsage.from_dict)
