from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import HealthStatus
from reviewdesk_core.result import Result


async def check(client: ApiClient) -> Result:
    """Public liveness probe; works without a session."""
    result = await client.get("/health")
    return result.map(HealthStatus.from_dict)
