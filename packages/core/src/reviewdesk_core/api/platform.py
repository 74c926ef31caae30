from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import GitPlatformConfig, TestResult
from reviewdesk_core.result import Result


def _config_or_none(data: dict | None) -> GitPlatformConfig | None:
    # The backend answers {"exists": false, "message": ...} before first setup.
    if not data or data.get("exists") is False:
        return None
    return GitPlatformConfig.from_dict(data)


async def get_config(client: ApiClient) -> Result:
    result = await client.get("/platform/config")
    return result.map(_config_or_none)


async def update_config(client: ApiClient, config: GitPlatformConfig) -> Result:
    result = await client.put("/platform/config", json=config.to_dict())
    return result.map(lambda data: _config_or_none((data or {}).get("config")))


async def test_connection(client: ApiClient, platform_type: str, base_url: str, access_token: str) -> Result:
    result = await client.post(
        "/platform/test",
        json={"platform_type": platform_type, "base_url": base_url, "access_token": access_token},
    )
    return result.map(TestResult.from_dict)
