from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import Message, SystemWebhookConfig
from reviewdesk_core.result import Result


async def get_webhook_config(client: ApiClient) -> Result:
    result = await client.get("/system/webhook")
    return result.map(SystemWebhookConfig.from_dict)


async def update_webhook_config(client: ApiClient, config: SystemWebhookConfig) -> Result:
    result = await client.put("/system/webhook", json=config.to_dict())
    return result.map(Message.from_dict)
