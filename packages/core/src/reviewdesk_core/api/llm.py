from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import LLMProvider, Message, TestResult
from reviewdesk_core.result import Result


def _models(data: dict | None) -> list[str]:
    models = (data or {}).get("models")
    return [str(m) for m in models] if isinstance(models, list) else []


async def list_providers(client: ApiClient) -> Result:
    result = await client.get("/llm/providers")
    return result.map(lambda data: [LLMProvider.from_dict(p) for p in data or []])


async def get_provider(client: ApiClient, provider_id: int) -> Result:
    result = await client.get(f"/llm/providers/{provider_id}")
    return result.map(LLMProvider.from_dict)


async def create_provider(client: ApiClient, provider: LLMProvider) -> Result:
    result = await client.post("/llm/providers", json=provider.to_dict())
    return result.map(LLMProvider.from_dict)


async def update_provider(client: ApiClient, provider_id: int, changes: dict) -> Result:
    """Partial update. A blank or missing api_key keeps the stored key."""
    body = {k: v for k, v in changes.items() if v is not None}
    if not body.get("api_key"):
        body.pop("api_key", None)
    result = await client.put(f"/llm/providers/{provider_id}", json=body)
    return result.map(LLMProvider.from_dict)


async def delete_provider(client: ApiClient, provider_id: int) -> Result:
    result = await client.delete(f"/llm/providers/{provider_id}")
    return result.map(Message.from_dict)


async def test_provider(client: ApiClient, provider_id: int) -> Result:
    result = await client.post(f"/llm/providers/{provider_id}/test")
    return result.map(TestResult.from_dict)


async def fetch_models(client: ApiClient, base_url: str, api_key: str) -> Result:
    """List models offered by an endpoint that has not been saved yet."""
    result = await client.post("/llm/providers/models", json={"base_url": base_url, "api_key": api_key})
    return result.map(_models)


async def fetch_provider_models(client: ApiClient, provider_id: int) -> Result:
    """List models for a saved provider, using the key the backend already holds."""
    result = await client.get(f"/llm/providers/{provider_id}/models")
    return result.map(_models)


async def test_model(client: ApiClient, base_url: str, api_key: str, model: str) -> Result:
    result = await client.post(
        "/llm/providers/test-model",
        json={"base_url": base_url, "api_key": api_key, "model": model},
    )
    return result.map(TestResult.from_dict)
