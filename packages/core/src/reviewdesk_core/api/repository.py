from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import GitLabRepository, Message, Page, Repository, TestResult
from reviewdesk_core.result import Result


def _repository_page(data: dict | None, page_size: int) -> Page[Repository]:
    data = data or {}
    repos = data.get("repositories")
    return Page(
        items=[Repository.from_dict(r) for r in repos] if isinstance(repos, list) else [],
        page=int(data.get("page") or 1),
        page_size=int(data.get("page_size") or page_size),
        total=int(data.get("total") or 0),
    )


def _remote_page(data: dict | None, per_page: int) -> Page[GitLabRepository]:
    # The remote listing reports total_pages rather than a row count.
    data = data or {}
    repos = data.get("repositories")
    per_page = int(data.get("per_page") or per_page)
    return Page(
        items=[GitLabRepository.from_dict(r) for r in repos] if isinstance(repos, list) else [],
        page=int(data.get("page") or 1),
        page_size=per_page,
        total=int(data.get("total_pages") or 0) * per_page,
    )


async def list_repositories(client: ApiClient, page: int = 1, page_size: int = 20) -> Result:
    result = await client.get("/repositories", params={"page": page, "page_size": page_size})
    return result.map(lambda data: _repository_page(data, page_size))


async def list_remote(client: ApiClient, page: int = 1, per_page: int = 20, search: str = "") -> Result:
    """Projects on the Git host that are available for import."""
    result = await client.get(
        "/repositories/gitlab",
        params={"page": page, "per_page": per_page, "search": search},
    )
    return result.map(lambda data: _remote_page(data, per_page))


async def get_repository(client: ApiClient, repository_id: int) -> Result:
    result = await client.get(f"/repositories/{repository_id}")
    return result.map(Repository.from_dict)


async def batch_import(client: ApiClient, repository_ids: list[int], webhook_callback_url: str = "") -> Result:
    """Import remote projects. An empty callback URL makes the backend use the system webhook URL."""
    result = await client.post(
        "/repositories/batch",
        json={"repository_ids": list(repository_ids), "webhook_callback_url": webhook_callback_url},
    )
    return result.map(Message.from_dict)


async def update_llm_provider(client: ApiClient, repository_id: int, provider_id: int | None) -> Result:
    """Point a repository at a provider, or back at the default with None."""
    result = await client.put(f"/repositories/{repository_id}/llm", json={"llm_provider_id": provider_id})
    return result.map(Message.from_dict)


async def delete_repository(client: ApiClient, repository_id: int) -> Result:
    result = await client.delete(f"/repositories/{repository_id}")
    return result.map(Message.from_dict)


async def test_webhook(client: ApiClient, repository_id: int) -> Result:
    result = await client.post(f"/repositories/{repository_id}/webhook/test")
    return result.map(TestResult.from_dict)


async def recreate_webhook(client: ApiClient, repository_id: int) -> Result:
    result = await client.put(f"/repositories/{repository_id}/webhook")
    return result.map(Message.from_dict)
