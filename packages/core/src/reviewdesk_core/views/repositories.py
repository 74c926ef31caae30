"""Imported-repository list: pagination, local filter and row actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reviewdesk_core.api import repository as repository_api
from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.exceptions import ApiError
from reviewdesk_core.models import Repository, TestResult

logger = logging.getLogger(__name__)


@dataclass
class RepositoryListView:
    client: ApiClient
    handler: ResultHandler
    page_size: int = 20
    repositories: list[Repository] = field(default_factory=list)
    page: int = 1
    total: int = 0
    search_text: str = ""

    @property
    def notifier(self):
        return self.handler.notifier

    @property
    def filtered(self) -> list[Repository]:
        """Rows whose name or full path contains the search text (case-insensitive)."""
        needle = self.search_text.strip().lower()
        if not needle:
            return list(self.repositories)
        return [r for r in self.repositories if needle in r.name.lower() or needle in r.full_path.lower()]

    async def load(self, page: int = 1) -> None:
        result = await repository_api.list_repositories(self.client, page=page, page_size=self.page_size)
        data = self.handler.handle(result)
        self.repositories = data.items
        self.page = page
        self.total = data.total

    def find(self, repository_id: int) -> Repository | None:
        return next((r for r in self.repositories if r.id == repository_id), None)

    async def delete(self, repository_id: int) -> bool:
        """Delete on the backend, then drop the row. A failed call leaves the list as it was."""
        try:
            self.handler.handle(await repository_api.delete_repository(self.client, repository_id))
        except ApiError as e:
            logger.warning("Failed to delete repository %s: %s", repository_id, e)
            return False
        self.repositories = [r for r in self.repositories if r.id != repository_id]
        self.total = max(0, self.total - 1)
        self.notifier.success("Repository deleted")
        return True

    async def test_webhook(self, repository_id: int) -> TestResult | None:
        try:
            outcome = self.handler.handle(await repository_api.test_webhook(self.client, repository_id))
        except ApiError:
            return None
        if outcome.success:
            self.notifier.success("Webhook test succeeded")
        else:
            self.notifier.error(f"Webhook test failed: {outcome.message}")
        await self.load(self.page)
        return outcome

    async def recreate_webhook(self, repository_id: int) -> bool:
        """Replace the repository's webhook with one built from the system webhook config."""
        try:
            self.handler.handle(await repository_api.recreate_webhook(self.client, repository_id))
        except ApiError:
            return False
        self.notifier.success("Webhook recreated")
        await self.load(self.page)
        return True

    async def set_llm_provider(self, repository_id: int, provider_id: int | None) -> bool:
        try:
            self.handler.handle(await repository_api.update_llm_provider(self.client, repository_id, provider_id))
        except ApiError:
            return False
        self.notifier.success("LLM provider updated" if provider_id is not None else "LLM provider cleared")
        return True
