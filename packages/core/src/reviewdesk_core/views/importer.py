"""Import picker over the Git host's project listing.

Search is debounced: edits schedule a fetch search_debounce seconds after
the last one, and clearing the search fetches straight away. Fetches always
restart from page 1 with the search text they were scheduled with.
"""

from __future__ import annotations

import asyncio
import logging

from reviewdesk_core.api import repository as repository_api
from reviewdesk_core.api import system as system_api
from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.exceptions import ApiError
from reviewdesk_core.models import GitLabRepository
from reviewdesk_core.utils.debounce import Debouncer, Scheduler

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.5


class ImportView:
    def __init__(
        self,
        client: ApiClient,
        handler: ResultHandler,
        page_size: int = 20,
        debounce: float = DEFAULT_DEBOUNCE,
        scheduler: Scheduler | None = None,
    ):
        self.client = client
        self.handler = handler
        self.page_size = page_size
        self.repositories: list[GitLabRepository] = []
        self.page = 1
        self.total = 0
        self.search_text = ""
        self.selected: set[int] = set()
        self.webhook_url = ""
        self._debouncer = Debouncer(debounce, self._schedule_fetch, scheduler=scheduler)
        self._fetches: list[asyncio.Future] = []

    @property
    def notifier(self):
        return self.handler.notifier

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total // self.page_size)) if self.page_size else 1

    async def open(self) -> None:
        """Reset the search, then load the system webhook URL and the first page."""
        self.search_text = ""
        self.selected.clear()
        await self.load_webhook_url()
        await self.load(1, "")

    async def load_webhook_url(self) -> None:
        try:
            config = self.handler.handle(await system_api.get_webhook_config(self.client))
        except ApiError:
            self.notifier.warning(
                "System webhook URL is not configured. Set it with `reviewdesk settings webhook set` first."
            )
            return
        self.webhook_url = config.webhook_callback_url

    async def load(self, page: int = 1, search: str = "") -> bool:
        result = await repository_api.list_remote(self.client, page=page, per_page=self.page_size, search=search)
        try:
            data = self.handler.handle(result)
        except ApiError as e:
            logger.warning("Failed to load remote repositories: %s", e)
            self.notifier.error("Failed to load repositories from the Git platform")
            return False
        self.repositories = data.items
        self.page = page
        self.total = data.total
        return True

    def set_search(self, text: str) -> None:
        """Record a search edit; the fetch happens once the edits stop."""
        self.search_text = text
        self._debouncer.submit(text)

    def _schedule_fetch(self, search: str) -> None:
        # Only the newest search may land; older in-flight fetches are dropped.
        self._cancel_fetches()
        self._fetches.append(asyncio.ensure_future(self.load(1, search)))

    def _cancel_fetches(self) -> None:
        for fetch in self._fetches:
            if not fetch.done():
                fetch.cancel()

    async def settle(self) -> None:
        """Wait until any pending debounced fetch has been sent and answered."""
        while self._debouncer.pending:
            await asyncio.sleep(self._debouncer.delay / 10 or 0.01)
        fetches, self._fetches = self._fetches, []
        if fetches:
            await asyncio.wait(fetches)
        for fetch in fetches:
            if not fetch.cancelled():
                fetch.result()

    def toggle(self, repository_id: int) -> None:
        if repository_id in self.selected:
            self.selected.discard(repository_id)
        else:
            self.selected.add(repository_id)

    async def import_selected(self) -> bool:
        if not self.selected:
            self.notifier.warning("Select at least one repository")
            return False
        if not self.webhook_url:
            self.notifier.error("System webhook URL is not configured. Set it in settings first.")
            return False

        ids = sorted(self.selected)
        try:
            # Empty callback URL: the backend applies the system webhook config.
            self.handler.handle(await repository_api.batch_import(self.client, ids, ""))
        except ApiError as e:
            logger.warning("Batch import failed: %s", e)
            self.notifier.error("Failed to import repositories")
            return False

        self.notifier.success(f"Imported {len(ids)} repositories")
        self.selected.clear()
        return True

    def close(self) -> None:
        self._debouncer.cancel()
        self._cancel_fetches()
