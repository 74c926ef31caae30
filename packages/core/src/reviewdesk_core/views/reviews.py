"""Review list filters and the detail page's severity filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from reviewdesk_core.api import review as review_api
from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.effects import ResultHandler
from reviewdesk_core.exceptions import ValidationError
from reviewdesk_core.models import FixSuggestion, Review


class ReviewTab(str, Enum):
    ALL = "all"
    FAILED = "failed"
    CRITICAL = "critical"
    HIGH_SCORE = "high_score"


TAB_FILTERS: dict[ReviewTab, dict[str, str | int]] = {
    ReviewTab.ALL: {},
    ReviewTab.FAILED: {"status": "failed"},
    ReviewTab.CRITICAL: {"has_critical": "true"},
    ReviewTab.HIGH_SCORE: {"min_score": 80},
}

SEVERITY_FILTERS = ("all", "critical", "high", "medium", "low")


@dataclass
class ReviewListView:
    client: ApiClient
    handler: ResultHandler
    page_size: int = 20
    page: int = 1
    tab: ReviewTab = ReviewTab.ALL
    status: str = ""
    author: str = ""
    reviews: list[Review] = field(default_factory=list)
    total: int = 0

    def params(self) -> dict[str, str | int]:
        """Query filters: status/author first, the tab's filter wins on conflict."""
        filters: dict[str, str | int] = {"status": self.status, "author": self.author}
        filters.update(TAB_FILTERS[self.tab])
        return filters

    async def load(self) -> None:
        result = await review_api.list_reviews(
            self.client, page=self.page, page_size=self.page_size, filters=self.params()
        )
        data = self.handler.handle(result)
        self.reviews = data.items
        self.total = data.total


def filter_suggestions(review: Review, severity: str = "all") -> list[FixSuggestion]:
    if severity not in SEVERITY_FILTERS:
        raise ValidationError(f"severity must be one of {', '.join(SEVERITY_FILTERS)}")
    return [s for s in review.fix_suggestions if severity == "all" or s.severity == severity]
