from __future__ import annotations

from reviewdesk_core.api.client import ApiClient
from reviewdesk_core.models import Page, Review
from reviewdesk_core.result import Result


def _review_page(data: dict | None, page: int, page_size: int) -> Page[Review]:
    data = data or {}
    rows = data.get("data")
    pagination = data.get("pagination") or {}
    return Page(
        items=[Review.from_dict(r) for r in rows] if isinstance(rows, list) else [],
        page=page,
        page_size=page_size,
        total=int(pagination.get("total") or 0),
    )


async def list_reviews(client: ApiClient, page: int = 1, page_size: int = 20, filters: dict | None = None) -> Result:
    params = {"page": page, "page_size": page_size, **(filters or {})}
    result = await client.get("/reviews", params=params)
    return result.map(lambda data: _review_page(data, page, page_size))


async def get_review(client: ApiClient, review_id: int) -> Result:
    result = await client.get(f"/reviews/{review_id}")
    return result.map(Review.from_dict)
