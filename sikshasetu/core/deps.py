# /sikshasetu/core/deps.py
from typing import Optional

from fastapi import Request

from sikshasetu.core.types import PageType

PAGE_QUERY_PARAM = "page"


def resolve_page(raw: Optional[str]) -> PageType:
    """
    Missing or unknown page names fall back to the feed.
    """
    if not raw:
        return PageType.feed
    try:
        return PageType(raw.strip().lower())
    except ValueError:
        return PageType.feed


async def current_page(request: Request) -> PageType:
    page = resolve_page(request.query_params.get(PAGE_QUERY_PARAM))
    request.state.page = page.value
    return page
