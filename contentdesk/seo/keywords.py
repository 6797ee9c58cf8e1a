"""SEO keyword listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import KeywordPageResponse, parse_payload
from contentdesk.models.content import Keyword

logger = logging.getLogger(__name__)

KEYWORDS_PATH = "/admin/seo"
APPROVED_KEYWORDS_PATH = "/admin/seo/approved/list"


@dataclass
class KeywordPage:
    keywords: list[Keyword] = field(default_factory=list)
    next_page_key: Optional[str] = None


class KeywordService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def list_page(self, last_key: Optional[str] = None) -> KeywordPage:
        """One page of researched keywords, continuing after *last_key*."""
        data = await self._client.get(KEYWORDS_PATH, params={"lastKey": last_key})
        body = parse_payload(KeywordPageResponse, data)
        return KeywordPage(
            keywords=[Keyword.from_api(d) for d in body.keywords],
            next_page_key=body.nextPageKey or None,
        )

    async def list_all(self) -> list[Keyword]:
        """Follow ``nextPageKey`` until the listing is exhausted."""
        keywords: list[Keyword] = []
        last_key: Optional[str] = None
        seen: set[str] = set()
        while True:
            page = await self.list_page(last_key)
            keywords.extend(page.keywords)
            if not page.next_page_key or page.next_page_key in seen:
                break
            seen.add(page.next_page_key)
            last_key = page.next_page_key
        logger.debug("Loaded %d keywords", len(keywords))
        return keywords

    async def list_approved(self) -> list[Keyword]:
        """Approved keywords, the tag candidates for question generation."""
        data = await self._client.get(APPROVED_KEYWORDS_PATH)
        body = parse_payload(KeywordPageResponse, data)
        return [Keyword.from_api(d, approved=True) for d in body.keywords]


def filter_keywords(keywords: Iterable[Keyword], text: str) -> list[Keyword]:
    """Case-insensitive match on keyword text or competition level."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(keywords)
    out = []
    for kw in keywords:
        competition = kw.competition.value.lower() if kw.competition else ""
        if needle in kw.text.lower() or needle in competition:
            out.append(kw)
    return out
