"""Keyword links: terms the public site turns into links automatically."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import LinkTermsResponse, parse_payload
from contentdesk.errors import ValidationError, ValidationReason
from contentdesk.models.content import KeyLink

logger = logging.getLogger(__name__)

LIST_PATH = "/keywords/list"
CREATE_PATH = "/admin/seo/keylink/create"
DELETE_PATH = "/admin/seo/keylink/delete"

_URL_RE = re.compile(r"^https?://.+")


class KeyLinkService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def list(self) -> list[KeyLink]:
        # Public endpoint; the site itself reads it.
        data = await self._client.get(LIST_PATH, auth=False)
        body = parse_payload(LinkTermsResponse, data)
        return [KeyLink.from_api(d) for d in body.linkTerms]

    async def create(self, keyword: str, url: str, case_sensitive: bool = False) -> KeyLink:
        keyword = (keyword or "").strip()
        url = (url or "").strip()
        if not keyword:
            raise ValidationError(ValidationReason.MISSING_FIELD, "Keyword is required")
        if not _URL_RE.match(url):
            raise ValidationError(
                ValidationReason.INVALID_VALUE, "URL must start with http:// or https://"
            )
        link = KeyLink(keyword=keyword, url=url, case_sensitive=case_sensitive)
        await self._client.post(
            CREATE_PATH,
            {"keyword": link.keyword, "url": link.url, "caseSensitive": link.case_sensitive},
        )
        logger.info("Keyword link created: %s -> %s", link.keyword, link.url)
        return link

    async def delete(self, keywords: Iterable[str]) -> int:
        """Delete links by keyword.  Returns how many were requested."""
        selected = [k for k in keywords if k]
        if not selected:
            return 0
        await self._client.post(DELETE_PATH, {"keywords": selected})
        logger.info("Deleted %d keyword links", len(selected))
        return len(selected)


def filter_links(links: Iterable[KeyLink], text: str) -> list[KeyLink]:
    """Case-insensitive substring match on keyword or URL."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(links)
    return [l for l in links if needle in l.keyword.lower() or needle in l.url.lower()]
