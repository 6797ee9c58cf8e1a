"""Scheduled article management and article editing."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from contentdesk import keys
from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import (
    CategoriesResponse,
    ScheduledArticlesResponse,
    parse_payload,
)
from contentdesk.errors import FetchError, ValidationError, ValidationReason
from contentdesk.models.content import Article, ScheduledArticle, parse_timestamp

logger = logging.getLogger(__name__)

SCHEDULED_PATH = "/admin/list/scheduled"
DELETE_PATH = "/admin/delete/article"
UPDATE_PATH = "/admin/update/article"
ARTICLE_PATH = "/news/article/{article_id}"
CATEGORIES_PATH = "/news/categories"

PUBLISH_TYPES = ("draft", "schedule", "publish")


class ArticleService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def list_scheduled(
        self, limit: int = 20, next_token: Optional[str] = None
    ) -> tuple[list[ScheduledArticle], Optional[str]]:
        """One page of scheduled articles, soonest first, plus the next-page token."""
        data = await self._client.get(
            SCHEDULED_PATH, params={"limit": limit, "nextToken": next_token}
        )
        body = parse_payload(ScheduledArticlesResponse, data)
        articles = []
        for row in body.articles:
            try:
                articles.append(ScheduledArticle.from_api(row))
            except ValueError as exc:
                logger.warning("Skipping scheduled article: %s", exc)
        articles.sort(key=lambda a: parse_timestamp(a.scheduled_at))
        return articles, body.nextToken or None

    async def delete_scheduled(self, article: ScheduledArticle) -> None:
        await self._client.post(DELETE_PATH, {"id": article.pk, "publishType": "schedule"})
        logger.info("Scheduled article deleted: %s", article.article_id)

    async def save(
        self,
        article_id: str,
        fields: dict[str, Any],
        publish_type: str = "draft",
    ) -> dict[str, Any]:
        """Update an article identified by its ``YYYY-MM-DD-NNNN`` id.

        Returns the payload that was sent.
        """
        pk, sk = _checked_keys(article_id)
        if publish_type not in PUBLISH_TYPES:
            raise ValidationError(
                ValidationReason.INVALID_VALUE,
                f"publish type must be one of {', '.join(PUBLISH_TYPES)}",
            )

        payload = dict(fields)
        payload.update({
            "PK": pk,
            "SK": sk,
            "publishType": publish_type,
            "originalPublishType": publish_type,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        })
        await self._client.post(UPDATE_PATH, payload)
        logger.info("Article %s saved as %s", article_id, publish_type)
        return payload

    async def get(self, article_id: str) -> Article:
        """Fetch one article from the public news endpoint."""
        _checked_keys(article_id)
        data = await self._client.get(
            ARTICLE_PATH.format(article_id=article_id), auth=False
        )
        if not isinstance(data, dict) or not data:
            raise FetchError(f"Article {article_id} not found")
        return Article.from_api(article_id, data)

    async def list_categories(self) -> list[str]:
        data = await self._client.get(CATEGORIES_PATH, auth=False)
        body = parse_payload(CategoriesResponse, data)
        names = []
        for entry in body.categories:
            name = entry.get("categoryName") if isinstance(entry, dict) else entry
            if isinstance(name, str) and name.strip():
                names.append(name.strip())
        return names

    async def update(self, article: Article, publish_type: str = "draft") -> dict[str, Any]:
        return await self.save(article.article_id, article.to_fields(), publish_type)


def _checked_keys(article_id: str) -> tuple[str, str]:
    try:
        return keys.article_keys(article_id)
    except ValueError as exc:
        raise ValidationError(ValidationReason.MISSING_KEY, str(exc)) from exc
