"""Long-form guide creation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

import yaml

from contentdesk.api.client import ContentClient
from contentdesk.errors import SubmitError, ValidationError, ValidationReason
from contentdesk.seo.glossary import slugify

logger = logging.getLogger(__name__)

CREATE_PATH = "/admin/create/guide"
PLACEHOLDER_IMAGE = "https://s3.1ewis.com/placeholder.webp"


def load_guide(path: Union[str, Path]) -> dict[str, Any]:
    """Read a guide definition from a YAML (or JSON) file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValidationError(
                ValidationReason.INVALID_VALUE, f"{path} is not valid YAML: {exc}"
            ) from exc
    if not isinstance(data, dict):
        raise ValidationError(
            ValidationReason.INVALID_VALUE, f"{path} must contain a mapping of guide fields"
        )
    return data


def _sections(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list) or not raw:
        raise ValidationError(
            ValidationReason.MISSING_FIELD, "A guide needs at least one section"
        )
    sections = []
    for n, section in enumerate(raw, start=1):
        if not isinstance(section, dict) or not str(section.get("title") or "").strip():
            raise ValidationError(
                ValidationReason.MISSING_FIELD, f"Section {n} needs a title"
            )
        section = dict(section)
        section.setdefault("id", f"section-{n}")
        sections.append(section)
    return sections


class GuideService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    def build(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Fill in defaults and validate *fields* into a guide payload."""
        title = str(fields.get("title") or "").strip()
        if not title:
            raise ValidationError(ValidationReason.MISSING_FIELD, "Guide title is required")
        sections = _sections(fields.get("sections"))

        now = datetime.now(timezone.utc).isoformat()
        slug = fields.get("slug") or slugify(title)
        author = fields.get("author") or {}
        if isinstance(author, str):
            author = {"name": author}
        guide: dict[str, Any] = {
            "description": "",
            "image": PLACEHOLDER_IMAGE,
            "fallbackImage": PLACEHOLDER_IMAGE,
            "publishedDate": now,
            "updatedDate": now,
            "category": "",
            "tags": [],
            "readTime": 5,
            "relatedGuides": [],
            "interactiveElements": {},
        }
        guide.update(fields)
        guide.update({
            "id": fields.get("id") or slug,
            "slug": slug,
            "title": title,
            "author": {"name": "", "avatar": PLACEHOLDER_IMAGE, "bio": "", **author},
            "sections": sections,
            "createdAt": now,
            "updatedAt": now,
        })
        return guide

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Create a guide.  Returns the payload that was sent."""
        guide = self.build(fields)
        await self._client.post(CREATE_PATH, guide, error=SubmitError)
        logger.info("Guide created: %s", guide["slug"])
        return guide
