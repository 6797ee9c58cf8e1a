"""Glossary term management."""

from __future__ import annotations

import logging
import re

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import GlossaryResponse, parse_payload
from contentdesk.errors import ValidationError, ValidationReason
from contentdesk.models.content import GlossaryTerm

logger = logging.getLogger(__name__)

LIST_PATH = "/admin/seo/glossary/list"
CREATE_PATH = "/admin/seo/glossary/create"
DELETE_PATH = "/admin/seo/glossary/delete"


def slugify(term: str) -> str:
    """``"Proof of Stake"`` -> ``"proof-of-stake"``."""
    return re.sub(r"[^a-z0-9]+", "-", term.lower()).strip("-")


class GlossaryService:
    def __init__(self, client: ContentClient) -> None:
        self._client = client

    async def list(self) -> list[GlossaryTerm]:
        data = await self._client.get(LIST_PATH)
        body = parse_payload(GlossaryResponse, data)
        terms = [GlossaryTerm.from_api(d) for d in body.terms]
        return sorted(terms, key=lambda t: t.term.lower())

    async def create(self, term: str, definition: str) -> GlossaryTerm:
        term = (term or "").strip()
        definition = (definition or "").strip()
        if not term or not definition:
            raise ValidationError(
                ValidationReason.MISSING_FIELD, "Term and definition are both required"
            )
        entry = GlossaryTerm(term=term, definition=definition, slug=slugify(term))
        await self._client.post(
            CREATE_PATH, {"term": entry.term, "definition": entry.definition, "slug": entry.slug}
        )
        logger.info("Glossary term created: %s", entry.term)
        return entry

    async def delete(self, term: str) -> None:
        if not term:
            raise ValidationError(ValidationReason.MISSING_FIELD, "Term is required")
        await self._client.post(DELETE_PATH, {"term": term})
        logger.info("Glossary term deleted: %s", term)
