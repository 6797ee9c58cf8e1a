"""Pydantic models for the content service's JSON payloads.

Only the envelope of each response is validated here; the items inside are
turned into domain dataclasses by ``contentdesk.models``.  Unknown fields are
kept so that full items can be round-tripped back to update endpoints.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contentdesk.errors import ApiError, FetchError

_Model = TypeVar("_Model", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginResponse(_Payload):
    """Body of a successful ``/admin/login``."""

    apiKey: str
    expiresAt: float


# ---------------------------------------------------------------------------
# Generation queue
# ---------------------------------------------------------------------------


class QueueItemPayload(_Payload):
    """One job as returned by ``GET /admin/ai/queue``."""

    id: str | int
    status: str
    createdAt: Any = None
    tags: list[str] = Field(default_factory=list)
    questions: list[Any] = Field(default_factory=list)
    count: Optional[int] = None
    result: Any = Field(default=None, alias="json")

    @field_validator("tags", "questions", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class QueueResponse(_Payload):
    """Rows are validated one at a time so a bad job cannot hide the rest."""

    queue: list[Any]


class EnqueueResponse(_Payload):
    """Body of ``POST /admin/ai/queue``.  The service may omit the job id."""

    id: Optional[str | int] = None
    jobId: Optional[str | int] = None
    message: str = ""

    @property
    def job_id(self) -> Optional[str]:
        value = self.id if self.id is not None else self.jobId
        return None if value is None else str(value)


class TagSuggestionResponse(_Payload):
    tags: list[str]


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


class ItemsResponse(_Payload):
    """Generic ``{"items": [...]}`` listing."""

    items: list[dict[str, Any]]


class KeywordPageResponse(_Payload):
    keywords: list[dict[str, Any]] = Field(default_factory=list)
    nextPageKey: Optional[str] = None


class LinkTermsResponse(_Payload):
    linkTerms: list[dict[str, Any]] = Field(default_factory=list)


class GlossaryResponse(_Payload):
    terms: list[dict[str, Any]] = Field(default_factory=list)


class ScheduledArticlesResponse(_Payload):
    articles: list[dict[str, Any]] = Field(default_factory=list)
    nextToken: Optional[str] = None


class CategoriesResponse(_Payload):
    """Entries are either plain names or ``{categoryName}`` objects."""

    categories: list[Any] = Field(default_factory=list)


class PlaylistsResponse(_Payload):
    playlists: list[dict[str, Any]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_payload(
    model: Type[_Model],
    data: Any,
    error: Type[ApiError] = FetchError,
) -> _Model:
    """Validate *data* against *model*, raising *error* on a shape mismatch."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise error(f"Invalid response format ({exc.error_count()} errors)") from exc
