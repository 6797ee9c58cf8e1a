"""Domain models for content items owned by the remote service.

These are transient, cached copies.  Each model keeps the raw wire dict it
was built from so that update endpoints, which expect the whole item, get
back every field the service sent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from contentdesk import keys

OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an API timestamp (ISO-8601 string or epoch s/ms) into UTC.

    Anything unparseable sorts as the oldest possible instant.
    """
    if value is None or value == "":
        return OLDEST
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        value = int(value.strip())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if abs(value) > 1e12 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return OLDEST
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return OLDEST
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return OLDEST


class ItemStatus(str, Enum):
    """Moderation status of a question or answer.  pending -> approved only."""

    PENDING = "pending"
    APPROVED = "approved"

    @classmethod
    def from_api(cls, d: dict) -> "ItemStatus":
        if str(d.get("status", "")).lower() == "approved" or d.get("approved") in (1, True, "1"):
            return cls.APPROVED
        return cls.PENDING


# ---------------------------------------------------------------------------
# Q&A
# ---------------------------------------------------------------------------


@dataclass
class Question:
    """A crowd-sourced or generated question."""

    pk: str
    text: str
    sk: str = ""
    tags: list[str] = field(default_factory=list)
    status: ItemStatus = ItemStatus.PENDING
    created_at: str = ""
    submitted_by: str = ""
    origin: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def id(self) -> str:
        return self.pk

    @staticmethod
    def from_api(d: dict) -> "Question":
        return Question(
            pk=str(d.get("PK", "") or ""),
            sk=str(d.get("SK", "") or ""),
            text=d.get("question", "") or "",
            tags=list(d.get("tags") or []),
            status=ItemStatus.from_api(d),
            created_at=str(d.get("timestamp", "") or ""),
            submitted_by=d.get("username", "") or "",
            origin=d.get("source", "") or "",
            raw=dict(d),
        )

    def to_payload(self) -> dict[str, Any]:
        payload = dict(self.raw)
        payload.update({
            "PK": self.pk,
            "SK": self.sk,
            "question": self.text,
            "tags": list(self.tags),
            "status": self.status.value,
        })
        if self.status is ItemStatus.APPROVED:
            payload["approved"] = 1
        return payload

    def to_ref(self) -> dict[str, str]:
        """Reference used by answer-generation jobs."""
        return {"question": self.text, "PK": self.pk, "SK": self.sk or self.pk}


@dataclass
class Answer:
    """An answer to exactly one question.

    The answer's partition key is its question's id; its sort key is its own id.
    """

    pk: str
    sk: str
    text: str
    status: ItemStatus = ItemStatus.PENDING
    created_at: str = ""
    submitted_by: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def id(self) -> str:
        return self.sk

    @property
    def question_id(self) -> str:
        return self.pk

    @staticmethod
    def from_api(d: dict) -> "Answer":
        return Answer(
            pk=str(d.get("PK", "") or ""),
            sk=str(d.get("SK", "") or ""),
            text=d.get("answer", "") or "",
            status=ItemStatus.from_api(d),
            created_at=str(d.get("timestamp", "") or ""),
            submitted_by=d.get("username", "") or "",
            raw=dict(d),
        )

    def to_payload(self) -> dict[str, Any]:
        payload = dict(self.raw)
        payload.update({
            "PK": self.pk,
            "SK": self.sk,
            "answer": self.text,
            "status": self.status.value,
        })
        if self.status is ItemStatus.APPROVED:
            payload["approved"] = 1
        return payload


# ---------------------------------------------------------------------------
# SEO
# ---------------------------------------------------------------------------


class Competition(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "VeryHigh"

    @classmethod
    def parse(cls, value: Any) -> Optional["Competition"]:
        if not value:
            return None
        norm = str(value).replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == norm:
                return member
        return None


@dataclass
class Keyword:
    """An SEO keyword.  Its text is its identity."""

    text: str
    search_volume: int = 0
    competition: Optional[Competition] = None
    approved: bool = False
    created_at: str = ""
    last_used: str = ""

    @property
    def id(self) -> str:
        return self.text

    @staticmethod
    def from_api(d: dict, approved: Optional[bool] = None) -> "Keyword":
        try:
            volume = max(int(d.get("searchVolume") or 0), 0)
        except (TypeError, ValueError):
            volume = 0
        if approved is None:
            approved = d.get("approved") in (1, True, "1", "true")
        return Keyword(
            text=str(d.get("keyword", "") or ""),
            search_volume=volume,
            competition=Competition.parse(d.get("competition")),
            approved=approved,
            created_at=str(d.get("createdAt", "") or ""),
            last_used=str(d.get("lastUsed", "") or ""),
        )


@dataclass
class KeyLink:
    """A keyword that the site auto-links to *url*."""

    keyword: str
    url: str
    case_sensitive: bool = False

    @staticmethod
    def from_api(d: dict) -> "KeyLink":
        return KeyLink(
            keyword=d.get("keyword", "") or "",
            url=d.get("url", "") or "",
            case_sensitive=bool(d.get("caseSensitive", False)),
        )


@dataclass
class GlossaryTerm:
    term: str
    definition: str = ""
    slug: str = ""

    @staticmethod
    def from_api(d: dict) -> "GlossaryTerm":
        return GlossaryTerm(
            term=d.get("term", "") or "",
            definition=d.get("definition", "") or "",
            slug=d.get("slug", "") or "",
        )


# ---------------------------------------------------------------------------
# Articles & media
# ---------------------------------------------------------------------------


@dataclass
class ScheduledArticle:
    """An article queued for future publication."""

    pk: str
    sk: str
    article_id: str
    title: str = ""
    category: str = "Uncategorized"
    scheduled_at: str = ""
    author: str = "Admin"
    summary: str = ""
    read_time: str = ""

    @staticmethod
    def from_api(d: dict) -> "ScheduledArticle":
        """Build from a listing row whose ``id`` is a ``NEWS#date#seq`` key."""
        pk = str(d.get("id") or d.get("PK") or "")
        article_id = keys.article_id_from_pk(pk)
        _, sk = keys.article_keys(article_id)
        return ScheduledArticle(
            pk=pk,
            sk=sk,
            article_id=article_id,
            title=d.get("title", "") or "",
            category=d.get("category") or "Uncategorized",
            scheduled_at=str(d.get("publishedAt", "") or ""),
            author=d.get("author") or "Admin",
            summary=d.get("summary", "") or "",
            read_time=str(d.get("readTime", "") or ""),
        )


@dataclass
class Playlist:
    playlist_id: str
    title: str
    description: str = ""
    category: str = ""
    created_at: str = ""

    @staticmethod
    def from_api(d: dict) -> "Playlist":
        return Playlist(
            playlist_id=keys.playlist_id_from_pk(str(d.get("PK", ""))),
            title=d.get("title", "") or "",
            description=d.get("description", "") or "",
            category=d.get("category", "") or "",
            created_at=str(d.get("createdAt", "") or ""),
        )


@dataclass
class Video:
    video_id: str
    title: str
    description: str = ""
    category: str = ""
    published_at: str = ""


def _read_time_minutes(value: Any) -> int:
    """``5``, ``"5"`` or ``"5 min"`` -> 5; anything else -> the 5 minute default."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value) or 5
    match = re.match(r"^\s*(\d+)", str(value or ""))
    return int(match.group(1)) if match else 5


@dataclass
class Article:
    """An editable news article, addressed by its ``YYYY-MM-DD-NNNN`` id."""

    article_id: str
    pk: str
    sk: str
    title: str = ""
    content: str = ""
    summary: str = ""
    slug: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    read_time: int = 5
    is_featured: bool = False
    author: str = ""
    source: str = ""
    sponsored: bool = False
    sponsor_name: str = ""
    sponsor_disclosure: str = ""
    language: str = "en"

    @staticmethod
    def from_api(article_id: str, d: dict) -> "Article":
        pk, sk = keys.article_keys(article_id)
        author = d.get("author") or ""
        if isinstance(author, dict):
            author = author.get("name", "") or ""
        source = d.get("source") or ""
        if isinstance(source, dict):
            source = source.get("url", "") or ""
        sponsored = d.get("sponsored") or False
        sponsor_name = sponsor_disclosure = ""
        if isinstance(sponsored, dict):
            sponsor_name = sponsored.get("sponsorName", "") or ""
            sponsor_disclosure = sponsored.get("disclosure", "") or ""
            sponsored = bool(sponsored.get("isSponsored"))
        return Article(
            article_id=article_id,
            pk=pk,
            sk=sk,
            title=d.get("title", "") or "",
            content=d.get("content", "") or "",
            summary=d.get("summary", "") or "",
            slug=d.get("slug", "") or "",
            category=d.get("category", "") or "",
            tags=list(d.get("tags") or []),
            read_time=_read_time_minutes(d.get("readTime")),
            is_featured=bool(d.get("isFeatured")),
            author=str(author),
            source=str(source),
            sponsored=bool(sponsored),
            sponsor_name=sponsor_name,
            sponsor_disclosure=sponsor_disclosure,
            language=d.get("language") or "en",
        )

    def to_fields(self) -> dict[str, Any]:
        """Editable fields in the shape ``/admin/update/article`` expects."""
        return {
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "slug": self.slug,
            "category": self.category,
            "tags": list(self.tags),
            "readTime": self.read_time,
            "isFeatured": self.is_featured,
            "author": self.author,
            "source": self.source,
            "sponsored": self.sponsored,
            "sponsorName": self.sponsor_name if self.sponsored else "",
            "sponsorDisclosure": self.sponsor_disclosure if self.sponsored else "",
            "language": self.language,
        }
