"""Domain models for ContentDesk."""

from contentdesk.models.content import (
    Answer,
    Article,
    Competition,
    GlossaryTerm,
    ItemStatus,
    KeyLink,
    Keyword,
    OLDEST,
    Playlist,
    Question,
    ScheduledArticle,
    Video,
    parse_timestamp,
)
from contentdesk.models.jobs import (
    QUESTION_COUNTS,
    GenerationJob,
    JobKind,
    JobStatus,
    QueueSnapshot,
    job_from_payload,
)

__all__ = [
    "Answer",
    "Article",
    "Competition",
    "GenerationJob",
    "GlossaryTerm",
    "ItemStatus",
    "JobKind",
    "JobStatus",
    "KeyLink",
    "Keyword",
    "OLDEST",
    "Playlist",
    "QUESTION_COUNTS",
    "Question",
    "QueueSnapshot",
    "ScheduledArticle",
    "Video",
    "job_from_payload",
    "parse_timestamp",
]
