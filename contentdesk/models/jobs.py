"""Generation job models.

Job status is driven entirely by the remote service; ContentDesk only
observes transitions by polling the queue.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from contentdesk.models.content import OLDEST, parse_timestamp


class JobKind(str, Enum):
    GENERATE_QUESTIONS = "generate_questions"
    GENERATE_ANSWER = "generate_answer"


class JobStatus(str, Enum):
    PENDING = "pending"
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_processing(self) -> bool:
        return self in (JobStatus.PENDING, JobStatus.STARTED)

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


# Enumerated question counts; bounds the remote generation cost.
QUESTION_COUNTS = (3, 5, 10, 15, 20)


@dataclass
class GenerationJob:
    """An AI generation task as seen through the queue endpoint."""

    id: str
    kind: JobKind
    status: JobStatus
    input_refs: list[str] = field(default_factory=list)
    created_at: datetime = OLDEST
    count: Optional[int] = None
    result_payload: Any = None

    @property
    def result(self) -> Any:
        """The job output, only meaningful once the job has completed."""
        if self.status is JobStatus.COMPLETED:
            return self.result_payload
        return None


@dataclass
class QueueSnapshot:
    """Queue contents for one job kind, split by lifecycle phase."""

    processing: list[GenerationJob] = field(default_factory=list)
    completed: list[GenerationJob] = field(default_factory=list)

    @property
    def jobs(self) -> list[GenerationJob]:
        return self.processing + self.completed

    def __len__(self) -> int:
        return len(self.processing) + len(self.completed)


def job_from_payload(item: Any, kind: JobKind) -> Optional[GenerationJob]:
    """Build a job from a validated queue item; *None* for unknown statuses."""
    try:
        status = JobStatus(str(item.status).lower())
    except ValueError:
        return None

    if kind is JobKind.GENERATE_QUESTIONS:
        refs = [str(t) for t in item.tags]
    else:
        refs = []
        for q in item.questions:
            if isinstance(q, dict):
                ref = q.get("PK") or q.get("question")
                if ref:
                    refs.append(str(ref))
            elif q:
                refs.append(str(q))

    return GenerationJob(
        id=str(item.id),
        kind=kind,
        status=status,
        input_refs=refs,
        created_at=parse_timestamp(item.createdAt),
        count=item.count,
        result_payload=item.result,
    )
