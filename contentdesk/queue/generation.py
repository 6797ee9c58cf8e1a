"""Generation Queue Client: submits AI generation jobs and lists the queue."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import (
    EnqueueResponse,
    ItemsResponse,
    QueueItemPayload,
    QueueResponse,
    parse_payload,
)
from contentdesk.errors import FetchError, SubmitError, ValidationError, ValidationReason
from contentdesk.models.content import Question
from contentdesk.models.jobs import (
    QUESTION_COUNTS,
    JobKind,
    QueueSnapshot,
    job_from_payload,
)
from contentdesk.selection import SelectionSet

logger = logging.getLogger(__name__)

QUEUE_PATH = "/admin/ai/queue"
APPROVED_QUESTIONS_PATH = "/admin/list/approved/questions"


class GenerationQueueClient:
    """Enqueues generation jobs and reads back their status.

    A successful submit clears the caller's :class:`SelectionSet`; a failed
    one leaves it untouched so the operator can retry.  The submit response
    never carries the job outcome, only :meth:`list_queue` does.
    """

    def __init__(self, client: ContentClient) -> None:
        self._client = client

    # -- submit --------------------------------------------------------------

    async def submit_question_generation(
        self,
        tags: Iterable[str],
        count: int,
        selection: Optional[SelectionSet] = None,
    ) -> Optional[str]:
        """Queue a ``generate_questions`` job.  Returns the job id if the service sent one."""
        tag_list = [str(t) for t in tags if str(t).strip()]
        if not tag_list:
            raise ValidationError(
                ValidationReason.MISSING_FIELD, "Please select at least one keyword"
            )
        if count not in QUESTION_COUNTS:
            raise ValidationError(
                ValidationReason.INVALID_VALUE,
                f"count must be one of {', '.join(map(str, QUESTION_COUNTS))}",
            )

        payload = {
            "function": JobKind.GENERATE_QUESTIONS.value,
            "tags": tag_list,
            "count": count,
        }
        job_id = await self._submit(payload, selection)
        logger.info("Queued question generation for %d tags (count=%d)", len(tag_list), count)
        return job_id

    async def submit_answer_generation(
        self,
        questions: Sequence[Question],
        context: str = "",
        selection: Optional[SelectionSet] = None,
    ) -> Optional[str]:
        """Queue a ``generate_answer`` job for *questions*."""
        if not questions:
            raise ValidationError(
                ValidationReason.MISSING_FIELD, "Please select at least one question"
            )

        payload = {
            "function": JobKind.GENERATE_ANSWER.value,
            "additionalContext": context or "",
            "questions": [q.to_ref() for q in questions],
        }
        job_id = await self._submit(payload, selection)
        logger.info("Queued answer generation for %d questions", len(questions))
        return job_id

    async def _submit(self, payload: dict, selection: Optional[SelectionSet]) -> Optional[str]:
        data = await self._client.post(QUEUE_PATH, payload, error=SubmitError)
        # The job is queued from here on, whatever the body looks like.
        if selection is not None:
            selection.clear()
        if not isinstance(data, dict):
            return None
        try:
            return parse_payload(EnqueueResponse, data, error=SubmitError).job_id
        except SubmitError as exc:
            logger.warning("Job queued but its id could not be read: %s", exc)
            return None

    # -- list ----------------------------------------------------------------

    async def list_queue(self, kind: JobKind | str) -> QueueSnapshot:
        """Return the queue for *kind*, split into processing and completed.

        Each list is ordered newest first.  Jobs with a status outside the
        known lifecycle, or rows that do not parse, are left out.
        """
        kind = JobKind(kind)
        data = await self._client.get(QUEUE_PATH, params={"function": kind.value})
        body = parse_payload(QueueResponse, data)

        snapshot = QueueSnapshot()
        for row in body.queue:
            try:
                item = parse_payload(QueueItemPayload, row)
            except FetchError as exc:
                job_ref = row.get("id") if isinstance(row, dict) else row
                logger.warning("Skipping malformed job %r: %s", job_ref, exc)
                continue
            job = job_from_payload(item, kind)
            if job is None:
                logger.debug("Skipping job %s with status %r", item.id, item.status)
                continue
            if job.status.is_processing:
                snapshot.processing.append(job)
            else:
                snapshot.completed.append(job)

        snapshot.processing.sort(key=lambda j: j.created_at, reverse=True)
        snapshot.completed.sort(key=lambda j: j.created_at, reverse=True)
        return snapshot

    async def list_approved_questions(self) -> list[Question]:
        """Approved questions, the candidates for answer generation."""
        data = await self._client.get(APPROVED_QUESTIONS_PATH, error=FetchError)
        body = parse_payload(ItemsResponse, data)
        return [Question.from_api(d) for d in body.items]
