"""Review sessions: the human moderation loop for questions and answers.

A session holds at most one item under review.  Approving or deleting
always moves on: to the next unreviewed item the service picks, or to
``EMPTY`` when none are left.  A remote failure on the item itself lands
the session in ``ERRORED``; the operator recovers by calling
:meth:`fetch_next` again.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Generic, Optional, TypeVar, Union

from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import TagSuggestionResponse, parse_payload
from contentdesk.errors import (
    ApiError,
    AuthError,
    ContentDeskError,
    FetchError,
    ValidationError,
    ValidationReason,
)
from contentdesk.models.content import Answer, ItemStatus, Question
from contentdesk.review.models import ReviewState

logger = logging.getLogger(__name__)

Item = TypeVar("Item", bound=Union[Question, Answer])

GENERATE_TAGS_PATH = "/admin/ai/generate/tags"
RETRIEVE_QUESTION_PATH = "/admin/retrieve/question"


class ReviewSession(Generic[Item]):
    """Shared approve/delete/edit workflow.  Subclasses set :attr:`KIND`."""

    KIND = ""

    def __init__(self, client: ContentClient) -> None:
        self._client = client
        self.state = ReviewState.IDLE
        self.item: Optional[Item] = None
        self.error: Optional[str] = None
        self.editing = False
        self.edit_buffer = ""
        self.reviewed = 0

    # -- endpoints -----------------------------------------------------------

    @property
    def random_path(self) -> str:
        return f"/admin/list/random/{self.KIND}"

    @property
    def update_path(self) -> str:
        return f"/admin/update/{self.KIND}"

    @property
    def delete_path(self) -> str:
        return f"/admin/delete/{self.KIND}"

    # -- hooks ---------------------------------------------------------------

    def _parse(self, data: dict) -> Item:
        raise NotImplementedError

    async def _after_load(self, item: Item) -> None:
        """Load anything the item needs for review.  Raise to fail the load."""

    # -- helpers -------------------------------------------------------------

    def _fail(self, message: str) -> ReviewState:
        self.state = ReviewState.ERRORED
        self.error = message
        logger.warning("%s review: %s", self.KIND, message)
        return self.state

    def _reset_edit(self) -> None:
        self.editing = False
        self.edit_buffer = ""

    # -- operations ----------------------------------------------------------

    async def fetch_next(self) -> ReviewState:
        """Load the next unreviewed item.  Returns the resulting state."""
        self.state = ReviewState.LOADING
        self.error = None
        self.item = None
        self._reset_edit()

        try:
            data = await self._client.get(self.random_path)
        except ContentDeskError as exc:
            return self._fail(f"Failed to load {self.KIND}: {exc.message}")

        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or not data:
            self.state = ReviewState.EMPTY
            return self.state
        item = self._parse(data)
        if not item.text:
            self.state = ReviewState.EMPTY
            return self.state

        self.item = item
        try:
            await self._after_load(item)
        except ContentDeskError as exc:
            self.item = None
            return self._fail(exc.message)

        self.state = ReviewState.LOADED
        return self.state

    def toggle_edit(self) -> bool:
        """Enter editing seeded with the item's text, or discard the edit."""
        if self.item is None:
            return False
        if self.editing:
            self._reset_edit()
        else:
            self.editing = True
            self.edit_buffer = self.item.text
        return self.editing

    async def approve(self, edited_text: Optional[str] = None) -> None:
        """Approve the current item, then load the next one.

        While editing, the item's text is replaced by *edited_text* (or the
        edit buffer when not given).  Outside editing the text is sent as is.
        """
        if self.item is None:
            return
        item = self.item
        text = item.text
        if self.editing:
            text = edited_text if edited_text is not None else self.edit_buffer

        approved = dataclasses.replace(item, text=text, status=ItemStatus.APPROVED)
        self.state = ReviewState.LOADING
        try:
            await self._client.post(self.update_path, approved.to_payload())
        except ContentDeskError as exc:
            self._fail(f"Failed to approve {self.KIND}: {exc.message}")
            raise

        logger.info("%s approved: %s", self.KIND.capitalize(), item.pk)
        self.reviewed += 1
        self._reset_edit()
        await self.fetch_next()

    async def delete(self) -> None:
        """Delete the current item by its ``PK``/``SK`` pair, then load the next one."""
        if self.item is None:
            return
        item = self.item
        if not item.pk or not item.sk:
            err = ValidationError(
                ValidationReason.MISSING_KEY,
                f"{self.KIND.capitalize()} is missing required identifiers (PK or SK)",
            )
            self._fail(err.message)
            raise err

        try:
            await self._client.post(self.delete_path, {"PK": item.pk, "SK": item.sk})
        except ContentDeskError as exc:
            self._fail(f"Failed to delete {self.KIND}: {exc.message}")
            raise

        logger.info("%s deleted: %s", self.KIND.capitalize(), item.pk)
        self.reviewed += 1
        await self.fetch_next()


class QuestionReviewSession(ReviewSession[Question]):
    """Reviews pending questions; also manages their SEO tags."""

    KIND = "question"

    def _parse(self, data: dict) -> Question:
        return Question.from_api(data)

    async def generate_tags(self) -> list[str]:
        """Ask the service for tag suggestions and apply them to the item.

        The tags show up locally before the persisting update returns; if
        the update fails they are rolled back.
        """
        if self.item is None:
            return []
        try:
            data = await self._client.post(GENERATE_TAGS_PATH, {"question": self.item.text})
            tags = parse_payload(TagSuggestionResponse, data, error=ApiError).tags
        except ContentDeskError as exc:
            self._fail(f"Failed to generate SEO tags: {exc.message}")
            raise
        await self._apply_tags(tags, "Failed to generate SEO tags")
        logger.info("Applied %d generated tags to %s", len(tags), self.item.pk if self.item else "?")
        return tags

    async def remove_tag(self, tag: str) -> None:
        """Drop *tag* from the item and persist immediately."""
        if self.item is None or tag not in self.item.tags:
            return
        await self._apply_tags([t for t in self.item.tags if t != tag], "Failed to remove tag")
        logger.info("Tag %r removed from %s", tag, self.item.pk if self.item else "?")

    async def _apply_tags(self, tags: list[str], failure: str) -> None:
        item = self.item
        if item is None:
            return
        known_good = list(item.tags)
        item.tags = list(tags)
        try:
            await self._client.post(self.update_path, item.to_payload())
        except ContentDeskError as exc:
            item.tags = known_good
            self._fail(f"{failure}: {exc.message}")
            raise


class AnswerReviewSession(ReviewSession[Answer]):
    """Reviews pending answers alongside the question they answer.

    The parent question is context only.  If it cannot be loaded the answer
    stays under review and :attr:`question_error` says why.
    """

    KIND = "answer"

    def __init__(self, client: ContentClient) -> None:
        super().__init__(client)
        self.question: Optional[Question] = None
        self.question_error: Optional[str] = None

    def _parse(self, data: dict) -> Answer:
        return Answer.from_api(data)

    async def fetch_next(self) -> ReviewState:
        self.question = None
        self.question_error = None
        return await super().fetch_next()

    async def _after_load(self, item: Answer) -> None:
        if not item.question_id:
            return
        try:
            data: Any = await self._client.post(
                RETRIEVE_QUESTION_PATH, {"PK": item.question_id}, error=FetchError
            )
        except AuthError:
            raise
        except ContentDeskError as exc:
            self.question_error = f"Failed to load question data: {exc.message}"
            logger.warning("answer review: %s", self.question_error)
            return
        if isinstance(data, list):
            data = data[0] if data else None
        if isinstance(data, dict) and data:
            self.question = Question.from_api(data)
