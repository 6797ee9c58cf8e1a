"""Human review of generated questions and answers."""

from contentdesk.review.models import ReviewState
from contentdesk.review.session import (
    AnswerReviewSession,
    QuestionReviewSession,
    ReviewSession,
)

__all__ = [
    "AnswerReviewSession",
    "QuestionReviewSession",
    "ReviewSession",
    "ReviewState",
]
