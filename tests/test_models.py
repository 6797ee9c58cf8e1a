"""Tests for content and job models."""

from datetime import datetime, timezone

from contentdesk.api.schemas import QueueItemPayload
from contentdesk.models import (
    OLDEST,
    Answer,
    ItemStatus,
    JobKind,
    JobStatus,
    Question,
    job_from_payload,
    parse_timestamp,
)


def test_parse_timestamp_formats():
    expected = datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert parse_timestamp("2025-05-01T12:00:00Z") == expected
    assert parse_timestamp("2025-05-01T12:00:00") == expected
    assert parse_timestamp(int(expected.timestamp())) == expected
    assert parse_timestamp(int(expected.timestamp() * 1000)) == expected
    assert parse_timestamp(str(int(expected.timestamp()))) == expected


def test_parse_timestamp_garbage_is_oldest():
    for value in (None, "", "yesterday", [], True):
        assert parse_timestamp(value) == OLDEST


def test_question_round_trip_keeps_unknown_fields():
    q = Question.from_api({
        "PK": "Q1", "SK": "Q1", "question": "Why?", "tags": ["a"],
        "status": "pending", "source": "ai", "views": 3,
    })
    assert q.status is ItemStatus.PENDING
    assert q.origin == "ai"
    payload = q.to_payload()
    assert payload["views"] == 3
    assert "approved" not in payload
    assert q.to_ref() == {"question": "Why?", "PK": "Q1", "SK": "Q1"}


def test_item_status_from_approved_flag():
    assert Question.from_api({"PK": "Q1", "approved": 1}).status is ItemStatus.APPROVED
    assert Answer.from_api({"PK": "Q1", "SK": "A1", "status": "Approved"}).status \
        is ItemStatus.APPROVED


def test_answer_identity():
    a = Answer.from_api({"PK": "Q1", "SK": "A9", "answer": "Because."})
    assert a.id == "A9"
    assert a.question_id == "Q1"


def test_job_status_phases():
    assert JobStatus.PENDING.is_processing
    assert JobStatus.STARTED.is_processing
    assert JobStatus.COMPLETED.is_terminal
    assert JobStatus.FAILED.is_terminal
    assert not JobStatus.FAILED.is_processing


def test_job_from_payload():
    item = QueueItemPayload.model_validate(
        {"id": 42, "status": "STARTED", "createdAt": "2025-05-01T00:00:00Z",
         "tags": ["btc"], "count": 5}
    )
    job = job_from_payload(item, JobKind.GENERATE_QUESTIONS)
    assert job.id == "42"
    assert job.status is JobStatus.STARTED
    assert job.input_refs == ["btc"]
    assert job.count == 5

    unknown = QueueItemPayload.model_validate({"id": "x", "status": "paused"})
    assert job_from_payload(unknown, JobKind.GENERATE_QUESTIONS) is None
