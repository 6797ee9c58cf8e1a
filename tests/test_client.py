"""Tests for the content service client."""

import asyncio

import httpx
import pytest

from conftest import ORIGIN
from contentdesk.api.client import ContentClient
from contentdesk.api.schemas import QueueResponse, parse_payload
from contentdesk.errors import ApiError, AuthError, AuthReason, FetchError, SubmitError


def test_attaches_bearer_token(client, service):
    service.on("GET", "/admin/seo", {"keywords": []})
    asyncio.run(client.get("/admin/seo"))
    request = service.calls("GET", "/admin/seo")[0]
    assert request.headers["Authorization"] == "Bearer test-token-123"


def test_unauthenticated_call_sends_no_token(client, service):
    service.on("GET", "/keywords/list", {"linkTerms": []})
    asyncio.run(client.get("/keywords/list", auth=False))
    assert "Authorization" not in service.calls("GET", "/keywords/list")[0].headers


def test_missing_credential_blocks_request(tmp_path, service):
    from contentdesk.auth import CredentialStore

    store = CredentialStore(tmp_path)
    client = ContentClient(store, ORIGIN, transport=service.transport)
    with pytest.raises(AuthError) as exc:
        asyncio.run(client.get("/admin/seo"))
    assert exc.value.reason is AuthReason.MISSING
    assert service.requests == []


def test_rejected_token_is_auth_error(client, service):
    service.on("GET", "/admin/seo", {"message": "Unauthorized"}, status=401)
    with pytest.raises(AuthError) as exc:
        asyncio.run(client.get("/admin/seo"))
    assert exc.value.reason is AuthReason.REJECTED


def test_error_status_maps_to_requested_error(client, service):
    service.on("POST", "/admin/ai/queue", {"error": "queue full"}, status=503)
    with pytest.raises(SubmitError) as exc:
        asyncio.run(client.post("/admin/ai/queue", {}, error=SubmitError))
    assert exc.value.status_code == 503
    assert exc.value.message == "queue full"


def test_get_defaults_to_fetch_error(client, service):
    service.on("GET", "/admin/seo", None, status=500)
    with pytest.raises(FetchError) as exc:
        asyncio.run(client.get("/admin/seo"))
    assert exc.value.message == "API error: 500"


def test_network_failure(client, service):
    service.on("GET", "/admin/seo", httpx.ConnectError("down"))
    with pytest.raises(FetchError) as exc:
        asyncio.run(client.get("/admin/seo"))
    assert exc.value.status_code is None
    assert "Network error" in exc.value.message


def test_empty_body_is_none(client, service):
    service.on("POST", "/admin/delete/question", None)
    assert asyncio.run(client.post("/admin/delete/question", {"PK": "a", "SK": "b"})) is None


def test_none_params_are_dropped(client, service):
    service.on("GET", "/admin/seo", {"keywords": []})
    asyncio.run(client.get("/admin/seo", params={"lastKey": None}))
    assert service.calls("GET", "/admin/seo")[0].url.query == b""


def test_parse_payload_shape_mismatch():
    with pytest.raises(FetchError):
        parse_payload(QueueResponse, {"items": []})
    with pytest.raises(ApiError):
        parse_payload(QueueResponse, None)
